"""
Closed-form fallback predictor.

Used when the network could not be trained or fails at inference time.

Formula:
    effective_i = 4 - raw_i   if question i is a negative indicator
                  raw_i       otherwise
    score = sum(effective_i * weight_i) / sum(4 * weight_i)

score is a health score in [0, 1]; the divorce probability is 1 - score.
The weight sum is always positive because every weight lies in (0, 1].
"""

from typing import Optional, Sequence

import numpy as np

from ..questionnaire.schema import MAX_VALUE, QuestionSet


class FallbackPredictor:
    """
    Deterministic weighted-average scorer.

    Attributes:
        weights: Question weights in (0, 1]
        negative_mask: True where a question is a negative indicator
    """

    def __init__(self, weights: Sequence[float], negative_mask: Optional[Sequence[bool]] = None):
        self.weights = np.asarray(weights, dtype=float)
        if np.any(self.weights <= 0) or np.any(self.weights > 1):
            raise ValueError("Every question weight must lie in (0, 1]")
        if negative_mask is None:
            negative_mask = np.zeros(len(self.weights), dtype=bool)
        self.negative_mask = np.asarray(negative_mask, dtype=bool)
        self._denominator = float(np.sum(MAX_VALUE * self.weights))

    @classmethod
    def from_question_set(cls, question_set: QuestionSet) -> "FallbackPredictor":
        return cls(question_set.weights, question_set.negative_mask)

    def score(self, responses: Sequence[float]) -> float:
        """Weighted health score in [0, 1]; higher is healthier."""
        raw = np.asarray(responses, dtype=float)
        if raw.shape != self.weights.shape:
            raise ValueError(f"Expected {len(self.weights)} responses, got {raw.shape[0] if raw.ndim else 0}")
        effective = np.where(self.negative_mask, MAX_VALUE - raw, raw)
        return float(np.sum(effective * self.weights) / self._denominator)

    def predict(self, responses: Sequence[float]) -> float:
        """Divorce probability: 1 - score."""
        return 1.0 - self.score(responses)

    def predict_batch(self, X: np.ndarray) -> np.ndarray:
        X = np.atleast_2d(np.asarray(X, dtype=float))
        effective = np.where(self.negative_mask, MAX_VALUE - X, X)
        return 1.0 - (effective * self.weights).sum(axis=1) / self._denominator
