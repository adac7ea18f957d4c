"""
Per-response feature importance by counterfactual perturbation.

For one response vector and an installed predictor:

    baseline = predict(x)
    p_max_i  = predict(x with x_i = 4)
    p_min_i  = predict(x with x_i = 0)

    perturbation "max":      impact_i = |p_max_i - baseline|
    perturbation "max_min":  impact_i = |p_max_i - p_min_i|
    weighted:                impact_i *= weight_i

Critical flag:
    network mode:  impact_i > critical_threshold
    fallback mode: weight_i > critical_weight

Output is the top-K entries by impact, ties kept in question order.
All counterfactuals are scored in a single batch call.
"""

import logging
from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from ..questionnaire.schema import MAX_VALUE, MIN_VALUE, ResponseVector
from .schema import FeatureImportanceEntry
from .scorer import RiskScorer

logger = logging.getLogger(__name__)

IMPACT_DECIMALS = 12


@dataclass
class ImportancePolicy:
    """
    Configuration of the perturbation formula.

    Attributes:
        perturbation: "max" or "max_min"
        weighted: Multiply impact by the question weight
        top_k: Number of entries returned
        critical_threshold: Impact above which a question is critical (network mode)
        critical_weight: Weight above which a question is critical (fallback mode)
    """
    perturbation: str = "max_min"
    weighted: bool = True
    top_k: int = 6
    critical_threshold: float = 0.1
    critical_weight: float = 0.8

    def __post_init__(self):
        if self.perturbation not in ("max", "max_min"):
            raise ValueError(f"Unknown perturbation policy: {self.perturbation}")
        if self.top_k <= 0:
            raise ValueError(f"top_k must be positive, got {self.top_k}")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "ImportancePolicy":
        importance = config.get("importance", {})
        return cls(
            perturbation=importance.get("perturbation", "max_min"),
            weighted=importance.get("weighted", True),
            top_k=importance.get("top_k", 6),
            critical_threshold=importance.get("critical_threshold", 0.1),
            critical_weight=importance.get("critical_weight", 0.8),
        )


class FeatureImportanceRanker:
    """
    Ranks questions by their marginal impact on one prediction.

    Attributes:
        scorer: Initialized RiskScorer
        policy: ImportancePolicy
    """

    def __init__(self, scorer: RiskScorer, policy: Optional[ImportancePolicy] = None):
        self.scorer = scorer
        self.policy = policy or ImportancePolicy()

    def rank(self, responses: Sequence[int], top_k: Optional[int] = None) -> List[FeatureImportanceEntry]:
        """
        Rank questions for one response vector.

        Args:
            responses: Complete response vector
            top_k: Override policy.top_k

        Returns:
            Entries sorted by impact (descending), ties by question index
        """
        question_set = self.scorer.question_set
        x = ResponseVector.for_question_set(responses, question_set).to_array()
        n = len(x)

        # Row 0 is the baseline, rows 1..n set x_i = 4, rows n+1..2n set x_i = 0
        batch = np.tile(x, (2 * n + 1, 1))
        idx = np.arange(n)
        batch[1 + idx, idx] = MAX_VALUE
        batch[1 + n + idx, idx] = MIN_VALUE

        preds = self.scorer.predict_batch(batch)
        baseline = preds[0]
        p_max = preds[1:n + 1]
        p_min = preds[n + 1:]

        if self.policy.perturbation == "max":
            impacts = np.abs(p_max - baseline)
        else:
            impacts = np.abs(p_max - p_min)

        weights = question_set.weights
        if self.policy.weighted:
            impacts = impacts * weights
        # Float noise from summation order must not break ties
        impacts = np.round(impacts, IMPACT_DECIMALS)

        network_mode = self.scorer.mode == "network"

        entries = []
        for question in question_set:
            i = question.index
            if network_mode:
                critical = impacts[i] > self.policy.critical_threshold
            else:
                critical = question.weight > self.policy.critical_weight
            entries.append(FeatureImportanceEntry(
                question_index=i,
                question=question.text,
                impact=float(impacts[i]),
                current_value=int(x[i]),
                is_critical=bool(critical),
                weight=float(question.weight),
                improvement_potential=float(p_max[i] - baseline),
            ))

        # sorted() is stable, so equal impacts keep question order
        entries = sorted(entries, key=lambda e: e.impact, reverse=True)
        k = top_k or self.policy.top_k
        logger.debug(f"Ranked {n} questions in {self.scorer.mode} mode, returning top {k}")
        return entries[:k]
