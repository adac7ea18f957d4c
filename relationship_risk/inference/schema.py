"""
Result types returned by the assessment.

FeatureImportanceEntry:
    One question's estimated influence on the prediction, recomputed on
    every analysis request and never persisted.

AssessmentResult:
    Risk probability for one response vector plus its explanation.
"""

from dataclasses import dataclass, field
from typing import Dict, Any, List

from ..questionnaire.schema import RESPONSE_LABELS


@dataclass
class FeatureImportanceEntry:
    """
    Per-question impact on the predicted risk.

    Attributes:
        question_index: Index of the question (0-based)
        question: Question text
        impact: Estimated marginal impact on the prediction
        current_value: The user's answer (0-4)
        is_critical: Whether the question is flagged as a critical factor
        weight: Static question weight
        improvement_potential: Change in predicted risk when this answer is
            raised to 4 (p_max - baseline)
    """
    question_index: int
    question: str
    impact: float
    current_value: int
    is_critical: bool
    weight: float = 1.0
    improvement_potential: float = 0.0

    @property
    def response_text(self) -> str:
        return RESPONSE_LABELS.get(self.current_value, "Unknown")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "question_index": self.question_index,
            "question": self.question,
            "impact": float(self.impact),
            "current_value": int(self.current_value),
            "is_critical": bool(self.is_critical),
            "weight": float(self.weight),
            "improvement_potential": float(self.improvement_potential),
        }


@dataclass
class AssessmentResult:
    """
    Result of scoring one response vector.

    Attributes:
        probability: Divorce probability in [0, 1]
        average_response: Mean raw answer (0-4)
        mode: "network" or "fallback"
        risk_level: Interpretation bucket key (e.g., "high")
        feature_importance: Ranked explanation entries
    """
    probability: float
    average_response: float
    mode: str
    risk_level: str
    feature_importance: List[FeatureImportanceEntry] = field(default_factory=list)

    @property
    def percentage(self) -> int:
        """Probability multiplied by 100 and rounded, for display."""
        return int(round(self.probability * 100))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "probability": float(self.probability),
            "percentage": self.percentage,
            "average_response": float(self.average_response),
            "mode": self.mode,
            "risk_level": self.risk_level,
            "feature_importance": [e.to_dict() for e in self.feature_importance],
        }
