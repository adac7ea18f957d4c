"""
Inference module for relationship risk scoring.

This module wraps the trained model (or its closed-form fallback) behind a
single predict(responses) call and explains each prediction with a
per-question importance ranking.
"""

from .schema import AssessmentResult, FeatureImportanceEntry
from .scorer import RiskScorer, ScorerState
from .importance import FeatureImportanceRanker, ImportancePolicy
from .interpretation import RiskLevel, RiskInterpretation, interpret_risk, response_label

__all__ = [
    "AssessmentResult",
    "FeatureImportanceEntry",
    "RiskScorer",
    "ScorerState",
    "FeatureImportanceRanker",
    "ImportancePolicy",
    "RiskLevel",
    "RiskInterpretation",
    "interpret_risk",
    "response_label",
]
