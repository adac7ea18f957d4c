"""Modeling module for relationship risk prediction models."""

from .trainer import RiskModelTrainer
from .fallback import FallbackPredictor
from .feature_importance import extract_feature_importance, FeatureImportanceReport

__all__ = [
    "RiskModelTrainer",
    "FallbackPredictor",
    "extract_feature_importance",
    "FeatureImportanceReport"
]
