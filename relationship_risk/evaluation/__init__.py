"""Evaluation module: model metrics and descriptive dataset statistics."""

from .metrics import (
    compute_classification_metrics,
    compute_score_distribution_stats,
    EvaluationReport,
    create_evaluation_report
)
from .statistics import (
    DatasetStatistics,
    compute_dataset_statistics,
    correlation_strength,
    pearson_correlation,
)

__all__ = [
    "compute_classification_metrics",
    "compute_score_distribution_stats",
    "EvaluationReport",
    "create_evaluation_report",
    "DatasetStatistics",
    "compute_dataset_statistics",
    "correlation_strength",
    "pearson_correlation",
]
