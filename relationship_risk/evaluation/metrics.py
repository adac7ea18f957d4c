"""
Evaluation metrics for relationship risk models.

The labels are synthetic, so these numbers describe how well the model
recovers the generating process, not real-world predictive accuracy.

Reported:
1. Classification metrics on a held-out split (loss, accuracy, precision, recall)
2. Distribution of predicted risk probabilities
"""

import logging
import json
from dataclasses import dataclass, field
from typing import Dict, List, Any, Optional

import numpy as np
from sklearn.metrics import (
    accuracy_score,
    confusion_matrix,
    log_loss,
    precision_score,
    recall_score,
)

logger = logging.getLogger(__name__)


@dataclass
class ScoreDistributionStats:
    """Statistics about predicted probability distribution."""
    mean: float
    std: float
    min: float
    max: float
    quantiles: Dict[str, float]  # e.g., {"p10": 0.2, "p50": 0.5, "p90": 0.8}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mean": float(self.mean),
            "std": float(self.std),
            "min": float(self.min),
            "max": float(self.max),
            "quantiles": {k: float(v) for k, v in self.quantiles.items()}
        }


@dataclass
class ClassificationMetrics:
    """Binary classification metrics at a fixed decision threshold."""
    loss: float
    accuracy: float
    precision: float
    recall: float
    threshold: float
    confusion: List[List[int]]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "loss": float(self.loss),
            "accuracy": float(self.accuracy),
            "precision": float(self.precision),
            "recall": float(self.recall),
            "threshold": float(self.threshold),
            "confusion_matrix": self.confusion,
        }


@dataclass
class EvaluationReport:
    """
    Complete evaluation report for a model.

    Contains classification metrics and the distribution of predictions.
    """
    model_name: str
    classification: ClassificationMetrics
    distribution_stats: ScoreDistributionStats
    additional_metrics: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "model_name": self.model_name,
            "classification": self.classification.to_dict(),
            "distribution_stats": self.distribution_stats.to_dict(),
            "additional_metrics": self.additional_metrics
        }

    def save(self, filepath: str) -> None:
        """Save report to JSON file."""
        with open(filepath, "w") as f:
            json.dump(self.to_dict(), f, indent=2)
        logger.info(f"Saved evaluation report to {filepath}")

    def summary(self) -> str:
        """Generate text summary of the report."""
        c = self.classification
        lines = [
            f"Evaluation Report: {self.model_name}",
            "=" * 50,
            "",
            "Classification:",
            f"  Loss:      {c.loss:.4f}",
            f"  Accuracy:  {c.accuracy:.4f}",
            f"  Precision: {c.precision:.4f}",
            f"  Recall:    {c.recall:.4f}",
            "",
            "Predicted Risk Distribution:",
            f"  Mean: {self.distribution_stats.mean:.4f}",
            f"  Std:  {self.distribution_stats.std:.4f}",
            f"  Min:  {self.distribution_stats.min:.4f}",
            f"  Max:  {self.distribution_stats.max:.4f}",
        ]

        for q_name, q_value in self.distribution_stats.quantiles.items():
            lines.append(f"  {q_name}: {q_value:.4f}")

        return "\n".join(lines)


def compute_score_distribution_stats(
    scores: np.ndarray,
    quantiles: Optional[List[float]] = None
) -> ScoreDistributionStats:
    """
    Compute distribution statistics for predicted probabilities.

    Args:
        scores: Array of risk probabilities
        quantiles: Quantile values to compute (default: p10, p25, p50, p75, p90)

    Returns:
        ScoreDistributionStats instance
    """
    quantiles = quantiles or [0.1, 0.25, 0.5, 0.75, 0.9]
    quantile_dict = {
        f"p{int(q * 100)}": float(np.percentile(scores, q * 100))
        for q in quantiles
    }

    return ScoreDistributionStats(
        mean=float(np.mean(scores)),
        std=float(np.std(scores)),
        min=float(np.min(scores)),
        max=float(np.max(scores)),
        quantiles=quantile_dict
    )


def compute_classification_metrics(
    y_true: np.ndarray,
    probabilities: np.ndarray,
    threshold: float = 0.5
) -> ClassificationMetrics:
    """
    Compute binary cross-entropy, accuracy, precision and recall.

    Args:
        y_true: True labels in {0, 1}
        probabilities: Predicted probability of label 1
        threshold: Decision threshold

    Returns:
        ClassificationMetrics instance
    """
    y_true = np.asarray(y_true, dtype=int)
    probabilities = np.clip(np.asarray(probabilities, dtype=float), 1e-7, 1 - 1e-7)
    y_pred = (probabilities >= threshold).astype(int)

    return ClassificationMetrics(
        loss=float(log_loss(y_true, probabilities, labels=[0, 1])),
        accuracy=float(accuracy_score(y_true, y_pred)),
        precision=float(precision_score(y_true, y_pred, zero_division=0)),
        recall=float(recall_score(y_true, y_pred, zero_division=0)),
        threshold=threshold,
        confusion=confusion_matrix(y_true, y_pred, labels=[0, 1]).tolist(),
    )


def create_evaluation_report(
    model_name: str,
    y_true: np.ndarray,
    probabilities: np.ndarray,
    threshold: float = 0.5,
    quantiles: Optional[List[float]] = None
) -> EvaluationReport:
    """
    Create a complete evaluation report.

    Args:
        model_name: Name of the model
        y_true: Held-out labels
        probabilities: Predicted probabilities for the held-out rows
        threshold: Decision threshold
        quantiles: Quantiles to compute

    Returns:
        EvaluationReport instance
    """
    classification = compute_classification_metrics(y_true, probabilities, threshold)
    dist_stats = compute_score_distribution_stats(probabilities, quantiles)

    logger.info(f"Evaluated {model_name}: accuracy={classification.accuracy:.4f}, "
                f"loss={classification.loss:.4f}")

    return EvaluationReport(
        model_name=model_name,
        classification=classification,
        distribution_stats=dist_stats,
    )
