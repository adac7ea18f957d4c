"""
Descriptive statistics over a synthetic dataset.

These numbers are for display only; nothing here feeds back into training.

Per feature:
- mean, variance, standard deviation (population, ddof=0)
- skewness, bias-corrected:  n / ((n-1)(n-2)) * sum(((x - mean) / s)^3),
  s = sample standard deviation (ddof=1)
- Pearson correlation with the label:
      r = sum((x - x_mean)(y - y_mean)) / sqrt(sum((x - x_mean)^2) * sum((y - y_mean)^2))

Dataset level:
- class counts and balance flag (|divorce - stay| / total < 0.1)
- missing value count
- high-risk (label 1) and low-risk (label 0) centroid patterns
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

import numpy as np
import pandas as pd
from scipy import stats

from ..questionnaire.schema import QuestionSet

logger = logging.getLogger(__name__)

BALANCE_TOLERANCE = 0.1

STRENGTH_BUCKETS = [
    (0.7, "Very Strong"),
    (0.5, "Strong"),
    (0.3, "Moderate"),
    (0.1, "Weak"),
]


def correlation_strength(r: float) -> str:
    """Bucket a correlation by its absolute value."""
    magnitude = abs(r)
    for threshold, label in STRENGTH_BUCKETS:
        if magnitude >= threshold:
            return label
    return "Very Weak"


def pearson_correlation(x: Sequence[float], y: Sequence[float]) -> float:
    """
    Pearson correlation coefficient.

    Returns 0.0 when either input has zero variance.
    """
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)
    if x.shape != y.shape:
        raise ValueError(f"Inputs must have the same shape, got {x.shape} and {y.shape}")

    dx = x - x.mean()
    dy = y - y.mean()
    denominator = np.sqrt(np.sum(dx ** 2) * np.sum(dy ** 2))
    if denominator == 0:
        return 0.0
    return float(np.sum(dx * dy) / denominator)


def correlation_p_value(r: float, n: int) -> float:
    """Two-sided p-value for a Pearson r under the t distribution."""
    if n < 3:
        return 1.0
    if abs(r) >= 1.0:
        return 0.0
    t_stat = r * np.sqrt((n - 2) / (1 - r ** 2))
    return float(2 * stats.t.sf(abs(t_stat), df=n - 2))


def skewness(x: Sequence[float]) -> float:
    """Bias-corrected sample skewness; 0.0 for constant or very short columns."""
    x = np.asarray(x, dtype=float)
    n = len(x)
    if n < 3:
        return 0.0
    s = x.std(ddof=1)
    if s == 0:
        return 0.0
    return float(n / ((n - 1) * (n - 2)) * np.sum(((x - x.mean()) / s) ** 3))


@dataclass
class FeatureCorrelation:
    """Correlation of one feature with the label."""
    feature_index: int
    feature: str
    correlation: float
    p_value: float
    strength: str

    @property
    def abs_correlation(self) -> float:
        return abs(self.correlation)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "feature_index": self.feature_index,
            "feature": self.feature,
            "correlation": float(self.correlation),
            "abs_correlation": float(self.abs_correlation),
            "p_value": float(self.p_value),
            "strength": self.strength,
        }


@dataclass
class ClassBalance:
    """Label counts and balance flag."""
    divorce_count: int
    stay_count: int
    total: int

    @property
    def imbalance(self) -> float:
        if self.total == 0:
            return 0.0
        return abs(self.divorce_count - self.stay_count) / self.total

    @property
    def is_balanced(self) -> bool:
        return self.imbalance < BALANCE_TOLERANCE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "divorce_count": int(self.divorce_count),
            "stay_count": int(self.stay_count),
            "imbalance": float(self.imbalance),
            "is_balanced": bool(self.is_balanced),
        }


@dataclass
class DatasetStatistics:
    """
    Summary statistics for display.

    Correlations are ranked by absolute value, strongest first.
    """
    total_samples: int
    total_features: int
    feature_names: List[str]
    feature_means: np.ndarray
    feature_std: np.ndarray
    feature_variance: np.ndarray
    feature_skewness: np.ndarray
    correlations: List[FeatureCorrelation]
    class_balance: ClassBalance
    missing_values: int
    high_risk_pattern: np.ndarray
    low_risk_pattern: np.ndarray
    question_texts: List[str] = field(default_factory=list)

    @property
    def divorce_count(self) -> int:
        return self.class_balance.divorce_count

    @property
    def stay_count(self) -> int:
        return self.class_balance.stay_count

    @property
    def divorce_rate(self) -> float:
        if self.total_samples == 0:
            return 0.0
        return self.divorce_count / self.total_samples

    def top_correlations(self, k: int = 10) -> List[FeatureCorrelation]:
        return self.correlations[:k]

    def overview(self) -> Dict[str, Any]:
        """Headline figures for display, in display order."""
        return {
            "Samples": int(self.total_samples),
            "Divorced": int(self.divorce_count),
            "Stayed": int(self.stay_count),
            "Balanced": "Yes" if self.class_balance.is_balanced else "No",
            "Missing values": int(self.missing_values),
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_samples": int(self.total_samples),
            "total_features": int(self.total_features),
            "divorce_count": int(self.divorce_count),
            "stay_count": int(self.stay_count),
            "divorce_rate": float(self.divorce_rate),
            "feature_means": self.feature_means.tolist(),
            "feature_std": self.feature_std.tolist(),
            "feature_variance": self.feature_variance.tolist(),
            "feature_skewness": self.feature_skewness.tolist(),
            "correlations": [c.to_dict() for c in self.correlations],
            "class_balance": self.class_balance.to_dict(),
            "missing_values": int(self.missing_values),
            "high_risk_pattern": self.high_risk_pattern.tolist(),
            "low_risk_pattern": self.low_risk_pattern.tolist(),
        }

    def to_dataframe(self) -> pd.DataFrame:
        """Per-feature table: mean, std, variance, skewness, correlation."""
        by_index = {c.feature_index: c for c in self.correlations}
        df = pd.DataFrame({
            "feature": self.feature_names,
            "mean": self.feature_means,
            "std": self.feature_std,
            "variance": self.feature_variance,
            "skewness": self.feature_skewness,
            "correlation": [by_index[i].correlation for i in range(self.total_features)],
            "high_risk_mean": self.high_risk_pattern,
            "low_risk_mean": self.low_risk_pattern,
        })
        if self.question_texts:
            df.insert(1, "question", self.question_texts)
        return df

    def summary(self) -> str:
        """Generate a text summary of the statistics."""
        lines = [
            "Dataset Statistics",
            "=" * 50,
            f"  Samples:  {self.total_samples}",
            f"  Features: {self.total_features}",
            f"  Divorced: {self.divorce_count} ({self.divorce_rate:.1%})",
            f"  Stayed:   {self.stay_count}",
            f"  Balanced: {self.class_balance.is_balanced}",
            f"  Missing values: {self.missing_values}",
            "",
            "Strongest correlations with outcome:",
        ]
        for c in self.top_correlations(5):
            lines.append(f"  {c.feature}: r={c.correlation:+.4f} ({c.strength})")
        return "\n".join(lines)


def count_missing_values(features) -> int:
    """Count null/NaN entries across the matrix."""
    return int(pd.DataFrame(features).isna().sum().sum())


def compute_dataset_statistics(
    features: np.ndarray,
    labels: np.ndarray,
    question_set: Optional[QuestionSet] = None,
    feature_names: Optional[List[str]] = None
) -> DatasetStatistics:
    """
    Compute descriptive statistics for a labeled feature matrix.

    Args:
        features: Feature matrix (N x D)
        labels: Binary labels (N,)
        question_set: Optional question set for names and texts
        feature_names: Optional explicit column names

    Returns:
        DatasetStatistics instance
    """
    missing = count_missing_values(features)
    X = np.asarray(features, dtype=float)
    y = np.asarray(labels, dtype=float)

    if X.ndim != 2:
        raise ValueError(f"features must be 2-D, got shape {X.shape}")
    if len(y) != X.shape[0]:
        raise ValueError(f"labels length {len(y)} doesn't match {X.shape[0]} rows")

    n_samples, n_features = X.shape

    if feature_names is None:
        feature_names = question_set.feature_names() if question_set else [
            f"q{i + 1}" for i in range(n_features)
        ]
    question_texts = question_set.texts if question_set else []

    # Moments ignore missing entries so that NaNs don't poison whole columns
    means = np.nanmean(X, axis=0) if n_samples else np.zeros(n_features)
    variance = np.nanvar(X, axis=0) if n_samples else np.zeros(n_features)
    std = np.sqrt(variance)
    skew = np.array([skewness(col[~np.isnan(col)]) for col in X.T])

    correlations = []
    for j in range(n_features):
        col = X[:, j]
        mask = ~np.isnan(col) & ~np.isnan(y)
        r = pearson_correlation(col[mask], y[mask])
        correlations.append(FeatureCorrelation(
            feature_index=j,
            feature=feature_names[j],
            correlation=r,
            p_value=correlation_p_value(r, int(mask.sum())),
            strength=correlation_strength(r),
        ))
    correlations.sort(key=lambda c: c.abs_correlation, reverse=True)

    divorce_count = int(np.sum(y == 1))
    stay_count = int(np.sum(y == 0))
    balance = ClassBalance(divorce_count=divorce_count, stay_count=stay_count, total=n_samples)

    high_risk = _class_pattern(X, y == 1)
    low_risk = _class_pattern(X, y == 0)

    logger.info(f"Computed statistics for {n_samples} samples x {n_features} features "
                f"(balanced={balance.is_balanced}, missing={missing})")

    return DatasetStatistics(
        total_samples=n_samples,
        total_features=n_features,
        feature_names=list(feature_names),
        feature_means=means,
        feature_std=std,
        feature_variance=variance,
        feature_skewness=skew,
        correlations=correlations,
        class_balance=balance,
        missing_values=missing,
        high_risk_pattern=high_risk,
        low_risk_pattern=low_risk,
        question_texts=question_texts,
    )


def _class_pattern(X: np.ndarray, mask: np.ndarray) -> np.ndarray:
    if not mask.any():
        return np.zeros(X.shape[1])
    return np.nanmean(X[mask], axis=0)
