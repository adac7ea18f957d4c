"""
Global feature importance reporting.

This module summarizes which questions the trained risk model relies on
across the whole synthetic dataset (permutation importance). It is the
training-time counterpart of the per-response ranking in
relationship_risk.inference.importance.

Importances are also rolled up per question category, which tells whether
the model leans on communication, connection, or practical items overall.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import numpy as np
import pandas as pd

from ..questionnaire.schema import QuestionSet

logger = logging.getLogger(__name__)


@dataclass
class FeatureImportanceReport:
    """
    Permutation importance per question, ranked.

    Attributes:
        model_name: Name of the model (e.g., "neural_network")
        importances: Feature name -> mean permutation importance
        question_texts: Feature name -> question text
        categories: Feature name -> category key
        top_k: Number of questions highlighted in the summary
    """
    model_name: str
    importances: Dict[str, float]
    question_texts: Dict[str, str] = field(default_factory=dict)
    categories: Dict[str, str] = field(default_factory=dict)
    top_k: int = 10

    def __post_init__(self):
        # Stable sort: equal importances keep question order
        self._ranked: List[Tuple[str, float]] = sorted(
            self.importances.items(), key=lambda item: item[1], reverse=True
        )
        self._rank_of = {name: i + 1 for i, (name, _) in enumerate(self._ranked)}

    def get_top_features(self, k: Optional[int] = None) -> List[Tuple[str, float]]:
        """(feature, importance) pairs for the k most important questions."""
        return self._ranked[:k or self.top_k]

    def get_feature_rank(self, feature_name: str) -> Optional[int]:
        """1-based rank, or None for an unknown feature."""
        return self._rank_of.get(feature_name)

    def category_importance(self) -> Dict[str, float]:
        """Summed importance per category, largest first."""
        totals: Dict[str, float] = {}
        for name, value in self.importances.items():
            category = self.categories.get(name)
            if category is not None:
                totals[category] = totals.get(category, 0.0) + value
        return dict(sorted(totals.items(), key=lambda item: item[1], reverse=True))

    def to_dataframe(self) -> pd.DataFrame:
        """One row per question: rank, feature, question, category, importance, model."""
        rows = [
            {
                "rank": self._rank_of[name],
                "feature": name,
                "question": self.question_texts.get(name, ""),
                "category": self.categories.get(name, ""),
                "importance": value,
                "model": self.model_name,
            }
            for name, value in self._ranked
        ]
        return pd.DataFrame(rows, columns=["rank", "feature", "question", "category", "importance", "model"])

    def save_csv(self, filepath: str) -> None:
        self.to_dataframe().to_csv(filepath, index=False)
        logger.info(f"Saved feature importance report to {filepath}")

    @classmethod
    def load_csv(cls, filepath: str, model_name: Optional[str] = None) -> "FeatureImportanceReport":
        """
        Load a report written by save_csv.

        Args:
            filepath: Path to the CSV file
            model_name: Name for the report (default: the "model" column)

        Returns:
            FeatureImportanceReport instance
        """
        df = pd.read_csv(filepath, keep_default_na=False).sort_values("rank", kind="stable")
        if model_name is None:
            model_name = str(df["model"].iloc[0]) if len(df) else "unknown"
        return cls(
            model_name=model_name,
            importances=dict(zip(df["feature"], df["importance"].astype(float))),
            question_texts={f: q for f, q in zip(df["feature"], df["question"]) if q},
            categories={f: c for f, c in zip(df["feature"], df["category"]) if c},
        )

    def summary(self) -> str:
        """Multi-line text summary for logs."""
        lines = [
            f"Feature Importance Report: {self.model_name}",
            f"Questions: {len(self.importances)}",
            "",
            f"Top {self.top_k} questions:",
        ]
        for name, value in self.get_top_features():
            text = self.question_texts.get(name)
            label = f"{name} ({text})" if text else name
            lines.append(f"  {self._rank_of[name]:3d}. {label}: {value:.6f}")

        categories = self.category_importance()
        if categories:
            lines.extend(["", "By category:"])
            for category, total in categories.items():
                lines.append(f"  {category}: {total:.6f}")

        values = np.array(list(self.importances.values()))
        if len(values):
            lines.extend(["", f"Mean {values.mean():.6f}, max {values.max():.6f}, min {values.min():.6f}"])
        return "\n".join(lines)


def extract_feature_importance(
    trainer,
    model_name: str,
    question_set: Optional[QuestionSet] = None,
    top_k: int = 10,
    n_repeats: int = 5
) -> FeatureImportanceReport:
    """
    Compute global feature importance for a fitted trainer.

    Args:
        trainer: Fitted RiskModelTrainer
        model_name: Name for the report
        question_set: Supplies question texts and categories
        top_k: Number of questions highlighted in the summary
        n_repeats: Permutation repeats

    Returns:
        FeatureImportanceReport instance
    """
    importances = trainer.get_feature_importance(n_repeats=n_repeats)

    texts: Dict[str, str] = {}
    categories: Dict[str, str] = {}
    if question_set is not None:
        for name, question in zip(trainer.feature_names, question_set):
            texts[name] = question.text
            categories[name] = question.category

    logger.info(f"Extracted importance for {len(importances)} questions")
    return FeatureImportanceReport(
        model_name=model_name,
        importances=importances,
        question_texts=texts,
        categories=categories,
        top_k=top_k,
    )
