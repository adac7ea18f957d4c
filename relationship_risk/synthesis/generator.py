"""
Synthetic survey data for relationship risk modeling.

This module simulates questionnaire responses from three latent relationship
archetypes and attaches binary outcome labels.

Key Design Decisions:
- Latent classes (healthy / mixed / strained) exist only during generation
- High-weight questions are more class-dependent than low-weight ones
- Negative-polarity questions are mirrored (4 - v) after sampling
- Labels: 1 = divorced / at risk, 0 = stayed together
- Reproducible given a random seed

Label Policies:
    score_threshold:
        u ~ U(0, 1); u < 0.3 healthy, u < 0.7 mixed, else strained
        score = sum(effective_i * weight_i) / (n_questions * 4)
        label = 0 if score > 0.6 else 1
    prefix_split:
        first K rows label 1 (strained), remaining rows label 0 (healthy)
    random:
        latent class as above, label drawn 50/50
"""

import logging
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from ..questionnaire.schema import MAX_VALUE, QuestionSet

logger = logging.getLogger(__name__)


class LatentClass(Enum):
    """Hidden relationship archetype used to bias sampled answers."""
    HEALTHY = "healthy"
    MIXED = "mixed"
    STRAINED = "strained"


@dataclass
class SynthesisConfig:
    """
    Configuration for synthetic data generation.

    Stores every parameter used for sampling so a dataset can be
    regenerated exactly from its config and seed.
    """
    n_samples: int = 170
    label_policy: str = "prefix_split"
    class_thresholds: Tuple[float, float] = (0.3, 0.7)
    score_threshold: float = 0.6
    positive_count: int = 84
    high_weight_threshold: float = 0.8
    random_seed: Optional[int] = 42

    def __post_init__(self):
        self.class_thresholds = tuple(self.class_thresholds)
        if self.n_samples <= 0:
            raise ValueError(f"n_samples must be positive, got {self.n_samples}")
        if self.label_policy not in ("score_threshold", "prefix_split", "random"):
            raise ValueError(f"Unknown label policy: {self.label_policy}")
        low, high = self.class_thresholds
        if not 0 <= low <= high <= 1:
            raise ValueError(f"class_thresholds must be ordered values in [0, 1], got {self.class_thresholds}")
        if self.positive_count < 0:
            raise ValueError(f"positive_count must be non-negative, got {self.positive_count}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        d = asdict(self)
        d["class_thresholds"] = list(self.class_thresholds)
        return d

    @classmethod
    def from_config(cls, config: Dict[str, Any], random_seed: Optional[int] = None) -> "SynthesisConfig":
        """
        Create from main config dictionary.

        Args:
            config: Main config dictionary
            random_seed: Seed override (defaults to global.random_seed)

        Returns:
            SynthesisConfig instance
        """
        synthesis = config.get("synthesis", {})
        if random_seed is None:
            random_seed = config.get("global", {}).get("random_seed", 42)

        return cls(
            n_samples=synthesis.get("n_samples", 170),
            label_policy=synthesis.get("label_policy", "prefix_split"),
            class_thresholds=tuple(synthesis.get("class_thresholds", (0.3, 0.7))),
            score_threshold=synthesis.get("score_threshold", 0.6),
            positive_count=synthesis.get("positive_count", 84),
            high_weight_threshold=synthesis.get("high_weight_threshold", 0.8),
            random_seed=random_seed,
        )


@dataclass
class SyntheticDataset:
    """
    Labeled synthetic responses.

    Attributes:
        features: Integer answers (n_samples x n_questions) in [0, 4]
        labels: Binary outcome labels (n_samples,), 1 = divorced
        latent_classes: Archetype used to sample each row
        feature_names: Column names for the features
    """
    features: np.ndarray
    labels: np.ndarray
    latent_classes: List[LatentClass]
    feature_names: List[str]

    @property
    def n_samples(self) -> int:
        return self.features.shape[0]

    @property
    def n_features(self) -> int:
        return self.features.shape[1]

    def to_dataframe(self) -> pd.DataFrame:
        """
        Convert to pandas DataFrame.

        Returns:
            DataFrame with one column per question plus "label" and "latent_class"
        """
        df = pd.DataFrame(self.features, columns=self.feature_names)
        df["label"] = self.labels
        df["latent_class"] = [c.value for c in self.latent_classes]
        return df

    def split(
        self,
        test_ratio: float = 0.2,
        random_seed: Optional[int] = None
    ) -> Tuple["SyntheticDataset", "SyntheticDataset"]:
        """
        Shuffle and split into training and held-out sets.

        Args:
            test_ratio: Fraction of rows for the held-out set
            random_seed: Random seed for the shuffle

        Returns:
            Tuple of (train, test)
        """
        rng = np.random.RandomState(random_seed)
        n_test = int(round(self.n_samples * test_ratio))
        shuffle_idx = rng.permutation(self.n_samples)

        test_idx = shuffle_idx[:n_test]
        train_idx = shuffle_idx[n_test:]

        logger.info(f"Split into {len(train_idx)} train and {len(test_idx)} test samples")
        return self._subset(train_idx), self._subset(test_idx)

    def _subset(self, idx: np.ndarray) -> "SyntheticDataset":
        return SyntheticDataset(
            features=self.features[idx],
            labels=self.labels[idx],
            latent_classes=[self.latent_classes[i] for i in idx],
            feature_names=list(self.feature_names),
        )


class DatasetSynthesizer:
    """
    Generator for synthetic questionnaire responses.

    For each sample a latent class is chosen (randomly or by a fixed split),
    then every answer is drawn from a distribution conditioned on that class
    and on the question's weight.

    Attributes:
        weights: Question weights in (0, 1]
        negative_mask: True where a question has negative polarity
        config: SynthesisConfig
        random_state: Numpy RandomState for reproducibility
    """

    def __init__(
        self,
        weights: Sequence[float],
        negative_mask: Optional[Sequence[bool]] = None,
        config: Optional[SynthesisConfig] = None,
        feature_names: Optional[List[str]] = None
    ):
        """
        Initialize the synthesizer.

        Args:
            weights: One weight per question
            negative_mask: Polarity flags (default: all positive)
            config: Generation parameters
            feature_names: Column names (default: q1..qN)
        """
        self.weights = np.asarray(weights, dtype=float)
        if self.weights.ndim != 1 or len(self.weights) == 0:
            raise ValueError("weights must be a non-empty 1-D sequence")
        if np.any(self.weights <= 0) or np.any(self.weights > 1):
            raise ValueError("Every question weight must lie in (0, 1]")

        if negative_mask is None:
            negative_mask = np.zeros(len(self.weights), dtype=bool)
        self.negative_mask = np.asarray(negative_mask, dtype=bool)
        if self.negative_mask.shape != self.weights.shape:
            raise ValueError("negative_mask must have one entry per question")

        self.config = config or SynthesisConfig()
        self.feature_names = feature_names or [f"q{i + 1}" for i in range(len(self.weights))]
        self.random_state = np.random.RandomState(self.config.random_seed)

    @classmethod
    def from_question_set(
        cls,
        question_set: QuestionSet,
        config: Optional[SynthesisConfig] = None
    ) -> "DatasetSynthesizer":
        return cls(
            weights=question_set.weights,
            negative_mask=question_set.negative_mask,
            config=config,
            feature_names=question_set.feature_names(),
        )

    @property
    def n_questions(self) -> int:
        return len(self.weights)

    def generate(self, n_samples: Optional[int] = None) -> SyntheticDataset:
        """
        Generate a labeled synthetic dataset.

        Args:
            n_samples: Number of rows (default: config.n_samples)

        Returns:
            SyntheticDataset with exactly n_samples rows
        """
        n_samples = n_samples if n_samples is not None else self.config.n_samples
        if n_samples <= 0:
            raise ValueError(f"n_samples must be positive, got {n_samples}")

        policy = self.config.label_policy
        logger.info(f"Generating {n_samples} synthetic responses for {self.n_questions} questions "
                    f"(policy={policy})")

        if policy == "prefix_split":
            n_positive = min(self.config.positive_count, n_samples)
            latent = np.array(
                [LatentClass.STRAINED] * n_positive + [LatentClass.HEALTHY] * (n_samples - n_positive),
                dtype=object
            )
        else:
            latent = self._draw_latent_classes(n_samples)

        features = np.zeros((n_samples, self.n_questions), dtype=int)
        for latent_class in LatentClass:
            rows = np.flatnonzero(latent == latent_class)
            if len(rows) > 0:
                features[rows] = self._sample_responses(latent_class, len(rows))

        if policy == "prefix_split":
            labels = np.zeros(n_samples, dtype=int)
            labels[:n_positive] = 1
        elif policy == "score_threshold":
            scores = self.relationship_scores(features)
            labels = np.where(scores > self.config.score_threshold, 0, 1).astype(int)
        else:
            labels = (self.random_state.random_sample(n_samples) < 0.5).astype(int)

        logger.info(f"Generated {n_samples} samples: {int(labels.sum())} positive, "
                    f"{int(n_samples - labels.sum())} negative")

        return SyntheticDataset(
            features=features,
            labels=labels,
            latent_classes=list(latent),
            feature_names=list(self.feature_names),
        )

    def relationship_scores(self, features: np.ndarray) -> np.ndarray:
        """
        Continuous relationship score per row.

        score = sum(effective_i * weight_i) / (n_questions * 4)
        """
        effective = np.where(self.negative_mask, MAX_VALUE - features, features)
        return (effective * self.weights).sum(axis=1) / (self.n_questions * MAX_VALUE)

    def _draw_latent_classes(self, n_samples: int) -> np.ndarray:
        low, high = self.config.class_thresholds
        draws = self.random_state.random_sample(n_samples)
        latent = np.empty(n_samples, dtype=object)
        latent[draws < low] = LatentClass.HEALTHY
        latent[(draws >= low) & (draws < high)] = LatentClass.MIXED
        latent[draws >= high] = LatentClass.STRAINED
        return latent

    def _sample_responses(self, latent_class: LatentClass, n_rows: int) -> np.ndarray:
        """
        Draw answers for n_rows samples of one latent class.

        Healthy-oriented values are drawn first, then mirrored on
        negative-polarity questions.
        """
        rng = self.random_state
        shape = (n_rows, self.n_questions)
        u = rng.random_sample(shape)

        if latent_class is LatentClass.HEALTHY:
            high_weight = np.where(u < 0.8, rng.randint(3, 5, shape), rng.randint(2, 4, shape))
            low_weight = np.where(u < 0.7, rng.randint(2, 4, shape), rng.randint(0, 3, shape))
        elif latent_class is LatentClass.MIXED:
            high_weight = rng.randint(1, 4, shape)
            low_weight = rng.randint(0, 5, shape)
        else:
            high_weight = np.where(u < 0.7, rng.randint(0, 2, shape), rng.randint(1, 3, shape))
            low_weight = np.where(u < 0.6, rng.randint(0, 3, shape), rng.randint(2, 4, shape))

        is_high = self.weights > self.config.high_weight_threshold
        values = np.where(is_high, high_weight, low_weight)
        return np.where(self.negative_mask, MAX_VALUE - values, values)


def generate(
    sample_count: int,
    question_count: int,
    weights: Union[Mapping[int, float], Sequence[float]],
    config: Optional[SynthesisConfig] = None
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Convenience function returning (features, labels).

    Args:
        sample_count: Number of rows
        question_count: Number of columns
        weights: Weight per question, as a sequence or {index: weight} map
        config: Generation parameters

    Returns:
        Tuple of (features, labels)
    """
    if isinstance(weights, Mapping):
        weights = [weights[i] for i in range(question_count)]
    if len(weights) != question_count:
        raise ValueError(f"Expected {question_count} weights, got {len(weights)}")

    synthesizer = DatasetSynthesizer(weights, config=config)
    dataset = synthesizer.generate(sample_count)
    return dataset.features, dataset.labels
