"""Synthetic survey data generation."""

from .generator import (
    DatasetSynthesizer,
    LatentClass,
    SynthesisConfig,
    SyntheticDataset,
    generate,
)

__all__ = [
    "DatasetSynthesizer",
    "LatentClass",
    "SynthesisConfig",
    "SyntheticDataset",
    "generate",
]
