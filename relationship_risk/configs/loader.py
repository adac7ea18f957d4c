"""
Configuration loading and validation.

This module handles loading of YAML configuration files, merging them over
the built-in defaults, and validating the fields the assessment relies on.
"""

import copy
import logging
from pathlib import Path
from typing import Dict, Any, List, Optional

import yaml

logger = logging.getLogger(__name__)


DEFAULT_CONFIG: Dict[str, Any] = {
    "global": {
        "random_seed": 42,
        "log_level": "INFO",
        "output_dir": "artifacts",
    },
    "questionnaire": {
        "question_set": "core15",
    },
    "synthesis": {
        "n_samples": 170,
        "label_policy": "prefix_split",
        "class_thresholds": [0.3, 0.7],
        "score_threshold": 0.6,
        "positive_count": 84,
        "high_weight_threshold": 0.8,
    },
    "modeling": {
        "model_type": "neural_network",
        "test_ratio": 0.2,
        "neural_network": {
            "hidden_layer_sizes": [32, 16, 8],
            "activation": "relu",
            "alpha": 0.001,
            "learning_rate_init": 0.001,
            "batch_size": 32,
            "max_iter": 150,
            "early_stopping": False,
            "validation_fraction": 0.2,
        },
        "logistic_regression": {
            "C": 1.0,
            "max_iter": 1000,
        },
    },
    "importance": {
        "perturbation": "max_min",
        "weighted": True,
        "top_k": 6,
        "critical_threshold": 0.1,
        "critical_weight": 0.8,
    },
    "persistence": {
        "enabled": False,
        "model_key": "relationship-model",
    },
    "evaluation": {
        "permutation_repeats": 5,
        "top_k": 10,
    },
}

VALID_QUESTION_SETS = ("core15", "extended54")
VALID_LABEL_POLICIES = ("score_threshold", "prefix_split", "random")
VALID_MODEL_TYPES = ("neural_network", "logistic_regression")
VALID_PERTURBATIONS = ("max", "max_min")


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(filepath: str) -> Dict[str, Any]:
    """
    Load configuration from YAML file.

    Values present in the file override DEFAULT_CONFIG; anything missing
    falls back to the defaults.

    Args:
        filepath: Path to the YAML configuration file

    Returns:
        Configuration dictionary

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If YAML is invalid
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {filepath}")

    logger.info(f"Loading configuration from {filepath}")
    with open(filepath, "r") as f:
        config = yaml.safe_load(f)

    if config is None:
        raise ValueError(f"Configuration file is empty: {filepath}")

    return build_config(config)


def build_config(overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return DEFAULT_CONFIG with the given overrides merged in."""
    return _deep_merge(DEFAULT_CONFIG, overrides or {})


def validate_config(config: Dict[str, Any]) -> List[str]:
    """
    Validate configuration and return list of warnings/errors.

    Args:
        config: Configuration dictionary

    Returns:
        List of warning/error messages (empty if valid)
    """
    issues = []

    required_sections = ["global", "questionnaire", "synthesis", "modeling",
                         "importance"]

    for section in required_sections:
        if section not in config:
            issues.append(f"Missing required section: {section}")

    question_set = get_config_value(config, "questionnaire.question_set")
    if question_set is not None and question_set not in VALID_QUESTION_SETS:
        issues.append(f"Unknown question set: {question_set}")

    # Synthesis
    if "synthesis" in config:
        synthesis = config["synthesis"]
        if synthesis.get("n_samples", 1) <= 0:
            issues.append(f"synthesis.n_samples must be positive, got {synthesis.get('n_samples')}")
        policy = synthesis.get("label_policy")
        if policy is not None and policy not in VALID_LABEL_POLICIES:
            issues.append(f"Unknown label policy: {policy}")
        thresholds = synthesis.get("class_thresholds", [0.3, 0.7])
        if len(thresholds) != 2 or not 0 <= thresholds[0] <= thresholds[1] <= 1:
            issues.append(f"synthesis.class_thresholds must be two ordered values in [0, 1], got {thresholds}")
        if policy == "prefix_split":
            positive = synthesis.get("positive_count", 0)
            if not 0 <= positive <= synthesis.get("n_samples", 0):
                issues.append(f"synthesis.positive_count must be in [0, n_samples], got {positive}")

    # Modeling
    model_type = get_config_value(config, "modeling.model_type")
    if model_type is not None and model_type not in VALID_MODEL_TYPES:
        issues.append(f"Unsupported model type: {model_type}")

    # Importance policy
    perturbation = get_config_value(config, "importance.perturbation")
    if perturbation is not None and perturbation not in VALID_PERTURBATIONS:
        issues.append(f"Unknown perturbation policy: {perturbation}")
    top_k = get_config_value(config, "importance.top_k", 6)
    if top_k <= 0:
        issues.append(f"importance.top_k must be positive, got {top_k}")

    # Check random seed is set
    if "global" in config:
        if "random_seed" not in config["global"]:
            issues.append("Missing global.random_seed (required for reproducibility)")

    return issues


def get_config_value(config: Dict[str, Any], path: str, default: Any = None) -> Any:
    """
    Get a nested configuration value using dot notation.

    Args:
        config: Configuration dictionary
        path: Dot-separated path (e.g., "modeling.neural_network.max_iter")
        default: Default value if path doesn't exist

    Returns:
        Configuration value or default
    """
    keys = path.split(".")
    value = config
    for key in keys:
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            return default
    return value
