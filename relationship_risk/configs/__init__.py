"""Configuration module."""

from .loader import (
    DEFAULT_CONFIG,
    build_config,
    get_config_value,
    load_config,
    validate_config,
)

__all__ = [
    "DEFAULT_CONFIG",
    "build_config",
    "get_config_value",
    "load_config",
    "validate_config",
]
