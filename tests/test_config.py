"""Tests for configuration loading and validation."""

from pathlib import Path

import pytest
import yaml

from relationship_risk.configs import (
    DEFAULT_CONFIG,
    build_config,
    get_config_value,
    load_config,
    validate_config,
)

CONFIG_PATH = Path(__file__).parent.parent / "configs" / "config.yaml"


class TestLoadConfig:
    def test_repository_config_is_valid(self) -> None:
        config = load_config(str(CONFIG_PATH))
        assert validate_config(config) == []
        assert config["questionnaire"]["question_set"] == "core15"
        assert config["persistence"]["enabled"] is True

    def test_partial_file_merged_over_defaults(self, tmp_path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text(yaml.safe_dump({"synthesis": {"n_samples": 50}}))
        config = load_config(str(path))
        assert config["synthesis"]["n_samples"] == 50
        assert config["synthesis"]["positive_count"] == 84
        assert config["importance"] == DEFAULT_CONFIG["importance"]

    def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "missing.yaml"))

    def test_empty_file(self, tmp_path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("")
        with pytest.raises(ValueError, match="empty"):
            load_config(str(path))


class TestBuildConfig:
    def test_defaults_not_mutated(self) -> None:
        config = build_config({"global": {"random_seed": 1}})
        config["importance"]["top_k"] = 99
        assert DEFAULT_CONFIG["global"]["random_seed"] == 42
        assert DEFAULT_CONFIG["importance"]["top_k"] == 6


class TestValidateConfig:
    def test_defaults_valid(self) -> None:
        assert validate_config(build_config()) == []

    @pytest.mark.parametrize("overrides,message", [
        ({"questionnaire": {"question_set": "core99"}}, "Unknown question set"),
        ({"synthesis": {"label_policy": "coin"}}, "Unknown label policy"),
        ({"synthesis": {"n_samples": 0}}, "n_samples must be positive"),
        ({"synthesis": {"class_thresholds": [0.9, 0.1]}}, "class_thresholds"),
        ({"modeling": {"model_type": "svm"}}, "Unsupported model type"),
        ({"importance": {"perturbation": "grad"}}, "Unknown perturbation"),
        ({"importance": {"top_k": 0}}, "top_k must be positive"),
    ])
    def test_issues_reported(self, overrides, message) -> None:
        issues = validate_config(build_config(overrides))
        assert any(message in issue for issue in issues)

    def test_missing_section(self) -> None:
        config = build_config()
        del config["modeling"]
        assert "Missing required section: modeling" in validate_config(config)


class TestGetConfigValue:
    def test_nested(self) -> None:
        config = build_config()
        assert get_config_value(config, "modeling.neural_network.max_iter") == 150
        assert get_config_value(config, "modeling.missing.key", "x") == "x"
