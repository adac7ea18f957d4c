"""Shared fixtures for the relationship risk tests."""

import pytest

from relationship_risk.configs import build_config
from relationship_risk.questionnaire import get_question_set
from relationship_risk.synthesis import DatasetSynthesizer, SynthesisConfig


@pytest.fixture
def core15():
    return get_question_set("core15")


@pytest.fixture
def extended54():
    return get_question_set("extended54")


@pytest.fixture
def config(tmp_path):
    return build_config({"global": {"output_dir": str(tmp_path / "artifacts")}})


@pytest.fixture
def core15_dataset(core15):
    return DatasetSynthesizer.from_question_set(core15, SynthesisConfig(random_seed=7)).generate()
