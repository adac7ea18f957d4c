"""Tests for synthetic dataset generation."""

import numpy as np
import pytest

from relationship_risk.synthesis import (
    DatasetSynthesizer,
    LatentClass,
    SynthesisConfig,
    generate,
)


class TestSynthesisConfig:
    def test_defaults(self) -> None:
        config = SynthesisConfig()
        assert config.n_samples == 170
        assert config.label_policy == "prefix_split"
        assert config.positive_count == 84
        assert config.class_thresholds == (0.3, 0.7)

    def test_invalid_policy(self) -> None:
        with pytest.raises(ValueError, match="Unknown label policy"):
            SynthesisConfig(label_policy="coin_flip")

    def test_invalid_thresholds(self) -> None:
        with pytest.raises(ValueError, match="class_thresholds"):
            SynthesisConfig(class_thresholds=(0.8, 0.2))

    def test_from_config(self, config) -> None:
        config["synthesis"]["n_samples"] = 50
        config["global"]["random_seed"] = 3
        synthesis = SynthesisConfig.from_config(config)
        assert synthesis.n_samples == 50
        assert synthesis.random_seed == 3
        assert SynthesisConfig.from_config(config, random_seed=9).random_seed == 9


class TestDatasetSynthesizer:
    @pytest.mark.parametrize("policy", ["prefix_split", "score_threshold", "random"])
    def test_shapes_and_ranges(self, core15, policy) -> None:
        config = SynthesisConfig(n_samples=120, label_policy=policy, positive_count=60)
        dataset = DatasetSynthesizer.from_question_set(core15, config).generate()

        assert dataset.features.shape == (120, 15)
        assert dataset.labels.shape == (120,)
        assert dataset.features.min() >= 0
        assert dataset.features.max() <= 4
        assert set(np.unique(dataset.labels)) <= {0, 1}
        assert len(dataset.latent_classes) == 120

    def test_reproducible(self, core15) -> None:
        a = DatasetSynthesizer.from_question_set(core15, SynthesisConfig(random_seed=5)).generate()
        b = DatasetSynthesizer.from_question_set(core15, SynthesisConfig(random_seed=5)).generate()
        np.testing.assert_array_equal(a.features, b.features)
        np.testing.assert_array_equal(a.labels, b.labels)

    def test_different_seeds_differ(self, core15) -> None:
        a = DatasetSynthesizer.from_question_set(core15, SynthesisConfig(random_seed=5)).generate()
        b = DatasetSynthesizer.from_question_set(core15, SynthesisConfig(random_seed=6)).generate()
        assert not np.array_equal(a.features, b.features)

    def test_prefix_split_labels(self, core15_dataset) -> None:
        assert core15_dataset.labels[:84].sum() == 84
        assert core15_dataset.labels[84:].sum() == 0
        assert core15_dataset.latent_classes[0] is LatentClass.STRAINED
        assert core15_dataset.latent_classes[-1] is LatentClass.HEALTHY

    def test_score_threshold_labels(self) -> None:
        weights = np.ones(10)
        config = SynthesisConfig(n_samples=300, label_policy="score_threshold", random_seed=1)
        synthesizer = DatasetSynthesizer(weights, config=config)
        dataset = synthesizer.generate()

        scores = synthesizer.relationship_scores(dataset.features)
        np.testing.assert_array_equal(dataset.labels, np.where(scores > 0.6, 0, 1))
        # Healthy draws with all-high weights score above 0.6 most of the time
        assert 0 < dataset.labels.sum() < 300

    def test_healthy_rows_score_higher(self, core15_dataset) -> None:
        features = core15_dataset.features
        healthy = features[core15_dataset.labels == 0].mean()
        strained = features[core15_dataset.labels == 1].mean()
        assert healthy > strained

    def test_negative_questions_mirrored(self, extended54) -> None:
        dataset = DatasetSynthesizer.from_question_set(extended54, SynthesisConfig(random_seed=2)).generate()
        healthy = dataset.features[dataset.labels == 0]
        # Healthy couples rarely show harmful patterns
        assert healthy[:, extended54.negative_mask].mean() < 2
        assert healthy[:, ~extended54.negative_mask].mean() > 2

    def test_n_samples_override(self, core15) -> None:
        synthesizer = DatasetSynthesizer.from_question_set(core15)
        assert synthesizer.generate(40).n_samples == 40

    def test_invalid_weights(self) -> None:
        with pytest.raises(ValueError, match=r"\(0, 1\]"):
            DatasetSynthesizer([0.5, 0.0])

    def test_to_dataframe(self, core15_dataset) -> None:
        df = core15_dataset.to_dataframe()
        assert list(df.columns[:2]) == ["q1", "q2"]
        assert "label" in df.columns
        assert set(df["latent_class"]) <= {"healthy", "mixed", "strained"}

    def test_split(self, core15_dataset) -> None:
        train, test = core15_dataset.split(test_ratio=0.2, random_seed=0)
        assert train.n_samples == 136
        assert test.n_samples == 34
        assert train.labels.sum() + test.labels.sum() == 84


class TestClassConditionedDraws:
    """Answer frequencies per latent class for one high-weight and one low-weight question."""

    N_ROWS = 20000

    @pytest.mark.parametrize("latent_class,high_expected,low_expected", [
        (LatentClass.HEALTHY, [0.0, 0.0, 0.1, 0.5, 0.4], [0.1, 0.1, 0.45, 0.35, 0.0]),
        (LatentClass.MIXED, [0.0, 1 / 3, 1 / 3, 1 / 3, 0.0], [0.2, 0.2, 0.2, 0.2, 0.2]),
        (LatentClass.STRAINED, [0.35, 0.5, 0.15, 0.0, 0.0], [0.2, 0.2, 0.4, 0.2, 0.0]),
    ])
    def test_frequencies(self, latent_class, high_expected, low_expected) -> None:
        synthesizer = DatasetSynthesizer([1.0, 0.5], config=SynthesisConfig(random_seed=11))
        values = synthesizer._sample_responses(latent_class, self.N_ROWS)

        high = np.bincount(values[:, 0], minlength=5) / self.N_ROWS
        low = np.bincount(values[:, 1], minlength=5) / self.N_ROWS
        np.testing.assert_allclose(high, high_expected, atol=0.02)
        np.testing.assert_allclose(low, low_expected, atol=0.02)

        # Support is exact, not approximate
        assert set(np.flatnonzero(high)) == set(np.flatnonzero(high_expected))
        assert set(np.flatnonzero(low)) == set(np.flatnonzero(low_expected))

    def test_negative_polarity_mirrors_values(self) -> None:
        synthesizer = DatasetSynthesizer([1.0], negative_mask=[True], config=SynthesisConfig(random_seed=11))
        values = synthesizer._sample_responses(LatentClass.HEALTHY, self.N_ROWS)
        assert set(np.unique(values)) == {0, 1, 2}
        assert (values <= 1).mean() == pytest.approx(0.9, abs=0.02)


class TestGenerateFunction:
    def test_weight_map(self) -> None:
        features, labels = generate(25, 3, {0: 1.0, 1: 0.5, 2: 0.2}, SynthesisConfig(positive_count=10))
        assert features.shape == (25, 3)
        assert labels.sum() == 10

    def test_weight_count_mismatch(self) -> None:
        with pytest.raises(ValueError, match="Expected 3 weights"):
            generate(10, 3, [1.0, 0.5])
