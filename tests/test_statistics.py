"""Tests for descriptive dataset statistics."""

import numpy as np
import pytest
from scipy import stats

from relationship_risk.evaluation import (
    compute_dataset_statistics,
    correlation_strength,
    pearson_correlation,
)
from relationship_risk.evaluation.statistics import (
    ClassBalance,
    correlation_p_value,
    count_missing_values,
    skewness,
)


class TestPearsonCorrelation:
    def test_self_correlation(self) -> None:
        labels = np.array([0, 1, 1, 0, 1, 0, 0, 1], dtype=float)
        assert pearson_correlation(labels, labels) == pytest.approx(1.0, abs=1e-9)

    def test_anti_correlation(self) -> None:
        x = np.arange(10, dtype=float)
        assert pearson_correlation(x, -x) == pytest.approx(-1.0, abs=1e-9)

    def test_matches_numpy(self) -> None:
        rng = np.random.RandomState(0)
        x = rng.randint(0, 5, 100)
        y = rng.randint(0, 2, 100)
        assert pearson_correlation(x, y) == pytest.approx(np.corrcoef(x, y)[0, 1])

    def test_constant_column(self) -> None:
        assert pearson_correlation([2, 2, 2, 2], [0, 1, 0, 1]) == 0.0

    def test_shape_mismatch(self) -> None:
        with pytest.raises(ValueError, match="same shape"):
            pearson_correlation([1, 2, 3], [1, 2])

    def test_p_value_matches_scipy(self) -> None:
        rng = np.random.RandomState(1)
        x = rng.normal(size=50)
        y = x + rng.normal(size=50)
        r, p = stats.pearsonr(x, y)
        assert correlation_p_value(pearson_correlation(x, y), 50) == pytest.approx(p, rel=1e-6)


class TestCorrelationStrength:
    @pytest.mark.parametrize("r,expected", [
        (0.75, "Very Strong"),
        (-0.55, "Strong"),
        (0.3, "Moderate"),
        (-0.12, "Weak"),
        (0.05, "Very Weak"),
    ])
    def test_buckets(self, r, expected) -> None:
        assert correlation_strength(r) == expected


class TestSkewness:
    def test_matches_scipy_bias_corrected(self) -> None:
        x = np.array([0, 0, 1, 1, 1, 2, 4, 4, 3, 0, 1], dtype=float)
        assert skewness(x) == pytest.approx(stats.skew(x, bias=False))

    def test_constant(self) -> None:
        assert skewness([3, 3, 3, 3]) == 0.0

    def test_too_short(self) -> None:
        assert skewness([1, 2]) == 0.0


class TestClassBalance:
    def test_balanced(self) -> None:
        assert ClassBalance(divorce_count=84, stay_count=86, total=170).is_balanced

    def test_imbalanced(self) -> None:
        assert not ClassBalance(divorce_count=40, stay_count=130, total=170).is_balanced


class TestComputeDatasetStatistics:
    def test_default_dataset(self, core15, core15_dataset) -> None:
        result = compute_dataset_statistics(
            core15_dataset.features, core15_dataset.labels, question_set=core15
        )
        assert result.total_samples == 170
        assert result.total_features == 15
        assert result.divorce_count == 84
        assert result.stay_count == 86
        assert result.class_balance.is_balanced
        assert result.missing_values == 0
        assert result.question_texts == core15.texts

    def test_population_moments(self, core15_dataset) -> None:
        X = core15_dataset.features
        result = compute_dataset_statistics(X, core15_dataset.labels)
        np.testing.assert_allclose(result.feature_means, X.mean(axis=0))
        np.testing.assert_allclose(result.feature_variance, X.var(axis=0))
        np.testing.assert_allclose(result.feature_std, X.std(axis=0))

    def test_correlations_sorted_by_magnitude(self, core15_dataset) -> None:
        result = compute_dataset_statistics(core15_dataset.features, core15_dataset.labels)
        magnitudes = [c.abs_correlation for c in result.correlations]
        assert magnitudes == sorted(magnitudes, reverse=True)
        assert len(result.correlations) == 15

    def test_label_column_correlation(self) -> None:
        labels = np.array([0, 1, 0, 1, 1, 0])
        features = np.column_stack([labels, np.full(6, 2)])
        result = compute_dataset_statistics(features, labels)
        assert result.correlations[0].feature == "q1"
        assert result.correlations[0].correlation == pytest.approx(1.0, abs=1e-9)
        assert result.correlations[1].correlation == 0.0

    def test_class_patterns(self) -> None:
        features = np.array([[4, 0], [4, 2], [0, 4], [2, 4]])
        labels = np.array([0, 0, 1, 1])
        result = compute_dataset_statistics(features, labels)
        np.testing.assert_allclose(result.low_risk_pattern, [4.0, 1.0])
        np.testing.assert_allclose(result.high_risk_pattern, [1.0, 4.0])

    def test_missing_values(self) -> None:
        features = np.array([[1.0, np.nan], [2.0, 3.0], [np.nan, 1.0], [0.0, 2.0]])
        labels = np.array([0, 1, 0, 1])
        assert count_missing_values(features) == 2
        result = compute_dataset_statistics(features, labels)
        assert result.missing_values == 2
        assert result.feature_means[0] == pytest.approx(1.0)

    def test_overview(self, core15_dataset) -> None:
        result = compute_dataset_statistics(core15_dataset.features, core15_dataset.labels)
        assert result.overview() == {
            "Samples": 170,
            "Divorced": 84,
            "Stayed": 86,
            "Balanced": "Yes",
            "Missing values": 0,
        }

    def test_overview_reports_imbalance_and_missing(self) -> None:
        features = np.array([[1.0, np.nan], [2.0, 3.0], [np.nan, 1.0], [0.0, 2.0]])
        labels = np.array([1, 1, 1, 0])
        overview = compute_dataset_statistics(features, labels).overview()
        assert overview["Balanced"] == "No"
        assert overview["Missing values"] == 2

    def test_to_dict_keys(self, core15_dataset) -> None:
        d = compute_dataset_statistics(core15_dataset.features, core15_dataset.labels).to_dict()
        for key in ("total_samples", "feature_means", "feature_std", "feature_variance",
                    "correlations", "class_balance", "missing_values",
                    "high_risk_pattern", "low_risk_pattern"):
            assert key in d
        assert d["divorce_rate"] == pytest.approx(84 / 170)

    def test_to_dataframe(self, core15, core15_dataset) -> None:
        df = compute_dataset_statistics(
            core15_dataset.features, core15_dataset.labels, question_set=core15
        ).to_dataframe()
        assert len(df) == 15
        assert list(df.columns[:2]) == ["feature", "question"]

    def test_label_length_mismatch(self) -> None:
        with pytest.raises(ValueError, match="doesn't match"):
            compute_dataset_statistics(np.zeros((4, 2)), np.zeros(3))
