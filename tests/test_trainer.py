"""Tests for the scikit-learn model trainer."""

import numpy as np
import pytest

from relationship_risk.modeling import RiskModelTrainer, extract_feature_importance
from relationship_risk.modeling.feature_importance import FeatureImportanceReport


@pytest.fixture
def fitted_trainer(config, core15, core15_dataset):
    trainer = RiskModelTrainer(config, random_seed=0)
    return trainer.fit(core15_dataset.features, core15_dataset.labels, core15.feature_names())


class TestRiskModelTrainer:
    def test_model_type_from_config(self, config) -> None:
        assert RiskModelTrainer(config).model_type == "neural_network"
        assert RiskModelTrainer(config, model_type="logistic_regression").model_type == "logistic_regression"

    def test_unsupported_model_type(self, config, core15_dataset) -> None:
        trainer = RiskModelTrainer(config, model_type="random_forest")
        with pytest.raises(ValueError, match="Unsupported model type"):
            trainer.fit(core15_dataset.features, core15_dataset.labels)

    def test_network_architecture(self, fitted_trainer) -> None:
        model = fitted_trainer.model
        assert model.hidden_layer_sizes == (32, 16, 8)
        assert model.activation == "relu"
        assert not model.early_stopping
        assert model.max_iter == 150

    def test_predict_probabilities(self, fitted_trainer, core15_dataset) -> None:
        probs = fitted_trainer.predict(core15_dataset.features)
        assert probs.shape == (170,)
        assert ((probs >= 0) & (probs <= 1)).all()

    def test_evaluate(self, fitted_trainer, core15_dataset) -> None:
        metrics = fitted_trainer.evaluate(core15_dataset.features, core15_dataset.labels)
        assert set(metrics) == {"loss", "accuracy", "precision", "recall"}
        assert 0 <= metrics["accuracy"] <= 1

    def test_logistic_regression(self, config, core15_dataset) -> None:
        trainer = RiskModelTrainer(config, model_type="logistic_regression")
        trainer.fit(core15_dataset.features, core15_dataset.labels)
        probs = trainer.predict(core15_dataset.features)
        # Strained rows (first 84) get higher risk on average
        assert probs[:84].mean() > probs[84:].mean()
        assert trainer.evaluate(core15_dataset.features, core15_dataset.labels)["accuracy"] > 0.8

    def test_predict_before_fit(self, config) -> None:
        with pytest.raises(RuntimeError, match="fitted"):
            RiskModelTrainer(config).predict(np.zeros((1, 15)))

    def test_single_class_rejected(self, config) -> None:
        with pytest.raises(ValueError, match="single class"):
            RiskModelTrainer(config).fit(np.full((20, 3), 2), np.zeros(20))

    def test_non_binary_labels_rejected(self, config) -> None:
        with pytest.raises(ValueError, match="0 or 1"):
            RiskModelTrainer(config).fit(np.full((4, 3), 2), np.array([0, 1, 2, 1]))

    def test_length_mismatch_rejected(self, config) -> None:
        with pytest.raises(ValueError):
            RiskModelTrainer(config).fit(np.full((4, 3), 2), np.array([0, 1, 0]))

    def test_save_load_round_trip(self, fitted_trainer, tmp_path) -> None:
        path = tmp_path / "model.joblib"
        fitted_trainer.save(str(path))
        loaded = RiskModelTrainer.load(str(path))

        x = np.array([[3, 1, 4, 0, 2, 2, 3, 1, 0, 4, 2, 3, 1, 1, 2]])
        np.testing.assert_allclose(loaded.predict(x), fitted_trainer.predict(x))
        assert loaded.feature_names == fitted_trainer.feature_names
        assert loaded.model_type == "neural_network"

    def test_save_unfitted(self, config, tmp_path) -> None:
        with pytest.raises(RuntimeError, match="unfitted"):
            RiskModelTrainer(config).save(str(tmp_path / "m.joblib"))


class TestFeatureImportanceReport:
    def test_extract(self, fitted_trainer, core15) -> None:
        report = extract_feature_importance(
            fitted_trainer, "neural_network", question_set=core15, top_k=5, n_repeats=2
        )
        assert len(report.importances) == 15
        assert len(report.get_top_features()) == 5
        assert report.question_texts["q1"] == core15.texts[0]
        assert set(report.category_importance()) == {"communication", "connection", "practical"}

    def test_ranking_and_csv(self, tmp_path) -> None:
        report = FeatureImportanceReport(
            model_name="m",
            importances={"q1": 0.1, "q2": 0.3, "q3": 0.2},
            question_texts={"q2": "Second"},
        )
        assert report.get_feature_rank("q2") == 1
        assert report.get_feature_rank("q9") is None

        path = tmp_path / "importance.csv"
        report.save_csv(str(path))
        loaded = FeatureImportanceReport.load_csv(str(path), "m")
        assert loaded.get_top_features(1)[0][0] == "q2"
