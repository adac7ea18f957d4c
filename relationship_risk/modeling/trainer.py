"""
Model training for relationship risk scoring.

This module trains the binary classifier behind the risk scorer: given the
synthetic feature matrix and labels it returns a fitted predictor of
P(label == 1), i.e. the probability of divorce.

Supported Models:
- MLPClassifier (default): small sequential network, 32-16-8 ReLU units,
  L2 penalty, Adam optimizer, early stopping on a validation split
- LogisticRegression: simple, interpretable baseline

The trainer is the only place that talks to scikit-learn; everything above
it sees fit / predict / save / load.
"""

import logging
from typing import Dict, Any, Optional, List

import numpy as np
from sklearn.base import BaseEstimator
from sklearn.inspection import permutation_importance
from sklearn.linear_model import LogisticRegression
from sklearn.neural_network import MLPClassifier
import joblib

from ..evaluation.metrics import compute_classification_metrics

logger = logging.getLogger(__name__)


class RiskModelTrainer:
    """
    Trainer for relationship risk models.

    This class handles model configuration, training, evaluation and
    persistence. All hyperparameters come from the config dictionary.

    Attributes:
        model_type: Type of model ("neural_network" or "logistic_regression")
        config: Model configuration dictionary
        model: Trained sklearn model (after fit is called)
        feature_names: List of feature names
    """

    def __init__(
        self,
        config: Dict[str, Any],
        model_type: Optional[str] = None,
        random_seed: int = 42
    ):
        """
        Initialize the trainer.

        Args:
            config: Configuration dictionary with modeling settings
            model_type: Override model type from config
            random_seed: Random seed for reproducibility
        """
        modeling_config = config.get("modeling", {})

        self.model_type = model_type or modeling_config.get("model_type", "neural_network")
        self.config = modeling_config
        self.random_seed = random_seed
        self.model: Optional[BaseEstimator] = None
        self.feature_names: List[str] = []
        self._fitted = False
        self._X_importance: Optional[np.ndarray] = None
        self._y_importance: Optional[np.ndarray] = None
        self.data_signature: Optional[Dict[str, Any]] = None

        logger.info(f"Initialized trainer with model_type={self.model_type}")

    @property
    def is_fitted(self) -> bool:
        return self._fitted

    def _create_model(self) -> BaseEstimator:
        """
        Create the sklearn model based on configuration.

        Returns:
            Configured sklearn estimator

        Raises:
            ValueError: If model type is not supported
        """
        if self.model_type == "neural_network":
            nn_config = self.config.get("neural_network", {})
            return MLPClassifier(
                hidden_layer_sizes=tuple(nn_config.get("hidden_layer_sizes", (32, 16, 8))),
                activation=nn_config.get("activation", "relu"),
                alpha=nn_config.get("alpha", 0.001),
                solver="adam",
                learning_rate_init=nn_config.get("learning_rate_init", 0.001),
                batch_size=nn_config.get("batch_size", 32),
                max_iter=nn_config.get("max_iter", 150),
                early_stopping=nn_config.get("early_stopping", False),
                validation_fraction=nn_config.get("validation_fraction", 0.2),
                random_state=self.random_seed,
            )
        elif self.model_type == "logistic_regression":
            lr_config = self.config.get("logistic_regression", {})
            return LogisticRegression(
                C=lr_config.get("C", 1.0),
                max_iter=lr_config.get("max_iter", 1000),
                random_state=self.random_seed,
                solver="lbfgs",
            )
        else:
            raise ValueError(f"Unsupported model type: {self.model_type}")

    def fit(
        self,
        X_train: np.ndarray,
        y_train: np.ndarray,
        feature_names: Optional[List[str]] = None
    ) -> "RiskModelTrainer":
        """
        Train the risk model.

        Args:
            X_train: Training features (N x D)
            y_train: Training labels (N,) in {0, 1}
            feature_names: List of feature names

        Returns:
            self (for method chaining)

        Raises:
            ValueError: If shapes disagree, labels aren't binary, or only
                one class is present
        """
        X = np.asarray(X_train, dtype=float)
        y = np.asarray(y_train)
        _validate_training_data(X, y)
        y = y.astype(int)

        logger.info(f"Training {self.model_type} model")
        logger.info(f"Training data: {X.shape[0]} samples, {X.shape[1]} features")
        logger.info(f"Class distribution: {np.mean(y):.2%} positive")

        self.feature_names = feature_names or [f"q{i + 1}" for i in range(X.shape[1])]
        model = self._create_model()
        model.fit(X, y)

        # Only a bounded subset is kept for permutation importance
        max_samples = min(5000, len(X))
        self._X_importance = X[:max_samples].copy()
        self._y_importance = y[:max_samples].copy()

        self.model = model
        self._fitted = True

        if hasattr(model, "n_iter_"):
            logger.info(f"Model training complete after {int(np.max(model.n_iter_))} iterations")
        else:
            logger.info("Model training complete")
        return self

    def predict(self, X: np.ndarray) -> np.ndarray:
        """
        Predict divorce probabilities.

        Args:
            X: Feature matrix (N x D)

        Returns:
            Predicted P(label == 1), shape (N,), in [0, 1]
        """
        if not self._fitted:
            raise RuntimeError("Model must be fitted before predict")

        X = np.atleast_2d(np.asarray(X, dtype=float))
        probs = self.model.predict_proba(X)
        positive_col = list(self.model.classes_).index(1)
        return probs[:, positive_col]

    def evaluate(self, X: np.ndarray, y: np.ndarray) -> Dict[str, float]:
        """
        Evaluate on labeled data.

        Returns:
            Dictionary with loss, accuracy, precision and recall
        """
        if not self._fitted:
            raise RuntimeError("Model must be fitted before evaluate")

        metrics = compute_classification_metrics(y, self.predict(X))
        return {
            "loss": metrics.loss,
            "accuracy": metrics.accuracy,
            "precision": metrics.precision,
            "recall": metrics.recall,
        }

    def get_feature_importance(self, n_repeats: int = 5) -> Dict[str, float]:
        """
        Global feature importance via permutation importance.

        Returns:
            Dictionary mapping feature names to importance scores
        """
        if not self._fitted:
            raise RuntimeError("Model must be fitted before getting feature importance")

        logger.info("Computing permutation importance (this may take a moment)...")
        result = permutation_importance(
            self.model,
            self._X_importance,
            self._y_importance,
            n_repeats=n_repeats,
            random_state=self.random_seed,
        )
        logger.info("Permutation importance computed")

        return {
            name: float(imp)
            for name, imp in zip(self.feature_names, result.importances_mean)
        }

    def save(self, filepath: str) -> None:
        """
        Save the trained model to disk.

        Args:
            filepath: Path to save the model
        """
        if not self._fitted:
            raise RuntimeError("Cannot save unfitted model")

        state = {
            "model": self.model,
            "model_type": self.model_type,
            "config": self.config,
            "random_seed": self.random_seed,
            "feature_names": self.feature_names,
            "fitted": self._fitted,
            "X_importance": self._X_importance,
            "y_importance": self._y_importance,
            "data_signature": self.data_signature
        }
        joblib.dump(state, filepath, compress=3)
        logger.info(f"Saved model to {filepath}")

    @classmethod
    def load(cls, filepath: str) -> "RiskModelTrainer":
        """
        Load a trained model from disk.

        Args:
            filepath: Path to the saved model

        Returns:
            Loaded RiskModelTrainer instance
        """
        state = joblib.load(filepath)

        instance = cls(
            config={"modeling": state["config"]},
            model_type=state["model_type"],
            random_seed=state["random_seed"]
        )
        instance.model = state["model"]
        instance.feature_names = state["feature_names"]
        instance._fitted = state["fitted"]
        instance._X_importance = state.get("X_importance")
        instance._y_importance = state.get("y_importance")
        instance.data_signature = state.get("data_signature")

        logger.info(f"Loaded model from {filepath}")
        return instance


def _validate_training_data(X: np.ndarray, y: np.ndarray) -> None:
    if X.ndim != 2 or X.shape[0] == 0:
        raise ValueError(f"Training features must be a non-empty 2-D matrix, got shape {X.shape}")
    if y.shape != (X.shape[0],):
        raise ValueError(f"Labels shape {y.shape} doesn't match {X.shape[0]} rows")
    if np.isnan(X).any():
        raise ValueError("Training features contain missing values")
    if not np.isin(y, (0, 1)).all():
        raise ValueError("Labels must be 0 or 1")
    if len(np.unique(y)) < 2:
        raise ValueError("Training labels contain a single class")
