"""
Risk scorer: a single predict(responses) -> probability facade.

The scorer hides whether a trained network or the closed-form fallback is
answering.

State machine:
    UNTRAINED -> TRAINING -> TRAINED
                 TRAINING -> FALLBACK   (training raised)
    TRAINED  -> TRAINING               (retrain; predictor replaced wholesale)
    FALLBACK is terminal but usable: predictions use the fallback formula.

Prediction before any predictor is installed raises ModelNotReadyError;
callers should gate on is_initialized instead of catching it.
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

import numpy as np

from ..configs.loader import build_config
from ..errors import InvalidResponseError, ModelNotReadyError
from ..modeling.fallback import FallbackPredictor
from ..modeling.trainer import RiskModelTrainer
from ..questionnaire.schema import QuestionSet, ResponseVector, MIN_VALUE, MAX_VALUE

logger = logging.getLogger(__name__)


class ScorerState(Enum):
    """Lifecycle of the installed predictor."""
    UNTRAINED = "untrained"
    TRAINING = "training"
    TRAINED = "trained"
    FALLBACK = "fallback"


class RiskScorer:
    """
    Predictor facade over a trained network or the fallback formula.

    Attributes:
        question_set: Questions the responses refer to
        config: Full configuration dictionary
        state: Current ScorerState
        fallback_reason: Why the scorer is in FALLBACK (None otherwise)
    """

    def __init__(self, question_set: QuestionSet, config: Optional[Dict[str, Any]] = None):
        """
        Initialize an untrained scorer.

        Args:
            question_set: Questions the responses refer to
            config: Configuration dictionary (defaults to DEFAULT_CONFIG)
        """
        self.question_set = question_set
        self.config = config or build_config()
        self.state = ScorerState.UNTRAINED
        self.fallback_reason: Optional[str] = None
        self._trainer: Optional[RiskModelTrainer] = None
        self._fallback = FallbackPredictor.from_question_set(question_set)

    @property
    def is_initialized(self) -> bool:
        """True once a predictor (trained or fallback) is installed."""
        return self.state in (ScorerState.TRAINED, ScorerState.FALLBACK)

    @property
    def mode(self) -> str:
        """Either "network" (trained model answers) or "fallback"."""
        return "network" if self.state is ScorerState.TRAINED else "fallback"

    @property
    def trainer(self) -> Optional[RiskModelTrainer]:
        return self._trainer

    @property
    def fallback(self) -> FallbackPredictor:
        return self._fallback

    # =========================================================================
    # Installing a predictor
    # =========================================================================

    def train(self, features: np.ndarray, labels: np.ndarray) -> ScorerState:
        """
        Train a new network and install it.

        Training errors are not raised: the scorer switches to FALLBACK and
        logs the reason.

        Args:
            features: Feature matrix (N x Q)
            labels: Labels (N,) in {0, 1}

        Returns:
            The resulting state (TRAINED or FALLBACK)
        """
        if self.state is ScorerState.TRAINING:
            raise RuntimeError("Training is already in progress")

        self.state = ScorerState.TRAINING
        seed = self.config.get("global", {}).get("random_seed", 42)
        trainer = RiskModelTrainer(self.config, random_seed=seed)

        try:
            trainer.fit(features, labels, self.question_set.feature_names())
        except Exception as e:
            logger.warning(f"Model training failed, using simplified analysis method: {e}")
            self.use_fallback(str(e))
            return self.state

        self._install(trainer)
        return self.state

    def install(self, trainer: RiskModelTrainer) -> None:
        """
        Install an already-fitted trainer (e.g., loaded from disk).

        Raises:
            ValueError: If the trainer is unfitted or its width doesn't match
        """
        if not trainer.is_fitted:
            raise ValueError("Cannot install an unfitted model")
        n_features = len(trainer.feature_names)
        if n_features and n_features != len(self.question_set):
            raise ValueError(
                f"Model expects {n_features} answers but the question set has {len(self.question_set)}"
            )
        self._install(trainer)

    def _install(self, trainer: RiskModelTrainer) -> None:
        self._trainer = trainer
        self.fallback_reason = None
        self.state = ScorerState.TRAINED
        logger.info(f"Installed trained {trainer.model_type} predictor")

    def use_fallback(self, reason: str = "requested") -> None:
        """Switch to the closed-form predictor, discarding any trained model."""
        self._trainer = None
        self.fallback_reason = reason
        self.state = ScorerState.FALLBACK
        logger.info(f"Scorer running in fallback mode ({reason})")

    def save(self, filepath: str, data_signature: Optional[Dict[str, Any]] = None) -> None:
        """
        Persist the trained predictor.

        Args:
            filepath: Destination joblib file
            data_signature: Description of the training data, stored with the model
        """
        if self.state is not ScorerState.TRAINED:
            raise RuntimeError("Only a trained predictor can be saved")
        if data_signature is not None:
            self._trainer.data_signature = data_signature
        Path(filepath).parent.mkdir(parents=True, exist_ok=True)
        self._trainer.save(str(filepath))

    def load(self, filepath: str, data_signature: Optional[Dict[str, Any]] = None) -> bool:
        """
        Install a persisted predictor.

        Args:
            filepath: Saved joblib file
            data_signature: If given, the model is only installed when it was
                saved with an equal signature

        Returns:
            True if a model was loaded, False if none was found or it is stale
        """
        if not Path(filepath).exists():
            logger.info(f"No saved model found at {filepath}, will train new model")
            return False
        trainer = RiskModelTrainer.load(str(filepath))
        if data_signature is not None and trainer.data_signature != data_signature:
            logger.info(f"Saved model at {filepath} was trained on different data, will train new model")
            return False
        self.install(trainer)
        return True

    # =========================================================================
    # Prediction
    # =========================================================================

    def predict(self, responses: Sequence[int]) -> float:
        """
        Divorce probability for one complete response vector.

        Args:
            responses: One answer in [0, 4] per question

        Returns:
            Probability in [0, 1]

        Raises:
            ModelNotReadyError: If no predictor is installed
            InvalidResponseError: If the responses are malformed
        """
        if not self.is_initialized:
            raise ModelNotReadyError("Model is not ready yet. Please wait for initialization to finish.")
        values = ResponseVector.for_question_set(responses, self.question_set).to_array()
        return float(self.predict_batch(values[np.newaxis, :])[0])

    def predict_batch(self, X: np.ndarray) -> np.ndarray:
        """
        Divorce probabilities for a matrix of response vectors.

        A runtime failure of the trained model is logged and answered with
        the fallback formula.
        """
        if not self.is_initialized:
            raise ModelNotReadyError("Model is not ready yet. Please wait for initialization to finish.")

        X = np.atleast_2d(np.asarray(X, dtype=float))
        if X.shape[1] != len(self.question_set):
            raise InvalidResponseError(
                f"Expected {len(self.question_set)} answers, got {X.shape[1]}"
            )
        if np.isnan(X).any() or (X < MIN_VALUE).any() or (X > MAX_VALUE).any():
            raise InvalidResponseError("Answers must be integers between 0 and 4")

        if self.state is ScorerState.TRAINED:
            try:
                return np.clip(self._trainer.predict(X), 0.0, 1.0)
            except Exception as e:
                logger.warning(f"Prediction failed, falling back to weighted formula: {e}")

        return self._fallback.predict_batch(X)
