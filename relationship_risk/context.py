"""
Assessment context: the application object behind the quiz.

One context owns the question set, the synthetic training data, its
statistics and the live scorer. There is no module-level singleton; the UI
(or a test) creates a context and calls initialize().

Lifecycle:
    IDLE -> INITIALIZING -> READY
                         -> FAILED   (error kept in last_error)
    FAILED -> INITIALIZING           (retry re-runs from scratch)
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from .configs.loader import build_config, get_config_value
from .errors import InitializationError, ModelNotReadyError
from .evaluation.statistics import DatasetStatistics, compute_dataset_statistics
from .inference.importance import FeatureImportanceRanker, ImportancePolicy
from .inference.interpretation import interpret_risk
from .inference.schema import AssessmentResult
from .inference.scorer import RiskScorer, ScorerState
from .questionnaire.banks import get_question_set
from .questionnaire.schema import QuestionSet, ResponseVector
from .synthesis.generator import DatasetSynthesizer, SynthesisConfig, SyntheticDataset

logger = logging.getLogger(__name__)

MODEL_READY_MESSAGE = "Model ready for analysis!"
FALLBACK_MESSAGE = "Using simplified analysis method"


class ContextState(Enum):
    IDLE = "idle"
    INITIALIZING = "initializing"
    READY = "ready"
    FAILED = "failed"


class AssessmentContext:
    """
    Owns everything needed to assess one set of answers.

    Attributes:
        config: Full configuration dictionary
        state: Current ContextState
        last_error: Message of the last initialization failure
        notifications: Soft status messages for the UI, oldest first
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config = config or build_config()
        self.state = ContextState.IDLE
        self.last_error: Optional[str] = None
        self.notifications: List[str] = []
        self._reset()

    def _reset(self) -> None:
        self.question_set: Optional[QuestionSet] = None
        self.dataset: Optional[SyntheticDataset] = None
        self.statistics: Optional[DatasetStatistics] = None
        self.scorer: Optional[RiskScorer] = None
        self.ranker: Optional[FeatureImportanceRanker] = None

    @property
    def is_ready(self) -> bool:
        return self.state is ContextState.READY

    @property
    def mode(self) -> Optional[str]:
        return self.scorer.mode if self.scorer is not None else None

    @property
    def model_path(self) -> Path:
        """Where the trained predictor is persisted."""
        output_dir = get_config_value(self.config, "global.output_dir", "artifacts")
        model_key = get_config_value(self.config, "persistence.model_key", "relationship-model")
        return Path(output_dir) / "models" / f"{model_key}.joblib"

    @property
    def persistence_enabled(self) -> bool:
        return bool(get_config_value(self.config, "persistence.enabled", False))

    def initialize(self) -> ContextState:
        """
        Build the question set, synthesize data, compute statistics and
        install a predictor (loaded, trained, or fallback).

        Returns:
            The resulting state (READY or FAILED)

        Raises:
            InitializationError: If called while initializing or already ready
        """
        if self.state not in (ContextState.IDLE, ContextState.FAILED):
            raise InitializationError(f"Cannot initialize from state {self.state.value}")

        self.state = ContextState.INITIALIZING
        self.last_error = None
        self._reset()

        try:
            self._build()
        except Exception as e:
            logger.error(f"Initialization failed: {e}")
            self._reset()
            self.last_error = str(e)
            self.state = ContextState.FAILED
            return self.state

        self.notifications.append(
            MODEL_READY_MESSAGE if self.scorer.mode == "network" else FALLBACK_MESSAGE
        )
        self.state = ContextState.READY
        logger.info(f"Assessment context ready (mode={self.scorer.mode})")
        return self.state

    def _build(self) -> None:
        question_set = get_question_set(
            get_config_value(self.config, "questionnaire.question_set", "core15")
        )
        synthesis_config = SynthesisConfig.from_config(self.config)
        dataset = DatasetSynthesizer.from_question_set(question_set, synthesis_config).generate()
        statistics = compute_dataset_statistics(
            dataset.features, dataset.labels, question_set=question_set
        )

        signature = {"question_set": question_set.name, **synthesis_config.to_dict()}
        scorer = RiskScorer(question_set, self.config)
        loaded = False
        if self.persistence_enabled:
            try:
                loaded = scorer.load(str(self.model_path), data_signature=signature)
            except Exception as e:
                logger.warning(f"Could not load saved model from {self.model_path}, retraining: {e}")
        if not loaded:
            scorer.train(dataset.features, dataset.labels)
            if self.persistence_enabled and scorer.state is ScorerState.TRAINED:
                scorer.save(str(self.model_path), data_signature=signature)
                logger.info(f"Saved trained model to {self.model_path}")

        self.question_set = question_set
        self.dataset = dataset
        self.statistics = statistics
        self.scorer = scorer
        self.ranker = FeatureImportanceRanker(scorer, ImportancePolicy.from_config(self.config))

    def assess(self, responses: Sequence[Optional[int]]) -> AssessmentResult:
        """
        Score one complete set of answers and explain the result.

        Args:
            responses: One answer per question, 0-4

        Returns:
            AssessmentResult

        Raises:
            ModelNotReadyError: If the context is not READY
            IncompleteResponseError: If any answer is missing
            InvalidResponseError: If the answers are malformed
        """
        if not self.is_ready:
            raise ModelNotReadyError("Model is not ready yet. Please wait for initialization to finish.")

        vector = ResponseVector.for_question_set(responses, self.question_set)
        probability = self.scorer.predict(vector.values)
        importance = self.ranker.rank(vector.values)
        interpretation = interpret_risk(round(probability * 100))

        return AssessmentResult(
            probability=probability,
            average_response=vector.average(),
            mode=self.scorer.mode,
            risk_level=interpretation.level.value,
            feature_importance=importance,
        )
