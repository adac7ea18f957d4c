"""Exception hierarchy for the relationship risk package."""


class RelationshipRiskError(Exception):
    """Base class for all package errors."""


class ConfigError(RelationshipRiskError):
    """Configuration is missing or invalid."""


class InitializationError(RelationshipRiskError):
    """The assessment context could not be initialized."""


class ModelNotReadyError(RelationshipRiskError):
    """Prediction was requested before any predictor was installed."""


class InvalidResponseError(RelationshipRiskError, ValueError):
    """A response vector has the wrong length or out-of-range values."""


class IncompleteResponseError(InvalidResponseError):
    """At least one question was left unanswered."""

    def __init__(self, missing_indices, message: str = "Please answer all questions before analyzing."):
        self.missing_indices = list(missing_indices)
        super().__init__(message)
