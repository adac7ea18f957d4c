"""Questionnaire definitions and response validation."""

from .schema import (
    Category,
    Polarity,
    Question,
    QuestionSet,
    ResponseVector,
    RESPONSE_LABELS,
    MIN_VALUE,
    MAX_VALUE,
    NEUTRAL_VALUE,
)
from .banks import get_question_set, QUESTION_SETS

__all__ = [
    "Category",
    "Polarity",
    "Question",
    "QuestionSet",
    "ResponseVector",
    "RESPONSE_LABELS",
    "MIN_VALUE",
    "MAX_VALUE",
    "NEUTRAL_VALUE",
    "get_question_set",
    "QUESTION_SETS",
]
