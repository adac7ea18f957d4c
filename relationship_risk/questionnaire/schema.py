"""
Schema for questionnaire definitions and user responses.

Every question carries its metadata explicitly:
- index: fixed position 0..N-1 in the question set
- category: display grouping
- polarity: POSITIVE (high answer = healthier) or NEGATIVE (high answer = worse)
- weight: static importance in (0, 1]

Answers are on a 0-4 frequency scale:
0 = Never
1 = Rarely
2 = Sometimes
3 = Often
4 = Always
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Sequence, Tuple

import numpy as np

from ..errors import IncompleteResponseError, InvalidResponseError

MIN_VALUE = 0
MAX_VALUE = 4
NEUTRAL_VALUE = 2

RESPONSE_LABELS = {
    0: "Never",
    1: "Rarely",
    2: "Sometimes",
    3: "Often",
    4: "Always",
}


class Polarity(Enum):
    """Direction in which a raw answer contributes to relationship health."""
    POSITIVE = "positive"
    NEGATIVE = "negative"


@dataclass(frozen=True)
class Category:
    """
    Display grouping of questions.

    Attributes:
        key: Stable identifier
        title: Heading shown above the group
        description: One-line explanation of the group
        critical: Whether the UI should highlight the group
    """
    key: str
    title: str
    description: str = ""
    critical: bool = False


@dataclass(frozen=True)
class Question:
    """
    A single questionnaire item.

    Attributes:
        index: Position in the question set (0-based)
        text: Natural-language prompt
        category: Category key
        polarity: Polarity of the raw answer
        weight: Static importance in (0, 1]
    """
    index: int
    text: str
    category: str
    polarity: Polarity = Polarity.POSITIVE
    weight: float = 1.0

    def __post_init__(self):
        """Validate weight bounds and coerce string polarity."""
        if isinstance(self.polarity, str):
            object.__setattr__(self, "polarity", Polarity(self.polarity))
        if not 0 < self.weight <= 1:
            raise ValueError(f"Question {self.index} weight must be in (0, 1], got {self.weight}")
        if self.index < 0:
            raise ValueError(f"Question index must be non-negative, got {self.index}")

    @property
    def is_negative(self) -> bool:
        return self.polarity is Polarity.NEGATIVE

    def effective_value(self, raw_value: float) -> float:
        """Raw answer re-oriented so that higher always means healthier."""
        return MAX_VALUE - raw_value if self.is_negative else raw_value


@dataclass(frozen=True)
class QuestionSet:
    """
    Ordered, immutable collection of questions.

    Indices must be contiguous 0..N-1 and match list positions.

    Attributes:
        name: Identifier of the set (e.g., "core15")
        questions: Tuple of Question in index order
        categories: Tuple of Category in display order
    """
    name: str
    questions: Tuple[Question, ...]
    categories: Tuple[Category, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "questions", tuple(self.questions))
        object.__setattr__(self, "categories", tuple(self.categories))
        if not self.questions:
            raise ValueError("A question set needs at least one question")
        for position, question in enumerate(self.questions):
            if question.index != position:
                raise ValueError(
                    f"Question at position {position} has index {question.index}"
                )
        known = {c.key for c in self.categories}
        if known:
            unknown = {q.category for q in self.questions} - known
            if unknown:
                raise ValueError(f"Questions reference unknown categories: {sorted(unknown)}")

    def __len__(self) -> int:
        return len(self.questions)

    def __iter__(self):
        return iter(self.questions)

    def __getitem__(self, index: int) -> Question:
        return self.questions[index]

    @property
    def texts(self) -> List[str]:
        return [q.text for q in self.questions]

    @property
    def weights(self) -> np.ndarray:
        return np.array([q.weight for q in self.questions], dtype=float)

    @property
    def weight_map(self) -> Dict[int, float]:
        return {q.index: q.weight for q in self.questions}

    @property
    def negative_mask(self) -> np.ndarray:
        return np.array([q.is_negative for q in self.questions], dtype=bool)

    def feature_names(self) -> List[str]:
        """Column names used for training matrices ("q1".."qN")."""
        return [f"q{q.index + 1}" for q in self.questions]

    def questions_in(self, category_key: str) -> List[Question]:
        return [q for q in self.questions if q.category == category_key]


@dataclass
class ResponseVector:
    """
    One complete set of answers for a question set.

    Missing answers are rejected, never defaulted: construction raises
    IncompleteResponseError when any entry is None or NaN.

    Attributes:
        values: Integer answers in [0, 4], one per question
    """
    values: List[int]

    def __post_init__(self):
        """Reject missing entries and validate the 0-4 scale."""
        missing = [i for i, v in enumerate(self.values) if _is_missing(v)]
        if missing:
            raise IncompleteResponseError(missing)

        cleaned = []
        for i, v in enumerate(self.values):
            if isinstance(v, bool) or not float(v).is_integer():
                raise InvalidResponseError(f"Answer {i + 1} must be an integer between 0 and 4, got {v}")
            v = int(v)
            if not MIN_VALUE <= v <= MAX_VALUE:
                raise InvalidResponseError(f"Answer {i + 1} must be an integer between 0 and 4, got {v}")
            cleaned.append(v)
        self.values = cleaned

    def __len__(self) -> int:
        return len(self.values)

    def to_array(self) -> np.ndarray:
        return np.array(self.values, dtype=float)

    def average(self) -> float:
        return float(np.mean(self.values))

    @classmethod
    def for_question_set(cls, values: Sequence, question_set: QuestionSet) -> "ResponseVector":
        """
        Build and validate a response vector against a question set.

        Raises:
            InvalidResponseError: If the length doesn't match the question count
            IncompleteResponseError: If any answer is missing
        """
        values = list(values)
        if len(values) != len(question_set):
            raise InvalidResponseError(
                f"Expected {len(question_set)} answers, got {len(values)}"
            )
        return cls(values)


def _is_missing(value) -> bool:
    if value is None:
        return True
    try:
        return math.isnan(value)
    except TypeError:
        return False
