"""Tests for question sets and response validation."""

import math

import numpy as np
import pytest

from relationship_risk.errors import IncompleteResponseError, InvalidResponseError
from relationship_risk.questionnaire import (
    Polarity,
    Question,
    QuestionSet,
    ResponseVector,
    get_question_set,
)


class TestQuestionSets:
    def test_core15_shape(self, core15) -> None:
        assert len(core15) == 15
        assert core15.feature_names()[0] == "q1"
        assert core15.feature_names()[-1] == "q15"
        assert not core15.negative_mask.any()

    def test_core15_weights(self, core15) -> None:
        assert core15.weights[0] == 1.0
        assert core15.weights[1] == 0.9
        assert core15.weight_map[14] == 0.4

    def test_extended54_polarity_from_category(self, extended54) -> None:
        assert len(extended54) == 54
        for question in extended54:
            expected = question.category in ("challenges", "safety")
            assert question.is_negative == expected
        # Harmful-pattern items are the last 24
        assert extended54.negative_mask[30:].all()
        assert not extended54.negative_mask[:30].any()

    def test_every_question_has_known_category(self, extended54) -> None:
        keys = {c.key for c in extended54.categories}
        assert {q.category for q in extended54} <= keys
        assert sum(len(extended54.questions_in(k)) for k in keys) == 54

    def test_unknown_set(self) -> None:
        with pytest.raises(ValueError, match="Unknown question set"):
            get_question_set("core99")


class TestQuestion:
    def test_weight_bounds(self) -> None:
        with pytest.raises(ValueError, match="weight must be in"):
            Question(index=0, text="x", category="c", weight=0.0)
        with pytest.raises(ValueError, match="weight must be in"):
            Question(index=0, text="x", category="c", weight=1.5)

    def test_string_polarity_coerced(self) -> None:
        q = Question(index=0, text="x", category="c", polarity="negative")
        assert q.polarity is Polarity.NEGATIVE

    def test_effective_value(self) -> None:
        positive = Question(index=0, text="x", category="c")
        negative = Question(index=1, text="y", category="c", polarity=Polarity.NEGATIVE)
        assert positive.effective_value(3) == 3
        assert negative.effective_value(3) == 1

    def test_indices_must_be_contiguous(self) -> None:
        questions = (
            Question(index=0, text="a", category="c"),
            Question(index=2, text="b", category="c"),
        )
        with pytest.raises(ValueError, match="has index 2"):
            QuestionSet("broken", questions)


class TestResponseVector:
    def test_valid(self) -> None:
        vector = ResponseVector([0, 1, 2, 3, 4])
        np.testing.assert_array_equal(vector.to_array(), [0.0, 1.0, 2.0, 3.0, 4.0])
        assert vector.average() == 2.0

    def test_missing_answers_rejected(self) -> None:
        with pytest.raises(IncompleteResponseError) as exc_info:
            ResponseVector([2, None, 3, math.nan])
        assert exc_info.value.missing_indices == [1, 3]
        assert str(exc_info.value) == "Please answer all questions before analyzing."

    def test_out_of_range(self) -> None:
        with pytest.raises(InvalidResponseError, match="between 0 and 4"):
            ResponseVector([2, 5])
        with pytest.raises(InvalidResponseError, match="between 0 and 4"):
            ResponseVector([-1, 2])

    def test_non_integer(self) -> None:
        with pytest.raises(InvalidResponseError):
            ResponseVector([2.5, 2])
        with pytest.raises(InvalidResponseError):
            ResponseVector([True, 2])

    def test_integral_floats_accepted(self) -> None:
        assert ResponseVector([2.0, 3.0]).values == [2, 3]

    def test_length_checked_against_set(self, core15) -> None:
        with pytest.raises(InvalidResponseError, match="Expected 15 answers, got 3"):
            ResponseVector.for_question_set([1, 2, 3], core15)
