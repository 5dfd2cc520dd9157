"""Tests for answer normalization into the tagged Answer union."""

import math

import pytest

from flowpath.core.answers import (
    MultiAnswer,
    NumericAnswer,
    ScalarAnswer,
    first_text,
    format_number,
    normalize,
    parse_score,
)


def test_none_means_no_answer():
    assert normalize(None) is None


def test_string_is_trimmed_and_lowercased():
    # Act
    answer = normalize("  Blue Sky ")

    # Assert
    assert isinstance(answer, ScalarAnswer)
    assert answer.text == "blue sky"
    assert answer.raw == "  Blue Sky "


def test_list_becomes_multi_answer():
    # Act
    answer = normalize(["Red", " GREEN ", ""])

    # Assert
    assert isinstance(answer, MultiAnswer)
    assert answer.values == ("red", "green", "")
    assert answer.tokens == ("red", "green", "")
    assert answer.first == "red"


def test_number_becomes_numeric_answer():
    answer = normalize(49.0)

    assert isinstance(answer, NumericAnswer)
    assert answer.score == 49.0
    assert answer.text == "49"


def test_bool_is_a_scalar_not_a_number():
    answer = normalize(True)

    assert isinstance(answer, ScalarAnswer)
    assert answer.text == "true"


def test_unexpected_shape_is_coerced_with_str():
    """Dicts and other objects never raise, they become text."""
    answer = normalize({"value": 1})

    assert isinstance(answer, ScalarAnswer)
    assert answer.text == "{'value': 1}"


def test_normalize_is_idempotent_on_answers():
    answer = normalize("Yes")

    assert normalize(answer) is answer


def test_empty_string_keeps_its_token():
    answer = normalize("   ")

    assert answer.text == ""
    assert answer.tokens == ("",)


@pytest.mark.parametrize(
    "text,expected",
    [
        ("50", 50.0),
        (" 7.5 ", 7.5),
        ("12 points", 12.0),
        ("-3 below", -3.0),
        ("abc", 0.0),
        ("", 0.0),
        ("inf", 0.0),
    ],
)
def test_parse_score(text, expected):
    assert parse_score(text) == expected


def test_scores_by_variant():
    assert normalize("80").score == 80.0
    assert normalize(["65", "10"]).score == 0.0
    assert normalize([]).score == 0.0
    assert normalize(33).score == 33


def test_format_number_keeps_typed_shape():
    assert format_number(50.0) == "50"
    assert format_number(2.5) == "2.5"
    assert format_number(7) == "7"
    assert format_number(math.inf) == "inf"


def test_first_text_per_variant():
    assert first_text(normalize("A")) == "a"
    assert first_text(normalize(["B", "C"])) == "b"
    assert first_text(normalize(3)) == "3"
    assert first_text(normalize([])) is None
