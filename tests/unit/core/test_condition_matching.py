"""Tests for substring-symmetric condition matching."""

from flowpath.core.answers import normalize
from flowpath.core.matching import clean_conditions, index_of_match, matches, token_matches


def test_token_matches_either_direction():
    assert token_matches("yes", "yes")
    assert token_matches("yes", "yes please")
    assert token_matches("yes please", "yes")
    assert not token_matches("yes", "no")


def test_clean_conditions_drops_blanks_and_normalizes():
    assert clean_conditions([" Yes ", "", None, "   ", "NO"]) == ["yes", "no"]


def test_no_conditions_never_match():
    assert not matches([], normalize("anything"), is_multi_select=False)
    assert not matches(["", None], normalize("anything"), is_multi_select=True)


def test_missing_answer_never_matches():
    assert not matches(["yes"], None, is_multi_select=False)


def test_empty_answer_is_contained_in_every_condition():
    """"" is a substring of any condition, so a blank answer matches."""
    assert matches(["blue"], normalize(""), is_multi_select=False)
    assert matches(["yes", "no"], normalize("   "), is_multi_select=False)
    assert matches(["red"], normalize(["", "green"]), is_multi_select=True)


def test_no_selection_matches_nothing():
    assert not matches(["yes"], normalize([]), is_multi_select=True)


def test_single_condition_substring_match():
    assert matches(["Yes"], normalize("yes, definitely"), is_multi_select=False)


def test_or_semantics_for_multi_select():
    """Any condition matching any selection is enough."""
    # Arrange
    answer = normalize(["Red"])

    # Act & Assert
    assert matches(["blue", "red"], answer, is_multi_select=True)
    assert not matches(["blue", "green"], answer, is_multi_select=True)


def test_and_semantics_for_other_questions():
    """Every condition must match some token."""
    assert matches(["red", "blue"], normalize(["red", "blue"]), is_multi_select=False)
    assert not matches(["red", "blue"], normalize(["red"]), is_multi_select=False)


def test_and_semantics_on_free_text():
    assert matches(["new"], normalize("Brand new user"), is_multi_select=False)
    assert not matches(["new", "admin"], normalize("Brand new user"), is_multi_select=False)


def test_numeric_answer_matches_as_text():
    assert matches(["5"], normalize(5.0), is_multi_select=False)


def test_index_of_match_returns_first_position():
    assert index_of_match(["red", "blue", "blue sky"], "blue") == 1
    assert index_of_match(["", None, "green"], "green") == 2
    assert index_of_match(["red"], "purple") == -1
    assert index_of_match(["red"], None) == -1


def test_index_of_match_empty_value_takes_first_usable_candidate():
    assert index_of_match(["", None, "green", "red"], "") == 2
    assert index_of_match([None, ""], "") == -1
