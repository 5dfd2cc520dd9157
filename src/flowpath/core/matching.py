"""Condition matching for branching logic blocks.

Conditions are free text typed by the operator and are expected to only
approximately match the option labels shown to the user, so a condition and
an answer token match when either one contains the other.
"""

from collections.abc import Iterable

from flowpath.core.answers import Answer, normalize_text


def token_matches(condition: str, token: str) -> bool:
    """Substring-symmetric comparison of two normalized strings."""
    return token == condition or condition in token or token in condition


def clean_conditions(conditions: Iterable[str | None]) -> list[str]:
    """Normalize conditions and drop blank ones."""
    cleaned = []
    for condition in conditions:
        if condition is None:
            continue
        text = normalize_text(condition)
        if text:
            cleaned.append(text)
    return cleaned


def matches(conditions: Iterable[str | None], answer: Answer | None, is_multi_select: bool) -> bool:
    """Decide whether an answer satisfies a set of conditions.

    Args:
        conditions: Operator-configured condition strings.
        answer: Normalized answer (None never matches). An empty string
            token is contained in every condition, so it matches.
        is_multi_select: True when the source question is multiple choice or
            checkbox; selects OR semantics, otherwise AND.

    Returns:
        OR: any condition matches any answer token.
        AND: every condition matches some answer token.
        False when no usable condition is configured.
    """
    wanted = clean_conditions(conditions)
    if not wanted or answer is None:
        return False

    tokens = answer.tokens
    if not tokens:
        return False

    if is_multi_select:
        return any(token_matches(c, t) for c in wanted for t in tokens)
    return all(any(token_matches(c, t) for t in tokens) for c in wanted)


def index_of_match(candidates: Iterable[str | None], value: str | None) -> int:
    """Position of the first candidate matching ``value``, or -1.

    Blank candidates keep their position but never match. An empty
    ``value`` matches the first non-blank candidate.
    """
    if value is None:
        return -1
    for i, candidate in enumerate(candidates):
        if candidate is None:
            continue
        text = normalize_text(candidate)
        if text and token_matches(text, value):
            return i
    return -1
