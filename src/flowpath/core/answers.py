"""Answer normalization.

The renderer hands back a raw value whose shape depends on the question:
a string (short answer, single choice), a list of strings (checkbox or
multiple choice rendered as a list) or a number (scale slider). It is turned
into a tagged ``Answer`` once, at the boundary, so matching and scoring can
dispatch on the variant instead of re-inspecting the raw value.

Normalization never raises: unexpected shapes are coerced with ``str()``.
"""

import math
import re
from dataclasses import dataclass
from typing import Any

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def normalize_text(value: Any) -> str:
    """Trim and lower-case a single value for comparison."""
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (int, float)):
        return format_number(value)
    return str(value).strip().lower()


def format_number(value: int | float) -> str:
    """Render a number the way it was typed (``50.0`` -> ``"50"``)."""
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)


def parse_score(text: str) -> float:
    """Parse a score from free text; unparseable input scores 0.

    Accepts plain numbers first, then a leading integer ("12 points" -> 12).
    """
    try:
        value = float(text)
    except ValueError:
        match = _LEADING_INT.match(text)
        return float(match.group(1)) if match else 0.0
    return value if math.isfinite(value) else 0.0


@dataclass(frozen=True)
class ScalarAnswer:
    """A single free-text or single-choice answer."""

    raw: Any
    text: str

    @property
    def tokens(self) -> tuple[str, ...]:
        return (self.text,)

    @property
    def score(self) -> float:
        return parse_score(self.text)


@dataclass(frozen=True)
class MultiAnswer:
    """A selection set (checkbox or list-valued multiple choice)."""

    raw: Any
    values: tuple[str, ...]

    @property
    def tokens(self) -> tuple[str, ...]:
        return self.values

    @property
    def first(self) -> str | None:
        return self.values[0] if self.values else None

    @property
    def score(self) -> float:
        # Selection sets carry no score
        return 0.0


@dataclass(frozen=True)
class NumericAnswer:
    """A numeric answer, typically from a scale slider."""

    raw: Any
    value: float

    @property
    def text(self) -> str:
        return format_number(self.value)

    @property
    def tokens(self) -> tuple[str, ...]:
        return (self.text,)

    @property
    def score(self) -> float:
        return self.value


Answer = ScalarAnswer | MultiAnswer | NumericAnswer


def normalize(raw: Any) -> Answer | None:
    """Convert a raw renderer value into an ``Answer``.

    Args:
        raw: String, sequence of strings, number, or anything else.

    Returns:
        The tagged answer, or None when no answer was given.

    Examples:
        >>> normalize("  Blue ").text
        'blue'
        >>> normalize(["Blue", " GREEN"]).values
        ('blue', 'green')
        >>> normalize(49).score
        49
    """
    if raw is None:
        return None
    if isinstance(raw, (ScalarAnswer, MultiAnswer, NumericAnswer)):
        return raw
    if isinstance(raw, bool):
        return ScalarAnswer(raw=raw, text=normalize_text(raw))
    if isinstance(raw, (int, float)):
        return NumericAnswer(raw=raw, value=raw)
    if isinstance(raw, (list, tuple, set, frozenset)):
        items = sorted(raw, key=str) if isinstance(raw, (set, frozenset)) else raw
        return MultiAnswer(raw=raw, values=tuple(normalize_text(v) for v in items))
    return ScalarAnswer(raw=raw, text=normalize_text(raw))


def first_text(answer: Answer) -> str | None:
    """The single value used for positional matching (first selection for lists)."""
    match answer:
        case MultiAnswer():
            return answer.first
        case ScalarAnswer():
            return answer.text
        case NumericAnswer():
            return answer.text
