"""Core types: answers, matching, constants and errors."""

from flowpath.core.answers import Answer, MultiAnswer, NumericAnswer, ScalarAnswer, normalize
from flowpath.core.matching import matches

__all__ = [
    "Answer",
    "MultiAnswer",
    "NumericAnswer",
    "ScalarAnswer",
    "matches",
    "normalize",
]
