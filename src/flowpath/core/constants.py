"""Component and logic block type constants."""

from enum import Enum


class LogicBlockType(str, Enum):
    """Closed set of logic block variants."""

    IF_ELSE = "if-else"
    MULTI_PATH = "multi-path"
    SCORE_THRESHOLD = "score-threshold"
    AB_TEST = "a-b-test"


class ComponentType(str, Enum):
    """Page component types known to the renderer."""

    MULTIPLE_CHOICE = "multiple-choice"
    CHECKBOX_MULTI = "checkbox-multi"
    SHORT_ANSWER = "short-answer"
    LONG_ANSWER = "long-answer"
    SCALE_SLIDER = "scale-slider"
    VIDEO_STEP = "video-step"
    HEADER = "header"
    TEXT_INSTRUCTION = "text-instruction"
    IMAGE = "image"
    LINK = "link"
    FILE_UPLOAD = "file-upload"


# Question-bearing components; a node answers at most one of these
QUESTION_TYPES = frozenset(
    {
        ComponentType.MULTIPLE_CHOICE.value,
        ComponentType.CHECKBOX_MULTI.value,
        ComponentType.SHORT_ANSWER.value,
        ComponentType.SCALE_SLIDER.value,
    }
)

# Question types whose conditions combine with OR semantics
MULTI_SELECT_TYPES = frozenset(
    {ComponentType.MULTIPLE_CHOICE.value, ComponentType.CHECKBOX_MULTI.value}
)

# Session key used for A/B decisions outside a real session (operator preview)
PREVIEW_SESSION_ID = "preview"

# Upper bound on chained logic blocks followed in a single step
MAX_LOGIC_HOPS = 16
