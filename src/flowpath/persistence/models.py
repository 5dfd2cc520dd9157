"""Session records kept by the persistence layer.

Path and response entries are append-only: once stored they are never
modified.
"""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Session(BaseModel):
    """One end user's traversal of one flow."""

    id: str
    user_id: str
    flow_id: str
    current_node_id: str | None = None
    current_step_index: int = 0
    is_completed: bool = False
    started_at: datetime = Field(default_factory=utcnow)
    completed_at: datetime | None = None


class PathEntry(BaseModel):
    """A node visited during a session, at its position in the path."""

    model_config = ConfigDict(frozen=True)

    session_id: str
    node_id: str
    order_index: int
    visited_at: datetime = Field(default_factory=utcnow)


class ResponseEntry(BaseModel):
    """An answer given at a question node."""

    model_config = ConfigDict(frozen=True)

    session_id: str
    node_id: str
    question_type: str
    answer: Any
    answered_at: datetime = Field(default_factory=utcnow)
