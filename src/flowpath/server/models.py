"""API Models - Pydantic models for FastAPI endpoints.

Defines request and response schemas for the flowpath REST API.
"""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

from flowpath.config.models import Node
from flowpath.engine.topology import question_type_of
from flowpath.persistence.models import PathEntry, ResponseEntry
from flowpath.runtime.router import StepResult


class StartSessionRequest(BaseModel):
    """Request model for starting a flow session."""

    user_id: str = Field(min_length=1, description="End user taking the flow")


class AdvanceRequest(BaseModel):
    """Request model for moving past the current node."""

    answer: Any = Field(
        default=None,
        description="Answer to the current question: text, number, boolean or list of options",
    )


class UserRequest(BaseModel):
    user_id: str = Field(min_length=1)


class ComponentView(BaseModel):
    id: str
    type: str
    config: dict[str, Any] = Field(default_factory=dict)
    order: int | None = None


class NodeView(BaseModel):
    """A node as shown to the client."""

    id: str
    title: str = ""
    question_type: str | None = Field(
        default=None, description="Type of the question component, if the node asks one"
    )
    components: list[ComponentView] = Field(default_factory=list)
    is_last: bool = Field(description="True when nothing follows this node")

    @classmethod
    def from_node(cls, node: Node) -> "NodeView":
        return cls(
            id=node.id,
            title=node.title,
            question_type=question_type_of(node),
            components=[ComponentView.model_validate(c.model_dump()) for c in node.components],
            is_last=node.is_terminal,
        )


class SessionResponse(BaseModel):
    """Response model for session state after start, next, back or lookup."""

    session_id: str
    user_id: str
    flow_id: str
    step_index: int
    is_completed: bool
    completed_at: datetime | None = None
    node: NodeView | None = None

    @classmethod
    def from_step(cls, step: StepResult) -> "SessionResponse":
        session = step.session
        return cls(
            session_id=session.id,
            user_id=session.user_id,
            flow_id=session.flow_id,
            step_index=session.current_step_index,
            is_completed=session.is_completed,
            completed_at=session.completed_at,
            node=NodeView.from_node(step.node) if step.node else None,
        )


class PathResponse(BaseModel):
    session_id: str
    path: list[PathEntry]


class ResponsesResponse(BaseModel):
    session_id: str
    responses: list[ResponseEntry]


class RestartResponse(BaseModel):
    """Response model for restart endpoint."""

    flow_id: str
    user_id: str
    deleted_sessions: int


class CompletedResponse(BaseModel):
    flow_id: str
    user_id: str
    completed: bool


class HealthResponse(BaseModel):
    """Liveness response."""

    status: Literal["healthy", "starting"]
    version: str
    timestamp: str = Field(default_factory=lambda: datetime.now().isoformat())


class ReadinessResponse(BaseModel):
    """Readiness probe response."""

    ready: bool
    message: str
    checks: dict[str, bool] | None = None


class VersionResponse(BaseModel):
    """Response model for version endpoint."""

    version: str = Field(description="Full version string")
    major: int = Field(description="Major version number")
    minor: int = Field(description="Minor version number")
    patch: str = Field(description="Patch version (may include suffix)")
