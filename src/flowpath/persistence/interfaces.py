"""Persistence interfaces (Protocols) consumed by the traversal core."""

from collections.abc import Callable, Iterable
from typing import Any, Protocol

from flowpath.config.models import FlowGraph
from flowpath.persistence.models import PathEntry, ResponseEntry, Session

# Draws one uniform bit: 0 or 1
BitSource = Callable[[], int]


class IFlowStore(Protocol):
    """Read access to flow definitions."""

    async def get_graph(self, flow_id: str) -> FlowGraph | None:
        """Load the full graph for a flow, or None if it does not exist."""
        ...


class ISessionStore(Protocol):
    """Session lifecycle plus the append-only path and response trails."""

    async def create_session(self, user_id: str, flow_id: str, entry_node_id: str) -> Session:
        """Create a session positioned at the entry node (step 0)."""
        ...

    async def get_session(self, session_id: str) -> Session | None: ...

    async def list_sessions(
        self, user_id: str | None = None, flow_id: str | None = None
    ) -> list[Session]: ...

    async def update_position(self, session_id: str, node_id: str, step_index: int) -> None:
        """Move the session's current node and step index."""
        ...

    async def complete_session(self, session_id: str) -> None:
        """Mark the session completed with a completion timestamp."""
        ...

    async def delete_completed_sessions(self, user_id: str, flow_id: str) -> int:
        """Remove a user's completed sessions of a flow; returns how many."""
        ...

    async def record_visit(self, session_id: str, node_id: str, order_index: int) -> PathEntry:
        """Append a path entry; repeating the same triple returns the stored entry."""
        ...

    async def record_response(
        self, session_id: str, node_id: str, question_type: str, answer: Any
    ) -> ResponseEntry:
        """Append a response entry."""
        ...

    async def get_path(self, session_id: str) -> list[PathEntry]:
        """Path entries ordered by order index, then visit time."""
        ...

    async def get_responses(self, session_id: str) -> list[ResponseEntry]:
        """Response entries in the order they were given."""
        ...

    async def close(self) -> None: ...


class IAbDecisionStore(Protocol):
    """Session-sticky A/B assignments keyed by (flow, block, session).

    ``get_or_create`` must be atomic: when two callers race on a missing key
    only the first draw is stored and both observe it.
    """

    def get_or_create(
        self, flow_id: str, block_id: str, session_id: str, draw: BitSource | None = None
    ) -> int: ...

    def get(self, flow_id: str, block_id: str, session_id: str) -> int | None: ...

    def clear(self, flow_id: str, session_ids: Iterable[str]) -> int:
        """Drop all decisions of the given sessions for a flow; returns how many."""
        ...
