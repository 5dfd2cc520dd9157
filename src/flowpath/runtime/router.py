"""Session router: drives one user's traversal of a flow.

Combines the graph walker with the session, A/B decision and flow stores.
Reads are required; trail and position writes are best effort so a failing
store never blocks navigation.
"""

import asyncio
import logging
from collections.abc import Awaitable
from typing import Any

from pydantic import BaseModel

from flowpath.config.models import FlowGraph, Node
from flowpath.core.constants import QUESTION_TYPES
from flowpath.core.errors import (
    AnswerRequiredError,
    FlowConfigurationError,
    FlowInactiveError,
    FlowNotFoundError,
    PersistenceError,
    SessionCompletedError,
    SessionNotFoundError,
    UnsupportedTopologyError,
)
from flowpath.engine.evaluator import LogicBlockEvaluator
from flowpath.engine.walker import GraphWalker
from flowpath.persistence.decisions import InMemoryAbDecisionStore
from flowpath.persistence.factory import Stores
from flowpath.persistence.interfaces import IAbDecisionStore, IFlowStore, ISessionStore
from flowpath.persistence.models import PathEntry, ResponseEntry, Session, utcnow

logger = logging.getLogger(__name__)


class StepResult(BaseModel):
    """Where a session stands after a navigation call."""

    session: Session
    node: Node | None = None

    @property
    def is_completed(self) -> bool:
        return self.session.is_completed

    @property
    def step_index(self) -> int:
        return self.session.current_step_index


class SessionRouter:
    """
    Orchestrates start, advance and back for end-user sessions.

    Dependencies are injected; the walker defaults to one whose A/B
    evaluations go through the same decision store the router clears
    when a user starts over.
    """

    def __init__(
        self,
        flows: IFlowStore,
        sessions: ISessionStore,
        decisions: IAbDecisionStore | None = None,
        walker: GraphWalker | None = None,
    ) -> None:
        self.flows = flows
        self.sessions = sessions
        self.decisions = decisions if decisions is not None else InMemoryAbDecisionStore()
        self.walker = walker or GraphWalker(LogicBlockEvaluator(self.decisions))

    @classmethod
    def from_stores(cls, stores: Stores, walker: GraphWalker | None = None) -> "SessionRouter":
        return cls(stores.flows, stores.sessions, stores.decisions, walker)

    async def _safe(self, operation: str, write: Awaitable[Any], **context: Any) -> Any:
        """Await a store write, logging instead of raising on failure."""
        try:
            return await write
        except PersistenceError as e:
            logger.warning(f"Failed to {operation}: {e}", extra=context)
        except Exception as e:
            logger.error(
                f"Unexpected error while trying to {operation}: {e}", exc_info=True, extra=context
            )
        return None

    async def _graph(self, flow_id: str) -> FlowGraph:
        graph = await self.flows.get_graph(flow_id)
        if graph is None:
            raise FlowNotFoundError(f"Flow '{flow_id}' not found")
        return graph

    async def _session(self, session_id: str) -> Session:
        session = await self.sessions.get_session(session_id)
        if session is None:
            raise SessionNotFoundError(f"Session '{session_id}' not found")
        return session

    async def start(self, user_id: str, flow_id: str) -> StepResult:
        """
        Start a new session at the flow's entry node.

        A/B assignments held by the user's earlier sessions of this flow are
        dropped so a fresh start draws again.

        Raises:
            FlowNotFoundError: If the flow does not exist.
            FlowInactiveError: If the flow is not active.
            FlowConfigurationError: If the flow has no nodes.
        """
        graph = await self._graph(flow_id)
        if not graph.active:
            raise FlowInactiveError(f"Flow '{flow_id}' is not active")

        entry = self.walker.entry_node(graph)
        if entry is None:
            raise FlowConfigurationError(f"Flow '{flow_id}' has no nodes")

        previous = await self.sessions.list_sessions(user_id=user_id, flow_id=flow_id)
        if previous:
            try:
                cleared = await asyncio.to_thread(
                    self.decisions.clear, flow_id, [s.id for s in previous]
                )
                logger.debug(f"Cleared {cleared} A/B decisions for user {user_id} on '{flow_id}'")
            except PersistenceError as e:
                logger.warning(
                    f"Failed to clear A/B decisions: {e}",
                    extra={"flow_id": flow_id, "user_id": user_id},
                )

        session = await self.sessions.create_session(user_id, flow_id, entry.id)
        await self._safe(
            "record entry visit",
            self.sessions.record_visit(session.id, entry.id, 0),
            session_id=session.id,
            node_id=entry.id,
        )

        logger.info(
            f"Session {session.id} started on flow '{flow_id}'",
            extra={"session_id": session.id, "flow_id": flow_id, "user_id": user_id},
        )
        return StepResult(session=session, node=entry)

    async def current(self, session_id: str) -> StepResult:
        session = await self._session(session_id)
        graph = await self._graph(session.flow_id)
        node = graph.get_node(session.current_node_id) if session.current_node_id else None
        return StepResult(session=session, node=node)

    async def advance(self, session_id: str, answer: Any = None) -> StepResult:
        """
        Move past the current node.

        Args:
            session_id: Session to advance
            answer: Answer to the current node's question, if it has one

        Returns:
            StepResult at the next node, or a completed result with no node

        Raises:
            SessionNotFoundError: If the session does not exist.
            SessionCompletedError: If the session already finished.
            AnswerRequiredError: If no answer was given and the current node
                asks a question or leads into a logic block that routes on one.
        """
        session = await self._session(session_id)
        if session.is_completed:
            raise SessionCompletedError(f"Session '{session_id}' is already completed")

        graph = await self._graph(session.flow_id)
        node = graph.get_node(session.current_node_id) if session.current_node_id else None
        question_type = self.walker.question_type_of(node)

        if question_type in QUESTION_TYPES:
            if answer is None:
                raise AnswerRequiredError(f"Node '{node.id}' requires an answer")
            await self._safe(
                "record response",
                self.sessions.record_response(session.id, node.id, question_type, answer),
                session_id=session.id,
                node_id=node.id,
            )
        elif answer is None and node is not None:
            if await asyncio.to_thread(self.walker.awaits_answer, graph, node.id, session.id):
                raise AnswerRequiredError(
                    f"Node '{node.id}' leads into a logic block that needs an answer"
                )

        next_node = None
        if node is not None:
            # A/B assignments may hit the decision database; keep it off the event loop
            next_node = await asyncio.to_thread(
                self.walker.next_node, graph, node.id, answer, session.id
            )

        if next_node is None:
            await self._safe(
                "complete session",
                self.sessions.complete_session(session.id),
                session_id=session.id,
            )
            logger.info(
                f"Session {session.id} completed",
                extra={"session_id": session.id, "flow_id": session.flow_id},
            )
            completed = session.model_copy(update={"is_completed": True, "completed_at": utcnow()})
            return StepResult(session=completed, node=None)

        return await self._move_to(session, next_node, session.current_step_index + 1)

    async def back(self, session_id: str) -> StepResult:
        """
        Move to the node before the current one.

        On a node reached from several places the recorded path decides.
        At the entry node the session stays where it is.
        """
        session = await self._session(session_id)
        if session.is_completed:
            raise SessionCompletedError(f"Session '{session_id}' is already completed")

        graph = await self._graph(session.flow_id)
        current_id = session.current_node_id
        if current_id is None:
            return StepResult(session=session)

        try:
            previous = self.walker.prev_node(graph, current_id)
        except UnsupportedTopologyError as e:
            logger.debug(f"{e}; falling back to recorded path", extra={"session_id": session.id})
            previous = await self._previous_from_path(graph, session)

        if previous is None:
            return StepResult(session=session, node=graph.get_node(current_id))

        return await self._move_to(session, previous, max(session.current_step_index - 1, 0))

    async def _previous_from_path(self, graph: FlowGraph, session: Session) -> Node | None:
        """Latest node recorded before the current step that still exists."""
        path = await self.sessions.get_path(session.id)
        earlier = [
            entry
            for entry in path
            if entry.order_index < session.current_step_index and graph.is_node(entry.node_id)
        ]
        if not earlier:
            return None
        latest = max(earlier, key=lambda e: (e.order_index, e.visited_at))
        return graph.get_node(latest.node_id)

    async def _move_to(self, session: Session, node: Node, step_index: int) -> StepResult:
        await self._safe(
            "record visit",
            self.sessions.record_visit(session.id, node.id, step_index),
            session_id=session.id,
            node_id=node.id,
        )
        await self._safe(
            "update position",
            self.sessions.update_position(session.id, node.id, step_index),
            session_id=session.id,
            node_id=node.id,
        )
        moved = session.model_copy(
            update={"current_node_id": node.id, "current_step_index": step_index}
        )
        return StepResult(session=moved, node=node)

    async def path(self, session_id: str) -> list[PathEntry]:
        await self._session(session_id)
        return await self.sessions.get_path(session_id)

    async def responses(self, session_id: str) -> list[ResponseEntry]:
        await self._session(session_id)
        return await self.sessions.get_responses(session_id)

    async def restart(self, user_id: str, flow_id: str) -> int:
        """Delete the user's completed sessions of a flow so it can be taken again."""
        completed = [
            s.id
            for s in await self.sessions.list_sessions(user_id=user_id, flow_id=flow_id)
            if s.is_completed
        ]
        if completed:
            try:
                await asyncio.to_thread(self.decisions.clear, flow_id, completed)
            except PersistenceError as e:
                logger.warning(
                    f"Failed to clear A/B decisions: {e}",
                    extra={"flow_id": flow_id, "user_id": user_id},
                )
        deleted = await self.sessions.delete_completed_sessions(user_id, flow_id)
        logger.info(f"Removed {deleted} completed sessions of '{flow_id}' for user {user_id}")
        return deleted

    async def has_completed(self, user_id: str, flow_id: str) -> bool:
        sessions = await self.sessions.list_sessions(user_id=user_id, flow_id=flow_id)
        return any(s.is_completed for s in sessions)
