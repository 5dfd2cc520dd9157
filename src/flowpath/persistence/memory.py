"""In-memory session store for tests and previews."""

import asyncio
import uuid
from typing import Any

from flowpath.persistence.models import PathEntry, ResponseEntry, Session, utcnow


class InMemorySessionStore:
    """Keeps sessions, path and response trails in process memory.

    Provides complete isolation between instances, which makes it ideal for
    tests. A single asyncio lock serializes writes.
    """

    def __init__(self) -> None:
        self._sessions: dict[str, Session] = {}
        self._paths: dict[str, dict[tuple[str, int], PathEntry]] = {}
        self._responses: dict[str, list[ResponseEntry]] = {}
        self._lock = asyncio.Lock()

    async def create_session(self, user_id: str, flow_id: str, entry_node_id: str) -> Session:
        session = Session(
            id=str(uuid.uuid4()),
            user_id=user_id,
            flow_id=flow_id,
            current_node_id=entry_node_id,
            current_step_index=0,
        )
        async with self._lock:
            self._sessions[session.id] = session
            self._paths[session.id] = {}
            self._responses[session.id] = []
        return session.model_copy()

    async def get_session(self, session_id: str) -> Session | None:
        session = self._sessions.get(session_id)
        return session.model_copy() if session else None

    async def list_sessions(
        self, user_id: str | None = None, flow_id: str | None = None
    ) -> list[Session]:
        sessions = [
            s.model_copy()
            for s in self._sessions.values()
            if (user_id is None or s.user_id == user_id)
            and (flow_id is None or s.flow_id == flow_id)
        ]
        return sorted(sessions, key=lambda s: s.started_at, reverse=True)

    async def update_position(self, session_id: str, node_id: str, step_index: int) -> None:
        async with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return
            self._sessions[session_id] = session.model_copy(
                update={"current_node_id": node_id, "current_step_index": step_index}
            )

    async def complete_session(self, session_id: str) -> None:
        async with self._lock:
            session = self._sessions.get(session_id)
            if session is None or session.is_completed:
                return
            self._sessions[session_id] = session.model_copy(
                update={"is_completed": True, "completed_at": utcnow()}
            )

    async def delete_completed_sessions(self, user_id: str, flow_id: str) -> int:
        async with self._lock:
            doomed = [
                s.id
                for s in self._sessions.values()
                if s.user_id == user_id and s.flow_id == flow_id and s.is_completed
            ]
            for session_id in doomed:
                del self._sessions[session_id]
                self._paths.pop(session_id, None)
                self._responses.pop(session_id, None)
        return len(doomed)

    async def record_visit(self, session_id: str, node_id: str, order_index: int) -> PathEntry:
        async with self._lock:
            path = self._paths.setdefault(session_id, {})
            key = (node_id, order_index)
            if key not in path:
                path[key] = PathEntry(
                    session_id=session_id, node_id=node_id, order_index=order_index
                )
            return path[key]

    async def record_response(
        self, session_id: str, node_id: str, question_type: str, answer: Any
    ) -> ResponseEntry:
        entry = ResponseEntry(
            session_id=session_id, node_id=node_id, question_type=question_type, answer=answer
        )
        async with self._lock:
            self._responses.setdefault(session_id, []).append(entry)
        return entry

    async def get_path(self, session_id: str) -> list[PathEntry]:
        entries = self._paths.get(session_id, {}).values()
        return sorted(entries, key=lambda e: (e.order_index, e.visited_at))

    async def get_responses(self, session_id: str) -> list[ResponseEntry]:
        return list(self._responses.get(session_id, []))

    async def close(self) -> None:
        return None
