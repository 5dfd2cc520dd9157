"""SQLite session store (async, via aiosqlite).

Mirrors the hosted schema: ``flow_sessions``, ``flow_paths`` (unique on
session, node and order index) and ``flow_responses`` with JSON answers.
"""

import asyncio
import json
import logging
import uuid
from typing import Any

import aiosqlite

from flowpath.core.errors import PersistenceError
from flowpath.persistence.models import PathEntry, ResponseEntry, Session, utcnow

logger = logging.getLogger(__name__)


def _json_default(value: Any) -> Any:
    """Encode answer values JSON has no type for (sets become sorted lists)."""
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=str)
    return str(value)


_SCHEMA = """
CREATE TABLE IF NOT EXISTS flow_sessions (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    flow_id TEXT NOT NULL,
    current_node_id TEXT,
    current_step_index INTEGER NOT NULL DEFAULT 0,
    is_completed INTEGER NOT NULL DEFAULT 0,
    started_at TEXT NOT NULL,
    completed_at TEXT
);

CREATE TABLE IF NOT EXISTS flow_paths (
    session_id TEXT NOT NULL REFERENCES flow_sessions(id) ON DELETE CASCADE,
    node_id TEXT NOT NULL,
    order_index INTEGER NOT NULL,
    visited_at TEXT NOT NULL,
    UNIQUE (session_id, node_id, order_index)
);

CREATE TABLE IF NOT EXISTS flow_responses (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    session_id TEXT NOT NULL REFERENCES flow_sessions(id) ON DELETE CASCADE,
    node_id TEXT NOT NULL,
    question_type TEXT NOT NULL,
    answer TEXT NOT NULL,
    answered_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_flow_sessions_user_flow ON flow_sessions(user_id, flow_id);
CREATE INDEX IF NOT EXISTS idx_flow_paths_order ON flow_paths(session_id, order_index);
CREATE INDEX IF NOT EXISTS idx_flow_responses_session_id ON flow_responses(session_id);
"""

_SESSION_COLUMNS = (
    "id, user_id, flow_id, current_node_id, current_step_index, "
    "is_completed, started_at, completed_at"
)


def _session_from_row(row: aiosqlite.Row) -> Session:
    return Session.model_validate(
        {
            "id": row["id"],
            "user_id": row["user_id"],
            "flow_id": row["flow_id"],
            "current_node_id": row["current_node_id"],
            "current_step_index": row["current_step_index"],
            "is_completed": bool(row["is_completed"]),
            "started_at": row["started_at"],
            "completed_at": row["completed_at"],
        }
    )


class SqliteSessionStore:
    """Session store backed by a SQLite database file.

    The connection is opened lazily on first use; call ``close()`` when done.
    """

    def __init__(self, path: str):
        self.path = path
        self._conn: aiosqlite.Connection | None = None
        self._connect_lock = asyncio.Lock()

    async def _db(self) -> aiosqlite.Connection:
        if self._conn is not None:
            return self._conn
        async with self._connect_lock:
            if self._conn is None:
                try:
                    conn = await aiosqlite.connect(self.path)
                    conn.row_factory = aiosqlite.Row
                    await conn.execute("PRAGMA foreign_keys = ON")
                    await conn.executescript(_SCHEMA)
                    await conn.commit()
                except (aiosqlite.Error, OSError) as e:
                    raise PersistenceError(f"Cannot open session database {self.path}: {e}") from e
                self._conn = conn
                logger.info(f"Session database ready at {self.path}")
        return self._conn

    async def _write(self, sql: str, params: tuple[Any, ...]) -> int:
        db = await self._db()
        try:
            cursor = await db.execute(sql, params)
            await db.commit()
        except aiosqlite.Error as e:
            raise PersistenceError(f"Session database write failed: {e}") from e
        return cursor.rowcount

    async def _fetch(self, sql: str, params: tuple[Any, ...]) -> list[aiosqlite.Row]:
        db = await self._db()
        try:
            async with db.execute(sql, params) as cursor:
                return list(await cursor.fetchall())
        except aiosqlite.Error as e:
            raise PersistenceError(f"Session database read failed: {e}") from e

    async def create_session(self, user_id: str, flow_id: str, entry_node_id: str) -> Session:
        session = Session(
            id=str(uuid.uuid4()),
            user_id=user_id,
            flow_id=flow_id,
            current_node_id=entry_node_id,
            current_step_index=0,
        )
        await self._write(
            f"INSERT INTO flow_sessions ({_SESSION_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
            (
                session.id,
                session.user_id,
                session.flow_id,
                session.current_node_id,
                session.current_step_index,
                0,
                session.started_at.isoformat(),
                None,
            ),
        )
        return session

    async def get_session(self, session_id: str) -> Session | None:
        rows = await self._fetch(
            f"SELECT {_SESSION_COLUMNS} FROM flow_sessions WHERE id = ?", (session_id,)
        )
        return _session_from_row(rows[0]) if rows else None

    async def list_sessions(
        self, user_id: str | None = None, flow_id: str | None = None
    ) -> list[Session]:
        clauses, params = [], []
        if user_id is not None:
            clauses.append("user_id = ?")
            params.append(user_id)
        if flow_id is not None:
            clauses.append("flow_id = ?")
            params.append(flow_id)
        where = f" WHERE {' AND '.join(clauses)}" if clauses else ""
        rows = await self._fetch(
            f"SELECT {_SESSION_COLUMNS} FROM flow_sessions{where} ORDER BY started_at DESC",
            tuple(params),
        )
        return [_session_from_row(r) for r in rows]

    async def update_position(self, session_id: str, node_id: str, step_index: int) -> None:
        await self._write(
            "UPDATE flow_sessions SET current_node_id = ?, current_step_index = ? WHERE id = ?",
            (node_id, step_index, session_id),
        )

    async def complete_session(self, session_id: str) -> None:
        await self._write(
            "UPDATE flow_sessions SET is_completed = 1, completed_at = ? "
            "WHERE id = ? AND is_completed = 0",
            (utcnow().isoformat(), session_id),
        )

    async def delete_completed_sessions(self, user_id: str, flow_id: str) -> int:
        return await self._write(
            "DELETE FROM flow_sessions WHERE user_id = ? AND flow_id = ? AND is_completed = 1",
            (user_id, flow_id),
        )

    async def record_visit(self, session_id: str, node_id: str, order_index: int) -> PathEntry:
        await self._write(
            "INSERT OR IGNORE INTO flow_paths (session_id, node_id, order_index, visited_at) "
            "VALUES (?, ?, ?, ?)",
            (session_id, node_id, order_index, utcnow().isoformat()),
        )
        rows = await self._fetch(
            "SELECT session_id, node_id, order_index, visited_at FROM flow_paths "
            "WHERE session_id = ? AND node_id = ? AND order_index = ?",
            (session_id, node_id, order_index),
        )
        return PathEntry.model_validate(dict(rows[0]))

    async def record_response(
        self, session_id: str, node_id: str, question_type: str, answer: Any
    ) -> ResponseEntry:
        entry = ResponseEntry(
            session_id=session_id, node_id=node_id, question_type=question_type, answer=answer
        )
        await self._write(
            "INSERT INTO flow_responses (session_id, node_id, question_type, answer, answered_at) "
            "VALUES (?, ?, ?, ?, ?)",
            (
                session_id,
                node_id,
                question_type,
                json.dumps(answer, default=_json_default),
                entry.answered_at.isoformat(),
            ),
        )
        return entry

    async def get_path(self, session_id: str) -> list[PathEntry]:
        rows = await self._fetch(
            "SELECT session_id, node_id, order_index, visited_at FROM flow_paths "
            "WHERE session_id = ? ORDER BY order_index ASC, visited_at ASC",
            (session_id,),
        )
        return [PathEntry.model_validate(dict(r)) for r in rows]

    async def get_responses(self, session_id: str) -> list[ResponseEntry]:
        rows = await self._fetch(
            "SELECT session_id, node_id, question_type, answer, answered_at FROM flow_responses "
            "WHERE session_id = ? ORDER BY id ASC",
            (session_id,),
        )
        return [
            ResponseEntry.model_validate({**dict(r), "answer": json.loads(r["answer"])})
            for r in rows
        ]

    async def close(self) -> None:
        if self._conn is not None:
            await self._conn.close()
            self._conn = None
