"""A/B decision stores.

Both stores implement an atomic get-or-create: the first draw stored for a
(flow, block, session) key wins and every later call returns it.
"""

import logging
import random
import sqlite3
from collections.abc import Iterable
from pathlib import Path
from threading import Lock

from flowpath.core.errors import PersistenceError
from flowpath.persistence.interfaces import BitSource

logger = logging.getLogger(__name__)

DecisionKey = tuple[str, str, str]


def _default_draw() -> int:
    return 0 if random.random() < 0.5 else 1


def _check_bit(value: int) -> int:
    if value not in (0, 1):
        raise ValueError(f"A/B decision must be 0 or 1, got {value!r}")
    return value


class InMemoryAbDecisionStore:
    """Process-local decision store guarded by a lock."""

    def __init__(self) -> None:
        self._decisions: dict[DecisionKey, int] = {}
        self._lock = Lock()

    def get_or_create(
        self, flow_id: str, block_id: str, session_id: str, draw: BitSource | None = None
    ) -> int:
        key = (flow_id, block_id, session_id)
        with self._lock:
            existing = self._decisions.get(key)
            if existing is not None:
                return existing
            value = _check_bit((draw or _default_draw)())
            self._decisions[key] = value
            logger.debug(
                f"A/B decision {value} drawn for block '{block_id}'",
                extra={"flow_id": flow_id, "block_id": block_id, "session_id": session_id},
            )
            return value

    def get(self, flow_id: str, block_id: str, session_id: str) -> int | None:
        with self._lock:
            return self._decisions.get((flow_id, block_id, session_id))

    def clear(self, flow_id: str, session_ids: Iterable[str]) -> int:
        sessions = set(session_ids)
        with self._lock:
            stale = [k for k in self._decisions if k[0] == flow_id and k[2] in sessions]
            for key in stale:
                del self._decisions[key]
        return len(stale)

    def __len__(self) -> int:
        with self._lock:
            return len(self._decisions)


class SqliteAbDecisionStore:
    """Decision store shared across processes through a SQLite table.

    ``INSERT OR IGNORE`` on the primary key makes the first writer win; the
    value is read back in the same transaction.
    """

    _SCHEMA = """
        CREATE TABLE IF NOT EXISTS ab_decisions (
            flow_id TEXT NOT NULL,
            block_id TEXT NOT NULL,
            session_id TEXT NOT NULL,
            variant INTEGER NOT NULL CHECK (variant IN (0, 1)),
            decided_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            PRIMARY KEY (flow_id, block_id, session_id)
        )
    """

    def __init__(self, path: str | Path):
        self.path = str(path)
        self._lock = Lock()
        try:
            self._conn = sqlite3.connect(self.path, check_same_thread=False, isolation_level=None)
            self._conn.execute(self._SCHEMA)
        except sqlite3.Error as e:
            raise PersistenceError(f"Cannot open A/B decision database {self.path}: {e}") from e

    def get_or_create(
        self, flow_id: str, block_id: str, session_id: str, draw: BitSource | None = None
    ) -> int:
        candidate = _check_bit((draw or _default_draw)())
        try:
            with self._lock:
                self._conn.execute("BEGIN IMMEDIATE")
                try:
                    self._conn.execute(
                        "INSERT OR IGNORE INTO ab_decisions "
                        "(flow_id, block_id, session_id, variant) VALUES (?, ?, ?, ?)",
                        (flow_id, block_id, session_id, candidate),
                    )
                    row = self._conn.execute(
                        "SELECT variant FROM ab_decisions "
                        "WHERE flow_id = ? AND block_id = ? AND session_id = ?",
                        (flow_id, block_id, session_id),
                    ).fetchone()
                    self._conn.execute("COMMIT")
                except sqlite3.Error:
                    self._conn.execute("ROLLBACK")
                    raise
        except sqlite3.Error as e:
            raise PersistenceError(
                f"Failed to store A/B decision for block '{block_id}': {e}"
            ) from e
        return int(row[0])

    def get(self, flow_id: str, block_id: str, session_id: str) -> int | None:
        try:
            with self._lock:
                row = self._conn.execute(
                    "SELECT variant FROM ab_decisions "
                    "WHERE flow_id = ? AND block_id = ? AND session_id = ?",
                    (flow_id, block_id, session_id),
                ).fetchone()
        except sqlite3.Error as e:
            raise PersistenceError(
                f"Failed to read A/B decision for block '{block_id}': {e}"
            ) from e
        return int(row[0]) if row else None

    def clear(self, flow_id: str, session_ids: Iterable[str]) -> int:
        sessions = list(session_ids)
        if not sessions:
            return 0
        placeholders = ", ".join("?" for _ in sessions)
        try:
            with self._lock:
                cursor = self._conn.execute(
                    "DELETE FROM ab_decisions "
                    f"WHERE flow_id = ? AND session_id IN ({placeholders})",
                    (flow_id, *sessions),
                )
        except sqlite3.Error as e:
            raise PersistenceError(
                f"Failed to clear A/B decisions for flow '{flow_id}': {e}"
            ) from e
        return cursor.rowcount

    def close(self) -> None:
        with self._lock:
            self._conn.close()
