"""Store factory.

Builds the session, A/B decision and flow stores from settings. Supported
backends:
- memory: in-process stores (development/testing)
- sqlite: SQLite file shared by sessions and A/B decisions
- none: nothing outlives the process (same stores as memory)
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from flowpath.config.models import FlowGraph
from flowpath.config.settings import PersistenceConfig, Settings
from flowpath.core.errors import PersistenceError
from flowpath.persistence.decisions import InMemoryAbDecisionStore, SqliteAbDecisionStore
from flowpath.persistence.flows import DirectoryFlowStore, InMemoryFlowStore
from flowpath.persistence.interfaces import IAbDecisionStore, IFlowStore, ISessionStore
from flowpath.persistence.memory import InMemorySessionStore
from flowpath.persistence.sqlite import SqliteSessionStore

logger = logging.getLogger(__name__)


@dataclass
class Stores:
    """The three stores a session router needs."""

    flows: IFlowStore
    sessions: ISessionStore
    decisions: IAbDecisionStore

    async def close(self) -> None:
        await self.sessions.close()
        close_decisions = getattr(self.decisions, "close", None)
        if close_decisions is not None:
            close_decisions()


class StoreFactory:
    """Factory for creating stores based on configuration.

    Each backend has its own creation method; an unknown backend or a
    backend that cannot be opened falls back to memory with a warning.
    """

    @staticmethod
    def create(settings: Settings, flows: dict[str, FlowGraph] | None = None) -> Stores:
        """
        Create stores from settings.

        Args:
            settings: Runtime settings
            flows: Inline flows from the configuration file

        Returns:
            Stores bundle ready to hand to a SessionRouter
        """
        sessions, decisions = StoreFactory._create_state_stores(settings.persistence)
        return Stores(
            flows=StoreFactory.create_flow_store(settings, flows),
            sessions=sessions,
            decisions=decisions,
        )

    @staticmethod
    def create_flow_store(
        settings: Settings, flows: dict[str, FlowGraph] | None = None
    ) -> IFlowStore:
        if settings.flows_dir:
            logger.info(f"Loading flows from directory {settings.flows_dir}")
            return DirectoryFlowStore(
                settings.flows_dir, ttl=settings.flow_cache_ttl, maxsize=settings.flow_cache_size
            )
        return InMemoryFlowStore(flows)

    @staticmethod
    def _create_state_stores(
        config: PersistenceConfig,
    ) -> tuple[ISessionStore, IAbDecisionStore]:
        backend = config.backend

        if backend == "sqlite":
            return StoreFactory._create_sqlite_stores(config)
        elif backend in ("memory", "none"):
            return StoreFactory._create_memory_stores()
        else:
            logger.warning(f"Unsupported persistence backend: {backend}. Using in-memory stores.")
            return StoreFactory._create_memory_stores()

    @staticmethod
    def _create_memory_stores() -> tuple[ISessionStore, IAbDecisionStore]:
        return InMemorySessionStore(), InMemoryAbDecisionStore()

    @staticmethod
    def _create_sqlite_stores(
        config: PersistenceConfig,
    ) -> tuple[ISessionStore, IAbDecisionStore]:
        """
        Create SQLite stores sharing one database file.

        The session store connects lazily; the A/B store opens its
        connection here, so an unusable path is detected up front.
        """
        path = Path(config.path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            decisions = SqliteAbDecisionStore(path)
        except (OSError, PersistenceError) as e:
            logger.warning(
                f"Failed to open SQLite stores at {path}: {e}. Using in-memory stores.",
                extra={"error_type": type(e).__name__},
            )
            return StoreFactory._create_memory_stores()

        logger.info(f"Creating SQLite stores at {path}")
        return SqliteSessionStore(str(path)), decisions
