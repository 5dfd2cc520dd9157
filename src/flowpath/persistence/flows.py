"""Flow stores: where flow graphs are read from."""

import asyncio
import logging
from pathlib import Path

from cachetools import TTLCache

from flowpath.config.loader import FLOW_FILE_SUFFIXES, ConfigLoader
from flowpath.config.models import FlowGraph

logger = logging.getLogger(__name__)


class InMemoryFlowStore:
    """Serves graphs declared inline in the configuration."""

    def __init__(self, flows: dict[str, FlowGraph] | None = None):
        self._flows: dict[str, FlowGraph] = dict(flows or {})

    def add(self, graph: FlowGraph) -> None:
        self._flows[graph.id] = graph

    def flow_ids(self) -> list[str]:
        return sorted(self._flows)

    async def get_graph(self, flow_id: str) -> FlowGraph | None:
        return self._flows.get(flow_id)


class DirectoryFlowStore:
    """Loads ``<flow_id>.yaml|.yml|.json`` files from a directory.

    Parsed graphs are cached for ``ttl`` seconds so edits to a flow file are
    picked up without a restart while busy flows are not re-parsed on every
    step.
    """

    def __init__(self, directory: Path | str, ttl: float = 5.0, maxsize: int = 256):
        self.directory = Path(directory)
        self._cache: TTLCache[str, FlowGraph] = TTLCache(maxsize=maxsize, ttl=ttl)

    def _file_for(self, flow_id: str) -> Path | None:
        # Flow ids never address anything outside the directory
        if not flow_id or Path(flow_id).name != flow_id or flow_id.startswith("."):
            return None
        for suffix in FLOW_FILE_SUFFIXES:
            candidate = self.directory / f"{flow_id}{suffix}"
            if candidate.is_file():
                return candidate
        return None

    def flow_ids(self) -> list[str]:
        if not self.directory.is_dir():
            return []
        return sorted(
            {p.stem for p in self.directory.iterdir() if p.suffix in FLOW_FILE_SUFFIXES}
        )

    async def get_graph(self, flow_id: str) -> FlowGraph | None:
        cached = self._cache.get(flow_id)
        if cached is not None:
            return cached

        path = self._file_for(flow_id)
        if path is None:
            return None

        graph = await asyncio.to_thread(ConfigLoader.load_graph, path, flow_id)
        self._cache[flow_id] = graph
        logger.debug(f"Loaded flow '{flow_id}' from {path}")
        return graph

    def invalidate(self, flow_id: str | None = None) -> None:
        if flow_id is None:
            self._cache.clear()
        else:
            self._cache.pop(flow_id, None)
