"""Tests for flow stores and the store factory."""

import json

import pytest
import yaml

from flowpath.config.settings import PersistenceConfig, Settings
from flowpath.persistence.decisions import InMemoryAbDecisionStore, SqliteAbDecisionStore
from flowpath.persistence.factory import StoreFactory
from flowpath.persistence.flows import DirectoryFlowStore, InMemoryFlowStore
from flowpath.persistence.memory import InMemorySessionStore
from flowpath.persistence.sqlite import SqliteSessionStore
from tests.factories import make_node

FLOW_DOC = {"title": "Welcome", "nodes": [make_node("hello", ["bye"]), make_node("bye")]}


@pytest.mark.asyncio
async def test_in_memory_flow_store(branching_graph):
    store = InMemoryFlowStore({branching_graph.id: branching_graph})

    assert await store.get_graph(branching_graph.id) is branching_graph
    assert await store.get_graph("missing") is None
    assert store.flow_ids() == [branching_graph.id]


@pytest.mark.asyncio
async def test_directory_store_loads_yaml_and_json(tmp_path):
    # Arrange
    (tmp_path / "welcome.yaml").write_text(yaml.safe_dump(FLOW_DOC))
    (tmp_path / "wrapped.json").write_text(json.dumps({"flow_data": FLOW_DOC, "active": False}))
    store = DirectoryFlowStore(tmp_path)

    # Act
    welcome = await store.get_graph("welcome")
    wrapped = await store.get_graph("wrapped")

    # Assert
    assert welcome.id == "welcome"
    assert welcome.get_node("hello").next_id == "bye"
    assert wrapped.id == "wrapped"
    assert wrapped.active is False
    assert store.flow_ids() == ["welcome", "wrapped"]


@pytest.mark.asyncio
async def test_directory_store_caches_until_invalidated(tmp_path):
    flow_file = tmp_path / "welcome.yaml"
    flow_file.write_text(yaml.safe_dump(FLOW_DOC))
    store = DirectoryFlowStore(tmp_path, ttl=60)

    first = await store.get_graph("welcome")
    flow_file.write_text(yaml.safe_dump({**FLOW_DOC, "title": "Changed"}))

    assert await store.get_graph("welcome") is first
    store.invalidate("welcome")
    assert (await store.get_graph("welcome")).title == "Changed"


@pytest.mark.asyncio
@pytest.mark.parametrize("flow_id", ["missing", "../welcome", ".hidden", ""])
async def test_directory_store_unknown_or_unsafe_ids(tmp_path, flow_id):
    (tmp_path / "welcome.yaml").write_text(yaml.safe_dump(FLOW_DOC))

    assert await DirectoryFlowStore(tmp_path / "sub").get_graph(flow_id) is None


@pytest.mark.asyncio
async def test_factory_memory_backend(branching_graph):
    stores = StoreFactory.create(Settings(), {branching_graph.id: branching_graph})

    assert isinstance(stores.sessions, InMemorySessionStore)
    assert isinstance(stores.decisions, InMemoryAbDecisionStore)
    assert await stores.flows.get_graph(branching_graph.id) is branching_graph
    await stores.close()


@pytest.mark.asyncio
async def test_factory_none_backend_keeps_state_in_memory():
    stores = StoreFactory.create(Settings(persistence=PersistenceConfig(backend="none")))

    assert isinstance(stores.sessions, InMemorySessionStore)
    await stores.close()


@pytest.mark.asyncio
async def test_factory_sqlite_backend(tmp_path):
    db_path = tmp_path / "nested" / "flowpath.db"
    settings = Settings(persistence=PersistenceConfig(backend="sqlite", path=str(db_path)))

    stores = StoreFactory.create(settings)

    assert isinstance(stores.sessions, SqliteSessionStore)
    assert isinstance(stores.decisions, SqliteAbDecisionStore)
    assert db_path.parent.is_dir()
    await stores.close()


@pytest.mark.asyncio
async def test_factory_unknown_backend_falls_back_to_memory(caplog):
    config = PersistenceConfig.model_construct(backend="redis", path="x")
    settings = Settings.model_construct(persistence=config, flows_dir=None)

    with caplog.at_level("WARNING"):
        stores = StoreFactory.create(settings)

    assert isinstance(stores.sessions, InMemorySessionStore)
    assert "Unsupported persistence backend" in caplog.text


def test_factory_uses_directory_store_when_flows_dir_set(tmp_path):
    settings = Settings(flows_dir=str(tmp_path), flow_cache_ttl=1)

    assert isinstance(StoreFactory.create_flow_store(settings), DirectoryFlowStore)
