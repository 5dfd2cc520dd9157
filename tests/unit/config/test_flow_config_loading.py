"""Tests for configuration models and ConfigLoader."""

import pytest
import yaml

from flowpath.config.loader import ConfigLoader
from flowpath.config.models import FlowGraph, FlowpathConfig, Node
from flowpath.core.errors import ConfigError
from tests.factories import make_block, make_node

CONFIG_DOC = {
    "version": "1.0",
    "settings": {"persistence": {"backend": "sqlite", "path": "data/flowpath.db"}},
    "flows": {
        "onboarding": {
            "title": "Onboarding",
            "nodes": [
                make_node("A", ["lb1"], question="multiple-choice", options=["Yes", "No"]),
                make_node("B"),
                make_node("C"),
            ],
            "logicBlocks": [make_block("lb1", "if-else", ["B", "C"], conditions=["yes"])],
        }
    },
}


def test_flow_ids_come_from_mapping_keys():
    config = FlowpathConfig.model_validate(CONFIG_DOC)

    assert config.flows["onboarding"].id == "onboarding"
    assert config.settings.persistence.backend == "sqlite"


def test_unsupported_version_is_rejected():
    with pytest.raises(ValueError, match="Unsupported DSL version"):
        FlowpathConfig.model_validate({**CONFIG_DOC, "version": "9.9"})


def test_load_single_file(tmp_path):
    # Arrange
    path = tmp_path / "flowpath.yaml"
    path.write_text(yaml.safe_dump(CONFIG_DOC))

    # Act
    config = ConfigLoader.load(path)

    # Assert
    graph = config.flows["onboarding"]
    assert graph.get_block("lb1").config.conditions == ["yes"]
    assert graph.is_node("A") and graph.is_block("lb1")


def test_load_directory_merges_yaml_files(tmp_path):
    (tmp_path / "flows.yaml").write_text(yaml.safe_dump({"flows": CONFIG_DOC["flows"]}))
    (tmp_path / "settings.yaml").write_text(yaml.safe_dump({"settings": {"log_level": "DEBUG"}}))

    config = ConfigLoader.load(tmp_path)

    assert "onboarding" in config.flows
    assert config.settings.log_level == "DEBUG"


def test_load_missing_path_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        ConfigLoader.load(tmp_path / "nope.yaml")


def test_load_invalid_config_raises_config_error(tmp_path):
    path = tmp_path / "flowpath.yaml"
    path.write_text(yaml.safe_dump({"flows": {"bad": {"nodes": [{"title": "no id"}]}}}))

    with pytest.raises(ConfigError):
        ConfigLoader.load(path)


def test_load_flows_from_single_flow_file(tmp_path):
    path = tmp_path / "welcome.yaml"
    path.write_text(yaml.safe_dump({"nodes": [make_node("hi")]}))

    flows = ConfigLoader.load_flows(path)

    assert list(flows) == ["welcome"]


def test_load_flows_includes_flows_dir(tmp_path):
    flows_dir = tmp_path / "flows"
    flows_dir.mkdir()
    (flows_dir / "extra.yaml").write_text(yaml.safe_dump({"nodes": [make_node("x")]}))
    config_path = tmp_path / "flowpath.yaml"
    config_path.write_text(yaml.safe_dump({**CONFIG_DOC, "settings": {"flows_dir": "flows"}}))

    flows = ConfigLoader.load_flows(config_path)

    assert set(flows) == {"onboarding", "extra"}


def test_components_accept_stored_layouts():
    """Ordered lists are sorted, legacy object layouts are flattened, counts are ignored."""
    listed = Node.model_validate(
        {
            "id": "n",
            "pageComponents": [
                {"type": "short-answer", "order": 2},
                {"type": "header", "order": 1},
            ],
        }
    )
    legacy = Node.model_validate(
        {
            "id": "n",
            "components": {
                "question": {"type": "multiple-choice", "config": {"options": ["a"]}},
                "textInstruction": {"type": "text-instruction"},
            },
        }
    )
    counted = Node.model_validate({"id": "n", "pageComponents": 3})

    assert [c.type for c in listed.components] == ["header", "short-answer"]
    assert [c.type for c in legacy.components] == ["text-instruction", "multiple-choice"]
    assert legacy.components[1].options == ["a"]
    assert counted.components == []


def test_null_collections_are_empty():
    graph = FlowGraph.model_validate(
        {"id": "g", "nodes": [{"id": "a", "connections": None}], "logicBlocks": None}
    )

    assert graph.get_node("a").is_terminal
    assert graph.logic_blocks == []


def test_duplicate_ids_resolve_to_first_declaration():
    graph = FlowGraph.model_validate(
        {"id": "g", "nodes": [{"id": "a", "title": "first"}, {"id": "a", "title": "second"}]}
    )

    assert graph.get_node("a").title == "first"
    assert graph.node_index("a") == 0
