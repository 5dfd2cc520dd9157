"""Test factories for creating flow graphs."""

from typing import Any

from flowpath.config.models import FlowGraph


def make_node(
    node_id: str,
    connections: list[str] | None = None,
    question: str | None = None,
    options: list[str] | None = None,
    title: str | None = None,
) -> dict:
    """Node dict; ``question`` is the question component type, if any."""
    components = []
    if question is not None:
        config: dict[str, Any] = {"question": f"Question on {node_id}"}
        if options is not None:
            config["options"] = options
        components.append({"id": f"{node_id}-q", "type": question, "config": config, "order": 0})
    else:
        components.append(
            {"id": f"{node_id}-t", "type": "text-instruction", "config": {"text": node_id}}
        )
    return {
        "id": node_id,
        "title": title or node_id.upper(),
        "components": components,
        "connections": connections or [],
    }


def make_block(block_id: str, block_type: str, connections: list[str], **config: Any) -> dict:
    return {"id": block_id, "type": block_type, "config": config, "connections": connections}


def make_graph(
    nodes: list[dict], blocks: list[dict] | None = None, flow_id: str = "flow", **overrides: Any
) -> FlowGraph:
    """Create a FlowGraph with defaults, allowing overrides."""
    data = {"id": flow_id, "title": "Test flow", "nodes": nodes, "logicBlocks": blocks or []}
    return FlowGraph.model_validate({**data, **overrides})
