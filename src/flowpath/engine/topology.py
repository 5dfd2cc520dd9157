"""Structural lookups over a flow graph.

Incoming edges are found by scanning connections; flows are small and read
once per step, so no reverse index is kept.
"""

from flowpath.config.models import FlowGraph, Node, PageComponent
from flowpath.core.constants import MULTI_SELECT_TYPES, QUESTION_TYPES


def question_component_of(node: Node | None) -> PageComponent | None:
    """First component of the node whose type is question-bearing."""
    if node is None:
        return None
    for component in node.components:
        if component.type in QUESTION_TYPES:
            return component
    return None


def question_type_of(node: Node | None) -> str | None:
    component = question_component_of(node)
    return component.type if component else None


def is_multi_select(node: Node | None) -> bool:
    return question_type_of(node) in MULTI_SELECT_TYPES


def source_node_of(graph: FlowGraph, block_id: str) -> Node | None:
    """The node feeding a logic block, following chained blocks upstream.

    Returns the first node in declaration order that connects to the block
    directly; otherwise walks back through blocks that connect to it.
    """
    seen: set[str] = set()
    frontier = [block_id]
    while frontier:
        target = frontier.pop(0)
        if target in seen:
            continue
        seen.add(target)
        for node in graph.nodes:
            if target in node.connections:
                return node
        frontier.extend(b.id for b in graph.logic_blocks if target in b.connections)
    return None


def predecessors_of(graph: FlowGraph, node_id: str) -> list[Node]:
    """Distinct nodes reaching ``node_id`` directly or through logic blocks.

    Returned in node declaration order.
    """
    # Blocks from which node_id is reachable through block-only paths
    feeding: set[str] = set()
    frontier = [node_id]
    while frontier:
        target = frontier.pop()
        for block in graph.logic_blocks:
            if target in block.connections and block.id not in feeding:
                feeding.add(block.id)
                frontier.append(block.id)

    result = []
    for node in graph.nodes:
        if node_id in node.connections or feeding.intersection(node.connections):
            result.append(node)
    return result


def has_incoming(graph: FlowGraph, element_id: str) -> bool:
    return any(element_id in n.connections for n in graph.nodes) or any(
        element_id in b.connections for b in graph.logic_blocks
    )


def entry_node(graph: FlowGraph) -> Node | None:
    """First node with no incoming edge, else the first declared node."""
    for node in graph.nodes:
        if not has_incoming(graph, node.id):
            return node
    return graph.nodes[0] if graph.nodes else None
