"""Static checks over a flow graph.

Traversal tolerates broken graphs at runtime (it ends the flow and logs);
these checks surface the same problems before a flow goes live.
"""

from collections import Counter
from typing import Literal

from pydantic import BaseModel

from flowpath.config.models import FlowGraph
from flowpath.core.constants import LogicBlockType
from flowpath.engine.blocks import BlockEvaluatorRegistry
from flowpath.engine.topology import entry_node, has_incoming, predecessors_of

Severity = Literal["error", "warning"]

# Connections each block type needs to reach every branch
MIN_CONNECTIONS = {
    LogicBlockType.IF_ELSE.value: 2,
    LogicBlockType.MULTI_PATH.value: 1,
    LogicBlockType.SCORE_THRESHOLD.value: 2,
    LogicBlockType.AB_TEST.value: 2,
}


class GraphIssue(BaseModel):
    """A single problem found in a flow graph."""

    severity: Severity
    code: str
    message: str
    element_id: str | None = None

    def __str__(self) -> str:
        where = f" [{self.element_id}]" if self.element_id else ""
        return f"{self.severity.upper()} {self.code}{where}: {self.message}"


def validate_graph(graph: FlowGraph) -> list[GraphIssue]:
    """Check a graph for problems that make traversal end early or go astray.

    Args:
        graph: Flow graph to check

    Returns:
        Issues found, errors and warnings mixed, in discovery order. An empty
        list means the graph is clean.
    """
    issues: list[GraphIssue] = []

    if not graph.nodes:
        issues.append(GraphIssue(severity="error", code="no-entry", message="Flow has no nodes"))
        return issues

    ids = [n.id for n in graph.nodes] + [b.id for b in graph.logic_blocks]
    for element_id, count in Counter(ids).items():
        if count > 1:
            issues.append(
                GraphIssue(
                    severity="error",
                    code="duplicate-id",
                    message=f"Id used by {count} graph elements; only the first is reachable",
                    element_id=element_id,
                )
            )

    known = set(ids)

    for node in graph.nodes:
        for target in node.connections:
            if target and target not in known:
                issues.append(
                    GraphIssue(
                        severity="error",
                        code="dangling-connection",
                        message=f"Connects to unknown element '{target}'",
                        element_id=node.id,
                    )
                )
        if len(node.connections) > 1:
            issues.append(
                GraphIssue(
                    severity="warning",
                    code="unused-connections",
                    message=(
                        f"Only the first of {len(node.connections)} connections is followed; "
                        "use a logic block to branch"
                    ),
                    element_id=node.id,
                )
            )
        predecessors = predecessors_of(graph, node.id)
        if len(predecessors) > 1:
            issues.append(
                GraphIssue(
                    severity="warning",
                    code="merge-node",
                    message=(
                        f"Reached from {', '.join(p.id for p in predecessors)}; "
                        "going back falls back to the recorded path"
                    ),
                    element_id=node.id,
                )
            )

    for block in graph.logic_blocks:
        if not BlockEvaluatorRegistry.is_registered(block.type):
            issues.append(
                GraphIssue(
                    severity="error",
                    code="unknown-block-type",
                    message=f"Unknown logic block type '{block.type}'",
                    element_id=block.id,
                )
            )

        for target in block.connections:
            if target and target not in known:
                issues.append(
                    GraphIssue(
                        severity="error",
                        code="dangling-connection",
                        message=f"Connects to unknown element '{target}'",
                        element_id=block.id,
                    )
                )

        needed = MIN_CONNECTIONS.get(block.type, 1)
        present = len([c for c in block.connections if c])
        if present == 0:
            issues.append(
                GraphIssue(
                    severity="error",
                    code="block-without-connections",
                    message="Logic block has no outgoing connections",
                    element_id=block.id,
                )
            )
        elif present < needed:
            issues.append(
                GraphIssue(
                    severity="warning",
                    code="missing-branch",
                    message=(
                        f"'{block.type}' block has {present} of {needed} connections; "
                        "missing branches fall back to the first"
                    ),
                    element_id=block.id,
                )
            )

        if not has_incoming(graph, block.id):
            issues.append(
                GraphIssue(
                    severity="warning",
                    code="unreachable-block",
                    message="No node or logic block connects to this block",
                    element_id=block.id,
                )
            )

    entry = entry_node(graph)
    if entry is not None and has_incoming(graph, entry.id):
        issues.append(
            GraphIssue(
                severity="warning",
                code="no-entry",
                message=f"Every node has an incoming connection; starting at '{entry.id}'",
                element_id=entry.id,
            )
        )

    return issues


def has_errors(issues: list[GraphIssue]) -> bool:
    return any(issue.severity == "error" for issue in issues)
