"""Graph walking: next and previous node resolution.

The walker is answer-agnostic except where a logic block needs the answer
to route. It never raises for broken graphs: dangling targets, block cycles
and unknown block types all resolve to "no next node" and are logged for the
operator. The one exception is ``prev_node`` on merge-shaped graphs, where
the previous node is ambiguous and ``UnsupportedTopologyError`` is raised.
"""

import logging
from typing import Any

from flowpath.config.models import FlowGraph, Node, PageComponent
from flowpath.core.answers import normalize
from flowpath.core.constants import MAX_LOGIC_HOPS
from flowpath.core.errors import UnsupportedTopologyError
from flowpath.engine import topology
from flowpath.engine.evaluator import LogicBlockEvaluator

logger = logging.getLogger(__name__)


class GraphWalker:
    """Resolves where a user goes from a node, forward or back."""

    def __init__(
        self, evaluator: LogicBlockEvaluator | None = None, max_hops: int = MAX_LOGIC_HOPS
    ):
        self.evaluator = evaluator or LogicBlockEvaluator()
        self.max_hops = max_hops

    def next_node(
        self,
        graph: FlowGraph,
        current_node_id: str,
        answer: Any = None,
        session_id: str | None = None,
    ) -> Node | None:
        """Resolve the node shown after ``current_node_id``.

        Args:
            graph: Flow graph being traversed
            current_node_id: Node the user is on
            answer: Raw or normalized answer given at the current node
            session_id: Session for A/B stickiness

        Returns:
            The next node, or None when the flow ends here, the answer needed
            by a logic block is missing, or the route cannot be resolved.
        """
        current = graph.get_node(current_node_id)
        if current is None:
            logger.warning(
                f"Current node '{current_node_id}' not found in flow '{graph.id}'",
                extra={"flow_id": graph.id, "node_id": current_node_id},
            )
            return None

        if current.next_id is None:
            return None

        return self._resolve(graph, current, current.next_id, normalize(answer), session_id)

    def _resolve(self, graph, current, target_id, answer, session_id) -> Node | None:
        visited: set[str] = set()

        for _ in range(self.max_hops + 1):
            block = graph.get_block(target_id)
            if block is None:
                node = graph.get_node(target_id)
                if node is None:
                    logger.warning(
                        f"Graph integrity: '{current.id}' routes to unknown target '{target_id}'",
                        extra={"flow_id": graph.id, "node_id": current.id, "target_id": target_id},
                    )
                return node

            if block.id in visited:
                logger.warning(
                    f"Graph integrity: logic block cycle through '{block.id}'",
                    extra={"flow_id": graph.id, "node_id": current.id, "block_id": block.id},
                )
                return None
            visited.add(block.id)

            if answer is None and self.evaluator.requires_answer(block):
                logger.debug(
                    f"Logic block '{block.id}' needs an answer before '{current.id}' can advance",
                    extra={"flow_id": graph.id, "node_id": current.id},
                )
                return None

            next_id = self.evaluator.evaluate(block, answer, graph, session_id)
            if next_id is None:
                logger.warning(
                    f"Logic block '{block.id}' produced no route",
                    extra={"flow_id": graph.id, "block_id": block.id},
                )
                return None
            target_id = next_id

        logger.warning(
            f"Graph integrity: more than {self.max_hops} chained logic blocks after '{current.id}'",
            extra={"flow_id": graph.id, "node_id": current.id},
        )
        return None

    def awaits_answer(
        self, graph: FlowGraph, current_node_id: str, session_id: str | None = None
    ) -> bool:
        """Whether advancing from the node without an answer would stall on a block.

        Follows the route through blocks that route without an answer
        (a-b-test, reusing the session's stored assignment) and reports True
        when it reaches one that needs the answer.
        """
        current = graph.get_node(current_node_id)
        target_id = current.next_id if current is not None else None
        visited: set[str] = set()

        while target_id is not None and len(visited) <= self.max_hops:
            block = graph.get_block(target_id)
            if block is None or block.id in visited:
                return False
            visited.add(block.id)
            if self.evaluator.evaluator_for(block.type) is None:
                return False
            if self.evaluator.requires_answer(block):
                return True
            target_id = self.evaluator.evaluate(block, None, graph, session_id)
        return False

    def prev_node(self, graph: FlowGraph, current_node_id: str) -> Node | None:
        """Resolve the node that leads to ``current_node_id``.

        Returns:
            The single predecessor (direct or through logic blocks), or None
            for an entry node.

        Raises:
            UnsupportedTopologyError: If several nodes lead here.
        """
        predecessors = topology.predecessors_of(graph, current_node_id)
        if not predecessors:
            return None
        if len(predecessors) > 1:
            raise UnsupportedTopologyError(current_node_id, [n.id for n in predecessors])
        return predecessors[0]

    def has_next(self, graph: FlowGraph, node_id: str) -> bool:
        """Whether the node has anywhere to go (False means it is the last page)."""
        node = graph.get_node(node_id)
        return node is not None and not node.is_terminal

    @staticmethod
    def entry_node(graph: FlowGraph) -> Node | None:
        return topology.entry_node(graph)

    @staticmethod
    def question_component_of(node: Node | None) -> PageComponent | None:
        return topology.question_component_of(node)

    @staticmethod
    def question_type_of(node: Node | None) -> str | None:
        return topology.question_type_of(node)
