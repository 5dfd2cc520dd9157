"""Logic block evaluation: dispatch on block type to the registered evaluator."""

import logging
from typing import Any

from flowpath.config.models import FlowGraph, LogicBlock
from flowpath.core.answers import normalize
from flowpath.engine.blocks import BlockEvaluator, BlockEvaluatorRegistry, EvaluationContext
from flowpath.persistence.decisions import InMemoryAbDecisionStore
from flowpath.persistence.interfaces import IAbDecisionStore

logger = logging.getLogger(__name__)


class LogicBlockEvaluator:
    """Computes the next graph element for a logic block and an answer.

    ``if-else``, ``multi-path`` and ``score-threshold`` are pure functions of
    (block, answer, graph). ``a-b-test`` consults the injected decision store,
    which defaults to a process-local one.
    """

    def __init__(
        self,
        decisions: IAbDecisionStore | None = None,
        evaluators: dict[str, BlockEvaluator] | None = None,
    ):
        """
        Args:
            decisions: Store for session-sticky A/B assignments
            evaluators: Per-type overrides; falls back to the global registry
        """
        self.decisions = decisions if decisions is not None else InMemoryAbDecisionStore()
        self._evaluators = evaluators or {}

    def evaluator_for(self, block_type: str) -> BlockEvaluator | None:
        return self._evaluators.get(block_type) or BlockEvaluatorRegistry.get(block_type)

    def requires_answer(self, block: LogicBlock) -> bool:
        evaluator = self.evaluator_for(block.type)
        return evaluator.requires_answer if evaluator is not None else True

    def evaluate(
        self,
        block: LogicBlock,
        answer: Any,
        graph: FlowGraph,
        session_id: str | None = None,
    ) -> str | None:
        """Return the id of the next node or logic block, or None.

        Args:
            block: Logic block being passed through
            answer: Raw or normalized answer from the source question
            graph: Graph the block belongs to
            session_id: Session for A/B stickiness (preview when None)
        """
        evaluator = self.evaluator_for(block.type)
        if evaluator is None:
            logger.error(
                f"Flow configuration error: unknown logic block type '{block.type}' "
                f"on block '{block.id}'",
                extra={"flow_id": graph.id, "block_id": block.id, "block_type": block.type},
            )
            return None

        context = EvaluationContext(graph=graph, decisions=self.decisions, session_id=session_id)
        target = evaluator.evaluate(block, normalize(answer), context)

        logger.debug(
            f"Logic block '{block.id}' ({block.type}) routed to {target!r}",
            extra={"flow_id": graph.id, "block_id": block.id, "session_id": session_id},
        )
        return target
