"""IfElseEvaluator - two-way routing on operator conditions."""

import logging

from flowpath.config.models import LogicBlock
from flowpath.core.answers import Answer
from flowpath.core.matching import clean_conditions, matches
from flowpath.engine.blocks.base import EvaluationContext
from flowpath.engine.topology import is_multi_select, source_node_of

logger = logging.getLogger(__name__)


def effective_conditions(block: LogicBlock) -> list[str]:
    """Non-blank ``conditions``, else the legacy single ``condition``."""
    conditions = clean_conditions(block.config.conditions)
    if conditions:
        return conditions
    return clean_conditions([block.config.condition])


class IfElseEvaluator:
    """Route to ``connections[0]`` on match, else ``connections[1]``.

    Multiple conditions combine with OR when the source question is multiple
    choice or checkbox, and with AND otherwise.
    """

    requires_answer = True

    def evaluate(
        self,
        block: LogicBlock,
        answer: Answer | None,
        context: EvaluationContext,
    ) -> str | None:
        conditions = effective_conditions(block)
        if not conditions:
            logger.debug(f"if-else block '{block.id}' has no conditions, taking false path")
            return block.target_or_first(1)

        source = source_node_of(context.graph, block.id)
        multi = is_multi_select(source)

        if matches(conditions, answer, multi):
            return block.target(0)
        return block.target_or_first(1)
