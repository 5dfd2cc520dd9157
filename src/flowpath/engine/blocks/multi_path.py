"""MultiPathEvaluator - N-way routing on the answer value."""

from flowpath.config.models import LogicBlock
from flowpath.core.answers import Answer, first_text, normalize_text
from flowpath.core.matching import index_of_match
from flowpath.engine.blocks.base import EvaluationContext
from flowpath.engine.topology import question_component_of, source_node_of


class MultiPathEvaluator:
    """Route to ``connections[i]`` where ``paths[i]`` matches the answer.

    List answers route on their first selection. When no path matches (or
    none are configured) the answer's position in the source question's
    options picks the branch; failing that, the first connection is used.
    """

    requires_answer = True

    def evaluate(
        self,
        block: LogicBlock,
        answer: Answer | None,
        context: EvaluationContext,
    ) -> str | None:
        value = first_text(answer) if answer is not None else None

        if block.config.paths:
            target = block.target(index_of_match(block.config.paths, value))
            if target:
                return target

        target = block.target(self._option_index(block, value, context))
        if target:
            return target

        return block.target(0)

    def _option_index(
        self, block: LogicBlock, value: str | None, context: EvaluationContext
    ) -> int:
        if not value:
            return -1
        question = question_component_of(source_node_of(context.graph, block.id))
        if question is None:
            return -1
        options = [normalize_text(o) for o in question.options]
        try:
            return options.index(value)
        except ValueError:
            return -1
