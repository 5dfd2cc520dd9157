"""ScoreThresholdEvaluator - route on a numeric score."""

from flowpath.config.models import LogicBlock
from flowpath.core.answers import Answer
from flowpath.engine.blocks.base import EvaluationContext


class ScoreThresholdEvaluator:
    """``score >= threshold`` routes to ``connections[0]``, else ``connections[1]``."""

    requires_answer = True

    def evaluate(
        self,
        block: LogicBlock,
        answer: Answer | None,
        context: EvaluationContext,
    ) -> str | None:
        threshold = block.config.threshold if block.config.threshold is not None else 0
        score = answer.score if answer is not None else 0

        if score >= threshold:
            return block.target(0)
        return block.target_or_first(1)
