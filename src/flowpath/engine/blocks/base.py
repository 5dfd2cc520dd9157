"""Base protocol and context for logic block evaluators."""

from dataclasses import dataclass
from typing import Protocol

from flowpath.config.models import FlowGraph, LogicBlock
from flowpath.core.answers import Answer
from flowpath.core.constants import PREVIEW_SESSION_ID
from flowpath.persistence.interfaces import IAbDecisionStore


@dataclass(frozen=True)
class EvaluationContext:
    """What a block may consult besides its own config and the answer."""

    graph: FlowGraph
    decisions: IAbDecisionStore | None = None
    session_id: str | None = None

    @property
    def flow_id(self) -> str:
        return self.graph.id

    @property
    def decision_session(self) -> str:
        return self.session_id or PREVIEW_SESSION_ID


class BlockEvaluator(Protocol):
    """Protocol for one logic block variant (OCP: open for extension)."""

    # Whether the block can only route once the user has answered
    requires_answer: bool

    def evaluate(
        self,
        block: LogicBlock,
        answer: Answer | None,
        context: EvaluationContext,
    ) -> str | None:
        """Return the id of the next graph element, or None."""
        ...
