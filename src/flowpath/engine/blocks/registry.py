"""Thread-safe registry of logic block evaluators."""

import logging
from collections.abc import Callable
from threading import Lock

from flowpath.engine.blocks.base import BlockEvaluator

logger = logging.getLogger(__name__)

# Global registry state
_evaluators: dict[str, BlockEvaluator] = {}
_evaluators_lock = Lock()


class BlockEvaluatorRegistry:
    """
    Thread-safe registry mapping logic block types to evaluators.

    Example:
        @BlockEvaluatorRegistry.register("weighted-split")
        class WeightedSplitEvaluator:
            requires_answer = False

            def evaluate(self, block, answer, context):
                ...
    """

    @classmethod
    def register(cls, block_type: str) -> Callable:
        """
        Register an evaluator class (instantiated with no arguments) or instance.

        Args:
            block_type: Logic block ``type`` value the evaluator handles

        Returns:
            Decorator function
        """

        def decorator(evaluator):
            instance = evaluator() if isinstance(evaluator, type) else evaluator
            cls.add(block_type, instance)
            return evaluator

        return decorator

    @classmethod
    def add(cls, block_type: str, evaluator: BlockEvaluator) -> None:
        with _evaluators_lock:
            if block_type in _evaluators:
                logger.warning(
                    f"Evaluator for block type '{block_type}' already registered, overwriting",
                    extra={"block_type": block_type},
                )
            _evaluators[block_type] = evaluator
            logger.debug(f"Registered evaluator for block type: {block_type}")

    @classmethod
    def get(cls, block_type: str) -> BlockEvaluator | None:
        """
        Get evaluator for a block type.

        Returns:
            The evaluator, or None if the type is unknown
        """
        with _evaluators_lock:
            return _evaluators.get(block_type)

    @classmethod
    def is_registered(cls, block_type: str) -> bool:
        with _evaluators_lock:
            return block_type in _evaluators

    @classmethod
    def get_all(cls) -> dict[str, BlockEvaluator]:
        with _evaluators_lock:
            return _evaluators.copy()

    @classmethod
    def remove(cls, block_type: str) -> None:
        """Unregister a block type (primarily for tests)."""
        with _evaluators_lock:
            _evaluators.pop(block_type, None)
