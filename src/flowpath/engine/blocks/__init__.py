"""Logic block evaluators, registered by block type."""

from flowpath.core.constants import LogicBlockType
from flowpath.engine.blocks.ab_test import AbTestEvaluator
from flowpath.engine.blocks.base import BlockEvaluator, EvaluationContext
from flowpath.engine.blocks.if_else import IfElseEvaluator
from flowpath.engine.blocks.multi_path import MultiPathEvaluator
from flowpath.engine.blocks.registry import BlockEvaluatorRegistry
from flowpath.engine.blocks.score_threshold import ScoreThresholdEvaluator

# Initialize default evaluators
BlockEvaluatorRegistry.add(LogicBlockType.IF_ELSE.value, IfElseEvaluator())
BlockEvaluatorRegistry.add(LogicBlockType.MULTI_PATH.value, MultiPathEvaluator())
BlockEvaluatorRegistry.add(LogicBlockType.SCORE_THRESHOLD.value, ScoreThresholdEvaluator())
BlockEvaluatorRegistry.add(LogicBlockType.AB_TEST.value, AbTestEvaluator())

__all__ = [
    "AbTestEvaluator",
    "BlockEvaluator",
    "BlockEvaluatorRegistry",
    "EvaluationContext",
    "IfElseEvaluator",
    "MultiPathEvaluator",
    "ScoreThresholdEvaluator",
]
