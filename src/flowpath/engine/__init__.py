"""Traversal engine: logic block evaluation and graph walking."""

from flowpath.engine.evaluator import LogicBlockEvaluator
from flowpath.engine.walker import GraphWalker

__all__ = ["GraphWalker", "LogicBlockEvaluator"]
