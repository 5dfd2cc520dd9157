"""flowpath - branching onboarding flow traversal.

Flows are graphs of pages (nodes) and routing logic blocks. flowpath decides
which page a user sees next from their answers, keeps A/B assignments
sticky per session, and records the path each user takes.

Quick start:
    from flowpath import ConfigLoader, GraphWalker

    graph = ConfigLoader.load_graph("flows/onboarding.yaml")
    walker = GraphWalker()
    entry = walker.entry_node(graph)
    following = walker.next_node(graph, entry.id, answer="Yes")
"""

from flowpath.__version__ import __version__
from flowpath.config import ConfigLoader, FlowGraph, FlowpathConfig
from flowpath.core.errors import (
    AnswerRequiredError,
    ConfigError,
    FlowConfigurationError,
    FlowInactiveError,
    FlowNotFoundError,
    FlowpathError,
    GraphIntegrityError,
    PersistenceError,
    SessionCompletedError,
    SessionNotFoundError,
    UnsupportedTopologyError,
)
from flowpath.engine import GraphWalker, LogicBlockEvaluator
from flowpath.runtime import SessionRouter, StepResult

__all__ = [
    # Version info
    "__version__",
    # Configuration
    "ConfigLoader",
    "FlowGraph",
    "FlowpathConfig",
    # Traversal
    "GraphWalker",
    "LogicBlockEvaluator",
    "SessionRouter",
    "StepResult",
    # Errors
    "FlowpathError",
    "ConfigError",
    "FlowNotFoundError",
    "FlowInactiveError",
    "FlowConfigurationError",
    "GraphIntegrityError",
    "UnsupportedTopologyError",
    "SessionNotFoundError",
    "SessionCompletedError",
    "AnswerRequiredError",
    "PersistenceError",
]
