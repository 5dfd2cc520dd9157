"""Shared fixtures for flowpath tests.

Graphs are small and built in code; stores are in-memory unless a test
asks for SQLite under ``tmp_path``.
"""

import logging

import pytest

from flowpath.config.models import FlowGraph
from flowpath.persistence.decisions import InMemoryAbDecisionStore
from flowpath.persistence.flows import InMemoryFlowStore
from flowpath.persistence.memory import InMemorySessionStore
from flowpath.runtime.router import SessionRouter
from tests.factories import make_block, make_graph, make_node


@pytest.fixture(autouse=True)
def reset_flowpath_logger():
    """Undo setup_logging so caplog sees flowpath records in every test."""
    yield
    logger = logging.getLogger("flowpath")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def branching_graph() -> FlowGraph:
    """A (yes/no question) -> lb1 (if-else "yes") -> B | C."""
    return make_graph(
        [
            make_node("A", ["lb1"], question="multiple-choice", options=["Yes", "No"]),
            make_node("B"),
            make_node("C"),
        ],
        [make_block("lb1", "if-else", ["B", "C"], conditions=["yes"])],
    )


@pytest.fixture
def linear_graph() -> FlowGraph:
    """intro -> name (short answer) -> done."""
    return make_graph(
        [
            make_node("intro", ["name"]),
            make_node("name", ["done"], question="short-answer"),
            make_node("done"),
        ],
        flow_id="linear",
    )


@pytest.fixture
def ab_graph() -> FlowGraph:
    """start -> ab (a-b-test) -> left | right."""
    return make_graph(
        [make_node("start", ["ab"]), make_node("left"), make_node("right")],
        [make_block("ab", "a-b-test", ["left", "right"])],
        flow_id="ab-flow",
    )


@pytest.fixture
def diamond_graph() -> FlowGraph:
    """A -> lb1 -> B | C, both B and C -> D."""
    return make_graph(
        [
            make_node("A", ["lb1"], question="multiple-choice", options=["Yes", "No"]),
            make_node("B", ["D"]),
            make_node("C", ["D"]),
            make_node("D"),
        ],
        [make_block("lb1", "if-else", ["B", "C"], conditions=["yes"])],
        flow_id="diamond",
    )


@pytest.fixture
def session_store() -> InMemorySessionStore:
    return InMemorySessionStore()


@pytest.fixture
def decision_store() -> InMemoryAbDecisionStore:
    return InMemoryAbDecisionStore()


@pytest.fixture
def router(branching_graph, linear_graph, ab_graph, diamond_graph, session_store, decision_store):
    """SessionRouter over in-memory stores holding every fixture graph."""
    flows = InMemoryFlowStore(
        {g.id: g for g in (branching_graph, linear_graph, ab_graph, diamond_graph)}
    )
    return SessionRouter(flows, session_store, decision_store)
