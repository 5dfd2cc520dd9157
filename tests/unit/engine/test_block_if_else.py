"""Tests for if-else logic blocks."""

from flowpath.config.models import LogicBlock
from flowpath.core.answers import normalize
from flowpath.engine.blocks import EvaluationContext, IfElseEvaluator
from tests.factories import make_block, make_graph, make_node


def _context(question: str, block: dict) -> EvaluationContext:
    graph = make_graph(
        [make_node("q", [block["id"]], question=question, options=["Red", "Blue"])],
        [block],
    )
    return EvaluationContext(graph=graph)


def test_match_routes_to_first_connection():
    # Arrange
    block = make_block("lb", "if-else", ["yes-node", "no-node"], conditions=["yes"])
    context = _context("short-answer", block)

    # Act
    target = IfElseEvaluator().evaluate(LogicBlock(**block), normalize("Yes!"), context)

    # Assert
    assert target == "yes-node"


def test_no_match_routes_to_second_connection():
    block = make_block("lb", "if-else", ["yes-node", "no-node"], conditions=["yes"])
    context = _context("short-answer", block)

    target = IfElseEvaluator().evaluate(LogicBlock(**block), normalize("nope"), context)

    assert target == "no-node"


def test_no_match_without_false_branch_falls_back_to_first():
    block = make_block("lb", "if-else", ["only"], conditions=["yes"])
    context = _context("short-answer", block)

    target = IfElseEvaluator().evaluate(LogicBlock(**block), normalize("nope"), context)

    assert target == "only"


def test_checkbox_source_uses_or():
    """Any selected option matching any condition takes the true branch."""
    block = make_block("lb", "if-else", ["t", "f"], conditions=["red", "green"])
    context = _context("checkbox-multi", block)

    target = IfElseEvaluator().evaluate(LogicBlock(**block), normalize(["Red"]), context)

    assert target == "t"


def test_short_answer_source_uses_and():
    block = make_block("lb", "if-else", ["t", "f"], conditions=["red", "green"])
    context = _context("short-answer", block)
    evaluator = IfElseEvaluator()

    assert evaluator.evaluate(LogicBlock(**block), normalize("red"), context) == "f"
    assert evaluator.evaluate(LogicBlock(**block), normalize("red and green"), context) == "t"


def test_legacy_single_condition_is_used_when_list_is_blank():
    block = make_block("lb", "if-else", ["t", "f"], conditions=["", None], condition="Blue")
    context = _context("multiple-choice", block)

    target = IfElseEvaluator().evaluate(LogicBlock(**block), normalize("blue"), context)

    assert target == "t"


def test_no_conditions_takes_false_branch():
    block = make_block("lb", "if-else", ["t", "f"])
    context = _context("short-answer", block)

    target = IfElseEvaluator().evaluate(LogicBlock(**block), normalize("anything"), context)

    assert target == "f"


def test_blank_answer_takes_true_branch():
    """A blank answer is contained in every condition."""
    block = make_block("lb", "if-else", ["yes-node", "no-node"], conditions=["yes"])
    context = _context("short-answer", block)

    target = IfElseEvaluator().evaluate(LogicBlock(**block), normalize("  "), context)

    assert target == "yes-node"
