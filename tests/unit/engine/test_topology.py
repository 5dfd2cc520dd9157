"""Tests for structural graph lookups."""

from flowpath.engine import topology
from tests.factories import make_block, make_graph, make_node


def test_source_node_follows_block_chains():
    graph = make_graph(
        [make_node("q", ["b1"], question="checkbox-multi", options=["x"]), make_node("end")],
        [make_block("b1", "a-b-test", ["b2"]), make_block("b2", "if-else", ["end"])],
    )

    assert topology.source_node_of(graph, "b2").id == "q"
    assert topology.is_multi_select(topology.source_node_of(graph, "b2"))


def test_source_node_of_orphan_block_is_none():
    graph = make_graph([make_node("q")], [make_block("lonely", "if-else", ["q"])])

    assert topology.source_node_of(graph, "lonely") is None


def test_predecessors_are_distinct_and_in_declaration_order(diamond_graph):
    assert [n.id for n in topology.predecessors_of(diamond_graph, "D")] == ["B", "C"]
    assert [n.id for n in topology.predecessors_of(diamond_graph, "B")] == ["A"]


def test_entry_node_prefers_node_without_incoming():
    graph = make_graph([make_node("b"), make_node("a", ["b"])])

    assert topology.entry_node(graph).id == "a"


def test_entry_node_falls_back_to_first_declared():
    graph = make_graph([make_node("a", ["b"]), make_node("b", ["a"])])

    assert topology.entry_node(graph).id == "a"


def test_entry_node_of_empty_graph():
    assert topology.entry_node(make_graph([])) is None


def test_question_component_skips_display_components():
    node = make_graph([make_node("q", question="scale-slider")]).get_node("q")

    assert topology.question_component_of(node).type == "scale-slider"
    assert not topology.is_multi_select(node)
