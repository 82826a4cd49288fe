import random

from incrementer.shifter_incrementer import ShifterIncrementer
from models import IndexedElement
from shifter.hyper_graph_cliche_shifter import HyperGraphClicheShifter, StatefulHyperGraph


def _never_connected(slots):
    return [[slot == other for other in range(slots)] for slot in range(slots)]


def _cliches(graph, rng=None):
    shifter = HyperGraphClicheShifter(graph.nodes_per_slot, rng)
    if rng is not None:
        shifter.randomize()
    return [
        tuple(indexed.element for indexed in assignment)
        for assignment in ShifterIncrementer(shifter)
    ]


def test_observation_reports_touched_nodes():
    graph = StatefulHyperGraph(_never_connected(2))
    touched = graph.observe([IndexedElement("a", 0), IndexedElement("b", 1)])
    assert sorted(touched) == [(0, 0), (1, 0)]
    assert graph.is_cliche_possible(touched) is True
    # seeing the same pair again changes nothing
    assert graph.observe([IndexedElement("a", 0), IndexedElement("b", 1)]) == []


def test_cliches_only_follow_observed_edges():
    graph = StatefulHyperGraph(_never_connected(2))
    graph.observe([IndexedElement("a", 0), IndexedElement("b", 1)])
    graph.observe([IndexedElement("c", 0), IndexedElement("d", 1)])
    assert _cliches(graph) == [("a", "b"), ("c", "d")]
    assert sorted(_cliches(graph, random.Random(4))) == [("a", "b"), ("c", "d")]


def test_three_slots_need_every_pairwise_edge():
    graph = StatefulHyperGraph(_never_connected(3))
    graph.observe([IndexedElement("a", 0), IndexedElement("b", 1)])
    graph.observe([IndexedElement("b", 1), IndexedElement("c", 2)])
    # b reaches both other slots, but a and c were never seen together
    assert _cliches(graph) == []
    touched = graph.observe([IndexedElement("a", 0), IndexedElement("c", 2)])
    assert graph.is_cliche_possible(touched) is True
    assert _cliches(graph) == [("a", "b", "c")]


def test_always_connected_slot_needs_no_edges():
    is_always_connected = [
        [True, False, True],
        [False, True, True],
        [True, True, True],
    ]
    graph = StatefulHyperGraph(is_always_connected)
    touched = graph.observe([IndexedElement("a", 0), IndexedElement("b", 1)])
    assert graph.is_cliche_possible(touched) is False  # slot 2 still empty
    touched = graph.observe([IndexedElement("e", 2)])
    assert graph.is_cliche_possible(touched) is True
    assert _cliches(graph) == [("a", "b", "e")]


def test_cliche_shifter_states_are_deduplicated():
    graph = StatefulHyperGraph([[True, True], [True, True]])
    graph.observe([IndexedElement("a", 0), IndexedElement("a", 1)])
    shifter = HyperGraphClicheShifter(graph.nodes_per_slot)
    assert shifter.get_states() == ["a"]
    assert shifter.get_length() == 2
