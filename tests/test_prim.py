import pytest

from algorithms.prim import LINE_REJECT, PSEUDOCODE, count_prim_steps, prim
from algorithms.step import StepAction
from graph import Graph
from graph.errors import EmptyGraph, NotFound


def actions(steps):
    return [s.action for s in steps]


def test_triangle_trace_from_a(triangle):
    steps = list(prim(triangle.snapshot(), 0))

    assert actions(steps) == [
        StepAction.MESSAGE,
        StepAction.CONSIDER_EDGE, StepAction.ADD_EDGE, StepAction.MESSAGE,
        StepAction.CONSIDER_EDGE, StepAction.ADD_EDGE, StepAction.MESSAGE,
        StepAction.MESSAGE,
    ]
    added = [str(s.edge) for s in steps if s.action is StepAction.ADD_EDGE]
    assert added == ["A-B:5", "B-C:3"]
    assert [s.step_number for s in steps] == list(range(len(steps)))
    assert steps[-1].is_final
    assert "total weight 8" in steps[-1].description


def test_initial_queue_holds_start_edges_sorted(triangle):
    first = next(prim(triangle.snapshot(), 0))
    assert [str(q.edge) for q in first.priority_queue] == ["A-B:5", "A-C:10"]
    assert first.visited_nodes == frozenset({0})


def test_queue_is_resorted_after_push(triangle):
    steps = list(prim(triangle.snapshot(), 0))
    reseed = steps[3]
    assert [str(q.edge) for q in reseed.priority_queue] == ["B-C:3", "A-C:10"]
    assert reseed.visited_nodes == frozenset({0, 1})


def test_edge_closing_a_cycle_is_invalid(kite):
    steps = list(prim(kite.snapshot(), 0))
    invalid = [s for s in steps if s.action is StepAction.SHOW_INVALID]
    assert len(invalid) == 1
    assert str(invalid[0].edge) == "A-C:3"
    assert invalid[0].invalid_edges == (invalid[0].edge,)
    assert invalid[0].pseudo_line == LINE_REJECT
    assert "cycle" in PSEUDOCODE[LINE_REJECT]


def test_invalid_step_carries_the_closed_cycle(kite):
    steps = list(prim(kite.snapshot(), 0))
    (invalid,) = [s for s in steps if s.action is StepAction.SHOW_INVALID]
    assert [str(e) for e in invalid.cycle_edges] == ["A-C:3", "A-B:1", "B-C:2"]
    assert invalid.cycle_nodes == frozenset({0, 1, 2})
    assert invalid.to_dict()["cycle_nodes"] == [0, 1, 2]
    assert all(not s.cycle_edges for s in steps if s is not invalid)


def test_start_defaults_to_first_node(triangle):
    assert list(prim(triangle.snapshot())) == list(prim(triangle.snapshot(), 0))


def test_other_start_gives_same_weight(kite):
    totals = set()
    for start in kite.node_ids():
        steps = list(prim(kite.snapshot(), start))
        totals.add(sum(s.edge.weight for s in steps if s.action is StepAction.ADD_EDGE))
    assert totals == {7}


def test_disconnected_graph_reports_reachable_part():
    g = Graph()
    for i in range(4):
        g.add_node(i * 100, 0)
    g.add_edge(0, 1, 2)
    g.add_edge(2, 3, 1)

    steps = list(prim(g.snapshot(), 0))
    added = [s for s in steps if s.action is StepAction.ADD_EDGE]
    assert len(added) == 1
    assert steps[-1].is_final
    assert "disconnected" in steps[-1].description


def test_unknown_start_and_empty_graph():
    with pytest.raises(EmptyGraph):
        list(prim(Graph().snapshot()))
    g = Graph()
    g.add_node(0, 0)
    with pytest.raises(NotFound):
        list(prim(g.snapshot(), 5))


def test_count_matches_trace_length(triangle, kite):
    for g in (triangle, kite):
        assert count_prim_steps(g.snapshot(), 0) == len(list(prim(g.snapshot(), 0)))
    assert count_prim_steps(kite.snapshot()) == 13


def test_every_step_points_into_pseudocode(kite):
    for step in prim(kite.snapshot()):
        assert 0 <= step.pseudo_line < len(PSEUDOCODE)


def test_trace_is_deterministic(kite):
    snap = kite.snapshot()
    assert list(prim(snap, 2)) == list(prim(snap, 2))
