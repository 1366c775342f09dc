import pytest

from engine.recorder import Recorder, RunMetrics, compare, compare_all
from graph import Graph
from graph.errors import InvalidSetting


def test_prim_metrics_on_kite(kite):
    rec = Recorder()
    m = rec.run("prim", kite.snapshot(), 0)

    assert m.algo_label == "Prim's Algorithm"
    assert m.start_node == "A"
    assert m.total_steps == 13
    assert (m.edges_accepted, m.edges_rejected) == (3, 1)
    assert m.mst_weight == 7
    assert m.mst_edges == ["A-B:1", "B-C:2", "C-D:4"]
    assert m.nodes_reached == m.node_count == 4
    assert m.spanning
    assert rec.metrics is m


def test_kruskal_ignores_start(kite):
    m = Recorder().run("kruskal", kite.snapshot(), 3)
    assert m.start_node == ""
    assert m.mst_weight == 7


def test_disconnected_graph_is_not_spanning():
    g = Graph()
    for i in range(4):
        g.add_node(i * 100, 0)
    g.add_edge(0, 1, 2)
    g.add_edge(2, 3, 1)
    m = Recorder().run("prim", g.snapshot())
    assert m.nodes_reached == 2
    assert not m.spanning


def test_unknown_algorithm():
    with pytest.raises(InvalidSetting):
        Recorder().run("boruvka", Graph().snapshot())


def test_export(triangle):
    rec = Recorder()
    rec.run("kruskal", triangle.snapshot())
    dump = rec.export()
    assert dump["algo_key"] == "kruskal"
    assert len(dump["steps"]) == 8
    assert dump["metrics"]["mst_weight"] == 8
    assert dump["steps"][-1]["is_final"]


def test_compare_all_agrees(kite):
    prim_rec, kruskal_rec, result = compare_all(kite.snapshot())
    assert prim_rec.metrics.algo_key == "prim"
    assert kruskal_rec.metrics.algo_key == "kruskal"
    assert result.weights_agree
    assert result.winner_steps == "tie"
    assert result.to_dict()["right"]["mst_weight"] == 7


def test_compare_picks_lower_values():
    left, right = Recorder(), Recorder()
    left.metrics = RunMetrics(algo_label="Left", total_steps=10, edges_rejected=1, mst_weight=4)
    right.metrics = RunMetrics(algo_label="Right", total_steps=12, edges_rejected=0, mst_weight=5)
    result = compare(left, right)
    assert result.winner_steps == "Left"
    assert result.winner_rejects == "Right"
    assert not result.weights_agree
