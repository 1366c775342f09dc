import pytest

from algorithms.step import StepAction
from engine.history import EditMode
from engine.playback import PlaybackState
from engine.settings import Settings
from engine.workspace import NOTICE_LIMIT, Workspace
from graph.errors import InvalidSetting
from ui.canvas import SvgSurface

POS = {"A": (100, 100), "B": (300, 100), "C": (200, 300)}
EMPTY = (600, 500)


@pytest.fixture
def ws(timer):
    return Workspace(timer=timer, generate=False)


def build_user_triangle(ws):
    """Build A-B:5, B-C:3, A-C:10 in user mode through pointer events only."""
    ws.switch_mode("user")
    for label in "ABC":
        ws.pointer_down(*POS[label])
    ws.set_interaction_mode("add_edge")
    for a, b, w in (("A", "B", 5), ("B", "C", 3), ("A", "C", 10)):
        ws.pointer_down(*POS[a])
        ws.pointer_down(*POS[b])
        ws.answer_prompt(w)
    ws.set_interaction_mode("drag")
    return ws.graph


def last_notice(ws):
    notices = ws.drain_notices()
    return notices[-1] if notices else None


# ---------------------------------------------------------------------------
# Generation & modes
# ---------------------------------------------------------------------------
def test_generate_with_seed_is_reproducible(timer):
    settings = Settings(node_count=9, seed=11)
    a = Workspace(settings=Settings(**settings.to_dict()), timer=timer)
    b = Workspace(settings=Settings(**settings.to_dict()), timer=timer)
    assert a.graph.snapshot() == b.graph.snapshot()
    assert a.graph.node_count() == 9
    assert last_notice(a).level == "success"


def test_regenerate_is_undoable(ws):
    ws.generate(Settings(node_count=5, seed=1))
    first = ws.graph.snapshot()
    ws.generate(Settings(node_count=7, seed=2))
    assert ws.graph.node_count() == 7

    assert ws.undo()
    assert ws.graph.snapshot() == first
    assert ws.redo()
    assert ws.graph.node_count() == 7


def test_generate_from_user_mode_switches_back(ws):
    build_user_triangle(ws)
    ws.generate(Settings(node_count=4, seed=5))
    assert ws.mode is EditMode.GENERATIVE
    assert ws.graphs[EditMode.USER].node_count() == 3


def test_modes_keep_separate_graphs_and_history(ws):
    ws.generate(Settings(node_count=6, seed=3))
    gen = ws.graph.snapshot()
    build_user_triangle(ws)

    ws.switch_mode(EditMode.GENERATIVE)
    assert ws.graph.snapshot() == gen
    assert not ws.undo()
    assert last_notice(ws).message == "Nothing to undo"

    ws.switch_mode("user")
    assert ws.graph.edge_count() == 3
    assert ws.history.stack(EditMode.USER).can_undo


def test_toolbar_toggle_returns_to_drag(ws):
    ws.set_interaction_mode("delete_edge", toggle=True)
    assert ws.state()["interaction_mode"] == "delete_edge"
    ws.set_interaction_mode("delete_edge", toggle=True)
    assert ws.state()["interaction_mode"] == "drag"
    ws.set_interaction_mode("add_edge")
    ws.set_interaction_mode("add_edge")
    assert ws.state()["interaction_mode"] == "add_edge"


def test_unknown_mode_rejected(ws):
    with pytest.raises(InvalidSetting):
        ws.switch_mode("freestyle")
    with pytest.raises(InvalidSetting):
        ws.set_interaction_mode("lasso")


def test_bad_generator_settings_propagate(ws):
    with pytest.raises(InvalidSetting):
        ws.generate(Settings(topology="star"))


# ---------------------------------------------------------------------------
# Editing & history
# ---------------------------------------------------------------------------
def test_user_build_checkpoints_every_commit(ws):
    g = build_user_triangle(ws)
    assert [n.label for n in g.nodes.values()] == ["A", "B", "C"]
    assert g.edge_count() == 3
    # empty base + 3 nodes + 3 edges
    assert len(ws.history.stack(EditMode.USER)) == 7


def test_undo_walks_back_to_empty_graph(ws):
    build_user_triangle(ws)
    while ws.undo():
        pass
    assert ws.graph.node_count() == 0
    assert ws.graph.next_node_id == 0


def test_undo_of_delete_restores_node_and_label_pool(ws):
    g = build_user_triangle(ws)
    ws.set_interaction_mode("delete_node")
    ws.pointer_down(*POS["B"])
    assert g.edge_count() == 1

    ws.undo()
    assert ws.graph.node_by_label("B").id == 1
    assert ws.graph.edge_count() == 3

    ws.redo()
    assert ws.graph.available_labels == ["B"]
    ws.set_interaction_mode("drag")
    ws.pointer_down(*EMPTY)
    assert ws.graph.nodes[1].label == "B"


def test_edit_after_undo_drops_redo(ws):
    build_user_triangle(ws)
    ws.undo()
    ws.set_interaction_mode("delete_edge")
    ws.pointer_down(250, 200)
    assert not ws.history.stack(EditMode.USER).can_redo


def test_rejected_edit_becomes_notice(ws):
    build_user_triangle(ws)
    before = len(ws.history.stack(EditMode.USER))
    ws.set_interaction_mode("add_edge")
    ws.pointer_down(*POS["A"])
    assert ws.pointer_down(*POS["B"]) is None

    notice = last_notice(ws)
    assert (notice.level, notice.kind) == ("error", "DuplicateEdge")
    assert len(ws.history.stack(EditMode.USER)) == before


def test_invalid_weight_keeps_prompt_open(ws):
    build_user_triangle(ws)
    ws.set_interaction_mode("edit_weight")
    ws.pointer_down(200, 100)
    assert ws.answer_prompt("zero") is None
    assert last_notice(ws).kind == "InvalidWeight"
    assert ws.state()["editor"]["prompt"]["current"] == 5
    assert ws.answer_prompt("4")
    assert ws.graph.find_edge(0, 1).weight == 4


def test_drag_is_not_an_undo_step(ws):
    build_user_triangle(ws)
    entries = len(ws.history.stack(EditMode.USER))
    ws.pointer_down(*POS["A"])
    assert ws.state()["editor"]["dragging"]
    ws.pointer_move(150, 150)
    ws.pointer_up()
    assert len(ws.history.stack(EditMode.USER)) == entries
    assert (ws.graph.nodes[0].x, ws.graph.nodes[0].y) == (150, 150)


def test_undo_after_drag_keeps_dragged_position(ws):
    ws.switch_mode("user")
    ws.pointer_down(100, 100)
    ws.pointer_down(100, 100)
    ws.pointer_move(400, 400)
    assert ws.pointer_up()
    dragged = ws.graph.snapshot()

    ws.pointer_down(700, 100)
    assert ws.graph.node_count() == 2
    assert ws.undo()
    assert ws.graph.snapshot() == dragged
    assert ws.redo()
    assert (ws.graph.nodes[0].x, ws.graph.nodes[0].y) == (400, 400)


def test_drag_after_run_stores_no_mst_flags(ws):
    build_user_triangle(ws)
    ws.visualize()
    while ws.step_forward():
        pass
    ws.pointer_down(*POS["A"])
    ws.pointer_move(150, 150)
    ws.pointer_up()
    current = ws.history.stack(EditMode.USER).current
    assert not current.mst_order
    assert (current.nodes[0].x, current.nodes[0].y) == (150, 150)

    ws.pointer_down(*EMPTY)
    assert ws.undo()
    assert ws.graph.mst_edges == []
    assert (ws.graph.nodes[0].x, ws.graph.nodes[0].y) == (150, 150)


# ---------------------------------------------------------------------------
# Playback reconciliation
# ---------------------------------------------------------------------------
def test_visualize_runs_on_ticks(ws, clock):
    build_user_triangle(ws)
    assert ws.visualize(Settings(algorithm="kruskal", speed=10))
    while ws.playback.running:
        clock.advance(ws.playback.delay)
        ws.tick()
    assert ws.playback.is_complete
    assert ws.state()["stats"]["mst_weight"] == 8


def test_structural_edit_refused_while_running(ws):
    build_user_triangle(ws)
    ws.visualize()
    ws.step_forward()
    ws.set_interaction_mode("delete_node")
    assert ws.pointer_down(*POS["A"]) is None
    assert last_notice(ws).kind == "PlaybackLocked"
    assert ws.graph.node_count() == 3
    assert ws.playback.state is PlaybackState.PAUSED


def test_edit_after_completion_resets_playback(ws):
    build_user_triangle(ws)
    ws.visualize()
    while ws.step_forward():
        pass
    assert ws.graph.mst_weight() == 8

    ws.set_interaction_mode("delete_edge")
    ws.pointer_down(150, 200)
    assert ws.playback.state is PlaybackState.IDLE
    assert ws.graph.mst_edges == []
    # history never stores MST flags
    assert not ws.history.stack(EditMode.USER).current.mst_order


def test_undo_mid_run_cancels_timer(ws, clock):
    build_user_triangle(ws)
    ws.visualize()
    ws.undo()
    assert ws.playback.state is PlaybackState.IDLE
    clock.advance(100)
    assert not ws.tick()
    assert ws.graph.edge_count() == 2


def test_regenerate_mid_run_cancels_timer(ws, clock):
    ws.generate(Settings(node_count=6, seed=4))
    ws.visualize()
    ws.step_forward()
    ws.pause_resume()
    assert ws.playback.running

    ws.generate(Settings(node_count=6, seed=5))
    clock.advance(100)
    assert not ws.tick()
    assert ws.playback.state is PlaybackState.IDLE
    assert ws.state()["view"]["mst_edges"] == []
    assert ws.state()["playback"]["remaining_ms"] == 0


def test_bad_start_node_keeps_previous_settings(ws):
    build_user_triangle(ws)
    before = ws.settings
    assert ws.visualize(Settings(algorithm="prim", start_node="Z", speed=9)) is None
    assert last_notice(ws).kind == "NotFound"
    assert ws.settings is before
    assert ws.settings.start_node is None
    assert ws.playback.state is PlaybackState.IDLE

    assert ws.visualize(Settings(algorithm="prim", start_node="B", speed=9))
    assert ws.settings.start_node == "B"
    assert ws.playback.start_node == 1


def test_seek_jumps_by_replay(ws):
    build_user_triangle(ws)
    ws.visualize(Settings(algorithm="kruskal"))
    total = ws.playback.total_steps
    assert ws.seek(total)
    assert ws.playback.is_complete
    assert ws.graph.mst_weight() == 8
    assert ws.seek(0)
    assert ws.graph.mst_edges == []
    assert not ws.seek(total + 1)


def test_state_reports_cycle_and_timer(ws, clock, kite):
    ws.graph.restore(kite.snapshot())
    ws.visualize(Settings(algorithm="prim", speed=10))
    assert ws.state()["playback"]["remaining_ms"] == 200
    clock.advance(0.05)
    assert ws.state()["playback"]["remaining_ms"] == 150

    while ws.playback.current_step is None or ws.playback.current_step.action is not StepAction.SHOW_INVALID:
        assert ws.step_forward()
    view = ws.state()["view"]
    assert view["cycle_edges"] == ["A-C:3", "A-B:1", "B-C:2"]
    assert view["cycle_nodes"] == ["A", "B", "C"]
    assert view["invalid_edges"] == ["A-C:3"]


def test_mode_switch_resets_playback(ws):
    build_user_triangle(ws)
    ws.visualize()
    ws.switch_mode("generative")
    assert ws.playback.state is PlaybackState.IDLE
    assert ws.playback.graph is ws.graph


def test_algorithm_switch_locked_mid_run(ws):
    build_user_triangle(ws)
    ws.visualize()
    assert ws.select_algorithm("kruskal") is None
    assert last_notice(ws).kind == "PlaybackLocked"
    ws.reset_playback()
    assert ws.select_algorithm("kruskal")
    assert ws.settings.algorithm == "kruskal"
    with pytest.raises(InvalidSetting):
        ws.select_algorithm("boruvka")


def test_visualize_needs_two_nodes(ws):
    ws.switch_mode("user")
    ws.pointer_down(*POS["A"])
    assert ws.visualize() is None
    assert last_notice(ws).kind == "InsufficientNodes"


def test_visualize_from_chosen_start(ws):
    build_user_triangle(ws)
    ws.visualize(Settings(start_node="C"))
    ws.step_forward()
    assert ws.state()["view"]["visited_nodes"] == ["C"]

    ws.reset_playback()
    assert ws.visualize(Settings(start_node="Z")) is None
    assert last_notice(ws).kind == "NotFound"


def test_speed_change(ws):
    ws.set_speed(2)
    assert ws.state()["playback"]["delay_ms"] == 1800
    with pytest.raises(InvalidSetting):
        ws.set_speed(0)


# ---------------------------------------------------------------------------
# Analytics & output
# ---------------------------------------------------------------------------
def test_compare_on_triangle(ws):
    build_user_triangle(ws)
    result = ws.compare()
    assert result.weights_agree
    assert result.left.mst_weight == result.right.mst_weight == 8
    assert result.winner_steps == "tie"
    assert ws.state()["comparison"]["left"]["algo_key"] == "prim"

    ws.pointer_down(*EMPTY)
    assert ws.comparison is None


def test_compare_needs_two_nodes(ws):
    ws.switch_mode("user")
    assert ws.compare() is None
    assert last_notice(ws).kind == "InsufficientNodes"


def test_notices_are_capped(ws):
    for i in range(NOTICE_LIMIT + 3):
        ws.notify(f"n{i}")
    drained = ws.drain_notices()
    assert [n.message for n in drained] == [f"n{i}" for i in range(3, NOTICE_LIMIT + 3)]
    assert ws.drain_notices() == []


def test_revision_moves_on_change(ws):
    before = ws.revision
    build_user_triangle(ws)
    assert ws.revision > before


def test_state_and_render(ws):
    build_user_triangle(ws)
    ws.visualize()
    ws.step_forward()
    state = ws.state()
    assert state["mode"] == "user"
    assert state["playback"]["state"] == "paused"
    assert state["playback"]["step"]["step_number"] == 0
    assert state["view"]["priority_queue"] == ["A-B:5", "A-C:10"]

    svg = ws.render(SvgSurface(), "light").to_svg()
    assert svg.startswith("<svg")
    assert svg.count("<circle") == 3
