from algorithms import list_algorithms
from algorithms.step import EdgeRef
from engine.playback import ViewSnapshot
from engine.recorder import compare_all
from engine.settings import Settings
from ui import (
    CanvasConfig, SvgSurface, THEMES, algorithm_selector, comparison_panel, data_structures,
    edit_toolbar, explanation_panel, graph_generator, notices_panel, playback_controls,
    pseudocode_viewer, render_canvas, render_svg,
)


class RecordingSurface:
    """Surface that just records calls."""

    def __init__(self):
        self.calls = []

    def clear(self, width, height, background):
        self.calls.append(("clear", background))

    def line(self, x1, y1, x2, y2, color, width):
        self.calls.append(("line", (x1, y1, x2, y2), color, width))

    def circle(self, cx, cy, r, fill, stroke, stroke_width):
        self.calls.append(("circle", (cx, cy), fill, stroke, stroke_width))

    def text(self, x, y, content, color, size, background=None, bold=False):
        self.calls.append(("text", content))

    def of(self, kind):
        return [c for c in self.calls if c[0] == kind]


def ref(a, b, w):
    return EdgeRef(a, b, w)


# ---------------------------------------------------------------------------
# Canvas
# ---------------------------------------------------------------------------
def test_draw_order_edges_labels_nodes(triangle):
    s = render_canvas(triangle, None, RecordingSurface())
    kinds = [c[0] for c in s.calls]
    assert kinds == ["clear"] + ["line"] * 3 + ["text"] * 3 + ["circle", "text"] * 3
    assert [c[1] for c in s.of("text")][:3] == ["5", "3", "10"]


def test_edge_colour_priority(triangle):
    c = THEMES["dark"]
    triangle.mark_in_mst(triangle.find_edge(0, 1))
    view = ViewSnapshot(
        considering_edge=ref(0, 2, 10),
        invalid_edges=(ref(0, 1, 5), ref(1, 2, 3)),
    )
    lines = render_canvas(triangle, view, RecordingSurface()).of("line")
    assert [l[2] for l in lines] == [c["edge_mst"], c["edge_invalid"], c["edge_consider"]]


def test_visited_and_selected_nodes(triangle):
    c = THEMES["light"]
    view = ViewSnapshot(visited_nodes=frozenset({1}))
    circles = render_canvas(triangle, view, RecordingSurface(), CanvasConfig("light"),
                            {"selected_source": 2}).of("circle")
    assert [x[2] for x in circles] == [c["node"], c["node_visited"], c["node"]]
    assert circles[2][3:] == (c["node_selected"], 4)


def test_cycle_of_rejected_edge_is_painted(triangle):
    c = THEMES["dark"]
    triangle.mark_in_mst(triangle.find_edge(0, 1))
    triangle.mark_in_mst(triangle.find_edge(1, 2))
    view = ViewSnapshot(
        invalid_edges=(ref(0, 2, 10),),
        cycle_edges=(ref(0, 2, 10), ref(0, 1, 5), ref(1, 2, 3)),
        cycle_nodes=frozenset({0, 1}),
        visited_nodes=frozenset({0, 1, 2}),
    )
    s = render_canvas(triangle, view, RecordingSurface())
    assert [l[2] for l in s.of("line")] == [c["edge_invalid"]] * 3
    assert [x[2] for x in s.of("circle")] == [c["node_cycle"], c["node_cycle"], c["node_visited"]]
    assert "node_cycle" in THEMES["light"]


def test_prompt_edge_highlight(triangle):
    lines = render_canvas(triangle, None, RecordingSurface(), marks={"prompt_edge": (2, 1)}).of("line")
    assert lines[1][2] == THEMES["dark"]["edge_prompt"]


def test_render_is_idempotent(triangle):
    assert render_svg(triangle) == render_svg(triangle)
    assert triangle.mst_edges == []


def test_unknown_theme_falls_back_to_dark():
    assert CanvasConfig("neon").theme == "dark"


def test_svg_escapes_text():
    s = SvgSurface()
    s.clear(10, 10, "#000")
    s.text(0, 0, "<b>", "#fff", 12)
    assert "&lt;b&gt;" in s.to_svg()


# ---------------------------------------------------------------------------
# Panels
# ---------------------------------------------------------------------------
def test_playback_controls_buttons():
    html = playback_controls("running", 2, 8, 5)
    assert 'id="btn-pause" >Pause' in html
    assert 'id="btn-next" title="Next step" disabled' in html
    assert 'id="btn-end" title="Jump to end" data-total="8" >' in html
    idle = playback_controls()
    assert 'id="btn-pause" disabled' in idle
    assert 'id="btn-rewind" title="Rewind to start" disabled' in idle


def test_algorithm_selector_start_node_only_for_prim():
    algos = list_algorithms()
    prim = algorithm_selector(algos, "prim", ["A", "B"], "B")
    assert 'id="start-node"' in prim
    assert '<option value="B" selected>' in prim
    assert 'id="start-node"' not in algorithm_selector(algos, "kruskal", ["A"])
    assert "disabled" in algorithm_selector(algos, "prim", locked=True)


def test_generator_and_toolbar():
    html = graph_generator(Settings(topology="cycle", seed=4), "user")
    assert '<option value="cycle" selected>' in html
    assert 'value="4"' in html
    assert "switches back" in html

    bar = edit_toolbar("user", "add_edge", can_undo=True)
    assert 'class="tool-btn active" data-tool="add_edge"' in bar
    assert 'id="btn-redo" disabled' in bar


def test_data_structures_per_algorithm():
    view = {"priority_queue": ["A-B:5"], "visited_nodes": ["A"], "mst_edges": [],
            "disjoint_sets": [["A", "B"], ["C"]], "sorted_edges": ["B-C:3"]}
    prim = data_structures("prim", view)
    assert "Priority Queue" in prim and "A-B:5" in prim
    kruskal = data_structures("kruskal", view)
    assert "Set 0: {A, B}" in kruskal
    assert "Sorted Edges" in kruskal


def test_comparison_panel(kite):
    assert "Compare Algorithms" in comparison_panel(None)
    _, _, result = compare_all(kite.snapshot())
    html = comparison_panel(result)
    assert "Tie" in html
    assert "Same weight" in html


def test_text_panels_escape():
    assert "&lt;script&gt;" in explanation_panel("<script>")
    assert "Visualize" in explanation_panel("")
    code = pseudocode_viewer(["a", "b"], 1)
    assert 'class="code-line highlight" data-line="1"' in code
    toasts = notices_panel([{"level": "error", "message": "x < y"}])
    assert "toast-error" in toasts and "x &lt; y" in toasts
