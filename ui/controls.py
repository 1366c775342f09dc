"""
controls.py — UI Control Panels
=================================
Every UI panel is a pure function that takes state and returns HTML.

Panels:
  • playback_controls    – visualize / pause / step / reset / speed
  • algorithm_selector   – Prim vs Kruskal (+ start node for Prim)
  • graph_generator      – node count, density, topology
  • edit_toolbar         – editing mode + interaction mode buttons, undo/redo
  • data_structures      – priority queue & visited (Prim) or sets & sorted edges (Kruskal)
  • stats_panel          – node / edge count, MST weight
  • comparison_panel     – Prim vs Kruskal on the same graph
  • pseudocode_viewer    – with live line highlighting
  • explanation_panel    – "why this step happened"
  • notices_panel        – toasts for rejected edits

Design:
  - All panels are stateless render functions.
  - State is passed in as kwargs.
  - Output is raw HTML strings (no templating engine).
  - Anything that came from the user or the trace is escaped.
"""

from html import escape
from typing import Iterable, List, Optional

from algorithms import AlgoInfo
from engine.playback import SPEED_MAX, SPEED_MIN, speed_label
from engine.recorder import ComparisonResult
from engine.settings import MAX_NODES, MIN_NODES, Settings
from graph.generator import TOPOLOGIES


# ---------------------------------------------------------------------------
# Playback Controls
# ---------------------------------------------------------------------------
def playback_controls(
    state: str = "idle",
    cursor: int = 0,
    total_steps: int = 0,
    speed: int = 5,
) -> str:
    has_steps = total_steps > 0
    running = state == "running"
    pause_label = "Pause" if running else "Resume"

    def disabled(flag: bool) -> str:
        return "disabled" if flag else ""

    return f"""
    <div class="panel playback-controls">
      <h3>⏯ Playback</h3>
      <div class="button-row">
        <button id="btn-visualize" class="btn-primary">▶ Visualize</button>
        <button id="btn-pause" {disabled(state not in ('running', 'paused'))}>{pause_label}</button>
        <button id="btn-rewind" title="Rewind to start" {disabled(not has_steps or cursor == 0)}>⏮</button>
        <button id="btn-prev" title="Previous step" {disabled(not has_steps or cursor == 0 or running)}>◀</button>
        <button id="btn-next" title="Next step" {disabled(not has_steps or cursor == total_steps or running)}>▶</button>
        <button id="btn-end" title="Jump to end" data-total="{total_steps}" {disabled(not has_steps or cursor == total_steps)}>⏭</button>
        <button id="btn-reset" title="Reset">⟲</button>
      </div>
      <div class="step-info">
        Step <span id="current-step">{cursor}</span> / <span id="total-steps">{total_steps}</span>
        {' <span class="finished-badge">COMPLETE</span>' if state == 'complete' else ''}
      </div>
      <div class="speed-control">
        <label>Speed: <span id="speed-label">{speed_label(speed)}</span></label>
        <input type="range" id="speed" min="{SPEED_MIN}" max="{SPEED_MAX}" value="{speed}">
      </div>
    </div>
    """


# ---------------------------------------------------------------------------
# Algorithm Selector
# ---------------------------------------------------------------------------
def algorithm_selector(
    algorithms: List[AlgoInfo],
    selected_key: str = "prim",
    node_labels: Iterable[str] = (),
    start_node: Optional[str] = None,
    locked: bool = False,
) -> str:
    buttons = []
    selected = None
    for algo in algorithms:
        active = "active" if algo.key == selected_key else ""
        if algo.key == selected_key:
            selected = algo
        buttons.append(
            f'<button class="algorithm-btn {active}" data-algo="{algo.key}" '
            f'{"disabled" if locked else ""} title="{escape(algo.description)}">'
            f'{escape(algo.label)}</button>'
        )

    start_block = ""
    if selected is not None and selected.uses_start_node:
        options = ['<option value="">First node</option>']
        for label in node_labels:
            sel = "selected" if label == start_node else ""
            options.append(f'<option value="{escape(label)}" {sel}>{escape(label)}</option>')
        start_block = f"""
        <label>Start node:
          <select id="start-node">{''.join(options)}</select>
        </label>
        """

    info = ""
    if selected is not None:
        info = (
            f'<p class="hint">{escape(selected.structure)} · '
            f'{escape(selected.complexity_time)} time · {escape(selected.complexity_space)} space</p>'
        )

    return f"""
    <div class="panel algorithm-selector">
      <h3>🧠 Algorithm</h3>
      <div class="button-row">{''.join(buttons)}</div>
      {info}
      {start_block}
    </div>
    """


# ---------------------------------------------------------------------------
# Graph Generator
# ---------------------------------------------------------------------------
def graph_generator(settings: Optional[Settings] = None, editing_mode: str = "generative") -> str:
    s = settings or Settings()
    topo_options = []
    for t in TOPOLOGIES:
        sel = "selected" if t == s.topology else ""
        topo_options.append(f'<option value="{t}" {sel}>{t.capitalize()}</option>')

    return f"""
    <div class="panel graph-generator">
      <h3>🌐 Graph Generator</h3>
      <label>Nodes: <span id="node-count-val">{s.node_count}</span>
        <input type="range" id="node-count" min="{MIN_NODES}" max="{MAX_NODES}" value="{s.node_count}"></label>
      <label>Edge density: <span id="density-val">{s.density}%</span>
        <input type="range" id="density" min="0" max="100" value="{s.density}"></label>
      <label>Topology:
        <select id="topology">{''.join(topo_options)}</select></label>
      <label>Seed: <input type="number" id="seed" value="{'' if s.seed is None else s.seed}" placeholder="random"></label>
      <button id="btn-generate" class="btn-secondary">Generate Graph</button>
      {'<p class="hint">Generating switches back to generative mode.</p>' if editing_mode == 'user' else ''}
    </div>
    """


# ---------------------------------------------------------------------------
# Edit Toolbar
# ---------------------------------------------------------------------------
_INTERACTIONS = [
    ("drag",        "✋ Drag"),
    ("add_edge",    "➕ Add Edge"),
    ("edit_weight", "✎ Edit Weight"),
    ("delete_edge", "✂ Delete Edge"),
    ("delete_node", "🗑 Delete Node"),
]


def edit_toolbar(
    editing_mode: str = "generative",
    interaction_mode: str = "drag",
    can_undo: bool = False,
    can_redo: bool = False,
) -> str:
    modes = []
    for key, label in (("generative", "Generate"), ("user", "Build Your Own")):
        active = "active" if key == editing_mode else ""
        modes.append(f'<button class="mode-btn {active}" data-mode="{key}">{label}</button>')

    tools = []
    for key, label in _INTERACTIONS:
        active = "active" if key == interaction_mode else ""
        tools.append(f'<button class="tool-btn {active}" data-tool="{key}">{label}</button>')

    hint = "Click empty canvas to add a node." if editing_mode == "user" else "Drag nodes to rearrange."
    return f"""
    <div class="panel edit-toolbar">
      <h3>✏️ Edit</h3>
      <div class="button-row">{''.join(modes)}</div>
      <div class="button-row tools">{''.join(tools)}</div>
      <div class="button-row">
        <button id="btn-undo" {'' if can_undo else 'disabled'}>↶ Undo</button>
        <button id="btn-redo" {'' if can_redo else 'disabled'}>↷ Redo</button>
      </div>
      <p class="hint">{hint}</p>
    </div>
    """


# ---------------------------------------------------------------------------
# Data Structures (right side panel)
# ---------------------------------------------------------------------------
def _items(values: List[str], empty: str, css: str = "ds-item") -> str:
    if not values:
        return f'<div class="queue-item">{empty}</div>'
    return "".join(f'<div class="{css}">{escape(v)}</div>' for v in values)


def data_structures(algo_key: str, view: dict) -> str:
    """`view` is the "view" block of Workspace.state()."""
    if algo_key == "prim":
        first = ("Priority Queue", _items(view.get("priority_queue", []), "Queue Empty", "queue-item"))
        second = ("Visited Nodes", _items(view.get("visited_nodes", []), "None yet"))
    else:
        sets = [f"Set {i}: {{{', '.join(s)}}}" for i, s in enumerate(view.get("disjoint_sets", []))]
        first = ("Disjoint Sets", _items(sets, "No Sets", "ds-item component"))
        second = ("Sorted Edges", _items(view.get("sorted_edges", []), "Not sorted yet"))

    mst = ("MST Edges", _items(view.get("mst_edges", []), "None yet", "ds-item mst"))
    blocks = [
        f'<div class="ds-block"><h4>{title}</h4><div class="ds-content">{body}</div></div>'
        for title, body in (first, second, mst)
    ]
    return f"""
    <div class="panel data-structures">
      <h3>🗂 Data Structures</h3>
      {''.join(blocks)}
    </div>
    """


# ---------------------------------------------------------------------------
# Stats Panel
# ---------------------------------------------------------------------------
def stats_panel(nodes: int = 0, edges: int = 0, mst_weight: int = 0) -> str:
    return f"""
    <div class="panel stats-panel">
      <h3>📊 Stats</h3>
      <table>
        <tr><td>Total Nodes:</td><td><strong id="total-nodes">{nodes}</strong></td></tr>
        <tr><td>Total Edges:</td><td><strong id="total-edges">{edges}</strong></td></tr>
        <tr><td>MST Weight:</td><td><strong id="mst-weight">{mst_weight}</strong></td></tr>
      </table>
    </div>
    """


# ---------------------------------------------------------------------------
# Comparison Panel (side-by-side)
# ---------------------------------------------------------------------------
def comparison_panel(comp: Optional[ComparisonResult] = None) -> str:
    if not comp:
        return """
        <div class="panel comparison-panel">
          <h3>⚖️ Compare</h3>
          <p class="placeholder">Run Prim and Kruskal on the current graph side by side.</p>
          <button id="btn-compare" class="btn-secondary">Compare Algorithms</button>
        </div>
        """

    left, right = comp.left, comp.right

    def badge(winner: str) -> str:
        return "🟰 Tie" if winner == "tie" else f"👑 {escape(winner)}"

    agree = "✅ Same weight" if comp.weights_agree else "❌ Weights differ"
    return f"""
    <div class="panel comparison-panel">
      <h3>⚖️ {escape(left.algo_label)} vs {escape(right.algo_label)}</h3>
      <table class="comparison-table">
        <thead>
          <tr><th>Metric</th><th>{escape(left.algo_label)}</th><th>{escape(right.algo_label)}</th><th>Winner</th></tr>
        </thead>
        <tbody>
          <tr><td>Total Steps</td><td>{left.total_steps}</td><td>{right.total_steps}</td><td>{badge(comp.winner_steps)}</td></tr>
          <tr><td>Rejected Edges</td><td>{left.edges_rejected}</td><td>{right.edges_rejected}</td><td>{badge(comp.winner_rejects)}</td></tr>
          <tr><td>MST Weight</td><td>{left.mst_weight}</td><td>{right.mst_weight}</td><td>{agree}</td></tr>
          <tr><td>Spanning</td><td>{'yes' if left.spanning else 'no'}</td><td>{'yes' if right.spanning else 'no'}</td><td>—</td></tr>
        </tbody>
      </table>
      <button id="btn-compare" class="btn-secondary">Compare Again</button>
    </div>
    """


# ---------------------------------------------------------------------------
# Pseudocode Viewer
# ---------------------------------------------------------------------------
def pseudocode_viewer(pseudocode_lines: List[str], current_line: int = -1) -> str:
    if not pseudocode_lines:
        return """
        <div class="code-block">
          <div class="placeholder">Select an algorithm to view pseudocode</div>
        </div>
        """

    lines_html = []
    for i, line in enumerate(pseudocode_lines):
        highlight = "highlight" if i == current_line else ""
        lines_html.append(f'<div class="code-line {highlight}" data-line="{i}">{escape(line)}</div>')

    return f"""
    <div class="code-block">
      {''.join(lines_html)}
    </div>
    """


# ---------------------------------------------------------------------------
# Explanation Panel
# ---------------------------------------------------------------------------
def explanation_panel(explanation: str = "") -> str:
    if not explanation:
        return ('<div class="explanation-text">▶ Click <strong>Visualize</strong> to watch '
                'the algorithm build the minimum spanning tree step by step.</div>')
    return f'<div class="explanation-text">{escape(explanation)}</div>'


# ---------------------------------------------------------------------------
# Notices
# ---------------------------------------------------------------------------
def notices_panel(notices: List[dict]) -> str:
    toasts = [
        f'<div class="toast toast-{escape(n["level"])}">{escape(n["message"])}</div>'
        for n in notices
    ]
    return f'<div class="toasts">{"".join(toasts)}</div>'
