"""
main.py — MST Visualizer Flask App
====================================
The web server that powers the visualizer.

Routes:
  GET  /                       – main UI
  GET  /api/state              – current workspace state
  POST /api/graph/generate     – generate a new graph (generative mode)
  POST /api/mode               – switch editing mode (generative / user)
  POST /api/algo               – select Prim / Kruskal
  POST /api/visualize          – build the trace and start auto-advance
  POST /api/tick               – poll the auto-advance timer
  POST /api/step/next          – advance one step
  POST /api/step/prev          – rewind one step
  POST /api/step/goto          – jump to step N (full replay)
  POST /api/play               – pause / resume
  POST /api/reset              – reset playback
  POST /api/speed              – set speed 1–10
  POST /api/undo, /api/redo    – history
  POST /api/tool               – set interaction mode
  POST /api/pointer/<kind>     – pointer down / move / up on the canvas
  POST /api/prompt             – answer the weight prompt
  POST /api/prompt/cancel      – dismiss the weight prompt
  POST /api/compare            – run Prim and Kruskal side by side
  POST /api/theme              – dark / light

State management:
  Each browser session gets its own Workspace, kept in memory in
  WORKSPACES and found through an id in the Flask session cookie.  The
  cookie itself only holds that id and the theme, which is the one
  preference that survives a reload.

  Requests for the same workspace are serialized by a per-workspace
  lock; the workspace itself is single-threaded.
"""

from flask import Flask, render_template_string, request, jsonify, session
from collections import OrderedDict
import logging
import secrets
import threading
import uuid
import sys
import os

# add project root to path so imports work
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from algorithms import get_algorithm, list_algorithms
from engine.settings import Settings
from engine.workspace import Workspace
from graph.errors import InvalidSetting
from ui import (
    THEMES,
    render_svg,
    playback_controls,
    algorithm_selector,
    graph_generator,
    edit_toolbar,
    data_structures,
    stats_panel,
    comparison_panel,
    pseudocode_viewer,
    explanation_panel,
    notices_panel,
)


app = Flask(__name__)
app.config.from_prefixed_env("MST")
if not app.config.get("SECRET_KEY"):
    app.config["SECRET_KEY"] = secrets.token_hex(32)

MAX_WORKSPACES = 256

WORKSPACES: "OrderedDict[str, tuple]" = OrderedDict()
_registry_lock = threading.Lock()


# ---------------------------------------------------------------------------
# Session helpers
# ---------------------------------------------------------------------------
def get_workspace():
    """Return (workspace, lock) for this session, creating it on first use."""
    ws_id = session.get("workspace_id")
    with _registry_lock:
        if ws_id in WORKSPACES:
            WORKSPACES.move_to_end(ws_id)
            return WORKSPACES[ws_id]
        ws_id = uuid.uuid4().hex
        session["workspace_id"] = ws_id
        entry = (Workspace(), threading.Lock())
        WORKSPACES[ws_id] = entry
        if len(WORKSPACES) > MAX_WORKSPACES:
            dropped, _ = WORKSPACES.popitem(last=False)
            app.logger.info("evicted workspace %s", dropped)
        app.logger.info("new workspace %s (%d live)", ws_id, len(WORKSPACES))
        return entry


def get_theme() -> str:
    theme = session.get("theme", "dark")
    return theme if theme in THEMES else "dark"


def body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidSetting("Request body must be a JSON object")
    return data


def coords(data: dict):
    try:
        return float(data["x"]), float(data["y"])
    except (KeyError, TypeError, ValueError):
        raise InvalidSetting("Pointer events need numeric x and y") from None


# ---------------------------------------------------------------------------
# Response builder — everything the page re-renders after an action
# ---------------------------------------------------------------------------
def payload(ws: Workspace, **extra) -> dict:
    state = ws.state()
    theme = get_theme()
    pb = state["playback"]
    info = get_algorithm(state["algorithm"])
    labels = [n["label"] for n in state["graph"]["nodes"]]

    state.update(
        theme=theme,
        svg=render_svg(ws.graph, ws.playback.display(), theme, ws.editor.marks()),
        notices=[n.to_dict() for n in ws.drain_notices()],
        panels={
            "edit": edit_toolbar(
                state["mode"], state["interaction_mode"],
                state["history"]["can_undo"], state["history"]["can_redo"],
            ),
            "algo": algorithm_selector(
                list_algorithms(), state["algorithm"], labels,
                ws.settings.start_node, pb["locked"],
            ),
            "playback": playback_controls(pb["state"], pb["cursor"], pb["total_steps"], pb["speed"]),
            "generator": graph_generator(ws.settings, state["mode"]),
            "stats": stats_panel(**state["stats"]),
            "comparison": comparison_panel(ws.comparison),
            "structures": data_structures(state["algorithm"], state["view"]),
            "pseudocode": pseudocode_viewer(info.pseudocode, state["view"]["pseudo_line"]),
            "explanation": explanation_panel(state["view"]["description"]),
        },
    )
    state.update(extra)
    return state


def act(fn):
    """Run `fn(workspace, data)` under the workspace lock and return the payload."""
    ws, lock = get_workspace()
    data = body()
    with lock:
        result = fn(ws, data)
        return jsonify(payload(ws, ok=result is not None and result is not False))


@app.errorhandler(InvalidSetting)
def handle_invalid_setting(exc):
    app.logger.info("bad request to %s: %s", request.path, exc.message)
    return jsonify({"error": exc.message}), 400


# ---------------------------------------------------------------------------
# Main UI Route
# ---------------------------------------------------------------------------
@app.route("/")
def index():
    ws, lock = get_workspace()
    with lock:
        data = payload(ws)
    toasts = notices_panel(data["notices"])
    return render_template_string(
        INDEX_TEMPLATE,
        theme=data["theme"],
        svg=data["svg"],
        toasts=toasts,
        **data["panels"],
    )


@app.route("/api/state")
def api_state():
    ws, lock = get_workspace()
    with lock:
        return jsonify(payload(ws))


# ---------------------------------------------------------------------------
# API: Graph & modes
# ---------------------------------------------------------------------------
@app.route("/api/graph/generate", methods=["POST"])
def api_graph_generate():
    return act(lambda ws, d: ws.generate(Settings.from_mapping(d, ws.settings)))


@app.route("/api/mode", methods=["POST"])
def api_mode():
    return act(lambda ws, d: ws.switch_mode(d.get("mode", "")) or True)


@app.route("/api/tool", methods=["POST"])
def api_tool():
    return act(lambda ws, d: ws.set_interaction_mode(d.get("tool", ""), bool(d.get("toggle"))) or True)


@app.route("/api/undo", methods=["POST"])
def api_undo():
    return act(lambda ws, d: ws.undo())


@app.route("/api/redo", methods=["POST"])
def api_redo():
    return act(lambda ws, d: ws.redo())


# ---------------------------------------------------------------------------
# API: Pointer input & weight prompt
# ---------------------------------------------------------------------------
@app.route("/api/pointer/<kind>", methods=["POST"])
def api_pointer(kind):
    handlers = {
        "down": lambda ws, d: ws.pointer_down(*coords(d)),
        "move": lambda ws, d: ws.pointer_move(*coords(d)),
        "up":   lambda ws, d: ws.pointer_up(*coords(d)),
    }
    if kind not in handlers:
        return jsonify({"error": f"Unknown pointer event {kind!r}"}), 400
    return act(handlers[kind])


@app.route("/api/prompt", methods=["POST"])
def api_prompt():
    return act(lambda ws, d: ws.answer_prompt(d.get("value")))


@app.route("/api/prompt/cancel", methods=["POST"])
def api_prompt_cancel():
    return act(lambda ws, d: ws.cancel_prompt() or True)


# ---------------------------------------------------------------------------
# API: Algorithm & playback
# ---------------------------------------------------------------------------
@app.route("/api/algo", methods=["POST"])
def api_algo():
    return act(lambda ws, d: ws.select_algorithm(str(d.get("algorithm", ""))))


@app.route("/api/visualize", methods=["POST"])
def api_visualize():
    return act(lambda ws, d: ws.visualize(Settings.from_mapping(d, ws.settings)))


@app.route("/api/tick", methods=["POST"])
def api_tick():
    return act(lambda ws, d: ws.tick())


@app.route("/api/step/next", methods=["POST"])
def api_step_next():
    return act(lambda ws, d: ws.step_forward())


@app.route("/api/step/prev", methods=["POST"])
def api_step_prev():
    return act(lambda ws, d: ws.step_backward())


@app.route("/api/step/goto", methods=["POST"])
def api_step_goto():
    def goto(ws, d):
        index = d.get("index", 0)
        if isinstance(index, bool) or not isinstance(index, int):
            raise InvalidSetting(f"Step index must be an integer, got {index!r}")
        return ws.seek(index)

    return act(goto)


@app.route("/api/play", methods=["POST"])
def api_play():
    return act(lambda ws, d: ws.pause_resume() or True)


@app.route("/api/reset", methods=["POST"])
def api_reset():
    return act(lambda ws, d: ws.reset_playback() or True)


@app.route("/api/speed", methods=["POST"])
def api_speed():
    def set_speed(ws, d):
        ws.set_speed(Settings.from_mapping({"speed": d.get("speed")}, ws.settings).speed)
        return True
    return act(set_speed)


@app.route("/api/compare", methods=["POST"])
def api_compare():
    return act(lambda ws, d: ws.compare())


# ---------------------------------------------------------------------------
# API: Theme (the only persisted preference)
# ---------------------------------------------------------------------------
@app.route("/api/theme", methods=["POST"])
def api_theme():
    theme = body().get("theme")
    if theme not in THEMES:
        raise InvalidSetting(f"Unknown theme {theme!r}; expected one of {', '.join(THEMES)}")
    session["theme"] = theme
    ws, lock = get_workspace()
    with lock:
        return jsonify(payload(ws))


# ---------------------------------------------------------------------------
# HTML Template
# ---------------------------------------------------------------------------
INDEX_TEMPLATE = """
<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>MST Visualizer</title>
  <style>
    * { margin: 0; padding: 0; box-sizing: border-box; }

    body.theme-dark {
      --bg: #11111b; --bg-panel: #1e1e2e; --border: #313244;
      --text: #cdd6f4; --text-muted: #7f849c; --accent: #03A9F4;
      --ok: #4CAF50; --bad: #f44336; --warn: #FF9800;
    }
    body.theme-light {
      --bg: #e8e8e8; --bg-panel: #ffffff; --border: #cfcfcf;
      --text: #212121; --text-muted: #616161; --accent: #0277BD;
      --ok: #2E7D32; --bad: #D32F2F; --warn: #EF6C00;
    }

    body {
      font-family: Arial, -apple-system, sans-serif;
      background: var(--bg);
      color: var(--text);
      display: flex;
      height: 100vh;
      overflow: hidden;
    }

    #sidebar {
      width: 330px;
      overflow-y: auto;
      padding: 16px;
      border-right: 1px solid var(--border);
      background: var(--bg-panel);
    }

    #main { flex: 1; display: flex; flex-direction: column; }

    #canvas-container {
      flex: 1;
      display: flex;
      align-items: center;
      justify-content: center;
      border-bottom: 1px solid var(--border);
    }
    #canvas-svg svg { max-width: 100%; max-height: 100%; cursor: crosshair; user-select: none; }

    #bottom-panel {
      display: grid;
      grid-template-columns: 1fr 1fr 1fr;
      gap: 16px;
      padding: 16px;
      max-height: 340px;
      overflow: hidden;
    }
    #bottom-panel > div {
      background: var(--bg-panel);
      border: 1px solid var(--border);
      border-radius: 10px;
      padding: 14px;
      overflow-y: auto;
    }

    .panel { margin-bottom: 18px; }
    .panel h3, #bottom-panel h3 {
      font-size: 13px;
      text-transform: uppercase;
      letter-spacing: 0.5px;
      color: var(--accent);
      margin-bottom: 10px;
    }
    .panel h4 { font-size: 12px; color: var(--text-muted); margin: 8px 0 4px; }
    .panel label { display: block; margin: 6px 0; font-size: 13px; }
    .panel input[type=range] { width: 100%; }
    .button-row { display: flex; flex-wrap: wrap; gap: 6px; margin-bottom: 8px; }
    button {
      background: var(--bg); color: var(--text);
      border: 1px solid var(--border); border-radius: 6px;
      padding: 6px 10px; cursor: pointer; font-size: 13px;
    }
    button.active, .btn-primary { background: var(--accent); color: #fff; border-color: var(--accent); }
    button:disabled { opacity: 0.4; cursor: not-allowed; }
    .hint, .placeholder { font-size: 12px; color: var(--text-muted); }
    .finished-badge { color: var(--ok); font-weight: 700; margin-left: 6px; }
    table { width: 100%; font-size: 13px; border-collapse: collapse; }
    td, th { padding: 3px 4px; text-align: left; }

    .code-block { font-family: 'Courier New', monospace; font-size: 13px; line-height: 1.6; }
    .code-line { padding: 0 6px; white-space: pre; border-left: 3px solid transparent; }
    .code-line.highlight { background: rgba(255, 152, 0, 0.2); border-left-color: var(--warn); }
    .explanation-text { font-size: 14px; line-height: 1.6; }

    .queue-item, .ds-item {
      display: inline-block; margin: 2px; padding: 3px 7px;
      border-radius: 4px; font-size: 12px; background: var(--bg); border: 1px solid var(--border);
    }
    .ds-item.mst { border-color: var(--ok); color: var(--ok); }

    .toasts { position: fixed; top: 16px; right: 16px; display: flex; flex-direction: column; gap: 8px; z-index: 10; }
    .toast { padding: 10px 14px; border-radius: 6px; background: var(--bg-panel); border-left: 4px solid var(--accent);
             box-shadow: 0 4px 12px rgba(0,0,0,0.3); font-size: 13px; }
    .toast-error { border-left-color: var(--bad); }
    .toast-success { border-left-color: var(--ok); }
  </style>
</head>
<body class="theme-{{ theme }}">
  <div id="sidebar">
    <div class="button-row">
      <button id="btn-theme">{{ 'Light' if theme == 'dark' else 'Dark' }} theme</button>
    </div>
    <div id="edit">{{ edit|safe }}</div>
    <div id="algo">{{ algo|safe }}</div>
    <div id="playback">{{ playback|safe }}</div>
    <div id="generator">{{ generator|safe }}</div>
    <div id="stats">{{ stats|safe }}</div>
    <div id="comparison">{{ comparison|safe }}</div>
  </div>
  <div id="main">
    <div id="canvas-container">
      <div id="canvas-svg">{{ svg|safe }}</div>
    </div>
    <div id="bottom-panel">
      <div><h3>Pseudocode</h3><div id="pseudocode">{{ pseudocode|safe }}</div></div>
      <div><h3>Step Explanation</h3><div id="explanation">{{ explanation|safe }}</div></div>
      <div id="structures">{{ structures|safe }}</div>
    </div>
  </div>
  <div id="toasts">{{ toasts|safe }}</div>

  <script>
    let tickTimer = null;
    let dragging = false;

    // API helpers
    async function post(url, data) {
      const res = await fetch(url, {
        method: 'POST',
        headers: {'Content-Type': 'application/json'},
        body: JSON.stringify(data || {}),
      });
      const json = await res.json();
      if (!res.ok) { toast({level: 'error', message: json.error || 'Request failed'}); return null; }
      apply(json);
      return json;
    }

    function toast(n) {
      const div = document.createElement('div');
      div.className = 'toast toast-' + n.level;
      div.textContent = n.message;
      document.querySelector('#toasts .toasts').appendChild(div);
      setTimeout(() => div.remove(), 3000);
    }

    function apply(data) {
      document.body.className = 'theme-' + data.theme;
      document.getElementById('btn-theme').textContent = (data.theme === 'dark' ? 'Light' : 'Dark') + ' theme';
      document.getElementById('canvas-svg').innerHTML = data.svg;
      for (const [id, html] of Object.entries(data.panels)) {
        document.getElementById(id).innerHTML = html;
      }
      data.notices.forEach(toast);
      scheduleTick(data);
      if (data.editor.prompt) askWeight(data.editor.prompt);
    }

    // Auto-advance: the server owns the timer, the page just polls it
    function scheduleTick(data) {
      clearTimeout(tickTimer);
      if (data.playback.running) {
        tickTimer = setTimeout(() => post('/api/tick'), Math.min(Math.max(data.playback.remaining_ms, 20), 250));
      }
    }

    function askWeight(prompt) {
      setTimeout(() => {
        const value = window.prompt(prompt.message, prompt.current ?? '');
        if (value === null) post('/api/prompt/cancel');
        else post('/api/prompt', {value: value});
      }, 0);
    }

    function settings() {
      const val = id => document.getElementById(id)?.value;
      const out = {
        node_count: val('node-count'), density: val('density'),
        topology: val('topology'), seed: val('seed'), speed: val('speed'),
      };
      if (document.getElementById('start-node')) out.start_node = val('start-node');
      return out;
    }

    // Canvas pointer events, in SVG coordinates
    function svgPoint(e) {
      const svg = document.querySelector('#canvas-svg svg');
      const pt = svg.createSVGPoint();
      pt.x = e.clientX; pt.y = e.clientY;
      const p = pt.matrixTransform(svg.getScreenCTM().inverse());
      return {x: p.x, y: p.y};
    }
    const canvas = document.getElementById('canvas-svg');
    canvas.addEventListener('mousedown', async (e) => {
      const data = await post('/api/pointer/down', svgPoint(e));
      dragging = !!(data && data.editor.dragging);
    });
    canvas.addEventListener('mousemove', (e) => {
      if (dragging) post('/api/pointer/move', svgPoint(e));
    });
    ['mouseup', 'mouseleave'].forEach(evt => canvas.addEventListener(evt, (e) => {
      if (dragging) { dragging = false; post('/api/pointer/up', svgPoint(e)); }
    }));

    // Buttons (panels are re-rendered, so delegate from the document)
    document.addEventListener('click', (e) => {
      const t = e.target.closest('button');
      if (!t || t.disabled) return;
      if (t.id === 'btn-visualize') post('/api/visualize', settings());
      else if (t.id === 'btn-pause') post('/api/play');
      else if (t.id === 'btn-next') post('/api/step/next');
      else if (t.id === 'btn-prev') post('/api/step/prev');
      else if (t.id === 'btn-rewind') post('/api/step/goto', {index: 0});
      else if (t.id === 'btn-end') post('/api/step/goto', {index: Number(t.dataset.total)});
      else if (t.id === 'btn-reset') post('/api/reset');
      else if (t.id === 'btn-generate') post('/api/graph/generate', settings());
      else if (t.id === 'btn-undo') post('/api/undo');
      else if (t.id === 'btn-redo') post('/api/redo');
      else if (t.id === 'btn-compare') post('/api/compare');
      else if (t.id === 'btn-theme') post('/api/theme', {theme: document.body.className === 'theme-dark' ? 'light' : 'dark'});
      else if (t.dataset.algo) post('/api/algo', {algorithm: t.dataset.algo});
      else if (t.dataset.mode) post('/api/mode', {mode: t.dataset.mode});
      else if (t.dataset.tool) post('/api/tool', {tool: t.dataset.tool, toggle: true});
    });

    // Range sliders update labels; speed applies immediately
    document.addEventListener('input', (e) => {
      if (e.target.id === 'node-count') document.getElementById('node-count-val').textContent = e.target.value;
      if (e.target.id === 'density') document.getElementById('density-val').textContent = e.target.value + '%';
    });
    document.addEventListener('change', (e) => {
      if (e.target.id === 'speed') post('/api/speed', {speed: e.target.value});
    });
  </script>
</body>
</html>
"""


# ---------------------------------------------------------------------------
# Run
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    print("=" * 60)
    print("  MST Visualizer")
    print("  Starting Flask server...")
    print("  Open http://localhost:5000")
    print("=" * 60)
    app.run(debug=os.environ.get("MST_DEBUG") == "1", port=5000, threaded=True)
