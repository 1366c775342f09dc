"""
canvas.py — Graph Renderer
===========================
Pure rendering function: Graph + ViewSnapshot + controller marks → draw
calls on a Surface.

The renderer consumes:
  • graph   – the Graph object (node positions, edges, MST flags)
  • view    – the playback ViewSnapshot (considering edge, invalid edges,
              visited nodes, cycle of a rejected edge)
  • marks   – editor marks (selected ADD_EDGE source, edge under a prompt)
  • config  – visual config for the active theme

Design decisions:
  - NO mutation and NO queries back to the surface.  The same inputs
    always produce the same sequence of draw calls, so re-rendering after
    any state change is safe.
  - The Surface is a four-call contract (clear / line / circle / text).
    SvgSurface implements it by collecting SVG elements; anything else
    that can draw lines, circles and labels can stand in.
  - Edges are drawn first, then weight labels, then nodes on top.  Node
    order is insertion order, matching the hit tester's "last wins" rule.
  - Edge colour priority: on a rejected edge's cycle > in MST > rejected
    > being considered > default.  Node fill: on the cycle > visited > default.
"""

import html
from typing import Dict, List, Optional, Protocol

from editor.hit_test import NODE_RADIUS
from engine.playback import ViewSnapshot
from graph import Graph


# ---------------------------------------------------------------------------
# Surface contract
# ---------------------------------------------------------------------------
class Surface(Protocol):
    def clear(self, width: int, height: int, background: str) -> None: ...

    def line(self, x1: float, y1: float, x2: float, y2: float, color: str, width: float) -> None: ...

    def circle(self, cx: float, cy: float, r: float, fill: str, stroke: str, stroke_width: float) -> None: ...

    def text(
        self, x: float, y: float, content: str, color: str, size: int,
        background: Optional[str] = None, bold: bool = False,
    ) -> None: ...


class SvgSurface:
    """Collects draw calls as SVG elements.  `to_svg()` returns the document."""

    def __init__(self):
        self.width:  int       = 0
        self.height: int       = 0
        self.parts:  List[str] = []

    def clear(self, width: int, height: int, background: str) -> None:
        self.width, self.height = width, height
        self.parts = [f'<rect width="{width}" height="{height}" fill="{background}"/>']

    def line(self, x1, y1, x2, y2, color, width) -> None:
        self.parts.append(
            f'<line x1="{x1:.1f}" y1="{y1:.1f}" x2="{x2:.1f}" y2="{y2:.1f}" '
            f'stroke="{color}" stroke-width="{width}" stroke-linecap="round"/>'
        )

    def circle(self, cx, cy, r, fill, stroke, stroke_width) -> None:
        self.parts.append(
            f'<circle cx="{cx:.1f}" cy="{cy:.1f}" r="{r}" fill="{fill}" '
            f'stroke="{stroke}" stroke-width="{stroke_width}"/>'
        )

    def text(self, x, y, content, color, size, background=None, bold=False) -> None:
        if background:
            w = max(30, 9 * len(content) + 12)
            self.parts.append(
                f'<rect x="{x - w / 2:.1f}" y="{y - 12:.1f}" width="{w}" height="24" '
                f'rx="4" fill="{background}"/>'
            )
        weight = ' font-weight="700"' if bold else ""
        self.parts.append(
            f'<text x="{x:.1f}" y="{y:.1f}" text-anchor="middle" dominant-baseline="central" '
            f'font-size="{size}" font-family="Arial, sans-serif" fill="{color}"{weight}>'
            f'{html.escape(content)}</text>'
        )

    def to_svg(self) -> str:
        return (
            f'<svg width="{self.width}" height="{self.height}" '
            f'viewBox="0 0 {self.width} {self.height}" xmlns="http://www.w3.org/2000/svg">\n'
            + "\n".join(self.parts)
            + "\n</svg>"
        )


# ---------------------------------------------------------------------------
# Visual Config — color palette, dimensions
# ---------------------------------------------------------------------------
class CanvasConfig:
    width:  int = 900
    height: int = 600

    def __init__(self, theme: str = "dark"):
        palette = THEMES.get(theme, THEMES["dark"])
        self.theme:  str            = theme if theme in THEMES else "dark"
        self.colors: Dict[str, str] = dict(palette)

    node_radius:       int = NODE_RADIUS
    node_stroke_width: int = 2
    node_label_size:   int = 16
    edge_width:        int = 2
    edge_width_active: int = 4
    weight_size:       int = 14


THEMES: Dict[str, Dict[str, str]] = {
    "dark": {
        "bg":            "#1e1e2e",
        "edge":          "#9C27B0",
        "edge_mst":      "#4CAF50",
        "edge_invalid":  "#f44336",
        "edge_consider": "#FF9800",
        "edge_prompt":   "#03A9F4",
        "weight_bg":     "rgba(0, 0, 0, 0.8)",
        "weight_text":   "#ffffff",
        "node":          "#FF5722",
        "node_visited":  "#4CAF50",
        "node_cycle":    "#f44336",
        "node_stroke":   "#ffffff",
        "node_selected": "#03A9F4",
        "node_label":    "#ffffff",
    },
    "light": {
        "bg":            "#f5f5f5",
        "edge":          "#7B1FA2",
        "edge_mst":      "#2E7D32",
        "edge_invalid":  "#D32F2F",
        "edge_consider": "#EF6C00",
        "edge_prompt":   "#0277BD",
        "weight_bg":     "rgba(255, 255, 255, 0.9)",
        "weight_text":   "#212121",
        "node":          "#F4511E",
        "node_visited":  "#43A047",
        "node_cycle":    "#D32F2F",
        "node_stroke":   "#424242",
        "node_selected": "#0277BD",
        "node_label":    "#ffffff",
    },
}


# ---------------------------------------------------------------------------
# Main Render Function
# ---------------------------------------------------------------------------
def render_canvas(
    graph: Graph,
    view: Optional[ViewSnapshot],
    surface: Surface,
    config: Optional[CanvasConfig] = None,
    marks: Optional[dict] = None,
) -> Surface:
    """Draw the whole scene onto `surface` and return it."""
    config = config or CanvasConfig()
    view = view or ViewSnapshot()
    marks = marks or {}
    c = config.colors

    invalid = {e.key for e in view.invalid_edges}
    cycle = {e.key for e in view.cycle_edges}
    considering = view.considering_edge.key if view.considering_edge else None
    prompt_edge = marks.get("prompt_edge")
    prompt_key = tuple(sorted(prompt_edge)) if prompt_edge else None

    surface.clear(config.width, config.height, c["bg"])

    # -- edges --
    for edge in graph.edges:
        a, b = graph.nodes[edge.source], graph.nodes[edge.target]
        if edge.key in cycle:
            color, width = c["edge_invalid"], config.edge_width_active
        elif edge.in_mst:
            color, width = c["edge_mst"], config.edge_width_active
        elif edge.key in invalid:
            color, width = c["edge_invalid"], config.edge_width_active
        elif edge.key == considering:
            color, width = c["edge_consider"], config.edge_width_active
        elif edge.key == prompt_key:
            color, width = c["edge_prompt"], config.edge_width_active
        else:
            color, width = c["edge"], config.edge_width
        surface.line(a.x, a.y, b.x, b.y, color, width)

    # -- weight labels --
    for edge in graph.edges:
        a, b = graph.nodes[edge.source], graph.nodes[edge.target]
        surface.text((a.x + b.x) / 2, (a.y + b.y) / 2, str(edge.weight),
                     c["weight_text"], config.weight_size, background=c["weight_bg"], bold=True)

    # -- nodes --
    selected = marks.get("selected_source")
    for node in graph.nodes.values():
        if node.id in view.cycle_nodes:
            fill = c["node_cycle"]
        elif node.id in view.visited_nodes:
            fill = c["node_visited"]
        else:
            fill = c["node"]
        if node.id == selected:
            surface.circle(node.x, node.y, config.node_radius, fill, c["node_selected"], 4)
        else:
            surface.circle(node.x, node.y, config.node_radius, fill, c["node_stroke"], config.node_stroke_width)
        surface.text(node.x, node.y, node.label, c["node_label"], config.node_label_size, bold=True)

    return surface


def render_svg(graph: Graph, view: Optional[ViewSnapshot] = None, theme: str = "dark", marks: Optional[dict] = None) -> str:
    """Convenience wrapper for the web layer."""
    return render_canvas(graph, view, SvgSurface(), CanvasConfig(theme), marks).to_svg()
