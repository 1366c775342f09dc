"""
ui/
---
Presentation layer.

    from ui import render_svg, SvgSurface
    from ui import playback_controls, algorithm_selector, …
"""

from ui.canvas import render_canvas, render_svg, CanvasConfig, Surface, SvgSurface, THEMES

from ui.controls import (
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

__all__ = [
    "render_canvas",
    "render_svg",
    "CanvasConfig",
    "Surface",
    "SvgSurface",
    "THEMES",
    "playback_controls",
    "algorithm_selector",
    "graph_generator",
    "edit_toolbar",
    "data_structures",
    "stats_panel",
    "comparison_panel",
    "pseudocode_viewer",
    "explanation_panel",
    "notices_panel",
]
