"""
editor/
-------
Pointer-driven graph editing.

    from editor import EditController, InteractionMode
"""

from editor.controller import EditController, InteractionMode, WeightPrompt
from editor.hit_test   import node_at, edge_at, edge_label_at, NODE_RADIUS, EDGE_THRESHOLD, LABEL_RADIUS

__all__ = [
    "EditController",
    "InteractionMode",
    "WeightPrompt",
    "node_at",
    "edge_at",
    "edge_label_at",
    "NODE_RADIUS",
    "EDGE_THRESHOLD",
    "LABEL_RADIUS",
]
