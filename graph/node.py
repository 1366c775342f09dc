"""
node.py — Graph Node
====================
A labelled point on the canvas.

Design decisions:
  - `id` is an integer bound to the label: A ↔ 0, B ↔ 1, … Z ↔ 25.
    The Graph hands out ids and labels together so the pair stays
    bijective for as long as the node lives.
  - Position is the only mutable part.  Dragging changes x / y and
    nothing else, because MST selection depends on weights, not geometry.
"""

from typing import Optional


MAX_LABELS = 26


def label_for(node_id: int) -> str:
    """0 → 'A', 1 → 'B', … 25 → 'Z'."""
    if not 0 <= node_id < MAX_LABELS:
        raise ValueError(f"node id {node_id} has no label")
    return chr(ord("A") + node_id)


def id_for(label: str) -> int:
    """'A' → 0 … 'Z' → 25."""
    label = label.strip().upper()
    if len(label) != 1 or not "A" <= label <= "Z":
        raise ValueError(f"{label!r} is not a node label")
    return ord(label) - ord("A")


class Node:
    """
    Attributes:
        id    : Integer id, 0–25.
        label : Single letter A–Z matching the id.
        x, y  : Canvas coordinates in pixels.
    """

    __slots__ = ("id", "label", "x", "y")

    def __init__(self, node_id: int, x: float = 0.0, y: float = 0.0, label: Optional[str] = None):
        self.id:    int   = node_id
        self.label: str   = label or label_for(node_id)
        self.x:     float = float(x)
        self.y:     float = float(y)

    def move_to(self, x: float, y: float) -> None:
        self.x = float(x)
        self.y = float(y)

    def distance_to_point(self, x: float, y: float) -> float:
        return ((self.x - x) ** 2 + (self.y - y) ** 2) ** 0.5

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------
    def to_dict(self) -> dict:
        return {"id": self.id, "label": self.label, "x": self.x, "y": self.y}

    # ------------------------------------------------------------------
    # Dunder
    # ------------------------------------------------------------------
    def __repr__(self) -> str:
        return f"Node(id={self.id}, label={self.label}, pos=({self.x:.2f},{self.y:.2f}))"

    def __eq__(self, other) -> bool:
        return isinstance(other, Node) and self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)
