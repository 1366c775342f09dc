"""
edge.py — Undirected Weighted Edge
==================================
Connects two nodes with a positive integer weight and remembers whether
the playback engine has currently placed it in the MST.

Design decisions:
  - `source` and `target` are node ids, NOT Node references, so edges
    survive snapshot / restore without dangling pointers.
  - The pair is unordered: A–B and B–A are the same edge.  `key` gives
    the canonical (low, high) tuple used for duplicate checks and for
    matching step payloads back to live edges.
  - `in_mst` is derived state owned by the playback engine.  Edits never
    set it directly.
"""

from typing import Tuple


EdgeKey = Tuple[int, int]


def edge_key(u: int, v: int) -> EdgeKey:
    return (u, v) if u <= v else (v, u)


class Edge:
    """
    Attributes:
        source, target : Endpoint node ids (order is insertion order, not direction).
        weight         : Positive integer cost.
        in_mst         : True while the edge is part of the displayed MST.
    """

    __slots__ = ("source", "target", "weight", "in_mst")

    def __init__(self, source: int, target: int, weight: int, in_mst: bool = False):
        self.source: int  = source
        self.target: int  = target
        self.weight: int  = weight
        self.in_mst: bool = in_mst

    @property
    def key(self) -> EdgeKey:
        return edge_key(self.source, self.target)

    def connects(self, a: int, b: int) -> bool:
        """True if this edge links a ↔ b in either order."""
        return self.key == edge_key(a, b)

    def touches(self, node_id: int) -> bool:
        return node_id == self.source or node_id == self.target

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------
    def to_dict(self) -> dict:
        return {
            "source": self.source,
            "target": self.target,
            "weight": self.weight,
            "in_mst": self.in_mst,
        }

    # ------------------------------------------------------------------
    # Dunder
    # ------------------------------------------------------------------
    def __repr__(self) -> str:
        flag = ", mst" if self.in_mst else ""
        return f"Edge({self.source} ↔ {self.target}, w={self.weight}{flag})"
