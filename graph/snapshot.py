"""
snapshot.py — Frozen Graph Snapshots
=====================================
A GraphSnapshot is an immutable, fully independent copy of a Graph,
including the id counter and the free-label pool.  It serves three
callers:

    • History   – one snapshot per committed edit, compared for dedup
    • Algorithms – read-only input, so tracing can never touch the live graph
    • Playback  – the snapshot the current trace was generated from

Equality is plain dataclass equality over tuples, so two snapshots are
equal exactly when every node, edge, MST flag and allocator field
matches.  There is no other comparison function.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from graph.edge import EdgeKey, edge_key


SNAPSHOT_VERSION = 1


@dataclass(frozen=True)
class NodeRecord:
    id:    int
    label: str
    x:     float
    y:     float


@dataclass(frozen=True)
class EdgeRecord:
    source: int
    target: int
    weight: int
    in_mst: bool = False

    @property
    def key(self) -> EdgeKey:
        return edge_key(self.source, self.target)

    def other_end(self, node_id: int) -> Optional[int]:
        """Given one endpoint, return the other.  None if node_id isn't an endpoint."""
        if node_id == self.source:
            return self.target
        if node_id == self.target:
            return self.source
        return None


@dataclass(frozen=True)
class GraphSnapshot:
    """
    Attributes:
        nodes            : NodeRecords in graph order.
        edges            : EdgeRecords in graph order.
        mst_order        : Keys of in-MST edges, in the order they joined the MST.
        next_node_id     : Next never-used id.
        available_labels : Freed labels waiting for reuse, sorted.
        version          : Layout version of this record.
    """

    nodes:            Tuple[NodeRecord, ...] = ()
    edges:            Tuple[EdgeRecord, ...] = ()
    mst_order:        Tuple[EdgeKey, ...]    = ()
    next_node_id:     int                    = 0
    available_labels: Tuple[str, ...]        = ()
    version:          int                    = field(default=SNAPSHOT_VERSION)

    # ------------------------------------------------------------------
    # Read helpers used by the algorithms
    # ------------------------------------------------------------------
    @property
    def node_count(self) -> int:
        return len(self.nodes)

    def node_ids(self) -> Tuple[int, ...]:
        return tuple(n.id for n in self.nodes)

    def labels(self) -> Dict[int, str]:
        return {n.id: n.label for n in self.nodes}

    def label_of(self, node_id: int) -> str:
        for n in self.nodes:
            if n.id == node_id:
                return n.label
        return str(node_id)

    def find_edge(self, u: int, v: int) -> Optional[EdgeRecord]:
        key = edge_key(u, v)
        for e in self.edges:
            if e.key == key:
                return e
        return None

    def to_dict(self) -> dict:
        return {
            "version":          self.version,
            "nodes":            [n.__dict__.copy() for n in self.nodes],
            "edges":            [e.__dict__.copy() for e in self.edges],
            "mst_order":        [list(k) for k in self.mst_order],
            "next_node_id":     self.next_node_id,
            "available_labels": list(self.available_labels),
        }
