"""
graph.py — Graph Container
==========================
Single source of truth for the graph being edited and animated.
The edit controller, the playback engine and the renderer all talk to
this object; the algorithms only ever see a GraphSnapshot of it.

Responsibilities:
  1. CRUD on nodes & edges, with validation   (add / delete / re-weight / move)
  2. Id + label allocation                    (A–Z, freed labels are reused)
  3. Adjacency queries                        (find_edge, incident_edges, …)
  4. MST membership flags                     (mark_in_mst / clear_mst)
  5. Snapshot / restore                       (history + tracing input)

Design decisions:
  - Nodes live in an insertion-ordered dict keyed by id; edges in a list,
    because edge order is the tie-break for equal weights in both
    algorithms and must survive undo / redo unchanged.
  - Every mutation validates first and mutates second, so a raised
    GraphError always leaves the graph untouched.
  - `mst_edges` holds references into `edges`; it is exactly the in-MST
    edges in the order they were added.
"""

from typing import Dict, List, Optional

from graph.edge import Edge, edge_key
from graph.errors import (
    CapacityExceeded, DuplicateEdge, InvalidWeight, NotFound, SelfLoop,
)
from graph.node import MAX_LABELS, Node, id_for, label_for
from graph.snapshot import EdgeRecord, GraphSnapshot, NodeRecord


def parse_weight(value) -> int:
    """
    Validate a user-supplied weight and return it as a positive int.

    Accepts ints and integral numeric strings ("7", " 12 ", "3.0").
    Anything else raises InvalidWeight.
    """
    if isinstance(value, bool) or value is None:
        raise InvalidWeight(f"Weight must be a positive integer, got {value!r}")
    if isinstance(value, str):
        text = value.strip()
        try:
            number = float(text)
        except ValueError:
            raise InvalidWeight(f"Weight must be a positive integer, got {value!r}") from None
    elif isinstance(value, (int, float)):
        number = value
    else:
        raise InvalidWeight(f"Weight must be a positive integer, got {value!r}")

    if number != number or number in (float("inf"), float("-inf")) or number != int(number):
        raise InvalidWeight(f"Weight must be a whole number, got {value!r}")
    if number <= 0:
        raise InvalidWeight(f"Weight must be greater than 0, got {value!r}")
    return int(number)


class Graph:
    """
    Attributes:
        nodes            : {node_id: Node}, insertion ordered
        edges            : [Edge], insertion ordered
        mst_edges        : [Edge] currently in the MST, in the order they were added
        next_node_id     : next never-used id (0–26)
        available_labels : freed labels waiting to be reused, kept sorted
    """

    def __init__(self):
        self.nodes:            Dict[int, Node] = {}
        self.edges:            List[Edge]      = []
        self.mst_edges:        List[Edge]      = []
        self.next_node_id:     int             = 0
        self.available_labels: List[str]       = []

    # ==================================================================
    # NODE CRUD
    # ==================================================================
    def add_node(self, x: float, y: float) -> Node:
        """Create a node at (x, y) with the next free id / label."""
        if self.available_labels:
            label = self.available_labels[0]
            node_id = id_for(label)
            del self.available_labels[0]
        elif self.next_node_id < MAX_LABELS:
            node_id = self.next_node_id
            label = label_for(node_id)
            self.next_node_id += 1
        else:
            raise CapacityExceeded(f"All {MAX_LABELS} node labels (A–Z) are in use")

        node = Node(node_id, x, y, label)
        self.nodes[node_id] = node
        return node

    def delete_node(self, node_id: int) -> Node:
        """Remove a node and every edge touching it.  The label goes back to the pool."""
        node = self._require_node(node_id)
        doomed = [e for e in self.edges if e.touches(node_id)]
        for e in doomed:
            self._drop_edge(e)
        del self.nodes[node_id]
        self.available_labels.append(node.label)
        self.available_labels.sort()
        return node

    def move_node(self, node_id: int, x: float, y: float) -> Node:
        node = self._require_node(node_id)
        node.move_to(x, y)
        return node

    def get_node(self, node_id: int) -> Optional[Node]:
        return self.nodes.get(node_id)

    def node_by_label(self, label: str) -> Optional[Node]:
        for node in self.nodes.values():
            if node.label == label:
                return node
        return None

    # ==================================================================
    # EDGE CRUD
    # ==================================================================
    def add_edge(self, u: int, v: int, weight) -> Edge:
        self._require_node(u)
        self._require_node(v)
        if u == v:
            raise SelfLoop(f"Node {self.label_of(u)} cannot be connected to itself")
        if self.find_edge(u, v) is not None:
            raise DuplicateEdge(
                f"Edge {self.label_of(u)}-{self.label_of(v)} already exists"
            )
        edge = Edge(u, v, parse_weight(weight))
        self.edges.append(edge)
        return edge

    def delete_edge(self, u: int, v: int) -> Edge:
        edge = self.find_edge(u, v)
        if edge is None:
            raise NotFound(f"No edge between {self.label_of(u)} and {self.label_of(v)}")
        self._drop_edge(edge)
        return edge

    def set_edge_weight(self, edge: Edge, weight) -> Edge:
        if edge not in self.edges:
            raise NotFound(f"Edge {edge!r} is no longer in the graph")
        edge.weight = parse_weight(weight)
        return edge

    def find_edge(self, u: int, v: int) -> Optional[Edge]:
        key = edge_key(u, v)
        for e in self.edges:
            if e.key == key:
                return e
        return None

    def incident_edges(self, node_id: int) -> List[Edge]:
        return [e for e in self.edges if e.touches(node_id)]

    def are_adjacent(self, u: int, v: int) -> bool:
        return self.find_edge(u, v) is not None

    # ==================================================================
    # MST FLAGS  (written only by the playback engine)
    # ==================================================================
    def mark_in_mst(self, edge: Edge) -> None:
        if edge.in_mst:
            return
        edge.in_mst = True
        self.mst_edges.append(edge)

    def clear_mst(self) -> None:
        for e in self.edges:
            e.in_mst = False
        self.mst_edges = []

    def mst_weight(self) -> int:
        return sum(e.weight for e in self.mst_edges)

    # ==================================================================
    # SNAPSHOT / RESTORE
    # ==================================================================
    def snapshot(self) -> GraphSnapshot:
        return GraphSnapshot(
            nodes=tuple(NodeRecord(n.id, n.label, n.x, n.y) for n in self.nodes.values()),
            edges=tuple(EdgeRecord(e.source, e.target, e.weight, e.in_mst) for e in self.edges),
            mst_order=tuple(e.key for e in self.mst_edges),
            next_node_id=self.next_node_id,
            available_labels=tuple(self.available_labels),
        )

    def restore(self, snap: GraphSnapshot) -> None:
        """Replace the whole graph with the contents of `snap`."""
        self.nodes = {n.id: Node(n.id, n.x, n.y, n.label) for n in snap.nodes}
        self.edges = [Edge(e.source, e.target, e.weight, e.in_mst) for e in snap.edges]
        by_key = {e.key: e for e in self.edges}
        self.mst_edges = [by_key[k] for k in snap.mst_order if k in by_key]
        self.next_node_id = snap.next_node_id
        self.available_labels = list(snap.available_labels)

    @classmethod
    def from_snapshot(cls, snap: GraphSnapshot) -> "Graph":
        g = cls()
        g.restore(snap)
        return g

    def clear(self) -> None:
        self.nodes = {}
        self.edges = []
        self.mst_edges = []
        self.next_node_id = 0
        self.available_labels = []

    # ==================================================================
    # UTILITY
    # ==================================================================
    def node_count(self) -> int:
        return len(self.nodes)

    def edge_count(self) -> int:
        return len(self.edges)

    def node_ids(self) -> List[int]:
        return list(self.nodes.keys())

    def label_of(self, node_id: int) -> str:
        node = self.nodes.get(node_id)
        return node.label if node else str(node_id)

    def to_dict(self) -> dict:
        return {
            "nodes":     [n.to_dict() for n in self.nodes.values()],
            "edges":     [e.to_dict() for e in self.edges],
            "mst_edges": [list(e.key) for e in self.mst_edges],
            "mst_weight": self.mst_weight(),
        }

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _require_node(self, node_id: int) -> Node:
        node = self.nodes.get(node_id)
        if node is None:
            raise NotFound(f"Node {node_id} does not exist")
        return node

    def _drop_edge(self, edge: Edge) -> None:
        self.edges = [e for e in self.edges if e is not edge]
        if edge.in_mst:
            self.mst_edges = [e for e in self.mst_edges if e is not edge]
            edge.in_mst = False

    def __repr__(self) -> str:
        return f"Graph(nodes={self.node_count()}, edges={self.edge_count()}, mst={len(self.mst_edges)})"
