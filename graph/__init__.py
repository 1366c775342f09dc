"""
graph/
-----
Core data layer.  Public API:

    from graph import Graph, Node, Edge, GraphSnapshot
    from graph import GraphError, DuplicateEdge, …
"""

from graph.node     import Node, MAX_LABELS, label_for, id_for
from graph.edge     import Edge, edge_key
from graph.snapshot import GraphSnapshot, NodeRecord, EdgeRecord, SNAPSHOT_VERSION
from graph.graph    import Graph, parse_weight
from graph.errors   import (
    GraphError,
    CapacityExceeded,
    DuplicateEdge,
    SelfLoop,
    InvalidWeight,
    NotFound,
    InsufficientNodes,
    EmptyGraph,
    PlaybackLocked,
    InvalidSetting,
    StaleTraceError,
)

__all__ = [
    "Node", "MAX_LABELS", "label_for", "id_for",
    "Edge", "edge_key",
    "GraphSnapshot", "NodeRecord", "EdgeRecord", "SNAPSHOT_VERSION",
    "Graph", "parse_weight",
    "GraphError", "CapacityExceeded", "DuplicateEdge", "SelfLoop",
    "InvalidWeight", "NotFound", "InsufficientNodes", "EmptyGraph",
    "PlaybackLocked", "InvalidSetting", "StaleTraceError",
]
