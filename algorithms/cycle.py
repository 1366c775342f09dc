"""
cycle.py — Cycle Closed by a Rejected Edge
===========================================
When an MST algorithm rejects (u, v), the tree built so far already
joins u and v.  BFS over the accepted edges from u recovers that path;
the path plus (u, v) is the cycle the visualizer paints red.

    edges, nodes = closing_cycle(accepted, rejected)
"""

from collections import deque
from typing import Deque, Dict, FrozenSet, Iterable, Optional, Tuple

from graph.snapshot import EdgeRecord


def closing_cycle(
    tree: Iterable[EdgeRecord],
    edge: EdgeRecord,
) -> Tuple[Tuple[EdgeRecord, ...], FrozenSet[int]]:
    """
    Returns (edges, nodes): `edge` first, then the tree path from
    edge.source to edge.target.  Both empty if the tree does not join them.
    """
    tree = list(tree)
    parent: Dict[int, Optional[EdgeRecord]] = {edge.source: None}
    queue: Deque[int] = deque([edge.source])

    while queue:
        node = queue.popleft()
        if node == edge.target:
            break
        for e in tree:
            far = e.other_end(node)
            if far is not None and far not in parent:
                parent[far] = e
                queue.append(far)

    if edge.target not in parent:
        return (), frozenset()

    path = []
    node = edge.target
    while parent[node] is not None:
        via = parent[node]
        path.append(via)
        node = via.other_end(node)
    path.reverse()

    nodes = frozenset(n for e in (edge, *path) for n in (e.source, e.target))
    return (edge, *path), nodes
