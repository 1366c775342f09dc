"""
prim.py — Prim's Minimum Spanning Tree
=======================================
Generator-based Prim over a GraphSnapshot.

Yields a Step at:
  1. Initialise visited = {start}, seed the priority queue      (message)
  2. Pop the cheapest queued edge                               (considerEdge)
  3a. Exactly one endpoint visited  →  take it                  (addEdge)
      then visit the new node and push its edges                (message)
  3b. Both endpoints visited  →  it would close a cycle         (showInvalid,
      carrying that cycle: see cycle.py)
  4. Tree complete or queue exhausted                           (message, final)

The priority queue is a plain list kept sorted with a STABLE sort, so
equal-weight edges come out in the order they were discovered.

Cycle check: an edge only enters the queue when its far endpoint is
unvisited, so an edge popped later can only be stale in one way: its
far endpoint got visited in the meantime.  "Both endpoints visited" is
therefore the whole cycle test.
"""

from typing import Generator, Iterator, List, Optional, Set, Tuple

from graph.errors import EmptyGraph, NotFound
from graph.snapshot import EdgeRecord, GraphSnapshot
from algorithms.cycle import closing_cycle
from algorithms.step import EdgeRef, QueueItem, Step, StepAction, StepBuilder


# ---------------------------------------------------------------------------
# Pseudocode
# ---------------------------------------------------------------------------
PSEUDOCODE: List[str] = [
    "def Prim(graph, start):",                          # 0
    "    visited ← {start}",                            # 1
    "    pq ← edges(start) sorted by weight",           # 2
    "    while |visited| < |V| and pq not empty:",      # 3
    "        (u, v, w) ← pq.pop_min()",                 # 4
    "        if exactly one of u, v is visited:",       # 5
    "            MST.add((u, v, w))",                   # 6
    "            visited.add(new node)",                # 7
    "            pq.push(edges(new) to unvisited)",     # 8
    "        else:",                                    # 9
    "            reject (u, v): would form a cycle",    # 10
    "    return MST",                                   # 11
]

LINE_INIT, LINE_POP, LINE_ADD, LINE_PUSH, LINE_REJECT, LINE_DONE = 2, 4, 6, 8, 10, 11


# Event kinds produced by the shared decision walk
INIT, CONSIDER, ADD, RESEED, INVALID, DONE = "init", "consider", "add", "reseed", "invalid", "done"

Event = Tuple[str, Optional[EdgeRecord], Optional[int], Set[int], List[EdgeRecord]]


def resolve_start(snapshot: GraphSnapshot, start: Optional[int]) -> int:
    if snapshot.node_count == 0:
        raise EmptyGraph("The graph has no nodes")
    if start is None:
        return snapshot.nodes[0].id
    if start not in snapshot.node_ids():
        raise NotFound(f"Start node {start} does not exist")
    return start


def _walk(snapshot: GraphSnapshot, start: int) -> Iterator[Event]:
    """
    The decision core shared by the narrated trace and the step counter.
    Yields one event per step; `visited` and `queue` are live objects
    the consumer must copy if it keeps them.
    """
    visited: Set[int] = {start}
    queue: List[EdgeRecord] = [
        e for e in snapshot.edges if start in (e.source, e.target)
    ]
    queue.sort(key=lambda e: e.weight)
    yield INIT, None, start, visited, queue

    total = snapshot.node_count
    while len(visited) < total and queue:
        edge = queue.pop(0)
        yield CONSIDER, edge, None, visited, queue

        source_in, target_in = edge.source in visited, edge.target in visited
        if source_in != target_in:
            new_node = edge.target if source_in else edge.source
            yield ADD, edge, new_node, visited, queue

            visited.add(new_node)
            for e in snapshot.edges:
                if new_node in (e.source, e.target):
                    far = e.target if e.source == new_node else e.source
                    if far not in visited:
                        queue.append(e)
            queue.sort(key=lambda e: e.weight)
            yield RESEED, edge, new_node, visited, queue
        else:
            yield INVALID, edge, None, visited, queue

    yield DONE, None, None, visited, queue


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------
def prim(
    snapshot: GraphSnapshot,
    start: Optional[int] = None,
) -> Generator[Step, None, None]:
    start = resolve_start(snapshot, start)
    labels = snapshot.labels()
    sb = StepBuilder()
    mst_weight = 0
    mst_size = 0
    tree: List[EdgeRecord] = []

    def ref(e: EdgeRecord) -> EdgeRef:
        return EdgeRef.of(e, labels)

    for kind, edge, node, visited, queue in _walk(snapshot, start):
        sb.priority_queue = tuple(QueueItem(ref(e), e.weight) for e in queue)
        sb.visited_nodes = frozenset(visited)

        if kind == INIT:
            yield sb.emit(
                StepAction.MESSAGE,
                f"Starting Prim's algorithm from node {labels[node]}. "
                f"Initializing the priority queue with the {len(queue)} edge(s) leaving it.",
                LINE_INIT,
            )

        elif kind == CONSIDER:
            yield sb.emit(
                StepAction.CONSIDER_EDGE,
                f"Processing edge {ref(edge).name} (weight {edge.weight}): "
                f"the minimum weight edge in the priority queue.",
                LINE_POP,
                edge=ref(edge),
            )

        elif kind == ADD:
            mst_weight += edge.weight
            mst_size += 1
            tree.append(edge)
            yield sb.emit(
                StepAction.ADD_EDGE,
                f"Added edge {ref(edge).name} to the MST. It connects a visited node "
                f"to the unvisited node {labels[node]} without forming a cycle.",
                LINE_ADD,
                edge=ref(edge),
            )

        elif kind == RESEED:
            yield sb.emit(
                StepAction.MESSAGE,
                f"Node {labels[node]} joined the tree. Pushed its edges to unvisited "
                f"nodes and re-sorted the queue ({len(queue)} edge(s) waiting).",
                LINE_PUSH,
            )

        elif kind == INVALID:
            cycle, cycle_nodes = closing_cycle(tree, edge)
            yield sb.emit(
                StepAction.SHOW_INVALID,
                f"Edge {ref(edge).name} is INVALID: both {labels[edge.source]} and "
                f"{labels[edge.target]} are already visited, so it would form a cycle.",
                LINE_REJECT,
                edge=ref(edge),
                invalid_edges=(ref(edge),),
                cycle_edges=tuple(ref(e) for e in cycle),
                cycle_nodes=cycle_nodes,
            )

        else:
            if len(visited) == snapshot.node_count:
                text = (
                    f"Prim's algorithm complete! MST has {mst_size} edge(s) "
                    f"with total weight {mst_weight}."
                )
            else:
                text = (
                    f"Priority queue empty. Only {len(visited)} of {snapshot.node_count} nodes "
                    f"are reachable from {labels[start]}: the graph is disconnected. "
                    f"Spanning tree of the reachable part has weight {mst_weight}."
                )
            yield sb.emit(StepAction.MESSAGE, text, LINE_DONE, is_final=True)


def count_prim_steps(snapshot: GraphSnapshot, start: Optional[int] = None) -> int:
    """Length of the Prim trace without building any step payload."""
    start = resolve_start(snapshot, start)
    return sum(1 for _ in _walk(snapshot, start))
