"""
kruskal.py — Kruskal's Minimum Spanning Tree
=============================================
Generator-based Kruskal over a GraphSnapshot.

Yields a Step at:
  1. Sort all edges, one singleton set per node                 (message)
  2. Take the next edge in sorted order                         (considerEdge)
  3a. Endpoints in different sets  →  take it                   (addEdge)
      then merge the two sets                                   (message)
  3b. Endpoints already in one set  →  it would close a cycle   (showInvalid,
      carrying that cycle: see cycle.py)
  4. |V|-1 edges accepted, or edges exhausted                   (message, final)

Sorting uses Python's stable sort, so equal weights keep the graph's
edge order.  Every step carries the full sorted order (for the side
panel) and the current components.
"""

from typing import Generator, Iterator, List, Optional, Tuple

from graph.snapshot import EdgeRecord, GraphSnapshot
from algorithms.cycle import closing_cycle
from algorithms.disjoint_set import DisjointSet
from algorithms.step import EdgeRef, Step, StepAction, StepBuilder


# ---------------------------------------------------------------------------
# Pseudocode
# ---------------------------------------------------------------------------
PSEUDOCODE: List[str] = [
    "def Kruskal(graph):",                              # 0
    "    edges ← sort(graph.edges) by weight",          # 1
    "    ds ← DisjointSet(V)",                          # 2
    "    for (u, v, w) in edges:",                      # 3
    "        if |MST| = |V| - 1: break",                # 4
    "        if ds.find(u) ≠ ds.find(v):",              # 5
    "            MST.add((u, v, w))",                   # 6
    "            ds.union(u, v)",                       # 7
    "        else:",                                    # 8
    "            reject (u, v): would form a cycle",    # 9
    "    return MST",                                   # 10
]

LINE_INIT, LINE_CHECK, LINE_ADD, LINE_UNION, LINE_REJECT, LINE_DONE = 1, 5, 6, 7, 9, 10


INIT, CONSIDER, ADD, UNION, INVALID, DONE = "init", "consider", "add", "union", "invalid", "done"

Event = Tuple[str, Optional[EdgeRecord]]


def sort_edges(snapshot: GraphSnapshot) -> List[EdgeRecord]:
    return sorted(snapshot.edges, key=lambda e: e.weight)


def _walk(snapshot: GraphSnapshot, order: List[EdgeRecord], ds: DisjointSet) -> Iterator[Event]:
    """Decision core shared by the narrated trace and the step counter."""
    yield INIT, None

    wanted = snapshot.node_count - 1
    accepted = 0
    for edge in order:
        if accepted >= wanted:
            break
        yield CONSIDER, edge
        if not ds.connected(edge.source, edge.target):
            yield ADD, edge
            ds.union(edge.source, edge.target)
            accepted += 1
            yield UNION, edge
        else:
            yield INVALID, edge

    yield DONE, None


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------
def kruskal(
    snapshot: GraphSnapshot,
    start: Optional[int] = None,
) -> Generator[Step, None, None]:
    """`start` is accepted for a uniform signature and ignored."""
    labels = snapshot.labels()
    order = sort_edges(snapshot)
    ds = DisjointSet(snapshot.node_ids())

    def ref(e: EdgeRecord) -> EdgeRef:
        return EdgeRef.of(e, labels)

    sb = StepBuilder()
    sb.sorted_edges = tuple(ref(e) for e in order)
    mst_weight = 0
    mst_size = 0
    tree: List[EdgeRecord] = []

    for kind, edge in _walk(snapshot, order, ds):
        sb.disjoint_sets = ds.groups()

        if kind == INIT:
            yield sb.emit(
                StepAction.MESSAGE,
                f"Starting Kruskal's algorithm. Sorted all {len(order)} edge(s) by weight "
                f"in ascending order; every node starts in its own set.",
                LINE_INIT,
            )

        elif kind == CONSIDER:
            yield sb.emit(
                StepAction.CONSIDER_EDGE,
                f"Processing edge {ref(edge).name} (weight {edge.weight}). Checking whether "
                f"{labels[edge.source]} and {labels[edge.target]} are already in the same set.",
                LINE_CHECK,
                edge=ref(edge),
            )

        elif kind == ADD:
            mst_weight += edge.weight
            mst_size += 1
            tree.append(edge)
            yield sb.emit(
                StepAction.ADD_EDGE,
                f"Added edge {ref(edge).name} to the MST. It connects two different "
                f"components without forming a cycle.",
                LINE_ADD,
                edge=ref(edge),
            )

        elif kind == UNION:
            yield sb.emit(
                StepAction.MESSAGE,
                f"Union performed: the sets containing {labels[edge.source]} and "
                f"{labels[edge.target]} are merged ({len(sb.disjoint_sets)} set(s) left).",
                LINE_UNION,
            )

        elif kind == INVALID:
            cycle, cycle_nodes = closing_cycle(tree, edge)
            yield sb.emit(
                StepAction.SHOW_INVALID,
                f"Edge {ref(edge).name} is INVALID: {labels[edge.source]} and "
                f"{labels[edge.target]} are already in the same set, so it would form a cycle.",
                LINE_REJECT,
                edge=ref(edge),
                invalid_edges=(ref(edge),),
                cycle_edges=tuple(ref(e) for e in cycle),
                cycle_nodes=cycle_nodes,
            )

        else:
            if snapshot.node_count and mst_size == snapshot.node_count - 1:
                text = (
                    f"Kruskal's algorithm complete! MST has {mst_size} edge(s) "
                    f"with total weight {mst_weight}."
                )
            else:
                text = (
                    f"All edges processed. The graph is disconnected: the spanning forest has "
                    f"{mst_size} edge(s) in {len(sb.disjoint_sets)} component(s), "
                    f"total weight {mst_weight}."
                )
            yield sb.emit(StepAction.MESSAGE, text, LINE_DONE, is_final=True)


def count_kruskal_steps(snapshot: GraphSnapshot, start: Optional[int] = None) -> int:
    """Length of the Kruskal trace without building any step payload."""
    ds = DisjointSet(snapshot.node_ids())
    return sum(1 for _ in _walk(snapshot, sort_edges(snapshot), ds))
