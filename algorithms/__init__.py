"""
algorithms/__init__.py — Algorithm Registry
=============================================
Single source of truth for the MST algorithms the visualizer knows about.

    from algorithms import REGISTRY, get_algorithm

REGISTRY is a dict:
    {
        "prim":    AlgoInfo(key, label, fn, count_fn, pseudocode, …),
        "kruskal": AlgoInfo(…),
    }

Every `fn` has the signature fn(snapshot, start=None) → Generator[Step]
and every `count_fn` fn(snapshot, start=None) → int, so the playback
engine, the recorder and the graph generator never branch on the key.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from algorithms.prim    import prim    as _prim,    count_prim_steps    as _prim_count,    PSEUDOCODE as _prim_pc
from algorithms.kruskal import kruskal as _kruskal, count_kruskal_steps as _kruskal_count, PSEUDOCODE as _kruskal_pc
from algorithms.step    import EdgeRef, QueueItem, Step, StepAction


# ---------------------------------------------------------------------------
# AlgoInfo — metadata card for each algorithm
# ---------------------------------------------------------------------------
@dataclass
class AlgoInfo:
    key:              str                    # registry key, e.g. "prim"
    label:            str                    # human label, e.g. "Prim's Algorithm"
    fn:               Callable               # the step generator
    count_fn:         Callable               # step-count-only variant
    pseudocode:       List[str]              # lines for the side-panel
    uses_start_node:  bool      = False      # expose the start-node picker?
    structure:        str       = ""         # data structure shown in the side panel
    complexity_time:  str       = ""
    complexity_space: str       = ""
    description:      str       = ""
    tags:             List[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# THE REGISTRY
# ---------------------------------------------------------------------------
REGISTRY: Dict[str, AlgoInfo] = {

    "prim": AlgoInfo(
        key="prim", label="Prim's Algorithm", fn=_prim, count_fn=_prim_count,
        pseudocode=_prim_pc, uses_start_node=True,
        structure="Priority Queue (Min-Heap)",
        complexity_time="O(E log V)", complexity_space="O(V + E)",
        description="Grows the tree from a start node, always adding the cheapest edge to a new node.",
        tags=["mst", "greedy", "priority-queue"],
    ),

    "kruskal": AlgoInfo(
        key="kruskal", label="Kruskal's Algorithm", fn=_kruskal, count_fn=_kruskal_count,
        pseudocode=_kruskal_pc,
        structure="Disjoint Sets (Union-Find)",
        complexity_time="O(E log E)", complexity_space="O(V + E)",
        description="Adds edges in ascending weight order, using union-find to skip cycles.",
        tags=["mst", "greedy", "union-find"],
    ),
}


# ---------------------------------------------------------------------------
# Lookup helpers
# ---------------------------------------------------------------------------
def get_algorithm(key: str) -> Optional[AlgoInfo]:
    """Return AlgoInfo by key, or None."""
    return REGISTRY.get(key)


def list_algorithms() -> List[AlgoInfo]:
    """Return all registered algorithms in insertion order."""
    return list(REGISTRY.values())


__all__ = [
    "AlgoInfo",
    "REGISTRY",
    "get_algorithm",
    "list_algorithms",
    "EdgeRef",
    "QueueItem",
    "Step",
    "StepAction",
]
