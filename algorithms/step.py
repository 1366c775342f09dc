"""
step.py — Algorithm Step Snapshot
==================================
Every MST algorithm is a generator that yields Step objects.
A Step is a frozen-in-time picture of everything the visualizer
needs to render one frame of the trace:

    • What happened        (action: message / considerEdge / addEdge / showInvalid)
    • Which edge it was about
    • Prim:    the priority queue and the visited set
    • Kruskal: the disjoint sets and the sorted edge order
    • Which line of pseudocode is executing right now
    • A plain-English explanation of *why* this step happened

Design decisions:
  - Step is a frozen dataclass built only from tuples / frozensets, so a
    trace can be shared between the playback engine, the recorder and
    the renderer without anyone being able to mutate it.
  - Edges inside a step are EdgeRefs (endpoints, labels, weight), never
    live Edge objects.  The playback engine maps them back to the live
    graph by their unordered key.
  - Fields that don't apply to an algorithm stay None, which the
    playback engine reads as "leave the displayed value alone".
"""

from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Optional, Tuple

from graph.edge import EdgeKey, edge_key
from graph.snapshot import EdgeRecord


class StepAction(Enum):
    MESSAGE       = "message"
    CONSIDER_EDGE = "considerEdge"
    ADD_EDGE      = "addEdge"
    SHOW_INVALID  = "showInvalid"


@dataclass(frozen=True)
class EdgeRef:
    source:       int
    target:       int
    weight:       int
    source_label: str = ""
    target_label: str = ""

    @property
    def key(self) -> EdgeKey:
        return edge_key(self.source, self.target)

    @property
    def name(self) -> str:
        return f"{self.source_label}-{self.target_label}"

    def __str__(self) -> str:
        return f"{self.name}:{self.weight}"

    @classmethod
    def of(cls, record: EdgeRecord, labels) -> "EdgeRef":
        return cls(
            record.source, record.target, record.weight,
            labels.get(record.source, str(record.source)),
            labels.get(record.target, str(record.target)),
        )


@dataclass(frozen=True)
class QueueItem:
    edge:   EdgeRef
    weight: int


@dataclass(frozen=True)
class Step:
    """
    Attributes:
        step_number    : 0-based index of this step in the run.
        action         : What this step does to the displayed state.
        edge           : The edge the step is about (None for pure messages).
        invalid_edges  : Edges to flag as rejected (showInvalid only).
        cycle_edges    : showInvalid only: the rejected edge plus the tree path it would close.
        cycle_nodes    : showInvalid only: node ids on that cycle.
        priority_queue : Prim – queue contents after this step, in pop order.
        visited_nodes  : Prim – node ids in the tree so far.
        disjoint_sets  : Kruskal – components, each a sorted tuple of node ids.
        sorted_edges   : Kruskal – every edge in processing order.
        description    : Human-readable "why" text.
        pseudo_line    : 0-based index into the algorithm's PSEUDOCODE.
        is_final       : True on the very last step.
    """

    step_number:    int                                  = 0
    action:         StepAction                           = StepAction.MESSAGE
    edge:           Optional[EdgeRef]                    = None
    invalid_edges:  Tuple[EdgeRef, ...]                  = ()
    cycle_edges:    Tuple[EdgeRef, ...]                  = ()
    cycle_nodes:    FrozenSet[int]                       = frozenset()
    priority_queue: Optional[Tuple[QueueItem, ...]]      = None
    visited_nodes:  Optional[FrozenSet[int]]             = None
    disjoint_sets:  Optional[Tuple[Tuple[int, ...], ...]] = None
    sorted_edges:   Optional[Tuple[EdgeRef, ...]]        = None
    description:    str                                  = ""
    pseudo_line:    int                                  = 0
    is_final:       bool                                 = False

    def to_dict(self) -> dict:
        return {
            "step_number":    self.step_number,
            "action":         self.action.value,
            "edge":           str(self.edge) if self.edge else None,
            "invalid_edges":  [str(e) for e in self.invalid_edges],
            "cycle_edges":    [str(e) for e in self.cycle_edges],
            "cycle_nodes":    sorted(self.cycle_nodes),
            "priority_queue": [str(q.edge) for q in self.priority_queue]
                              if self.priority_queue is not None else None,
            "visited_nodes":  sorted(self.visited_nodes)
                              if self.visited_nodes is not None else None,
            "disjoint_sets":  [list(s) for s in self.disjoint_sets]
                              if self.disjoint_sets is not None else None,
            "sorted_edges":   [str(e) for e in self.sorted_edges]
                              if self.sorted_edges is not None else None,
            "description":    self.description,
            "pseudo_line":    self.pseudo_line,
            "is_final":       self.is_final,
        }


# ---------------------------------------------------------------------------
# Convenience builder so algorithms don't have to spell out every kwarg
# ---------------------------------------------------------------------------
class StepBuilder:
    """
    Numbers steps and carries the algorithm-specific state forward so each
    emitted Step is a full snapshot, not a delta.

    Usage inside an algorithm generator:
        sb = StepBuilder()
        sb.visited_nodes = frozenset(visited)
        yield sb.emit(StepAction.CONSIDER_EDGE, edge=ref, line=5,
                      description="Pop A-B (5) from the queue.")
    """

    def __init__(self):
        self.step_number:    int                                   = 0
        self.priority_queue: Optional[Tuple[QueueItem, ...]]       = None
        self.visited_nodes:  Optional[FrozenSet[int]]              = None
        self.disjoint_sets:  Optional[Tuple[Tuple[int, ...], ...]] = None
        self.sorted_edges:   Optional[Tuple[EdgeRef, ...]]         = None

    def emit(
        self,
        action: StepAction,
        description: str,
        line: int,
        edge: Optional[EdgeRef] = None,
        invalid_edges: Tuple[EdgeRef, ...] = (),
        cycle_edges: Tuple[EdgeRef, ...] = (),
        cycle_nodes: FrozenSet[int] = frozenset(),
        is_final: bool = False,
    ) -> Step:
        step = Step(
            step_number=self.step_number,
            action=action,
            edge=edge,
            invalid_edges=tuple(invalid_edges),
            cycle_edges=tuple(cycle_edges),
            cycle_nodes=frozenset(cycle_nodes),
            priority_queue=self.priority_queue,
            visited_nodes=self.visited_nodes,
            disjoint_sets=self.disjoint_sets,
            sorted_edges=self.sorted_edges,
            description=description,
            pseudo_line=line,
            is_final=is_final,
        )
        self.step_number += 1
        return step
