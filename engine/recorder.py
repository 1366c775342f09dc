"""
recorder.py — Run Recorder & Analytics
========================================
Runs an MST algorithm to completion on a snapshot, keeps every Step,
and computes the numbers the Stats and Comparison panels show.

Usage:
    rec = Recorder()
    metrics = rec.run("kruskal", graph.snapshot())
    rec.export()                     # JSON-ready dump of the run

Comparison:
    Both algorithms run on the SAME snapshot, then
    compare(left, right) → ComparisonResult.  Prim and Kruskal must agree
    on the MST weight; the interesting difference is the step count.
"""

import time
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from algorithms import AlgoInfo, get_algorithm
from algorithms.step import Step, StepAction
from graph import GraphSnapshot
from graph.errors import InvalidSetting


# ---------------------------------------------------------------------------
# Metrics dataclass — what the Stats panel renders
# ---------------------------------------------------------------------------
@dataclass
class RunMetrics:
    algo_key:        str             = ""
    algo_label:      str             = ""
    start_node:      str             = ""        # Prim only
    total_steps:     int             = 0
    edges_accepted:  int             = 0
    edges_rejected:  int             = 0
    mst_weight:      int             = 0
    mst_edges:       List[str]       = field(default_factory=list)   # "A-B:5"
    nodes_reached:   int             = 0
    node_count:      int             = 0
    spanning:        bool            = False     # False on a disconnected graph
    wall_time_ms:    float           = 0.0


# ---------------------------------------------------------------------------
# ComparisonResult — side-by-side analytics
# ---------------------------------------------------------------------------
@dataclass
class ComparisonResult:
    left:           RunMetrics = field(default_factory=RunMetrics)
    right:          RunMetrics = field(default_factory=RunMetrics)
    # derived
    weights_agree:  bool       = True
    winner_steps:   str        = ""    # which algo needed fewer steps
    winner_rejects: str        = ""    # which algo rejected fewer edges

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# ---------------------------------------------------------------------------
# Recorder
# ---------------------------------------------------------------------------
class Recorder:
    """
    Attributes:
        steps    : Full list of Steps from the last run.
        metrics  : Computed RunMetrics (None until run() returns).
    """

    def __init__(self):
        self.steps:       List[Step]              = []
        self.metrics:     Optional[RunMetrics]    = None
        self._algo_info:  Optional[AlgoInfo]      = None
        self._snapshot:   Optional[GraphSnapshot] = None
        self._start:      Optional[int]           = None

    def run(self, algo_key: str, snapshot: GraphSnapshot, start: Optional[int] = None) -> RunMetrics:
        """Exhaust the trace for `algo_key` on `snapshot` and compute metrics."""
        info = get_algorithm(algo_key)
        if info is None:
            raise InvalidSetting(f"Unknown algorithm: {algo_key}")

        self._algo_info = info
        self._snapshot  = snapshot
        self._start     = start if info.uses_start_node else None

        began = time.monotonic()
        self.steps = list(info.fn(snapshot, self._start))
        wall_ms = (time.monotonic() - began) * 1000

        self.metrics = self._compute_metrics(wall_ms)
        return self.metrics

    def export(self) -> Dict[str, Any]:
        return {
            "algo_key": self._algo_info.key if self._algo_info else "",
            "graph":    self._snapshot.to_dict() if self._snapshot else {},
            "metrics":  asdict(self.metrics) if self.metrics else {},
            "steps":    [s.to_dict() for s in self.steps],
        }

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _compute_metrics(self, wall_ms: float) -> RunMetrics:
        info = self._algo_info
        snap = self._snapshot

        accepted = [s.edge for s in self.steps if s.action is StepAction.ADD_EDGE]
        rejected = sum(1 for s in self.steps if s.action is StepAction.SHOW_INVALID)

        reached = set()
        for e in accepted:
            reached.update(e.key)
        if not accepted and snap.node_count > 0:
            reached.add(self._start if self._start is not None else snap.node_ids()[0])

        start_label = ""
        if info.uses_start_node and snap.node_count > 0:
            start_label = snap.label_of(self._start if self._start is not None else snap.node_ids()[0])

        return RunMetrics(
            algo_key=info.key,
            algo_label=info.label,
            start_node=start_label,
            total_steps=len(self.steps),
            edges_accepted=len(accepted),
            edges_rejected=rejected,
            mst_weight=sum(e.weight for e in accepted),
            mst_edges=[str(e) for e in accepted],
            nodes_reached=len(reached),
            node_count=snap.node_count,
            spanning=len(accepted) == snap.node_count - 1,
            wall_time_ms=round(wall_ms, 2),
        )


# ---------------------------------------------------------------------------
# Comparison helper
# ---------------------------------------------------------------------------
def compare(left: Recorder, right: Recorder) -> ComparisonResult:
    """Given two completed Recorders, produce a ComparisonResult."""
    l = left.metrics  or RunMetrics()
    r = right.metrics or RunMetrics()

    def winner(l_val, r_val, l_key, r_key):
        if l_val == r_val:
            return "tie"
        return l_key if l_val < r_val else r_key

    return ComparisonResult(
        left=l,
        right=r,
        weights_agree=l.mst_weight == r.mst_weight,
        winner_steps=winner(l.total_steps, r.total_steps, l.algo_label, r.algo_label),
        winner_rejects=winner(l.edges_rejected, r.edges_rejected, l.algo_label, r.algo_label),
    )


def compare_all(snapshot: GraphSnapshot, start: Optional[int] = None) -> Tuple[Recorder, Recorder, ComparisonResult]:
    """Run Prim and Kruskal on `snapshot` and compare them."""
    left, right = Recorder(), Recorder()
    left.run("prim", snapshot, start)
    right.run("kruskal", snapshot, start)
    return left, right, compare(left, right)
