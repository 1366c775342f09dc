"""
playback.py — Step-by-Step Playback Engine
===========================================
A linear state machine over an immutable step trace.  The engine owns
the cursor, drives the auto-advance timer, and is the ONLY writer of the
graph's MST flags.

State machine:
    IDLE      →  start()         →  RUNNING
    RUNNING   →  pause_resume()  →  PAUSED
    PAUSED    →  pause_resume()  →  RUNNING
    RUNNING   →  tick() at end   →  COMPLETE
    RUNNING / PAUSED → step_forward() onto the end → COMPLETE
    COMPLETE  →  step_backward() →  PAUSED
    any       →  reset()         →  IDLE

Cursor semantics:
    cursor = number of steps applied.  S[0..cursor) is what the user sees.

Rewinding:
    step_backward() does NOT invert the last step.  It clears the view
    and the MST flags and replays S[0..cursor) from scratch.  Each step
    carries full snapshots of the queue / sets, not deltas, so replay is
    the only way to reproduce exactly what was on screen.

Thread safety:
    None needed.  All calls come from one logical thread (request handler
    or timer poll); the timer is cooperative.
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, FrozenSet, Optional, Tuple, Union

from algorithms import AlgoInfo, get_algorithm
from algorithms.step import EdgeRef, QueueItem, Step, StepAction
from engine.timer import TickTimer
from graph import Graph, GraphSnapshot
from graph.errors import EmptyGraph, InsufficientNodes, InvalidSetting, StaleTraceError


logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# States
# ---------------------------------------------------------------------------
class PlaybackState(Enum):
    IDLE     = "idle"
    RUNNING  = "running"
    PAUSED   = "paused"
    COMPLETE = "complete"


# ---------------------------------------------------------------------------
# Speed levels (1 = very slow … 10 = very fast)
# ---------------------------------------------------------------------------
SPEED_MIN     = 1
SPEED_MAX     = 10
SPEED_DEFAULT = 5
SPEED_LABELS  = ["Very Slow", "Slow", "Medium", "Fast", "Very Fast"]


def delay_for(level: int) -> float:
    """Seconds between auto-advance ticks: 2.0 s at level 1 down to 0.2 s at level 10."""
    return (2200 - level * 200) / 1000.0


def speed_label(level: int) -> str:
    return SPEED_LABELS[min((level - 1) // 2, len(SPEED_LABELS) - 1)]


# ---------------------------------------------------------------------------
# Transient display state
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class ViewSnapshot:
    considering_edge: Optional[EdgeRef]                    = None
    invalid_edges:    Tuple[EdgeRef, ...]                  = ()
    cycle_edges:      Tuple[EdgeRef, ...]                  = ()
    cycle_nodes:      FrozenSet[int]                       = frozenset()
    priority_queue:   Tuple[QueueItem, ...]                = ()
    visited_nodes:    FrozenSet[int]                       = frozenset()
    disjoint_sets:    Tuple[Tuple[int, ...], ...]          = ()
    sorted_edges:     Tuple[EdgeRef, ...]                  = ()
    description:      str                                  = ""
    pseudo_line:      int                                  = -1
    mst_order:        Tuple[Tuple[int, int], ...]          = ()


class PlaybackView:
    """What the renderer shows besides the graph itself."""

    def __init__(self):
        self.clear()

    def clear(self) -> None:
        self.considering_edge: Optional[EdgeRef]           = None
        self.invalid_edges:    Tuple[EdgeRef, ...]         = ()
        self.cycle_edges:      Tuple[EdgeRef, ...]         = ()
        self.cycle_nodes:      FrozenSet[int]              = frozenset()
        self.priority_queue:   Tuple[QueueItem, ...]       = ()
        self.visited_nodes:    FrozenSet[int]              = frozenset()
        self.disjoint_sets:    Tuple[Tuple[int, ...], ...] = ()
        self.sorted_edges:     Tuple[EdgeRef, ...]         = ()
        self.description:      str                         = ""
        self.pseudo_line:      int                         = -1

    def apply(self, step: Step) -> None:
        # highlights belong to one step only
        self.considering_edge = step.edge if step.action is StepAction.CONSIDER_EDGE else None
        if step.action is StepAction.SHOW_INVALID:
            self.invalid_edges = step.invalid_edges
            self.cycle_edges = step.cycle_edges
            self.cycle_nodes = step.cycle_nodes
        else:
            self.invalid_edges, self.cycle_edges, self.cycle_nodes = (), (), frozenset()

        if step.priority_queue is not None:
            self.priority_queue = step.priority_queue
        if step.visited_nodes is not None:
            self.visited_nodes = step.visited_nodes
        if step.disjoint_sets is not None:
            self.disjoint_sets = step.disjoint_sets
        if step.sorted_edges is not None:
            self.sorted_edges = step.sorted_edges
        self.description = step.description
        self.pseudo_line = step.pseudo_line

    def snapshot(self, graph: Optional[Graph] = None) -> ViewSnapshot:
        return ViewSnapshot(
            considering_edge=self.considering_edge,
            invalid_edges=self.invalid_edges,
            cycle_edges=self.cycle_edges,
            cycle_nodes=self.cycle_nodes,
            priority_queue=self.priority_queue,
            visited_nodes=self.visited_nodes,
            disjoint_sets=self.disjoint_sets,
            sorted_edges=self.sorted_edges,
            description=self.description,
            pseudo_line=self.pseudo_line,
            mst_order=tuple(e.key for e in graph.mst_edges) if graph is not None else (),
        )


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------
class PlaybackEngine:
    """
    Attributes:
        graph       : Live graph whose MST flags mirror the cursor.
        timer       : Cooperative auto-advance timer.
        steps       : The immutable trace (empty when IDLE).
        cursor      : Number of steps applied, 0 ≤ cursor ≤ len(steps).
        state       : Current PlaybackState.
        speed       : Speed level 1–10.
        view        : Transient display state (highlights, queue, sets, text).
        algorithm   : AlgoInfo of the loaded trace, or None.
        source      : GraphSnapshot the trace was generated from.
        on_change   : Optional callback() fired after every transition.
                      The UI hooks its re-render here.
    """

    def __init__(
        self,
        graph: Graph,
        timer: Optional[TickTimer] = None,
        speed: int = SPEED_DEFAULT,
        on_change: Optional[Callable[[], None]] = None,
    ):
        self.graph:     Graph                   = graph
        self.timer:     TickTimer               = timer or TickTimer()
        self.steps:     Tuple[Step, ...]        = ()
        self.cursor:    int                     = 0
        self.state:     PlaybackState           = PlaybackState.IDLE
        self.speed:     int                     = SPEED_DEFAULT
        self.view:      PlaybackView            = PlaybackView()
        self.algorithm: Optional[AlgoInfo]      = None
        self.start_node: Optional[int]          = None
        self.source:    Optional[GraphSnapshot] = None
        self.on_change: Optional[Callable[[], None]] = on_change
        self.set_speed(speed)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def start(self, algorithm: Union[str, AlgoInfo], start_node: Optional[int] = None) -> None:
        """Generate a fresh trace from the current graph and begin auto-advance."""
        info = get_algorithm(algorithm) if isinstance(algorithm, str) else algorithm
        if info is None:
            raise InvalidSetting(f"Unknown algorithm: {algorithm}")
        count = self.graph.node_count()
        if count == 0:
            raise EmptyGraph("Add some nodes before visualizing")
        if count < 2:
            raise InsufficientNodes("At least 2 nodes are needed to build a spanning tree")

        # validate before touching any state
        snapshot = self.clean_snapshot()
        steps = tuple(info.fn(snapshot, start_node))

        self.timer.cancel()
        self.graph.clear_mst()
        self.view.clear()
        self.algorithm = info
        self.start_node = start_node
        self.source = snapshot
        self.steps = steps
        self.cursor = 0
        self.state = PlaybackState.RUNNING
        self._arm()
        logger.info("started %s: %d steps over %d nodes", info.key, len(steps), count)
        self._notify()

    def reset(self) -> None:
        """Back to IDLE.  Force-stops the timer before dropping the trace."""
        self.timer.cancel()
        self.steps = ()
        self.cursor = 0
        self.state = PlaybackState.IDLE
        self.algorithm = None
        self.start_node = None
        self.source = None
        self.view.clear()
        self.graph.clear_mst()
        self._notify()

    def bind(self, graph: Graph) -> None:
        """Point the engine at another graph (editing-mode switch)."""
        self.reset()
        self.graph = graph

    # ------------------------------------------------------------------
    # Timer-driven advance
    # ------------------------------------------------------------------
    def tick(self) -> bool:
        """Timer callback.  Returns True if a step was applied."""
        if self.state is not PlaybackState.RUNNING:
            return False
        if self.cursor < len(self.steps):
            self._apply(self.steps[self.cursor])
            self.cursor += 1
            self._arm()
            logger.debug("tick → cursor %d/%d", self.cursor, len(self.steps))
            self._notify()
            return True
        self.timer.cancel()
        self.state = PlaybackState.COMPLETE
        logger.info("playback complete: MST weight %d", self.graph.mst_weight())
        self._notify()
        return False

    # ------------------------------------------------------------------
    # Manual navigation
    # ------------------------------------------------------------------
    def step_forward(self) -> bool:
        """Apply S[cursor].  Returns False if already at the end."""
        if not self.steps or self.cursor >= len(self.steps):
            return False
        self.timer.cancel()
        self._apply(self.steps[self.cursor])
        self.cursor += 1
        self.state = PlaybackState.COMPLETE if self.cursor == len(self.steps) else PlaybackState.PAUSED
        self._notify()
        return True

    def step_backward(self) -> bool:
        """Rewind one step by replaying S[0..cursor-1).  Returns False at the start."""
        if not self.steps or self.cursor == 0:
            return False
        self.timer.cancel()
        self.cursor -= 1
        self._replay(self.cursor)
        self.state = PlaybackState.PAUSED
        self._notify()
        return True

    def seek(self, index: int) -> bool:
        """Jump to cursor `index` by full replay."""
        if not self.steps or not 0 <= index <= len(self.steps):
            return False
        self.timer.cancel()
        self.cursor = index
        self._replay(index)
        self.state = PlaybackState.COMPLETE if index == len(self.steps) else PlaybackState.PAUSED
        self._notify()
        return True

    # ------------------------------------------------------------------
    # Play / Pause
    # ------------------------------------------------------------------
    def pause_resume(self) -> None:
        if self.state is PlaybackState.RUNNING:
            self.timer.cancel()
            self.state = PlaybackState.PAUSED
        elif self.state is PlaybackState.PAUSED:
            self.state = PlaybackState.RUNNING
            self._arm()
        else:
            return
        self._notify()

    # ------------------------------------------------------------------
    # Speed
    # ------------------------------------------------------------------
    def set_speed(self, level: int) -> None:
        if isinstance(level, bool) or not isinstance(level, int) or not SPEED_MIN <= level <= SPEED_MAX:
            raise InvalidSetting(f"Speed must be an integer {SPEED_MIN}–{SPEED_MAX}, got {level!r}")
        self.speed = level
        if self.state is PlaybackState.RUNNING:
            self._arm()

    @property
    def delay(self) -> float:
        return delay_for(self.speed)

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------
    @property
    def running(self) -> bool:
        return self.state is PlaybackState.RUNNING

    @property
    def locked(self) -> bool:
        """True while a trace is mid-run: edits and algorithm switches are refused."""
        return self.state in (PlaybackState.RUNNING, PlaybackState.PAUSED)

    @property
    def is_complete(self) -> bool:
        return self.state is PlaybackState.COMPLETE

    @property
    def total_steps(self) -> int:
        return len(self.steps)

    @property
    def current_step(self) -> Optional[Step]:
        """The most recently applied step."""
        if 0 < self.cursor <= len(self.steps):
            return self.steps[self.cursor - 1]
        return None

    def display(self) -> ViewSnapshot:
        return self.view.snapshot(self.graph)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def clean_snapshot(self) -> GraphSnapshot:
        """Snapshot of the graph with no MST flags, so traces never depend on playback state."""
        snap = self.graph.snapshot()
        if not snap.mst_order:
            return snap
        return replace(
            snap,
            edges=tuple(replace(e, in_mst=False) for e in snap.edges),
            mst_order=(),
        )

    def _apply(self, step: Step) -> None:
        if step.action is StepAction.ADD_EDGE:
            edge = self.graph.find_edge(*step.edge.key)
            if edge is None:
                raise StaleTraceError(f"step {step.step_number} references missing edge {step.edge}")
            self.graph.mark_in_mst(edge)
        self.view.apply(step)

    def _replay(self, upto: int) -> None:
        self.graph.clear_mst()
        self.view.clear()
        for step in self.steps[:upto]:
            self._apply(step)

    def _arm(self) -> None:
        self.timer.arm(self.delay, self.tick)

    def _notify(self) -> None:
        if self.on_change:
            self.on_change()
