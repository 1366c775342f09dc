"""
workspace.py — Application State
=================================
One Workspace per browser session.  It owns everything that used to be
global state in a canvas app:

  • one Graph per EditMode (generative / user), never shared
  • the HistoryManager (one undo stack per mode)
  • the PlaybackEngine, bound to the active graph
  • the EditController, bound to the active graph
  • the TickTimer that drives auto-advance
  • a short list of notices for the client to toast

Every user action goes through a Workspace method.

Reconciliation rules:
  - Any committed edit, undo, redo, regeneration or mode switch resets
    playback FIRST.  That cancels the timer and discards the trace, so
    no stale tick can apply a step to a changed graph, and history only
    ever stores graphs without MST flags.
  - GraphError subclasses are user mistakes.  They become notices, the
    graph stays as it was and nothing is checkpointed.  InvalidSetting
    (a malformed request) and every non-GraphError propagate.
"""

import functools
import logging
import random
from collections import deque
from dataclasses import dataclass
from typing import Deque, Dict, List, Optional, Union

from algorithms import get_algorithm
from editor import EditController, InteractionMode
from engine.history import EditMode, HistoryManager
from engine.playback import PlaybackEngine, speed_label
from engine.recorder import ComparisonResult, compare_all
from engine.settings import Settings
from engine.timer import TickTimer
from graph import Graph
from graph.errors import GraphError, InsufficientNodes, InvalidSetting, PlaybackLocked
from graph.generator import generate_checked
from ui.canvas import CanvasConfig, Surface, render_canvas


logger = logging.getLogger(__name__)

NOTICE_LIMIT = 5


@dataclass(frozen=True)
class Notice:
    level:   str      # "info" | "success" | "error"
    message: str
    kind:    str = ""

    def to_dict(self) -> dict:
        return {"level": self.level, "message": self.message, "kind": self.kind}


def recoverable(method):
    """Turn a GraphError raised by `method` into an error notice."""

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except InvalidSetting:
            raise
        except GraphError as exc:
            logger.info("%s refused: %s", method.__name__, exc.message)
            self.notify(exc.message, "error", exc.kind)
            return None

    return wrapper


class Workspace:
    """
    Attributes:
        settings   : Last Settings applied by generate / visualize.
        graphs     : {EditMode: Graph}.
        mode       : Active EditMode.
        history    : Per-mode undo / redo stacks.
        timer      : Auto-advance timer (polled by tick()).
        playback   : PlaybackEngine bound to the active graph.
        editor     : EditController bound to the active graph.
        notices    : Most recent notices, oldest dropped first.
        comparison : Result of the last compare(), cleared by any edit.
        revision   : Bumped on every visible change; clients poll it.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        timer: Optional[TickTimer] = None,
        rng: Optional[random.Random] = None,
        generate: bool = True,
    ):
        self.settings:   Settings                   = settings or Settings()
        self.graphs:     Dict[EditMode, Graph]      = {m: Graph() for m in EditMode}
        self.mode:       EditMode                   = EditMode.GENERATIVE
        self.history:    HistoryManager             = HistoryManager()
        self.timer:      TickTimer                  = timer or TickTimer()
        self.rng:        random.Random              = rng or random.Random(self.settings.seed)
        self.notices:    Deque[Notice]              = deque(maxlen=NOTICE_LIMIT)
        self.comparison: Optional[ComparisonResult] = None
        self.revision:   int                        = 0

        self.playback = PlaybackEngine(self.graph, self.timer, self.settings.speed, on_change=self._touch)
        self.editor = EditController(self.graph, self._commit, lambda: self.playback.locked)

        self.history.reset(EditMode.USER, self.graphs[EditMode.USER].snapshot())
        if generate:
            self.generate()

    @property
    def graph(self) -> Graph:
        return self.graphs[self.mode]

    # ==================================================================
    # GRAPH LIFECYCLE
    # ==================================================================
    @recoverable
    def generate(self, settings: Optional[Settings] = None) -> bool:
        """Replace the generative graph with a fresh one and switch to it."""
        self.playback.reset()
        self.editor.cancel_gesture()
        if settings is not None:
            self._apply_settings(settings)
        if self.mode is not EditMode.GENERATIVE:
            self._activate(EditMode.GENERATIVE)
        s = self.settings

        info = get_algorithm(s.algorithm)
        rng = random.Random(s.seed) if s.seed is not None else self.rng
        attempts = generate_checked(
            self.graph, lambda snap: info.count_fn(snap, None),
            s.node_count, s.density_fraction, s.topology, rng,
        )
        self.history.checkpoint(EditMode.GENERATIVE, self.graph.snapshot())
        self.comparison = None
        logger.info("generate: %d nodes, %d edges (%d attempt(s))",
                    self.graph.node_count(), self.graph.edge_count(), attempts)
        self.notify(f"Generated a graph with {self.graph.node_count()} nodes "
                    f"and {self.graph.edge_count()} edges", "success")
        return True

    def switch_mode(self, mode: Union[EditMode, str]) -> None:
        mode = _enum(EditMode, mode)
        if mode is self.mode:
            return
        self._activate(mode)
        logger.info("editing mode → %s", mode.value)
        self._touch()

    # ==================================================================
    # ALGORITHM & PLAYBACK
    # ==================================================================
    @recoverable
    def select_algorithm(self, key: str) -> bool:
        if get_algorithm(key) is None:
            raise InvalidSetting(f"Unknown algorithm: {key}")
        if self.playback.locked:
            raise PlaybackLocked("Finish or reset the visualization before switching algorithms")
        if key != self.settings.algorithm:
            self.playback.reset()
            self.settings.algorithm = key
            self._touch()
        return True

    @recoverable
    def visualize(self, settings: Optional[Settings] = None) -> bool:
        candidate = settings if settings is not None else self.settings
        candidate.validate()
        info = get_algorithm(candidate.algorithm)
        # a bad start node must leave the stored settings alone
        start = candidate.resolve_start(self.graph) if info.uses_start_node else None
        if settings is not None:
            self._apply_settings(settings)
        self.editor.cancel_gesture()
        self.playback.start(info, start)
        logger.info("visualize %s on %r", info.key, self.graph)
        return True

    def tick(self) -> bool:
        """Event-loop hook: fire the auto-advance timer if it is due."""
        return self.timer.poll()

    def step_forward(self) -> bool:
        return self.playback.step_forward()

    def step_backward(self) -> bool:
        return self.playback.step_backward()

    def seek(self, index: int) -> bool:
        return self.playback.seek(index)

    def pause_resume(self) -> None:
        self.playback.pause_resume()

    def reset_playback(self) -> None:
        self.playback.reset()

    def set_speed(self, level: int) -> None:
        self.playback.set_speed(level)
        self.settings.speed = level
        self._touch()

    # ==================================================================
    # HISTORY
    # ==================================================================
    def undo(self) -> bool:
        return self._travel(self.history.undo, "undo")

    def redo(self) -> bool:
        return self._travel(self.history.redo, "redo")

    # ==================================================================
    # EDITING
    # ==================================================================
    def set_interaction_mode(self, mode: Union[InteractionMode, str], toggle: bool = False) -> None:
        """With `toggle`, picking the active mode again returns to DRAG (toolbar buttons)."""
        mode = _enum(InteractionMode, mode)
        if toggle:
            self.editor.toggle_mode(mode)
        else:
            self.editor.set_mode(mode)
        self._touch()

    @recoverable
    def pointer_down(self, x: float, y: float) -> bool:
        changed = self.editor.pointer_down(x, y)
        if changed:
            self._touch()
        return changed

    @recoverable
    def pointer_move(self, x: float, y: float) -> bool:
        changed = self.editor.pointer_move(x, y)
        if changed:
            self._touch()
        return changed

    @recoverable
    def pointer_up(self, x: float = 0.0, y: float = 0.0) -> bool:
        dropped = self.editor.pointer_up(x, y)
        if dropped:
            # moves fold into the current entry instead of pushing a new one
            self.history.amend(self.mode, self.playback.clean_snapshot())
            self._touch()
        return dropped

    @recoverable
    def answer_prompt(self, value) -> bool:
        self.editor.answer_prompt(value)
        return True

    def cancel_prompt(self) -> None:
        self.editor.cancel_prompt()
        self._touch()

    # ==================================================================
    # ANALYTICS
    # ==================================================================
    @recoverable
    def compare(self) -> Optional[ComparisonResult]:
        """Run both algorithms on the current graph and compare the runs."""
        if self.graph.node_count() < 2:
            raise InsufficientNodes("At least 2 nodes are needed to compare algorithms")
        start = self.settings.resolve_start(self.graph)
        _, _, result = compare_all(self.graph.snapshot(), start)
        self.comparison = result
        if not result.weights_agree:
            logger.error("MST weights disagree: %s", result)
        self._touch()
        return result

    # ==================================================================
    # OUTPUT
    # ==================================================================
    def render(self, surface: Surface, theme: str = "dark") -> Surface:
        return render_canvas(self.graph, self.playback.display(), surface,
                             CanvasConfig(theme), self.editor.marks())

    def notify(self, message: str, level: str = "info", kind: str = "") -> None:
        self.notices.append(Notice(level, message, kind))
        self._touch()

    def drain_notices(self) -> List[Notice]:
        drained = list(self.notices)
        self.notices.clear()
        return drained

    def state(self) -> dict:
        """JSON-ready summary of everything the client shows."""
        pb = self.playback
        view = pb.display()
        stack = self.history.stack(self.mode)
        step = pb.current_step
        return {
            "revision":         self.revision,
            "mode":             self.mode.value,
            "algorithm":        self.settings.algorithm,
            "interaction_mode": self.editor.mode.value,
            "settings":         self.settings.to_dict(),
            "graph":            self.graph.to_dict(),
            "playback": {
                "state":        pb.state.value,
                "cursor":       pb.cursor,
                "total_steps":  pb.total_steps,
                "running":      pb.running,
                "locked":       pb.locked,
                "complete":     pb.is_complete,
                "speed":        pb.speed,
                "speed_label":  speed_label(pb.speed),
                "delay_ms":     int(pb.delay * 1000),
                "remaining_ms": int(self.timer.remaining() * 1000),
                "step":         step.to_dict() if step else None,
            },
            "view": {
                "considering_edge": str(view.considering_edge) if view.considering_edge else None,
                "invalid_edges":    [str(e) for e in view.invalid_edges],
                "cycle_edges":      [str(e) for e in view.cycle_edges],
                "cycle_nodes":      [self.graph.label_of(n) for n in sorted(view.cycle_nodes)],
                "priority_queue":   [str(q.edge) for q in view.priority_queue],
                "visited_nodes":    [self.graph.label_of(n) for n in sorted(view.visited_nodes)],
                "disjoint_sets":    [[self.graph.label_of(n) for n in s] for s in view.disjoint_sets],
                "sorted_edges":     [str(e) for e in view.sorted_edges],
                "mst_edges":        [f"{self.graph.label_of(e.source)}-{self.graph.label_of(e.target)}:{e.weight}"
                                     for e in self.graph.mst_edges],
                "description":      view.description,
                "pseudo_line":      view.pseudo_line,
            },
            "stats": {
                "nodes":      self.graph.node_count(),
                "edges":      self.graph.edge_count(),
                "mst_weight": self.graph.mst_weight(),
            },
            "history": {
                "can_undo": stack.can_undo,
                "can_redo": stack.can_redo,
                "entries":  len(stack),
            },
            "editor": {
                "selected_source": self.editor.selected_source,
                "dragging":        self.editor.dragging is not None,
                "prompt":          self.editor.prompt.to_dict() if self.editor.prompt else None,
            },
            "comparison": self.comparison.to_dict() if self.comparison else None,
        }

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _commit(self, what: str) -> None:
        """EditController callback after every committed mutation."""
        self.playback.reset()
        self.history.checkpoint(self.mode, self.graph.snapshot())
        self.comparison = None
        logger.info("commit (%s): %s", self.mode.value, what)
        self._touch()

    def _travel(self, move, name: str) -> bool:
        self.playback.reset()
        self.editor.cancel_gesture()
        snap = move(self.mode)
        if snap is None:
            self.notify(f"Nothing to {name}")
            return False
        self.graph.restore(snap)
        self.comparison = None
        logger.info("%s (%s): %r", name, self.mode.value, self.graph)
        self._touch()
        return True

    def _activate(self, mode: EditMode) -> None:
        self.playback.bind(self.graphs[mode])
        self.mode = mode
        self.editor.bind(self.graph, add_on_click=mode is EditMode.USER)
        self.comparison = None

    def _apply_settings(self, settings: Settings) -> None:
        settings.validate()
        if settings.algorithm != self.settings.algorithm and self.playback.locked:
            raise PlaybackLocked("Finish or reset the visualization before switching algorithms")
        self.settings = settings
        self.playback.set_speed(settings.speed)

    def _touch(self) -> None:
        self.revision += 1


def _enum(cls, value):
    if isinstance(value, cls):
        return value
    try:
        return cls(value)
    except ValueError:
        raise InvalidSetting(f"Unknown {cls.__name__}: {value!r}") from None
