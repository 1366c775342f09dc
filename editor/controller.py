"""
controller.py — Pointer-Driven Graph Editing
=============================================
Translates pointer events into Graph mutations according to the active
InteractionMode.

Modes:
  • DRAG         – drag nodes around; in user mode an empty click adds a node
  • DELETE_NODE  – click a node to delete it (and its edges)
  • DELETE_EDGE  – click an edge line or its weight label to delete it
  • EDIT_WEIGHT  – click an edge line or its weight label → WeightPrompt
  • ADD_EDGE     – click source, click target → WeightPrompt

Design decisions:
  - Exactly one mode is active.  Switching silently drops any half-done
    gesture (drag, selected source, open prompt).
  - The controller never writes history itself.  Every committed
    mutation calls `commit(what)`; the owner checkpoints and resets
    playback there.  Node moves are cosmetic and never commit.
  - Structural edits raise PlaybackLocked while `is_locked()` is True.
    Dragging is always allowed.
  - A WeightPrompt is modal: pointer_down is ignored until it is
    answered or cancelled.  An invalid answer raises InvalidWeight and
    keeps the prompt open for another try.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Tuple

from editor.hit_test import edge_or_label_at, node_at
from graph import Graph, parse_weight
from graph.errors import DuplicateEdge, NotFound, PlaybackLocked


class InteractionMode(Enum):
    DRAG        = "drag"
    DELETE_NODE = "delete_node"
    DELETE_EDGE = "delete_edge"
    EDIT_WEIGHT = "edit_weight"
    ADD_EDGE    = "add_edge"


# ---------------------------------------------------------------------------
# WeightPrompt — the "enter a weight" dialog the UI must show
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class WeightPrompt:
    purpose: str                 # "add_edge" | "edit_weight"
    source:  int
    target:  int
    current: Optional[int]       # existing weight when editing
    message: str

    def to_dict(self) -> dict:
        return {
            "purpose": self.purpose,
            "source":  self.source,
            "target":  self.target,
            "current": self.current,
            "message": self.message,
        }


# ---------------------------------------------------------------------------
# Controller
# ---------------------------------------------------------------------------
class EditController:
    """
    Attributes:
        graph           : Graph being edited (rebound on editing-mode switch).
        mode            : Active InteractionMode.
        add_on_click    : Empty-canvas click in DRAG mode adds a node.
        selected_source : ADD_EDGE – first endpoint picked, rendered as marked.
        prompt          : Pending WeightPrompt, or None.
        dragging        : (node_id, offset_x, offset_y) while a drag is live.
    """

    def __init__(
        self,
        graph: Graph,
        commit: Callable[[str], None],
        is_locked: Callable[[], bool] = lambda: False,
    ):
        self.graph:           Graph                                = graph
        self.mode:            InteractionMode                      = InteractionMode.DRAG
        self.add_on_click:    bool                                 = False
        self.selected_source: Optional[int]                        = None
        self.prompt:          Optional[WeightPrompt]               = None
        self.dragging:        Optional[Tuple[int, float, float]]   = None
        self._commit = commit
        self._is_locked = is_locked

    # ------------------------------------------------------------------
    # Mode handling
    # ------------------------------------------------------------------
    def set_mode(self, mode: InteractionMode) -> None:
        self.cancel_gesture()
        self.mode = mode

    def toggle_mode(self, mode: InteractionMode) -> None:
        """Clicking the active mode's button again returns to DRAG."""
        self.set_mode(InteractionMode.DRAG if self.mode is mode else mode)

    def bind(self, graph: Graph, add_on_click: bool) -> None:
        self.cancel_gesture()
        self.graph = graph
        self.add_on_click = add_on_click

    def cancel_gesture(self) -> None:
        self.selected_source = None
        self.prompt = None
        self.dragging = None

    # ------------------------------------------------------------------
    # Pointer events
    # ------------------------------------------------------------------
    def pointer_down(self, x: float, y: float) -> bool:
        """Returns True if anything visible changed."""
        if self.prompt is not None:
            return False

        if self.mode is InteractionMode.DRAG:
            node = node_at(self.graph, x, y)
            if node is not None:
                self.dragging = (node.id, x - node.x, y - node.y)
                return True
            if self.add_on_click:
                self._guard()
                node = self.graph.add_node(x, y)
                self._commit(f"add node {node.label}")
                return True
            return False

        if self.mode is InteractionMode.DELETE_NODE:
            node = node_at(self.graph, x, y)
            if node is None:
                return False
            self._guard()
            self.graph.delete_node(node.id)
            self._commit(f"delete node {node.label}")
            return True

        if self.mode is InteractionMode.DELETE_EDGE:
            edge = edge_or_label_at(self.graph, x, y)
            if edge is None:
                return False
            self._guard()
            name = self._edge_name(edge.source, edge.target)
            self.graph.delete_edge(edge.source, edge.target)
            self._commit(f"delete edge {name}")
            return True

        if self.mode is InteractionMode.EDIT_WEIGHT:
            edge = edge_or_label_at(self.graph, x, y)
            if edge is None:
                return False
            self._guard()
            self.prompt = WeightPrompt(
                "edit_weight", edge.source, edge.target, edge.weight,
                f"New weight for edge {self._edge_name(edge.source, edge.target)}:",
            )
            return True

        return self._add_edge_click(x, y)

    def pointer_move(self, x: float, y: float) -> bool:
        if self.dragging is None:
            return False
        node_id, dx, dy = self.dragging
        if node_id not in self.graph.nodes:
            self.dragging = None
            return False
        self.graph.move_node(node_id, x - dx, y - dy)
        return True

    def pointer_up(self, x: float = 0.0, y: float = 0.0) -> bool:
        was_dragging = self.dragging is not None
        self.dragging = None
        return was_dragging

    # ------------------------------------------------------------------
    # Prompt
    # ------------------------------------------------------------------
    def answer_prompt(self, value) -> None:
        prompt = self.prompt
        if prompt is None:
            raise NotFound("There is no weight prompt to answer")
        self._guard()
        weight = parse_weight(value)

        if prompt.purpose == "add_edge":
            self.graph.add_edge(prompt.source, prompt.target, weight)
            self.cancel_gesture()
            self._commit(f"add edge {self._edge_name(prompt.source, prompt.target)}")
            return

        edge = self.graph.find_edge(prompt.source, prompt.target)
        if edge is None:
            self.cancel_gesture()
            raise NotFound("That edge no longer exists")
        self.graph.set_edge_weight(edge, weight)
        self.cancel_gesture()
        self._commit(f"set weight of {self._edge_name(edge.source, edge.target)} to {weight}")

    def cancel_prompt(self) -> None:
        self.prompt = None
        self.selected_source = None

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _add_edge_click(self, x: float, y: float) -> bool:
        node = node_at(self.graph, x, y)
        if node is None:
            return False
        self._guard()

        if self.selected_source is None:
            self.selected_source = node.id
            return True
        if node.id == self.selected_source:
            self.selected_source = None
            return True

        source = self.selected_source
        if self.graph.are_adjacent(source, node.id):
            self.selected_source = None
            raise DuplicateEdge(f"Edge {self._edge_name(source, node.id)} already exists")
        self.prompt = WeightPrompt(
            "add_edge", source, node.id, None,
            f"Weight for new edge {self._edge_name(source, node.id)}:",
        )
        return True

    def _guard(self) -> None:
        if self._is_locked():
            raise PlaybackLocked("Reset the visualization before editing the graph")

    def _edge_name(self, u: int, v: int) -> str:
        return f"{self.graph.label_of(u)}-{self.graph.label_of(v)}"

    def marks(self) -> dict:
        """Controller state the renderer draws on top of the graph."""
        return {
            "selected_source": self.selected_source,
            "dragging":        self.dragging[0] if self.dragging else None,
            "prompt_edge":     (self.prompt.source, self.prompt.target) if self.prompt else None,
        }
