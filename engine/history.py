"""
history.py — Per-Mode Undo / Redo
==================================
Snapshot-based history.  Every committed edit pushes a GraphSnapshot;
undo / redo move a cursor and hand back the snapshot to restore.

A snapshot carries the id counter and the free-label pool, so nodes
created after an undo get the same ids and labels they would have had
originally.

Stacks never hold mid-animation state: the workspace resets playback
(clearing MST flags) before it checkpoints.

    stack = HistoryStack()
    stack.checkpoint(graph.snapshot())     # after each committed edit
    snap = stack.undo()                    # None when nothing to undo
    if snap: graph.restore(snap)
"""

import logging
from enum import Enum
from typing import Dict, List, Optional

from graph.snapshot import GraphSnapshot


logger = logging.getLogger(__name__)

HISTORY_CAP = 50


class EditMode(Enum):
    GENERATIVE = "generative"
    USER       = "user"


class HistoryStack:
    """
    Attributes:
        entries : Snapshots, oldest first.
        cursor  : Index of the entry matching the live graph (-1 when empty).
        cap     : Maximum number of entries kept.
    """

    def __init__(self, cap: int = HISTORY_CAP):
        self.entries: List[GraphSnapshot] = []
        self.cursor:  int                 = -1
        self.cap:     int                 = cap

    def checkpoint(self, snapshot: GraphSnapshot) -> bool:
        """Record `snapshot`.  Returns False if it equals the current entry (no-op edit)."""
        if self.current is not None and self.current == snapshot:
            return False
        # a new edit after undo discards the old future
        del self.entries[self.cursor + 1:]
        self.entries.append(snapshot)
        self.cursor += 1
        if len(self.entries) > self.cap:
            del self.entries[0]
            self.cursor -= 1
        return True

    def amend(self, snapshot: GraphSnapshot) -> None:
        """Overwrite the current entry in place (cosmetic edits such as a drag)."""
        if self.cursor < 0:
            self.checkpoint(snapshot)
            return
        self.entries[self.cursor] = snapshot

    def undo(self) -> Optional[GraphSnapshot]:
        if not self.can_undo:
            return None
        self.cursor -= 1
        return self.entries[self.cursor]

    def redo(self) -> Optional[GraphSnapshot]:
        if not self.can_redo:
            return None
        self.cursor += 1
        return self.entries[self.cursor]

    def clear(self) -> None:
        self.entries = []
        self.cursor = -1

    @property
    def current(self) -> Optional[GraphSnapshot]:
        if 0 <= self.cursor < len(self.entries):
            return self.entries[self.cursor]
        return None

    @property
    def can_undo(self) -> bool:
        return self.cursor > 0

    @property
    def can_redo(self) -> bool:
        return self.cursor < len(self.entries) - 1

    def __len__(self) -> int:
        return len(self.entries)


class HistoryManager:
    """One independent HistoryStack per EditMode."""

    def __init__(self, cap: int = HISTORY_CAP):
        self.stacks: Dict[EditMode, HistoryStack] = {mode: HistoryStack(cap) for mode in EditMode}

    def stack(self, mode: EditMode) -> HistoryStack:
        return self.stacks[mode]

    def checkpoint(self, mode: EditMode, snapshot: GraphSnapshot) -> bool:
        written = self.stacks[mode].checkpoint(snapshot)
        if written:
            logger.debug("checkpoint %s → %d entries", mode.value, len(self.stacks[mode]))
        return written

    def amend(self, mode: EditMode, snapshot: GraphSnapshot) -> None:
        self.stacks[mode].amend(snapshot)

    def undo(self, mode: EditMode) -> Optional[GraphSnapshot]:
        return self.stacks[mode].undo()

    def redo(self, mode: EditMode) -> Optional[GraphSnapshot]:
        return self.stacks[mode].redo()

    def reset(self, mode: EditMode, snapshot: Optional[GraphSnapshot] = None) -> None:
        """Start `mode` over, optionally seeded with a base entry."""
        self.stacks[mode].clear()
        if snapshot is not None:
            self.stacks[mode].checkpoint(snapshot)
