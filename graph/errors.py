"""
errors.py — Recoverable Edit / Playback Errors
===============================================
Every failure a user can trigger by clicking around is a GraphError.
The workspace catches these, turns them into a notice, and leaves the
graph exactly as it was (no history checkpoint is written).

Anything that is NOT a GraphError is a bug and is allowed to propagate.
"""


class GraphError(Exception):
    """Base class for user-recoverable errors."""

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message or self.__class__.__name__

    @property
    def kind(self) -> str:
        return self.__class__.__name__


class CapacityExceeded(GraphError):
    """All 26 node labels are in use."""


class DuplicateEdge(GraphError):
    """An edge between the two nodes already exists."""


class SelfLoop(GraphError):
    """Both endpoints of the requested edge are the same node."""


class InvalidWeight(GraphError):
    """Weight is missing, non-numeric, fractional or not positive."""


class NotFound(GraphError):
    """A node or edge id that is no longer (or never was) in the graph."""


class InsufficientNodes(GraphError):
    """The graph is too small to visualize an MST."""


class EmptyGraph(InsufficientNodes):
    pass


class PlaybackLocked(GraphError):
    """A structural edit or algorithm switch was attempted mid-run."""


class InvalidSetting(GraphError, ValueError):
    """A configuration value is outside its allowed range."""


class StaleTraceError(RuntimeError):
    """
    A step references an edge the live graph no longer has.

    Never raised in normal operation: the workspace discards the trace
    before every structural change.  Seeing this means that reset was
    skipped somewhere.
    """
