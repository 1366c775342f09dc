"""
engine/
-------
Playback, history, recording and application state.

    from engine import PlaybackEngine, HistoryManager
    from engine.workspace import Workspace      # not re-exported: it imports ui
"""

from engine.timer     import TickTimer
from engine.playback  import PlaybackEngine, PlaybackState, PlaybackView, ViewSnapshot, SPEED_LABELS, delay_for
from engine.history   import EditMode, HistoryManager, HistoryStack, HISTORY_CAP
from engine.recorder  import Recorder, RunMetrics, ComparisonResult, compare, compare_all
from engine.settings  import Settings

__all__ = [
    "TickTimer",
    "PlaybackEngine",
    "PlaybackState",
    "PlaybackView",
    "ViewSnapshot",
    "SPEED_LABELS",
    "delay_for",
    "EditMode",
    "HistoryManager",
    "HistoryStack",
    "HISTORY_CAP",
    "Recorder",
    "RunMetrics",
    "ComparisonResult",
    "compare",
    "compare_all",
    "Settings",
]
