"""
timer.py — Cooperative Auto-Advance Timer
==========================================
The only asynchronous primitive in the app.  Nothing runs in the
background: whoever owns the event loop (the browser polling /api/tick,
or a test) calls `poll()`, and the armed callback fires once its delay
has elapsed.

Guarantees:
  - At most one schedule is armed.  `arm()` replaces the previous one.
  - `cancel()` is idempotent.
  - A schedule is consumed before its callback runs, so a callback may
    re-arm itself, and a cancelled schedule can never fire later.
  - Every arm / cancel bumps `generation`.
"""

import time
from typing import Callable, Optional


class TickTimer:

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock:      Callable[[], float]          = clock
        self._callback:   Optional[Callable[[], None]] = None
        self._due:        float                        = 0.0
        self._delay:      float                        = 0.0
        self.generation:  int                          = 0

    # ------------------------------------------------------------------
    # Scheduling
    # ------------------------------------------------------------------
    def arm(self, delay: float, callback: Callable[[], None]) -> int:
        """Schedule `callback` after `delay` seconds.  Returns the new generation."""
        self.generation += 1
        self._callback = callback
        self._delay = max(0.0, delay)
        self._due = self._clock() + self._delay
        return self.generation

    def cancel(self) -> None:
        if self._callback is None:
            return
        self.generation += 1
        self._callback = None

    @property
    def armed(self) -> bool:
        return self._callback is not None

    @property
    def delay(self) -> float:
        return self._delay

    def remaining(self) -> float:
        if self._callback is None:
            return 0.0
        return max(0.0, self._due - self._clock())

    # ------------------------------------------------------------------
    # Event-loop hook
    # ------------------------------------------------------------------
    def poll(self, now: Optional[float] = None) -> bool:
        """Fire the armed callback if it is due.  Returns True if it fired."""
        if self._callback is None:
            return False
        now = self._clock() if now is None else now
        if now < self._due:
            return False
        callback = self._callback
        self._callback = None
        callback()
        return True
