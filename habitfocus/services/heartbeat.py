"""
Heartbeat: the clock source that drives HabitEngine.tick() once per second.

A QTimer fires on the Qt event loop, so ticks never interleave with commands
issued from UI slots: both run to completion on the same thread.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from PySide6.QtCore import QTimer

from habitfocus.data.models import Habit
from habitfocus.services.engine import HabitEngine

logger = logging.getLogger(__name__)

DEFAULT_TICK_INTERVAL_MS = 1000


class Heartbeat:
    """
    Periodic 1-second tick for every running habit.

    Late timer fires are not compensated: each timeout is exactly one tick.
    """

    def __init__(
        self,
        engine: HabitEngine,
        interval_ms: int = DEFAULT_TICK_INTERVAL_MS,
        on_tick: Optional[Callable[[], None]] = None,
        on_countdown_finished: Optional[Callable[[List[Habit]], None]] = None,
    ) -> None:
        self.engine = engine
        self.interval_ms = interval_ms

        # Callbacks the UI will set
        self.on_tick = on_tick
        self.on_countdown_finished = on_countdown_finished

        self._timer = QTimer()
        self._timer.setInterval(interval_ms)
        self._timer.timeout.connect(self._on_timeout)

    # ── Public API ──────────────────────────────────────────────────────────

    def start(self) -> None:
        self._timer.start()
        logger.info("Heartbeat started: every %d ms", self.interval_ms)

    def stop(self) -> None:
        self._timer.stop()
        logger.info("Heartbeat stopped.")

    def is_active(self) -> bool:
        return self._timer.isActive()

    def begin_reorder(self) -> None:
        """Drag started: drop ticks until end_reorder()."""
        self.engine.set_suppressed(True)

    def end_reorder(self) -> None:
        self.engine.set_suppressed(False)

    # ── Timer callback ──────────────────────────────────────────────────────

    def _on_timeout(self) -> None:
        if self.engine.suppressed:
            logger.debug("Tick suppressed.")
            return
        finished = self.engine.tick()
        if finished and self.on_countdown_finished:
            self.on_countdown_finished(finished)
        if self.on_tick:
            self.on_tick()


# ---------------------------------------------------------------------------
# Explanation (for interviews)
# ---------------------------------------------------------------------------
# What this file does:
#   Owns the one periodic timer in the app. Every second it asks the engine
#   to advance all running habits, then lets the UI repaint.
#
# Key design decisions:
#   - QTimer (PySide6) instead of threading.Timer: the callback runs on the
#     main thread, so it can't race a button click that calls engine.stop().
#   - Reorder suppression is just a boolean on the engine; the heartbeat
#     keeps firing, the engine ignores it.
#   - Callbacks are injected, so tests can call _on_timeout() directly
#     without spinning an event loop.
#
# Interviewer-friendly talking points:
#   1. Single-writer model: one thread, run-to-completion, no locks.
#   2. No drift compensation by design: a late tick is still one second.
