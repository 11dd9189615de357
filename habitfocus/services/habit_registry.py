"""
Habit Registry: owns the tracked habits and their timer state machines.

Each habit is either Idle (not running, elapsed == 0) or Running. Transitions:
    Idle --start--> Running --stop--> Idle           (logs elapsed if > 0)
    Running --tick (countdown reaches target)--> Idle (logs target, silently)
Mode changes and countdown-length edits are only allowed while Idle.
"""

from __future__ import annotations

import logging
import uuid
from typing import Callable, Iterable, List, Optional, Sequence, Union

from habitfocus.data.models import Habit, TimerMode
from habitfocus.services.errors import InvalidInput, InvalidTransition, NotFound

logger = logging.getLogger(__name__)

MIN_COUNTDOWN_MINUTES = 1

# (habit, duration_seconds, kind) -> None
SessionCallback = Callable[[Habit, int, str], None]


class HabitRegistry:
    """Ordered collection of habits plus the per-habit timer logic."""

    def __init__(
        self,
        habits: Optional[Iterable[Habit]] = None,
        on_session: Optional[SessionCallback] = None,
        default_countdown_minutes: int = MIN_COUNTDOWN_MINUTES,
    ) -> None:
        self._habits: List[Habit] = list(habits or [])
        self.on_session = on_session
        self.default_countdown_minutes = max(MIN_COUNTDOWN_MINUTES, int(default_countdown_minutes))

    # ── Lookup ──────────────────────────────────────────────────────────────

    def list(self) -> List[Habit]:
        return list(self._habits)

    def get(self, habit_id: str) -> Habit:
        for habit in self._habits:
            if habit.id == habit_id:
                return habit
        raise NotFound(f"No habit with id {habit_id!r}.")

    def find_by_name(self, name: str) -> List[Habit]:
        return [h for h in self._habits if h.name == name]

    def running(self) -> List[Habit]:
        return [h for h in self._habits if h.is_running]

    def categories(self) -> List[str]:
        """Distinct non-blank categories, first-seen order."""
        seen: List[str] = []
        for h in self._habits:
            cat = (h.category or "").strip()
            if cat and cat not in seen:
                seen.append(cat)
        return seen

    # ── Habit management ────────────────────────────────────────────────────

    def create(self, name: str, category: Optional[str] = None, color: str = "") -> Habit:
        """Create a habit and put it at the top of the list."""
        clean = self._clean_name(name)
        minutes = self.default_countdown_minutes
        habit = Habit(
            id=uuid.uuid4().hex,
            name=clean,
            category=(category or "").strip(),
            color=color,
            mode=TimerMode.STOPWATCH,
            target_duration_seconds=minutes * 60,
            countdown_input_minutes=minutes,
        )
        self._habits.insert(0, habit)
        logger.info("Habit '%s' created (%s)", habit.name, habit.id)
        return habit

    def rename(self, habit_id: str, name: str) -> Habit:
        habit = self.get(habit_id)
        clean = self._clean_name(name)
        logger.info("Habit '%s' renamed to '%s'", habit.name, clean)
        habit.name = clean
        return habit

    def delete(self, habit_id: str) -> Habit:
        """Remove a habit. A running timer is discarded without logging."""
        habit = self.get(habit_id)
        if habit.is_running:
            logger.info("Discarding %ds in flight for deleted habit '%s'",
                        habit.elapsed_seconds, habit.name)
            habit.is_running = False
            habit.elapsed_seconds = 0
        self._habits.remove(habit)
        logger.info("Habit '%s' deleted", habit.name)
        return habit

    def reorder(self, new_order: Sequence[str]) -> List[Habit]:
        """Rearrange habits; new_order must list every current id exactly once."""
        current = [h.id for h in self._habits]
        if len(new_order) != len(current) or set(new_order) != set(current):
            raise InvalidInput("Reorder must be a permutation of the existing habit ids.")
        by_id = {h.id: h for h in self._habits}
        self._habits = [by_id[i] for i in new_order]
        return self.list()

    # ── Timer state machine ─────────────────────────────────────────────────

    def start(self, habit_id: str) -> Habit:
        habit = self.get(habit_id)
        if habit.is_running:
            raise InvalidTransition(f"Cannot start '{habit.name}': already running.")
        if habit.mode == TimerMode.COUNTDOWN:
            minutes = max(MIN_COUNTDOWN_MINUTES, habit.countdown_input_minutes or MIN_COUNTDOWN_MINUTES)
            habit.countdown_input_minutes = minutes
            habit.target_duration_seconds = minutes * 60
        habit.elapsed_seconds = 0
        habit.is_running = True
        logger.info("Started '%s' (%s)", habit.name, habit.mode)
        return habit

    def stop(self, habit_id: str) -> Habit:
        """Stop a running habit and log whatever time it accumulated."""
        habit = self.get(habit_id)
        if not habit.is_running:
            raise InvalidTransition(f"Cannot stop '{habit.name}': not running.")
        elapsed = habit.elapsed_seconds
        habit.is_running = False
        habit.elapsed_seconds = 0
        logger.info("Stopped '%s' after %ds", habit.name, elapsed)
        if elapsed > 0:
            self._emit(habit, elapsed, habit.mode)
        return habit

    def tick(self) -> List[Habit]:
        """
        Advance every running habit by exactly one second.

        Returns the countdown habits that finished on this tick.
        """
        finished: List[Habit] = []
        for habit in self._habits:
            if not habit.is_running:
                continue
            habit.elapsed_seconds += 1
            if (habit.mode == TimerMode.COUNTDOWN
                    and habit.elapsed_seconds >= habit.target_duration_seconds):
                habit.is_running = False
                habit.elapsed_seconds = 0
                finished.append(habit)
        for habit in finished:
            logger.info("Countdown for '%s' finished", habit.name)
            self._emit(habit, habit.target_duration_seconds, TimerMode.COUNTDOWN)
        return finished

    def switch_mode(self, habit_id: str, mode: str) -> Habit:
        if mode not in TimerMode.ALL:
            raise InvalidInput(f"Unknown timer mode {mode!r}.")
        habit = self._require_idle(habit_id, "switch mode")
        habit.mode = mode
        habit.elapsed_seconds = 0
        return habit

    def adjust_countdown_input(self, habit_id: str, delta: int) -> Habit:
        """Nudge the countdown length by *delta* whole minutes (floor of 1)."""
        if isinstance(delta, bool) or not isinstance(delta, int):
            raise InvalidInput(f"Countdown delta must be a whole number, got {delta!r}.")
        habit = self._require_countdown_idle(habit_id)
        self._set_countdown_minutes(habit, habit.countdown_input_minutes + delta)
        return habit

    def set_countdown_input(self, habit_id: str, minutes: Union[int, str]) -> Habit:
        habit = self._require_countdown_idle(habit_id)
        try:
            if isinstance(minutes, bool) or not isinstance(minutes, (int, str)):
                raise ValueError
            value = int(minutes.strip()) if isinstance(minutes, str) else minutes
        except ValueError as exc:
            raise InvalidInput(
                f"Countdown minutes must be a whole number, got {minutes!r}."
            ) from exc
        self._set_countdown_minutes(habit, value)
        return habit

    # ── Internal ────────────────────────────────────────────────────────────

    def _emit(self, habit: Habit, duration_seconds: int, kind: str) -> None:
        if self.on_session:
            self.on_session(habit, duration_seconds, kind)

    @staticmethod
    def _set_countdown_minutes(habit: Habit, minutes: int) -> None:
        minutes = max(MIN_COUNTDOWN_MINUTES, minutes)
        habit.countdown_input_minutes = minutes
        habit.target_duration_seconds = minutes * 60

    def _require_idle(self, habit_id: str, action: str) -> Habit:
        habit = self.get(habit_id)
        if habit.is_running:
            raise InvalidTransition(f"Cannot {action} for '{habit.name}' while it is running.")
        return habit

    def _require_countdown_idle(self, habit_id: str) -> Habit:
        habit = self._require_idle(habit_id, "change the countdown")
        if habit.mode != TimerMode.COUNTDOWN:
            raise InvalidTransition(
                f"Cannot change the countdown for '{habit.name}': mode is '{habit.mode}'."
            )
        return habit

    @staticmethod
    def _clean_name(name: str) -> str:
        clean = (name or "").strip() if isinstance(name, str) else ""
        if not clean:
            raise InvalidInput("Habit name must not be empty.")
        return clean


# ---------------------------------------------------------------------------
# Explanation (for interviews)
# ---------------------------------------------------------------------------
# What this file does:
#   The per-habit timer state machine. Start, stop, tick, mode switching and
#   countdown length editing all live here.
#
# Key design decisions:
#   - tick() advances ALL running habits as one batch. One tick == one
#     second, even if the platform timer fired late. No drift correction.
#   - Countdown completion is silent: the tick that reaches the target logs
#     the session itself, no stop() from the caller.
#   - Logging a session is a callback (on_session) so the registry doesn't
#     know the ledger exists. Easy to test with a plain list.append.
#   - Validation happens before any field is touched, so a rejected command
#     leaves the habit exactly as it was.
#
# Data flow:
#   Heartbeat -> engine.tick() -> registry.tick() -> on_session ->
#   ledger.record() -> streak update
#
# Interviewer-friendly talking points:
#   1. State machine pattern again: start on a running habit or switching
#      mode mid-run raises InvalidTransition instead of corrupting state.
#   2. Deleting a running habit is a hard stop: in-flight time is dropped.
