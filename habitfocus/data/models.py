"""
Data models for HabitFocus.

Plain dataclasses for habits, ledger entries, goals and the per-user snapshot.
Every model knows how to turn itself into a JSON-friendly dict and back, which
is all the persistence layer needs.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import List, Optional


class TimerMode:
    """How a habit's timer behaves while running."""
    STOPWATCH = "stopwatch"
    COUNTDOWN = "countdown"
    ALL = (STOPWATCH, COUNTDOWN)


class SessionKind:
    """Origin of a ledger entry."""
    STOPWATCH = "stopwatch"
    COUNTDOWN = "countdown"
    MANUAL = "manual"
    ADJUSTMENT = "adjustment"
    ALL = (STOPWATCH, COUNTDOWN, MANUAL, ADJUSTMENT)


class GoalPeriod:
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    CUSTOM = "custom"
    ALL = (DAILY, WEEKLY, MONTHLY, CUSTOM)


class HistoryFilter:
    """Windows offered by the statistics view."""
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"
    ALL_TIME = "all"
    ALL = (TODAY, WEEK, MONTH, ALL_TIME)


@dataclass
class Habit:
    """One tracked activity and its timer state."""
    id: str = ""
    name: str = ""
    category: str = ""
    color: str = ""
    mode: str = TimerMode.STOPWATCH
    target_duration_seconds: int = 60
    countdown_input_minutes: int = 1
    elapsed_seconds: int = 0
    is_running: bool = False
    streak: int = 0
    last_completion_date: str = ""   # 'YYYY-MM-DD', empty before first completion

    @property
    def remaining_seconds(self) -> Optional[int]:
        """Seconds left on a running countdown, None otherwise."""
        if self.mode != TimerMode.COUNTDOWN or not self.is_running:
            return None
        return max(0, self.target_duration_seconds - self.elapsed_seconds)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "Habit":
        return cls(
            id=str(data["id"]),
            name=data["name"],
            category=data.get("category") or "",
            color=data.get("color") or "",
            mode=data.get("mode", TimerMode.STOPWATCH),
            target_duration_seconds=int(data.get("target_duration_seconds", 60)),
            countdown_input_minutes=int(data.get("countdown_input_minutes", 1)),
            elapsed_seconds=int(data.get("elapsed_seconds", 0)),
            is_running=bool(data.get("is_running", False)),
            streak=int(data.get("streak", 0)),
            last_completion_date=data.get("last_completion_date") or "",
        )


@dataclass(frozen=True)
class SessionRecord:
    """
    One immutable ledger entry.

    habit_name is a copy of the habit's name at logging time, so history
    survives renames and deletions. duration_seconds is only ever negative
    for kind == 'adjustment'.
    """
    id: str
    habit_name: str
    duration_seconds: int
    kind: str
    occurred_at_ms: int
    color: str = ""

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "SessionRecord":
        return cls(
            id=str(data["id"]),
            habit_name=data["habit_name"],
            duration_seconds=int(data["duration_seconds"]),
            kind=data["kind"],
            occurred_at_ms=int(data["occurred_at_ms"]),
            color=data.get("color") or "",
        )


@dataclass
class Goal:
    """A minutes target for one habit. start/end dates only matter for 'custom'."""
    habit_id: str = ""
    target_minutes: int = 0
    period: str = GoalPeriod.DAILY
    start_date: Optional[str] = None
    end_date: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "Goal":
        return cls(
            habit_id=str(data["habit_id"]),
            target_minutes=int(data["target_minutes"]),
            period=data["period"],
            start_date=data.get("start_date"),
            end_date=data.get("end_date"),
        )


@dataclass
class Snapshot:
    """Everything the engine owns for one user, in one serializable bundle."""
    user_id: str = ""
    habits: List[Habit] = field(default_factory=list)
    history: List[SessionRecord] = field(default_factory=list)  # newest first
    goals: List[Goal] = field(default_factory=list)
    theme_id: str = "light"

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "habits": [h.to_dict() for h in self.habits],
            "history": [r.to_dict() for r in self.history],
            "goals": [g.to_dict() for g in self.goals],
            "theme_id": self.theme_id,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Snapshot":
        return cls(
            user_id=str(data.get("user_id", "")),
            habits=[Habit.from_dict(h) for h in data.get("habits", [])],
            history=[SessionRecord.from_dict(r) for r in data.get("history", [])],
            goals=[Goal.from_dict(g) for g in data.get("goals", [])],
            theme_id=data.get("theme_id") or "light",
        )


# ---------------------------------------------------------------------------
# Explanation (for interviews)
# ---------------------------------------------------------------------------
# What this file does:
#   Defines the "shape" of every object the engine keeps: habits (with their
#   live timer state), ledger records, goals, and the snapshot that bundles
#   them for one user.
#
# Key classes and why they exist:
#   - Habit: mutable, because its timer state changes every second.
#   - SessionRecord: frozen. The ledger is append-only, so records can't be
#     edited after the fact; corrections are new 'adjustment' records.
#   - Goal: at most one per habit, keyed by habit_id.
#   - Snapshot: the unit of persistence. Save it, load it, done.
#
# Interviewer-friendly talking points:
#   1. Name-based history: records store the habit NAME, not its id, so
#      deleting a habit never orphans or deletes its history.
#   2. String constants instead of Enum: values go straight into JSON with
#      no custom encoder.
#   3. to_dict/from_dict are explicit instead of a serialization library;
#      the schema is tiny and the mapping is obvious.
