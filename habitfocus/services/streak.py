"""
Streak Calculator.

A streak here counts distinct calendar days with at least one positive
session. It does NOT reset after a missed day: a new day always adds exactly
one, no matter how long the gap was.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, List, Tuple

from habitfocus.data.models import Habit

logger = logging.getLogger(__name__)


def next_streak(
    streak: int, last_completion_date: str, completion_day: date, duration_seconds: int
) -> Tuple[int, str]:
    """Return the (streak, last_completion_date) pair after one completion."""
    if duration_seconds <= 0:
        return streak, last_completion_date
    day = completion_day.isoformat()
    if day == last_completion_date:
        return streak, last_completion_date
    return streak + 1, day


def apply_completion(
    habits: Iterable[Habit], habit_name: str, completion_day: date, duration_seconds: int
) -> List[Habit]:
    """Advance the streak of every habit currently named *habit_name*."""
    touched: List[Habit] = []
    for habit in habits:
        if habit.name != habit_name:
            continue
        before = habit.streak
        habit.streak, habit.last_completion_date = next_streak(
            habit.streak, habit.last_completion_date, completion_day, duration_seconds
        )
        if habit.streak != before:
            logger.info("Streak for '%s' is now %d", habit.name, habit.streak)
        touched.append(habit)
    return touched


# ---------------------------------------------------------------------------
# Explanation (for interviews)
# ---------------------------------------------------------------------------
# What this file does:
#   Decides how a new session changes a habit's streak.
#
# Key rules:
#   - Same day as the last completion -> unchanged (no double counting).
#   - Any other day -> +1, even after a week off. This is "days practiced",
#     not "consecutive days"; the product relies on that.
#   - Negative adjustments never touch the streak.
#
# Interviewer-friendly talking points:
#   1. next_streak() is a pure function of (old state, new completion), so
#      it's trivially unit-testable with no engine around it.
#   2. Matching by name mirrors the ledger: a record knows a habit name,
#      not an id.
