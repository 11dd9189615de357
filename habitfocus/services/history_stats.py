"""
History statistics: per-habit totals for the stats view.

Filters the ledger to today / last 7 days / last 30 days / all time, then
groups by habit name. Grouping uses numpy so large histories stay cheap.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Sequence, Tuple

import numpy as np

from habitfocus.data.models import HistoryFilter, SessionRecord
from habitfocus.services import timeutil
from habitfocus.services.errors import InvalidInput
from habitfocus.services.goal_progress import MONTH_DAYS, WEEK_DAYS


@dataclass(frozen=True)
class HabitTotal:
    habit_name: str
    total_seconds: int
    color: str
    share: float  # fraction of the grand total, 0 when the total is <= 0


@dataclass
class HistorySummary:
    totals: List[HabitTotal] = field(default_factory=list)
    grand_total_seconds: int = 0
    records: List[SessionRecord] = field(default_factory=list)


def filter_window(history_filter: str, now: datetime) -> Tuple[Optional[int], Optional[int]]:
    """[start, end) bounds in epoch ms; None means unbounded."""
    if history_filter == HistoryFilter.ALL_TIME:
        return None, None
    now_ms = timeutil.to_ms(now)
    if history_filter == HistoryFilter.TODAY:
        return timeutil.start_of_day_ms(now), now_ms + 1
    if history_filter == HistoryFilter.WEEK:
        return timeutil.days_ago_ms(now, WEEK_DAYS) + 1, now_ms + 1
    if history_filter == HistoryFilter.MONTH:
        return timeutil.days_ago_ms(now, MONTH_DAYS) + 1, now_ms + 1
    raise InvalidInput(f"Unknown history filter {history_filter!r}.")


def totals_by_habit(records: Sequence[SessionRecord]) -> List[HabitTotal]:
    """Sum signed durations per habit name, largest first."""
    if not records:
        return []
    names = np.array([r.habit_name for r in records], dtype=object)
    durations = np.array([r.duration_seconds for r in records], dtype=np.int64)
    uniq, first_idx, inverse = np.unique(names, return_index=True, return_inverse=True)
    sums = np.bincount(inverse.ravel(), weights=durations, minlength=len(uniq)).astype(np.int64)
    grand = int(durations.sum())

    totals = [
        HabitTotal(
            habit_name=str(name),
            total_seconds=int(total),
            # records are newest-first, so the first hit is the latest color
            color=records[int(idx)].color,
            share=float(total) / grand if grand > 0 else 0.0,
        )
        for name, idx, total in zip(uniq, first_idx, sums)
    ]
    totals.sort(key=lambda t: (-t.total_seconds, t.habit_name))
    return totals


def summarize(records: Sequence[SessionRecord], history_filter: str,
              now: datetime) -> HistorySummary:
    start_ms, end_ms = filter_window(history_filter, now)
    picked = [
        r for r in records
        if (start_ms is None or r.occurred_at_ms >= start_ms)
        and (end_ms is None or r.occurred_at_ms < end_ms)
    ]
    return HistorySummary(
        totals=totals_by_habit(picked),
        grand_total_seconds=sum(r.duration_seconds for r in picked),
        records=picked,
    )


def format_duration(seconds: int) -> str:
    """Clock-style text: 'MM:SS' under an hour, 'H:MM:SS' above, '-' if negative."""
    total = abs(int(seconds))
    hrs, rem = divmod(total, 3600)
    mins, secs = divmod(rem, 60)
    text = f"{hrs}:{mins:02d}:{secs:02d}" if hrs > 0 else f"{mins:02d}:{secs:02d}"
    return f"-{text}" if seconds < 0 else text


# ---------------------------------------------------------------------------
# Explanation (for interviews)
# ---------------------------------------------------------------------------
# What this file does:
#   Feeds the statistics screen: which habits got the most time in a period,
#   what share of the total each one is, and the raw list for the log view.
#
# Key points:
#   - np.unique(return_inverse) + np.bincount is the numpy "group by":
#     one pass, no Python dict loop.
#   - Totals are signed: adjustments reduce a habit's bar.
#   - The color shown for a habit is the one on its most recent record.
#
# Interviewer-friendly talking points:
#   1. Same rolling windows as goals (7/30 x 24h), so the stats view and the
#      goals view never disagree about "this week".
#   2. share is guarded against a zero/negative grand total (all time
#      removed via adjustments) instead of dividing by zero.
