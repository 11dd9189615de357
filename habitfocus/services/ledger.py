"""
Session Ledger: the append-only history of completed and corrected sessions.

Records are never edited or removed. "Undo" is a new adjustment record with
the opposite sign. Zero-duration records are silently dropped.
"""

from __future__ import annotations

import logging
import uuid
from datetime import date, datetime
from typing import Callable, Iterable, List, Optional, Union

from habitfocus.data.models import SessionKind, SessionRecord
from habitfocus.services import timeutil
from habitfocus.services.errors import InvalidInput

logger = logging.getLogger(__name__)


def new_record_id() -> str:
    return uuid.uuid4().hex


class SessionLedger:
    """
    Append-only list of SessionRecords, newest insertion first.

    on_append is called once for every record that actually lands in the
    ledger; the engine uses it to drive streak updates.
    """

    def __init__(
        self,
        records: Optional[Iterable[SessionRecord]] = None,
        clock: Callable[[], datetime] = datetime.now,
        on_append: Optional[Callable[[SessionRecord], None]] = None,
    ) -> None:
        self._records: List[SessionRecord] = list(records or [])
        self.clock = clock
        self.on_append = on_append

    def __len__(self) -> int:
        return len(self._records)

    # ── Write side ──────────────────────────────────────────────────────────

    def append(self, record: SessionRecord) -> Optional[SessionRecord]:
        """Add *record*. Returns None (and stores nothing) for zero duration."""
        if record.duration_seconds == 0:
            logger.debug("Dropping zero-duration %s session for '%s'",
                         record.kind, record.habit_name)
            return None
        if record.kind not in SessionKind.ALL:
            raise InvalidInput(f"Unknown session kind {record.kind!r}.")
        if record.duration_seconds < 0 and record.kind != SessionKind.ADJUSTMENT:
            raise InvalidInput("Only adjustments may carry a negative duration.")
        self._records.insert(0, record)
        logger.info("Logged %+ds (%s) for '%s'",
                    record.duration_seconds, record.kind, record.habit_name)
        if self.on_append:
            self.on_append(record)
        return record

    def record(
        self,
        habit_name: str,
        duration_seconds: int,
        kind: str,
        color: str = "",
        occurred_at_ms: Optional[int] = None,
    ) -> Optional[SessionRecord]:
        """Build a record stamped now (or at *occurred_at_ms*) and append it."""
        if occurred_at_ms is None:
            occurred_at_ms = timeutil.to_ms(self.clock())
        return self.append(SessionRecord(
            id=new_record_id(),
            habit_name=habit_name,
            duration_seconds=int(duration_seconds),
            kind=kind,
            occurred_at_ms=occurred_at_ms,
            color=color,
        ))

    def manual_log(
        self,
        habit_name: str,
        minutes: Union[int, str],
        day: Union[str, date],
        color: str = "",
    ) -> SessionRecord:
        """Back-date a session to local midnight of *day*."""
        mins = timeutil.parse_minutes(minutes)
        log_day = timeutil.parse_date(day)
        record = self.record(
            habit_name, mins * 60, SessionKind.MANUAL, color,
            occurred_at_ms=timeutil.local_midnight_ms(log_day),
        )
        assert record is not None
        return record

    def adjust(
        self,
        habit_name: str,
        minutes: Union[int, str],
        sign: int,
        color: str = "",
    ) -> SessionRecord:
        """Add (sign=+1) or remove (sign=-1) minutes at the current instant."""
        mins = timeutil.parse_minutes(minutes)
        if sign not in (1, -1):
            raise InvalidInput(f"Adjustment sign must be +1 or -1, got {sign!r}.")
        record = self.record(habit_name, sign * mins * 60, SessionKind.ADJUSTMENT, color)
        assert record is not None
        return record

    # ── Read side ───────────────────────────────────────────────────────────

    def query_by_window(
        self, start_ms: Optional[int] = None, end_ms: Optional[int] = None
    ) -> List[SessionRecord]:
        """Records with start_ms <= occurred_at_ms < end_ms, newest insertion first."""
        return [
            r for r in self._records
            if (start_ms is None or r.occurred_at_ms >= start_ms)
            and (end_ms is None or r.occurred_at_ms < end_ms)
        ]

    def records(self) -> List[SessionRecord]:
        return list(self._records)


# ---------------------------------------------------------------------------
# Explanation (for interviews)
# ---------------------------------------------------------------------------
# What this file does:
#   Keeps the history of every session: timer runs, manual back-dated
#   entries, and +/- corrections.
#
# Key methods:
#   - append(): the ONLY write path. Zero-duration records vanish silently.
#   - manual_log(): validates minutes/date, stamps local midnight of that day.
#   - adjust(): signed correction stamped "now".
#   - query_by_window(): half-open [start, end) time filter.
#
# Data flow:
#   Registry stop/countdown finish -> engine -> ledger.record() ->
#   on_append callback -> streak update
#
# Interviewer-friendly talking points:
#   1. Append-only log (event-sourcing lite): you never lose history, and
#      "undo" is auditable because it's just another record.
#   2. Display order is insertion order, not timestamp order, because
#      back-dated manual entries can land anywhere in time.
#   3. uuid4 ids: unique without a counter that would need persisting.
