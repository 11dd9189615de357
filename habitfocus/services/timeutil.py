"""
Local-calendar helpers.

All dates in the engine are local calendar dates rendered as 'YYYY-MM-DD';
all instants are epoch milliseconds. Naive datetimes are local time.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Union

from habitfocus.services.errors import InvalidInput

DAY_MS = 24 * 60 * 60 * 1000

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_date(value: Union[str, date]) -> date:
    """Strict 'YYYY-MM-DD' parse. Raises InvalidInput for anything else."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not _DATE_RE.match(value.strip()):
        raise InvalidInput(f"Malformed date {value!r}, expected YYYY-MM-DD.")
    try:
        return date.fromisoformat(value.strip())
    except ValueError as exc:
        raise InvalidInput(f"Invalid calendar date {value!r}.") from exc


def to_ms(dt: datetime) -> int:
    return int(round(dt.timestamp() * 1000))


def local_midnight_ms(d: date) -> int:
    """Epoch ms of 00:00 local time on *d*."""
    return to_ms(datetime(d.year, d.month, d.day))


def start_of_day_ms(now: datetime) -> int:
    return local_midnight_ms(now.date())


def days_ago_ms(now: datetime, days: int) -> int:
    """Rolling window start: exactly *days* x 24h before *now*."""
    return to_ms(now) - days * DAY_MS


def parse_minutes(value: Union[int, str], what: str = "minutes") -> int:
    """Whole positive minutes from an int or a numeric string."""
    if isinstance(value, bool):
        raise InvalidInput(f"{what} must be a whole number, got {value!r}.")
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, str):
        try:
            value = int(value.strip())
        except ValueError as exc:
            raise InvalidInput(f"{what} must be a whole number, got {value!r}.") from exc
    if not isinstance(value, int):
        raise InvalidInput(f"{what} must be a whole number, got {value!r}.")
    if value <= 0:
        raise InvalidInput(f"{what} must be greater than zero, got {value}.")
    return value
