"""Shared fixtures: a controllable wall clock and a fresh engine."""

import sys
from datetime import datetime, timedelta
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from habitfocus.services.engine import HabitEngine


class FakeClock:
    """Callable stand-in for datetime.now that only moves when told to."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 5, 15, 12, 0, 0))


@pytest.fixture
def engine(clock):
    return HabitEngine(clock=clock)
