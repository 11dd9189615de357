"""Unit tests for the QTimer-driven heartbeat."""

import pytest
from PySide6.QtCore import QCoreApplication

from habitfocus.data.models import TimerMode
from habitfocus.services.heartbeat import Heartbeat


@pytest.fixture(scope="module")
def qapp():
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app


@pytest.fixture
def heartbeat(qapp, engine):
    hb = Heartbeat(engine, interval_ms=1000)
    yield hb
    hb.stop()


class TestHeartbeat:
    def test_timeout_ticks_engine(self, heartbeat, engine):
        habit = engine.create_habit("Reading")
        engine.start(habit.id)
        for _ in range(3):
            heartbeat._on_timeout()
        assert engine.get_habit(habit.id).elapsed_seconds == 3

    def test_reorder_suppresses_ticks(self, heartbeat, engine):
        habit = engine.create_habit("Reading")
        engine.start(habit.id)
        heartbeat.begin_reorder()
        heartbeat._on_timeout()
        heartbeat._on_timeout()
        heartbeat.end_reorder()
        heartbeat._on_timeout()
        assert engine.get_habit(habit.id).elapsed_seconds == 1

    def test_callbacks(self, heartbeat, engine):
        ticks = []
        finished = []
        heartbeat.on_tick = lambda: ticks.append(1)
        heartbeat.on_countdown_finished = finished.extend

        habit = engine.create_habit("Plank")
        engine.switch_mode(habit.id, TimerMode.COUNTDOWN)
        engine.start(habit.id)
        for _ in range(60):
            heartbeat._on_timeout()
        assert len(ticks) == 60
        assert [h.name for h in finished] == ["Plank"]
        assert engine.query_history()[0].duration_seconds == 60

    def test_start_stop(self, heartbeat):
        assert not heartbeat.is_active()
        heartbeat.start()
        assert heartbeat.is_active()
        heartbeat.stop()
        assert not heartbeat.is_active()
