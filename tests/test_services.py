"""Unit tests for the habit registry / timer state machine via the engine."""

import pytest

from habitfocus.data.models import GoalPeriod, SessionKind, TimerMode
from habitfocus.services.errors import InvalidInput, InvalidTransition, NotFound
from habitfocus.services.habit_registry import HabitRegistry


def _tick(engine, n):
    for _ in range(n):
        engine.tick()


@pytest.fixture
def reading(engine):
    return engine.create_habit("Reading", "Learning", "#3498db")


@pytest.fixture
def meditate(engine):
    habit = engine.create_habit("Meditate", "Health", "#2ecc71")
    engine.switch_mode(habit.id, TimerMode.COUNTDOWN)
    engine.set_countdown_input(habit.id, 10)
    return habit


class TestHabitManagement:
    def test_create_defaults(self, engine):
        habit = engine.create_habit("  Reading  ")
        assert habit.name == "Reading"
        assert habit.mode == TimerMode.STOPWATCH
        assert habit.countdown_input_minutes == 1
        assert habit.target_duration_seconds == 60
        assert habit.streak == 0
        assert habit.last_completion_date == ""
        assert not habit.is_running

    def test_new_habits_go_first(self, engine):
        a = engine.create_habit("A")
        b = engine.create_habit("B")
        assert [h.id for h in engine.list_habits()] == [b.id, a.id]

    def test_empty_name_rejected(self, engine):
        with pytest.raises(InvalidInput):
            engine.create_habit("   ")
        assert engine.list_habits() == []

    def test_unknown_id(self, engine):
        with pytest.raises(NotFound):
            engine.start("nope")

    def test_reorder(self, engine):
        a = engine.create_habit("A")
        b = engine.create_habit("B")
        c = engine.create_habit("C")
        engine.reorder([a.id, c.id, b.id])
        assert [h.name for h in engine.list_habits()] == ["A", "C", "B"]

    def test_reorder_must_be_permutation(self, engine):
        a = engine.create_habit("A")
        b = engine.create_habit("B")
        with pytest.raises(InvalidInput):
            engine.reorder([a.id])
        with pytest.raises(InvalidInput):
            engine.reorder([a.id, "ghost"])
        assert [h.id for h in engine.list_habits()] == [b.id, a.id]

    def test_categories(self, engine):
        engine.create_habit("A", "Health")
        engine.create_habit("B", "")
        engine.create_habit("C", "Learning")
        engine.create_habit("D", "Health")
        assert engine.existing_categories() == ["Health", "Learning"]

    def test_delete_cascades_goal_but_keeps_history(self, engine, reading):
        engine.start(reading.id)
        _tick(engine, 30)
        engine.stop(reading.id)
        engine.set_goal(reading.id, 20, GoalPeriod.DAILY)

        engine.delete_habit(reading.id)
        assert engine.list_habits() == []
        assert engine.list_goals() == []
        assert len(engine.query_history()) == 1
        assert engine.query_history()[0].habit_name == "Reading"

    def test_delete_running_discards_time(self, engine, reading):
        engine.start(reading.id)
        _tick(engine, 45)
        engine.delete_habit(reading.id)
        assert engine.query_history() == []

    def test_rename_keeps_old_history_name(self, engine, reading):
        engine.start(reading.id)
        _tick(engine, 10)
        engine.stop(reading.id)
        engine.rename_habit(reading.id, "Books")
        assert engine.get_habit(reading.id).name == "Books"
        assert engine.query_history()[0].habit_name == "Reading"


class TestStopwatch:
    def test_reading_scenario(self, engine, reading):
        engine.start(reading.id)
        _tick(engine, 125)
        assert engine.get_habit(reading.id).elapsed_seconds == 125

        engine.stop(reading.id)
        history = engine.query_history()
        assert len(history) == 1
        assert history[0].duration_seconds == 125
        assert history[0].kind == SessionKind.STOPWATCH
        assert history[0].color == "#3498db"
        assert engine.streak(reading.id) == 1

        habit = engine.get_habit(reading.id)
        assert not habit.is_running
        assert habit.elapsed_seconds == 0

    def test_stop_at_zero_logs_nothing(self, engine, reading):
        engine.start(reading.id)
        engine.stop(reading.id)
        engine.start(reading.id)
        assert engine.query_history() == []
        assert engine.streak(reading.id) == 0

    def test_cannot_start_twice(self, engine, reading):
        engine.start(reading.id)
        with pytest.raises(InvalidTransition, match="already running"):
            engine.start(reading.id)

    def test_cannot_stop_idle(self, engine, reading):
        with pytest.raises(InvalidTransition, match="not running"):
            engine.stop(reading.id)

    def test_idle_habits_do_not_tick(self, engine, reading):
        other = engine.create_habit("Other")
        engine.start(reading.id)
        _tick(engine, 5)
        assert engine.get_habit(reading.id).elapsed_seconds == 5
        assert engine.get_habit(other.id).elapsed_seconds == 0

    def test_running_habits_advance_together(self, engine, reading):
        other = engine.create_habit("Other")
        engine.start(reading.id)
        _tick(engine, 3)
        engine.start(other.id)
        _tick(engine, 4)
        assert engine.get_habit(reading.id).elapsed_seconds == 7
        assert engine.get_habit(other.id).elapsed_seconds == 4


class TestCountdown:
    def test_meditate_scenario(self, engine, meditate):
        engine.start(meditate.id)
        assert engine.get_habit(meditate.id).target_duration_seconds == 600

        _tick(engine, 599)
        habit = engine.get_habit(meditate.id)
        assert habit.is_running
        assert habit.remaining_seconds == 1
        assert engine.query_history() == []

        engine.tick()
        habit = engine.get_habit(meditate.id)
        assert not habit.is_running
        assert habit.elapsed_seconds == 0
        history = engine.query_history()
        assert len(history) == 1
        assert history[0].duration_seconds == 600
        assert history[0].kind == SessionKind.COUNTDOWN

    def test_extra_ticks_after_completion_do_nothing(self, engine, meditate):
        engine.start(meditate.id)
        _tick(engine, 700)
        assert len(engine.query_history()) == 1
        assert engine.get_habit(meditate.id).elapsed_seconds == 0

    def test_elapsed_never_exceeds_target(self, engine, meditate):
        engine.set_countdown_input(meditate.id, 1)
        engine.start(meditate.id)
        for _ in range(120):
            engine.tick()
            habit = engine.get_habit(meditate.id)
            assert habit.elapsed_seconds <= habit.target_duration_seconds

    def test_early_stop_logs_elapsed(self, engine, meditate):
        engine.start(meditate.id)
        _tick(engine, 90)
        engine.stop(meditate.id)
        history = engine.query_history()
        assert history[0].duration_seconds == 90
        assert history[0].kind == SessionKind.COUNTDOWN

    def test_adjust_input_clamps_to_one(self, engine, meditate):
        engine.adjust_countdown_input(meditate.id, -50)
        habit = engine.get_habit(meditate.id)
        assert habit.countdown_input_minutes == 1
        assert habit.target_duration_seconds == 60
        engine.adjust_countdown_input(meditate.id, 4)
        assert engine.get_habit(meditate.id).countdown_input_minutes == 5

    def test_no_maximum(self, engine, meditate):
        engine.adjust_countdown_input(meditate.id, 10000)
        assert engine.get_habit(meditate.id).countdown_input_minutes == 10010

    def test_adjust_requires_countdown_mode(self, engine, reading):
        with pytest.raises(InvalidTransition, match="mode is 'stopwatch'"):
            engine.adjust_countdown_input(reading.id, 1)

    def test_adjust_requires_idle(self, engine, meditate):
        engine.start(meditate.id)
        with pytest.raises(InvalidTransition):
            engine.adjust_countdown_input(meditate.id, 1)
        assert engine.get_habit(meditate.id).countdown_input_minutes == 10

    def test_set_input_rejects_text(self, engine, meditate):
        with pytest.raises(InvalidInput):
            engine.set_countdown_input(meditate.id, "ten")
        engine.set_countdown_input(meditate.id, " 0 ")
        assert engine.get_habit(meditate.id).countdown_input_minutes == 1


class TestModeSwitch:
    def test_switch_while_running_rejected(self, engine, reading):
        engine.start(reading.id)
        _tick(engine, 3)
        with pytest.raises(InvalidTransition):
            engine.switch_mode(reading.id, TimerMode.COUNTDOWN)
        habit = engine.get_habit(reading.id)
        assert habit.mode == TimerMode.STOPWATCH
        assert habit.elapsed_seconds == 3

    def test_unknown_mode(self, engine, reading):
        with pytest.raises(InvalidInput):
            engine.switch_mode(reading.id, "hourglass")

    def test_switch_resets_elapsed(self, engine, reading):
        engine.switch_mode(reading.id, TimerMode.COUNTDOWN)
        habit = engine.get_habit(reading.id)
        assert habit.mode == TimerMode.COUNTDOWN
        assert habit.elapsed_seconds == 0


class TestSuppression:
    def test_suppressed_tick_changes_nothing(self, engine, reading):
        engine.start(reading.id)
        _tick(engine, 2)
        engine.set_suppressed(True)
        before = engine.to_snapshot().to_dict()
        engine.tick()
        assert engine.to_snapshot().to_dict() == before

    def test_suppressed_time_is_lost(self, engine, reading):
        engine.start(reading.id)
        engine.set_suppressed(True)
        _tick(engine, 10)
        engine.set_suppressed(False)
        _tick(engine, 2)
        assert engine.get_habit(reading.id).elapsed_seconds == 2


class TestRegistryCallback:
    def test_on_session_receives_duration_and_kind(self):
        logged = []
        registry = HabitRegistry(on_session=lambda h, d, k: logged.append((h.name, d, k)))
        habit = registry.create("Piano")
        registry.start(habit.id)
        registry.tick()
        registry.tick()
        registry.stop(habit.id)
        assert logged == [("Piano", 2, TimerMode.STOPWATCH)]

    def test_tick_returns_finished_countdowns(self):
        registry = HabitRegistry()
        habit = registry.create("Plank")
        registry.switch_mode(habit.id, TimerMode.COUNTDOWN)
        registry.start(habit.id)
        finished = [registry.tick() for _ in range(60)]
        assert finished[-1] == [habit]
        assert all(f == [] for f in finished[:-1])
