"""Unit tests for history statistics and configuration loading."""

import json
from datetime import datetime, timedelta

import pytest

from habitfocus.config import DEFAULT_CONFIG, load_config, save_config
from habitfocus.data.models import HistoryFilter, SessionKind, SessionRecord
from habitfocus.services import timeutil
from habitfocus.services.errors import InvalidInput
from habitfocus.services.history_stats import (
    format_duration,
    summarize,
    totals_by_habit,
)

NOW = datetime(2024, 5, 15, 12, 0, 0)


def _rec(name, seconds, when, color="#000000", kind=SessionKind.STOPWATCH):
    return SessionRecord(f"{name}-{seconds}-{when}", name, seconds, kind,
                         timeutil.to_ms(when), color)


@pytest.fixture
def records():
    # newest insertion first, like the ledger
    return [
        _rec("Reading", -300, NOW, "#e74c3c", SessionKind.ADJUSTMENT),
        _rec("Running", 600, NOW - timedelta(hours=1), "#2ecc71"),
        _rec("Reading", 1200, NOW - timedelta(hours=2), "#3498db"),
        _rec("Reading", 1800, NOW - timedelta(days=3), "#3498db"),
        _rec("Guitar", 900, NOW - timedelta(days=20), "#9b59b6"),
        _rec("Guitar", 3600, NOW - timedelta(days=45), "#9b59b6"),
    ]


class TestTotals:
    def test_grouped_and_sorted(self, records):
        totals = totals_by_habit(records)
        assert [(t.habit_name, t.total_seconds) for t in totals] == [
            ("Guitar", 4500), ("Reading", 2700), ("Running", 600),
        ]

    def test_color_from_latest_record(self, records):
        reading = next(t for t in totals_by_habit(records) if t.habit_name == "Reading")
        assert reading.color == "#e74c3c"

    def test_shares_sum_to_one(self, records):
        totals = totals_by_habit(records)
        assert sum(t.share for t in totals) == pytest.approx(1.0)

    def test_empty(self):
        assert totals_by_habit([]) == []

    def test_non_positive_grand_total(self):
        totals = totals_by_habit([_rec("A", -60, NOW, kind=SessionKind.ADJUSTMENT)])
        assert totals[0].share == 0.0


class TestSummarize:
    def test_today(self, records):
        summary = summarize(records, HistoryFilter.TODAY, NOW)
        assert summary.grand_total_seconds == 1500
        assert len(summary.records) == 3

    def test_week(self, records):
        summary = summarize(records, HistoryFilter.WEEK, NOW)
        assert summary.grand_total_seconds == 3300

    def test_month(self, records):
        summary = summarize(records, HistoryFilter.MONTH, NOW)
        assert summary.grand_total_seconds == 4200

    def test_all(self, records):
        summary = summarize(records, HistoryFilter.ALL_TIME, NOW)
        assert summary.grand_total_seconds == 7800
        assert summary.records == records

    def test_unknown_filter(self, records):
        with pytest.raises(InvalidInput):
            summarize(records, "decade", NOW)

    def test_engine_summary(self, engine):
        habit = engine.create_habit("Reading")
        engine.manual_log(habit.id, 10, "2024-05-15")
        engine.manual_log(habit.id, 10, "2024-01-01")
        assert engine.history_summary(HistoryFilter.TODAY).grand_total_seconds == 600
        assert engine.history_summary(HistoryFilter.ALL_TIME).grand_total_seconds == 1200


class TestFormatDuration:
    @pytest.mark.parametrize("seconds,text", [
        (0, "00:00"),
        (59, "00:59"),
        (125, "02:05"),
        (3600, "1:00:00"),
        (3725, "1:02:05"),
        (-90, "-01:30"),
    ])
    def test_format(self, seconds, text):
        assert format_duration(seconds) == text


class TestConfig:
    def test_defaults_when_missing(self, tmp_path):
        cfg = load_config(tmp_path / "missing.json")
        assert cfg == DEFAULT_CONFIG

    def test_override_merges(self, tmp_path):
        path = tmp_path / "cfg.json"
        path.write_text(json.dumps({"tick_interval_ms": 500, "bogus": 1}))
        cfg = load_config(path)
        assert cfg["tick_interval_ms"] == 500
        assert cfg["default_countdown_minutes"] == DEFAULT_CONFIG["default_countdown_minutes"]
        assert "bogus" not in cfg

    def test_bad_json_falls_back(self, tmp_path):
        path = tmp_path / "cfg.json"
        path.write_text("{not json")
        assert load_config(path) == DEFAULT_CONFIG

    def test_save_round_trip(self, tmp_path):
        path = tmp_path / "nested" / "cfg.json"
        cfg = dict(DEFAULT_CONFIG, default_theme_id="dark")
        save_config(cfg, path)
        assert load_config(path)["default_theme_id"] == "dark"
