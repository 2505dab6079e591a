from __future__ import annotations

import logging
from datetime import date, datetime, timezone

from analytics.records import (
    TrainingRecord,
    normalize_record,
    normalize_records,
    normalize_weekly_stat,
    normalize_weekly_stats,
    parse_timestamp,
)


def test_well_formed_row_is_kept_as_is(make_row):
    record = normalize_record(make_row())

    assert record.id == "run-1"
    assert record.training_date == datetime(2025, 1, 20, 10, 0, tzinfo=timezone.utc)
    assert record.win_rate == 65.0
    assert record.sharpe_ratio == 1.2
    assert record.best_pattern_name == "Hammer"
    assert record.status == "completed"
    assert record.notes is None
    assert record.is_best_run is False
    assert record.defaulted_fields == ()


def test_absent_fields_use_none_and_are_not_reported_as_defaulted():
    record = normalize_record({"id": 17})

    assert record.id == "17"
    assert record.win_rate is None
    assert record.training_date is None
    assert record.assistant_id is None
    assert record.is_best_run is False
    assert record.defaulted_fields == ()


def test_malformed_values_become_absent_and_are_recorded(make_row, caplog):
    raw = make_row(
        win_rate="not-a-number",
        sharpe_ratio=float("nan"),
        training_date="yesterday",
        best_pattern_name=42,
        max_consecutive_wins=2.5,
        is_best_run="yes",
    )

    with caplog.at_level(logging.DEBUG, logger="runlens.analytics.records"):
        record = normalize_record(raw)

    assert record.win_rate is None
    assert record.sharpe_ratio is None
    assert record.training_date is None
    assert record.best_pattern_name is None
    assert record.max_consecutive_wins is None
    assert record.is_best_run is False
    assert set(record.defaulted_fields) == {
        "win_rate",
        "sharpe_ratio",
        "training_date",
        "best_pattern_name",
        "max_consecutive_wins",
        "is_best_run",
    }
    assert "win_rate" in caplog.text


def test_win_rate_outside_percentage_range_is_rejected(make_row):
    assert normalize_record(make_row(win_rate=100.5)).win_rate is None
    assert normalize_record(make_row(win_rate=-1)).win_rate is None
    assert normalize_record(make_row(win_rate=100)).win_rate == 100.0
    assert normalize_record(make_row(win_rate=0)).win_rate == 0.0


def test_numeric_strings_are_accepted_and_empty_string_is_absent(make_row):
    record = normalize_record(make_row(win_rate="71.5", sharpe_ratio="", total_trades_analyzed="120"))

    assert record.win_rate == 71.5
    assert record.sharpe_ratio is None
    assert record.total_trades_analyzed == 120
    assert record.defaulted_fields == ()


def test_booleans_are_not_numbers(make_row):
    record = normalize_record(make_row(win_rate=True))
    assert record.win_rate is None
    assert record.defaulted_fields == ("win_rate",)


def test_text_is_not_trimmed(make_row):
    record = normalize_record(make_row(model_version="gpt-4 ", status=""))
    assert record.model_version == "gpt-4 "
    assert record.status is None


def test_legacy_column_names_are_read(make_row):
    raw = make_row(training_date=None, created_at="2025-01-19T08:30:00+02:00", trigger_source="manual")
    record = normalize_record(raw)

    assert record.training_date == datetime(2025, 1, 19, 6, 30, tzinfo=timezone.utc)
    assert record.source == "manual"


def test_non_mapping_row_becomes_empty_record():
    record = normalize_record(["not", "a", "row"])
    assert record == TrainingRecord(defaulted_fields=("<row>",))


def test_normalize_records_keeps_order_and_handles_none(training_rows):
    records = normalize_records(training_rows)
    assert [r.id for r in records] == ["run-5", "run-4", "run-3", "run-2", "run-1"]
    assert normalize_records(None) == []


def test_parse_timestamp_variants():
    assert parse_timestamp("2025-01-20T10:00:00Z") == datetime(2025, 1, 20, 10, tzinfo=timezone.utc)
    assert parse_timestamp("2025-01-20 10:00:00") == datetime(2025, 1, 20, 10, tzinfo=timezone.utc)
    assert parse_timestamp(date(2025, 1, 20)) == datetime(2025, 1, 20, tzinfo=timezone.utc)
    assert parse_timestamp(None) is None


def test_record_to_dict_is_json_friendly(make_row):
    payload = normalize_record(make_row()).to_dict()
    assert payload["training_date"] == "2025-01-20T10:00:00+00:00"
    assert payload["defaulted_fields"] == []


def test_weekly_rows_are_normalized(weekly_rows):
    stats = normalize_weekly_stats(weekly_rows)

    assert [s.week_start for s in stats] == [date(2025, 1, 6), date(2025, 1, 13), date(2025, 1, 20)]
    assert stats[0].avg_win_rate == 58.25
    assert stats[0].total_runs == 4


def test_weekly_row_with_bad_values_and_aliases():
    stat = normalize_weekly_stat({"week": "2025-01-13T00:00:00Z", "average_win_rate": "abc", "run_count": -2})

    assert stat.week_start == date(2025, 1, 13)
    assert stat.avg_win_rate is None
    assert stat.total_runs is None
    assert set(stat.defaulted_fields) == {"avg_win_rate", "total_runs"}


def test_week_start_keeps_the_calendar_date_of_an_offset_timestamp():
    stat = normalize_weekly_stat({"week_start": "2025-01-06T00:00:00+02:00", "avg_win_rate": 60, "total_runs": 1})

    assert stat.week_start == date(2025, 1, 6)
    assert stat.defaulted_fields == ()
