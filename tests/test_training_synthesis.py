from __future__ import annotations

from datetime import datetime, timezone

from analytics.records import TrainingRecord, normalize_records
from analytics.synthesis import assistant_usage, training_synthesis


def test_synthesis_headline_numbers(training_rows):
    synthesis = training_synthesis(normalize_records(training_rows))

    assert synthesis.total_runs == 5
    assert synthesis.avg_win_rate == 61.7
    assert synthesis.avg_sharpe_ratio == 1.2
    assert synthesis.exceptional_runs == 2
    assert synthesis.weak_runs == 1
    assert synthesis.weak_run_rate == 20.0
    assert synthesis.current_level == "INTERMEDIATE"
    assert synthesis.latest_win_rate == 72.5


def test_top_patterns_break_ties_by_first_appearance(training_rows):
    synthesis = training_synthesis(normalize_records(training_rows))

    assert [(p.name, p.count) for p in synthesis.top_patterns] == [("EMA Rebound", 2), ("Hammer", 2)]


def test_flagged_best_run_counts_as_exceptional(make_row):
    records = normalize_records([make_row(win_rate=52.0, is_best_run=True), make_row(win_rate=52.0)])
    assert training_synthesis(records).exceptional_runs == 1


def test_missing_metrics_count_as_zero_in_averages():
    records = [TrainingRecord(win_rate=80.0, sharpe_ratio=2.0), TrainingRecord()]

    synthesis = training_synthesis(records)

    assert synthesis.avg_win_rate == 40.0
    assert synthesis.avg_sharpe_ratio == 1.0
    assert synthesis.weak_runs == 1
    assert synthesis.top_patterns == ()
    assert synthesis.current_level == "LEARNING"


def test_empty_snapshot_synthesis():
    synthesis = training_synthesis([])
    assert synthesis.total_runs == 0
    assert synthesis.latest_win_rate is None
    assert synthesis.to_dict()["topPatterns"] == []


def test_assistant_usage_groups_in_first_seen_order(training_rows):
    usage = assistant_usage(normalize_records(training_rows))

    assert [u.assistant_id for u in usage] == ["asst_alpha", "asst_beta"]
    alpha, beta = usage
    assert alpha.runs == 4
    assert alpha.avg_win_rate == 57.13
    assert alpha.last_trained_at == datetime(2025, 1, 24, 9, 0, tzinfo=timezone.utc)
    assert beta.runs == 1
    assert beta.avg_win_rate == 80.0


def test_assistant_usage_skips_records_without_assistant():
    records = [TrainingRecord(win_rate=50.0)]
    assert assistant_usage(records) == []
    assert assistant_usage([]) == []
