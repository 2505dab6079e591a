from __future__ import annotations

from analytics.ranking import FALLBACK_BEST_RUNS, best_runs
from analytics.records import normalize_records


def test_best_runs_sorted_by_win_rate_descending(training_rows):
    records = normalize_records(training_rows)

    ranked = best_runs(records, 3)

    assert [r.run_id for r in ranked] == ["run-3", "run-5", "run-2"]
    assert [r.win_rate for r in ranked] == [80.0, 72.5, 61.0]
    assert ranked[0].date == "2025-01-22T09:00:00+00:00"
    assert ranked[0].pattern_name == "EMA Rebound"
    assert not any(r.is_placeholder for r in ranked)


def test_ties_keep_store_order(make_row):
    records = normalize_records(
        [
            make_row(id="newer", win_rate=70.0),
            make_row(id="middle", win_rate=90.0),
            make_row(id="older", win_rate=70.0),
        ]
    )

    ranked = best_runs(records, 5)

    assert [r.run_id for r in ranked] == ["middle", "newer", "older"]


def test_zero_and_missing_win_rates_are_ignored(make_row):
    records = normalize_records(
        [
            make_row(id="zero", win_rate=0),
            make_row(id="missing", win_rate=None),
            make_row(id="ok", win_rate=12.5),
        ]
    )

    ranked = best_runs(records)

    assert [r.run_id for r in ranked] == ["ok"]


def test_fallback_rows_when_nothing_qualifies(make_row):
    records = normalize_records([make_row(win_rate=0), make_row(win_rate=None)])

    ranked = best_runs(records)

    assert ranked == list(FALLBACK_BEST_RUNS)
    assert ranked[0].pattern_name == "EMA Rebound"
    assert ranked[0].win_rate == 74.8
    assert all(r.is_placeholder for r in ranked)


def test_fallback_for_empty_snapshot_is_cut_to_limit():
    assert len(best_runs([], 5)) == 3
    assert [r.pattern_name for r in best_runs([], 2)] == ["EMA Rebound", "Hammer"]


def test_limit_of_zero_or_less_returns_nothing(training_rows):
    records = normalize_records(training_rows)
    assert best_runs(records, 0) == []
    assert best_runs(records, -3) == []
    assert best_runs([], 0) == []


def test_limit_larger_than_candidates_returns_all(training_rows):
    records = normalize_records(training_rows)
    assert len(best_runs(records, 50)) == 5
