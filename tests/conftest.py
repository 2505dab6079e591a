from __future__ import annotations

import pytest

from core import config as config_module
from core.config import Config, LoggingConfig, StoreConfig


def make_training_row(**overrides) -> dict:
    row = {
        "id": "run-1",
        "training_date": "2025-01-20T10:00:00Z",
        "win_rate": 65.0,
        "sharpe_ratio": 1.2,
        "best_pattern_name": "Hammer",
        "best_pattern_profit": 2.4,
        "assistant_id": "asst_alpha",
        "model_version": "gpt-4o",
        "strategy_version": "MWD v2.1",
        "training_level": "INTERMEDIATE",
        "status": "completed",
        "notes": None,
        "is_best_run": False,
    }
    row.update(overrides)
    return row


def make_training_rows() -> list[dict]:
    """Five runs, newest first, the way the store returns them."""
    return [
        make_training_row(id="run-5", training_date="2025-01-24T09:00:00Z", win_rate=72.5, best_pattern_name="EMA Rebound"),
        make_training_row(id="run-4", training_date="2025-01-23T09:00:00Z", win_rate=55.0, status="completed"),
        make_training_row(id="run-3", training_date="2025-01-22T09:00:00Z", win_rate=80.0, status="error",
                          assistant_id="asst_beta", best_pattern_name="EMA Rebound"),
        make_training_row(id="run-2", training_date="2025-01-21T09:00:00Z", win_rate=61.0, model_version="gpt-4-turbo"),
        make_training_row(id="run-1", training_date="2025-01-20T09:00:00Z", win_rate=40.0, best_pattern_name=None),
    ]


def make_weekly_rows() -> list[dict]:
    return [
        {"week_start": "2025-01-06", "avg_win_rate": 58.25, "total_runs": 4},
        {"week_start": "2025-01-13", "avg_win_rate": 61.5, "total_runs": 6},
        {"week_start": "2025-01-20", "avg_win_rate": 62.7, "total_runs": 5},
    ]


@pytest.fixture
def training_rows() -> list[dict]:
    return make_training_rows()


@pytest.fixture
def weekly_rows() -> list[dict]:
    return make_weekly_rows()


@pytest.fixture
def quiet_config(monkeypatch, tmp_path) -> Config:
    """A process-wide config that never touches ~/runlens_data or a real Supabase."""
    config = Config(
        data_dir=tmp_path / "runlens_data",
        store=StoreConfig(url="", anon_key=""),
        logging=LoggingConfig(level="WARNING"),
    )
    monkeypatch.setattr(config_module, "_config", config)
    return config


@pytest.fixture
def make_row():
    return make_training_row
