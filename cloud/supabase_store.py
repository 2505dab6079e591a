"""
Supabase record store for runlens

Reads the ``training_logs`` table and the ``weekly_training_stats`` view.
All analytics happen locally; Supabase is only storage.
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional

from core.config import Config, StoreConfig
from core.errors import FetchError, StoreConfigError

from .base import RecordStore

logger = logging.getLogger("runlens.cloud.supabase")


class SupabaseStore(RecordStore):
    """
    Fetch training-run snapshots from Supabase.

    PostgREST caps a single response (1000 rows by default), so every listing
    is read in pages of ``StoreConfig.page_size`` until a short page comes back.
    """

    name = "supabase"

    def __init__(self, config: Optional[StoreConfig] = None, client: Any = None):
        self.config = config or StoreConfig()
        self.client = client

        if self.client is None and self.config.configured:
            self._init_client()
        elif self.client is None:
            logger.warning("SUPABASE_URL and SUPABASE_ANON_KEY not set; store is unconfigured")

    def _init_client(self):
        """Initialize Supabase client"""
        from supabase import create_client

        try:
            self.client = create_client(self.config.url, self.config.anon_key)
        except Exception as e:
            raise StoreConfigError(f"Failed to initialize Supabase client: {e}", source=self.name) from e
        logger.info("Supabase client initialized")

    @property
    def initialized(self) -> bool:
        return self.client is not None

    @classmethod
    def from_config(cls, config: Config) -> "SupabaseStore":
        return cls(config.store)

    @classmethod
    def from_config_file(cls, path: Optional[Path] = None) -> "SupabaseStore":
        """Load store settings from a JSON file"""
        if path is None:
            path = Path("~/.runlens/supabase.json").expanduser()

        if not path.exists():
            logger.warning(f"Config file not found: {path}")
            return cls()

        with open(path) as f:
            data = json.load(f)
        return cls(StoreConfig(**data))

    # =========================================================================
    # Queries
    # =========================================================================

    def _select_all(self, relation: str, order_by: list[tuple[str, bool]]) -> list[dict[str, Any]]:
        if not self.initialized:
            raise StoreConfigError("Supabase store is not configured", source=self.name)

        page_size = self.config.page_size
        rows: list[dict[str, Any]] = []
        offset = 0

        try:
            while True:
                query = self.client.table(relation).select("*")
                for column, desc in order_by:
                    query = query.order(column, desc=desc)
                result = query.range(offset, offset + page_size - 1).execute()

                batch = list(result.data or [])
                rows.extend(batch)
                if len(batch) < page_size:
                    break
                offset += page_size

        except Exception as e:
            logger.error(f"Failed to read {relation}: {e}")
            raise FetchError(f"Failed to read {relation}: {e}", source=self.name) from e

        logger.debug(f"Read {len(rows)} rows from {relation}")
        return rows

    def list_training_records(self) -> list[dict[str, Any]]:
        """All training runs, newest first (id breaks ties so paging is stable)"""
        return self._select_all(
            self.config.training_table,
            [("training_date", True), ("id", True)],
        )

    def list_weekly_stats(self) -> list[dict[str, Any]]:
        """Weekly buckets, oldest week first"""
        return self._select_all(self.config.weekly_view, [("week_start", False)])


# =============================================================================
# Supabase Schema (for reference)
# =============================================================================

SUPABASE_SCHEMA = """
-- Run this in Supabase SQL editor to create the table and weekly view

CREATE TABLE IF NOT EXISTS training_logs (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    training_date TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    win_rate REAL,
    sharpe_ratio REAL,
    avg_profit_per_trade REAL,
    avg_rr_ratio REAL,
    max_consecutive_wins INTEGER,
    max_consecutive_losses INTEGER,
    improvement_rate REAL,
    best_pattern_name TEXT,
    best_pattern_profit REAL,
    worst_pattern_name TEXT,
    worst_pattern_loss REAL,
    assistant_id TEXT,
    model_version TEXT,
    strategy_version TEXT,
    training_level TEXT,
    source TEXT,
    status TEXT,
    notes TEXT,
    is_best_run BOOLEAN DEFAULT FALSE,
    total_trades_analyzed INTEGER,
    profitable_patterns INTEGER,
    patterns_analyzed INTEGER,
    created_at TIMESTAMPTZ DEFAULT NOW()
);

CREATE INDEX IF NOT EXISTS idx_training_logs_date ON training_logs(training_date DESC);

-- One row per calendar week (Monday start)
CREATE OR REPLACE VIEW weekly_training_stats AS
SELECT
    date_trunc('week', training_date)::date AS week_start,
    AVG(win_rate) AS avg_win_rate,
    COUNT(*) AS total_runs
FROM training_logs
GROUP BY 1
ORDER BY 1 ASC;

ALTER TABLE training_logs ENABLE ROW LEVEL SECURITY;

-- Dashboard clients only read
CREATE POLICY "Allow read for anon" ON training_logs
    FOR SELECT USING (true);
"""
