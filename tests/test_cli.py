from __future__ import annotations

import json

from click.testing import CliRunner

from cli.main import cli


def _write_fixture(tmp_path, training_rows, weekly_rows):
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps({"training_logs": training_rows, "weekly_training_stats": weekly_rows}))
    return path


def test_report_json_from_fixture(quiet_config, tmp_path, training_rows, weekly_rows):
    fixture = _write_fixture(tmp_path, training_rows, weekly_rows)

    result = CliRunner().invoke(cli, ["report", "--fixture", str(fixture), "--json", "--limit", "2"])

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert "generatedAt" in payload
    assert [r["run_id"] for r in payload["bestRuns"]] == ["run-3", "run-5"]
    assert payload["errorSummary"]["rate"] == 60.0
    assert payload["configurationSummary"]["current"]["assistant"] == "asst_alpha"


def test_report_tables_from_fixture(quiet_config, tmp_path, training_rows, weekly_rows):
    fixture = _write_fixture(tmp_path, training_rows, weekly_rows)

    result = CliRunner().invoke(cli, ["report", "--fixture", str(fixture)])

    assert result.exit_code == 0, result.output
    assert "Best Runs" in result.output
    assert "Weekly Progression" in result.output
    assert "asst_alpha" in result.output


def test_report_exits_nonzero_when_store_is_unconfigured(quiet_config):
    result = CliRunner().invoke(cli, ["report", "--json"])

    assert result.exit_code == 1
    assert "Fetch failed" in result.output


def test_schema_prints_sql():
    result = CliRunner().invoke(cli, ["schema"])

    assert result.exit_code == 0
    assert "CREATE TABLE IF NOT EXISTS training_logs" in result.output
    assert "weekly_training_stats" in result.output


def test_report_rejects_negative_limit(quiet_config, tmp_path, training_rows, weekly_rows):
    fixture = _write_fixture(tmp_path, training_rows, weekly_rows)

    result = CliRunner().invoke(cli, ["report", "--fixture", str(fixture), "--limit", "-3"])

    assert result.exit_code == 2
    assert "--limit" in result.output
