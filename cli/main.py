#!/usr/bin/env python3
"""
runlens CLI - Command Line Interface

Usage:
    runlens report          Print the analytics dashboard once
    runlens watch           Poll the store and log each refresh
    runlens serve           Start the API server
    runlens schema          Print the Supabase table/view SQL
"""

import asyncio
import json
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

console = Console()


def get_components(fixture: Optional[Path] = None):
    """Lazy load components"""
    from core.config import get_config
    from core.logging_setup import setup_logging
    from cloud.memory_store import MemoryStore
    from cloud.supabase_store import SupabaseStore
    from daemon.refresher import SnapshotRefresher

    config = get_config()
    setup_logging(config)

    if fixture is not None:
        with open(fixture) as f:
            data = json.load(f)
        store = MemoryStore(data.get("training_logs", []), data.get("weekly_training_stats", []))
    else:
        store = SupabaseStore.from_config(config)

    refresher = SnapshotRefresher.from_config(store, config)
    return config, store, refresher


def _fmt(value, spec: str = ".1f", missing: str = "N/A") -> str:
    if value is None:
        return missing
    return format(value, spec)


def _print_dashboard(view) -> None:
    best = Table(title="Best Runs")
    best.add_column("Date", style="cyan")
    best.add_column("Win Rate", style="green")
    best.add_column("Sharpe")
    best.add_column("Pattern")
    best.add_column("Profit")
    for run in view.best_runs:
        pattern = run.pattern_name or "N/A"
        if run.is_placeholder:
            pattern = f"[dim]{pattern} (sample)[/dim]"
        best.add_row(
            (run.date or "N/A")[:10],
            f"{run.win_rate:.1f}%",
            _fmt(run.sharpe_ratio, ".2f"),
            pattern,
            _fmt(run.pattern_profit),
        )
    console.print(best)

    from analytics.failures import is_high_failure_rate

    rate_style = "red" if is_high_failure_rate(view.errors.rate) else "green"
    failing = Table(title=f"Failures: [{rate_style}]{view.errors.rate:.1f}%[/{rate_style}]")
    failing.add_column("Date", style="cyan")
    failing.add_column("Win Rate", style="red")
    failing.add_column("Status")
    failing.add_column("Notes")
    for record in view.errors.failing:
        failing.add_row(
            record.training_date.strftime("%d/%m") if record.training_date else "N/A",
            f"{_fmt(record.win_rate)}%",
            record.status or "failed",
            record.notes or "-",
        )
    console.print(failing)

    weekly = Table(title="Weekly Progression")
    weekly.add_column("Week", style="cyan")
    weekly.add_column("Avg Win Rate")
    weekly.add_column("Runs")
    for point in view.weekly.points:
        weekly.add_row(point.week, f"{point.avg_win_rate:.1f}%", str(point.total_runs))
    console.print(weekly)
    if view.weekly.ordering_violation:
        console.print(f"[yellow]Weekly rows out of order at {list(view.weekly.violations)}[/yellow]")

    current = view.configuration.current
    counts = view.configuration.distinct_counts
    synthesis = view.synthesis
    console.print(Panel(f"""
Assistant: {current.assistant}   ({counts.assistants} distinct)
Model:     {current.model}   ({counts.models} distinct)
Strategy:  {current.strategy}   ({counts.strategies} distinct)

Runs: {synthesis.total_runs}   Avg win rate: {synthesis.avg_win_rate:.1f}%   Avg Sharpe: {synthesis.avg_sharpe_ratio:.2f}
Exceptional runs: {synthesis.exceptional_runs}   Level: {synthesis.current_level}
Top patterns: {", ".join(f"{p.name} ({p.count}x)" for p in synthesis.top_patterns) or "-"}
""", title="Configuration"))


@click.group()
@click.version_option(version="0.1.0", prog_name="runlens")
def cli():
    """runlens - Training-run analytics"""
    pass


@cli.command()
@click.option("--limit", default=None, type=click.IntRange(min=0), help="Number of best runs to show")
@click.option("--fixture", type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help="Read rows from a JSON file instead of Supabase")
@click.option("--json", "as_json", is_flag=True, help="Print raw JSON")
def report(limit: Optional[int], fixture: Optional[Path], as_json: bool):
    """Fetch one snapshot and print every derived view"""
    from core.errors import FetchError

    _, _, refresher = get_components(fixture)

    try:
        if as_json:
            refresher.refresh()
        else:
            with console.status("[bold green]Fetching training runs...[/bold green]"):
                refresher.refresh()
    except FetchError as e:
        console.print(f"[red]Fetch failed:[/red] {e}")
        console.print("Check the store settings and run the command again.")
        sys.exit(1)

    view = refresher.dashboard(limit)
    if as_json:
        payload = view.to_dict()
        payload["generatedAt"] = datetime.now(timezone.utc).isoformat()
        click.echo(json.dumps(payload, indent=2, default=str))
        return
    _print_dashboard(view)


@cli.command()
@click.option("--interval", default=None, type=int, help="Polling interval in seconds")
def watch(interval: Optional[int]):
    """Poll the store and log a summary after every refresh"""
    from daemon.refresher import run_watch

    _, _, refresher = get_components()
    if interval is not None:
        refresher.interval_seconds = interval

    console.print(f"Polling every {refresher.interval_seconds}s... Press Ctrl+C to stop")
    asyncio.run(run_watch(refresher))


@cli.command()
@click.option("--host", default=None, help="Host to bind to")
@click.option("--port", default=None, type=int, help="Port to bind to")
def serve(host: Optional[str], port: Optional[int]):
    """Start the API server"""
    from core.config import get_config

    config = get_config()
    host = host or config.api.host
    port = port or config.api.port
    console.print(f"Starting runlens API server at http://{host}:{port}")

    from api import run_server
    run_server(host=host, port=port)


@cli.command()
def schema():
    """Print the SQL for the training_logs table and weekly view"""
    from cloud.supabase_store import SUPABASE_SCHEMA

    click.echo(SUPABASE_SCHEMA)


def main():
    """Main entry point"""
    cli()


if __name__ == "__main__":
    main()
