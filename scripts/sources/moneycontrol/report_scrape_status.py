"""
report_scrape_status.py

Report on the latest moneycontrol scrape run.

Reads `progress.jsonl` of the most recently written run (nothing is written
back) and prints one row per target (status, tables, records) followed by
totals. With `--errors`, the
error payloads under `err/` are listed as well.

Usage:
    python scripts/sources/moneycontrol/report_scrape_status.py [--runs-dir outputs/runs] [--errors]
"""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Optional, Sequence

from rich.console import Console
from rich.table import Table

from mfholdings.config.config import load_config, moneycontrol_view
from mfholdings.sources.moneycontrol.batch.runlog import ProgressEntry, RunLog

console = Console()


def latest_by_target(entries: Sequence[ProgressEntry]) -> dict[str, ProgressEntry]:
    """Last progress line per target (a re-run target keeps its newest status)."""
    out: dict[str, ProgressEntry] = {}
    for entry in entries:
        out[entry.get("target", "?")] = entry
    return out


def display_run(log: RunLog, *, show_errors: bool) -> None:
    per_target = latest_by_target(log.entries())
    console.rule(f"[bold cyan]Scrape run {log.run_id}")

    table = Table(title=str(log.run_dir))
    table.add_column("Target", style="cyan")
    table.add_column("Status", justify="center")
    table.add_column("Tables", justify="right")
    table.add_column("Records", justify="right")

    ok = err = records = 0
    for name, entry in per_target.items():
        if entry.get("status") == "ok":
            ok += 1
            records += entry.get("records", 0)
            status = "[green]ok[/green]"
        else:
            err += 1
            status = "[red]err[/red]"
        table.add_row(
            name,
            status,
            str(entry.get("tables", "")),
            str(entry.get("records", "")),
        )
    console.print(table)
    console.print(f"{ok} ok, {err} failed, {records} records")

    if show_errors and err:
        console.print("\n[bold red]Errors:[/bold red]")
        for path in sorted(log.err_dir.glob("*.json")):
            payload = json.loads(path.read_text(encoding="utf-8"))
            name = payload.get("target", path.stem)
            console.print(f"- [red]{name}[/red]: {payload.get('error', '')}")

    console.rule()


def main(runs_dir: Optional[Path] = None, *, show_errors: bool = False) -> None:
    runs_root = runs_dir or Path(moneycontrol_view(load_config()).runs_dir)
    display_run(RunLog.latest(runs_root), show_errors=show_errors)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Report on the latest scrape run.")
    parser.add_argument("--runs-dir", type=Path, default=None)
    parser.add_argument(
        "--errors", action="store_true", help="List error payloads of failed targets."
    )
    args = parser.parse_args()
    main(args.runs_dir, show_errors=args.errors)
