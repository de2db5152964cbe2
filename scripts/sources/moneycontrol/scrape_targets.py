"""
scrape_targets.py

Scrape moneycontrol fund listing pages (and each fund's portfolio holdings).

Workflow:
1. Load config (packaged defaults, optional YAML, CLI overrides).
2. Load the targets file (`{"fetch_data_from": [{name, link}, ...]}`).
3. Run the scrape: one target at a time, failures logged and skipped.
4. Print a per-target summary table.

Usage:
    python scripts/sources/moneycontrol/scrape_targets.py --targets input.json
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any, Optional

from rich.console import Console
from rich.table import Table

from mfholdings.bootstrap import scrape_from_config
from mfholdings.common.logging_utils import configure_logging
from mfholdings.config.config import ensure_config, load_config
from mfholdings.sources.moneycontrol.batch.run import ScrapeResult
from mfholdings.sources.moneycontrol.targets import load_targets

console = Console()


def display_summary(result: ScrapeResult) -> None:
    """Render per-target outcomes with rich."""
    console.rule(f"[bold cyan]Scrape run {result.run_id}")

    table = Table(title="Targets")
    table.add_column("Target", style="cyan")
    table.add_column("Status", justify="center")
    table.add_column("Tables", justify="right")
    table.add_column("Records", justify="right")
    table.add_column("Error", style="red")

    for r in result.results:
        tables = r.tables or []
        status = "[green]ok[/green]" if r.status == "ok" else "[red]err[/red]"
        table.add_row(
            r.target["name"],
            status,
            str(len(tables)),
            str(sum(len(t) for t in tables)),
            r.error or "",
        )
    console.print(table)

    stats = result.stats
    console.print(
        f"{stats.ok} ok, {stats.err} failed, {len(result.records)} records "
        f"-> {result.aggregate_path}"
    )
    console.rule()


def main(
    *,
    targets_path: Optional[Path],
    config_path: Optional[Path],
    output_dir: Optional[Path],
    row_policy: Optional[str],
    rate_seconds: Optional[float],
    run_id: Optional[str],
) -> None:
    overrides: dict[str, Any] = {}
    if row_policy:
        overrides["sources.moneycontrol.extract.row_policy"] = row_policy
    if rate_seconds is not None:
        overrides["sources.moneycontrol.extract.rate_seconds"] = rate_seconds

    cfg = load_config(config_path, overrides=overrides)
    ensure_config(cfg)

    targets = load_targets(targets_path) if targets_path else None
    result = scrape_from_config(cfg, targets, output_dir=output_dir, run_id=run_id)
    display_summary(result)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(
        description="Scrape moneycontrol fund tables and portfolio holdings."
    )
    parser.add_argument(
        "--targets", type=Path, default=None, help="Targets JSON file."
    )
    parser.add_argument("--config", type=Path, default=None, help="YAML config file.")
    parser.add_argument(
        "--output-dir", type=Path, default=None, help="Directory for JSON outputs."
    )
    parser.add_argument(
        "--row-policy",
        choices=["retain_all", "require_holdings"],
        default=None,
        help="Keep every row, or only rows whose holdings lookup succeeded.",
    )
    parser.add_argument(
        "--rate",
        type=float,
        default=None,
        help="Seconds to wait after each target (default: from config).",
    )
    parser.add_argument("--run-id", default=None, help="Run log identifier.")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args()

    configure_logging(bool(args.verbose))
    main(
        targets_path=args.targets,
        config_path=args.config,
        output_dir=args.output_dir,
        row_policy=args.row_policy,
        rate_seconds=args.rate,
        run_id=args.run_id,
    )
