"""
reconcile_schemes.py

Match scraped fund records against the reference scheme registry.

Writes confirmed_data.json, unconfirmed_data.json, not_found.json and
all_data.json to the reconcile output directory and prints the counts.

Usage:
    python scripts/reconcile/reconcile_schemes.py \
        --reference all_mf_scheme.json \
        --candidates outputs/all_mutual_funds.json
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Mapping, Optional

from rich.console import Console
from rich.table import Table

from mfholdings.bootstrap import reconcile_from_config
from mfholdings.common.logging_utils import configure_logging
from mfholdings.config.config import load_config

console = Console()


def display_summary(counts: Mapping[str, int], paths: Mapping[str, Path]) -> None:
    console.rule("[bold cyan]Scheme reconciliation")

    table = Table(title="Matches")
    table.add_column("Partition", style="cyan", justify="right")
    table.add_column("Count", justify="right")
    table.add_column("File")
    for key in ("confirmed", "unconfirmed", "not_found"):
        table.add_row(key.upper(), str(counts.get(key, 0)), str(paths.get(key, "")))
    table.add_row("TOTAL", str(counts.get("total", 0)), str(paths.get("all_matched", "")))

    console.print(table)
    console.rule()


def main(
    *,
    config_path: Optional[Path],
    reference_path: Optional[Path],
    candidates_path: Optional[Path],
    output_dir: Optional[Path],
) -> None:
    cfg = load_config(config_path)
    result, paths = reconcile_from_config(
        cfg,
        reference_path=reference_path,
        candidates_path=candidates_path,
        output_dir=output_dir,
    )
    display_summary(result.counts(), paths)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(
        description="Reconcile scraped funds against a scheme code registry."
    )
    parser.add_argument("--config", type=Path, default=None, help="YAML config file.")
    parser.add_argument(
        "--reference", type=Path, default=None, help="Registry JSON (schemeCode/schemeName)."
    )
    parser.add_argument(
        "--candidates", type=Path, default=None, help="Scrape aggregate JSON."
    )
    parser.add_argument("--output-dir", type=Path, default=None)
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args()

    configure_logging(bool(args.verbose))
    main(
        config_path=args.config,
        reference_path=args.reference,
        candidates_path=args.candidates,
        output_dir=args.output_dir,
    )
