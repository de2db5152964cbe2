"""
Scrape orchestrator for moneycontrol listing pages.

Targets are processed strictly one at a time, in input order:
  1) fetch the listing page
  2) extract its tables (holdings fetched inline, row by row)
  3) persist `<safe_name>.json`
  4) log ok/err to the run log and move on

A failing target is recorded and skipped; it never aborts the run. The
aggregate `all_mutual_funds.json` holds every record of every successful
target, in order.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, Literal, Optional, Sequence, Tuple

from mfholdings.common.http_adapter import PageFetcher
from mfholdings.sources.moneycontrol.batch.runlog import RunLog
from mfholdings.sources.moneycontrol.common.models import Record, Table, Target
from mfholdings.sources.moneycontrol.persistence import (
    save_aggregate,
    save_target_tables,
)
from mfholdings.sources.moneycontrol.tables.parser import TableExtractor

logger = logging.getLogger(__name__)

Outcome = Literal["ok", "err"]


# ---------- Result typing ----------


@dataclass(frozen=True)
class BatchStats:
    ok: int
    err: int

    @property
    def total(self) -> int:
        return self.ok + self.err


@dataclass(frozen=True)
class TargetResult:
    target: Target
    status: Outcome
    tables: list[Table] | None = None
    error: str | None = None


@dataclass
class ScrapeResult:
    run_id: str
    results: list[TargetResult] = field(default_factory=list)
    aggregate_path: Path | None = None

    @property
    def records(self) -> list[Record]:
        """Every record of every successful target, in input order."""
        return flatten_records(r.tables or [] for r in self.results)

    @property
    def stats(self) -> BatchStats:
        ok = sum(1 for r in self.results if r.status == "ok")
        return BatchStats(ok=ok, err=len(self.results) - ok)


def flatten_records(per_target: Iterable[Sequence[Table]]) -> list[Record]:
    records: list[Record] = []
    for tables in per_target:
        for table in tables:
            records.extend(table)
    return records


# ---------- Single-target processing unit ----------


def scrape_target(
    target: Target, *, fetcher: PageFetcher, extractor: TableExtractor
) -> list[Table]:
    """Fetch one listing page and extract its tables. Errors propagate."""
    html = fetcher.fetch(target["link"])
    return extractor.extract_tables(html)


def process_one_target(
    *,
    target: Target,
    fetcher: PageFetcher,
    extractor: TableExtractor,
    output_dir: Path,
    save: Callable[[str, Sequence[Table], Path], Path] = save_target_tables,
) -> Tuple[Outcome, Optional[list[Table]], Optional[str]]:
    """
    Process a single target: fetch, extract, persist.

    Returns:
      (status, tables_or_None, error_msg_or_None) where status is "ok" or "err".
    """
    try:
        tables = scrape_target(target, fetcher=fetcher, extractor=extractor)
        out = save(target["name"], tables, output_dir)
        logger.info('Data for "%s" saved to %s', target["name"], out)
        return ("ok", tables, None)
    except Exception as exc:
        logger.error(
            'Error processing "%s" from %s: %s', target["name"], target["link"], exc
        )
        return ("err", None, str(exc))


# ---------- Orchestrator ----------


def run_scrape(
    targets: Sequence[Target],
    *,
    fetcher: PageFetcher,
    extractor: TableExtractor,
    output_dir: Path,
    runs_root: Optional[Path] = None,
    run_id: Optional[str] = None,
    rate_seconds: float = 0.0,
) -> ScrapeResult:
    """
    Scrape every target and write per-target and aggregate outputs.

    Args:
        targets: Ordered targets to process.
        fetcher: Page fetcher for listing pages (holdings pages go through the
            extractor's own fetcher).
        extractor: Configured table extractor.
        output_dir: Directory for `<safe_name>.json` and the aggregate file.
        runs_root: Run log root (defaults to `output_dir / "runs"`).
        run_id: Run identifier (defaults to a UTC timestamp).
        rate_seconds: Politeness delay after each successful target.

    Returns:
        A `ScrapeResult` with one `TargetResult` per target, in input order.
    """
    log = RunLog(runs_root or output_dir / "runs", run_id=run_id)
    result = ScrapeResult(run_id=log.run_id)

    for target in targets:
        logger.info('Processing "%s" from URL: %s', target["name"], target["link"])

        status, tables, error = process_one_target(
            target=target,
            fetcher=fetcher,
            extractor=extractor,
            output_dir=output_dir,
        )

        if status == "ok":
            tables = tables or []
            log.record_ok(
                target, tables=len(tables), records=sum(len(t) for t in tables)
            )
            result.results.append(TargetResult(target, "ok", tables=tables))
            if rate_seconds > 0:
                time.sleep(rate_seconds)
        else:
            error = error or "unknown error"
            log.record_err(target, error)
            result.results.append(TargetResult(target, "err", error=error))

    result.aggregate_path = save_aggregate(result.records, output_dir)
    stats = result.stats
    logger.info(
        "Scrape complete: %d ok, %d failed, %d records -> %s",
        stats.ok,
        stats.err,
        len(result.records),
        result.aggregate_path,
    )
    return result


__all__ = [
    "BatchStats",
    "TargetResult",
    "ScrapeResult",
    "flatten_records",
    "scrape_target",
    "process_one_target",
    "run_scrape",
]
