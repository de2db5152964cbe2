"""
Config-driven wiring for mfholdings.

This module builds the page fetcher and table extractor from the package's
config, runs a scrape with them, and reconciles the scrape aggregate against
the reference registry. It performs **no implicit side effects on import**;
callers invoke these helpers from an explicit entry point (CLI, script, or
test) once the config is loaded.

Configuration
-------------
The fetcher is configured under:

    sources.moneycontrol.http

Example (`default.yaml`):

    sources:
      moneycontrol:
        http:
          user_agent: "Mozilla/5.0 (compatible; mfholdings/0.1)"
          default_timeout: 30.0
          default_headers:
            Accept-Language: "en-US,en;q=0.9"

Usage
-----
    from mfholdings.config.config import load_config
    from mfholdings.bootstrap import reconcile_from_config, scrape_from_config

    cfg = load_config()
    result = scrape_from_config(cfg)
    matches, paths = reconcile_from_config(cfg)
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Optional, Sequence

from omegaconf import DictConfig

from mfholdings.common.http_adapter import HttpPageFetcher, PageFetcher
from mfholdings.config.config import (
    extract_view,
    http_view,
    load_extractor_settings,
    load_stop_words,
    moneycontrol_view,
    reconcile_view,
)
from mfholdings.reconcile.engine import reconcile
from mfholdings.reconcile.models import ReconciliationResult
from mfholdings.reconcile.persistence import (
    load_candidates,
    load_reference_registry,
    save_reconciliation,
)
from mfholdings.sources.moneycontrol.batch.run import ScrapeResult, run_scrape
from mfholdings.sources.moneycontrol.common.models import Target
from mfholdings.sources.moneycontrol.tables.parser import TableExtractor
from mfholdings.sources.moneycontrol.targets import load_targets


def _coerce_headers(m: Optional[Mapping[str, Any]]) -> Optional[Mapping[str, str]]:
    if not m:
        return None
    return {str(k): str(v) for k, v in m.items()}


def build_fetcher(cfg: DictConfig) -> HttpPageFetcher:
    """Build an `HttpPageFetcher` from `sources.moneycontrol.http`."""
    http = http_view(cfg)
    return HttpPageFetcher(
        user_agent=str(http.user_agent),
        default_timeout=float(http.default_timeout),
        default_headers=_coerce_headers(http.get("default_headers")),
    )


def build_extractor(cfg: DictConfig, fetcher: PageFetcher) -> TableExtractor:
    """Build a `TableExtractor` from `sources.moneycontrol.extract`."""
    return TableExtractor(fetcher, load_extractor_settings(cfg))


def scrape_from_config(
    cfg: DictConfig,
    targets: Optional[Sequence[Target]] = None,
    *,
    fetcher: Optional[PageFetcher] = None,
    output_dir: Optional[Path] = None,
    run_id: Optional[str] = None,
) -> ScrapeResult:
    """
    Run a scrape with config defaults.

    `targets` defaults to the `targets_file` entry, `output_dir` to `root`,
    and `fetcher` to a fresh `HttpPageFetcher` (closed afterwards).
    """
    mc = moneycontrol_view(cfg)
    if targets is None:
        targets = load_targets(Path(mc.targets_file))
    out = output_dir or Path(mc.root)
    rate_seconds = float(extract_view(cfg).rate_seconds)

    owned = fetcher is None
    page_fetcher: PageFetcher = fetcher or build_fetcher(cfg)
    try:
        return run_scrape(
            targets,
            fetcher=page_fetcher,
            extractor=build_extractor(cfg, page_fetcher),
            output_dir=out,
            runs_root=Path(mc.runs_dir) if output_dir is None else None,
            run_id=run_id,
            rate_seconds=rate_seconds,
        )
    finally:
        if owned and isinstance(page_fetcher, HttpPageFetcher):
            page_fetcher.close()


def reconcile_from_config(
    cfg: DictConfig,
    *,
    reference_path: Optional[Path] = None,
    candidates_path: Optional[Path] = None,
    output_dir: Optional[Path] = None,
) -> tuple[ReconciliationResult, dict[str, Path]]:
    """
    Reconcile the scrape aggregate against the reference registry and write
    the four partition files. Paths default to the `reconcile` config section.
    """
    rv = reconcile_view(cfg)
    references = load_reference_registry(reference_path or Path(rv.reference_file))
    candidates = load_candidates(candidates_path or Path(rv.candidates_file))
    result = reconcile(
        candidates,
        references,
        name_key=str(rv.name_key),
        stop_words=load_stop_words(cfg),
    )
    paths = save_reconciliation(result, output_dir or Path(rv.output_dir))
    return result, paths


__all__ = [
    "build_fetcher",
    "build_extractor",
    "scrape_from_config",
    "reconcile_from_config",
]
