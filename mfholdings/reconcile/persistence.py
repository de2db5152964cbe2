"""
Reconciliation inputs and outputs on disk.

Inputs:
    reference registry   [{"schemeCode": 100027, "schemeName": "..."}, ...]
    candidates           the scrape aggregate (`all_mutual_funds.json`)

Outputs (under `output_dir`):
    confirmed_data.json
    unconfirmed_data.json
    not_found.json
    all_data.json        # confirmed + unconfirmed, input order
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import cast

from mfholdings.common.file_io import read_json_list, write_json
from mfholdings.common.types import JSONLike, JSONObj
from mfholdings.reconcile.models import ReconciliationResult, ReferenceEntry

logger = logging.getLogger(__name__)

OUTPUT_FILES: dict[str, str] = {
    "confirmed": "confirmed_data.json",
    "unconfirmed": "unconfirmed_data.json",
    "not_found": "not_found.json",
    "all_matched": "all_data.json",
}


def _object_rows(path: Path, what: str) -> list[JSONObj]:
    rows = read_json_list(path, what)
    objects = [cast(JSONObj, r) for r in rows if isinstance(r, dict)]
    skipped = len(rows) - len(objects)
    if skipped:
        logger.warning(
            "%s %s: skipped %d of %d rows (not JSON objects)",
            what,
            path,
            skipped,
            len(rows),
        )
    return objects


def load_reference_registry(path: Path) -> list[ReferenceEntry]:
    """Read registry rows; non-object rows are skipped with a warning."""
    return [
        ReferenceEntry.from_mapping(r)
        for r in _object_rows(path, "Reference registry")
    ]


def load_candidates(path: Path) -> list[JSONObj]:
    """Read candidate records; non-object rows are skipped with a warning."""
    return _object_rows(path, "Candidates")


def save_reconciliation(
    result: ReconciliationResult, output_dir: Path
) -> dict[str, Path]:
    """Write the four partition files; returns partition name -> path."""
    partitions: dict[str, list[JSONObj]] = {
        "confirmed": result.confirmed,
        "unconfirmed": result.unconfirmed,
        "not_found": result.not_found,
        "all_matched": result.all_matched,
    }
    return {
        key: write_json(output_dir / OUTPUT_FILES[key], cast(JSONLike, rows))
        for key, rows in partitions.items()
    }


__all__ = [
    "OUTPUT_FILES",
    "load_reference_registry",
    "load_candidates",
    "save_reconciliation",
]
