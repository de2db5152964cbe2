"""
Persistence helpers for scraped listing tables.

Layout (under `output_dir`):
    <safe_name>.json          # list of tables for one target
    all_mutual_funds.json     # every retained record across all targets
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Sequence, cast

from mfholdings.common.file_io import write_json
from mfholdings.common.types import JSONLike
from mfholdings.sources.moneycontrol.common.models import Record, Table

AGGREGATE_FILENAME = "all_mutual_funds.json"

_UNSAFE_RE = re.compile(r"[^\w\s]")
_SPACES_RE = re.compile(r"\s+")


def safe_name(name: str) -> str:
    """Filesystem-safe file stem for a target name ("Large Cap (G)" -> "Large_Cap_G")."""
    return _SPACES_RE.sub("_", _UNSAFE_RE.sub("", name))


def save_target_tables(name: str, tables: Sequence[Table], output_dir: Path) -> Path:
    """Persist the tables extracted for one target."""
    out = output_dir / f"{safe_name(name)}.json"
    return write_json(out, cast(JSONLike, list(tables)))


def save_aggregate(records: Sequence[Record], output_dir: Path) -> Path:
    """Persist the flat record list across all targets."""
    out = output_dir / AGGREGATE_FILENAME
    return write_json(out, cast(JSONLike, list(records)))


__all__ = [
    "AGGREGATE_FILENAME",
    "safe_name",
    "save_target_tables",
    "save_aggregate",
]
