"""
JSON files for scrape and reconcile outputs.

Writes go to a sibling temp file first and are moved into place with
`Path.replace`, so an interrupted run leaves either the previous file or the
new one, never a truncated aggregate. Output is UTF-8, indented by two spaces
and keeps non-ASCII scheme names readable (`ensure_ascii=False`).

I/O and decode errors propagate to the caller.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import cast

from mfholdings.common.types import JSONLike, JSONList

__all__ = ["write_json", "read_json", "read_json_list"]


def write_json(path: Path, data: JSONLike) -> Path:
    """Atomically write ``data`` to ``path`` (parents created); returns ``path``."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(f".{path.name}.tmp")
    try:
        with tmp.open("w", encoding="utf-8", newline="\n") as fh:
            json.dump(data, fh, ensure_ascii=False, indent=2)
            fh.write("\n")
        tmp.replace(path)
    finally:
        tmp.unlink(missing_ok=True)
    return path


def read_json(path: Path) -> JSONLike:
    return cast(JSONLike, json.loads(path.read_text(encoding="utf-8")))


def read_json_list(path: Path, what: str = "JSON") -> JSONList:
    """Read a file whose top-level value must be a list.

    Raises:
        ValueError: If the document is not a JSON array.
    """
    data = read_json(path)
    if not isinstance(data, list):
        raise ValueError(f"{what} file must contain a JSON list: {path}")
    return data
