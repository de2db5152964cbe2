"""
Scrape target lists.

Accepted file shapes (JSON):

    {"fetch_data_from": [{"name": "Large Cap Funds", "link": "https://..."}]}
    [{"name": "Large Cap Funds", "link": "https://..."}]
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from mfholdings.common.file_io import read_json
from mfholdings.sources.moneycontrol.common.models import Target

TARGETS_KEY = "fetch_data_from"


def parse_targets(data: Any) -> list[Target]:
    """Validate raw JSON data into an ordered list of targets.

    Raises:
        ValueError: If the payload is not a list (or a mapping with
            ``fetch_data_from``) of objects with non-empty ``name`` and ``link``.
    """
    if isinstance(data, dict):
        data = data.get(TARGETS_KEY)
    if not isinstance(data, list):
        raise ValueError(f"Expected a list of targets (or a '{TARGETS_KEY}' key)")

    targets: list[Target] = []
    for i, item in enumerate(data):
        if not isinstance(item, dict):
            raise ValueError(f"Target #{i} is not an object")
        name, link = item.get("name"), item.get("link")
        if not isinstance(name, str) or not name.strip():
            raise ValueError(f"Target #{i} has no name")
        if not isinstance(link, str) or not link.strip():
            raise ValueError(f"Target #{i} ({name}) has no link")
        targets.append({"name": name, "link": link.strip()})
    return targets


def load_targets(path: Path) -> list[Target]:
    """Read and validate a targets file."""
    return parse_targets(read_json(path))


__all__ = ["TARGETS_KEY", "parse_targets", "load_targets"]
