"""
Reconciliation models.

`ReferenceEntry` is one row of the reference scheme registry
(`{"schemeCode": ..., "schemeName": ...}` on disk). `MatchResult` tags a single
candidate; `ReconciliationResult` holds the three partitions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

from mfholdings.common.types import JSONObj


@dataclass(frozen=True)
class ReferenceEntry:
    scheme_code: str
    scheme_name: str | None

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> ReferenceEntry:
        """Build from a registry row; codes are coerced to strings."""
        code = raw.get("schemeCode")
        name = raw.get("schemeName")
        return cls(
            scheme_code="" if code is None else str(code),
            scheme_name=name if isinstance(name, str) else None,
        )


class MatchStatus(str, Enum):
    CONFIRMED = "confirmed"
    UNCONFIRMED = "unconfirmed"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class BestMatch:
    """Highest similarity seen and every entry that reached it (empty if 0)."""

    score: float
    matches: tuple[ReferenceEntry, ...] = ()


@dataclass(frozen=True)
class MatchResult:
    status: MatchStatus
    entry: ReferenceEntry | None = None
    candidates: tuple[ReferenceEntry, ...] = ()
    score: float = 0.0

    @property
    def matched(self) -> bool:
        return self.status is not MatchStatus.NOT_FOUND


@dataclass
class ReconciliationResult:
    confirmed: list[JSONObj] = field(default_factory=list)
    unconfirmed: list[JSONObj] = field(default_factory=list)
    not_found: list[JSONObj] = field(default_factory=list)
    # confirmed and unconfirmed records, interleaved in input order
    all_matched: list[JSONObj] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.confirmed) + len(self.unconfirmed) + len(self.not_found)

    def counts(self) -> dict[str, int]:
        return {
            "total": self.total,
            "confirmed": len(self.confirmed),
            "unconfirmed": len(self.unconfirmed),
            "not_found": len(self.not_found),
        }


__all__ = [
    "ReferenceEntry",
    "MatchStatus",
    "BestMatch",
    "MatchResult",
    "ReconciliationResult",
]
