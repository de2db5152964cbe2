"""
Reconcile scraped fund records against a reference scheme registry.

Each candidate record lands in exactly one partition:

- confirmed:   its normalized name equals a reference name exactly;
               gains `schemeCode` / `schemeName`.
- unconfirmed: no exact match, but some reference scores > 0;
               gains `possibleSchemeCode` / `possibleSchemeName` (all ties).
- not_found:   nothing scores above 0, or the record has no usable name.

Exact matches always win over fuzzy ones. When two reference names normalize
to the same string, the later one is kept for exact lookup (the fuzzy scan
still sees both). Input records are never mutated; annotated copies are
returned.
"""

from __future__ import annotations

import logging
from typing import AbstractSet, Any, Iterable, Mapping, Sequence, TypeVar

from mfholdings.common.types import JSONObj
from mfholdings.reconcile.models import (
    MatchResult,
    MatchStatus,
    ReconciliationResult,
    ReferenceEntry,
)
from mfholdings.reconcile.names import DEFAULT_STOP_WORDS, normalize_scheme_name
from mfholdings.reconcile.similarity import best_matches

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _unique(items: Iterable[T]) -> list[T]:
    return list(dict.fromkeys(items))


class SchemeIndex:
    """Exact and fuzzy lookup over a reference registry, built once per run."""

    def __init__(
        self,
        entries: Iterable[ReferenceEntry],
        stop_words: AbstractSet[str] = DEFAULT_STOP_WORDS,
    ) -> None:
        self._stop_words = frozenset(stop_words)
        self._names: list[tuple[str, ReferenceEntry]] = []
        self._exact: dict[str, ReferenceEntry] = {}
        for entry in entries:
            norm = self.normalize(entry.scheme_name)
            if not norm:
                continue
            self._names.append((norm, entry))
            self._exact[norm] = entry

    def __len__(self) -> int:
        return len(self._names)

    def normalize(self, name: str | None) -> str | None:
        return normalize_scheme_name(name, self._stop_words)

    def match(self, name: str | None) -> MatchResult:
        """Classify one raw scheme name."""
        norm = self.normalize(name)
        if not norm:
            return MatchResult(MatchStatus.NOT_FOUND)

        exact = self._exact.get(norm)
        if exact is not None:
            return MatchResult(MatchStatus.CONFIRMED, entry=exact, score=1.0)

        best = best_matches(norm, self._names)
        if best.score > 0:
            return MatchResult(
                MatchStatus.UNCONFIRMED, candidates=best.matches, score=best.score
            )
        return MatchResult(MatchStatus.NOT_FOUND)


def candidate_name(record: Mapping[str, Any], name_key: str) -> str | None:
    """The scheme name of a scraped record, whether stored plain or as linked text."""
    value = record.get(name_key)
    if isinstance(value, str):
        return value
    if isinstance(value, Mapping) and isinstance(value.get("text"), str):
        return value["text"]
    return None


def annotate(record: Mapping[str, Any], match: MatchResult) -> JSONObj:
    """Copy of ``record`` carrying the match fields for its partition."""
    out: JSONObj = dict(record)
    if match.status is MatchStatus.CONFIRMED and match.entry is not None:
        out["schemeCode"] = match.entry.scheme_code
        out["schemeName"] = match.entry.scheme_name
    elif match.status is MatchStatus.UNCONFIRMED:
        out["possibleSchemeCode"] = _unique(e.scheme_code for e in match.candidates)
        out["possibleSchemeName"] = _unique(
            e.scheme_name for e in match.candidates if e.scheme_name is not None
        )
    return out


def reconcile(
    candidates: Sequence[Mapping[str, Any]],
    references: Iterable[ReferenceEntry] | SchemeIndex,
    *,
    name_key: str = "scheme_name",
    stop_words: AbstractSet[str] = DEFAULT_STOP_WORDS,
) -> ReconciliationResult:
    """
    Partition ``candidates`` into confirmed / unconfirmed / not found.

    Args:
        candidates: Scraped records, typically the aggregate scrape output.
        references: Registry entries, or a prebuilt `SchemeIndex`.
        name_key: Record key holding the scheme name.
        stop_words: Tokens dropped during name normalization (ignored when a
            prebuilt index is passed).

    Returns:
        A `ReconciliationResult`; `all_matched` keeps input order.
    """
    index = (
        references
        if isinstance(references, SchemeIndex)
        else SchemeIndex(references, stop_words)
    )
    result = ReconciliationResult()

    for record in candidates:
        match = index.match(candidate_name(record, name_key))
        annotated = annotate(record, match)
        if match.status is MatchStatus.CONFIRMED:
            result.confirmed.append(annotated)
        elif match.status is MatchStatus.UNCONFIRMED:
            result.unconfirmed.append(annotated)
        else:
            result.not_found.append(annotated)
        if match.matched:
            result.all_matched.append(annotated)

    counts = result.counts()
    logger.info(
        "Total schemes processed: %d (confirmed %d, unconfirmed %d, not found %d)",
        counts["total"],
        counts["confirmed"],
        counts["unconfirmed"],
        counts["not_found"],
    )
    return result


__all__ = ["SchemeIndex", "candidate_name", "annotate", "reconcile"]
