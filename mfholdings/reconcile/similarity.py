"""
Fund-house-gated Jaccard similarity between normalized scheme names.

The first token of a normalized name is treated as the fund house; names from
different fund houses never match, however much of the rest overlaps.
"""

from __future__ import annotations

from typing import Iterable

from mfholdings.reconcile.models import BestMatch, ReferenceEntry


def similarity(a: str, b: str) -> float:
    """Token-set Jaccard score in [0, 1]; 0 if the first tokens differ or a name is empty."""
    tokens_a, tokens_b = a.split(), b.split()
    if not tokens_a or not tokens_b or tokens_a[0] != tokens_b[0]:
        return 0.0
    set_a, set_b = set(tokens_a), set(tokens_b)
    return len(set_a & set_b) / len(set_a | set_b)


def best_matches(
    target: str, references: Iterable[tuple[str, ReferenceEntry]]
) -> BestMatch:
    """
    Scan ``(normalized_name, entry)`` pairs for the highest similarity to ``target``.

    Every entry tied at the maximum is kept, in scan order. A maximum of 0 yields
    no matches.
    """
    best = 0.0
    matches: list[ReferenceEntry] = []
    for name, entry in references:
        score = similarity(target, name)
        if score > best:
            best, matches = score, [entry]
        elif score == best and best > 0:
            matches.append(entry)
    return BestMatch(score=best, matches=tuple(matches))


__all__ = ["similarity", "best_matches"]
