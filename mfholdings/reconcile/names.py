"""
Scheme name normalization.

    normalize_scheme_name("HDFC Direct Plan - Growth") == "hdfc growth"

Lowercase, hyphens become spaces, punctuation is dropped, and plan/option
noise words are removed so that names from different sources compare equal.
"""

from __future__ import annotations

import re
from typing import AbstractSet

DEFAULT_STOP_WORDS: frozenset[str] = frozenset({"option", "plan", "regular", "direct"})

_PUNCT_RE = re.compile(r"[^A-Za-z0-9_\s]")


def normalize_scheme_name(
    name: str | None, stop_words: AbstractSet[str] = DEFAULT_STOP_WORDS
) -> str | None:
    """Canonical token string for ``name``; ``None`` passes through as ``None``."""
    if name is None:
        return None
    text = _PUNCT_RE.sub("", name.lower().replace("-", " "))
    return " ".join(w for w in text.split() if w not in stop_words)


__all__ = ["DEFAULT_STOP_WORDS", "normalize_scheme_name"]
