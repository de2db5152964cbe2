"""
Cell and header text normalization for scraped listing tables.

- `clean_text`:          strip `#`, newlines and leading dash markers; collapse whitespace.
- `replace_header_text`: map known header aliases (e.g. "1Y" -> "year_one").
- `to_snake_case`:       turn header text into a snake_case record key.
- `header_key`:          the composition used for every table header.
"""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import Mapping

DEFAULT_HEADER_ALIASES: Mapping[str, str] = MappingProxyType(
    {
        "value(mn)": "value_mn",
        "1w": "week_one",
        "1m": "month_one",
        "3m": "month_three",
        "6m": "month_six",
        "1y": "year_one",
        "2y": "year_two",
        "3y": "year_three",
        "5y": "year_five",
        "10y": "year_ten",
    }
)

_LEADING_DASHES_RE = re.compile(r"^(?:\s*[-–—])+\s*")
_WHITESPACE_RE = re.compile(r"\s+")
_NON_WORD_RE = re.compile(r"[^\w_]", re.ASCII)


def clean_text(raw: str) -> str:
    """Normalize a cell's visible text.

    Removes ``#`` and newlines, drops a leading run of dash-like markers
    (``-``, en dash, em dash) together with the surrounding whitespace, collapses
    whitespace runs to one space and trims the ends. Never fails; ``""`` maps to
    ``""``.
    """
    text = raw.replace("#", "").replace("\n", "")
    text = _LEADING_DASHES_RE.sub("", text, count=1)
    return _WHITESPACE_RE.sub(" ", text).strip()


def to_snake_case(text: str) -> str:
    """Convert header text to a lowercase snake_case key (``%`` -> ``percentage``)."""
    key = text.replace("%", "percentage")
    key = _WHITESPACE_RE.sub("_", key)
    key = _NON_WORD_RE.sub("", key)
    return key.lower()


def replace_header_text(
    text: str, aliases: Mapping[str, str] = DEFAULT_HEADER_ALIASES
) -> str:
    """Return the alias for ``text`` (case-insensitive, trimmed) or ``text`` unchanged."""
    return aliases.get(text.strip().lower(), text)


def header_key(text: str, aliases: Mapping[str, str] = DEFAULT_HEADER_ALIASES) -> str:
    return to_snake_case(replace_header_text(text, aliases))


__all__ = [
    "DEFAULT_HEADER_ALIASES",
    "clean_text",
    "to_snake_case",
    "replace_header_text",
    "header_key",
]
