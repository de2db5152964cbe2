"""
Moneycontrol source models (source-shaped and JSON-friendly).

Records are plain dicts so that extracted tables can be written to disk as-is.
Keys are snake_case header keys, or ``column<N>`` (1-based) where a table has
no header text at that position.

Cell shapes
-----------
- plain text:  ``"HDFC Top 100 Fund"``
- linked text: ``{"text": "Invest Now", "link": "https://..."}``

A record may also carry ``portfolio_holdings``: a list of flat holdings rows,
``None`` when a holdings lookup was attempted and failed, or no key at all
when the row had no link to follow.
"""

from __future__ import annotations

from typing import TypeAlias, TypedDict, Union


class Target(TypedDict):
    """One listing page to scrape."""

    name: str
    link: str


class LinkedText(TypedDict):
    text: str
    link: str | None


HoldingRow: TypeAlias = dict[str, str]
Cell: TypeAlias = Union[str, LinkedText]
RecordValue: TypeAlias = Union[Cell, list[HoldingRow], None]
Record: TypeAlias = dict[str, RecordValue]
Table: TypeAlias = list[Record]


__all__ = [
    "Target",
    "LinkedText",
    "HoldingRow",
    "Cell",
    "RecordValue",
    "Record",
    "Table",
]
