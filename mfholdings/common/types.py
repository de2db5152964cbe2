"""
JSON type aliases shared by the scrape and reconcile layers.

Scraped records, holdings rows, registry entries and every output file are
plain JSON, so the persistence helpers are typed against these aliases
rather than against the richer record models.

    JSONObj    {"scheme_name": "HDFC Top 100 Fund", "portfolio_holdings": null}
    JSONList   [{"schemeCode": 119018, "schemeName": "..."}]
"""

from __future__ import annotations

from typing import TypeAlias

JSONScalar: TypeAlias = str | int | float | bool | None
JSONLike: TypeAlias = JSONScalar | list["JSONLike"] | dict[str, "JSONLike"]
JSONObj: TypeAlias = dict[str, JSONLike]
JSONList: TypeAlias = list[JSONLike]

__all__ = ["JSONScalar", "JSONLike", "JSONObj", "JSONList"]
