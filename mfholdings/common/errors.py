"""
Error taxonomy for mfholdings.

- `FetchError`:          network / DNS / timeout / non-2xx status for one URL.
- `ParseError`:          markup that cannot be loaded, or a required table is missing.
- `LinkTransformError`:  a detail link that cannot be parsed for rewriting.

Ambiguous reconciliation matches are not errors; they are reported as
"unconfirmed" results by `mfholdings.reconcile.engine`.
"""

from __future__ import annotations


class ScrapeError(Exception):
    """Base class for scraping failures that are isolated per target or per row."""


class FetchError(ScrapeError):
    """A page could not be retrieved."""

    def __init__(self, url: str, message: str, *, status: int | None = None) -> None:
        super().__init__(f"{url}: {message}")
        self.url = url
        self.status = status


class ParseError(ScrapeError):
    """Markup could not be turned into the expected structure."""


class LinkTransformError(ScrapeError, ValueError):
    """A link could not be parsed for rewriting."""


__all__ = ["ScrapeError", "FetchError", "ParseError", "LinkTransformError"]
