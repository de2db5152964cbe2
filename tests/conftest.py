from __future__ import annotations

from typing import Callable, Mapping, Union

import pytest

from mfholdings.common.errors import FetchError

Page = Union[str, Exception]


class FakeFetcher:
    """In-memory `PageFetcher`: URL -> HTML, or an exception to raise.

    Unknown URLs raise `FetchError` (as a 404 would).
    """

    def __init__(self, pages: Mapping[str, Page]) -> None:
        self.pages = dict(pages)
        self.calls: list[str] = []

    def fetch(self, url: str) -> str:
        self.calls.append(url)
        page = self.pages.get(url)
        if page is None:
            raise FetchError(url, "404 Client Error: Not Found", status=404)
        if isinstance(page, Exception):
            raise page
        return page


@pytest.fixture
def make_fetcher() -> Callable[[Mapping[str, Page]], FakeFetcher]:
    """Factory for in-memory fetchers: ``make_fetcher({url: html_or_exc})``."""
    return FakeFetcher
