"""
Page fetching for the scraper (requests-based).

`PageFetcher` is the only thing the table extractor and the batch runner know
about the network: a URL goes in, decoded HTML comes out, and any failure is a
`FetchError`. `HttpPageFetcher` implements it on a single `requests.Session`.

Behavior
--------
- One GET per call, redirects followed, no retries and no caching. A failed
  listing page is recorded by the batch runner; a failed holdings page leaves
  that row's holdings empty.
- Session-wide headers (User-Agent, Accept, language) are fixed at
  construction and exposed read-only as `default_headers`.
- Pages served without a charset are decoded with the sniffed encoding rather
  than requests' ISO-8859-1 fallback, so en dashes and rupee signs in scheme
  names survive.

Not thread-safe: use one fetcher per thread.
"""

from __future__ import annotations

from types import MappingProxyType, TracebackType
from typing import Any, Mapping, Optional, Protocol

import requests
from requests import HTTPError, RequestException, Response, Session

from mfholdings.common.errors import FetchError

DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; mfholdings/0.1)"

_BASE_HEADERS: Mapping[str, str] = MappingProxyType(
    {
        "Accept": "text/html,application/xhtml+xml;q=0.9,*/*;q=0.8",
        "Accept-Encoding": "gzip, deflate",
        "Connection": "keep-alive",
    }
)


class PageFetcher(Protocol):
    """Turns a URL into HTML; raises `FetchError` when the page cannot be had."""

    def fetch(self, url: str) -> str: ...


def _str_headers(headers: Mapping[str, Any]) -> dict[str, str]:
    return {str(k): str(v) for k, v in headers.items()}


def _decode(resp: Response) -> str:
    content_type = resp.headers.get("Content-Type", "")
    if "charset" not in content_type.lower():
        resp.encoding = resp.apparent_encoding
    return resp.text


class HttpPageFetcher:
    """`PageFetcher` over a shared `requests.Session`.

    Args:
        user_agent: Sent as ``User-Agent`` unless ``default_headers`` sets one.
        default_timeout: Seconds, used when `fetch` is not given a timeout.
        default_headers: Extra session headers, applied over the built-in
            Accept headers.
    """

    default_headers: Mapping[str, str]

    def __init__(
        self,
        *,
        user_agent: str = DEFAULT_USER_AGENT,
        default_timeout: float = 30.0,
        default_headers: Optional[Mapping[str, str]] = None,
    ) -> None:
        self._session: Session = requests.Session()
        self._session.headers.update({"User-Agent": user_agent, **_BASE_HEADERS})
        if default_headers:
            self._session.headers.update(_str_headers(default_headers))

        self._default_timeout = float(default_timeout)
        self.default_headers = MappingProxyType(_str_headers(self._session.headers))

    def fetch(
        self,
        url: str,
        *,
        headers: Optional[Mapping[str, str]] = None,
        timeout: float | None = None,
    ) -> str:
        """GET ``url`` and return its decoded body.

        ``headers`` are merged over the session headers for this call only.

        Raises:
            ValueError: If ``url`` is not a non-empty string.
            FetchError: On DNS, connection and timeout errors, and on 4xx/5xx
                statuses (``status`` set).
        """
        if not isinstance(url, str) or not url:
            raise ValueError("HttpPageFetcher.fetch: url must be a non-empty string.")

        try:
            resp: Response = self._session.request(
                method="GET",
                url=url,
                headers=dict(headers or {}),
                timeout=float(timeout or self._default_timeout),
                allow_redirects=True,
            )
            resp.raise_for_status()
        except HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            raise FetchError(url, str(exc), status=status) from exc
        except RequestException as exc:
            raise FetchError(url, str(exc)) from exc

        return _decode(resp)

    def describe(self) -> str:
        return f"requests page fetcher (timeout={self._default_timeout}s)"

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> HttpPageFetcher:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


__all__ = ["PageFetcher", "HttpPageFetcher", "DEFAULT_USER_AGENT"]
