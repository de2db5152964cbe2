"""
Rewrite fund NAV detail links into portfolio-holdings links.

    https://www.moneycontrol.com/mutual-funds/nav/<slug>/<code>
 -> https://www.moneycontrol.com/mutual-funds/<slug>/portfolio-holdings/<code>

`transform_link` raises `LinkTransformError` for unparseable input;
`modify_link` is the lenient form used by the extractor and returns ``None``
instead, which callers treat as "do not follow".
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from urllib.parse import urlsplit, urlunsplit

from mfholdings.common.errors import LinkTransformError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LinkRule:
    """Path patterns used to derive a holdings link from a NAV link."""

    nav_prefix: str = "/mutual-funds/nav/"
    nav_segment: str = "/nav/"
    holdings_segment: str = "portfolio-holdings"


DEFAULT_LINK_RULE = LinkRule()


def transform_link(link: str, rule: LinkRule = DEFAULT_LINK_RULE) -> str:
    """Return the holdings link for ``link``, or ``link`` itself if it is not a NAV link.

    Query string and fragment are dropped from rewritten links.

    Raises:
        LinkTransformError: If ``link`` is not a non-empty string or cannot be
            parsed.
    """
    if not isinstance(link, str) or not link.strip():
        raise LinkTransformError(f"Cannot parse link {link!r}")
    try:
        parts = urlsplit(link)
    except ValueError as exc:
        raise LinkTransformError(f"Cannot parse link {link!r}: {exc}") from exc

    if not parts.path.startswith(rule.nav_prefix):
        return link

    path = parts.path.replace(rule.nav_segment, "/", 1)
    segments = [s for s in path.split("/") if s]
    if not segments:
        raise LinkTransformError(f"No fund code in link {link!r}")
    code = segments.pop()
    segments.extend([rule.holdings_segment, code])
    return urlunsplit((parts.scheme, parts.netloc, "/" + "/".join(segments), "", ""))


def modify_link(link: str | None, rule: LinkRule = DEFAULT_LINK_RULE) -> str | None:
    """Lenient `transform_link`: ``None`` on failure (logged)."""
    try:
        return transform_link(link, rule)  # type: ignore[arg-type]
    except LinkTransformError as exc:
        logger.warning("Error modifying link: %s", exc)
        return None


__all__ = ["LinkRule", "DEFAULT_LINK_RULE", "transform_link", "modify_link"]
