"""
HTML table extractor for moneycontrol fund listing pages.

Every ``<table>`` on a listing page becomes a list of records keyed by the
table's header row. Cells that carry a link are kept as ``{"text", "link"}``
(except the scheme-name column, which keeps the text only), rows pointing at
ad servers are dropped whole, and each link is followed once to attach the
fund's portfolio holdings table under ``portfolio_holdings``.

Holdings pages are leaf data: their table is parsed without following links
and without ad filtering.

Helpers (`load_document`, `derive_headers`, `column_key`,
`parse_holdings_table`) are factored out for granular testing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Sequence, cast

from bs4 import BeautifulSoup, Tag

from mfholdings.common.errors import FetchError, ParseError
from mfholdings.common.http_adapter import PageFetcher
from mfholdings.sources.moneycontrol.common.models import (
    HoldingRow,
    LinkedText,
    Record,
    Table,
)
from mfholdings.sources.moneycontrol.tables.links import (
    DEFAULT_LINK_RULE,
    LinkRule,
    modify_link,
)
from mfholdings.sources.moneycontrol.tables.text import (
    DEFAULT_HEADER_ALIASES,
    clean_text,
    header_key,
)

logger = logging.getLogger(__name__)


class RowPolicy(str, Enum):
    """Which non-ad rows survive extraction.

    RETAIN_ALL keeps every row. REQUIRE_HOLDINGS drops rows whose holdings
    lookup was attempted and came back empty-handed (``portfolio_holdings`` is
    ``None``); rows without any link are kept.
    """

    RETAIN_ALL = "retain_all"
    REQUIRE_HOLDINGS = "require_holdings"


@dataclass(frozen=True)
class ExtractorSettings:
    ad_marker: str = "pubads"
    scheme_name_key: str = "scheme_name"
    holdings_key: str = "portfolio_holdings"
    holdings_table_id: str = "equityCompleteHoldingTable"
    row_policy: RowPolicy = RowPolicy.RETAIN_ALL
    header_aliases: Mapping[str, str] = field(
        default_factory=lambda: DEFAULT_HEADER_ALIASES
    )
    link_rule: LinkRule = DEFAULT_LINK_RULE

    @property
    def emit_empty_tables(self) -> bool:
        """Empty tables are kept only when every non-ad row is retained."""
        return self.row_policy is RowPolicy.RETAIN_ALL


# ----------------------------------------------------------------------
# Helpers
# ----------------------------------------------------------------------


def load_document(html: str | bytes) -> BeautifulSoup:
    """Parse raw markup with the stdlib-backed ``html.parser`` tree builder."""
    if not isinstance(html, (str, bytes)):
        raise ParseError(f"Expected HTML markup, got {type(html).__name__}")
    return BeautifulSoup(html, "html.parser")


def derive_headers(
    table: Tag, aliases: Mapping[str, str] = DEFAULT_HEADER_ALIASES
) -> list[str]:
    """Header keys from the ``<th>`` cells of the table's first row."""
    first_row = table.find("tr")
    if not isinstance(first_row, Tag):
        return []
    return [
        header_key(th.get_text().strip(), aliases) for th in first_row.find_all("th")
    ]


def column_key(headers: Sequence[str], index: int) -> str:
    """Header key at ``index``, or ``column<index+1>`` when there is none."""
    if index < len(headers) and headers[index]:
        return headers[index]
    return f"column{index + 1}"


def _data_rows(table: Tag) -> list[list[Tag]]:
    """``<td>`` cells of every row after the first, skipping rows without any."""
    rows: list[list[Tag]] = []
    for row in table.find_all("tr")[1:]:
        cells = cast(list[Tag], row.find_all("td"))
        if cells:
            rows.append(cells)
    return rows


def _first_href(anchors: Sequence[Tag]) -> str | None:
    href = anchors[0].get("href")
    if isinstance(href, list):  # multi-valued attribute
        href = " ".join(href)
    return href


def parse_holdings_table(
    html: str | bytes,
    *,
    table_id: str = "equityCompleteHoldingTable",
    aliases: Mapping[str, str] = DEFAULT_HEADER_ALIASES,
) -> list[HoldingRow] | None:
    """
    Extract the holdings table identified by ``table_id`` as flat rows.

    Returns ``None`` (and logs) when the page has no element with that id.
    """
    soup = load_document(html)
    table = soup.find(id=table_id)
    if not isinstance(table, Tag):
        logger.warning('Table with id "%s" not found.', table_id)
        return None

    headers = derive_headers(table, aliases)
    rows: list[HoldingRow] = []
    for cells in _data_rows(table):
        rows.append(
            {column_key(headers, i): clean_text(c.get_text()) for i, c in enumerate(cells)}
        )
    return rows


# ----------------------------------------------------------------------
# Extractor
# ----------------------------------------------------------------------


class TableExtractor:
    """Extract listing tables, following fund links to their holdings pages.

    Holdings pages are fetched one row at a time, inline, through ``fetcher``.
    A failed holdings fetch only affects its own row.
    """

    def __init__(
        self, fetcher: PageFetcher, settings: ExtractorSettings | None = None
    ) -> None:
        self._fetcher = fetcher
        self.settings = settings or ExtractorSettings()

    def extract_tables(self, html: str | bytes) -> list[Table]:
        """Extract every ``<table>`` of ``html`` in document order."""
        soup = load_document(html)
        tables: list[Table] = []
        for table_el in soup.find_all("table"):
            table = self._extract_table(cast(Tag, table_el))
            if table or self.settings.emit_empty_tables:
                tables.append(table)
        return tables

    def extract_nested_table(self, html: str | bytes) -> list[HoldingRow] | None:
        return parse_holdings_table(
            html,
            table_id=self.settings.holdings_table_id,
            aliases=self.settings.header_aliases,
        )

    def fetch_holdings(self, url: str) -> list[HoldingRow] | None:
        """Fetch ``url`` and extract its holdings table; ``None`` on any failure."""
        try:
            html = self._fetcher.fetch(url)
            return self.extract_nested_table(html)
        except (FetchError, ParseError, ValueError) as exc:
            logger.warning("Error fetching nested table data from %s: %s", url, exc)
            return None

    # ---------- rows ----------

    def _extract_table(self, table_el: Tag) -> Table:
        headers = derive_headers(table_el, self.settings.header_aliases)
        records: Table = []
        for cells in _data_rows(table_el):
            if self._is_ad_row(cells):
                logger.debug("Ad detected, skipping row.")
                continue
            record = self._extract_row(cells, headers)
            if self._retain(record):
                records.append(record)
        return records

    def _is_ad_row(self, cells: Sequence[Tag]) -> bool:
        for cell in cells:
            anchors = cast(list[Tag], cell.find_all("a"))
            if not anchors:
                continue
            href = _first_href(anchors)
            if href and self.settings.ad_marker in href:
                return True
        return False

    def _extract_row(self, cells: Sequence[Tag], headers: Sequence[str]) -> Record:
        s = self.settings
        record: Record = {}
        for index, cell in enumerate(cells):
            key = column_key(headers, index)
            anchors = cast(list[Tag], cell.find_all("a"))
            if not anchors:
                record[key] = clean_text(cell.get_text())
                continue

            href = _first_href(anchors)
            text = clean_text("".join(a.get_text() for a in anchors).strip())
            record[s.holdings_key] = self._follow(href, text)

            if key == s.scheme_name_key:
                record[key] = text
            else:
                linked: LinkedText = {"text": text, "link": href}
                record[key] = linked
        return record

    def _follow(self, href: str | None, label: str) -> list[HoldingRow] | None:
        target = modify_link(href, self.settings.link_rule)
        if target is None:
            return None
        logger.info("Fetching data for %s from %s", label, target)
        return self.fetch_holdings(target)

    def _retain(self, record: Record) -> bool:
        if self.settings.row_policy is RowPolicy.RETAIN_ALL:
            return True
        key = self.settings.holdings_key
        return key not in record or record[key] is not None


__all__ = [
    "RowPolicy",
    "ExtractorSettings",
    "TableExtractor",
    "load_document",
    "derive_headers",
    "column_key",
    "parse_holdings_table",
]
