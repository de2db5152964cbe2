from __future__ import annotations

import pytest

from mfholdings.common.errors import LinkTransformError
from mfholdings.sources.moneycontrol.tables.links import (
    LinkRule,
    modify_link,
    transform_link,
)

NAV = "https://www.moneycontrol.com/mutual-funds/nav/hdfc-top-100-fund-direct-plan/MHD1159"
HOLDINGS = (
    "https://www.moneycontrol.com/mutual-funds/hdfc-top-100-fund-direct-plan"
    "/portfolio-holdings/MHD1159"
)


def test_nav_link_is_rewritten_to_holdings_link() -> None:
    assert modify_link(NAV) == HOLDINGS


def test_code_is_kept_as_last_segment() -> None:
    assert (
        modify_link("https://h/mutual-funds/nav/ABC/fund-code")
        == "https://h/mutual-funds/ABC/portfolio-holdings/fund-code"
    )


def test_query_and_fragment_are_dropped() -> None:
    assert modify_link(NAV + "?utm_source=list#returns") == HOLDINGS


def test_trailing_slash_does_not_change_code() -> None:
    assert modify_link(NAV + "/") == HOLDINGS


def test_non_nav_link_is_returned_unchanged() -> None:
    link = "https://www.moneycontrol.com/mutual-funds/large-cap"
    assert modify_link(link) == link
    assert modify_link("/india/stockpricequote/icicibank/ICI02") == (
        "/india/stockpricequote/icicibank/ICI02"
    )


def test_malformed_link_returns_none() -> None:
    assert modify_link("http://[invalid-host/mutual-funds/nav/x/y") is None


def test_missing_link_returns_none() -> None:
    assert modify_link(None) is None


def test_empty_link_returns_none() -> None:
    assert modify_link("") is None
    assert modify_link("  \n") is None


def test_transform_link_raises_for_empty_link() -> None:
    with pytest.raises(LinkTransformError):
        transform_link("")


def test_transform_link_raises_for_malformed_link() -> None:
    with pytest.raises(LinkTransformError):
        transform_link("http://[invalid-host/mutual-funds/nav/x/y")


def test_custom_rule() -> None:
    rule = LinkRule(
        nav_prefix="/funds/nav/", nav_segment="/nav/", holdings_segment="holdings"
    )
    assert modify_link("https://h/funds/nav/slug/C1", rule) == "https://h/funds/slug/holdings/C1"
    # default prefix no longer matches
    assert modify_link(NAV, rule) == NAV
