from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

from mfholdings.bootstrap import (
    build_extractor,
    build_fetcher,
    reconcile_from_config,
    scrape_from_config,
)
from mfholdings.config.config import load_config
from mfholdings.sources.moneycontrol.tables.parser import RowPolicy

LISTING = "https://www.moneycontrol.com/mutual-funds/best-funds/equity/flexi-cap"
NAV = "https://www.moneycontrol.com/mutual-funds/nav/parag-parikh-flexi-cap-fund/MPP002"
HOLDINGS = (
    "https://www.moneycontrol.com/mutual-funds/parag-parikh-flexi-cap-fund"
    "/portfolio-holdings/MPP002"
)

LISTING_PAGE = f"""
<table>
  <tr><th>Scheme Name</th><th>1Y</th></tr>
  <tr><td><a href="{NAV}">Parag Parikh Flexi Cap Fund - Direct Plan - Growth</a></td><td>21.4%</td></tr>
  <tr><td>Quant Flexi Cap Fund</td><td>30.2%</td></tr>
  <tr><td>Unknown House Fund</td><td>1.0%</td></tr>
</table>
"""

HOLDINGS_PAGE = """
<table id="equityCompleteHoldingTable">
  <tr><th>Stock Invested in</th><th>% of Total Holdings</th></tr>
  <tr><td>HDFC Bank Ltd.</td><td>8.1%</td></tr>
</table>
"""

REGISTRY = [
    {"schemeCode": 122639, "schemeName": "Parag Parikh Flexi Cap Fund - Direct Plan - Growth"},
    {"schemeCode": 120843, "schemeName": "Quant Flexi Cap Fund - Growth Option - Direct Plan"},
    {"schemeCode": 120844, "schemeName": "Quant Flexi Cap Fund - IDCW Option - Direct Plan"},
]


def test_build_fetcher_from_config() -> None:
    cfg = load_config(
        overrides={"sources.moneycontrol.http.user_agent": "agent/2.0"}
    )
    fetcher = build_fetcher(cfg)
    try:
        assert fetcher.default_headers["User-Agent"] == "agent/2.0"
        assert fetcher.default_headers["Accept-Language"] == "en-US,en;q=0.9"
    finally:
        fetcher.close()


def test_build_extractor_uses_configured_policy(
    make_fetcher: Callable[..., Any]
) -> None:
    cfg = load_config(
        overrides={"sources.moneycontrol.extract.row_policy": "require_holdings"}
    )
    extractor = build_extractor(cfg, make_fetcher({}))
    assert extractor.settings.row_policy is RowPolicy.REQUIRE_HOLDINGS


def test_scrape_then_reconcile(tmp_path: Path, make_fetcher: Callable[..., Any]) -> None:
    root = tmp_path / "outputs"
    cfg = load_config(overrides={"sources.moneycontrol.root": root.as_posix()})
    fetcher = make_fetcher({LISTING: LISTING_PAGE, HOLDINGS: HOLDINGS_PAGE})

    scrape = scrape_from_config(
        cfg,
        [{"name": "Flexi Cap Funds", "link": LISTING}],
        fetcher=fetcher,
        run_id="e2e",
    )

    assert fetcher.calls == [LISTING, HOLDINGS]
    assert scrape.stats.ok == 1
    assert scrape.aggregate_path == root / "all_mutual_funds.json"
    assert (root / "Flexi_Cap_Funds.json").exists()
    assert (root / "runs" / "e2e" / "ok" / "Flexi_Cap_Funds.ok").exists()
    assert scrape.records[0]["portfolio_holdings"] == [
        {"stock_invested_in": "HDFC Bank Ltd.", "percentage_of_total_holdings": "8.1%"}
    ]

    registry = tmp_path / "all_mf_scheme.json"
    registry.write_text(json.dumps(REGISTRY), encoding="utf-8")

    result, paths = reconcile_from_config(
        cfg, reference_path=registry, output_dir=tmp_path / "sanitized_data"
    )

    assert result.counts() == {
        "total": 3,
        "confirmed": 1,
        "unconfirmed": 1,
        "not_found": 1,
    }
    assert result.confirmed[0]["schemeCode"] == "122639"
    assert result.unconfirmed[0]["possibleSchemeCode"] == ["120843", "120844"]

    confirmed = json.loads(paths["confirmed"].read_text(encoding="utf-8"))
    assert confirmed[0]["scheme_name"] == "Parag Parikh Flexi Cap Fund - Direct Plan - Growth"
    assert paths["all_matched"].parent == tmp_path / "sanitized_data"


def test_scrape_with_explicit_output_dir(
    tmp_path: Path, make_fetcher: Callable[..., Any]
) -> None:
    cfg = load_config()
    fetcher = make_fetcher({})
    out = tmp_path / "custom"

    result = scrape_from_config(
        cfg,
        [{"name": "Broken", "link": "https://example.test/missing"}],
        fetcher=fetcher,
        output_dir=out,
        run_id="explicit",
    )

    assert result.stats.err == 1
    assert (out / "runs" / "explicit" / "err" / "Broken.json").exists()
    assert json.loads((out / "all_mutual_funds.json").read_text("utf-8")) == []
