from __future__ import annotations

from pathlib import Path

import pytest

DATA_DIR = Path(__file__).parent / "data"


@pytest.fixture
def listing_html() -> str:
    """Large-cap listing page: 4 fund rows (one ad), a header-less table, an empty table."""
    return (DATA_DIR / "listing_page.html").read_text(encoding="utf-8")


@pytest.fixture
def holdings_html() -> str:
    """Portfolio holdings page with `equityCompleteHoldingTable` (2 rows)."""
    return (DATA_DIR / "holdings_page.html").read_text(encoding="utf-8")
