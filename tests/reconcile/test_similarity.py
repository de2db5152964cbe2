from __future__ import annotations

import pytest

from mfholdings.reconcile.models import ReferenceEntry
from mfholdings.reconcile.similarity import best_matches, similarity


def test_identical_names_score_one() -> None:
    assert similarity("hdfc top 100 fund growth", "hdfc top 100 fund growth") == 1.0


def test_jaccard_over_token_sets() -> None:
    # 4 shared tokens out of 5 distinct
    assert similarity("hdfc top 100 growth", "hdfc top 100 fund growth") == 0.8
    # repeated tokens count once
    assert similarity("axis axis bluechip", "axis bluechip") == 1.0


def test_different_fund_house_scores_zero() -> None:
    assert similarity("sbi bluechip fund growth", "hdfc bluechip fund growth") == 0.0


@pytest.mark.parametrize(("a", "b"), [("", "hdfc fund"), ("hdfc fund", ""), ("", "")])
def test_empty_names_score_zero(a: str, b: str) -> None:
    assert similarity(a, b) == 0.0


def test_symmetric() -> None:
    a, b = "icici prudential bluechip fund", "icici prudential bluechip fund idcw"
    assert similarity(a, b) == similarity(b, a) == 0.8


def _entry(code: int, name: str) -> ReferenceEntry:
    return ReferenceEntry(scheme_code=str(code), scheme_name=name)


def test_best_matches_keeps_all_ties_in_scan_order() -> None:
    growth = _entry(1, "ICICI Prudential Bluechip Fund - Growth")
    idcw = _entry(2, "ICICI Prudential Bluechip Fund - IDCW")
    other = _entry(3, "ICICI Prudential Value Discovery Fund - Growth")
    refs = [
        ("icici prudential value discovery fund growth", other),
        ("icici prudential bluechip fund growth", growth),
        ("icici prudential bluechip fund idcw", idcw),
    ]

    best = best_matches("icici prudential bluechip fund", refs)

    assert best.score == 0.8
    assert best.matches == (growth, idcw)


def test_best_matches_none_above_zero() -> None:
    refs = [("hdfc top 100 fund growth", _entry(1, "HDFC Top 100 Fund - Growth"))]
    best = best_matches("axis bluechip fund", refs)
    assert best.score == 0.0
    assert best.matches == ()


def test_best_matches_empty_registry() -> None:
    assert best_matches("axis bluechip fund", []).matches == ()
