from __future__ import annotations

from hk_valuation.schemas import Analytics, ValuationResult
from hk_valuation.services.analytics import summarize


def test_empty_set_yields_no_data() -> None:
    assert summarize([]) == Analytics(highest=None, lowest=None, average=None)


def test_all_non_success_yields_no_data() -> None:
    results = [
        ValuationResult.not_available("HSBC Hong Kong", "No valuation data available from this source"),
        ValuationResult.error("Hang Seng Bank", "Request timeout"),
    ]
    assert summarize(results) == Analytics()


def test_highest_lowest_average() -> None:
    results = [
        ValuationResult.success("A", 100.0),
        ValuationResult.success("B", 200.0),
        ValuationResult.success("C", 300.0),
    ]
    assert summarize(results) == Analytics(highest=300.0, lowest=100.0, average=200.0)


def test_failures_are_ignored() -> None:
    results = [
        ValuationResult.success("A", 8_000_000.0),
        ValuationResult.error("B", "HTTP 503"),
        ValuationResult.success("C", 9_000_000.0),
    ]
    summary = summarize(results)
    assert summary.highest == 9_000_000.0
    assert summary.lowest == 8_000_000.0
    assert summary.average == 8_500_000.0


def test_average_is_not_rounded() -> None:
    results = [ValuationResult.success(s, v) for s, v in (("A", 1.0), ("B", 2.0), ("C", 2.0))]
    assert summarize(results).average == 5.0 / 3.0
