"""
Shared fixtures: fake extractors and logs that never touch the network.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from hk_valuation.core.errors import PersistenceError
from hk_valuation.data.sources import SOURCES
from hk_valuation.data.valuation_log import MemoryValuationLog
from hk_valuation.schemas import ValuationResult


def make_extractor(outcomes: dict[str, ValuationResult] | None = None) -> MagicMock:
    """Extractor double answering from ``outcomes`` keyed by source name.

    Sources missing from ``outcomes`` come back ``not_available``.
    """
    outcomes = outcomes or {}
    extractor = MagicMock()
    extractor.target_kind = "prompt"
    extractor.extract = AsyncMock(
        side_effect=lambda source, target, address: outcomes.get(
            source, ValuationResult.not_available(source, "No valuation data available from this source")
        )
    )
    return extractor


class FailingValuationLog(MemoryValuationLog):
    """Memory log that refuses rows for the given sources."""

    def __init__(self, failing: set[str]):
        super().__init__()
        self.failing = failing

    async def insert(self, row) -> None:
        if row.source in self.failing:
            raise PersistenceError(f"insert failed for {row.source}")
        await super().insert(row)


@pytest.fixture()
def memory_log() -> MemoryValuationLog:
    return MemoryValuationLog()


@pytest.fixture()
def source_names() -> list[str]:
    return [s.name for s in SOURCES]
