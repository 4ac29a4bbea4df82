import asyncio
import logging
import time
from typing import Sequence

from ..core.config import Settings
from ..core.errors import ValidationError
from ..core.metrics import LOG_FAILURES, SOURCE_LATENCY, VALUATION_RESULTS
from ..data.base import ValuationLog, ValuationLogRow, ValuationSource
from ..data.sources import SOURCES
from ..data.valuation_log import valuation_log
from ..extractors.base import ValuationExtractor
from ..extractors.mock_extractor import MockExtractor
from ..extractors.perplexity_extractor import PerplexityExtractor
from ..extractors.scrape_extractor import ScrapeExtractor
from ..schemas import AggregationResponse, ValuationResult
from .analytics import summarize

logger = logging.getLogger(__name__)

REQUIRED_FIELDS_MESSAGE = "Address and sessionId are required"

# Strong refs to running fan-outs; the event loop only holds weak ones
IN_FLIGHT: set[asyncio.Task] = set()

def build_extractor(settings: Settings) -> ValuationExtractor:
    # Pick extractor based on env
    provider = settings.EXTRACTOR
    if provider == "scrape":
        return ScrapeExtractor.from_settings(settings)
    if provider == "mock":
        return MockExtractor()
    return PerplexityExtractor.from_settings(settings)

class AggregationService:
    """
    Orchestrates, for one address:
      validate → for each source (in registry order): extract → log row
      → analytics over the successes.
    Sources are processed one at a time; response order is registry order.
    """
    def __init__(self, extractor: ValuationExtractor, valuation_log: ValuationLog,
                 sources: Sequence[ValuationSource] = SOURCES):
        self.extractor = extractor
        self.log = valuation_log
        self.sources = tuple(sources)

    @classmethod
    def from_settings(cls, settings: Settings) -> "AggregationService":
        return cls(build_extractor(settings), valuation_log(settings))

    async def aggregate(self, address: str | None, session_id: str | None) -> AggregationResponse:
        address = (address or "").strip()
        session_id = (session_id or "").strip()
        if not address or not session_id:
            raise ValidationError(REQUIRED_FIELDS_MESSAGE)

        # Missing credentials fail the whole request before any source is touched
        self.extractor.ensure_configured()
        self.log.ensure_configured()

        # Shielded: if the caller goes away, the remaining sources still run
        # (or time out) and their rows are still written
        task = asyncio.ensure_future(self._collect(address, session_id))
        IN_FLIGHT.add(task)
        task.add_done_callback(IN_FLIGHT.discard)
        return await asyncio.shield(task)

    async def _collect(self, address: str, session_id: str) -> AggregationResponse:
        results: list[ValuationResult] = []
        for source in self.sources:
            result = await self._extract_one(source, address)
            results.append(result)
            await self._record(result, address, session_id)

        return AggregationResponse(
            valuations=results,
            analytics=summarize(results),
            address=address,
            session_id=session_id,
        )

    async def _extract_one(self, source: ValuationSource, address: str) -> ValuationResult:
        target = source.query_target(self.extractor.target_kind)
        start = time.perf_counter()
        try:
            result = await self.extractor.extract(source.name, target, address)
        except Exception as exc:
            # Extractors should never raise; keep the array full if one does
            logger.exception("extractor raised for %s", source.name)
            result = ValuationResult.error(source.name, str(exc) or "Unknown error")
        SOURCE_LATENCY.labels(source=source.name).observe(time.perf_counter() - start)
        VALUATION_RESULTS.labels(source=source.name, status=result.status).inc()
        logger.info(
            "source=%s status=%s amount=%s", source.name, result.status, result.valuation_amount
        )
        return result

    async def _record(self, result: ValuationResult, address: str, session_id: str) -> None:
        row = ValuationLogRow(
            address=address,
            source=result.source,
            valuation_amount=result.valuation_amount,
            status=result.status,
            error_message=result.error_message,
            session_id=session_id,
        )
        try:
            await self.log.insert(row)
        except Exception as exc:
            # Best-effort side channel: the result stays in the response
            LOG_FAILURES.labels(source=result.source).inc()
            logger.warning("valuation log insert failed for %s: %s", result.source, exc)
