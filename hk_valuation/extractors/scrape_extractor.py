"""
Page-fetch extractor: GET the source's public page and look for a
currency-prefixed figure near a valuation keyword.
"""

from __future__ import annotations

import logging
import re

import httpx
from bs4 import BeautifulSoup

from .base import ValuationExtractor
from ..core.config import Settings
from ..core.errors import ExtractionError
from ..core.utils import to_amount
from ..schemas import ValuationResult

logger = logging.getLogger(__name__)

DESKTOP_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
KEYWORDS = ("valuation", "price", "value")
# Keyword and figure must sit this close together in the page text
KEYWORD_WINDOW = 80
MIN_PLAUSIBLE_AMOUNT = 100_000

CURRENCY_AMOUNT = r"(?:HK\$|HKD|\$)\s*(\d[\d,]*(?:\.\d{1,2})?)"
CURRENCY_AMOUNT_RE = re.compile(CURRENCY_AMOUNT, re.IGNORECASE)


def keyword_pattern(keyword: str) -> re.Pattern[str]:
    return re.compile(
        rf"{re.escape(keyword)}.{{0,{KEYWORD_WINDOW}}}?{CURRENCY_AMOUNT}",
        re.IGNORECASE | re.DOTALL,
    )


def visible_text(html: str) -> str:
    soup = BeautifulSoup(html, "html.parser")
    for node in soup(["script", "style", "noscript", "template"]):
        node.decompose()
    return " ".join(soup.get_text(" ", strip=True).split())


def find_amount(text: str, keywords: tuple[str, ...] = KEYWORDS) -> float | None:
    """
    First keyword-anchored figure wins; failing that, the first
    currency figure anywhere above MIN_PLAUSIBLE_AMOUNT.
    """
    for keyword in keywords:
        for match in keyword_pattern(keyword).finditer(text):
            amount = to_amount(match.group(1))
            if amount is not None:
                return amount

    for match in CURRENCY_AMOUNT_RE.finditer(text):
        amount = to_amount(match.group(1))
        if amount is not None and amount > MIN_PLAUSIBLE_AMOUNT:
            return amount
    return None


class ScrapeExtractor(ValuationExtractor):
    target_kind = "url"

    def __init__(
        self,
        timeout: float = 15,
        user_agent: str = DESKTOP_USER_AGENT,
        keywords: tuple[str, ...] = KEYWORDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.timeout = timeout
        self.user_agent = user_agent
        self.keywords = keywords
        self.transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> "ScrapeExtractor":
        return cls(timeout=settings.SCRAPE_TIMEOUT_SECONDS)

    def ensure_configured(self) -> None:
        # Public pages, nothing to configure
        return None

    async def extract(self, source: str, query_target: str, address: str) -> ValuationResult:
        try:
            html = await self._fetch(query_target)
        except ExtractionError as exc:
            logger.warning("page fetch failed for %s: %s", source, exc)
            return ValuationResult.error(source, str(exc))

        amount = find_amount(visible_text(html), self.keywords)
        if amount is not None:
            return ValuationResult.success(source, amount)
        return ValuationResult.not_available(
            source,
            f"{source} requires interactive form submission; no static valuation on page",
        )

    async def _fetch(self, url: str) -> str:
        try:
            parsed = httpx.URL(url)
        except httpx.InvalidURL as exc:
            raise ExtractionError(f"Invalid source URL: {url}") from exc
        if parsed.scheme not in ("http", "https") or not parsed.host:
            raise ExtractionError(f"Invalid source URL: {url}")

        headers = {"User-Agent": self.user_agent, "Accept": "text/html,application/xhtml+xml"}
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, follow_redirects=True, transport=self.transport
            ) as client:
                r = await client.get(parsed, headers=headers)
        except httpx.TimeoutException as exc:
            raise ExtractionError("Request timeout") from exc
        except httpx.HTTPError as exc:
            raise ExtractionError(str(exc) or type(exc).__name__) from exc

        if not r.is_success:
            raise ExtractionError(f"HTTP {r.status_code}")
        return r.text
