"""Perplexity-backed valuation extractor."""

from __future__ import annotations

import logging

import openai
from openai import AsyncOpenAI

from .base import ValuationExtractor
from ..core.config import Settings
from ..core.errors import ConfigurationError, ExtractionError
from ..core.utils import is_not_available, parse_amount
from ..schemas import ValuationResult

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a property valuation assistant. "
    'Provide only numerical values or "NOT_AVAILABLE". Do not include explanations.'
)

NOT_AVAILABLE_MESSAGE = "No valuation data available from this source"
UNPARSABLE_MESSAGE = "Could not parse valuation from response"


class PerplexityExtractor(ValuationExtractor):
    target_kind = "prompt"

    def __init__(
        self,
        api_key: str | None,
        model: str = "sonar",
        base_url: str = "https://api.perplexity.ai",
        timeout: float = 30,
        max_tokens: int = 100,
        temperature: float = 0.2,
        client: AsyncOpenAI | None = None,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.client = client
        if self.client is None and api_key:
            # Retries are off: one attempt per source, bounded by the timeout
            self.client = AsyncOpenAI(api_key=api_key, base_url=base_url, timeout=timeout, max_retries=0)

    @classmethod
    def from_settings(cls, settings: Settings) -> "PerplexityExtractor":
        return cls(
            api_key=settings.PERPLEXITY_API_KEY,
            model=settings.PERPLEXITY_MODEL,
            base_url=settings.PERPLEXITY_BASE_URL,
            timeout=settings.LLM_TIMEOUT_SECONDS,
            max_tokens=settings.LLM_MAX_TOKENS,
            temperature=settings.LLM_TEMPERATURE,
        )

    def ensure_configured(self) -> None:
        if self.client is None:
            raise ConfigurationError("Perplexity API key not configured")

    async def extract(self, source: str, query_target: str, address: str) -> ValuationResult:
        """Ask the model for ``source``'s valuation of ``address``.

        Parameters
        ----------
        source: str
            Display name of the bank or agency, substituted into the prompt.
        query_target: str
            Prompt template with ``{source}`` and ``{address}`` placeholders.
        address: str
            Free-text Hong Kong address.

        Returns
        -------
        ValuationResult
            ``success`` with the parsed amount, ``not_available`` when the model
            says so or answers with prose, ``error`` on any upstream failure.
        """
        if not query_target.strip():
            return ValuationResult.error(source, "Missing prompt for source")

        try:
            prompt = query_target.format(source=source, address=address)
        except (KeyError, IndexError, ValueError) as exc:
            return ValuationResult.error(source, f"Invalid prompt template: {exc}")

        try:
            content = await self._ask(prompt)
        except ExtractionError as exc:
            logger.warning("perplexity extraction failed for %s: %s", source, exc)
            return ValuationResult.error(source, str(exc))

        if not content:
            return ValuationResult.error(source, "Empty response from API")
        if is_not_available(content):
            return ValuationResult.not_available(source, NOT_AVAILABLE_MESSAGE)

        amount = parse_amount(content)
        if amount is not None:
            return ValuationResult.success(source, amount)
        return ValuationResult.not_available(source, UNPARSABLE_MESSAGE)

    async def _ask(self, prompt: str) -> str:
        """Send one chat completion and return the stripped first-choice content."""
        if self.client is None:
            raise ExtractionError("Perplexity API key not configured")
        try:
            completion = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except openai.APITimeoutError as exc:
            raise ExtractionError("Request timeout") from exc
        except openai.APIStatusError as exc:
            raise ExtractionError(f"Perplexity API error: {exc.status_code} - {exc.response.text}") from exc
        except openai.APIError as exc:
            raise ExtractionError(str(exc) or "API request failed") from exc

        if not completion.choices:
            return ""
        return (completion.choices[0].message.content or "").strip()
