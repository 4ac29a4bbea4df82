"""
tests/test_perplexity_extractor.py

PerplexityExtractor against a faked chat-completions endpoint
(httpx.MockTransport behind the real AsyncOpenAI client).
"""

from __future__ import annotations

import json

import httpx
import pytest
from openai import AsyncOpenAI

from hk_valuation.core.config import Settings
from hk_valuation.core.errors import ConfigurationError
from hk_valuation.data.base import DEFAULT_PROMPT
from hk_valuation.extractors.perplexity_extractor import PerplexityExtractor

SOURCE = "HSBC Hong Kong"
ADDRESS = "Flat A, 12/F, Block 3, Taikoo Shing"


def completion(content: str | None) -> dict:
    return {
        "id": "cmpl-1",
        "object": "chat.completion",
        "created": 0,
        "model": "sonar",
        "choices": [
            {"index": 0, "finish_reason": "stop", "message": {"role": "assistant", "content": content}}
        ],
    }


def extractor_for(handler) -> PerplexityExtractor:
    client = AsyncOpenAI(
        api_key="test-key",
        base_url="https://api.perplexity.ai",
        max_retries=0,
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )
    return PerplexityExtractor(api_key="test-key", client=client)


def answering(content: str | None):
    return lambda request: httpx.Response(200, json=completion(content))


# ---------------------------------------------------------------------------
# Request shape
# ---------------------------------------------------------------------------


class TestRequest:
    @pytest.mark.asyncio
    async def test_sends_bounded_low_temperature_request(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=completion("8500000"))

        await extractor_for(handler).extract(SOURCE, DEFAULT_PROMPT, ADDRESS)

        assert len(seen) == 1
        request = seen[0]
        assert request.url.path.endswith("/chat/completions")
        assert request.headers["authorization"] == "Bearer test-key"
        body = json.loads(request.content)
        assert body["model"] == "sonar"
        assert body["temperature"] == 0.2
        assert body["max_tokens"] == 100
        system, user = body["messages"]
        assert system["role"] == "system" and "NOT_AVAILABLE" in system["content"]
        assert SOURCE in user["content"] and ADDRESS in user["content"]


# ---------------------------------------------------------------------------
# Response mapping
# ---------------------------------------------------------------------------


class TestResponseMapping:
    @pytest.mark.asyncio
    async def test_bare_number_is_success(self) -> None:
        result = await extractor_for(answering("8500000")).extract(SOURCE, DEFAULT_PROMPT, ADDRESS)
        assert result.status == "success"
        assert result.valuation_amount == 8_500_000.0
        assert result.source == SOURCE

    @pytest.mark.asyncio
    async def test_separators_and_fraction(self) -> None:
        result = await extractor_for(answering("1,234,567.89")).extract(SOURCE, DEFAULT_PROMPT, ADDRESS)
        assert result.valuation_amount == 1234567.89

    @pytest.mark.asyncio
    @pytest.mark.parametrize("answer", ["NOT_AVAILABLE", "not available", "Not_Available."])
    async def test_sentinel_is_not_available(self, answer: str) -> None:
        result = await extractor_for(answering(answer)).extract(SOURCE, DEFAULT_PROMPT, ADDRESS)
        assert result.status == "not_available"
        assert result.valuation_amount is None
        assert result.error_message == "No valuation data available from this source"

    @pytest.mark.asyncio
    async def test_prose_without_number_is_not_available(self) -> None:
        result = await extractor_for(answering("I cannot determine that.")).extract(
            SOURCE, DEFAULT_PROMPT, ADDRESS
        )
        assert result.status == "not_available"
        assert result.error_message == "Could not parse valuation from response"

    @pytest.mark.asyncio
    async def test_out_of_range_number_is_not_available(self) -> None:
        result = await extractor_for(answering("5000000000")).extract(SOURCE, DEFAULT_PROMPT, ADDRESS)
        assert result.status == "not_available"
        assert result.valuation_amount is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("answer", ["", "   ", None])
    async def test_empty_content_is_error(self, answer: str | None) -> None:
        result = await extractor_for(answering(answer)).extract(SOURCE, DEFAULT_PROMPT, ADDRESS)
        assert result.status == "error"
        assert result.error_message == "Empty response from API"


# ---------------------------------------------------------------------------
# Failures never raise
# ---------------------------------------------------------------------------


class TestFailures:
    @pytest.mark.asyncio
    async def test_non_success_status_is_error(self) -> None:
        handler = lambda request: httpx.Response(401, json={"error": "bad key"})
        result = await extractor_for(handler).extract(SOURCE, DEFAULT_PROMPT, ADDRESS)
        assert result.status == "error"
        assert result.error_message.startswith("Perplexity API error: 401")
        assert "bad key" in result.error_message

    @pytest.mark.asyncio
    async def test_timeout_is_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        result = await extractor_for(handler).extract(SOURCE, DEFAULT_PROMPT, ADDRESS)
        assert result.status == "error"
        assert "timeout" in result.error_message.lower()

    @pytest.mark.asyncio
    async def test_connection_failure_is_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        result = await extractor_for(handler).extract(SOURCE, DEFAULT_PROMPT, ADDRESS)
        assert result.status == "error"
        assert result.error_message

    @pytest.mark.asyncio
    async def test_blank_prompt_is_error(self) -> None:
        result = await extractor_for(answering("1")).extract(SOURCE, "  ", ADDRESS)
        assert result.status == "error"

    @pytest.mark.asyncio
    async def test_broken_template_is_error(self) -> None:
        result = await extractor_for(answering("1")).extract(SOURCE, "value for {bank}", ADDRESS)
        assert result.status == "error"
        assert "Invalid prompt template" in result.error_message


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class TestConfiguration:
    def test_missing_key_fails_configuration_check(self) -> None:
        extractor = PerplexityExtractor.from_settings(Settings(PERPLEXITY_API_KEY=None))
        with pytest.raises(ConfigurationError, match="Perplexity API key not configured"):
            extractor.ensure_configured()

    def test_key_present_passes_configuration_check(self) -> None:
        extractor = PerplexityExtractor.from_settings(Settings(PERPLEXITY_API_KEY="k"))
        extractor.ensure_configured()
        assert extractor.client is not None
        assert extractor.client.timeout == 30

    def test_targets_prompts(self) -> None:
        assert PerplexityExtractor(api_key=None).target_kind == "prompt"
