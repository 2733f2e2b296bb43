"""Gemini REST client and the content analysis operations built on it."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from types import TracebackType
from typing import TypeVar

import httpx
from pydantic import ValidationError

from .config import AnalyzerConfig
from .errors import ApiError, EmptyResponseError, TransportError
from .models.analysis import ContentAnalysis, SentimentResult
from .models.gemini import GenerateContentRequest, GenerateContentResponse
from .parsing import (
    ParseResult,
    parse_connection_check,
    parse_content_analysis,
    parse_relevance,
    parse_sentiment,
    parse_topics,
)
from .prompts import analysis as prompts
from .retry import with_retry

logger = logging.getLogger(__name__)

T = TypeVar("T")


class AnalysisClient:
    """Sends prompts to a Gemini ``generateContent`` endpoint.

    The client only holds its immutable configuration and a reusable
    ``httpx.AsyncClient``, so concurrent calls never share per-call state.
    Use it as an async context manager, or call :meth:`aclose` when done.

    Args:
        config: Resolved configuration. Defaults to ``AnalyzerConfig.from_env()``,
            which raises ``ConfigurationError`` when no API key is set.
        http_client: Optional pre-built client (tests inject a MockTransport).
            Injected clients are not closed by :meth:`aclose`.
    """

    def __init__(
        self,
        config: AnalyzerConfig | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.config = config or AnalyzerConfig.from_env()
        self._owns_http = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=self.config.request_timeout)
        logger.info(
            "Created analysis client for %s (key …%s)",
            self.config.model,
            self.config.api_key[-4:],
        )

    async def __aenter__(self) -> AnalysisClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()

    # ── transport ──────────────────────────────────────────────────────────

    async def send_prompt(self, prompt: str) -> str:
        """Send one free-text prompt and return the raw completion text.

        Raises:
            TransportError: The request failed before a usable HTTP response was read.
            ApiError: Non-2xx status, or a 2xx body that is not a valid envelope.
            EmptyResponseError: 2xx envelope without candidate text.
        """
        cfg = self.config
        return await with_retry(
            lambda: self._post(prompt),
            max_attempts=cfg.retry_max_attempts,
            base_delay=cfg.retry_base_delay,
            max_delay=cfg.retry_max_delay,
        )

    async def _post(self, prompt: str) -> str:
        body = GenerateContentRequest.from_prompt(prompt).model_dump()
        try:
            response = await self._http.post(
                self.config.endpoint,
                params={"key": self.config.api_key},
                json=body,
            )
        except httpx.RequestError as exc:
            raise TransportError(f"Request to {self.config.model} failed: {exc!r}") from exc

        if not response.is_success:
            logger.error("LLM endpoint returned %d", response.status_code)
            raise ApiError(response.status_code, response.text)

        try:
            envelope = GenerateContentResponse.model_validate_json(response.content)
        except ValidationError as exc:
            raise ApiError(response.status_code, response.text) from exc

        text = envelope.first_text()
        if text is None:
            raise EmptyResponseError("No response from LLM")
        return text

    # ── analysis operations ────────────────────────────────────────────────

    def _unwrap(self, operation: str, result: ParseResult[T]) -> T:
        if result.is_fallback:
            logger.warning("%s: unstructured completion, using fallback (%s)", operation, result.reason)
        return result.value

    async def analyze_web_content(self, title: str, content: str, url: str) -> ContentAnalysis:
        """Summary, sentiment, topics and category for a page in one call."""
        prompt = prompts.build_web_content_prompt(title, content, url)
        logger.debug("analyze_web_content: prompt %d chars", len(prompt))
        completion = await self.send_prompt(prompt)
        return self._unwrap("analyze_web_content", parse_content_analysis(completion))

    async def analyze_sentiment(self, text: str) -> SentimentResult:
        """Label, confidence (0-100) and explanation for *text*.

        The text is sent untruncated; pass a snippet for long pages.
        """
        prompt = prompts.build_sentiment_prompt(text)
        logger.debug("analyze_sentiment: prompt %d chars", len(prompt))
        completion = await self.send_prompt(prompt)
        return self._unwrap("analyze_sentiment", parse_sentiment(completion))

    async def summarize_content(self, content: str, max_sentences: int = 3) -> str:
        """Return the model's summary verbatim."""
        if max_sentences < 1:
            raise ValueError("max_sentences must be >= 1")
        prompt = prompts.build_summary_prompt(content, max_sentences)
        logger.debug("summarize_content: prompt %d chars", len(prompt))
        return await self.send_prompt(prompt)

    async def extract_topics(self, content: str, max_topics: int = 5) -> list[str]:
        """Return at most *max_topics* topics, one per non-blank completion line."""
        if max_topics < 1:
            raise ValueError("max_topics must be >= 1")
        prompt = prompts.build_topics_prompt(content, max_topics)
        logger.debug("extract_topics: prompt %d chars", len(prompt))
        completion = await self.send_prompt(prompt)
        return self._unwrap("extract_topics", parse_topics(completion, max_topics))

    async def classify_content(self, title: str, content: str) -> str:
        """Return the model's category label verbatim."""
        prompt = prompts.build_classification_prompt(title, content)
        logger.debug("classify_content: prompt %d chars", len(prompt))
        return await self.send_prompt(prompt)

    async def check_relevance(self, content: str, keywords: Iterable[str]) -> float:
        """Score 0-100 for how relevant *content* is to *keywords*."""
        keywords = [keywords] if isinstance(keywords, str) else list(keywords)
        if not keywords:
            raise ValueError("keywords must not be empty")
        prompt = prompts.build_relevance_prompt(content, keywords)
        logger.debug("check_relevance: prompt %d chars", len(prompt))
        completion = await self.send_prompt(prompt)
        return self._unwrap("check_relevance", parse_relevance(completion))

    async def test_connection(self) -> bool:
        """True when the model answers the ping with "OK" (any case)."""
        completion = await self.send_prompt(prompts.CONNECTION_TEST_PROMPT)
        return parse_connection_check(completion)

    async def get_model_info(self) -> str:
        """Ask the model to describe itself; returned verbatim."""
        return await self.send_prompt(prompts.MODEL_INFO_PROMPT)
