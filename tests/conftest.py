"""Shared test fixtures for web-content-analyzer."""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from web_content_analyzer.client import AnalysisClient
from web_content_analyzer.config import AnalyzerConfig


def gemini_response(text: str, status_code: int = 200) -> httpx.Response:
    """Build a generateContent response envelope carrying *text*."""
    return httpx.Response(
        status_code,
        json={"candidates": [{"content": {"parts": [{"text": text}], "role": "model"}}]},
    )


def sent_prompt(request: httpx.Request) -> str:
    """Extract the prompt text from a recorded generateContent request."""
    return json.loads(request.content)["contents"][0]["parts"][0]["text"]


@pytest.fixture(autouse=True)
def _set_dummy_api_key(monkeypatch):
    """Ensure tests never hit the real Gemini API."""
    monkeypatch.setenv("LLM_API_KEY", "test-key-not-real")
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)


@pytest.fixture(autouse=True)
def _isolate_dotenv(tmp_path, monkeypatch):
    """Prevent tests from loading a real ./.env or ~/.config/web-content-analyzer/.env."""
    monkeypatch.setattr(
        "web_content_analyzer.dotenv.default_env_paths",
        lambda: [tmp_path / "nonexistent.env"],
    )


@pytest.fixture()
def config() -> AnalyzerConfig:
    return AnalyzerConfig(api_key="test-key-1234")


@pytest.fixture()
def recorded_requests() -> list[httpx.Request]:
    return []


@pytest.fixture()
def make_client(config, recorded_requests) -> Callable[..., AnalysisClient]:
    """Factory for an AnalysisClient whose HTTP calls go to *handler*.

    ``handler`` receives the httpx.Request and returns an httpx.Response
    (or raises). A plain string is wrapped with :func:`gemini_response`.
    Every request is appended to ``recorded_requests``.
    """

    def _factory(handler: Callable[[httpx.Request], Any], cfg: AnalyzerConfig | None = None) -> AnalysisClient:
        def _handle(request: httpx.Request) -> httpx.Response:
            recorded_requests.append(request)
            result = handler(request)
            return gemini_response(result) if isinstance(result, str) else result

        http = httpx.AsyncClient(transport=httpx.MockTransport(_handle))
        return AnalysisClient(cfg or config, http_client=http)

    return _factory


@pytest.fixture()
def reply(make_client) -> Callable[[str], AnalysisClient]:
    """Shortcut: a client whose endpoint always answers with *completion*."""
    return lambda completion: make_client(lambda _request: completion)
