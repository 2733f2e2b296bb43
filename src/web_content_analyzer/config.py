"""Analyzer configuration via environment variables."""

from __future__ import annotations

import logging
import os

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_USER_AGENT = "web-content-analyzer/0.1"

API_KEY_VARS = ("LLM_API_KEY", "GEMINI_API_KEY")


class AnalyzerConfig(BaseModel):
    """Credential and endpoint settings, immutable once resolved."""

    model_config = ConfigDict(frozen=True)

    api_key: str = Field(repr=False)
    api_base: str = Field(default=DEFAULT_API_BASE)
    model: str = Field(default=DEFAULT_MODEL)
    request_timeout: float = Field(default=60.0)
    retry_max_attempts: int = Field(default=1)
    retry_base_delay: float = Field(default=1.0)
    retry_max_delay: float = Field(default=30.0)
    user_agent: str = Field(default=DEFAULT_USER_AGENT)

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("api_key must not be empty")
        return value

    @field_validator("api_base")
    @classmethod
    def validate_api_base(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        if not value.startswith(("http://", "https://")):
            raise ValueError(f"api_base must be an http(s) URL, got '{value}'")
        return value

    @field_validator("retry_max_attempts")
    @classmethod
    def validate_retry_max_attempts(cls, value: int) -> int:
        if value < 1:
            raise ValueError("retry_max_attempts must be >= 1")
        return value

    @field_validator("request_timeout", "retry_base_delay", "retry_max_delay")
    @classmethod
    def validate_positive_floats(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("Timeouts and retry delays must be > 0")
        return value

    @property
    def endpoint(self) -> str:
        """Full generateContent URL for the configured model."""
        return f"{self.api_base}/models/{self.model}:generateContent"

    @classmethod
    def from_env(cls, *, load_env_files: bool = True) -> AnalyzerConfig:
        """Build config from environment variables.

        Loads ``.env`` files first (see :mod:`web_content_analyzer.dotenv`);
        the process environment always takes precedence.

        Raises:
            ConfigurationError: If no API key is set or a value is invalid.
        """
        if load_env_files:
            from .dotenv import load_dotenv

            injected = load_dotenv()
            if injected:
                logger.info(
                    "Loaded %d var(s) from .env: %s",
                    len(injected),
                    ", ".join(injected.keys()),
                )

        api_key = next((os.environ[v].strip() for v in API_KEY_VARS if os.getenv(v, "").strip()), "")
        if not api_key:
            raise ConfigurationError(
                "LLM_API_KEY must be set in the environment or a .env file"
            )

        try:
            return cls(
                api_key=api_key,
                api_base=os.getenv("LLM_API_BASE", DEFAULT_API_BASE),
                model=os.getenv("LLM_MODEL", DEFAULT_MODEL),
                request_timeout=float(os.getenv("LLM_REQUEST_TIMEOUT", "60")),
                retry_max_attempts=int(os.getenv("LLM_RETRY_MAX_ATTEMPTS", "1")),
                retry_base_delay=float(os.getenv("LLM_RETRY_BASE_DELAY", "1.0")),
                retry_max_delay=float(os.getenv("LLM_RETRY_MAX_DELAY", "30.0")),
                user_agent=os.getenv("SCRAPER_USER_AGENT", DEFAULT_USER_AGENT),
            )
        except ValueError as exc:
            raise ConfigurationError(f"Invalid configuration: {exc}") from exc
