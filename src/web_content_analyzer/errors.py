"""Error taxonomy, categorization, and user-facing error reports."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class AnalyzerError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(AnalyzerError):
    """Required configuration (the API key) is missing or invalid."""


class TransportError(AnalyzerError):
    """The request never produced an HTTP response (DNS, connect, timeout...)."""


class ApiError(AnalyzerError):
    """The LLM endpoint answered with a non-2xx status or an undecodable body."""

    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(f"API request failed ({status_code}): {body}")
        self.status_code = status_code
        self.body = body


class EmptyResponseError(AnalyzerError):
    """The endpoint answered 2xx but without a usable candidate text."""


class PageFetchError(AnalyzerError):
    """The web page could not be downloaded."""


class SelectorError(AnalyzerError):
    """The CSS selector could not be parsed."""


class ContentNotFoundError(AnalyzerError):
    """The CSS selector matched no element with text."""


class ErrorCategory(str, Enum):
    """Categories of errors for diagnostics."""

    CONFIGURATION = "CONFIGURATION"
    API_PERMISSION_DENIED = "API_PERMISSION_DENIED"
    API_QUOTA_EXCEEDED = "API_QUOTA_EXCEEDED"
    API_INVALID_ARGUMENT = "API_INVALID_ARGUMENT"
    API_NOT_FOUND = "API_NOT_FOUND"
    API_SERVER_ERROR = "API_SERVER_ERROR"
    EMPTY_RESPONSE = "EMPTY_RESPONSE"
    NETWORK_ERROR = "NETWORK_ERROR"
    PAGE_FETCH_FAILED = "PAGE_FETCH_FAILED"
    SELECTOR_INVALID = "SELECTOR_INVALID"
    CONTENT_NOT_FOUND = "CONTENT_NOT_FOUND"
    UNKNOWN = "UNKNOWN"


class ErrorReport(BaseModel):
    """Structured description of a failure, printed by the CLI."""

    error: str
    category: str
    hint: str
    retryable: bool = False


def _categorize_api_error(error: ApiError) -> tuple[ErrorCategory, str]:
    status = error.status_code
    if status in (401, 403):
        return (
            ErrorCategory.API_PERMISSION_DENIED,
            "API key rejected or lacks permission for this model",
        )
    if status == 429:
        return (
            ErrorCategory.API_QUOTA_EXCEEDED,
            "Rate limit hit — wait a minute before trying again",
        )
    if status == 400:
        return (
            ErrorCategory.API_INVALID_ARGUMENT,
            "Bad request — check the model name and prompt size",
        )
    if status == 404:
        return (
            ErrorCategory.API_NOT_FOUND,
            "Model or endpoint not found — check LLM_MODEL and LLM_API_BASE",
        )
    if status >= 500:
        return (
            ErrorCategory.API_SERVER_ERROR,
            "Provider-side failure — try again later",
        )
    return (ErrorCategory.UNKNOWN, str(error))


def categorize_error(error: Exception) -> tuple[ErrorCategory, str]:
    """Map an exception to an ErrorCategory + human-readable hint."""
    if isinstance(error, ConfigurationError):
        return (
            ErrorCategory.CONFIGURATION,
            "Set LLM_API_KEY (or GEMINI_API_KEY) in the environment or a .env file",
        )
    if isinstance(error, ApiError):
        return _categorize_api_error(error)
    if isinstance(error, EmptyResponseError):
        return (
            ErrorCategory.EMPTY_RESPONSE,
            "The model returned no text — the prompt may have been blocked",
        )
    if isinstance(error, (TransportError, TimeoutError, ConnectionError)):
        return (
            ErrorCategory.NETWORK_ERROR,
            "Network failure — check connectivity and try again",
        )
    if isinstance(error, PageFetchError):
        return (
            ErrorCategory.PAGE_FETCH_FAILED,
            "Could not download the page — check the URL",
        )
    if isinstance(error, SelectorError):
        return (
            ErrorCategory.SELECTOR_INVALID,
            "Invalid CSS selector — try e.g. 'article', '.content-body' or '#main-text'",
        )
    if isinstance(error, ContentNotFoundError):
        return (
            ErrorCategory.CONTENT_NOT_FOUND,
            "Selector matched no text — inspect the page and pick another selector",
        )

    s = str(error).lower()
    if "timeout" in s or "timed out" in s:
        return (
            ErrorCategory.NETWORK_ERROR,
            "Request timed out — try again or check connectivity",
        )
    return (ErrorCategory.UNKNOWN, str(error))


def describe_error(error: Exception) -> ErrorReport:
    """Create an ErrorReport from an exception."""
    cat, hint = categorize_error(error)
    retryable = cat in {
        ErrorCategory.API_QUOTA_EXCEEDED,
        ErrorCategory.API_SERVER_ERROR,
        ErrorCategory.NETWORK_ERROR,
    }
    return ErrorReport(
        error=str(error) or type(error).__name__,
        category=cat.value,
        hint=hint,
        retryable=retryable,
    )
