"""Bounded exponential backoff for transient LLM endpoint failures.

With the default ``max_attempts=1`` the factory is awaited exactly once,
so the first failure reaches the caller unchanged.
"""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable
from typing import TypeVar

from .errors import ApiError, TransportError

logger = logging.getLogger(__name__)

T = TypeVar("T")

RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})


def _is_retryable(exc: Exception) -> bool:
    """Transport failures and throttling/server-side statuses are transient."""
    if isinstance(exc, TransportError):
        return True
    return isinstance(exc, ApiError) and exc.status_code in RETRYABLE_STATUS_CODES


async def with_retry(
    coro_factory: Callable[[], Awaitable[T]],
    *,
    max_attempts: int = 1,
    base_delay: float = 1.0,
    max_delay: float = 30.0,
) -> T:
    """Execute an async callable, retrying transient errors with backoff.

    Args:
        coro_factory: Zero-arg callable that returns a fresh awaitable each attempt.
        max_attempts: Total attempts including the first one.
        base_delay: Delay before the first retry, doubled each attempt.
        max_delay: Upper bound for a single delay.

    Returns:
        The result of the first successful call.

    Raises:
        The last exception if all attempts are exhausted or non-retryable.
    """
    for attempt in range(max_attempts):
        try:
            return await coro_factory()
        except (TransportError, ApiError) as exc:
            if not _is_retryable(exc) or attempt == max_attempts - 1:
                raise
            delay = min(base_delay * (2 ** attempt) + random.random(), max_delay)
            logger.warning(
                "Retry %d/%d after %.1fs: %s", attempt + 1, max_attempts, delay, exc,
            )
            await asyncio.sleep(delay)
    raise ValueError("max_attempts must be >= 1")
