"""Shared helpers for retrying network calls."""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def async_retry_with_backoff(
    fn: Callable[[], Awaitable[T]],
    *,
    max_attempts: int = 2,
    base_delay: float = 0.5,
    max_delay: float = 2.0,
    retryable_exceptions: tuple[type[Exception], ...] = (Exception,),
) -> T:
    """
    Retry an awaitable function with exponential backoff and jitter.

    Args:
        fn: Zero-argument coroutine function to retry.
        max_attempts: Maximum number of attempts; values below 1 mean a single attempt.
        base_delay: Initial delay in seconds.
        max_delay: Maximum delay in seconds.
        retryable_exceptions: Exception types that trigger a retry. Anything else propagates at once.

    Raises:
        The last retryable exception if all attempts fail.
    """
    attempts = max(1, max_attempts)
    for attempt in range(attempts):
        try:
            return await fn()
        except retryable_exceptions as e:
            if attempt == attempts - 1:
                raise
            delay = min(max_delay, base_delay * (2**attempt) + random.uniform(0, base_delay))
            logger.warning(
                f"Async retry {attempt + 1}/{attempts} after {delay:.2f}s (reason: {type(e).__name__}: {e})"
            )
            await asyncio.sleep(delay)
    raise AssertionError("unreachable")
