"""Retry policy for provider HTTP calls.

Only transient failures are retried: connection-level errors and the
rate-limit / gateway statuses in :data:`RETRYABLE_STATUS`.  A
``Retry-After`` header on the failed response takes precedence over the
exponential backoff.
"""

from __future__ import annotations

import asyncio
import functools
import logging
import random
from typing import TYPE_CHECKING, TypeVar

import httpx

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

T = TypeVar("T")

logger = logging.getLogger(__name__)

RETRYABLE_STATUS = frozenset({429, 500, 502, 503, 504})


def is_transient(exc: BaseException) -> bool:
    """Whether another attempt could plausibly succeed."""
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code in RETRYABLE_STATUS
    return isinstance(exc, httpx.TransportError)


def retry_after(exc: BaseException, max_delay: float) -> float | None:
    """Seconds requested by a numeric ``Retry-After`` header, capped."""
    if not isinstance(exc, httpx.HTTPStatusError):
        return None
    value = exc.response.headers.get("Retry-After")
    if value is None:
        return None
    try:
        seconds = float(value)
    except ValueError:
        # HTTP-date form; fall back to backoff
        return None
    return min(max(seconds, 0.0), max_delay)


def backoff_delay(
    attempt: int, base_delay: float, max_delay: float, *, jitter: bool = True
) -> float:
    """Delay before retry number *attempt* (0-based), capped at *max_delay*."""
    delay = min(base_delay * (2**attempt), max_delay)
    if jitter:
        delay *= 0.5 + random.random()
    return delay


def retry_transient(
    *,
    max_retries: int,
    base_delay: float,
    max_delay: float,
    jitter: bool = True,
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """Retry an async HTTP call while it keeps failing transiently."""

    def decorator(
        func: Callable[..., Awaitable[T]],
    ) -> Callable[..., Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args: object, **kwargs: object) -> T:
            attempt = 0
            while True:
                try:
                    return await func(*args, **kwargs)
                except (httpx.HTTPStatusError, httpx.TransportError) as exc:
                    if attempt >= max_retries or not is_transient(exc):
                        raise
                    delay = retry_after(exc, max_delay)
                    if delay is None:
                        delay = backoff_delay(
                            attempt, base_delay, max_delay, jitter=jitter
                        )
                    attempt += 1
                    logger.warning(
                        "Retry %d/%d for %s after %.2fs: %s",
                        attempt,
                        max_retries,
                        func.__name__,
                        delay,
                        exc,
                    )
                    await asyncio.sleep(delay)

        return wrapper

    return decorator
