# src/sources/retry.py — v1
"""Retry policy with exponential backoff for source fetches."""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

import httpx

from imgresizer.core.errors import FetchRetryExhausted, InvalidImageIdError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryConfig:
    """Retry configuration for a source fetcher."""

    max_retries: int = 2
    base_delay_s: float = 0.5
    backoff_factor: float = 2.0
    jitter: bool = True


def classify_error(error: Exception) -> str:
    """Classify an adapter exception. Only 'permanent' errors skip retries."""
    if isinstance(error, (FileNotFoundError, IsADirectoryError, PermissionError)):
        return "permanent"
    if isinstance(error, httpx.HTTPStatusError):
        status = error.response.status_code
        if status == 429:
            return "rate_limit"
        if status >= 500:
            return "server_error"
        return "permanent"
    if isinstance(error, (httpx.TimeoutException, asyncio.TimeoutError, TimeoutError)):
        return "timeout"
    if isinstance(error, (httpx.TransportError, ConnectionError, OSError)):
        return "connection"
    return "unknown"


def _compute_delay(config: RetryConfig, attempt: int) -> float:
    """Compute delay for a given attempt (0-based)."""
    delay = config.base_delay_s * (config.backoff_factor ** attempt)
    if config.jitter:
        delay *= 0.5 + random.random()  # noqa: S311
    return delay


async def with_retry(
    fn: Callable[..., Awaitable[Any]],
    *args: Any,
    image_id: str = "unknown",
    config: RetryConfig | None = None,
    **kwargs: Any,
) -> Any:
    """Execute an async fetch with retry logic.

    Raises:
        InvalidImageIdError: Passed through untouched, never retried.
        FetchRetryExhausted: If the error is permanent or retries run out.
    """
    config = config or RetryConfig()
    attempts = 0

    while True:
        try:
            return await fn(*args, **kwargs)
        except InvalidImageIdError:
            raise
        except Exception as e:
            error_type = classify_error(e)
            attempts += 1

            if error_type == "permanent" or attempts > config.max_retries:
                raise FetchRetryExhausted(image_id, error_type, attempts, e) from e

            delay = _compute_delay(config, attempts - 1)
            logger.warning(
                "Fetch '%s' — %s (attempt %d/%d), retrying in %.1fs",
                image_id, error_type, attempts, config.max_retries, delay,
            )
            await asyncio.sleep(delay)
