"""Retry-with-fallback combinator for reasoning service calls."""

import asyncio
from typing import Awaitable, Callable, Optional, TypeVar

import httpx

from plan_review.core.exceptions import AppError, RetriesExhaustedError
from plan_review.utils.logging import get_logger

LOGGER = get_logger(__name__)

RawT = TypeVar("RawT")
ResultT = TypeVar("ResultT")

RETRYABLE_ERRORS = (AppError, httpx.HTTPError, asyncio.TimeoutError)


async def retry_with_fallback(
    call: Callable[[], Awaitable[RawT]],
    validator: Callable[[RawT], ResultT],
    fallback: Callable[[], ResultT],
    max_retries: int = 3,
    backoff_seconds: float = 1.0,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    operation: Optional[str] = None,
) -> ResultT:
    """Invoke ``call`` until ``validator`` accepts its value, else fall back.

    Attempt ``i`` (1-based) is followed, on failure, by a wait of
    ``i * backoff_seconds`` before the next attempt. Decode, validation and
    transport errors are retried; after the last failed attempt the value of
    ``fallback()`` is returned instead of raising.

    Args:
        call: Zero-argument coroutine function performing one attempt
        validator: Converts the raw value into the accepted result or raises
        fallback: Produces the result used when every attempt failed
        max_retries: Total number of attempts
        backoff_seconds: Linear backoff unit
        sleep: Awaitable sleep, injectable for tests
        operation: Name used in log messages

    Returns:
        The validated result of the first successful attempt, or the fallback

    Raises:
        ValueError: If max_retries is less than 1
    """
    if max_retries < 1:
        raise ValueError("max_retries must be at least 1")

    name = operation or getattr(call, "__name__", "call")
    last_error: Optional[BaseException] = None

    for attempt in range(1, max_retries + 1):
        try:
            LOGGER.info(f"{name}: attempt {attempt}/{max_retries}")
            raw = await call()
            return validator(raw)
        except RETRYABLE_ERRORS as e:
            last_error = e
            LOGGER.warning(
                f"{name}: attempt {attempt}/{max_retries} failed: {e}",
                extra={"attempt": attempt, "error_type": type(e).__name__}
            )
            if attempt < max_retries:
                await sleep(attempt * backoff_seconds)

    exhausted = RetriesExhaustedError(max_retries, last_error)
    LOGGER.error(
        f"{name}: {exhausted}, returning fallback result",
        extra={"attempts": exhausted.attempts, "last_error": str(last_error)}
    )
    return fallback()
