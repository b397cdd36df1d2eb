"""
Async helpers shared by every outbound call: a deadline wrapper and a
capped exponential-backoff retry decorator.
"""

import asyncio
import functools
from typing import Awaitable, Callable, Tuple, Type, TypeVar

import structlog

from ..exceptions import RETRYABLE_ERRORS, TransientNetworkError

logger = structlog.get_logger(__name__)

T = TypeVar("T")

DEFAULT_ATTEMPTS = 3
DEFAULT_BASE_DELAY_SECONDS = 1.0


async def with_timeout(awaitable: Awaitable[T], timeout: float, operation: str) -> T:
    """
    Await with a deadline. The underlying task is cancelled when it expires.

    Raises:
        TransientNetworkError: if the deadline passes
    """
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout)
    except asyncio.TimeoutError:
        raise TransientNetworkError(f"{operation} timed out after {timeout}s")


def backoff_delays(attempts: int, base_delay: float) -> list[float]:
    """Delays slept between attempts: base, 2*base, 4*base, ... (attempts - 1 entries)."""
    return [base_delay * (2 ** i) for i in range(max(0, attempts - 1))]


def retry_async(
    attempts: int = DEFAULT_ATTEMPTS,
    base_delay: float = DEFAULT_BASE_DELAY_SECONDS,
    retry_on: Tuple[Type[BaseException], ...] = RETRYABLE_ERRORS,
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """
    Retry an async callable on the given errors with exponential backoff.

    No delay follows the final attempt; its error propagates unchanged.
    Errors outside ``retry_on`` propagate immediately.
    """
    if attempts < 1:
        raise ValueError("attempts must be >= 1")

    delays = backoff_delays(attempts, base_delay)

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        operation = func.__qualname__

        @functools.wraps(func)
        async def wrapper(*args, **kwargs) -> T:
            for attempt in range(1, attempts + 1):
                try:
                    return await func(*args, **kwargs)
                except retry_on as e:
                    if attempt == attempts:
                        logger.warning("retry_exhausted", operation=operation, attempts=attempts, error=str(e))
                        raise
                    delay = delays[attempt - 1]
                    logger.warning(
                        "retry_scheduled",
                        operation=operation,
                        attempt=attempt,
                        max_attempts=attempts,
                        delay_seconds=delay,
                        error=str(e)
                    )
                    await asyncio.sleep(delay)
            raise AssertionError("unreachable")

        return wrapper

    return decorator
