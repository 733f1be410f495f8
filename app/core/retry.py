"""
Retry helper with exponential backoff and jitter.
"""

import asyncio
import logging
import random
from typing import Awaitable, Callable, Tuple, Type, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def call_with_retries(
    make_call: Callable[[], Awaitable[T]],
    retries: int = 6,
    base: float = 0.5,
    cap: float = 5.0,
    retry_on: Tuple[Type[BaseException], ...] = (Exception,),
    name: str = "call",
) -> T:
    """
    Run an async callable with exponential backoff retry logic.

    Retry delay formula:
    delay = min(cap, base * 2^(attempt-1)) * random(1.0, 1.4)

    Args:
        make_call: Async callable (no arguments) to attempt
        retries: Maximum number of attempts (default: 6)
        base: Base delay in seconds for backoff calculation (default: 0.5)
        cap: Maximum delay cap in seconds (default: 5.0)
        retry_on: Exception types that trigger another attempt; anything
            else propagates immediately
        name: Label used in log messages

    Returns:
        Whatever make_call returns on the first successful attempt

    Raises:
        Re-raises the last error once all attempts are exhausted

    Example:
        >>> await call_with_retries(fetcher.fetch_daily, retries=3,
        ...                         retry_on=(FetcherError,))
    """
    for attempt in range(1, retries + 1):
        try:
            return await make_call()
        except retry_on as e:
            if attempt >= retries:
                raise

            delay = min(cap, base * (2 ** (attempt - 1))) * random.uniform(1.0, 1.4)
            logger.warning(f"{name} attempt {attempt}/{retries} failed: {e}; retry in {delay:.1f}s")
            await asyncio.sleep(delay)
    raise ValueError("retries must be at least 1")
