"""Retry policy helpers for idempotent bridge reads."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import TypeVar
from collections.abc import Awaitable, Callable

from loguru import logger

T = TypeVar("T")


@dataclass(slots=True)
class RetryPolicy:
    """Simple exponential-backoff retry policy."""

    max_attempts: int = 2
    base_delay_seconds: float = 0.2
    max_delay_seconds: float = 2.0

    def delay_for(self, attempt: int) -> float:
        return min(self.max_delay_seconds, self.base_delay_seconds * (2**attempt))


async def with_retry(
    fn: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
    *,
    retry_on: tuple[type[BaseException], ...] = (Exception,),
) -> T:
    """Run async callable with retries and bounded exponential backoff.

    Only exceptions matching ``retry_on`` are retried; anything else propagates
    immediately.
    """
    if policy.max_attempts <= 1:
        return await fn()
    last_exc: BaseException | None = None
    for attempt in range(policy.max_attempts):
        try:
            return await fn()
        except retry_on as exc:
            last_exc = exc
            if attempt >= policy.max_attempts - 1:
                break
            delay = policy.delay_for(attempt)
            logger.debug("Retrying after {} (attempt {}/{}, sleeping {:.2f}s)", type(exc).__name__, attempt + 1, policy.max_attempts, delay)
            await asyncio.sleep(delay)
    assert last_exc is not None
    raise last_exc
