from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

from shared.resilience.backoff import exponential_backoff

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    max_attempts: int = 3
    base_seconds: float = 0.5
    cap_seconds: float = 5.0
    multiplier: float = 2.0
    jitter: float = 0.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

    def delay_for(self, attempt: int) -> float:
        return exponential_backoff(
            attempt,
            base_seconds=self.base_seconds,
            cap_seconds=self.cap_seconds,
            jitter=self.jitter,
            multiplier=self.multiplier,
        )


NO_RETRY = RetryPolicy(max_attempts=1)


async def retry_async(
    operation: Callable[[], Awaitable[T]],
    *,
    should_retry: Callable[[Exception], bool],
    policy: RetryPolicy | None = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    policy = policy or RetryPolicy()
    last_error: Exception | None = None
    for attempt in range(1, policy.max_attempts + 1):
        try:
            return await operation()
        except Exception as exc:  # noqa: BLE001
            if not should_retry(exc) or attempt == policy.max_attempts:
                raise
            last_error = exc
            await sleep(policy.delay_for(attempt))
    if last_error:
        raise last_error
    raise RuntimeError("retry_async reached an invalid state")
