from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from shared.resilience.bulkhead import Bulkhead
from shared.resilience.circuit_breaker import CircuitBreaker, CircuitBreakerOpenError
from shared.resilience.registry import CircuitBreakerRegistry
from shared.resilience.retry import RetryPolicy, retry_async

T = TypeVar("T")

Fallback = Callable[..., T | Awaitable[T]]


class RemoteCallTimeoutError(TimeoutError):
    def __init__(self, service_name: str, timeout_seconds: float) -> None:
        super().__init__(f"Call to {service_name} exceeded {timeout_seconds}s")
        self.service_name = service_name
        self.timeout_seconds = timeout_seconds


def _always(_exc: Exception) -> bool:
    return True


class ResilientRemoteCall:
    """Runs a remote operation under the breaker, retry policy and bulkhead of one service.

    Every attempt asks the service's breaker for permission first. Calls that are
    not permitted go straight to the fallback without touching the operation.
    Failures accepted by ``is_failure`` are recorded in the breaker and retried
    while ``should_retry`` allows and attempts remain; the fallback receives the
    original arguments plus the last failure once retries are exhausted. Any
    other exception propagates untouched and does not count against the breaker.
    ``timeout_seconds`` bounds each attempt, including the wait for a bulkhead slot.
    """

    def __init__(
        self,
        service_name: str,
        registry: CircuitBreakerRegistry,
        *,
        retry_policy: RetryPolicy | None = None,
        timeout_seconds: float = 5.0,
        is_failure: Callable[[Exception], bool] = _always,
        should_retry: Callable[[Exception], bool] = _always,
        bulkhead: Bulkhead | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.service_name = service_name
        self._registry = registry
        self._retry_policy = retry_policy or RetryPolicy()
        self._timeout_seconds = timeout_seconds
        self._is_failure = is_failure
        self._should_retry = should_retry
        self._bulkhead = bulkhead or Bulkhead()
        self._sleep = sleep

    @property
    def breaker(self) -> CircuitBreaker:
        return self._registry.get(self.service_name)

    @property
    def retry_policy(self) -> RetryPolicy:
        return self._retry_policy

    def with_retry_policy(self, retry_policy: RetryPolicy) -> ResilientRemoteCall:
        return ResilientRemoteCall(
            self.service_name,
            self._registry,
            retry_policy=retry_policy,
            timeout_seconds=self._timeout_seconds,
            is_failure=self._is_failure,
            should_retry=self._should_retry,
            bulkhead=self._bulkhead,
            sleep=self._sleep,
        )

    async def call(
        self,
        operation: Callable[..., Awaitable[T]],
        *args: Any,
        fallback: Fallback[T],
    ) -> T:
        try:
            return await retry_async(
                lambda: self._attempt(operation, args),
                should_retry=self._retryable,
                policy=self._retry_policy,
                sleep=self._sleep,
            )
        except CircuitBreakerOpenError as exc:
            return await self._run_fallback(fallback, args, exc)
        except Exception as exc:  # noqa: BLE001
            if not self._counts_as_failure(exc):
                raise
            return await self._run_fallback(fallback, args, exc)

    async def _attempt(self, operation: Callable[..., Awaitable[T]], args: tuple[Any, ...]) -> T:
        breaker = self.breaker
        generation = breaker.allow_call()
        # Anything that ends the attempt without an outcome, cancellation included,
        # hands the half-open permit back.
        record: Callable[[int | None], None] = breaker.on_ignored
        try:
            result = await asyncio.wait_for(
                self._limited(operation, args), timeout=self._timeout_seconds
            )
            record = breaker.on_success
            return result
        except TimeoutError as exc:
            record = breaker.on_failure
            raise RemoteCallTimeoutError(self.service_name, self._timeout_seconds) from exc
        except Exception as exc:
            if self._counts_as_failure(exc):
                record = breaker.on_failure
            raise
        finally:
            record(generation)

    async def _limited(self, operation: Callable[..., Awaitable[T]], args: tuple[Any, ...]) -> T:
        async with self._bulkhead.limit(self.service_name):
            return await operation(*args)

    def _counts_as_failure(self, exc: Exception) -> bool:
        return isinstance(exc, RemoteCallTimeoutError) or self._is_failure(exc)

    def _retryable(self, exc: Exception) -> bool:
        if isinstance(exc, CircuitBreakerOpenError):
            return False
        return self._counts_as_failure(exc) and self._should_retry(exc)

    async def _run_fallback(
        self, fallback: Fallback[T], args: tuple[Any, ...], exc: Exception
    ) -> T:
        result = fallback(*args, exc)
        if inspect.isawaitable(result):
            return await result
        return result
