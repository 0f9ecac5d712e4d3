from shared.resilience.backoff import exponential_backoff
from shared.resilience.bulkhead import Bulkhead
from shared.resilience.circuit_breaker import (
    CircuitBreaker,
    CircuitBreakerConfig,
    CircuitBreakerOpenError,
    CircuitState,
)
from shared.resilience.registry import CircuitBreakerRegistry
from shared.resilience.remote_call import RemoteCallTimeoutError, ResilientRemoteCall
from shared.resilience.retry import NO_RETRY, RetryPolicy, retry_async

__all__ = [
    "NO_RETRY",
    "Bulkhead",
    "CircuitBreaker",
    "CircuitBreakerConfig",
    "CircuitBreakerOpenError",
    "CircuitBreakerRegistry",
    "CircuitState",
    "RemoteCallTimeoutError",
    "ResilientRemoteCall",
    "RetryPolicy",
    "exponential_backoff",
    "retry_async",
]
