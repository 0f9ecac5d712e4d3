from __future__ import annotations

import threading
import time
from collections.abc import Callable, Mapping

from shared.resilience.circuit_breaker import CircuitBreaker, CircuitBreakerConfig


class CircuitBreakerRegistry:
    """Process-wide mapping of downstream service name to its circuit breaker."""

    def __init__(
        self,
        configs: Mapping[str, CircuitBreakerConfig] | None = None,
        *,
        default_config: CircuitBreakerConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._configs = dict(configs or {})
        self._default_config = default_config or CircuitBreakerConfig()
        self._clock = clock
        self._breakers: dict[str, CircuitBreaker] = {}
        self._lock = threading.Lock()

    def get(self, service_name: str) -> CircuitBreaker:
        with self._lock:
            breaker = self._breakers.get(service_name)
            if breaker is None:
                config = self._configs.get(service_name, self._default_config)
                breaker = CircuitBreaker(service_name, config, clock=self._clock)
                self._breakers[service_name] = breaker
            return breaker

    def snapshot(self) -> dict[str, str]:
        with self._lock:
            breakers = dict(self._breakers)
        return {name: breaker.state for name, breaker in sorted(breakers.items())}

    def reset_all(self) -> None:
        with self._lock:
            breakers = list(self._breakers.values())
        for breaker in breakers:
            breaker.reset()
