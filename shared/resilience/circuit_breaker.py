from __future__ import annotations

import threading
import time
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum


class CircuitBreakerOpenError(RuntimeError):
    """Raised when the breaker does not permit a call."""

    def __init__(self, service_name: str, state: str) -> None:
        super().__init__(f"Circuit for {service_name} is {state}; call not permitted")
        self.service_name = service_name
        self.state = state


class CircuitState(str, Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


@dataclass(frozen=True)
class CircuitBreakerConfig:
    failure_rate_threshold: float = 50.0
    sliding_window_size: int = 10
    minimum_number_of_calls: int = 5
    recovery_timeout_seconds: float = 10.0
    permitted_calls_in_half_open: int = 1

    def __post_init__(self) -> None:
        if not 0 < self.failure_rate_threshold <= 100:
            raise ValueError("failure_rate_threshold must be within (0, 100]")
        if self.sliding_window_size < 1:
            raise ValueError("sliding_window_size must be at least 1")
        if not 1 <= self.minimum_number_of_calls <= self.sliding_window_size:
            raise ValueError("minimum_number_of_calls must be within [1, sliding_window_size]")
        if self.recovery_timeout_seconds < 0:
            raise ValueError("recovery_timeout_seconds must not be negative")
        if self.permitted_calls_in_half_open < 1:
            raise ValueError("permitted_calls_in_half_open must be at least 1")


class CircuitBreaker:
    """Count-based circuit breaker shared by every caller of one downstream service.

    CLOSED records the outcome of the last ``sliding_window_size`` calls and trips
    OPEN once at least ``minimum_number_of_calls`` outcomes are known and the failure
    rate reaches ``failure_rate_threshold``. OPEN rejects calls until
    ``recovery_timeout_seconds`` have elapsed, then admits up to
    ``permitted_calls_in_half_open`` probes. A failed probe re-opens the circuit;
    when every permitted probe succeeds the circuit closes with an empty window.

    All transitions happen under one lock, so concurrent success and failure
    reports observe a consistent state.
    """

    def __init__(
        self,
        name: str = "default",
        config: CircuitBreakerConfig | None = None,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.name = name
        self._config = config or CircuitBreakerConfig()
        self._clock = clock
        self._lock = threading.Lock()
        self._state = CircuitState.CLOSED
        self._outcomes: deque[bool] = deque(maxlen=self._config.sliding_window_size)
        self._opened_at: float | None = None
        self._half_open_in_flight = 0
        self._half_open_successes = 0
        self._generation = 0

    @property
    def config(self) -> CircuitBreakerConfig:
        return self._config

    @property
    def state(self) -> str:
        with self._lock:
            self._maybe_half_open()
            return self._state.value

    @property
    def failure_rate(self) -> float:
        with self._lock:
            return self._failure_rate()

    def allow_call(self) -> int:
        """Admits a call and returns the generation it was admitted under.

        Passing that generation back to ``on_success``, ``on_failure`` or
        ``on_ignored`` drops outcomes of calls admitted before the last state
        change, so a slow call from the CLOSED period cannot settle a probe.
        """
        with self._lock:
            self._maybe_half_open()
            if self._state == CircuitState.OPEN:
                raise CircuitBreakerOpenError(self.name, self._state.value)
            if self._state == CircuitState.HALF_OPEN:
                if self._half_open_in_flight >= self._config.permitted_calls_in_half_open:
                    raise CircuitBreakerOpenError(self.name, self._state.value)
                self._half_open_in_flight += 1
            return self._generation

    def on_success(self, generation: int | None = None) -> None:
        with self._lock:
            if self._state == CircuitState.OPEN or self._is_stale(generation):
                return
            if self._state == CircuitState.HALF_OPEN:
                self._half_open_successes += 1
                if self._half_open_successes >= self._config.permitted_calls_in_half_open:
                    self._close()
                return
            self._outcomes.append(True)

    def on_failure(self, generation: int | None = None) -> None:
        with self._lock:
            if self._state == CircuitState.OPEN or self._is_stale(generation):
                return
            if self._state == CircuitState.HALF_OPEN:
                self._trip_open()
                return
            self._outcomes.append(False)
            if self._threshold_exceeded():
                self._trip_open()

    def on_ignored(self, generation: int | None = None) -> None:
        """Give back a half-open permit for a call whose outcome does not count."""
        with self._lock:
            if self._is_stale(generation):
                return
            if self._state == CircuitState.HALF_OPEN and self._half_open_in_flight > 0:
                self._half_open_in_flight -= 1

    def reset(self) -> None:
        with self._lock:
            self._close()

    def _is_stale(self, generation: int | None) -> bool:
        return generation is not None and generation != self._generation

    def _threshold_exceeded(self) -> bool:
        if len(self._outcomes) < self._config.minimum_number_of_calls:
            return False
        return self._failure_rate() >= self._config.failure_rate_threshold

    def _failure_rate(self) -> float:
        if not self._outcomes:
            return 0.0
        failures = sum(1 for succeeded in self._outcomes if not succeeded)
        return failures * 100.0 / len(self._outcomes)

    def _trip_open(self) -> None:
        self._generation += 1
        self._state = CircuitState.OPEN
        self._opened_at = self._clock()
        self._outcomes.clear()
        self._half_open_in_flight = 0
        self._half_open_successes = 0

    def _close(self) -> None:
        self._generation += 1
        self._state = CircuitState.CLOSED
        self._opened_at = None
        self._outcomes.clear()
        self._half_open_in_flight = 0
        self._half_open_successes = 0

    def _maybe_half_open(self) -> None:
        if self._state != CircuitState.OPEN or self._opened_at is None:
            return
        if self._clock() - self._opened_at >= self._config.recovery_timeout_seconds:
            self._generation += 1
            self._state = CircuitState.HALF_OPEN
            self._half_open_in_flight = 0
            self._half_open_successes = 0
