from __future__ import annotations

from shared.resilience import CircuitBreakerConfig, CircuitBreakerRegistry


def test_registry_returns_same_breaker_per_service() -> None:
    registry = CircuitBreakerRegistry()

    assert registry.get("paymentProcessorService") is registry.get("paymentProcessorService")
    assert registry.get("paymentProcessorService") is not registry.get("beneficiariesService")


def test_registry_applies_service_specific_config() -> None:
    processor_config = CircuitBreakerConfig(recovery_timeout_seconds=30.0)
    registry = CircuitBreakerRegistry({"paymentProcessorService": processor_config})

    assert registry.get("paymentProcessorService").config is processor_config
    assert registry.get("beneficiariesService").config.recovery_timeout_seconds == 10.0


def test_registry_snapshot_and_reset_all() -> None:
    config = CircuitBreakerConfig(sliding_window_size=1, minimum_number_of_calls=1)
    registry = CircuitBreakerRegistry(default_config=config)
    registry.get("paymentProcessorService").on_failure()
    registry.get("beneficiariesService")

    assert registry.snapshot() == {
        "beneficiariesService": "closed",
        "paymentProcessorService": "open",
    }

    registry.reset_all()

    assert set(registry.snapshot().values()) == {"closed"}
