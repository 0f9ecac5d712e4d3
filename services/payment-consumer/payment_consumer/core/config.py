from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from shared.constants import BENEFICIARIES_SERVICE, PAYMENT_PROCESSOR_SERVICE
from shared.resilience import CircuitBreakerConfig, RetryPolicy


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    service_name: str = "payment-consumer"
    app_env: str = "local"
    log_level: str = "INFO"
    api_prefix: str = "/api/v1/consumer"
    seed_demo_accounts: bool = True

    beneficiaries_base_url: str = "http://localhost:8080"
    beneficiaries_base_path: str = "/api/v1/beneficiaries"
    beneficiaries_timeout_seconds: float = Field(default=3.0, gt=0)
    beneficiaries_retry_max_attempts: int = Field(default=3, ge=1)
    beneficiaries_retry_base_seconds: float = Field(default=0.5, ge=0)

    payment_processor_base_url: str = "http://localhost:8081"
    payment_processor_base_path: str = "/api/payments"
    payment_processor_timeout_seconds: float = Field(default=5.0, gt=0)
    payment_processor_retry_max_attempts: int = Field(default=3, ge=1)
    payment_processor_retry_base_seconds: float = Field(default=0.5, ge=0)
    payment_submit_retry_max_attempts: int = Field(default=2, ge=1)

    retry_cap_seconds: float = Field(default=5.0, gt=0)
    retry_multiplier: float = Field(default=2.0, ge=1)
    retry_jitter: float = Field(default=0.1, ge=0, le=1)

    breaker_failure_rate_threshold: float = Field(default=50.0, gt=0, le=100)
    breaker_sliding_window_size: int = Field(default=10, ge=1)
    breaker_minimum_number_of_calls: int = Field(default=5, ge=1)
    breaker_half_open_permitted_calls: int = Field(default=1, ge=1)
    beneficiaries_breaker_open_seconds: float = Field(default=10.0, ge=0)
    payment_processor_breaker_open_seconds: float = Field(default=30.0, ge=0)

    bulkhead_limit_per_service: int = Field(default=25, ge=1)

    def _breaker_config(self, open_seconds: float) -> CircuitBreakerConfig:
        return CircuitBreakerConfig(
            failure_rate_threshold=self.breaker_failure_rate_threshold,
            sliding_window_size=self.breaker_sliding_window_size,
            minimum_number_of_calls=min(
                self.breaker_minimum_number_of_calls, self.breaker_sliding_window_size
            ),
            recovery_timeout_seconds=open_seconds,
            permitted_calls_in_half_open=self.breaker_half_open_permitted_calls,
        )

    def breaker_configs(self) -> dict[str, CircuitBreakerConfig]:
        return {
            BENEFICIARIES_SERVICE: self._breaker_config(self.beneficiaries_breaker_open_seconds),
            PAYMENT_PROCESSOR_SERVICE: self._breaker_config(
                self.payment_processor_breaker_open_seconds
            ),
        }

    def _retry_policy(self, max_attempts: int, base_seconds: float) -> RetryPolicy:
        return RetryPolicy(
            max_attempts=max_attempts,
            base_seconds=base_seconds,
            cap_seconds=self.retry_cap_seconds,
            multiplier=self.retry_multiplier,
            jitter=self.retry_jitter,
        )

    def read_retry_policy(self, service_name: str) -> RetryPolicy:
        if service_name == BENEFICIARIES_SERVICE:
            return self._retry_policy(
                self.beneficiaries_retry_max_attempts, self.beneficiaries_retry_base_seconds
            )
        if service_name == PAYMENT_PROCESSOR_SERVICE:
            return self._retry_policy(
                self.payment_processor_retry_max_attempts,
                self.payment_processor_retry_base_seconds,
            )
        raise KeyError(f"Unknown downstream service: {service_name}")

    def submit_retry_policy(self) -> RetryPolicy:
        return self._retry_policy(
            self.payment_submit_retry_max_attempts, self.payment_processor_retry_base_seconds
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
