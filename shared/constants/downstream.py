from __future__ import annotations

from dataclasses import dataclass

BENEFICIARIES_SERVICE = "beneficiariesService"
PAYMENT_PROCESSOR_SERVICE = "paymentProcessorService"


@dataclass(frozen=True)
class DownstreamProfile:
    service_name: str
    display_name: str


_DOWNSTREAM_PROFILES = {
    BENEFICIARIES_SERVICE: DownstreamProfile(
        service_name=BENEFICIARIES_SERVICE,
        display_name="Beneficiaries",
    ),
    PAYMENT_PROCESSOR_SERVICE: DownstreamProfile(
        service_name=PAYMENT_PROCESSOR_SERVICE,
        display_name="Payment Processor",
    ),
}


def get_downstream_profile(service_name: str) -> DownstreamProfile:
    return _DOWNSTREAM_PROFILES[service_name]


def display_name_for_service(service_name: str) -> str:
    return get_downstream_profile(service_name).display_name


def supported_service_names() -> list[str]:
    return list(_DOWNSTREAM_PROFILES)
