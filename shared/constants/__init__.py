from shared.constants.downstream import (
    BENEFICIARIES_SERVICE,
    PAYMENT_PROCESSOR_SERVICE,
    DownstreamProfile,
    display_name_for_service,
    get_downstream_profile,
    supported_service_names,
)

__all__ = [
    "BENEFICIARIES_SERVICE",
    "PAYMENT_PROCESSOR_SERVICE",
    "DownstreamProfile",
    "display_name_for_service",
    "get_downstream_profile",
    "supported_service_names",
]
