from tests.helpers.app import (
    build_app_with_router,
    build_consumer_app,
    build_test_settings,
    create_test_client,
    override_dependencies,
)
from tests.helpers.assertions import assert_error_payload
from tests.helpers.factories import (
    make_account,
    make_beneficiary,
    make_payment_json,
    make_payment_request,
    make_payment_response,
    make_processor_payload,
)
from tests.helpers.fakes import (
    FakeBeneficiaryGateway,
    FakeClock,
    FakePaymentGateway,
    RecordingHandler,
    no_sleep,
)

__all__ = [
    "FakeBeneficiaryGateway",
    "FakeClock",
    "FakePaymentGateway",
    "RecordingHandler",
    "assert_error_payload",
    "build_app_with_router",
    "build_consumer_app",
    "build_test_settings",
    "create_test_client",
    "make_account",
    "make_beneficiary",
    "make_payment_json",
    "make_payment_request",
    "make_payment_response",
    "make_processor_payload",
    "no_sleep",
    "override_dependencies",
]
