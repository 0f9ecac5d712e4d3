from __future__ import annotations

import threading
from decimal import Decimal

from payment_consumer.core.errors import InvalidArgumentError
from shared.contracts import Account, AccountStatus
from shared.logging import CUSTOMER_ID, get_logger
from shared.utils import is_blank

logger = get_logger(__name__)


def demo_accounts() -> list[Account]:
    return [
        Account(
            customer_id="CUST001",
            account_number="ACC001",
            account_type="SAVINGS",
            balance=Decimal("10000.00"),
            currency="USD",
            status=AccountStatus.ACTIVE.value,
            customer_name="John Doe",
            email="john.doe@example.com",
            phone_number="+1234567890",
        ),
        Account(
            customer_id="CUST002",
            account_number="ACC002",
            account_type="CHECKING",
            balance=Decimal("5000.00"),
            currency="USD",
            status=AccountStatus.ACTIVE.value,
            customer_name="Jane Smith",
            email="jane.smith@example.com",
            phone_number="+1234567891",
        ),
        Account(
            customer_id="CUST003",
            account_number="ACC003",
            account_type="SAVINGS",
            balance=Decimal("15000.00"),
            currency="USD",
            status=AccountStatus.ACTIVE.value,
            customer_name="Bob Johnson",
            email="bob.johnson@example.com",
            phone_number="+1234567892",
        ),
    ]


class InMemoryAccountRepository:
    """Accounts keyed by customer id; safe to share between concurrent requests."""

    def __init__(self, accounts: list[Account] | None = None) -> None:
        self._accounts: dict[str, Account] = {}
        self._lock = threading.Lock()
        for account in accounts or []:
            self.save(account)

    def get_by_customer_id(self, customer_id: str | None) -> Account | None:
        if is_blank(customer_id):
            logger.warning("account_lookup_blank_customer_id")
            return None
        with self._lock:
            account = self._accounts.get(customer_id)
        if account is None:
            logger.warning("account_not_found", extra={"extra_fields": {CUSTOMER_ID: customer_id}})
        return account

    def save(self, account: Account) -> Account:
        if account is None:
            raise InvalidArgumentError("Account cannot be null")
        if is_blank(account.customer_id):
            raise InvalidArgumentError("Customer ID cannot be null or empty")
        with self._lock:
            self._accounts[account.customer_id] = account
        logger.info("account_saved", extra={"extra_fields": {CUSTOMER_ID: account.customer_id}})
        return account

    def count(self) -> int:
        with self._lock:
            return len(self._accounts)


def build_account_repository(seed_demo_accounts: bool = True) -> InMemoryAccountRepository:
    repository = InMemoryAccountRepository(demo_accounts() if seed_demo_accounts else None)
    logger.info("accounts_initialized", extra={"extra_fields": {"count": repository.count()}})
    return repository
