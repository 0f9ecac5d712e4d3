from shared.utils.ids import new_idempotency_key, new_request_id
from shared.utils.time import utc_now
from shared.utils.validation import (
    ensure_currency_code,
    is_blank,
    require_keys,
    require_positive_amount,
    require_text,
)

__all__ = [
    "ensure_currency_code",
    "is_blank",
    "new_idempotency_key",
    "new_request_id",
    "require_keys",
    "require_positive_amount",
    "require_text",
    "utc_now",
]
