from __future__ import annotations

import random


def exponential_backoff(
    attempt: int,
    base_seconds: float = 0.05,
    cap_seconds: float = 2.0,
    jitter: float = 0.25,
    multiplier: float = 2.0,
) -> float:
    raw = min(cap_seconds, base_seconds * (multiplier ** max(0, attempt - 1)))
    if not jitter:
        return max(0.0, raw)
    spread = raw * jitter
    return max(0.0, raw + random.uniform(-spread, spread))
