from __future__ import annotations

import asyncio
from collections import defaultdict
from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager


class Bulkhead:
    """Caps concurrent calls per downstream service name."""

    def __init__(
        self, limit_per_key: int = 10, limits: Mapping[str, int] | None = None
    ) -> None:
        self._limit_per_key = limit_per_key
        self._limits = dict(limits or {})
        self._semaphores: dict[str, asyncio.Semaphore] = {}
        self._in_flight: defaultdict[str, int] = defaultdict(int)

    def limit_for(self, key: str) -> int:
        return self._limits.get(key, self._limit_per_key)

    def in_flight(self, key: str) -> int:
        return self._in_flight[key]

    def _semaphore(self, key: str) -> asyncio.Semaphore:
        semaphore = self._semaphores.get(key)
        if semaphore is None:
            semaphore = asyncio.Semaphore(self.limit_for(key))
            self._semaphores[key] = semaphore
        return semaphore

    @asynccontextmanager
    async def limit(self, key: str) -> AsyncIterator[None]:
        async with self._semaphore(key):
            self._in_flight[key] += 1
            try:
                yield
            finally:
                self._in_flight[key] -= 1
