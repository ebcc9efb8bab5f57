"""Time-boxed memoization for analytics results."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any

from ..config import settings

logger = logging.getLogger(__name__)

ALL_PROGRAMS = "all"


@dataclass(frozen=True)
class CacheKey:
    """Identifies one analytics result.

    ``scope`` is ("year", y), ("month", y, m) or ("range", start, end);
    ``program`` is a program id or "all".
    """

    kind: str
    user_id: str
    scope: tuple
    program: str = ALL_PROGRAMS

    @classmethod
    def for_year(cls, kind: str, user_id: str, year: int, program_id: str | None = None):
        return cls(kind, user_id, ("year", year), program_id or ALL_PROGRAMS)

    @classmethod
    def for_month(
        cls, kind: str, user_id: str, year: int, month: int, program_id: str | None = None
    ):
        return cls(kind, user_id, ("month", year, month), program_id or ALL_PROGRAMS)

    @classmethod
    def for_range(
        cls,
        kind: str,
        user_id: str,
        start: date | datetime,
        end: date | datetime,
        program_id: str | None = None,
    ):
        return cls(kind, user_id, ("range", start, end), program_id or ALL_PROGRAMS)


@dataclass
class _Entry:
    value: Any
    stored_at: datetime


class AnalyticsCache:
    """In-memory TTL cache with lazy expiry.

    Concurrent requests for the same key share one computation. Failed
    computations are not stored.
    """

    def __init__(
        self,
        ttl: timedelta | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.ttl = ttl if ttl is not None else timedelta(
            seconds=settings.analytics_cache_ttl_seconds
        )
        self._clock = clock or datetime.now
        self._entries: dict[CacheKey, _Entry] = {}
        self._in_flight: dict[CacheKey, asyncio.Task] = {}
        # Bumped on invalidation so computations started earlier are not stored
        self._generation = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: CacheKey) -> bool:
        return self.get(key) is not None

    def get(self, key: CacheKey) -> Any | None:
        """Return a fresh value, dropping it if it has expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() - entry.stored_at >= self.ttl:
            del self._entries[key]
            return None
        return entry.value

    def put(self, key: CacheKey, value: Any) -> None:
        self._entries[key] = _Entry(value=value, stored_at=self._clock())

    async def get_or_compute(self, key: CacheKey, factory: Callable[[], Awaitable[Any]]) -> Any:
        """Return the cached value for key, computing it on a miss."""
        cached = self.get(key)
        if cached is not None:
            return cached

        task = self._in_flight.get(key)
        if task is None:
            logger.debug("Analytics cache miss: %s", key)
            task = asyncio.ensure_future(self._compute(key, factory))
            self._in_flight[key] = task
        return await asyncio.shield(task)

    async def _compute(self, key: CacheKey, factory: Callable[[], Awaitable[Any]]) -> Any:
        generation = self._generation
        try:
            value = await factory()
            if generation == self._generation:
                self.put(key, value)
            return value
        finally:
            if self._in_flight.get(key) is asyncio.current_task():
                del self._in_flight[key]

    def clear(self) -> None:
        """Drop every entry."""
        self._entries.clear()
        self._in_flight.clear()
        self._generation += 1

    def invalidate_user(self, user_id: str) -> None:
        """Drop every entry belonging to one user."""
        for key in [k for k in self._entries if k.user_id == user_id]:
            del self._entries[key]
        for key in [k for k in self._in_flight if k.user_id == user_id]:
            del self._in_flight[key]
        self._generation += 1
