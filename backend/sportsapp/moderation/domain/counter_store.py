"""Time-evicting counter stores backing the write-path rate limiter.

Entries expire at whichever comes first: a fixed lifetime measured from the
most recent write, or an idle timeout measured from the most recent access.
Reads refresh the idle timer; writes refresh both.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import timedelta
from typing import Callable, Dict, Optional, Protocol

from redis.asyncio import Redis

from sportsapp.infra.redis import RedisProxy, redis_client

ABSOLUTE_TTL = timedelta(hours=1)
SLIDING_TTL = timedelta(minutes=30)

Clock = Callable[[], float]


class CounterStore(Protocol):
    """Minimal key/value surface needed by the rate limiter."""

    async def get(self, key: str) -> Optional[int]:
        ...

    async def set(self, key: str, value: int) -> None:
        ...


@dataclass(slots=True)
class _Entry:
    value: int
    absolute_deadline: float
    sliding_deadline: float


class MemoryCounterStore(CounterStore):
    """In-process store with an injectable clock for deterministic tests.

    Writes sweep out every expired entry, at most once per sliding interval, so
    keys that are never read again do not accumulate.
    """

    def __init__(
        self,
        *,
        absolute_ttl: timedelta = ABSOLUTE_TTL,
        sliding_ttl: timedelta = SLIDING_TTL,
        clock: Clock = time.monotonic,
    ) -> None:
        self._absolute = absolute_ttl.total_seconds()
        self._sliding = sliding_ttl.total_seconds()
        self._clock = clock
        self._entries: Dict[str, _Entry] = {}
        self._next_sweep = clock() + self._sliding

    def _expired(self, entry: _Entry, now: float) -> bool:
        return now >= entry.absolute_deadline or now >= entry.sliding_deadline

    async def get(self, key: str) -> Optional[int]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        now = self._clock()
        if self._expired(entry, now):
            del self._entries[key]
            return None
        entry.sliding_deadline = now + self._sliding
        return entry.value

    async def set(self, key: str, value: int) -> None:
        now = self._clock()
        if now >= self._next_sweep:
            self._sweep(now)
        self._entries[key] = _Entry(
            value=value,
            absolute_deadline=now + self._absolute,
            sliding_deadline=now + self._sliding,
        )

    def _sweep(self, now: float) -> int:
        self._next_sweep = now + self._sliding
        stale = [key for key, entry in self._entries.items() if self._expired(entry, now)]
        for key in stale:
            del self._entries[key]
        return len(stale)

    def purge(self) -> int:
        """Drop every expired entry and return how many were removed."""
        return self._sweep(self._clock())

    def __len__(self) -> int:
        return len(self._entries)


class RedisCounterStore(CounterStore):
    """Shares counters across processes.

    The counter key carries the absolute TTL. A companion ``:idle`` key carries
    the sliding TTL and is refreshed on every access; once it lapses the counter
    is treated as evicted.
    """

    def __init__(
        self,
        redis: Redis | RedisProxy | None = None,
        *,
        namespace: str = "rl:",
        absolute_ttl: timedelta = ABSOLUTE_TTL,
        sliding_ttl: timedelta = SLIDING_TTL,
    ) -> None:
        self._redis = redis or redis_client
        self._namespace = namespace
        self._absolute = max(1, int(absolute_ttl.total_seconds()))
        self._sliding = max(1, int(sliding_ttl.total_seconds()))

    def _key(self, key: str) -> str:
        return f"{self._namespace}{key}"

    def _idle_key(self, key: str) -> str:
        return f"{self._namespace}{key}:idle"

    async def get(self, key: str) -> Optional[int]:
        counter_key = self._key(key)
        idle_key = self._idle_key(key)
        raw = await self._redis.get(counter_key)
        if raw is None:
            return None
        touched = await self._redis.expire(idle_key, self._sliding)
        if not touched:
            await self._redis.delete(counter_key)
            return None
        return int(raw)

    async def set(self, key: str, value: int) -> None:
        async with self._redis.pipeline(transaction=True) as pipe:
            pipe.set(self._key(key), int(value), ex=self._absolute)
            pipe.set(self._idle_key(key), 1, ex=self._sliding)
            await pipe.execute()
