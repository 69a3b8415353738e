"""Per-user, per-action quota for post and comment writes."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from sportsapp.moderation.domain.counter_store import CounterStore, MemoryCounterStore
from sportsapp.moderation.domain.models import RateLimitType
from sportsapp.obs import metrics
from sportsapp.settings import Settings, settings as default_settings

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 10


def counter_key(user_id: str, action: RateLimitType | str) -> str:
    name = action.value if isinstance(action, RateLimitType) else str(action)
    return f"RateLimit_{name}_{user_id}"


class RateLimitService:
    """Grants write actions until the hourly budget for the key is spent.

    A single lock serialises every read-modify-write, across all keys, so two
    concurrent requests can never both take the last slot.
    """

    def __init__(
        self,
        store: Optional[CounterStore] = None,
        *,
        config: Optional[Settings] = None,
    ) -> None:
        self._store = store if store is not None else MemoryCounterStore()
        self._config = config or default_settings
        self._lock = asyncio.Lock()

    @property
    def enabled(self) -> bool:
        return self._config.rate_limiting_enabled

    def limit_for(self, action: RateLimitType | str) -> int:
        if action == RateLimitType.POST:
            return self._config.rate_limiting_posts_per_hour
        if action == RateLimitType.COMMENT:
            return self._config.rate_limiting_comments_per_hour
        return DEFAULT_LIMIT

    async def is_allowed(self, user_id: str, action: RateLimitType | str) -> bool:
        if not self.enabled:
            return True

        limit = self.limit_for(action)
        key = counter_key(user_id, action)
        async with self._lock:
            current = await self._store.get(key) or 0
            if current >= limit:
                allowed = False
            else:
                await self._store.set(key, current + 1)
                allowed = True

        label = action.value if isinstance(action, RateLimitType) else str(action)
        metrics.inc_rate_limit(label, allowed)
        if not allowed:
            logger.info("rate limit reached", extra={"action": label, "limit": limit})
        return allowed

    async def get_remaining_count(self, user_id: str, action: RateLimitType | str) -> int:
        limit = self.limit_for(action)
        current = await self._store.get(counter_key(user_id, action))
        if current is None:
            return limit
        return max(0, limit - current)
