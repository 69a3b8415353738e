"""Lightweight service container shared by moderation modules."""

from __future__ import annotations

from typing import Optional

from sportsapp.moderation.domain.counter_store import CounterStore, MemoryCounterStore, RedisCounterStore
from sportsapp.moderation.domain.groq_client import ClassifierGateway, GroqClient
from sportsapp.moderation.domain.pipeline import ContentModerationService
from sportsapp.moderation.domain.rate_limit import RateLimitService
from sportsapp.moderation.domain.write_gate import WriteGate
from sportsapp.infra.redis import redis_client
from sportsapp.settings import settings


def _default_store() -> CounterStore:
    if settings.rate_limiting_backend == "redis":
        return RedisCounterStore(redis_client)
    return MemoryCounterStore()


_gateway: Optional[ClassifierGateway] = GroqClient()
_rate_limiter = RateLimitService(_default_store())
_moderation = ContentModerationService(gateway=_gateway)
_write_gate = WriteGate(rate_limiter=_rate_limiter, moderation=_moderation)


def configure(
    *,
    store: Optional[CounterStore] = None,
    gateway: Optional[ClassifierGateway] = None,
) -> None:
    """Rebuild the shared services, e.g. with a fresh store or a stub gateway."""
    global _gateway, _rate_limiter, _moderation, _write_gate
    _gateway = gateway if gateway is not None else GroqClient()
    _rate_limiter = RateLimitService(store if store is not None else _default_store())
    _moderation = ContentModerationService(gateway=_gateway)
    _write_gate = WriteGate(rate_limiter=_rate_limiter, moderation=_moderation)


def get_rate_limiter() -> RateLimitService:
    return _rate_limiter


def get_moderation_service() -> ContentModerationService:
    return _moderation


def get_write_gate() -> WriteGate:
    return _write_gate


async def shutdown() -> None:
    if isinstance(_gateway, GroqClient):
        await _gateway.aclose()
