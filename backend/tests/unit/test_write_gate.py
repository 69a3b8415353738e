from __future__ import annotations

import warnings

import pytest

from sportsapp.moderation.domain.counter_store import MemoryCounterStore
from sportsapp.moderation.domain.models import ModerationLevel, RateLimitType
from sportsapp.moderation.domain.pipeline import EMPTY_CONTENT_REASON, ContentModerationService
from sportsapp.moderation.domain.rate_limit import RateLimitService
from sportsapp.moderation.domain.write_gate import RATE_LIMITED_MESSAGE, WriteDenied, WriteGate
from sportsapp.settings import Settings


class StubGateway:
    def __init__(self, reply: str = "APPROVED") -> None:
        self.reply = reply
        self.calls = 0

    async def complete(self, prompt: str, max_tokens: int = 150) -> str:
        self.calls += 1
        return self.reply


def _gate(*, posts: int = 2, gateway: StubGateway | None = None, max_level=ModerationLevel.AI_ANALYSIS):
    config = Settings(rate_limiting_posts_per_hour=posts, groq_api_enabled=True)
    limiter = RateLimitService(MemoryCounterStore(), config=config)
    moderation = ContentModerationService(gateway=gateway, config=config)
    return WriteGate(rate_limiter=limiter, moderation=moderation, max_level=max_level), limiter


@pytest.mark.asyncio
async def test_clean_write_passes_and_reports_remaining() -> None:
    gate, _ = _gate(posts=3)
    decision = await gate.check("alice", RateLimitType.POST, "Lovely pass in the second half")
    assert decision.allowed
    assert decision.remaining == 2
    assert decision.moderation is not None and decision.moderation.approved


@pytest.mark.asyncio
async def test_blocked_content_still_spends_quota() -> None:
    gate, limiter = _gate(posts=2)
    decision = await gate.check("alice", RateLimitType.POST, "Ești un prost")
    assert not decision.allowed
    assert decision.code == "content_blocked"
    assert decision.message == decision.moderation.reason
    assert await limiter.get_remaining_count("alice", RateLimitType.POST) == 1


@pytest.mark.asyncio
async def test_rate_limit_checked_before_moderation() -> None:
    gateway = StubGateway(reply="BLOCKED: spam")
    gate, _ = _gate(posts=1, gateway=gateway)
    await gate.check("alice", RateLimitType.POST, "first")
    assert gateway.calls == 1

    decision = await gate.check("alice", RateLimitType.POST, "second")
    assert not decision.allowed
    assert decision.code == "rate_limited"
    assert decision.message == RATE_LIMITED_MESSAGE
    assert decision.remaining == 0
    assert decision.moderation is None
    assert gateway.calls == 1


@pytest.mark.asyncio
async def test_gate_honours_max_level() -> None:
    gateway = StubGateway(reply="BLOCKED: spam")
    gate, _ = _gate(gateway=gateway, max_level=ModerationLevel.LOCAL_FILTER)
    decision = await gate.check("alice", RateLimitType.POST, "buy followers now")
    assert decision.allowed
    assert gateway.calls == 0


@pytest.mark.asyncio
async def test_enforce_raises_429_when_rate_limited() -> None:
    gate, _ = _gate(posts=1)
    await gate.enforce("alice", RateLimitType.POST, "first")
    with pytest.raises(WriteDenied) as exc:
        await gate.enforce("alice", RateLimitType.POST, "second")
    assert exc.value.status_code == 429
    assert exc.value.error_code == "rate_limited"
    assert exc.value.detail["remaining"] == 0


@pytest.mark.asyncio
async def test_enforce_raises_422_with_reason_verbatim() -> None:
    gate, _ = _gate()
    with pytest.raises(WriteDenied) as exc:
        await gate.enforce("alice", RateLimitType.POST, "   ")
    assert exc.value.status_code == 422
    assert exc.value.error_code == "content_blocked"
    assert exc.value.message == EMPTY_CONTENT_REASON


@pytest.mark.asyncio
async def test_content_blocked_denial_emits_no_warnings() -> None:
    gate, _ = _gate()
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        with pytest.raises(WriteDenied) as exc:
            await gate.enforce("alice", RateLimitType.COMMENT, "   ")
    assert exc.value.status_code == 422
