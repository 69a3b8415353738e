"""Write gate run by the post and comment write paths before persisting."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from fastapi import HTTPException, status

from sportsapp.moderation.domain.models import ModerationLevel, ModerationResult, RateLimitType
from sportsapp.moderation.domain.pipeline import ContentModerationService
from sportsapp.moderation.domain.rate_limit import RateLimitService
from sportsapp.obs import metrics

RATE_LIMITED_MESSAGE = "You are posting too quickly. Please try again later."


class WriteDenied(HTTPException):
    """Raised when a write is refused; carries a stable error code for clients."""

    def __init__(self, status_code: int, error_code: str, message: str, *, remaining: Optional[int] = None) -> None:
        detail: dict[str, object] = {"code": error_code, "message": message}
        if remaining is not None:
            detail["remaining"] = remaining
        super().__init__(status_code=status_code, detail=detail)
        self.error_code = error_code
        self.message = message


@dataclass(frozen=True)
class GateDecision:
    allowed: bool
    code: Optional[str] = None
    message: Optional[str] = None
    remaining: int = 0
    moderation: Optional[ModerationResult] = None


class WriteGate:
    """Rate limit first, then moderate; only a double pass lets the write through.

    Quota spent on content that moderation later rejects is not refunded.
    """

    def __init__(
        self,
        *,
        rate_limiter: RateLimitService,
        moderation: ContentModerationService,
        max_level: ModerationLevel = ModerationLevel.AI_ANALYSIS,
    ) -> None:
        self._rate_limiter = rate_limiter
        self._moderation = moderation
        self._max_level = max_level

    async def check(self, user_id: str, action: RateLimitType, text: Optional[str]) -> GateDecision:
        if not await self._rate_limiter.is_allowed(user_id, action):
            remaining = await self._rate_limiter.get_remaining_count(user_id, action)
            metrics.inc_write_gate_denial(action.value, "rate_limited")
            return GateDecision(
                allowed=False,
                code="rate_limited",
                message=RATE_LIMITED_MESSAGE,
                remaining=remaining,
            )

        result = await self._moderation.moderate(text, self._max_level)
        remaining = await self._rate_limiter.get_remaining_count(user_id, action)
        if not result.approved:
            metrics.inc_write_gate_denial(action.value, "content_blocked")
            return GateDecision(
                allowed=False,
                code="content_blocked",
                message=result.reason,
                remaining=remaining,
                moderation=result,
            )
        return GateDecision(allowed=True, remaining=remaining, moderation=result)

    async def enforce(self, user_id: str, action: RateLimitType, text: Optional[str]) -> GateDecision:
        decision = await self.check(user_id, action, text)
        if decision.allowed:
            return decision
        if decision.code == "rate_limited":
            raise WriteDenied(
                status.HTTP_429_TOO_MANY_REQUESTS,
                "rate_limited",
                decision.message or RATE_LIMITED_MESSAGE,
                remaining=decision.remaining,
            )
        raise WriteDenied(
            422,
            "content_blocked",
            decision.message or "",
        )
