from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, status
from pydantic import BaseModel, Field

from sportsapp.moderation.domain import container
from sportsapp.moderation.domain.models import ModerationLevel, ModerationResult, RateLimitType
from sportsapp.moderation.domain.pipeline import ContentModerationService
from sportsapp.moderation.domain.rate_limit import RateLimitService
from sportsapp.moderation.domain.write_gate import WriteGate

router = APIRouter(prefix="/api/mod/v1", tags=["moderation"])


class ModerationCheckIn(BaseModel):
    text: Optional[str] = Field(default=None, max_length=10000)
    max_level: ModerationLevel = ModerationLevel.AI_ANALYSIS


class ModerationResultOut(BaseModel):
    approved: bool
    reason: Optional[str] = None
    level: str
    confidence_score: float

    @classmethod
    def from_result(cls, result: ModerationResult) -> "ModerationResultOut":
        return cls(
            approved=result.approved,
            reason=result.reason,
            level=result.level.name.lower(),
            confidence_score=result.confidence_score,
        )


class QuotaOut(BaseModel):
    action: RateLimitType
    limit: int
    remaining: int


class SubmissionIn(BaseModel):
    text: Optional[str] = Field(default=None, max_length=10000)


class SubmissionOut(BaseModel):
    accepted: bool
    remaining: int
    moderation: ModerationResultOut


def require_user_id(x_user_id: Optional[str] = Header(default=None, alias="X-User-Id")) -> str:
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, detail="missing_user")
    return x_user_id.strip()


@router.post("/check", response_model=ModerationResultOut)
async def check_text(
    payload: ModerationCheckIn,
    moderation: ContentModerationService = Depends(container.get_moderation_service),
) -> ModerationResultOut:
    """Preview a moderation verdict without spending quota."""
    result = await moderation.moderate(payload.text, payload.max_level)
    return ModerationResultOut.from_result(result)


@router.get("/quota/{action}", response_model=QuotaOut)
async def get_quota(
    action: RateLimitType,
    user_id: str = Depends(require_user_id),
    limiter: RateLimitService = Depends(container.get_rate_limiter),
) -> QuotaOut:
    remaining = await limiter.get_remaining_count(user_id, action)
    return QuotaOut(action=action, limit=limiter.limit_for(action), remaining=remaining)


@router.post("/submissions/{action}", response_model=SubmissionOut)
async def submit(
    action: RateLimitType,
    payload: SubmissionIn,
    user_id: str = Depends(require_user_id),
    gate: WriteGate = Depends(container.get_write_gate),
) -> SubmissionOut:
    """Spend one unit of quota and moderate the text, as a write path would before persisting."""
    decision = await gate.enforce(user_id, action, payload.text)
    return SubmissionOut(
        accepted=True,
        remaining=decision.remaining,
        moderation=ModerationResultOut.from_result(decision.moderation),  # type: ignore[arg-type]
    )
