"""Value objects shared by the moderation pipeline and the rate limiter."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional


class ModerationLevel(IntEnum):
    """Pipeline stage that produced a verdict, ordered by cost."""

    LOCAL_FILTER = 1
    AI_ANALYSIS = 2
    # Reserved for a manual review queue; no stage emits it yet.
    ADMIN_REVIEW = 3


class RateLimitType(str, Enum):
    """Write actions that consume quota."""

    POST = "post"
    COMMENT = "comment"


@dataclass(frozen=True)
class ModerationResult:
    """Verdict for one piece of user-generated text."""

    approved: bool
    level: ModerationLevel = ModerationLevel.LOCAL_FILTER
    reason: Optional[str] = None
    confidence_score: float = 0.0

    def __post_init__(self) -> None:
        if not self.approved and not (self.reason and self.reason.strip()):
            raise ValueError("a rejected moderation result must carry a reason")
        if not 0.0 <= self.confidence_score <= 1.0:
            raise ValueError("confidence_score must be within [0, 1]")

    @classmethod
    def approve(cls, level: ModerationLevel, confidence_score: float) -> "ModerationResult":
        return cls(approved=True, level=level, confidence_score=confidence_score)

    @classmethod
    def block(cls, reason: str, level: ModerationLevel, confidence_score: float) -> "ModerationResult":
        return cls(approved=False, reason=reason, level=level, confidence_score=confidence_score)
