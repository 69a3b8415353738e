"""Two-stage moderation pipeline: local lexical filter, then optional AI analysis.

The local stage is cheap and catches most abuse. The remote stage is a
best-effort second opinion: when it is disabled, unconfigured, or failing the
pipeline behaves as if it had not run, so infrastructure trouble never blocks a
user from posting.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from sportsapp.moderation.domain.groq_client import ClassifierGateway
from sportsapp.moderation.domain.lexical import LexicalFilter
from sportsapp.moderation.domain.models import ModerationLevel, ModerationResult
from sportsapp.obs import metrics
from sportsapp.settings import Settings, settings as default_settings

logger = logging.getLogger(__name__)

EMPTY_CONTENT_REASON = "Conținutul nu poate fi gol."
AI_FALLBACK_REASON = "Conținut inadecvat detectat de AI"

AI_BLOCK_CONFIDENCE = 0.9
AI_PASS_CONFIDENCE = 0.95
FINAL_PASS_CONFIDENCE = 1.0

_BLOCKED_PREFIX = "BLOCKED"

MODERATION_PROMPT = """\
Analyze the following text for inappropriate content. Check for:
- Profanity or vulgar language
- Personal attacks or insults
- Hate speech or discrimination
- Threats or violence
- Spam or malicious content

Text to analyze: "{content}"

Respond ONLY with one of these formats:
- APPROVED if the content is acceptable
- BLOCKED: [brief reason] if the content violates guidelines

Response:"""


@dataclass(frozen=True)
class ClassifierOutcome:
    """Either a verdict from the remote stage or the error that prevented one."""

    result: Optional[ModerationResult] = None
    error: Optional[BaseException] = None

    @property
    def failed(self) -> bool:
        return self.error is not None

    def collapse(self) -> ModerationResult:
        """Map a failure to an approval so the stage fails open."""
        if self.result is not None:
            return self.result
        return ModerationResult.approve(ModerationLevel.AI_ANALYSIS, AI_PASS_CONFIDENCE)


def interpret_reply(reply: str) -> ModerationResult:
    """Read the APPROVED / BLOCKED: <reason> convention out of a classifier reply."""
    if reply.upper().startswith(_BLOCKED_PREFIX):
        # Skip "BLOCKED:" (eight characters) and keep whatever follows.
        reason = reply[8:].strip()
        return ModerationResult.block(
            reason or AI_FALLBACK_REASON,
            ModerationLevel.AI_ANALYSIS,
            AI_BLOCK_CONFIDENCE,
        )
    return ModerationResult.approve(ModerationLevel.AI_ANALYSIS, AI_PASS_CONFIDENCE)


class ContentModerationService:
    """Moderates posts and comments before they are persisted."""

    def __init__(
        self,
        *,
        gateway: Optional[ClassifierGateway] = None,
        lexical: Optional[LexicalFilter] = None,
        config: Optional[Settings] = None,
    ) -> None:
        self._gateway = gateway
        self._lexical = lexical or LexicalFilter()
        self._config = config or default_settings

    @property
    def ai_enabled(self) -> bool:
        return self._gateway is not None and self._config.groq_api_enabled

    async def moderate(
        self,
        content: Optional[str],
        max_level: ModerationLevel = ModerationLevel.AI_ANALYSIS,
    ) -> ModerationResult:
        result = await self._moderate(content, max_level)
        metrics.inc_moderation_decision(result.level.name.lower(), result.approved)
        return result

    async def _moderate(self, content: Optional[str], max_level: ModerationLevel) -> ModerationResult:
        if content is None or not content.strip():
            return ModerationResult.block(EMPTY_CONTENT_REASON, ModerationLevel.LOCAL_FILTER, 1.0)

        local = self._lexical.check(content)
        if not local.approved:
            return local

        if max_level >= ModerationLevel.AI_ANALYSIS and self.ai_enabled:
            outcome = await self.classify(content)
            if outcome.failed:
                metrics.inc_moderation_ai_failure()
                logger.warning(
                    "ai moderation failed, falling back to local filter only",
                    exc_info=outcome.error,
                )
            verdict = outcome.collapse()
            if not verdict.approved:
                return verdict

        # Reported as a local-filter pass even when the AI stage also approved.
        return ModerationResult.approve(ModerationLevel.LOCAL_FILTER, FINAL_PASS_CONFIDENCE)

    async def classify(self, content: str) -> ClassifierOutcome:
        """Run the remote stage; exceptions are returned, never raised."""
        if self._gateway is None:
            # No remote stage: the local verdict stands.
            return ClassifierOutcome(result=self._lexical.check(content))
        prompt = MODERATION_PROMPT.format(content=content)
        try:
            reply = await self._gateway.complete(prompt)
        except Exception as exc:
            return ClassifierOutcome(error=exc)
        return ClassifierOutcome(result=interpret_reply(reply))
