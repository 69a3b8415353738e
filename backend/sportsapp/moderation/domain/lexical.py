"""Local lexical filter: substring screening against the banned word sets."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Sequence

from sportsapp.moderation.domain.banned_words import DEFAULT_WORD_SETS, BannedWordSet
from sportsapp.moderation.domain.models import ModerationLevel, ModerationResult

# Separators used to dodge the list ("f*u*c*k", "f u c k", "f-u_c-k").
_EVASION_RE = re.compile(r"[*_\-\s]+")

LOCAL_BLOCK_CONFIDENCE = 1.0
LOCAL_PASS_CONFIDENCE = 0.8


def normalize(lowered: str) -> str:
    return _EVASION_RE.sub("", lowered)


@dataclass(frozen=True)
class LexicalMatch:
    word_set: BannedWordSet
    word: str


class LexicalFilter:
    """Matches banned tokens anywhere in the text, including inside longer words.

    There is no word-boundary check, so "Scunthorpe"-style false positives are
    expected; callers rely on that behaviour staying stable.
    """

    def __init__(self, word_sets: Sequence[BannedWordSet] = DEFAULT_WORD_SETS) -> None:
        self._word_sets = tuple(word_sets)

    def find(self, content: str) -> Optional[LexicalMatch]:
        lowered = content.lower()
        normalized = normalize(lowered)
        for word_set in self._word_sets:
            for word in word_set.words:
                if word in lowered or word in normalized:
                    return LexicalMatch(word_set=word_set, word=word)
        return None

    def check(self, content: str) -> ModerationResult:
        match = self.find(content)
        if match is not None:
            return ModerationResult.block(
                match.word_set.reason,
                ModerationLevel.LOCAL_FILTER,
                LOCAL_BLOCK_CONFIDENCE,
            )
        return ModerationResult.approve(ModerationLevel.LOCAL_FILTER, LOCAL_PASS_CONFIDENCE)
