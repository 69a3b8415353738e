"""Language-tagged block lists consulted by the local lexical filter."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class BannedWordSet:
    """Immutable set of lowercase tokens plus the reason shown when one matches."""

    language: str
    words: frozenset[str]
    reason: str


ROMANIAN = BannedWordSet(
    language="ro",
    words=frozenset(
        {
            "prost", "idiot", "prostule", "pula", "muie", "cacat", "nenorocit",
            "fuck", "retardat", "curva", "curve", "jeg", "jegoasa", "pulă",
            "muist", "târfă", "tarfa", "cretinule", "nemernic", "nemernicule",
        }
    ),
    reason="Conținutul conține limbaj inadecvat sau ofensator.",
)

ENGLISH = BannedWordSet(
    language="en",
    words=frozenset(
        {
            "fuck", "shit", "bitch", "asshole", "cunt", "dick", "pussy",
            "bastard", "damn", "piss", "cock", "slut", "whore", "fag",
            "nigger", "retard", "idiot", "stupid", "dumb", "moron",
        }
    ),
    reason="Content contains inappropriate or offensive language.",
)

OTHER = BannedWordSet(
    language="other",
    words=frozenset(
        {
            # es
            "puta", "mierda", "joder", "cabrón", "pendejo", "culero",
            # fr
            "merde", "putain", "connard", "salope",
            # de
            "scheiße", "arschloch", "fotze", "hurensohn",
        }
    ),
    reason="El contenido contiene lenguaje inapropiado.",
)

# Checked in this order; the first set with a hit supplies the reason.
DEFAULT_WORD_SETS: tuple[BannedWordSet, ...] = (ROMANIAN, ENGLISH, OTHER)
