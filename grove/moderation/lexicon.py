"""Banned vocabulary and the character substitution table.

A :class:`Lexicon` bundles the vocabulary with the patterns compiled from it.
It is built once (normally at import time, see :data:`DEFAULT_LEXICON`) and
shared read-only by every scanner and censor in the process.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable

from grove.moderation.models import ObfuscationPattern
from grove.moderation.patterns import compile_patterns, compile_literal

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Vocabulary
# ---------------------------------------------------------------------------

BANNED_TERMS: tuple[str, ...] = (
    # Racial slurs
    "n word", "n-word", "nigga", "nigger", "negro", "chink", "wetback", "spic",
    "kike", "gook", "towelhead", "n1g", "n!g",
    # Bullying
    "retard", "faggot", "fag", "dyke", "tranny",
    # Profanity
    "cunt", "cock", "pussy", "asshole", "whore", "slut",
    # Threats
    "kill yourself", "kys", "kill urself", "go die", "neck yourself",
)

# Look-alike characters per letter; unmapped characters match literally.
CHAR_SUBSTITUTIONS: dict[str, str] = {
    "a": "[a@4]+",
    "b": "[b8]+",
    "c": "[c(]+",
    "e": "[e3]+",
    "i": "[i!1]+",
    "l": "[l1]+",
    "o": "[o0]+",
    "s": "[s$5]+",
    "t": "[t7]+",
    "u": "[uμ]+",
}


def normalize_terms(terms: Iterable[str]) -> tuple[str, ...]:
    """Lower-case and strip *terms*, dropping blanks and later duplicates."""
    seen: set[str] = set()
    result: list[str] = []
    for term in terms:
        canonical = str(term).strip().lower()
        if not canonical or canonical in seen:
            continue
        seen.add(canonical)
        result.append(canonical)
    return tuple(result)


@dataclass(frozen=True)
class Lexicon:
    """Immutable vocabulary plus its compiled matchers, index-aligned."""

    terms: tuple[str, ...]
    patterns: tuple[ObfuscationPattern, ...]
    literals: tuple[re.Pattern[str], ...]

    @classmethod
    def from_terms(
        cls,
        terms: Iterable[str],
        substitutions: dict[str, str] | None = None,
    ) -> Lexicon:
        canonical = normalize_terms(terms)
        patterns = compile_patterns(canonical, substitutions or CHAR_SUBSTITUTIONS)
        literals = tuple(compile_literal(t) for t in canonical)
        logger.debug("Compiled lexicon with %d terms", len(canonical))
        return cls(terms=canonical, patterns=patterns, literals=literals)

    def __len__(self) -> int:
        return len(self.terms)


DEFAULT_LEXICON = Lexicon.from_terms(BANNED_TERMS)
