"""Pattern compiler — turns banned terms into obfuscation-tolerant regexes.

Each character of a term becomes a slot: either its substitution class
(``o`` -> ``[o0]+``) or the escaped literal.  Consecutive slots are joined
by a gap of zero or more whitespace/non-word characters so that spaced or
hyphenated spellings match the compact term.  The whole pattern is anchored
on word boundaries and compiled case-insensitively.

Compilation is pure: the same term always yields the same pattern.
"""

from __future__ import annotations

import re
from typing import Iterable

from grove.moderation.models import ObfuscationPattern

# Allowed noise between two character slots.
SEPARATOR = r"[\s\W]*"

# Matches nothing; stands in for an empty term.
_NEVER = r"(?!)"


def build_pattern_source(term: str, substitutions: dict[str, str]) -> str:
    """Return the regex source for *term* without compiling it."""
    if not term:
        return _NEVER

    slots = [substitutions.get(ch.lower(), re.escape(ch)) for ch in term]
    return rf"\b{SEPARATOR.join(slots)}\b"


def compile_term(term: str, substitutions: dict[str, str]) -> ObfuscationPattern:
    """Compile a single banned term."""
    source = build_pattern_source(term, substitutions)
    return ObfuscationPattern(term=term, regex=re.compile(source, re.IGNORECASE))


def compile_patterns(
    terms: Iterable[str], substitutions: dict[str, str]
) -> tuple[ObfuscationPattern, ...]:
    """Compile every term, preserving list order."""
    return tuple(compile_term(term, substitutions) for term in terms)


def compile_literal(term: str) -> re.Pattern[str]:
    """Exact, word-bounded, case-insensitive matcher used for censoring."""
    if not term:
        return re.compile(_NEVER)
    return re.compile(rf"\b{re.escape(term)}\b", re.IGNORECASE)
