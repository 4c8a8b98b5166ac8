"""Content scanner — lexical match first, capitalization heuristic second."""

from __future__ import annotations

from grove.moderation.lexicon import DEFAULT_LEXICON, Lexicon
from grove.moderation.models import ScanVerdict

MIN_CAPS_LENGTH = 20
CAPS_RATIO = 0.7

_CLEAN = ScanVerdict(is_offensive=False)


def uppercase_ratio(text: str) -> float:
    """Share of uppercase letters among all letters; 0.0 when there are none."""
    letters = [ch for ch in text if ch.isalpha()]
    if not letters:
        return 0.0
    return sum(1 for ch in letters if ch.isupper()) / len(letters)


class ContentScanner:
    """Stateless scanner over a shared, precompiled :class:`Lexicon`."""

    def __init__(
        self,
        lexicon: Lexicon = DEFAULT_LEXICON,
        min_caps_length: int = MIN_CAPS_LENGTH,
        caps_ratio: float = CAPS_RATIO,
    ) -> None:
        self.lexicon = lexicon
        self.min_caps_length = min_caps_length
        self.caps_ratio = caps_ratio

    def scan(self, text: str | None) -> ScanVerdict:
        """Return a fresh verdict for *text*.

        Patterns are tried in lexicon order and the first match wins, so the
        reported pattern number is the lowest matching one.
        """
        if not text:
            return _CLEAN

        normalized = text.lower()
        for index, pattern in enumerate(self.lexicon.patterns, start=1):
            if pattern.search(normalized):
                return ScanVerdict(
                    is_offensive=True,
                    reason=f"Contains inappropriate language (matched pattern {index})",
                    violation_type="language",
                    matched_term=pattern.term,
                )

        if len(text) > self.min_caps_length and uppercase_ratio(text) > self.caps_ratio:
            return ScanVerdict(
                is_offensive=True,
                reason="Excessive capitalization which may indicate shouting or aggressive tone",
                violation_type="capitalization",
            )

        return _CLEAN


_default_scanner = ContentScanner()


def scan(text: str | None) -> ScanVerdict:
    """Scan *text* with the process-wide default scanner."""
    return _default_scanner.scan(text)
