"""Content censor — masks literal banned terms for display.

Unlike the scanner, the censor only matches exact (case-insensitive,
word-bounded) spellings.  Terms are applied one after another in lexicon
order, each pass running over the output of the previous one.
"""

from __future__ import annotations

from grove.moderation.lexicon import DEFAULT_LEXICON, Lexicon


class ContentCensor:
    def __init__(self, lexicon: Lexicon = DEFAULT_LEXICON, mask_char: str = "*") -> None:
        if len(mask_char) != 1:
            raise ValueError(f"mask_char must be a single character, got {mask_char!r}")
        self.lexicon = lexicon
        self.mask_char = mask_char

    def censor(self, text: str | None) -> str | None:
        if not text:
            return text

        filtered = text
        for term, literal in zip(self.lexicon.terms, self.lexicon.literals):
            filtered = literal.sub(self.mask_char * len(term), filtered)
        return filtered


_default_censor = ContentCensor()


def censor(text: str | None) -> str | None:
    """Censor *text* with the process-wide default censor."""
    return _default_censor.censor(text)
