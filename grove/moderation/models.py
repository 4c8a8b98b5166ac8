"""Data models for the moderation pipeline."""

from __future__ import annotations

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class ObfuscationPattern:
    """Compiled, obfuscation-tolerant matcher for one banned term."""

    term: str
    regex: re.Pattern[str]

    @property
    def source(self) -> str:
        return self.regex.pattern

    def search(self, text: str) -> bool:
        return self.regex.search(text) is not None


@dataclass(frozen=True)
class ScanVerdict:
    """Result of scanning a single piece of text."""

    is_offensive: bool
    reason: str | None = None
    violation_type: str = ""  # "language" | "capitalization" | ""
    matched_term: str | None = None


@dataclass(frozen=True)
class ValidationResult:
    """Accept/reject decision for a submission."""

    is_valid: bool
    error_message: str | None = None

    @classmethod
    def accepted(cls) -> ValidationResult:
        return cls(is_valid=True)

    @classmethod
    def rejected(cls, message: str) -> ValidationResult:
        return cls(is_valid=False, error_message=message)
