"""Submission validation — turns scanner verdicts into accept/reject decisions.

Used at the boundaries where a post or comment is about to be written.
Never raises; a rejection carries a message suitable for showing the user.
"""

from __future__ import annotations

from grove.moderation.models import ValidationResult
from grove.moderation.scanner import ContentScanner, _default_scanner


class ContentValidator:
    """Validates post and comment submissions against a scanner."""

    def __init__(self, scanner: ContentScanner | None = None) -> None:
        self.scanner = scanner or _default_scanner

    def _check(self, text: str | None, label: str) -> ValidationResult | None:
        verdict = self.scanner.scan(text)
        if verdict.is_offensive:
            return ValidationResult.rejected(
                f"Your {label} contains inappropriate content. {verdict.reason}"
            )
        return None

    def validate_post(self, title: str | None, body: str | None) -> ValidationResult:
        """Check the title first, then the body; report the first rejection."""
        rejection = self._check(title, "post title") or self._check(body, "post content")
        return rejection or ValidationResult.accepted()

    def validate_comment(self, text: str | None) -> ValidationResult:
        return self._check(text, "comment") or ValidationResult.accepted()


_default_validator = ContentValidator()


def validate_post(title: str | None, body: str | None) -> ValidationResult:
    return _default_validator.validate_post(title, body)


def validate_comment(text: str | None) -> ValidationResult:
    return _default_validator.validate_comment(text)
