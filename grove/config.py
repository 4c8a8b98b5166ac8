"""Moderation configuration — thresholds, mask character and vocabulary.

Settings come from a YAML file, either passed explicitly or named by the
``GROVE_MODERATION_CONFIG`` environment variable.  Example::

    min_caps_length: 20
    caps_ratio: 0.7
    mask_char: "#"
    extra_terms:
      - some new term
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from grove.moderation.censor import ContentCensor
from grove.moderation.lexicon import BANNED_TERMS, DEFAULT_LEXICON, Lexicon
from grove.moderation.scanner import CAPS_RATIO, MIN_CAPS_LENGTH, ContentScanner
from grove.moderation.validator import ContentValidator

CONFIG_ENV_VAR = "GROVE_MODERATION_CONFIG"


@dataclass
class ModerationConfig:
    """Tunable moderation settings."""

    min_caps_length: int = MIN_CAPS_LENGTH
    caps_ratio: float = CAPS_RATIO
    mask_char: str = "*"
    terms: list[str] = field(default_factory=lambda: list(BANNED_TERMS))
    extra_terms: list[str] = field(default_factory=list)

    @property
    def vocabulary(self) -> list[str]:
        return [*self.terms, *self.extra_terms]

    def build_lexicon(self) -> Lexicon:
        # Reuse the import-time table when nothing about the vocabulary changed
        if not self.extra_terms and tuple(self.terms) == BANNED_TERMS:
            return DEFAULT_LEXICON
        return Lexicon.from_terms(self.vocabulary)

    def build_scanner(self, lexicon: Lexicon | None = None) -> ContentScanner:
        return ContentScanner(
            lexicon or self.build_lexicon(),
            min_caps_length=self.min_caps_length,
            caps_ratio=self.caps_ratio,
        )

    def build_censor(self, lexicon: Lexicon | None = None) -> ContentCensor:
        return ContentCensor(lexicon or self.build_lexicon(), mask_char=self.mask_char)

    def build_validator(self, lexicon: Lexicon | None = None) -> ContentValidator:
        return ContentValidator(self.build_scanner(lexicon))


def load_config(path: str | Path) -> ModerationConfig:
    """Load moderation settings from a YAML file."""
    path = Path(path)
    if not path.exists():
        raise ValueError(f"Config file not found: {path}")

    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping")

    defaults = ModerationConfig()
    return ModerationConfig(
        min_caps_length=int(data.get("min_caps_length", defaults.min_caps_length)),
        caps_ratio=float(data.get("caps_ratio", defaults.caps_ratio)),
        mask_char=str(data.get("mask_char", defaults.mask_char)),
        terms=[str(t) for t in data.get("terms", defaults.terms)],
        extra_terms=[str(t) for t in data.get("extra_terms", [])],
    )


def config_from_env() -> ModerationConfig:
    """Load settings from ``$GROVE_MODERATION_CONFIG``, or return defaults."""
    path = os.environ.get(CONFIG_ENV_VAR, "")
    if not path:
        return ModerationConfig()
    return load_config(path)
