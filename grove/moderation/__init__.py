"""Moderation — obfuscation-tolerant lexical filtering for posts and comments.

The package provides:
- Pattern compilation: banned terms become regexes tolerant of leetspeak and separators
- Scanning: a verdict per text (banned language, excessive capitalization)
- Censoring: literal occurrences of banned terms masked for display
- Validation: accept/reject decisions with user-facing messages
"""
