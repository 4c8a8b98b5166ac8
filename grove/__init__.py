"""Grove — community content pipeline: lexical moderation and threaded comments."""

__version__ = "0.3.0"
