"""Comment stores — the remote source of truth behind a comment thread.

:class:`CommentStore` is the interface a thread session talks to.  Two
implementations ship with the package:

- :class:`InMemoryCommentStore` keeps everything in dicts and can be told to
  fail specific operations, which makes it the test double of choice.
- :class:`JsonlCommentStore` keeps one ``{post_id}.jsonl`` file per post plus
  a ``counters.json`` under ``~/.grove/comments/``.
"""

from __future__ import annotations

import json
import re
import uuid
from abc import ABC, abstractmethod
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path

from grove.threads.models import CommentRecord


class StoreError(RuntimeError):
    """A store read or write did not go through."""


def _new_id() -> str:
    return uuid.uuid4().hex[:16]


def _safe_filename(name: str) -> str:
    """Sanitise a name for use as part of a filename."""
    return re.sub(r"[^\w\-.]", "_", name)


def _stamp(record: CommentRecord) -> CommentRecord:
    """Copy *record* with a store-assigned id and timestamp where missing."""
    return replace(
        record,
        id=record.id or _new_id(),
        created_at=record.created_at or datetime.now(timezone.utc).isoformat(),
        reply_count=0,
    )


class CommentStore(ABC):
    """Interface to the durable comment store."""

    @abstractmethod
    def list_comments(self, post_id: str) -> list[CommentRecord]:
        """All comments of a post, oldest first."""

    @abstractmethod
    def add_comment(self, record: CommentRecord) -> CommentRecord:
        """Persist *record* and return it with its final id and timestamp."""

    @abstractmethod
    def delete_comment(self, comment_id: str) -> None:
        """Delete one comment by id; deleting an unknown id is a no-op."""

    @abstractmethod
    def adjust_comment_count(self, post_id: str, delta: int) -> int:
        """Add *delta* to a post's comment counter (floored at 0)."""

    @abstractmethod
    def adjust_reply_count(self, comment_id: str, delta: int) -> int:
        """Add *delta* to a comment's reply counter (floored at 0)."""

    @abstractmethod
    def comment_count(self, post_id: str) -> int:
        """Current value of a post's comment counter."""


class InMemoryCommentStore(CommentStore):
    """Dict-backed store; operations named in ``fail_on`` raise StoreError."""

    def __init__(self, fail_on: set[str] | None = None) -> None:
        self.fail_on: set[str] = set(fail_on or ())
        self._comments: dict[str, CommentRecord] = {}
        self._post_counts: dict[str, int] = {}

    def _maybe_fail(self, operation: str) -> None:
        if operation in self.fail_on:
            raise StoreError(f"{operation} failed")

    def list_comments(self, post_id: str) -> list[CommentRecord]:
        self._maybe_fail("list_comments")
        records = [replace(r) for r in self._comments.values() if r.post_id == post_id]
        records.sort(key=lambda r: r.created_at)
        return records

    def add_comment(self, record: CommentRecord) -> CommentRecord:
        self._maybe_fail("add_comment")
        stored = _stamp(record)
        self._comments[stored.id] = stored
        return replace(stored)

    def delete_comment(self, comment_id: str) -> None:
        self._maybe_fail("delete_comment")
        self._comments.pop(comment_id, None)

    def adjust_comment_count(self, post_id: str, delta: int) -> int:
        self._maybe_fail("adjust_comment_count")
        value = max(self._post_counts.get(post_id, 0) + delta, 0)
        self._post_counts[post_id] = value
        return value

    def adjust_reply_count(self, comment_id: str, delta: int) -> int:
        self._maybe_fail("adjust_reply_count")
        record = self._comments.get(comment_id)
        if record is None:
            return 0
        record.reply_count = max(record.reply_count + delta, 0)
        return record.reply_count

    def comment_count(self, post_id: str) -> int:
        return self._post_counts.get(post_id, 0)


class JsonlCommentStore(CommentStore):
    """File-backed store, one JSONL file per post."""

    COUNTERS_FILE = "counters.json"

    def __init__(self, base_dir: str | Path | None = None) -> None:
        self._base = Path(base_dir) if base_dir else Path.home() / ".grove" / "comments"
        self._base.mkdir(parents=True, exist_ok=True)
        self._counters_path = self._base / self.COUNTERS_FILE

    # -- helpers -------------------------------------------------------------

    def _file_for(self, post_id: str) -> Path:
        return self._base / f"{_safe_filename(post_id)}.jsonl"

    def _read_file(self, path: Path) -> list[CommentRecord]:
        records: list[CommentRecord] = []
        if not path.exists():
            return records
        for line in path.read_text().splitlines():
            line = line.strip()
            if not line:
                continue
            try:
                records.append(CommentRecord.from_dict(json.loads(line)))
            except (json.JSONDecodeError, TypeError, ValueError):
                continue
        return records

    def _write_file(self, path: Path, records: list[CommentRecord]) -> None:
        try:
            path.write_text("".join(json.dumps(r.to_dict()) + "\n" for r in records))
        except OSError as e:
            raise StoreError(f"Could not write {path}: {e}") from e

    def _find(self, comment_id: str) -> tuple[Path, list[CommentRecord]] | None:
        for path in self._base.glob("*.jsonl"):
            records = self._read_file(path)
            if any(r.id == comment_id for r in records):
                return path, records
        return None

    def _load_counters(self) -> dict[str, int]:
        if not self._counters_path.exists():
            return {}
        try:
            return json.loads(self._counters_path.read_text())
        except (json.JSONDecodeError, OSError):
            return {}

    # -- public API ----------------------------------------------------------

    def list_comments(self, post_id: str) -> list[CommentRecord]:
        records = self._read_file(self._file_for(post_id))
        records.sort(key=lambda r: r.created_at)
        return records

    def add_comment(self, record: CommentRecord) -> CommentRecord:
        stored = _stamp(record)
        try:
            with self._file_for(stored.post_id).open("a") as fh:
                fh.write(json.dumps(stored.to_dict()) + "\n")
        except OSError as e:
            raise StoreError(f"Could not add comment: {e}") from e
        return stored

    def delete_comment(self, comment_id: str) -> None:
        found = self._find(comment_id)
        if found is None:
            return
        path, records = found
        self._write_file(path, [r for r in records if r.id != comment_id])

    def adjust_comment_count(self, post_id: str, delta: int) -> int:
        counters = self._load_counters()
        value = max(counters.get(post_id, 0) + delta, 0)
        counters[post_id] = value
        try:
            self._counters_path.write_text(json.dumps(counters, indent=2))
        except OSError as e:
            raise StoreError(f"Could not update comment count: {e}") from e
        return value

    def adjust_reply_count(self, comment_id: str, delta: int) -> int:
        found = self._find(comment_id)
        if found is None:
            return 0
        path, records = found
        value = 0
        for record in records:
            if record.id == comment_id:
                record.reply_count = max(record.reply_count + delta, 0)
                value = record.reply_count
        self._write_file(path, records)
        return value

    def comment_count(self, post_id: str) -> int:
        return self._load_counters().get(post_id, 0)
