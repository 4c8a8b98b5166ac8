"""Tests for the comment stores."""

import tempfile
from pathlib import Path

import pytest

from grove.threads.models import CommentRecord, new_comment
from grove.threads.store import InMemoryCommentStore, JsonlCommentStore, StoreError


def _draft(text: str, parent_id=None, created_at: str = "") -> CommentRecord:
    record = new_comment("post-1", text, user_id="u1", user_name="Sam", parent_id=parent_id)
    if created_at:
        record.created_at = created_at
    return record


# --- In-memory store ---


def test_memory_add_assigns_id():
    store = InMemoryCommentStore()
    stored = store.add_comment(_draft("hello"))
    assert stored.id
    assert stored.created_at
    assert store.list_comments("post-1") == [stored]


def test_memory_lists_oldest_first_per_post():
    store = InMemoryCommentStore()
    late = store.add_comment(_draft("late", created_at="2024-01-02T00:00:00+00:00"))
    early = store.add_comment(_draft("early", created_at="2024-01-01T00:00:00+00:00"))
    store.add_comment(new_comment("post-2", "elsewhere"))
    assert [r.id for r in store.list_comments("post-1")] == [early.id, late.id]


def test_memory_delete_unknown_is_noop():
    store = InMemoryCommentStore()
    stored = store.add_comment(_draft("hello"))
    store.delete_comment("missing")
    store.delete_comment(stored.id)
    assert store.list_comments("post-1") == []


def test_memory_counters_floor_at_zero():
    store = InMemoryCommentStore()
    assert store.adjust_comment_count("post-1", 2) == 2
    assert store.adjust_comment_count("post-1", -5) == 0
    assert store.comment_count("post-1") == 0

    root = store.add_comment(_draft("root"))
    assert store.adjust_reply_count(root.id, 1) == 1
    assert store.list_comments("post-1")[0].reply_count == 1
    assert store.adjust_reply_count("missing", 1) == 0


def test_memory_injected_failures():
    store = InMemoryCommentStore(fail_on={"add_comment"})
    with pytest.raises(StoreError):
        store.add_comment(_draft("hello"))


def test_memory_returns_copies():
    store = InMemoryCommentStore()
    stored = store.add_comment(_draft("hello"))
    stored.text = "changed"
    assert store.list_comments("post-1")[0].text == "hello"


# --- JSONL store ---


def test_jsonl_round_trip_and_delete():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonlCommentStore(tmpdir)
        root = store.add_comment(_draft("root", created_at="2024-01-01T00:00:00+00:00"))
        reply = store.add_comment(_draft("reply", parent_id=root.id, created_at="2024-01-01T00:01:00+00:00"))

        reopened = JsonlCommentStore(tmpdir)
        records = reopened.list_comments("post-1")
        assert [r.id for r in records] == [root.id, reply.id]
        assert records[1].parent_id == root.id
        assert records[0].user_name == "Sam"

        reopened.delete_comment(reply.id)
        assert [r.id for r in reopened.list_comments("post-1")] == [root.id]


def test_jsonl_counters_persist():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonlCommentStore(tmpdir)
        root = store.add_comment(_draft("root"))
        store.adjust_comment_count("post-1", 1)
        store.adjust_reply_count(root.id, 3)

        reopened = JsonlCommentStore(tmpdir)
        assert reopened.comment_count("post-1") == 1
        assert reopened.list_comments("post-1")[0].reply_count == 3


def test_jsonl_skips_corrupt_lines():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonlCommentStore(tmpdir)
        store.add_comment(_draft("ok"))
        with open(Path(tmpdir) / "post-1.jsonl", "a") as f:
            f.write("{not json\n")
            f.write('{"text": "no id"}\n')
        assert [r.text for r in store.list_comments("post-1")] == ["ok"]


def test_jsonl_unknown_post_is_empty():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonlCommentStore(tmpdir)
        assert store.list_comments("nothing-here") == []
        assert store.comment_count("nothing-here") == 0
