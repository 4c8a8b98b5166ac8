"""Tests for comment data models."""

import pytest

from grove.threads.models import CommentNode, CommentRecord, new_comment


def test_record_from_store_document():
    record = CommentRecord.from_dict(
        {
            "id": "c1",
            "postId": "p1",
            "parentId": "",
            "text": "hi",
            "userId": "u1",
            "userName": "",
            "isAnonymous": True,
            "createdAt": "2024-01-01T00:00:00+00:00",
            "userProfileImage": "https://example.com/a.png",
        }
    )
    assert record.post_id == "p1"
    assert record.parent_id is None
    assert record.is_root
    assert record.user_name == "Anonymous User"
    assert record.display_name == "Anonymous"
    assert record.reply_count == 0


def test_record_from_snake_case():
    record = CommentRecord.from_dict({"id": 7, "post_id": "p1", "parent_id": 3})
    assert record.id == 7
    assert record.parent_id == 3
    assert not record.is_root


def test_record_without_id_rejected():
    with pytest.raises(ValueError):
        CommentRecord.from_dict({"text": "hi"})


def test_to_dict_uses_store_keys():
    record = CommentRecord(id="c1", post_id="p1", parent_id="c0", user_name="Sam")
    data = record.to_dict()
    assert data["postId"] == "p1"
    assert data["parentId"] == "c0"
    assert data["userName"] == "Sam"
    assert CommentRecord.from_dict(data) == record


def test_node_to_tree():
    root = CommentNode(id="a", post_id="p")
    root.replies.append(CommentNode(id="b", post_id="p", parent_id="a"))
    tree = root.to_tree()
    assert tree["id"] == "a"
    assert tree["replies"][0]["id"] == "b"
    assert tree["replies"][0]["replies"] == []
    assert root.subtree_size() == 2


def test_new_comment_defaults():
    record = new_comment("p1", "  welcome aboard  ")
    assert record.text == "welcome aboard"
    assert record.user_name == "Anonymous User"
    assert record.user_id == "anonymous"
    assert record.parent_id is None
    assert record.created_at


def test_new_comment_requires_text_and_post():
    with pytest.raises(ValueError, match="Comment text is required"):
        new_comment("p1", "   ")
    with pytest.raises(ValueError, match="Post ID is required"):
        new_comment("", "hello")


def test_anonymous_flag_parsed_from_strings():
    assert not CommentRecord.from_dict({"id": "a", "isAnonymous": "false"}).is_anonymous
    assert not CommentRecord.from_dict({"id": "a", "isAnonymous": "no"}).is_anonymous
    assert CommentRecord.from_dict({"id": "a", "isAnonymous": "True"}).is_anonymous
    assert CommentRecord.from_dict({"id": "a", "isAnonymous": True}).is_anonymous
    assert not CommentRecord.from_dict({"id": "a", "isAnonymous": None}).is_anonymous


def test_reply_count_tolerates_bad_values():
    assert CommentRecord.from_dict({"id": "a", "replyCount": "n/a"}).reply_count == 0
    assert CommentRecord.from_dict({"id": "a", "replyCount": "3"}).reply_count == 3
    assert CommentRecord.from_dict({"id": "a", "replyCount": -2}).reply_count == 0
