"""Comment data models — the flat store record and the derived tree node."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from typing import Any

ANONYMOUS_USER_NAME = "Anonymous User"
ANONYMOUS_DISPLAY_NAME = "Anonymous"

# Store (camelCase) key -> dataclass attribute
_STORE_KEYS: dict[str, str] = {
    "id": "id",
    "postId": "post_id",
    "parentId": "parent_id",
    "text": "text",
    "userId": "user_id",
    "userName": "user_name",
    "isAnonymous": "is_anonymous",
    "createdAt": "created_at",
    "replyCount": "reply_count",
}


def _utcnow() -> str:
    return datetime.now(timezone.utc).isoformat()


def _as_count(value: Any) -> int:
    """Counter value from a store document; anything unreadable counts as 0."""
    try:
        return max(int(value or 0), 0)
    except (TypeError, ValueError):
        return 0


def _as_flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "yes", "1")
    return value is True or value == 1


@dataclass
class CommentRecord:
    """A comment as the remote store delivers it.

    ``parent_id`` of ``None`` marks a root comment.
    """

    id: str
    post_id: str = ""
    parent_id: str | None = None
    text: str = ""
    user_id: str = ""
    user_name: str = ANONYMOUS_USER_NAME
    is_anonymous: bool = False
    created_at: str = ""  # ISO 8601
    reply_count: int = 0

    @property
    def is_root(self) -> bool:
        return self.parent_id is None

    @property
    def display_name(self) -> str:
        if self.is_anonymous:
            return ANONYMOUS_DISPLAY_NAME
        return self.user_name or ANONYMOUS_USER_NAME

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CommentRecord:
        """Build a record from a store document (camelCase or snake_case keys)."""
        if data.get("id") in (None, ""):
            raise ValueError(f"Comment record has no id: {data!r}")

        known = {f.name for f in fields(CommentRecord)}
        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            attr = _STORE_KEYS.get(key, key)
            if attr in known:
                kwargs[attr] = value

        parent_id = kwargs.get("parent_id")
        kwargs["parent_id"] = None if parent_id in (None, "") else parent_id
        if kwargs.get("user_name") in (None, ""):
            kwargs.pop("user_name", None)
        kwargs["reply_count"] = _as_count(kwargs.get("reply_count"))
        kwargs["is_anonymous"] = _as_flag(kwargs.get("is_anonymous"))
        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the store's camelCase document shape."""
        return {key: getattr(self, attr) for key, attr in _STORE_KEYS.items()}


@dataclass
class CommentNode(CommentRecord):
    """A record plus its ordered replies (creation order)."""

    replies: list[CommentNode] = field(default_factory=list)

    @classmethod
    def from_record(cls, record: CommentRecord) -> CommentNode:
        values = {f.name: getattr(record, f.name) for f in fields(CommentRecord)}
        return cls(**values)

    def to_record(self) -> CommentRecord:
        return CommentRecord(**{f.name: getattr(self, f.name) for f in fields(CommentRecord)})

    def to_tree(self) -> dict[str, Any]:
        """Nested dict form: the store document plus ``replies``."""
        data = self.to_dict()
        data["replies"] = [reply.to_tree() for reply in self.replies]
        return data

    def subtree_size(self) -> int:
        return 1 + sum(reply.subtree_size() for reply in self.replies)


def new_comment(
    post_id: str,
    text: str,
    user_id: str = "anonymous",
    user_name: str | None = None,
    parent_id: str | None = None,
    is_anonymous: bool = False,
    comment_id: str = "",
) -> CommentRecord:
    """Prepare a comment for submission; the store assigns the final id."""
    if not post_id:
        raise ValueError("Post ID is required")
    if not text or not text.strip():
        raise ValueError("Comment text is required")

    return CommentRecord(
        id=comment_id,
        post_id=post_id,
        parent_id=parent_id,
        text=text.strip(),
        user_id=user_id or "anonymous",
        user_name=user_name or ANONYMOUS_USER_NAME,
        is_anonymous=is_anonymous,
        created_at=_utcnow(),
    )
