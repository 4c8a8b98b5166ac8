"""Comment thread session — a post's forest kept in step with the store.

Every mutation runs in two phases:

1. apply the change to the local forest right away;
2. issue the store write, then either commit (adopt what the store
   returned) or revert the local change and report the failure.

Counter updates (post comment count, parent reply count) follow a
successful write.  Their failure is logged and tolerated: the comment itself
is durable and the counters are corrected by the next full load.

A session is owned by a single logical flow.  :meth:`CommentThread.load`
builds the new forest on the side and swaps it in as a whole.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Hashable

from grove.moderation.validator import ContentValidator
from grove.threads import mutator
from grove.threads.builder import CommentTreeBuilder, OrphanPolicy
from grove.threads.models import CommentNode, CommentRecord, new_comment
from grove.threads.store import CommentStore, StoreError
from grove.threads.visibility import VisibilityTracker

logger = logging.getLogger(__name__)

SUBMIT_FAILED = "Failed to submit comment. Please try again."
DELETE_FAILED = "Failed to delete comment. Please try again."
PARENT_GONE = "The comment you are replying to no longer exists."
NOT_FOUND = "Comment not found."

LOCAL_ID_PREFIX = "local-"


@dataclass
class MutationOutcome:
    """Result of a session mutation."""

    ok: bool
    error: str | None = None
    node: CommentNode | None = None


class CommentThread:
    """The comment forest of one post, its visibility state, and its store."""

    def __init__(
        self,
        post_id: str,
        store: CommentStore,
        validator: ContentValidator | None = None,
        orphans: OrphanPolicy = OrphanPolicy.DROP,
    ) -> None:
        if not post_id:
            raise ValueError("Post ID is required")
        self.post_id = post_id
        self.store = store
        self.validator = validator or ContentValidator()
        self.builder = CommentTreeBuilder(orphans=orphans)
        self.visibility = VisibilityTracker()
        self._forest: list[CommentNode] = []

    @property
    def forest(self) -> list[CommentNode]:
        return self._forest

    def find(self, comment_id: Hashable) -> CommentNode | None:
        return mutator.find_node(self._forest, comment_id)

    # -- loading -------------------------------------------------------------

    def load(self) -> list[CommentNode]:
        """Rebuild the forest from the store and swap it in.

        A store failure propagates and leaves the current forest untouched.
        """
        records = self.store.list_comments(self.post_id)
        self._forest = self.builder.build(records)
        return self._forest

    # -- mutations -----------------------------------------------------------

    def reply(
        self,
        text: str,
        user_id: str = "anonymous",
        user_name: str | None = None,
        parent_id: str | None = None,
        is_anonymous: bool = False,
    ) -> MutationOutcome:
        """Submit a root comment (``parent_id=None``) or a reply."""
        verdict = self.validator.validate_comment(text)
        if not verdict.is_valid:
            return MutationOutcome(ok=False, error=verdict.error_message)

        draft = new_comment(
            self.post_id,
            text,
            user_id=user_id,
            user_name=user_name,
            parent_id=parent_id,
            is_anonymous=is_anonymous,
            comment_id=LOCAL_ID_PREFIX + uuid.uuid4().hex[:12],
        )
        node = CommentNode.from_record(draft)

        # Phase 1: local
        if parent_id is None:
            self._forest.append(node)
        elif not mutator.insert_reply(self._forest, parent_id, node):
            return MutationOutcome(ok=False, error=PARENT_GONE)

        # Phase 2: remote
        try:
            stored = self.store.add_comment(_as_submission(draft))
        except StoreError as e:
            mutator.remove_node(self._forest, node.id, parent_id)
            logger.warning("Reverted local comment %s: %s", node.id, e)
            return MutationOutcome(ok=False, error=SUBMIT_FAILED)

        node.id = stored.id
        node.created_at = stored.created_at
        self._adjust_counters(parent_id, +1)
        return MutationOutcome(ok=True, node=node)

    def delete(self, comment_id: Hashable) -> MutationOutcome:
        """Delete a comment together with all of its replies."""
        found = mutator.locate(self._forest, comment_id)
        if found is None:
            return MutationOutcome(ok=False, error=NOT_FOUND)
        siblings, position = found
        node = siblings[position]

        # Phase 1: local
        del siblings[position]

        # Phase 2: remote, deepest replies first
        subtree = [n for _, n in mutator.iter_nodes([node])]
        deleted = 0
        try:
            for target in reversed(subtree):
                self.store.delete_comment(target.id)
                deleted += 1
        except StoreError as e:
            siblings.insert(position, node)
            logger.warning(
                "Restored comment %s after store failure (%d of %d deleted remotely): %s",
                node.id,
                deleted,
                len(subtree),
                e,
            )
            return MutationOutcome(ok=False, error=DELETE_FAILED, node=node)

        self._adjust_counters(node.parent_id, -1, post_delta=-len(subtree))
        return MutationOutcome(ok=True, node=node)

    def toggle(self, comment_id: Hashable) -> bool:
        return self.visibility.toggle(comment_id)

    # -- helpers -------------------------------------------------------------

    def _adjust_counters(
        self, parent_id: Hashable | None, delta: int, post_delta: int | None = None
    ) -> None:
        try:
            self.store.adjust_comment_count(self.post_id, delta if post_delta is None else post_delta)
            if parent_id is not None:
                self.store.adjust_reply_count(parent_id, delta)
        except StoreError as e:
            logger.warning("Counter update failed for post %s: %s", self.post_id, e)
            return

        if parent_id is not None:
            parent = mutator.find_node(self._forest, parent_id)
            if parent is not None:
                parent.reply_count = max(parent.reply_count + delta, 0)


def _as_submission(draft: CommentRecord) -> CommentRecord:
    """The draft without its provisional id, so the store assigns one."""
    return CommentRecord(
        id="",
        post_id=draft.post_id,
        parent_id=draft.parent_id,
        text=draft.text,
        user_id=draft.user_id,
        user_name=draft.user_name,
        is_anonymous=draft.is_anonymous,
        created_at=draft.created_at,
    )
