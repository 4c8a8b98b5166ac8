"""Expanded/collapsed state for comment subtrees."""

from __future__ import annotations

from typing import Hashable, Iterator

from grove.threads.models import CommentNode


class VisibilityTracker:
    """Sparse id -> expanded map; unknown ids are collapsed."""

    def __init__(self) -> None:
        self._expanded: dict[Hashable, bool] = {}

    def toggle(self, comment_id: Hashable) -> bool:
        """Flip the state for *comment_id* and return the new value."""
        state = not self._expanded.get(comment_id, False)
        self._expanded[comment_id] = state
        return state

    def is_expanded(self, comment_id: Hashable) -> bool:
        return self._expanded.get(comment_id, False)

    def expand(self, comment_id: Hashable) -> None:
        self._expanded[comment_id] = True

    def collapse(self, comment_id: Hashable) -> None:
        self._expanded[comment_id] = False

    def clear(self) -> None:
        self._expanded.clear()


def walk_visible(
    forest: list[CommentNode], tracker: VisibilityTracker, depth: int = 0
) -> Iterator[tuple[int, CommentNode]]:
    """Yield ``(depth, node)`` for everything a reader can currently see.

    A node is always shown; its replies only when it is expanded.
    """
    for node in forest:
        yield depth, node
        if node.replies and tracker.is_expanded(node.id):
            yield from walk_visible(node.replies, tracker, depth + 1)
