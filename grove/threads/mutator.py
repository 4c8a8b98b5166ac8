"""In-place forest mutation — insert and remove nodes at any depth.

All lookups are depth-first and pre-order: a node is visited before its
replies, and replies are visited in list order.  A node reached twice (which
only a malformed, hand-assembled forest can produce) is not descended into
again, so traversal always terminates.

These functions never touch the remote store.  A ``False`` return means
"no such node in the local forest" and leaves the forest unchanged.
"""

from __future__ import annotations

from typing import Hashable, Iterator

from grove.threads.models import CommentNode


def iter_nodes(forest: list[CommentNode]) -> Iterator[tuple[CommentNode | None, CommentNode]]:
    """Yield ``(parent, node)`` pairs depth-first; roots have parent ``None``."""
    seen: set[int] = set()
    stack: list[tuple[CommentNode | None, CommentNode]] = [(None, n) for n in reversed(forest)]
    while stack:
        parent, node = stack.pop()
        if id(node) in seen:
            continue
        seen.add(id(node))
        yield parent, node
        stack.extend((node, reply) for reply in reversed(node.replies))


def find_node(forest: list[CommentNode], node_id: Hashable) -> CommentNode | None:
    for _, node in iter_nodes(forest):
        if node.id == node_id:
            return node
    return None


def locate(
    forest: list[CommentNode], node_id: Hashable
) -> tuple[list[CommentNode], int] | None:
    """Return the list holding *node_id* and its position there."""
    for parent, node in iter_nodes(forest):
        if node.id == node_id:
            siblings = forest if parent is None else parent.replies
            position = next(i for i, n in enumerate(siblings) if n is node)
            return siblings, position
    return None


def insert_reply(
    forest: list[CommentNode], parent_id: Hashable, new_node: CommentNode
) -> bool:
    """Append *new_node* to the replies of the first node with *parent_id*."""
    parent = find_node(forest, parent_id)
    if parent is None:
        return False
    parent.replies.append(new_node)
    return True


def remove_node(
    forest: list[CommentNode], target_id: Hashable, parent_id: Hashable | None = None
) -> bool:
    """Remove *target_id* from the root list, or from *parent_id*'s replies.

    Returns whether anything was removed.
    """
    if parent_id is None:
        siblings = forest
    else:
        parent = find_node(forest, parent_id)
        if parent is None:
            return False
        siblings = parent.replies

    kept = [node for node in siblings if node.id != target_id]
    if len(kept) == len(siblings):
        return False
    siblings[:] = kept
    return True
