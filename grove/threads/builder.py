"""Comment tree builder — flat, creation-ordered records into a reply forest.

Two passes over the input:

1. wrap every record in a :class:`CommentNode` and index it by id;
2. walk the records again in input order, appending each node either to the
   root list (no parent) or to its parent's ``replies``.

Because the second pass follows input order, every ``replies`` list ends up
in creation order, as long as the store delivered the records that way.

A record whose parent is not in the loaded set is an *orphan*.  What happens
to orphans is decided by :class:`OrphanPolicy`; whatever the policy, the
builder lists them in :attr:`CommentTreeBuilder.orphans` so that nothing
disappears without trace.

Records that cannot be read at all (no id, not a mapping) are set aside in
:attr:`CommentTreeBuilder.rejected`; building never raises.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Hashable, Iterable, Union

from grove.threads.models import CommentNode, CommentRecord

logger = logging.getLogger(__name__)

RecordLike = Union[CommentRecord, dict[str, Any]]


class OrphanPolicy(Enum):
    """What to do with a reply whose parent is not loaded."""

    DROP = "drop"  # Leave it (and its own replies) out of the forest
    PROMOTE = "promote"  # Show it as a root comment
    DEFER = "defer"  # Hold it until a later page brings the parent


def _coerce(record: RecordLike) -> CommentNode:
    if isinstance(record, dict):
        record = CommentRecord.from_dict(record)
    return CommentNode.from_record(record)


class CommentTreeBuilder:
    """Builds (and incrementally extends) one post's comment forest."""

    def __init__(self, orphans: OrphanPolicy = OrphanPolicy.DROP) -> None:
        self.policy = orphans
        self.orphans: list[CommentNode] = []
        self.duplicates: list[CommentNode] = []
        self.rejected: list[Any] = []
        self._index: dict[Hashable, CommentNode] = {}
        self._attached_to: dict[Hashable, Hashable] = {}
        self._forest: list[CommentNode] = []
        self._deferred: list[CommentNode] = []

    @property
    def forest(self) -> list[CommentNode]:
        return self._forest

    @property
    def deferred(self) -> list[CommentNode]:
        return list(self._deferred)

    # -- public API ----------------------------------------------------------

    def build(self, records: Iterable[RecordLike]) -> list[CommentNode]:
        """Assemble a fresh forest from *records*, discarding earlier state."""
        self._index = {}
        self._attached_to = {}
        self._deferred = []
        self.duplicates = []
        self.rejected = []
        forest: list[CommentNode] = []

        nodes = self._wrap(records)
        self.orphans = self._attach(nodes, forest)
        self._forest = forest
        self._report()
        return forest

    def extend(self, records: Iterable[RecordLike]) -> list[CommentNode]:
        """Attach a later page of records to the forest of the last build.

        Deferred orphans are retried first, since they were created before
        anything on the new page.
        """
        self.duplicates = []
        self.rejected = []
        pending = self._deferred
        self._deferred = []

        nodes = self._wrap(records)
        self.orphans = self._attach(pending + nodes, self._forest)
        self._report()
        return self._forest

    # -- passes --------------------------------------------------------------

    def _wrap(self, records: Iterable[RecordLike]) -> list[CommentNode]:
        nodes: list[CommentNode] = []
        for record in records:
            try:
                node = _coerce(record)
                hash((node.id, node.parent_id))
            except (AttributeError, TypeError, ValueError):
                self.rejected.append(record)
                continue
            if node.id in self._index:
                self.duplicates.append(node)
                continue
            self._index[node.id] = node
            nodes.append(node)
        return nodes

    def _attach(
        self, nodes: list[CommentNode], forest: list[CommentNode]
    ) -> list[CommentNode]:
        orphans: list[CommentNode] = []
        for node in nodes:
            if node.parent_id is None:
                forest.append(node)
                continue

            parent = self._index.get(node.parent_id)
            if parent is None or self._closes_cycle(node, parent):
                orphans.append(node)
                if self.policy == OrphanPolicy.PROMOTE:
                    forest.append(node)
                elif self.policy == OrphanPolicy.DEFER:
                    self._deferred.append(node)
                continue

            parent.replies.append(node)
            self._attached_to[node.id] = parent.id
        return orphans

    def _closes_cycle(self, node: CommentNode, parent: CommentNode) -> bool:
        """True when attaching *node* under *parent* would make a loop."""
        if parent is node:
            return True
        if not node.replies:
            return False
        current: Hashable | None = parent.id
        while current is not None:
            if current == node.id:
                return True
            current = self._attached_to.get(current)
        return False

    def _report(self) -> None:
        if self.rejected:
            logger.warning("Skipped %d malformed comment record(s)", len(self.rejected))
        if self.duplicates:
            logger.warning(
                "Skipped %d comment(s) with duplicate ids: %s",
                len(self.duplicates),
                [n.id for n in self.duplicates],
            )
        if self.orphans:
            logger.warning(
                "%d comment(s) have no loaded parent (policy=%s): %s",
                len(self.orphans),
                self.policy.value,
                [n.id for n in self.orphans],
            )


def build_forest(
    records: Iterable[RecordLike], orphans: OrphanPolicy = OrphanPolicy.DROP
) -> list[CommentNode]:
    """Build a forest in one call."""
    return CommentTreeBuilder(orphans=orphans).build(records)
