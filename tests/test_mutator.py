"""Tests for in-place forest mutation."""

import copy

from grove.threads.builder import build_forest
from grove.threads.models import CommentNode, CommentRecord
from grove.threads.mutator import find_node, insert_reply, iter_nodes, locate, remove_node


def _rec(comment_id, parent_id=None) -> CommentRecord:
    return CommentRecord(id=comment_id, post_id="post-1", parent_id=parent_id, text=f"comment {comment_id}")


def _forest() -> list[CommentNode]:
    # A
    # └── B
    #     └── C
    # D
    return build_forest([_rec("A"), _rec("B", "A"), _rec("C", "B"), _rec("D")])


def _node(comment_id, parent_id=None) -> CommentNode:
    return CommentNode.from_record(_rec(comment_id, parent_id))


def test_iter_nodes_is_depth_first_preorder():
    forest = _forest()
    visited = [(p.id if p else None, n.id) for p, n in iter_nodes(forest)]
    assert visited == [(None, "A"), ("A", "B"), ("B", "C"), (None, "D")]


def test_iter_nodes_terminates_on_malformed_forest():
    node = _node("loop")
    node.replies.append(node)
    assert [n.id for _, n in iter_nodes([node])] == ["loop"]


def test_find_node():
    forest = _forest()
    assert find_node(forest, "C").id == "C"
    assert find_node(forest, "missing") is None


def test_insert_reply_under_root():
    forest = _forest()
    new = _node("E", "A")
    assert insert_reply(forest, "A", new)
    assert forest[0].replies[-1] is new


def test_insert_reply_deep():
    forest = _forest()
    new = _node("E", "C")
    assert insert_reply(forest, "C", new)
    assert find_node(forest, "C").replies == [new]


def test_insert_reply_missing_parent_leaves_forest_unchanged():
    forest = _forest()
    before = copy.deepcopy(forest)
    assert not insert_reply(forest, "nope", _node("E", "nope"))
    assert forest == before


def test_remove_nested_node():
    forest = _forest()
    assert remove_node(forest, "C", parent_id="B")
    assert find_node(forest, "B").replies == []
    assert not remove_node(forest, "C", parent_id="B")


def test_remove_root():
    forest = _forest()
    assert remove_node(forest, "D")
    assert [n.id for n in forest] == ["A"]
    assert not remove_node(forest, "D")


def test_remove_takes_subtree_with_it():
    forest = _forest()
    assert remove_node(forest, "A")
    assert find_node(forest, "C") is None


def test_remove_with_unknown_parent():
    forest = _forest()
    before = copy.deepcopy(forest)
    assert not remove_node(forest, "C", parent_id="missing")
    assert forest == before


def test_remove_keeps_list_identity():
    forest = _forest()
    replies = find_node(forest, "B").replies
    remove_node(forest, "C", parent_id="B")
    assert find_node(forest, "B").replies is replies


def test_locate():
    forest = _forest()
    siblings, position = locate(forest, "D")
    assert siblings is forest
    assert position == 1

    siblings, position = locate(forest, "C")
    assert siblings is find_node(forest, "B").replies
    assert position == 0

    assert locate(forest, "missing") is None
