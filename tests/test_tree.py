"""
Tests for GameTreeNode expansion and between-pass move ordering.
"""

import chess
import pytest

from chessbot.position import ChessPosition
from chessbot.repetition import RepetitionTracker
from chessbot.tree import GameTreeNode

from helpers import SyntheticPosition, build


def synthetic_root(values, captures=()):
    """Root whose i-th child has the given value and capture flag."""
    children = [
        SyntheticPosition(f"root.{i}", capture=i in captures, side=chess.BLACK)
        for i in range(len(values))
    ]
    root = SyntheticPosition("root", children)
    node = GameTreeNode(root)
    while node.has_next_child():
        node.next_child()
    for child, value in zip(node.children, values):
        child.value = value
    return node


def ordered_keys(node):
    """Keys of the positions the pending queue will expand, in order."""
    return [node.position.play(move).key for move in node.pending]


# ════════════════════════════════════════════════════════════════════════════
#  EXPANSION
# ════════════════════════════════════════════════════════════════════════════

class TestExpansion:
    def test_root_keeps_its_children(self):
        node = GameTreeNode(build([1, 2, 3]))
        first = node.next_child()
        second = node.next_child()

        assert node.children == [first, second]
        assert first.parent is node
        assert node.is_root and not first.is_root

    def test_inner_nodes_do_not_keep_children(self):
        root = GameTreeNode(build([[1, 2], [3]]))
        child = root.next_child()
        child.next_child()
        child.next_child()

        assert child.children == []
        assert not child.has_next_child()

    def test_moves_generated_on_first_use(self, monkeypatch):
        calls = []
        original = SyntheticPosition.moves

        def counting_moves(position):
            calls.append(position.key)
            return original(position)

        monkeypatch.setattr(SyntheticPosition, "moves", counting_moves)
        node = GameTreeNode(build([[1, 2], [3]]))
        assert calls == []

        child = node.next_child()

        assert calls == ["root"]
        assert node.has_next_child()
        assert calls == ["root"]
        assert child.pending == [0, 1]
        assert calls == ["root", "root.0"]

    def test_exhausted_node_raises(self):
        node = GameTreeNode(build([1]))
        node.next_child()

        with pytest.raises(IndexError):
            node.next_child()

    def test_children_and_pending_partition_moves(self):
        position = ChessPosition.from_fen()
        node = GameTreeNode(position)
        for _ in range(7):
            node.next_child()

        expanded = [child.move for child in node.children]
        assert len(expanded) + len(node.pending) == 20
        assert set(expanded) | set(node.pending) == set(position.moves())
        assert not set(expanded) & set(node.pending)

    def test_fingerprint_is_cached_position_key(self):
        position = ChessPosition.from_fen()
        node = GameTreeNode(position)

        assert node.fingerprint == position.key
        assert node.fingerprint is node.fingerprint

    def test_parent_link_does_not_keep_parent_alive(self):
        # The root holds on to its children, so go two levels below it.
        root = GameTreeNode(build([[[1]]]))
        child = root.next_child()
        grandchild = child.next_child()
        leaf = grandchild.next_child()
        assert leaf.parent is grandchild

        del grandchild

        assert leaf.parent is None
        assert child.parent is root


# ════════════════════════════════════════════════════════════════════════════
#  REORDERING
# ════════════════════════════════════════════════════════════════════════════

class TestReorder:
    def test_sorts_by_value_descending(self):
        node = synthetic_root([1.0, 5.0, 3.0])

        best = node.reorder(RepetitionTracker())

        assert best.position.key == "root.1"
        assert ordered_keys(node) == ["root.1", "root.2", "root.0"]
        assert node.children == []

    def test_equal_values_keep_creation_order(self):
        node = synthetic_root([2.0, 2.0, 2.0])
        node.reorder(RepetitionTracker())

        assert ordered_keys(node) == ["root.0", "root.1", "root.2"]

    def test_captures_go_first_but_best_is_by_value(self):
        node = synthetic_root([9.0, 4.0, 7.0, 1.0], captures={1, 3})

        best = node.reorder(RepetitionTracker())

        assert best.position.key == "root.0"
        assert ordered_keys(node) == ["root.1", "root.3", "root.0", "root.2"]

    def test_reorder_is_a_permutation(self):
        node = synthetic_root([3.0, -1.0, 8.0, 8.0, 0.5], captures={2, 4})
        before = sorted(child.position.key for child in node.children)

        node.reorder(RepetitionTracker())

        assert sorted(ordered_keys(node)) == before

    def test_repeated_children_are_dropped(self):
        node = synthetic_root([5.0, 3.0, 1.0])
        tracker = RepetitionTracker()
        tracker.record("root.0")
        tracker.record("root.0")

        best = node.reorder(tracker)

        assert best.position.key == "root.1"
        assert ordered_keys(node) == ["root.1", "root.2"]

    def test_seen_once_is_not_repeated(self):
        node = synthetic_root([5.0, 3.0])
        tracker = RepetitionTracker()
        tracker.record("root.0")

        assert node.reorder(tracker).position.key == "root.0"

    def test_all_repeated_keeps_lowest_ranked(self):
        node = synthetic_root([5.0, 3.0, 1.0])
        tracker = RepetitionTracker()
        for key in ("root.0", "root.1", "root.2"):
            tracker.record(key)
            tracker.record(key)

        best = node.reorder(tracker)

        assert best.position.key == "root.2"
        assert ordered_keys(node) == ["root.2"]

    def test_no_children_returns_none(self):
        node = GameTreeNode(build([1, 2]))

        assert node.reorder(RepetitionTracker()) is None
        assert len(node.pending) == 2

    def test_unexpanded_moves_are_kept_last(self):
        node = GameTreeNode(build([1, 2, 3]))
        node.next_child().value = 1.0

        node.reorder(RepetitionTracker())

        assert ordered_keys(node) == ["root.0", "root.1", "root.2"]

    def test_reordered_queue_expands_again(self):
        node = synthetic_root([1.0, 2.0])
        node.reorder(RepetitionTracker())

        assert node.has_next_child()
        assert node.next_child().position.key == "root.1"
        assert [child.position.key for child in node.children] == ["root.1"]

    def test_chess_captures_are_tried_first(self):
        # White can take the d5 pawn with the e4 pawn.
        position = ChessPosition.from_fen("4k3/8/8/3p4/4P3/8/8/4K3 w - - 0 1")
        node = GameTreeNode(position)
        while node.has_next_child():
            node.next_child()

        node.reorder(RepetitionTracker())

        assert node.pending[0] == chess.Move.from_uci("e4d5")
