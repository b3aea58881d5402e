"""
Synthetic positions for exercising the tree and the search without chess.

A synthetic game is a nested list: a number is a leaf scored with that
value, a list holds the subtrees of an inner node. ``build([[3, 7], [2, 9]])``
is a root with two replies, each answered by two leaves.
"""

import random

import chess

from chessbot.position import PlacedPiece


class SyntheticPosition:
    """Minimal Position: fixed successors, fixed value, no pieces."""

    def __init__(
        self,
        key: str,
        children: list["SyntheticPosition"] | None = None,
        value: float = 0.0,
        side: chess.Color = chess.WHITE,
        over: bool = False,
        check: bool = False,
        capture: bool = False,
    ) -> None:
        self.key = key
        self.children = children or []
        self.value = value
        self.side_to_move = side
        self.is_over = over
        self.is_check = check
        self.is_capture = capture
        self.turn = key.count(".")
        self.previous = None

    def __repr__(self) -> str:
        return f"SyntheticPosition({self.key!r}, value={self.value!r})"

    def moves(self) -> list[int]:
        return list(range(len(self.children)))

    def play(self, move: int) -> "SyntheticPosition":
        return self.children[move]

    def pieces(self):
        return iter(())

    def piece_at(self, file: int, rank: int) -> PlacedPiece | None:
        return None

    def is_valid(self, file: int, rank: int) -> bool:
        return 0 <= file < 8 and 0 <= rank < 8

    def has_moved(self, piece: PlacedPiece) -> bool:
        return True

    def king(self, side: chess.Color) -> PlacedPiece | None:
        return None


def build(spec, key: str = "root", side: chess.Color = chess.WHITE) -> SyntheticPosition:
    """Build a synthetic tree from a nested list (see module docstring)."""
    if not isinstance(spec, list):
        return SyntheticPosition(key, value=float(spec), side=side)
    children = [build(sub, f"{key}.{i}", not side) for i, sub in enumerate(spec)]
    return SyntheticPosition(key, children, side=side)


def random_spec(rng: random.Random, depth: int, max_branching: int = 5):
    """Random nested-list tree with every leaf exactly ``depth`` plies down."""
    if depth == 0:
        return rng.randint(-50, 50)
    return [random_spec(rng, depth - 1, max_branching) for _ in range(rng.randint(1, max_branching))]


def minimax(position: SyntheticPosition, maximizing: bool = True) -> float:
    """Plain, unpruned minimax over a synthetic tree."""
    if not position.children:
        return position.value
    values = [minimax(child, not maximizing) for child in position.children]
    return max(values) if maximizing else min(values)


class LeafRecorder:
    """Evaluator returning the synthetic value and logging every call."""

    def __init__(self) -> None:
        self.seen: list[str] = []

    def __call__(self, position: SyntheticPosition, side: chess.Color) -> float:
        self.seen.append(position.key)
        return position.value


def full_spec(depth: int, branching: int, value: float = 1):
    """Complete tree: every inner node has ``branching`` children."""
    if depth == 0:
        return value
    return [full_spec(depth - 1, branching, value) for _ in range(branching)]
