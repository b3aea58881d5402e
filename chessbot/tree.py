"""
Lazily expanded game tree used by the iterative-deepening search.

Each :class:`GameTreeNode` wraps one position and an explicit queue of the
moves that have not been turned into child nodes yet. Children are created
one at a time by :meth:`GameTreeNode.next_child`, which is what lets
alpha-beta skip the construction of pruned subtrees entirely.

Only the root keeps the children it creates. Between two iterations the
search calls :meth:`GameTreeNode.reorder` on the root, which ranks those
children by the value the last pass gave them and turns that ranking into
the root's new move queue. Alpha-beta prunes most when the strongest move
is tried first, so a cheap shallow pass ends up guiding the expensive deep
one. Deeper nodes are rebuilt from scratch on every pass.
"""

import logging
import weakref

from chessbot.position import Position
from chessbot.repetition import RepetitionTracker

_log = logging.getLogger(__name__)


class GameTreeNode:
    """
    One node of the search tree.

    Attributes:
        position: The position this node represents. Never modified.
        move:     The move that led here from the parent (None at the root).
        children: Realized child nodes, in the order they were created.
                  Only populated on the root.
        value:    Utility from the last search pass that reached this node,
                  from the bot's point of view.

    Invariant: ``children`` plus the pending move queue always hold every
    legal move of ``position`` exactly once, apart from the repeated-draw
    moves :meth:`reorder` deliberately drops.
    """

    def __init__(
        self,
        position: Position,
        parent: "GameTreeNode | None" = None,
        move: object = None,
    ) -> None:
        self.position = position
        self.move = move
        self.children: list[GameTreeNode] = []
        self.value: float = 0.0
        self._parent = weakref.ref(parent) if parent is not None else None
        # Filled on first use; frontier nodes never generate their moves.
        self._pending: list[object] | None = None
        self._cursor = 0
        self._fingerprint: str | None = None

    def __repr__(self) -> str:
        return f"GameTreeNode(move={self.move!r}, value={self.value!r})"

    @property
    def parent(self) -> "GameTreeNode | None":
        return self._parent() if self._parent is not None else None

    @property
    def is_root(self) -> bool:
        return self._parent is None

    @property
    def fingerprint(self) -> str:
        """Repetition key of the position, computed on first use."""
        if self._fingerprint is None:
            self._fingerprint = self.position.key
        return self._fingerprint

    @property
    def pending(self) -> list[object]:
        """Moves still waiting to be expanded, in the order they will be."""
        return self._queue()[self._cursor:]

    def _queue(self) -> list[object]:
        if self._pending is None:
            self._pending = list(self.position.moves())
        return self._pending

    # -----------------------------------------------------------------------
    # Expansion
    # -----------------------------------------------------------------------

    def has_next_child(self) -> bool:
        return self._cursor < len(self._queue())

    def next_child(self) -> "GameTreeNode":
        """
        Create and return the node for the next pending move.

        Raises:
            IndexError: if every move has already been expanded.
        """
        if not self.has_next_child():
            raise IndexError("no pending successors left to expand")
        move = self._queue()[self._cursor]
        self._cursor += 1
        child = GameTreeNode(self.position.play(move), parent=self, move=move)
        if self.is_root:
            self.children.append(child)
        return child

    # -----------------------------------------------------------------------
    # Repetition and move ordering
    # -----------------------------------------------------------------------

    def is_repeated(self, tracker: RepetitionTracker) -> bool:
        """True if reaching this node would repeat a position a third time."""
        return tracker.is_repeated(self.fingerprint)

    def reorder(self, tracker: RepetitionTracker) -> "GameTreeNode | None":
        """
        Rank the children of the last pass and queue them for the next one.

        Children are sorted by value, best first (ties keep creation order).
        Children whose position would be a threefold repetition are dropped,
        unless that would drop every child; in that case the lowest ranked
        one is kept so there is always a move to play. The survivors are
        then split so that captures come before quiet moves, each group
        keeping its ranked order, and their moves replace the pending queue,
        followed by any moves the last pass never expanded. ``children`` is
        emptied so the next pass starts clean.

        Args:
            tracker: Occurrence counts of the positions seen this game.

        Returns:
            The best surviving child by value, or None if there were no
            children to rank.
        """
        ranked = sorted(self.children, key=lambda node: node.value, reverse=True)
        self.children = []
        if not ranked:
            return None

        survivors = [node for node in ranked if not node.is_repeated(tracker)]
        if not survivors:
            _log.debug("every move repeats a position; accepting a draw with %s", ranked[-1].move)
            survivors = [ranked[-1]]

        captures = [node for node in survivors if node.position.is_capture]
        quiet = [node for node in survivors if not node.position.is_capture]

        # Moves the pass never reached (cut off at the root) go last, unranked.
        unexpanded = self.pending
        self._pending = [node.move for node in captures + quiet] + unexpanded
        self._cursor = 0
        return survivors[0]
