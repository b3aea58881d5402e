"""
Repetition tracking for draw avoidance.

Threefold repetition ends a chess game in a draw. The bot keeps its own
record of how often each position has occurred in the current game, so
the search can refuse (or, when there is no alternative, knowingly accept)
a move that would produce the third occurrence.

Counts saturate at 2: a position seen twice is already "one more and it's
a draw", and nothing beyond that changes the bot's behaviour.
"""

from typing import Iterator


class RepetitionTracker:
    """
    Mapping from position fingerprint to occurrence count (1 or 2).

    The tracker is owned by :class:`chessbot.search.SearchBot`, which records
    the opponent's move before searching and its own move afterwards, and
    clears the tracker when a new game begins.
    """

    REPEATED = 2

    def __init__(self) -> None:
        self._counts: dict[str, int] = {}

    def record(self, key: str) -> int:
        """Record one occurrence of ``key`` and return its new count."""
        count = min(self._counts.get(key, 0) + 1, self.REPEATED)
        self._counts[key] = count
        return count

    def count(self, key: str) -> int:
        return self._counts.get(key, 0)

    def is_repeated(self, key: str) -> bool:
        """True if one more occurrence of ``key`` would be a forced draw."""
        return self._counts.get(key, 0) >= self.REPEATED

    def clear(self) -> None:
        self._counts.clear()

    def __len__(self) -> int:
        return len(self._counts)

    def __contains__(self, key: object) -> bool:
        return key in self._counts

    def __iter__(self) -> Iterator[str]:
        return iter(self._counts)
