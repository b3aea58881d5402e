"""
Chess bot package.

Chooses moves by iterative-deepening minimax with alpha-beta pruning over a
lazily expanded game tree, scoring frontier positions with a material and
positional heuristic. Legal move generation comes from python-chess.

Modules:
    constants  - Piece values, heuristic weights, and search defaults
    config     - Validated search settings (TOML file and environment)
    position   - Position protocol and its python-chess adapter
    repetition - Occurrence counts for threefold-repetition avoidance
    tree       - Lazily expanded game tree with between-pass move ordering
    evaluate   - Static evaluation (material + capped positional bonus)
    search     - Alpha-beta search, iterative deepening, and SearchBot
"""

from chessbot.config import SearchSettings, load_settings
from chessbot.position import ChessPosition, PlacedPiece, Position
from chessbot.repetition import RepetitionTracker
from chessbot.search import GameOverError, SearchBot, SearchResult, search
from chessbot.tree import GameTreeNode

__all__ = [
    "ChessPosition",
    "GameOverError",
    "GameTreeNode",
    "PlacedPiece",
    "Position",
    "RepetitionTracker",
    "SearchBot",
    "SearchResult",
    "SearchSettings",
    "load_settings",
    "search",
]
