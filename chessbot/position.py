"""
Position adapter: the only view of the game the search and evaluator get.

The bot never deals with move legality itself. Everything it needs to know
about a game state is described by the :class:`Position` protocol below,
and :class:`ChessPosition` implements that protocol on top of python-chess.

Two details deserve attention:

- ``key`` is the repetition fingerprint. It is the EPD of the board
  (placement, side to move, castling rights, legal en passant square), so
  two positions share a key exactly when python-chess would consider them
  the same for repetition purposes. Move counters are deliberately absent.
- ``is_capture`` describes the move that *produced* the position, not any
  move available from it. The tree uses it to search captures first.

Coordinates are (file, rank) pairs in 0..7, a1 being (0, 0).
"""

from typing import Iterator, NamedTuple, Protocol, Sequence

import chess


class PlacedPiece(NamedTuple):
    """A piece together with the square it stands on."""

    side: chess.Color
    kind: chess.PieceType
    file: int
    rank: int

    @property
    def square(self) -> chess.Square:
        return chess.square(self.file, self.rank)


class Position(Protocol):
    """
    Read-only game state consumed by the tree, the evaluator and the search.

    Implementations must be immutable: ``play`` returns a new position and
    never modifies the receiver.
    """

    @property
    def side_to_move(self) -> chess.Color: ...

    @property
    def turn(self) -> int: ...

    @property
    def is_over(self) -> bool: ...

    @property
    def is_check(self) -> bool: ...

    @property
    def previous(self) -> "Position | None": ...

    @property
    def key(self) -> str: ...

    @property
    def is_capture(self) -> bool: ...

    def moves(self) -> Sequence[object]: ...

    def play(self, move: object) -> "Position": ...

    def pieces(self) -> Iterator[PlacedPiece]: ...

    def piece_at(self, file: int, rank: int) -> PlacedPiece | None: ...

    def is_valid(self, file: int, rank: int) -> bool: ...

    def has_moved(self, piece: PlacedPiece) -> bool: ...

    def king(self, side: chess.Color) -> PlacedPiece | None: ...


def _home_squares() -> dict[tuple[chess.Color, chess.PieceType], frozenset[chess.Square]]:
    """Squares every piece starts the game on, keyed by (side, kind)."""
    homes: dict[tuple[chess.Color, chess.PieceType], set[chess.Square]] = {}
    for square, piece in chess.Board().piece_map().items():
        homes.setdefault((piece.color, piece.piece_type), set()).add(square)
    return {owner: frozenset(squares) for owner, squares in homes.items()}


_HOME_SQUARES = _home_squares()


class ChessPosition:
    """
    :class:`Position` implementation backed by a :class:`chess.Board`.

    The wrapped board is copied on every :meth:`play`, so a ChessPosition
    can be shared freely between tree nodes.

    Attributes:
        board:     The python-chess board. Treat as read-only.
        last_move: The move that produced this position, or None for a
                   position built directly from a board with no history.
    """

    def __init__(
        self,
        board: chess.Board,
        previous: "ChessPosition | None" = None,
        capture: bool = False,
    ) -> None:
        self.board = board
        self.last_move: chess.Move | None = board.move_stack[-1] if board.move_stack else None
        self._previous = previous
        self._capture = capture
        self._key: str | None = None

    @classmethod
    def from_fen(cls, fen: str = chess.STARTING_FEN) -> "ChessPosition":
        """Build a position from a FEN string (the start position by default)."""
        return cls(chess.Board(fen))

    def __repr__(self) -> str:
        return f"ChessPosition({self.board.fen()!r})"

    # -----------------------------------------------------------------------
    # State flags
    # -----------------------------------------------------------------------

    @property
    def side_to_move(self) -> chess.Color:
        return self.board.turn

    @property
    def turn(self) -> int:
        """Number of plies played since the start of the game."""
        return self.board.ply()

    @property
    def is_over(self) -> bool:
        return self.board.is_game_over()

    @property
    def is_check(self) -> bool:
        return self.board.is_check()

    @property
    def previous(self) -> "ChessPosition | None":
        """
        The position one ply earlier.

        Positions created by :meth:`play` know their predecessor directly.
        A position built from a board with a move history reconstructs it on
        first access by popping the last move off a copy of the board.
        """
        if self._previous is None and self.board.move_stack:
            self._rebuild_previous()
        return self._previous

    @property
    def key(self) -> str:
        if self._key is None:
            self._key = self.board.epd()
        return self._key

    @property
    def is_capture(self) -> bool:
        if self._previous is None and self.board.move_stack:
            self._rebuild_previous()
        return self._capture

    def _rebuild_previous(self) -> None:
        board = self.board.copy()
        move = board.pop()
        self._capture = board.is_capture(move)
        self._previous = ChessPosition(board)

    # -----------------------------------------------------------------------
    # Successors
    # -----------------------------------------------------------------------

    def moves(self) -> list[chess.Move]:
        return list(self.board.legal_moves)

    def play(self, move: chess.Move) -> "ChessPosition":
        board = self.board.copy()
        capture = board.is_capture(move)
        board.push(move)
        return ChessPosition(board, previous=self, capture=capture)

    # -----------------------------------------------------------------------
    # Board accessors
    # -----------------------------------------------------------------------

    def pieces(self) -> Iterator[PlacedPiece]:
        for square, piece in self.board.piece_map().items():
            yield PlacedPiece(
                piece.color,
                piece.piece_type,
                chess.square_file(square),
                chess.square_rank(square),
            )

    @staticmethod
    def is_valid(file: int, rank: int) -> bool:
        return 0 <= file < 8 and 0 <= rank < 8

    def piece_at(self, file: int, rank: int) -> PlacedPiece | None:
        if not self.is_valid(file, rank):
            return None
        piece = self.board.piece_at(chess.square(file, rank))
        if piece is None:
            return None
        return PlacedPiece(piece.color, piece.piece_type, file, rank)

    def has_moved(self, piece: PlacedPiece) -> bool:
        """
        True if the piece has left its starting square at some point.

        A piece off its home squares has certainly moved. A piece on a home
        square has moved if any recorded move touched that square, which
        covers both "left and came back" and "arrived from elsewhere".
        Boards set up from a FEN carry no history, so a piece sitting on a
        home square of its kind is then assumed to be undeveloped.
        """
        square = piece.square
        if square not in _HOME_SQUARES.get((piece.side, piece.kind), frozenset()):
            return True
        return any(
            move.from_square == square or move.to_square == square
            for move in self.board.move_stack
        )

    def king(self, side: chess.Color) -> PlacedPiece | None:
        square = self.board.king(side)
        if square is None:
            return None
        return PlacedPiece(side, chess.KING, chess.square_file(square), chess.square_rank(square))
