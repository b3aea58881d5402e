"""
Static evaluation: material plus a capped bundle of positional heuristics.

Scores are always from the bot's point of view (the ``side`` argument),
never from the side to move: larger is better for the bot whoever is about
to play. That is what lets the search use a plain max/min pair instead of
negamax.

The score has three parts:

1. Material. Pawn 10, knight 30, bishop 30, rook 50, queen 90. The bot's
   pieces count positively, the opponent's negatively. Kings are not
   counted; their value (100) only matters as a capture target.

2. A bonus summing several small positional terms:
   - position: rank and file preferences for the bot's pieces, which
     change as the game goes on (see :func:`rank_factor`);
   - potential: how many squares the side to move's sliding pieces can
     reach. The bot's own potential is credited on its turn and the
     opponent's is debited on theirs;
   - development: a small penalty for each of the bot's pieces that has
     never left its starting square;
   - castling: a flat reward when the bot's king has just jumped two files.
   The bonus is halved until it is worth less than one pawn, so no
   positional consideration can ever justify giving up material.

3. The best capture available to the side to move: the value of the most
   valuable enemy piece any of its pieces currently attacks. It counts for
   the bot on its turn and against the bot on the opponent's turn.

Every accumulator lives inside a single :func:`evaluate_position` call and
is handed back through return values, so evaluations never share state and
may safely run side by side.
"""

from dataclasses import dataclass

import chess

from chessbot.constants import (
    BONUS_CAP,
    CASTLING_BONUS,
    CENTRE_PREFERENCE_UNTIL,
    CENTRE_RANK_CAP,
    DEVELOPMENT_DIVISOR,
    DEVELOPMENT_FLOOR,
    EDGE_FILE_PENALTY,
    ENDGAME_SCALING_DIVISOR,
    ENDGAME_SCALING_FROM,
    KING_SHELTER_UNTIL,
    MOBILITY_DIVISOR,
    PAWN_RANK_CAP,
    PAWN_RUSH_FROM,
    PIECE_VALUES,
    QUEEN_MOBILITY_DIVISOR,
)
from chessbot.position import PlacedPiece, Position

# ---------------------------------------------------------------------------
# Movement patterns, as (file, rank) steps
# ---------------------------------------------------------------------------

ORTHOGONAL: tuple[tuple[int, int], ...] = ((-1, 0), (1, 0), (0, 1), (0, -1))
DIAGONAL: tuple[tuple[int, int], ...] = ((-1, -1), (1, -1), (-1, 1), (1, 1))
KING_STEPS: tuple[tuple[int, int], ...] = ORTHOGONAL + DIAGONAL
KNIGHT_JUMPS: tuple[tuple[int, int], ...] = (
    (-1, -2), (1, -2), (-1, 2), (1, 2),
    (-2, -1), (-2, 1), (2, -1), (2, 1),
)

SLIDING_RAYS: dict[int, tuple[tuple[int, int], ...]] = {
    chess.ROOK: ORTHOGONAL,
    chess.BISHOP: DIAGONAL,
    chess.QUEEN: ORTHOGONAL + DIAGONAL,
}


@dataclass(frozen=True)
class Evaluation:
    """
    Breakdown of one evaluation.

    Attributes:
        material:     Material balance from the bot's point of view.
        bonus:        Clamped sum of the positional terms, |bonus| < 10.
        best_capture: Best capture value of the side to move, negative
                      when the side to move is the opponent.
    """

    material: float = 0.0
    bonus: float = 0.0
    best_capture: float = 0.0

    @property
    def score(self) -> float:
        return self.material + self.bonus + self.best_capture


def clamp_bonus(bonus: float) -> float:
    """Halve ``bonus`` until its magnitude is below one pawn."""
    while abs(bonus) >= BONUS_CAP:
        bonus *= 0.5
    return bonus


def relative_rank(piece: PlacedPiece) -> int:
    """Rank counted from the owner's side of the board (0 = back rank)."""
    return piece.rank if piece.side == chess.WHITE else 7 - piece.rank


# ---------------------------------------------------------------------------
# Positional terms
# ---------------------------------------------------------------------------


def rank_factor(kind: chess.PieceType, rank: int, turn: int) -> float:
    """
    Preference of a piece for its relative rank at a given turn.

    - Kings stay home: ``-rank / 3`` until turn 50.
    - Pawns advance: ``min(rank, 4)`` until turn 30, the full rank after.
    - Every other piece, kings included, likes the middle of the board:
      ``min(rank, 3)`` until turn 35.

    After turn 40 the result is multiplied by ``turn / 20`` so that pushing
    pawns matters more and more as the game goes on.

    Args:
        kind: python-chess piece type.
        rank: Relative rank, 0..7.
        turn: Ply count of the position.

    Returns:
        The rank factor.
    """
    factor = 0.0
    if kind == chess.KING and turn < KING_SHELTER_UNTIL:
        factor = -rank / 3.0

    if kind == chess.PAWN:
        if turn < PAWN_RUSH_FROM:
            factor += min(rank, PAWN_RANK_CAP)
        else:
            factor += rank
    elif turn < CENTRE_PREFERENCE_UNTIL:
        factor += min(rank, CENTRE_RANK_CAP)

    if turn > ENDGAME_SCALING_FROM:
        factor *= turn / ENDGAME_SCALING_DIVISOR
    return factor


def file_factor(kind: chess.PieceType, file: int) -> float:
    """Knights and bishops stuck on an edge file are penalized."""
    if kind in (chess.KNIGHT, chess.BISHOP) and file in (0, 7):
        return EDGE_FILE_PENALTY
    return 0.0


def position_factor(piece: PlacedPiece, turn: int) -> float:
    return rank_factor(piece.kind, relative_rank(piece), turn) + file_factor(piece.kind, piece.file)


def development_factor(position: Position, piece: PlacedPiece) -> float:
    """
    Penalty for a piece (other than the king) still on its starting square.

    Proportional to the piece's value, floored at -5, then divided by 3 so
    it nudges development without forcing it.
    """
    if piece.kind == chess.KING or position.has_moved(piece):
        return 0.0
    penalty = max(-PIECE_VALUES[piece.kind] / 10.0, DEVELOPMENT_FLOOR)
    return penalty / DEVELOPMENT_DIVISOR


def castling_factor(position: Position, side: chess.Color) -> float:
    """Reward a king that moved exactly two files since the previous position."""
    previous = position.previous
    if previous is None:
        return 0.0
    king, past_king = position.king(side), previous.king(side)
    if king is None or past_king is None:
        return 0.0
    return CASTLING_BONUS if abs(king.file - past_king.file) == 2 else 0.0


# ---------------------------------------------------------------------------
# Potential: mobility and capture opportunities
# ---------------------------------------------------------------------------


def capture_value(position: Position, piece: PlacedPiece, file: int, rank: int) -> float:
    """Material value ``piece`` would win on (file, rank), or 0.0."""
    target = position.piece_at(file, rank)
    if target is None or target.side == piece.side:
        return 0.0
    return PIECE_VALUES[target.kind]


def potential(position: Position, piece: PlacedPiece) -> tuple[float, float]:
    """
    What ``piece`` could do if its side were to move now.

    Sliding pieces walk each of their rays until the edge of the board or
    the first occupied square, counting one unit of mobility per empty
    square, and test that occupied square as a capture. Pawns (forward
    diagonals), knights and kings only test their fixed target squares
    for captures and earn no mobility.

    Only pieces of the side to move have any potential; everything else
    returns zeros.

    Args:
        position: Position being evaluated.
        piece:    The piece to probe from.

    Returns:
        ``(mobility, best_capture)``: the scaled mobility term and the most
        valuable enemy piece this piece attacks (0.0 if none).
    """
    if piece.side != position.side_to_move:
        return 0.0, 0.0

    mobility = 0.0
    best_capture = 0.0

    rays = SLIDING_RAYS.get(piece.kind)
    if rays is not None:
        for step_file, step_rank in rays:
            file, rank = piece.file + step_file, piece.rank + step_rank
            while position.is_valid(file, rank) and position.piece_at(file, rank) is None:
                mobility += 1.0
                file, rank = file + step_file, rank + step_rank
            best_capture = max(best_capture, capture_value(position, piece, file, rank))
        if piece.kind == chess.QUEEN:
            mobility /= QUEEN_MOBILITY_DIVISOR
        return mobility / MOBILITY_DIVISOR, best_capture

    if piece.kind == chess.PAWN:
        forward = 1 if piece.side == chess.WHITE else -1
        targets: tuple[tuple[int, int], ...] = ((-1, forward), (1, forward))
    elif piece.kind == chess.KNIGHT:
        targets = KNIGHT_JUMPS
    else:
        targets = KING_STEPS

    for step_file, step_rank in targets:
        best_capture = max(
            best_capture,
            capture_value(position, piece, piece.file + step_file, piece.rank + step_rank),
        )
    return 0.0, best_capture


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------


def evaluate_position(
    position: Position,
    side: chess.Color,
    include_heuristics: bool = True,
) -> Evaluation:
    """
    Evaluate ``position`` for the bot playing ``side``.

    Args:
        position:           The position to score. Not modified.
        side:               The colour the bot plays.
        include_heuristics: False to compute material only.

    Returns:
        An :class:`Evaluation`; its ``score`` is the number the search uses.
    """
    material = 0.0
    bonus = 0.0
    best_capture = 0.0
    to_move = position.side_to_move
    turn = position.turn

    for piece in position.pieces():
        if piece.kind != chess.KING:
            value = PIECE_VALUES[piece.kind]
            material += value if piece.side == side else -value

        if not include_heuristics:
            continue

        if piece.side == side:
            mobility, capture = potential(position, piece)
            bonus += position_factor(piece, turn) + mobility + development_factor(position, piece)
            best_capture = max(best_capture, capture)
        elif to_move != side:
            # The opponent's options only hurt when it is their move.
            mobility, capture = potential(position, piece)
            bonus -= mobility
            best_capture = max(best_capture, capture)

    if not include_heuristics:
        return Evaluation(material=material)

    if to_move == side:
        bonus += castling_factor(position, side)

    return Evaluation(
        material=material,
        bonus=clamp_bonus(bonus),
        best_capture=best_capture if to_move == side else -best_capture,
    )


def material_score(position: Position, side: chess.Color) -> float:
    """Material balance only."""
    return evaluate_position(position, side, include_heuristics=False).score


def full_score(position: Position, side: chess.Color) -> float:
    """Material, clamped positional bonus and best capture."""
    return evaluate_position(position, side).score


def evaluate(position: Position, side: chess.Color, include_heuristics: bool = True) -> float:
    return full_score(position, side) if include_heuristics else material_score(position, side)
