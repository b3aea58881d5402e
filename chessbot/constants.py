"""
Bot constants: piece values, evaluation weights, and search parameters.

All numeric constants used by the evaluator and the search live here so
that tuning never requires touching the algorithms themselves.

Material is measured in "pawns times ten": a pawn is worth 10.0, which is
also the ceiling the combined positional bonus is clamped below. No amount
of positional advantage may ever be worth a whole pawn.
"""

import chess

# ---------------------------------------------------------------------------
# Piece values
# ---------------------------------------------------------------------------
# The king is never counted as material (both kings are always on the board).
# Its value is only used when a king shows up as a capture candidate.

PAWN_VALUE: float = 10.0
KNIGHT_VALUE: float = 30.0
BISHOP_VALUE: float = 30.0
ROOK_VALUE: float = 50.0
QUEEN_VALUE: float = 90.0
KING_VALUE: float = 100.0

PIECE_VALUES: dict[int, float] = {
    chess.PAWN:   PAWN_VALUE,
    chess.KNIGHT: KNIGHT_VALUE,
    chess.BISHOP: BISHOP_VALUE,
    chess.ROOK:   ROOK_VALUE,
    chess.QUEEN:  QUEEN_VALUE,
    chess.KING:   KING_VALUE,
}

# ---------------------------------------------------------------------------
# Special scores
# ---------------------------------------------------------------------------
# Wins and losses are infinite so no heuristic total can ever compete with
# them. The search also uses LOSS_SCORE as the cancellation sentinel.

WIN_SCORE: float = float("inf")
LOSS_SCORE: float = float("-inf")

# Amount added to (or subtracted from) a pruned node's bound so the parent
# can never mistake a cut-off branch for a genuinely best one.
PRUNE_MARGIN: float = 1.0

# ---------------------------------------------------------------------------
# Positional factor
# ---------------------------------------------------------------------------
# Ranks are "relative": 0 is the owner's back rank, 7 the promotion rank.
# The turn thresholds are in plies.

KING_SHELTER_UNTIL: int = 50     # kings prefer low ranks before this turn
PAWN_RUSH_FROM: int = 30         # pawns advance without a cap from here on
PAWN_RANK_CAP: int = 4
CENTRE_PREFERENCE_UNTIL: int = 35  # other pieces drift to the middle before this
CENTRE_RANK_CAP: int = 3
ENDGAME_SCALING_FROM: int = 40   # rank factors scale with turn / 20 after this
ENDGAME_SCALING_DIVISOR: float = 20.0
EDGE_FILE_PENALTY: float = -2.0  # knights and bishops on the a- or h-file

# ---------------------------------------------------------------------------
# Potential (mobility and capture) factor
# ---------------------------------------------------------------------------

MOBILITY_DIVISOR: float = 3.0
QUEEN_MOBILITY_DIVISOR: float = 2.0

# ---------------------------------------------------------------------------
# Development and castling
# ---------------------------------------------------------------------------

DEVELOPMENT_FLOOR: float = -5.0
DEVELOPMENT_DIVISOR: float = 3.0
CASTLING_BONUS: float = 5.0

# The combined non-material bonus is halved until it is below this value.
BONUS_CAP: float = PAWN_VALUE

# ---------------------------------------------------------------------------
# Search parameters
# ---------------------------------------------------------------------------
# Iterative deepening visits these depth limits in order. The deepest pass
# is the most expensive by far, so it comes right after a cheap ordering
# pass at depth 4.
DEPTH_SCHEDULE: tuple[int, ...] = (2, 4, 5)

# Total number of tree nodes one decision may materialize. Once exceeded,
# the running iteration is abandoned and the previous one's move is used.
NODE_BUDGET: int = 499_000
