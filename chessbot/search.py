"""
Search entry point: iterative-deepening minimax with alpha-beta pruning.

The bot always maximizes its own evaluation, so the search is written as
an explicit pair of mutually recursive functions, :func:`alpha_beta_max`
for the bot's moves and :func:`alpha_beta_min` for the opponent's, rather
than negamax. Scores never flip sign between plies.

Iterative deepening:
    The root is searched to each limit of the depth schedule in turn
    (2, 4, then 5 by default). After every pass the root ranks its children
    by the values that pass produced (:meth:`GameTreeNode.reorder`), so the
    next, deeper pass starts with the most promising move and prunes more.
    The best child of the last completed pass is the move played.

Node budget:
    Instead of a clock, each decision may create at most ``node_budget``
    tree nodes. Every recursive call checks the counter first; once it is
    exceeded the context is marked cancelled, every open call unwinds with
    a losing sentinel, and the pass that ran out is thrown away in favour
    of the previous completed one.

Pruned bounds:
    When a node is cut off it returns its bound pushed one unit further
    past the window (``max + 1`` for the maximizer, ``min - 1`` for the
    minimizer). The parent therefore can never pick a pruned branch as its
    best move just because its partial value happened to tie.

Repetition:
    Immediately after the bot's own move (depth 1) the minimizer treats
    checkmate as a win, stalemate as a loss, and a third repetition as a
    loss too, so the bot avoids drawing unless it has nothing better.

Threading model:
    None. Everything runs synchronously on the caller's thread; all
    mutable search state lives in the :class:`SearchContext` passed down
    the recursion.
"""

import logging
from dataclasses import dataclass
from typing import Callable

import chess

from chessbot.config import SearchSettings
from chessbot.constants import LOSS_SCORE, NODE_BUDGET, PRUNE_MARGIN, WIN_SCORE
from chessbot.evaluate import full_score
from chessbot.position import Position
from chessbot.repetition import RepetitionTracker
from chessbot.tree import GameTreeNode

_log = logging.getLogger(__name__)

Evaluator = Callable[[Position, chess.Color], float]


class GameOverError(ValueError):
    """Raised when asked to choose a move in a position that has none."""


@dataclass
class SearchContext:
    """
    Mutable state of one decision, threaded through every recursive call.

    Attributes:
        root:        The position the decision is made from.
        side:        The colour the bot plays; evaluations are from its view.
        tracker:     Repetition counts for the current game.
        evaluator:   Frontier scoring function, ``(position, side) -> float``.
        node_budget: Node count past which the search cancels itself.
        depth_limit: Depth of the running iteration; frontier nodes sit here.
        nodes:       Tree nodes created so far during this decision. Only
                     ever increases.
        cancelled:   Set once the budget is exceeded and never cleared.
    """

    root: Position
    side: chess.Color
    tracker: RepetitionTracker
    evaluator: Evaluator = full_score
    node_budget: int = NODE_BUDGET
    depth_limit: int = 0
    nodes: int = 0
    cancelled: bool = False


@dataclass
class SearchResult:
    """
    Outcome of :func:`search`.

    Attributes:
        best:      The root child to play.
        value:     Its value in the pass it was chosen from.
        depth:     Deepest depth limit that completed (0 if none did).
        nodes:     Total tree nodes created.
        cancelled: True if the node budget cut the search short.
    """

    best: GameTreeNode
    value: float
    depth: int
    nodes: int
    cancelled: bool

    @property
    def position(self) -> Position:
        return self.best.position

    @property
    def move(self) -> object:
        return self.best.move


def _out_of_budget(ctx: SearchContext) -> bool:
    if ctx.cancelled:
        return True
    if ctx.nodes > ctx.node_budget:
        ctx.cancelled = True
        return True
    return False


def _expand(node: GameTreeNode, ctx: SearchContext) -> GameTreeNode:
    ctx.nodes += 1
    return node.next_child()


def alpha_beta_max(
    node: GameTreeNode,
    alpha: float,
    beta: float,
    depth: int,
    ctx: SearchContext,
) -> float:
    """
    Value of a node where the bot is to move.

    Args:
        node:  Node to search. Its children get their ``value`` set.
        alpha: Best value the bot is already guaranteed elsewhere.
        beta:  Best value the opponent is already guaranteed elsewhere.
        depth: Distance from the root in plies.
        ctx:   Search context (budget, cancellation, evaluator).

    Returns:
        The node's value. Above ``beta`` if the node was cut off, and
        ``LOSS_SCORE`` if the search has been cancelled.
    """
    if _out_of_budget(ctx):
        return LOSS_SCORE

    if depth == ctx.depth_limit:
        return ctx.evaluator(node.position, ctx.side)

    best = LOSS_SCORE
    while node.has_next_child():
        child = _expand(node, ctx)
        child.value = alpha_beta_min(child, alpha, beta, depth + 1, ctx)
        if ctx.cancelled:
            return LOSS_SCORE

        best = max(best, child.value)
        if best >= beta:
            return best + PRUNE_MARGIN
        alpha = max(alpha, best)
    return best


def alpha_beta_min(
    node: GameTreeNode,
    alpha: float,
    beta: float,
    depth: int,
    ctx: SearchContext,
) -> float:
    """
    Value of a node where the opponent is to move.

    Mirror image of :func:`alpha_beta_max`. At depth 1, the positions the
    bot's candidate moves lead to, game-ending and repeated positions are
    scored directly: checkmate is ``WIN_SCORE``, stalemate and a third
    repetition are ``LOSS_SCORE``.

    Returns:
        The node's value. Below ``alpha`` if the node was cut off, and
        ``LOSS_SCORE`` if the search has been cancelled.
    """
    if _out_of_budget(ctx):
        return LOSS_SCORE

    if depth == 1:
        position = node.position
        if position.is_over:
            return WIN_SCORE if position.is_check else LOSS_SCORE
        if node.is_repeated(ctx.tracker):
            return LOSS_SCORE

    if depth == ctx.depth_limit:
        return ctx.evaluator(node.position, ctx.side)

    worst = WIN_SCORE
    while node.has_next_child():
        child = _expand(node, ctx)
        child.value = alpha_beta_max(child, alpha, beta, depth + 1, ctx)
        if ctx.cancelled:
            return LOSS_SCORE

        worst = min(worst, child.value)
        if worst <= alpha:
            return worst - PRUNE_MARGIN
        beta = min(beta, worst)
    return worst


def search(
    position: Position,
    side: chess.Color,
    tracker: RepetitionTracker,
    settings: SearchSettings | None = None,
    evaluator: Evaluator = full_score,
) -> SearchResult:
    """
    Pick a successor of ``position`` for the bot playing ``side``.

    Runs iterative deepening over ``settings.depth_schedule``. The tracker
    is consulted but never updated here; see :class:`SearchBot`.

    If the node budget runs out, the best move of the previous completed
    iteration is returned. If not even the first iteration completed, the
    best move of the interrupted pass is used, and failing that the first
    legal move. A move is always returned.

    Args:
        position:  Position to move from. Not modified.
        side:      The colour the bot plays.
        tracker:   Repetition counts for the current game.
        settings:  Depth schedule and node budget; defaults if None.
        evaluator: Frontier scoring function.

    Returns:
        A :class:`SearchResult` describing the chosen move.

    Raises:
        GameOverError: if ``position`` has no legal moves.
    """
    settings = settings or SearchSettings()
    root = GameTreeNode(position)
    if not root.has_next_child():
        raise GameOverError("no legal moves: the game is already over")

    ctx = SearchContext(
        root=position,
        side=side,
        tracker=tracker,
        evaluator=evaluator,
        node_budget=settings.node_budget,
    )

    chosen: GameTreeNode | None = None
    value = LOSS_SCORE
    completed_depth = 0

    for depth_limit in settings.depth_schedule:
        ctx.depth_limit = depth_limit
        root_value = alpha_beta_max(root, LOSS_SCORE, WIN_SCORE, 0, ctx)
        best = root.reorder(tracker)

        if ctx.cancelled:
            _log.info(
                "node budget of %d exhausted at depth %d from %s; keeping depth %d result",
                ctx.node_budget,
                depth_limit,
                ctx.root.key,
                completed_depth,
            )
            if chosen is None and best is not None:
                chosen, value = best, best.value
            break

        chosen, value = best, root_value
        completed_depth = depth_limit
        _log.debug(
            "depth %d done: best=%s value=%s nodes=%d",
            depth_limit,
            best.move if best is not None else None,
            root_value,
            ctx.nodes,
        )

    if chosen is None:
        # Cancelled before the root produced a single child.
        chosen = root.next_child()
        value = chosen.value

    return SearchResult(
        best=chosen,
        value=value,
        depth=completed_depth,
        nodes=ctx.nodes,
        cancelled=ctx.cancelled,
    )


class SearchBot:
    """
    Stateful move chooser for one game at a time.

    The bot remembers which side it plays and which positions have occurred
    so far. A call with the other side to move is taken as the start of a
    new game and wipes the repetition history.

    Attributes:
        settings:    Search settings used for every decision.
        evaluator:   Frontier scoring function.
        tracker:     Repetition counts for the current game.
        side:        The colour played in the current game, or None before
                     the first call.
        last_result: The :class:`SearchResult` of the most recent decision.
    """

    def __init__(
        self,
        settings: SearchSettings | None = None,
        evaluator: Evaluator = full_score,
    ) -> None:
        self.settings = settings or SearchSettings()
        self.evaluator = evaluator
        self.tracker = RepetitionTracker()
        self.side: chess.Color | None = None
        self.last_result: SearchResult | None = None

    def new_game(self) -> None:
        """Forget the current game."""
        self.tracker.clear()
        self.side = None
        self.last_result = None

    def choose_move(self, position: Position) -> Position:
        """
        Return the successor of ``position`` the bot wants to play.

        The opponent's last move is recorded before searching and the bot's
        own choice after, so both count towards repetition detection.

        Raises:
            GameOverError: if ``position`` has no legal moves.
        """
        if self.side is not None and self.side != position.side_to_move:
            _log.info("side changed; treating this as a new game")
            self.tracker.clear()
        self.side = position.side_to_move

        if position.previous is not None:
            self.tracker.record(position.key)

        result = search(position, self.side, self.tracker, self.settings, self.evaluator)
        self.tracker.record(result.best.fingerprint)
        self.last_result = result

        _log.info(
            "move=%s value=%s depth=%d nodes=%d%s",
            result.move,
            result.value,
            result.depth,
            result.nodes,
            " (budget exhausted)" if result.cancelled else "",
        )
        return result.position
