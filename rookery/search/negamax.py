"""
Negamax Search with Alpha-Beta Pruning

This module implements the core search algorithm for the engine.
Negamax explores the game tree to find the best move, and alpha-beta
pruning reduces the number of nodes visited without changing the result.

Key Concepts:
    - Negamax: Minimax written once, negating scores between plies
    - Alpha-Beta: Skip branches that cannot affect the result
    - Quiescence: Keep searching captures past the horizon so the static
      evaluation is never taken in the middle of an exchange
    - Move Ordering: Search captures and promotions first to cut off sooner
    - Late Move Reduction: Search quiet late moves one ply shallower

Stack Discipline:
    Every move is applied through ``Position.pushed``, so each apply is
    undone before the frame that made it returns, in LIFO order. Each node
    also asserts that the history depth it returns with is the one it was
    entered with.

References:
    - Negamax: https://www.chessprogramming.org/Negamax
    - Alpha-Beta: https://www.chessprogramming.org/Alpha-Beta
    - Quiescence Search: https://www.chessprogramming.org/Quiescence_Search
    - Late Move Reductions: https://www.chessprogramming.org/Late_Move_Reductions
"""

import logging
import sys
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from rookery.board import Move, PieceKind, Position
from rookery.board.movegen import castling_lane
from rookery.evaluation.base import Evaluator, INFINITY, MATE_SCORE
from rookery.evaluation.classical import ClassicalEvaluator, PIECE_VALUES
from rookery.search.config import SearchConfig

logger = logging.getLogger(__name__)

MAX_DEPTH = 100  # Maximum search depth

# Python frames used per ply of recursion, with headroom for the caller
FRAMES_PER_PLY = 2
FRAME_HEADROOM = 50

DEFAULT_CONFIG = SearchConfig()
DEFAULT_EVALUATOR = ClassicalEvaluator()


@dataclass
class SearchStats:
    """Counters collected during one search."""
    nodes: int = 0
    quiescence_nodes: int = 0
    cutoffs: int = 0
    reductions: int = 0

    @property
    def total_nodes(self) -> int:
        return self.nodes + self.quiescence_nodes


@dataclass
class SearchResult:
    """
    Outcome of a root search.

    Attributes:
        move: Best move, or None if the side to move has no legal move
        score: Score of the best move for the side to move (the terminal
            score when there is no move)
        nodes: Total nodes visited (negamax + quiescence)
        stats: Detailed counters
        root_scores: (move, score) for every root move, in search order
    """
    move: Optional[Move]
    score: float
    nodes: int
    stats: SearchStats
    root_scores: List[Tuple[Move, float]] = field(default_factory=list)


def mate_score(depth: int) -> float:
    """
    Score of being mated with ``depth`` plies of search remaining.

    More remaining depth means the mate happens closer to the root, so it
    scores lower: the loser prefers later mates, the winner sooner ones.
    """
    return -(MATE_SCORE + depth)


def move_order_score(position: Position, move: Move) -> float:
    """
    Assign a score to a move for ordering purposes.
    Higher score = searched earlier.

    Ordering Priority:
        Captures (MVV-LVA: Most Valuable Victim - Least Valuable Aggressor)
        Promotions
        Castling
        Quiet moves
    """
    score = 0.0

    victim = position.board[move.to_square]
    if not victim.is_empty:
        score = 100.0 + 10.0 * PIECE_VALUES[victim.kind] - PIECE_VALUES[move.piece.kind]

    if position.is_promotion(move):
        score += 90.0

    if move.piece.kind == PieceKind.KING and castling_lane(
        move.piece.side, move.from_square, move.to_square
    ):
        score += 3.0

    return score


def order_moves(position: Position, moves: List[Move]) -> List[Move]:
    """
    Order moves to improve alpha-beta pruning efficiency.

    Ordering never changes the search result, only how much is pruned.
    The sort is stable, so equally scored moves keep generation order.

    Args:
        position: Current position
        moves: Moves to order

    Returns:
        Sorted list of moves (best moves first)
    """
    return sorted(moves, key=lambda move: move_order_score(position, move), reverse=True)


def quiescence(
    position: Position,
    alpha: float,
    beta: float,
    horizon: int,
    evaluator: Evaluator = DEFAULT_EVALUATOR,
    config: SearchConfig = DEFAULT_CONFIG,
    stats: Optional[SearchStats] = None,
) -> float:
    """
    Capture-only search past the main search horizon.

    Stand pat: the side to move may decline every capture, so the static
    evaluation is a lower bound on the node's value. If it already reaches
    beta the node fails high immediately; otherwise it raises alpha and
    capturing moves (destination occupied) are searched while ``horizon``
    plies remain.

    Args:
        position: Current position (modified in place, restored on return)
        alpha: Lower bound of the search window
        beta: Upper bound of the search window
        horizon: Remaining capture plies
        evaluator: Static evaluation function
        config: Search configuration
        stats: Optional counters

    Returns:
        float: Score from the side to move's perspective
    """
    if stats is not None:
        stats.quiescence_nodes += 1

    stand_pat = evaluator.relative(position)
    if stand_pat >= beta:
        return stand_pat

    best = stand_pat
    if stand_pat > alpha:
        alpha = stand_pat

    if horizon <= 0:
        return best

    mover = position.turn
    entry_ply = position.ply
    captures = [move for move in position.moves_for(mover) if position.is_capture(move)]

    for move in order_moves(position, captures):
        with position.pushed(move):
            if position.is_in_check(mover):
                continue
            if config.alpha_beta:
                score = -quiescence(position, -beta, -alpha, horizon - 1, evaluator, config, stats)
            else:
                score = -quiescence(position, -INFINITY, INFINITY, horizon - 1, evaluator, config, stats)

        if score > best:
            best = score
        if score > alpha:
            alpha = score
        if alpha >= beta:
            if stats is not None:
                stats.cutoffs += 1
            break

    assert position.ply == entry_ply, "quiescence left moves applied"
    return best


def negamax(
    position: Position,
    depth: int,
    alpha: float,
    beta: float,
    evaluator: Evaluator = DEFAULT_EVALUATOR,
    config: SearchConfig = DEFAULT_CONFIG,
    stats: Optional[SearchStats] = None,
) -> float:
    """
    Negamax search with alpha-beta pruning.

    Args:
        position: Current position (modified in place, restored on return)
        depth: Remaining search depth
        alpha: Lower bound of the search window
        beta: Upper bound of the search window
        evaluator: Static evaluation function
        config: Search configuration
        stats: Optional counters

    Returns:
        float: Score from the side to move's perspective

    Algorithm:
        1. depth == 0 → quiescence search
        2. No legal move → mated (in check) or stalemate (0)
        3. For each ordered legal move:
            a. Apply the move
            b. Reduce uninteresting late moves by one extra ply
            c. Recurse with the negated window
            d. Undo the move
            e. Update best score and alpha
            f. Stop once alpha >= beta
        4. Return the best score found
    """
    if stats is not None:
        stats.nodes += 1

    if depth <= 0:
        return quiescence(
            position, alpha, beta, config.quiescence_horizon, evaluator, config, stats
        )

    if not position.has_valid_move():
        if position.is_in_check():
            return mate_score(depth)
        return 0.0

    mover = position.turn
    entry_ply = position.ply
    best = -INFINITY
    searched = 0

    may_reduce = config.late_move_reduction and depth >= config.reduction_min_depth

    for move in order_moves(position, position.moves_for(mover)):
        interest = int(position.is_capture(move)) + int(position.is_promotion(move))

        with position.pushed(move):
            if position.is_in_check(mover):
                continue

            child_depth = depth - 1
            if may_reduce and searched >= config.reduction_min_moves:
                if interest < config.reduction_threshold and position.is_in_check():
                    interest += 1
                if interest < config.reduction_threshold:
                    child_depth -= 1
                    if stats is not None:
                        stats.reductions += 1

            if config.alpha_beta:
                score = -negamax(position, child_depth, -beta, -alpha, evaluator, config, stats)
            else:
                score = -negamax(position, child_depth, -INFINITY, INFINITY, evaluator, config, stats)

        searched += 1
        if score > best:
            best = score
        if score > alpha:
            alpha = score
        if alpha >= beta:
            if stats is not None:
                stats.cutoffs += 1
            break

    assert position.ply == entry_ply, "negamax left moves applied"
    return best


def check_depth(depth: int, config: SearchConfig) -> None:
    """
    Reject depths the recursive search cannot handle.

    Raises:
        ValueError: If depth is outside [1, MAX_DEPTH] or the recursion it
            needs exceeds the interpreter's recursion limit
    """
    if not 1 <= depth <= MAX_DEPTH:
        raise ValueError(f"Search depth must be between 1 and {MAX_DEPTH}, got {depth}")

    frames = FRAMES_PER_PLY * (depth + config.quiescence_horizon) + FRAME_HEADROOM
    if frames > sys.getrecursionlimit():
        raise ValueError(
            f"Search depth {depth} with quiescence horizon {config.quiescence_horizon} "
            f"exceeds the recursion limit ({sys.getrecursionlimit()})"
        )


def find_best_move(
    position: Position,
    depth: int,
    evaluator: Optional[Evaluator] = None,
    config: Optional[SearchConfig] = None,
) -> SearchResult:
    """
    Find the best move for the side to move.

    The search runs on a copy, so ``position`` is never modified. Every root
    move is searched with the full (-inf, +inf) window; the first move with
    the highest score wins.

    Args:
        position: Current position
        depth: Search depth in plies (>= 1)
        evaluator: Position evaluation function (default: ClassicalEvaluator)
        config: Search configuration (default: SearchConfig())

    Returns:
        SearchResult; its move is None when there is no legal move

    Raises:
        ValueError: If the depth is out of range
    """
    evaluator = evaluator if evaluator is not None else DEFAULT_EVALUATOR
    config = config if config is not None else DEFAULT_CONFIG
    check_depth(depth, config)

    board = position.copy()
    stats = SearchStats()
    root_moves = [
        move
        for move in order_moves(board, board.moves_for(board.turn))
        if board.leaves_king_safe(move)
    ]

    if not root_moves:
        score = mate_score(depth) if board.is_in_check() else 0.0
        logger.debug(f"No legal moves (score: {score:.2f})")
        return SearchResult(None, score, 0, stats)

    best_move = None
    best_score = -INFINITY
    root_scores = []

    for move in root_moves:
        with board.pushed(move):
            score = -negamax(board, depth - 1, -INFINITY, INFINITY, evaluator, config, stats)

        root_scores.append((move, score))
        logger.debug(f"Move: {move}, Score: {score:.2f}")

        if score > best_score:
            best_score = score
            best_move = move

    logger.debug(
        f"Best move: {best_move}, Score: {best_score:.2f}, "
        f"Nodes: {stats.total_nodes} (quiescence {stats.quiescence_nodes}), "
        f"Cutoffs: {stats.cutoffs}, Reductions: {stats.reductions}"
    )

    return SearchResult(best_move, best_score, stats.total_nodes, stats, root_scores)


def choose_move(
    position: Position,
    depth: int,
    evaluator: Optional[Evaluator] = None,
    config: Optional[SearchConfig] = None,
) -> Optional[Move]:
    """Best move for the side to move, or None if it has no legal move."""
    return find_best_move(position, depth, evaluator, config).move
