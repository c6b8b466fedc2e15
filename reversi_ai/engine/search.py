from __future__ import annotations

import logging
import time
from concurrent.futures import Executor
from dataclasses import dataclass, replace
from typing import Callable, List, Optional, Tuple

from .board import Board, Move, PlayerColor
from .eval import evaluate_board

logger = logging.getLogger(__name__)

# Window bounds of a signed 32-bit score
MIN_SCORE = -(2 ** 31)
MAX_SCORE = 2 ** 31 - 1

# Fraction of the budget after which no new depth is started
SOFT_LIMIT_FRACTION = 0.9


@dataclass
class SearchResult:
    best_move: Optional[Move] = None
    evaluation: int = 0
    depth_reached: int = 0
    nodes_evaluated: int = 0
    completed: bool = False


@dataclass
class SearchStats:
    # Advisory; parallel searches sum per-candidate counts.
    nodes: int = 0


def minimax(
    board: Board,
    depth: int,
    alpha: int,
    beta: int,
    maximizing: bool,
    player: PlayerColor,
    stats: Optional[SearchStats] = None,
) -> int:
    """Alpha-beta minimax. Leaves are always scored from `player`'s point of view."""
    if stats is not None:
        stats.nodes += 1
    if depth == 0 or board.is_game_over():
        return evaluate_board(board, player)

    to_move = player if maximizing else player.opposite()
    moves = board.get_valid_moves_list(to_move)

    if not moves:
        # Forced pass: the ply is spent without a move
        return minimax(board, depth - 1, alpha, beta, not maximizing, player, stats)

    if maximizing:
        best = MIN_SCORE
        for sq in moves:
            child = board.copy()
            child.make_move(sq, to_move)
            score = minimax(child, depth - 1, alpha, beta, False, player, stats)
            best = max(best, score)
            alpha = max(alpha, score)
            if beta <= alpha:
                break
        return best

    best = MAX_SCORE
    for sq in moves:
        child = board.copy()
        child.make_move(sq, to_move)
        score = minimax(child, depth - 1, alpha, beta, True, player, stats)
        best = min(best, score)
        beta = min(beta, score)
        if beta <= alpha:
            break
    return best


def _score_candidate(board: Board, sq: Move, depth: int, player: PlayerColor) -> Tuple[int, int]:
    """Score one root move; module level so process pools can pickle it."""
    stats = SearchStats()
    child = board.copy()
    child.make_move(sq, player)
    score = minimax(child, depth - 1, MIN_SCORE, MAX_SCORE, False, player, stats)
    return score, stats.nodes


def find_best_move(
    board: Board,
    depth: int,
    player: PlayerColor,
    executor: Optional[Executor] = None,
) -> SearchResult:
    moves = board.get_valid_moves_list(player)
    if not moves:
        return SearchResult(completed=True)

    if executor is not None:
        n = len(moves)
        scored: List[Tuple[int, int]] = list(
            executor.map(_score_candidate, [board] * n, moves, [depth] * n, [player] * n)
        )
    else:
        scored = [_score_candidate(board, sq, depth, player) for sq in moves]

    # max() keeps the first of equal scores, so ties go to the lowest square
    best_idx = max(range(len(moves)), key=lambda i: scored[i][0])
    return SearchResult(
        best_move=moves[best_idx],
        evaluation=scored[best_idx][0],
        depth_reached=depth,
        nodes_evaluated=sum(nodes for _, nodes in scored),
        completed=True,
    )


def find_best_move_with_time_limit(
    board: Board,
    time_limit_ms: int,
    max_depth: int,
    player: PlayerColor,
    executor: Optional[Executor] = None,
    clock: Optional[Callable[[], float]] = time.perf_counter,
) -> SearchResult:
    """Iterative deepening from depth 1 to `max_depth` within `time_limit_ms`.

    A depth is only started while less than 90% of the budget is spent, and its
    result is only kept if it finished inside the full budget. Depths run to
    completion once started. Without a clock the budget is ignored and a single
    search at `max_depth` is run.
    """
    if clock is None:
        return find_best_move(board, max_depth, player, executor)

    if not board.has_valid_moves(player):
        return SearchResult(completed=True)

    limit = time_limit_ms / 1000.0
    start = clock()
    best = SearchResult()
    for depth in range(1, max_depth + 1):
        if clock() - start >= limit * SOFT_LIMIT_FRACTION:
            logger.debug("soft time limit hit before depth %d", depth)
            break
        result = find_best_move(board, depth, player, executor)
        elapsed = clock() - start
        if elapsed >= limit:
            logger.debug("depth %d finished after the deadline (%.3fs); discarded", depth, elapsed)
            break
        best = result
        logger.debug(
            "depth %d: move=%s eval=%d nodes=%d elapsed=%.3fs",
            depth, result.best_move, result.evaluation, result.nodes_evaluated, elapsed,
        )

    if best.best_move is None:
        logger.warning(
            "no move found within %dms although %s has legal moves; time budget too small",
            time_limit_ms, player.name,
        )
    return replace(best, completed=best.depth_reached == max_depth)
