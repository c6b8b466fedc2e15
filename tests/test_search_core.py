from __future__ import annotations

import random
from concurrent.futures import ThreadPoolExecutor

from reversi_ai.engine.board import Board, PlayerColor
from reversi_ai.engine.eval import evaluate_board
from reversi_ai.engine.search import (
    MAX_SCORE,
    MIN_SCORE,
    SearchStats,
    find_best_move,
    find_best_move_with_time_limit,
    minimax,
)

from conftest import random_play

BLACK, WHITE = PlayerColor.BLACK, PlayerColor.WHITE


def exhaustive(board: Board, depth: int, maximizing: bool, player: PlayerColor) -> int:
    """Plain minimax without pruning, same pass rule."""
    if depth == 0 or board.is_game_over():
        return evaluate_board(board, player)
    to_move = player if maximizing else player.opposite()
    moves = board.get_valid_moves_list(to_move)
    if not moves:
        return exhaustive(board, depth - 1, not maximizing, player)
    scores = []
    for sq in moves:
        child = board.copy()
        child.make_move(sq, to_move)
        scores.append(exhaustive(child, depth - 1, not maximizing, player))
    return max(scores) if maximizing else min(scores)


class SteppedClock:
    """Fake clock returning scripted readings."""

    def __init__(self, readings):
        self.readings = list(readings)

    def __call__(self) -> float:
        return self.readings.pop(0)


def test_search_basic_runs():
    res = find_best_move(Board(), 3, BLACK)
    assert res.best_move in Board().get_valid_moves_list(BLACK)
    assert isinstance(res.evaluation, int)
    assert res.depth_reached == 3
    assert res.nodes_evaluated > 0
    assert res.completed


def test_no_legal_moves_gives_no_move():
    b = Board(black=1 << 0, white=1 << 1)
    res = find_best_move(b, 3, WHITE)
    assert res.best_move is None
    res = find_best_move_with_time_limit(b, 1000, 3, WHITE)
    assert res.best_move is None


def test_alpha_beta_matches_exhaustive_minimax():
    positions = random_play(random.Random(7), 80)[::4]
    for board, player in positions:
        moves = board.get_valid_moves_list(player)
        if not moves:
            continue
        for depth in (1, 2, 3):
            scores = []
            for sq in moves:
                child = board.copy()
                child.make_move(sq, player)
                pruned = minimax(child, depth - 1, MIN_SCORE, MAX_SCORE, False, player)
                full = exhaustive(child, depth - 1, False, player)
                assert pruned == full
                scores.append(full)
            res = find_best_move(board, depth, player)
            # first maximum wins ties
            assert res.best_move == moves[scores.index(max(scores))]
            assert res.evaluation == max(scores)


def test_pruning_visits_fewer_nodes():
    b = Board()
    stats = SearchStats()
    minimax(b, 4, MIN_SCORE, MAX_SCORE, True, BLACK, stats)
    assert 0 < stats.nodes < perft_nodes(b, 4, BLACK)


def perft_nodes(board: Board, depth: int, player: PlayerColor) -> int:
    if depth == 0:
        return 1
    total = 1
    for sq in board.get_valid_moves_list(player):
        child = board.copy()
        child.make_move(sq, player)
        total += perft_nodes(child, depth - 1, player.opposite())
    return total


def test_forced_pass_spends_a_ply():
    # White cannot move; Black answers on c1 and the game ends
    b = Board(black=1 << 0, white=1 << 1)
    after = b.copy()
    after.make_move(2, BLACK)
    assert minimax(b, 2, MIN_SCORE, MAX_SCORE, True, WHITE) == evaluate_board(after, WHITE)
    # with one ply left, the pass uses it up and the position itself is scored
    assert minimax(b, 1, MIN_SCORE, MAX_SCORE, True, WHITE) == evaluate_board(b, WHITE)


def test_leaves_scored_for_root_player():
    b = Board()
    assert minimax(b, 0, MIN_SCORE, MAX_SCORE, False, BLACK) == evaluate_board(b, BLACK)
    assert minimax(b, 0, MIN_SCORE, MAX_SCORE, True, WHITE) == evaluate_board(b, WHITE)


def test_parallel_root_matches_serial():
    board, player = random_play(random.Random(3), 30)[-1]
    serial = find_best_move(board, 3, player)
    with ThreadPoolExecutor(max_workers=4) as pool:
        parallel = find_best_move(board, 3, player, executor=pool)
    assert parallel.best_move == serial.best_move
    assert parallel.evaluation == serial.evaluation
    assert parallel.nodes_evaluated == serial.nodes_evaluated


def test_generous_budget_reaches_max_depth():
    res = find_best_move_with_time_limit(Board(), 600_000, 3, BLACK)
    assert res.depth_reached == 3
    assert res.completed
    assert res.best_move == find_best_move(Board(), 3, BLACK).best_move


def test_soft_limit_stops_before_next_depth():
    # start, check d1, after d1, check d2 (already past 90% of 100ms)
    clock = SteppedClock([0.0, 0.0, 0.05, 0.095])
    res = find_best_move_with_time_limit(Board(), 100, 5, BLACK, clock=clock)
    assert res.depth_reached == 1
    assert not res.completed
    assert res.best_move is not None


def test_depth_finishing_past_deadline_is_discarded():
    # depth 2 starts at 60ms but completes at 200ms with a 100ms budget
    clock = SteppedClock([0.0, 0.0, 0.05, 0.06, 0.2])
    res = find_best_move_with_time_limit(Board(), 100, 5, BLACK, clock=clock)
    assert res.depth_reached == 1
    assert res.best_move == find_best_move(Board(), 1, BLACK).best_move


def test_budget_exhausted_before_depth_one():
    clock = SteppedClock([0.0, 1.0])
    res = find_best_move_with_time_limit(Board(), 100, 5, BLACK, clock=clock)
    assert res.best_move is None
    assert res.depth_reached == 0
    assert not res.completed


def test_without_clock_searches_fixed_depth():
    res = find_best_move_with_time_limit(Board(), 0, 2, BLACK, clock=None)
    assert res.depth_reached == 2
    assert res.completed
