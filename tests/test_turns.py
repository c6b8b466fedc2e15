from __future__ import annotations

import logging
import random

from reversi_ai.engine.board import Board, PlayerColor
from reversi_ai.engine import strength
from reversi_ai.engine.search import SearchResult
from reversi_ai.engine.strength import DifficultyTier
from reversi_ai.game.turns import TurnManager

BLACK, WHITE = PlayerColor.BLACK, PlayerColor.WHITE


def test_new_game_state():
    game = TurnManager()
    assert game.current_player == BLACK
    assert game.valid_moves() == [19, 26, 37, 44]
    assert game.score() == (2, 2)
    assert not game.is_ai_turn()
    assert not game.is_game_over()


def test_legal_move_hands_turn_to_opponent():
    game = TurnManager()
    assert game.play(19)
    assert game.current_player == WHITE
    assert game.is_ai_turn()
    assert game.history == [19]
    assert game.score() == (4, 1)


def test_illegal_move_keeps_turn_and_board():
    game = TurnManager()
    before = game.board.copy()
    assert not game.play(0)
    assert not game.play(27)
    assert game.current_player == BLACK
    assert game.board == before
    assert game.history == []


def test_stuck_opponent_passes_and_mover_continues():
    # Black captures on c1; White then has a disc on b8 but no move
    board = Board(black=(1 << 0) | (1 << 56), white=(1 << 1) | (1 << 57))
    game = TurnManager(ai_color=None, board=board)
    assert game.play(2)
    assert game.current_player == BLACK
    assert game.history == [2, None]
    assert game.record() == "c1--"

    assert game.play(58)
    assert game.is_game_over()
    assert game.winner() == BLACK
    assert game.score() == (6, 0)


def test_pass_turn_only_without_moves():
    game = TurnManager()
    assert not game.pass_turn()

    board = Board(black=1 << 0, white=1 << 1)
    game = TurnManager(board=board, to_move=WHITE)
    assert game.valid_moves() == []
    assert game.pass_turn()
    assert game.current_player == BLACK
    assert game.history == [None]


def test_ai_turn_plays_a_legal_move():
    game = TurnManager(tier=DifficultyTier.BEGINNER, ai_color=WHITE)
    game.play(19)
    legal = game.valid_moves()
    move = game.play_ai_turn(random.Random(11))
    assert move in legal
    assert game.current_player == BLACK
    assert game.history == [19, move]


def test_ai_turn_passes_when_stuck():
    board = Board(black=1 << 0, white=1 << 1)
    game = TurnManager(tier=DifficultyTier.EXPERT, ai_color=WHITE, board=board, to_move=WHITE)
    assert game.play_ai_turn() is None
    assert game.current_player == BLACK
    assert game.history == [None]


def test_engine_vs_engine_game_finishes():
    game = TurnManager(tier=DifficultyTier.BEGINNER, ai_color=None)
    rng = random.Random(2024)
    for _ in range(130):
        if game.is_game_over():
            break
        game.play_ai_turn(rng)
    assert game.is_game_over()
    assert game.play_ai_turn(rng) is None
    black, white = game.score()
    winner = game.winner()
    if black == white:
        assert winner is None
    else:
        assert winner == (BLACK if black > white else WHITE)


def test_restart():
    game = TurnManager()
    game.play(19)
    game.restart()
    assert game.board == Board()
    assert game.current_player == BLACK
    assert game.history == []


def test_ai_turn_without_a_search_result_keeps_state(monkeypatch, caplog):
    monkeypatch.setattr(strength, "find_best_move_with_time_limit", lambda *a, **kw: SearchResult())
    game = TurnManager(tier=DifficultyTier.EXPERT, ai_color=BLACK)
    before = game.board.copy()
    with caplog.at_level(logging.WARNING, logger="reversi_ai.game.turns"):
        assert game.play_ai_turn() is None
    assert game.current_player == BLACK
    assert game.history == []
    assert game.board == before
    assert any(
        r.levelno == logging.WARNING and "no move for BLACK" in r.getMessage() for r in caplog.records
    )
