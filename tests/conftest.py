from __future__ import annotations

import random

import pytest

from reversi_ai.engine.board import Board, PlayerColor


def random_play(rng: random.Random, count: int):
    """Positions (board, side to move) visited by random games, restarting at game end."""
    positions = []
    board, player = Board(), PlayerColor.BLACK
    while len(positions) < count:
        if board.is_game_over():
            board, player = Board(), PlayerColor.BLACK
        positions.append((board.copy(), player))
        moves = board.get_valid_moves_list(player)
        if moves:
            board.make_move(rng.choice(moves), player)
        player = player.opposite()
    return positions


def find_endgame(max_empties: int, min_moves: int = 2):
    """First position from seeded random games with few empties and a real choice."""
    for seed in range(1000):
        rng = random.Random(seed)
        board, player = Board(), PlayerColor.BLACK
        while not board.is_game_over():
            moves = board.get_valid_moves_list(player)
            empties = board.get_empty_squares().bit_count()
            if empties <= max_empties and len(moves) >= min_moves:
                return board, player
            if moves:
                board.make_move(rng.choice(moves), player)
            player = player.opposite()
    raise AssertionError("no endgame position found")


@pytest.fixture
def endgame():
    return find_endgame(max_empties=4)


@pytest.fixture
def positions():
    return random_play(random.Random(0xC0FFEE), 600)
