from __future__ import annotations

from typing import Iterable, Optional

from .board import Board, PlayerColor
from .notation import PASS_NOTATION, notation_to_coord


def perft(board: Board, depth: int, player: PlayerColor = PlayerColor.BLACK) -> int:
    """Count move paths of length `depth`. A forced pass counts as one move."""
    if depth == 0:
        return 1
    moves = board.get_valid_moves_list(player)
    if not moves:
        if board.is_game_over():
            return 1
        return perft(board, depth - 1, player.opposite())
    total = 0
    for sq in moves:
        child = board.copy()
        child.make_move(sq, player)
        total += perft(child, depth - 1, player.opposite())
    return total


def play_moves(board: Optional[Board], moves: Iterable[str]) -> tuple[Board, PlayerColor]:
    """Replay notation moves ("d3", "--" for a pass) from `board` or the start.

    Returns the resulting board and the side to move.
    """
    b = Board() if board is None else board.copy()
    player = PlayerColor.BLACK
    for mv in moves:
        if mv == PASS_NOTATION:
            if b.has_valid_moves(player):
                raise ValueError(f"{player.name} cannot pass with legal moves available")
        elif not b.make_move(notation_to_coord(mv), player):
            raise ValueError(f"illegal move for {player.name}: {mv}")
        player = player.opposite()
    return b, player
