from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import List, Optional, Tuple

from .movegen_fast import FULL, flip_mask, iter_squares, legal_moves_mask

# A move is just the square index 0..63 (row*8+col).
Move = int

CORNER_MASK = (1 << 0) | (1 << 7) | (1 << 56) | (1 << 63)
EDGE_MASK = 0xFF818181818181FF

# Black on (3,4) and (4,3), White on (3,3) and (4,4)
START_BLACK = (1 << 28) | (1 << 35)
START_WHITE = (1 << 27) | (1 << 36)


class PlayerColor(IntEnum):
    BLACK = 0
    WHITE = 1

    def opposite(self) -> "PlayerColor":
        return PlayerColor.WHITE if self is PlayerColor.BLACK else PlayerColor.BLACK


def position_to_coords(pos: int) -> Tuple[int, int]:
    return pos // 8, pos % 8


def coords_to_position(row: int, col: int) -> int:
    return row * 8 + col


@dataclass
class Board:
    """Two 64-bit bitboards, one per colour. Invariant: black & white == 0."""

    black: int = START_BLACK
    white: int = START_WHITE

    def copy(self) -> "Board":
        return Board(self.black, self.white)

    def own_opp(self, player: PlayerColor) -> Tuple[int, int]:
        return (self.black, self.white) if player == PlayerColor.BLACK else (self.white, self.black)

    def get_piece(self, pos: int) -> Optional[PlayerColor]:
        mask = 1 << pos
        if self.black & mask:
            return PlayerColor.BLACK
        if self.white & mask:
            return PlayerColor.WHITE
        return None

    def is_empty(self, pos: int) -> bool:
        return not ((self.black | self.white) >> pos) & 1

    def count_pieces(self, color: PlayerColor) -> int:
        return (self.black if color == PlayerColor.BLACK else self.white).bit_count()

    def total_discs(self) -> int:
        return (self.black | self.white).bit_count()

    def get_empty_squares(self) -> int:
        return ~(self.black | self.white) & FULL

    def get_valid_moves(self, player: PlayerColor) -> int:
        own, opp = self.own_opp(player)
        return legal_moves_mask(own, opp)

    def get_valid_moves_list(self, player: PlayerColor) -> List[Move]:
        return list(iter_squares(self.get_valid_moves(player)))

    def is_valid_move(self, pos: int, player: PlayerColor) -> bool:
        if not 0 <= pos < 64 or not self.is_empty(pos):
            return False
        return bool(self.get_valid_moves(player) & (1 << pos))

    def flips_for_move(self, pos: int, player: PlayerColor) -> int:
        if not self.is_valid_move(pos, player):
            return 0
        own, opp = self.own_opp(player)
        return flip_mask(own, opp, pos)

    def make_move(self, pos: int, player: PlayerColor) -> bool:
        """Play `pos` for `player`. Returns False and leaves the board alone if illegal."""
        if not self.is_valid_move(pos, player):
            return False
        own, opp = self.own_opp(player)
        flips = flip_mask(own, opp, pos)
        own |= (1 << pos) | flips
        opp &= ~flips & FULL
        if player == PlayerColor.BLACK:
            self.black, self.white = own, opp
        else:
            self.white, self.black = own, opp
        return True

    def has_valid_moves(self, player: PlayerColor) -> bool:
        return self.get_valid_moves(player) != 0

    def is_game_over(self) -> bool:
        # Not "board full": only both sides being stuck ends the game
        return not self.has_valid_moves(PlayerColor.BLACK) and not self.has_valid_moves(PlayerColor.WHITE)

    def get_winner(self) -> Optional[PlayerColor]:
        if not self.is_game_over():
            return None
        black = self.count_pieces(PlayerColor.BLACK)
        white = self.count_pieces(PlayerColor.WHITE)
        if black > white:
            return PlayerColor.BLACK
        if white > black:
            return PlayerColor.WHITE
        return None

    def __str__(self) -> str:
        rows = ["  " + " ".join(str(c) for c in range(8))]
        for r in range(8):
            cells = []
            for c in range(8):
                piece = self.get_piece(coords_to_position(r, c))
                cells.append("." if piece is None else ("X" if piece == PlayerColor.BLACK else "O"))
            rows.append(f"{r} " + " ".join(cells))
        return "\n".join(rows)
