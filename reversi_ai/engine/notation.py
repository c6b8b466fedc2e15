"""
Coordinate notation for Reversi moves.

Squares are row*8+col; the file letter is the column ('a'..'h') and the rank
digit is the row plus one, so square 0 is 'a1' and square 63 is 'h8'.
"""
from typing import List, Optional

# Special string for pass moves (no available moves)
PASS_NOTATION = '--'


def coord_to_notation(coord: int) -> str:
    """Convert board coordinate (0-63) to coordinate notation (e.g., 'e4')."""
    if coord < 0 or coord > 63:
        raise ValueError(f"Invalid coordinate: {coord}")
    row, col = divmod(coord, 8)
    return f"{chr(ord('a') + col)}{row + 1}"


def notation_to_coord(notation: str) -> int:
    """Convert coordinate notation (e.g., 'e4') to board coordinate (0-63)."""
    if notation == PASS_NOTATION:
        raise ValueError(f"Cannot convert pass notation '{PASS_NOTATION}' to coordinate")
    if len(notation) != 2:
        raise ValueError(f"Invalid notation format: {notation}")

    file_char = notation[0].lower()
    rank_char = notation[1]
    if not file_char.isalpha() or not rank_char.isdigit():
        raise ValueError(f"Invalid notation format: {notation}")

    col = ord(file_char) - ord('a')
    row = int(rank_char) - 1
    if col < 0 or col > 7 or row < 0 or row > 7:
        raise ValueError(f"Invalid notation: {notation}")
    return row * 8 + col


def moves_to_string(moves: List[Optional[int]]) -> str:
    """Render a move history; None entries are passes."""
    return ''.join(PASS_NOTATION if m is None else coord_to_notation(m) for m in moves)


def string_to_moves(moves_str: str) -> List[str]:
    """Split a compact history like 'd3c5--f6' into two-character tokens."""
    if len(moves_str) % 2:
        raise ValueError(f"Incomplete notation: {moves_str}")
    tokens = [moves_str[i:i + 2] for i in range(0, len(moves_str), 2)]
    for tok in tokens:
        if tok != PASS_NOTATION:
            notation_to_coord(tok)
    return tokens
