from __future__ import annotations

# Squares are row*8+col, bit 0 = (0, 0). Column 0 is file A, column 7 is file H.
FULL = 0xFFFFFFFFFFFFFFFF
NOT_A = 0xfefefefefefefefe
NOT_H = 0x7f7f7f7f7f7f7f7f

# Directions in deltas: S, N, E, W, SE, SW, NE, NW (row grows "south")
DIRS = [8, -8, 1, -1, 9, 7, -7, -9]


def _shift(bb: int, d: int) -> int:
    """Move every disc in `bb` one step along delta `d`.

    +8/-8 step a row down/up, +1/-1 a column right/left, and +9, +7, -7, -9
    the diagonals down-right, down-left, up-right and up-left. Discs that
    would wrap across the A/H files or leave the board are dropped.
    """
    if d == 8:
        return (bb << 8) & FULL
    if d == -8:
        return bb >> 8
    if d == 1:
        return (bb << 1) & NOT_A & FULL
    if d == -1:
        return (bb >> 1) & NOT_H
    if d == 9:
        return (bb << 9) & NOT_A & FULL
    if d == 7:
        return (bb << 7) & NOT_H & FULL
    if d == -7:
        return (bb >> 7) & NOT_A
    if d == -9:
        return (bb >> 9) & NOT_H
    raise ValueError(f"bad direction: {d}")


def legal_moves_mask(own: int, opp: int) -> int:
    """Bitmask of empty squares where `own` can play against `opp`."""
    empty = ~(own | opp) & FULL
    moves = 0
    # For each direction, expand captures using shift-and-mask trick
    for d in DIRS:
        t = _shift(own, d) & opp
        # Up to 5 additional expansions are sufficient on an 8x8 board
        t |= _shift(t, d) & opp
        t |= _shift(t, d) & opp
        t |= _shift(t, d) & opp
        t |= _shift(t, d) & opp
        t |= _shift(t, d) & opp
        moves |= _shift(t, d) & empty
    return moves


def flip_mask(own: int, opp: int, sq: int) -> int:
    """Discs flipped if `own` plays `sq`; 0 when the move captures nothing."""
    m = 1 << sq
    flips = 0
    for d in DIRS:
        run = 0
        cur = _shift(m, d)
        while cur and (cur & opp):
            run |= cur
            cur = _shift(cur, d)
        if run and (cur & own):
            flips |= run
    return flips


def iter_squares(mask: int):
    """Yield set squares of `mask` in ascending order."""
    while mask:
        lsb = mask & -mask
        yield lsb.bit_length() - 1
        mask ^= lsb
