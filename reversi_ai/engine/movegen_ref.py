from __future__ import annotations

# Straightforward ray scan over every empty square. Slow, but obviously
# correct; tests hold movegen_fast to it.

RAYS = [(-1, -1), (-1, 0), (-1, 1), (0, -1), (0, 1), (1, -1), (1, 0), (1, 1)]


def _closes_run(own: int, opp: int, row: int, col: int, dr: int, dc: int) -> int:
    run = 0
    r, c = row + dr, col + dc
    while 0 <= r < 8 and 0 <= c < 8:
        bit = 1 << (r * 8 + c)
        if opp & bit:
            run |= bit
        elif own & bit:
            return run
        else:
            return 0
        r += dr
        c += dc
    return 0


def legal_moves_mask(own: int, opp: int) -> int:
    occupied = own | opp
    moves = 0
    for sq in range(64):
        if occupied & (1 << sq):
            continue
        row, col = divmod(sq, 8)
        for dr, dc in RAYS:
            if _closes_run(own, opp, row, col, dr, dc):
                moves |= 1 << sq
                break
    return moves


def flip_mask(own: int, opp: int, sq: int) -> int:
    row, col = divmod(sq, 8)
    flips = 0
    for dr, dc in RAYS:
        flips |= _closes_run(own, opp, row, col, dr, dc)
    return flips
