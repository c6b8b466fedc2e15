from __future__ import annotations

import argparse
import logging
import sys
from time import perf_counter

from reversi_ai.engine.notation import string_to_moves
from reversi_ai.engine.perft import perft, play_moves
from reversi_ai.logging_setup import setup_logging


def main() -> None:
    p = argparse.ArgumentParser(prog="reversi-perft")
    p.add_argument("--depth", type=int, required=True)
    p.add_argument("--position", type=str, default="", help="move sequence like d3c5f6, '--' for a pass")
    args = p.parse_args()

    setup_logging(overwrite=False)
    log = logging.getLogger(__name__)
    try:
        board, player = play_moves(None, string_to_moves(args.position))
    except ValueError as e:
        log.error("bad position: %s", e)
        sys.exit(1)
    t0 = perf_counter()
    n = perft(board, args.depth, player)
    dt = perf_counter() - t0
    print(f"perft(d={args.depth})={n} in {dt:.3f}s")
