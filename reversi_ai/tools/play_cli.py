from __future__ import annotations

import argparse
import logging
import sys
import time
from concurrent.futures import ProcessPoolExecutor
from typing import Optional

from reversi_ai.engine.board import PlayerColor
from reversi_ai.engine.notation import coord_to_notation, notation_to_coord
from reversi_ai.engine.strength import get_available_tiers, parse_tier
from reversi_ai.game.turns import TurnManager
from reversi_ai.game.worker import AIWorker
from reversi_ai.logging_setup import setup_logging
from reversi_ai.settings import load_config

logger = logging.getLogger(__name__)

TICK_SECONDS = 0.05


def _prompt(game: TurnManager) -> Optional[int]:
    moves = ", ".join(coord_to_notation(m) for m in game.valid_moves())
    while True:
        text = input(f"{game.current_player.name.lower()} to move [{moves}] (q quits): ").strip()
        if text in ("q", "quit"):
            return None
        try:
            return notation_to_coord(text)
        except ValueError:
            print(f"not a square: {text!r}")


def run(game: TurnManager, worker: AIWorker) -> int:
    while not game.is_game_over():
        print(game.board)
        if not game.valid_moves():
            print(f"{game.current_player.name.lower()} has no move and passes")
            game.pass_turn()
            continue
        if game.is_ai_turn():
            worker.start(game.board, game.current_player)
            # Poll like a UI loop would, once per tick
            move = worker.poll()
            while move is AIWorker.PENDING:
                time.sleep(TICK_SECONDS)
                move = worker.poll()
            if move is None:
                logger.error("engine found no move although moves exist")
                return 1
            print(f"engine plays {coord_to_notation(move)}")
            game.play(move)
            continue
        pos = _prompt(game)
        if pos is None:
            return 0
        if not game.play(pos):
            print("invalid move")
    print(game.board)
    black, white = game.score()
    winner = game.winner()
    print(f"final score: black {black} - white {white}; " + (f"{winner.name.lower()} wins" if winner else "draw"))
    print(f"record: {game.record()}")
    return 0


def main() -> None:
    p = argparse.ArgumentParser(prog="reversi-play")
    p.add_argument("--difficulty", choices=get_available_tiers(), help="overrides engine.difficulty")
    p.add_argument("--color", choices=["black", "white"], help="colour you play, overrides game.human_color")
    args = p.parse_args()

    try:
        settings = load_config()
    except ValueError as e:
        print(f"invalid configuration: {e}", file=sys.stderr)
        sys.exit(1)
    setup_logging(overwrite=settings.log_overwrite, level=settings.log_level)

    tier = parse_tier(args.difficulty) if args.difficulty else settings.difficulty
    human = PlayerColor[args.color.upper()] if args.color else settings.human_color
    pool = ProcessPoolExecutor(max_workers=settings.workers) if settings.workers > 1 else None
    game = TurnManager(tier=tier, ai_color=human.opposite(), executor=pool)
    worker = AIWorker(tier, search_executor=pool)
    logger.info("new game: human=%s difficulty=%s workers=%d", human.name, tier.value, settings.workers)
    try:
        code = run(game, worker)
    except (KeyboardInterrupt, EOFError):
        code = 1
    finally:
        worker.shutdown()
        if pool is not None:
            pool.shutdown()
    sys.exit(code)
