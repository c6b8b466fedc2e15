"""Self-play CLI: engine tiers play each other"""

from __future__ import annotations

import argparse
import itertools
import logging
import random
import sys
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

import orjson

from ..engine.board import PlayerColor
from ..engine.strength import DifficultyTier, get_available_tiers, parse_tier
from ..game.turns import TurnManager
from ..logging_setup import log_event, setup_logging

logger = logging.getLogger(__name__)

# 60 placements plus at most one pass after each
MAX_TURNS = 120


@dataclass
class MatchResult:
    black: DifficultyTier
    white: DifficultyTier
    seed: int
    black_discs: int = 0
    white_discs: int = 0
    winner: Optional[PlayerColor] = None
    record: str = ""
    moves: List[Optional[int]] = field(default_factory=list)


def play_match(black: DifficultyTier, white: DifficultyTier, seed: int) -> MatchResult:
    """Play one engine-vs-engine game.

    Raises RuntimeError when the engine makes no progress on a position that
    still has legal moves, typically a time budget too small for depth 1.
    """
    rng = random.Random(seed)
    # Both colours are driven by the engine; the tier is swapped per turn
    game = TurnManager(tier=black, ai_color=None)
    for _ in range(MAX_TURNS):
        if game.is_game_over():
            break
        game.tier = black if game.current_player == PlayerColor.BLACK else white
        played = len(game.history)
        game.play_ai_turn(rng)
        if len(game.history) == played:
            raise RuntimeError(
                f"{game.tier.value} engine returned no move for {game.current_player.name} "
                f"after {game.record() or 'the start'}"
            )
    else:
        raise RuntimeError(f"match did not finish within {MAX_TURNS} turns")
    b, w = game.score()
    return MatchResult(black, white, seed, b, w, game.winner(), game.record(), list(game.history))


def run_round_robin(tiers: List[DifficultyTier], games_per_pair: int, workers: int, seed: int) -> List[MatchResult]:
    seeder = random.Random(seed)
    pairings = [
        (b, w, seeder.randint(0, 2**31 - 1))
        for b, w in itertools.permutations(tiers, 2)
        for _ in range(games_per_pair)
    ]
    logger.info("Running %s matches with %s workers...", len(pairings), workers)
    results: List[MatchResult] = []
    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = {executor.submit(play_match, b, w, s): (b, w) for b, w, s in pairings}
        for future in as_completed(futures):
            b, w = futures[future]
            try:
                result = future.result()
            except Exception:
                logger.exception("Match %s vs %s failed", b.value, w.value)
                continue
            results.append(result)
            log_event(
                "selfplay", "match", black=b.value, white=w.value,
                score=[result.black_discs, result.white_discs], record=result.record,
            )
            if len(results) % 10 == 0:
                logger.info("Completed %s/%s matches", len(results), len(pairings))
    return results


def summarise(results: List[MatchResult]) -> Dict[str, Dict[str, int]]:
    table: Dict[str, Dict[str, int]] = {}
    for r in results:
        for tier, color in ((r.black, PlayerColor.BLACK), (r.white, PlayerColor.WHITE)):
            row = table.setdefault(tier.value, {"wins": 0, "losses": 0, "draws": 0, "games": 0})
            row["games"] += 1
            if r.winner is None:
                row["draws"] += 1
            elif r.winner == color:
                row["wins"] += 1
            else:
                row["losses"] += 1
    return table


def main() -> None:
    """Main entry point for reversi-selfplay"""
    parser = argparse.ArgumentParser(description="Play engine tiers against each other")
    parser.add_argument('--games', type=int, default=2, help='Games per ordered pairing (default: 2)')
    parser.add_argument('--workers', type=int, default=2, help='Matches played concurrently (default: 2)')
    parser.add_argument(
        '--tiers', nargs='+', default=['beginner', 'intermediate'],
        help=f'Tiers to include, from {get_available_tiers()}',
    )
    parser.add_argument('--seed', type=int, default=0, help='Seed for match seeds and mistakes. Searches run under '
                             'wall-clock limits, so games can still differ between runs')
    parser.add_argument('--output', help='Write match results as JSON')
    args = parser.parse_args()

    setup_logging(overwrite=False)
    try:
        tiers = [parse_tier(t) for t in args.tiers]
        if len(tiers) < 2:
            raise ValueError("need at least two tiers")
        results = run_round_robin(tiers, args.games, args.workers, args.seed)

        logger.info("Results summary:")
        table = summarise(results)
        for name in sorted(table):
            row = table[name]
            logger.info("%s: %dW %dL %dD (%.1f%%)", name, row["wins"], row["losses"], row["draws"],
                        100.0 * row["wins"] / row["games"])

        if args.output:
            data = {
                'timestamp': datetime.now().isoformat(),
                'config': {'tiers': args.tiers, 'games_per_pair': args.games, 'seed': args.seed},
                'matches': [
                    {
                        'black': r.black.value,
                        'white': r.white.value,
                        'seed': r.seed,
                        'score': [r.black_discs, r.white_discs],
                        'winner': r.winner.name.lower() if r.winner else None,
                        'record': r.record,
                    }
                    for r in results
                ],
                'summary': table,
            }
            with open(args.output, 'wb') as f:
                f.write(orjson.dumps(data, option=orjson.OPT_INDENT_2))
            logger.info("Results saved to %s", args.output)
    except KeyboardInterrupt:
        logger.info("Self-play interrupted by user")
        sys.exit(1)
    except Exception as e:
        logger.exception("Error running self-play: %s", e)
        sys.exit(1)


if __name__ == '__main__':
    main()
