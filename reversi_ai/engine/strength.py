from __future__ import annotations

import logging
import random
from concurrent.futures import Executor
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from .board import Board, Move, PlayerColor
from .search import find_best_move_with_time_limit

logger = logging.getLogger(__name__)


class DifficultyTier(Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"


@dataclass(frozen=True)
class SearchParams:
    max_depth: int
    time_limit_ms: int
    mistake_probability: float
    use_opening_book: bool  # advisory only, the search ignores it


PROFILES = {
    DifficultyTier.BEGINNER: SearchParams(2, 100, 0.30, False),
    DifficultyTier.INTERMEDIATE: SearchParams(4, 500, 0.15, False),
    DifficultyTier.ADVANCED: SearchParams(6, 2000, 0.05, True),
    DifficultyTier.EXPERT: SearchParams(12, 5000, 0.0, True),
}


def get_search_params(tier: DifficultyTier) -> SearchParams:
    return PROFILES[tier]


def get_available_tiers() -> List[str]:
    return [tier.value for tier in DifficultyTier]


def parse_tier(name: str) -> DifficultyTier:
    try:
        return DifficultyTier(name.strip().lower())
    except ValueError:
        raise ValueError(f"unknown difficulty '{name}', expected one of {get_available_tiers()}") from None


def get_ai_move(
    tier: DifficultyTier,
    board: Board,
    player: PlayerColor,
    rng: Optional[random.Random] = None,
    executor: Optional[Executor] = None,
) -> Optional[Move]:
    """Engine move for `player` at `tier`, or None when there is nothing to play.

    The search always runs; afterwards one uniform draw decides whether the
    result is replaced by a random legal move.
    """
    params = get_search_params(tier)
    result = find_best_move_with_time_limit(board, params.time_limit_ms, params.max_depth, player, executor)

    rng = rng or random
    if params.mistake_probability > 0.0 and rng.random() < params.mistake_probability:
        move = make_random_mistake(board, player, rng)
        logger.debug("%s plays a deliberate mistake: %s (best was %s)", tier.value, move, result.best_move)
        return move
    return result.best_move


def make_random_mistake(board: Board, player: PlayerColor, rng=random) -> Optional[Move]:
    moves = board.get_valid_moves_list(player)
    if not moves:
        return None
    return rng.choice(moves)
