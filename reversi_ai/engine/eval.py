from __future__ import annotations
from dataclasses import dataclass

from .board import Board, PlayerColor, CORNER_MASK, EDGE_MASK
from .movegen_fast import iter_squares

# Phase-aware linear evaluation. Scores are from the asking player's view.

POSITION_WEIGHTS = (
    100, -20, 10, 5, 5, 10, -20, 100,
    -20, -50, -2, -2, -2, -2, -50, -20,
    10, -2, -1, -1, -1, -1, -2, 10,
    5, -2, -1, -1, -1, -1, -2, 5,
    5, -2, -1, -1, -1, -1, -2, 5,
    10, -2, -1, -1, -1, -1, -2, 10,
    -20, -50, -2, -2, -2, -2, -50, -20,
    100, -20, 10, 5, 5, 10, -20, 100,
)

CORNER_VALUE = 100
STABLE_DISC_VALUE = 50
MOBILITY_VALUE = 30
PARITY_VALUE = 10

OPENING_MAX_DISCS = 20
MIDGAME_MAX_DISCS = 45


@dataclass(frozen=True)
class EvaluationWeights:
    corner: float
    stability: float
    mobility: float
    positional: float
    parity: float

    @staticmethod
    def for_stage(discs: int) -> "EvaluationWeights":
        """Pick weights by discs on the board, a proxy for the game phase."""
        if discs <= OPENING_MAX_DISCS:
            return OPENING_WEIGHTS
        if discs <= MIDGAME_MAX_DISCS:
            return MIDGAME_WEIGHTS
        return ENDGAME_WEIGHTS


OPENING_WEIGHTS = EvaluationWeights(corner=0.8, stability=0.6, mobility=1.0, positional=0.8, parity=0.2)
MIDGAME_WEIGHTS = EvaluationWeights(corner=1.0, stability=0.8, mobility=0.6, positional=0.6, parity=0.4)
ENDGAME_WEIGHTS = EvaluationWeights(corner=1.0, stability=1.0, mobility=0.2, positional=0.4, parity=0.8)


def evaluate_corners(board: Board, player: PlayerColor) -> int:
    own, opp = board.own_opp(player)
    return CORNER_VALUE * ((own & CORNER_MASK).bit_count() - (opp & CORNER_MASK).bit_count())


def evaluate_stability(board: Board, player: PlayerColor) -> int:
    # Border occupancy stands in for stability; no chains are traced from the
    # corners and the opponent's border discs do not count against the player.
    own, _ = board.own_opp(player)
    return STABLE_DISC_VALUE * (own & EDGE_MASK).bit_count()


def evaluate_mobility(board: Board, player: PlayerColor) -> int:
    mine = board.get_valid_moves(player).bit_count()
    theirs = board.get_valid_moves(player.opposite()).bit_count()
    return MOBILITY_VALUE * (mine - theirs)


def evaluate_positional(board: Board, player: PlayerColor) -> int:
    own, opp = board.own_opp(player)
    score = 0
    for sq in iter_squares(own):
        score += POSITION_WEIGHTS[sq]
    for sq in iter_squares(opp):
        score -= POSITION_WEIGHTS[sq]
    return score


def evaluate_parity(board: Board, player: PlayerColor) -> int:
    # Absolute odd/even tempo signal; deliberately ignores `player`.
    empties = board.get_empty_squares().bit_count()
    return PARITY_VALUE if empties % 2 == 1 else -PARITY_VALUE


def evaluate_board(board: Board, player: PlayerColor) -> int:
    weights = EvaluationWeights.for_stage(board.total_discs())
    score = (
        evaluate_corners(board, player) * weights.corner
        + evaluate_stability(board, player) * weights.stability
        + evaluate_mobility(board, player) * weights.mobility
        + evaluate_positional(board, player) * weights.positional
        + evaluate_parity(board, player) * weights.parity
    )
    # int() truncates toward zero
    return int(score)
