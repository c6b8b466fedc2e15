"""Turn management for a human-vs-engine game.

The manager owns the board, the side to move and the move history. Callers
read and advance whose turn it is only through it; there is no global state.
"""
from __future__ import annotations

import logging
import random
from concurrent.futures import Executor
from typing import List, Optional, Tuple

from ..engine.board import Board, Move, PlayerColor
from ..engine.notation import moves_to_string
from ..engine.strength import DifficultyTier, get_ai_move
from ..logging_setup import log_event

logger = logging.getLogger(__name__)


class TurnManager:
    def __init__(
        self,
        tier: DifficultyTier = DifficultyTier.INTERMEDIATE,
        ai_color: Optional[PlayerColor] = PlayerColor.WHITE,
        board: Optional[Board] = None,
        to_move: PlayerColor = PlayerColor.BLACK,
        executor: Optional[Executor] = None,
    ) -> None:
        self.tier = tier
        self.executor = executor
        # None means two humans share the board
        self.ai_color = ai_color
        self.board = board if board is not None else Board()
        self.current_player = to_move
        # None entries are passes
        self.history: List[Optional[Move]] = []

    def restart(self) -> None:
        self.board = Board()
        self.current_player = PlayerColor.BLACK
        self.history = []
        log_event("turns", "restart", tier=self.tier.value)

    def valid_moves(self) -> List[Move]:
        return self.board.get_valid_moves_list(self.current_player)

    def is_ai_turn(self) -> bool:
        return self.ai_color is not None and self.current_player == self.ai_color and not self.is_game_over()

    def is_game_over(self) -> bool:
        return self.board.is_game_over()

    def winner(self) -> Optional[PlayerColor]:
        return self.board.get_winner()

    def score(self) -> Tuple[int, int]:
        return self.board.count_pieces(PlayerColor.BLACK), self.board.count_pieces(PlayerColor.WHITE)

    def record(self) -> str:
        return moves_to_string(self.history)

    def play(self, pos: Move) -> bool:
        """Play `pos` for the side to move. Illegal moves are rejected with False."""
        mover = self.current_player
        if not self.board.make_move(pos, mover):
            logger.info("rejected illegal move %s for %s", pos, mover.name)
            return False
        self.history.append(pos)
        self._advance(mover)
        return True

    def pass_turn(self) -> bool:
        """Pass for the side to move; only allowed when it has no legal move."""
        if self.board.has_valid_moves(self.current_player) or self.is_game_over():
            return False
        self.history.append(None)
        self.current_player = self.current_player.opposite()
        return True

    def request_ai_move(self, rng: Optional[random.Random] = None) -> Optional[Move]:
        return get_ai_move(self.tier, self.board, self.current_player, rng, self.executor)

    def play_ai_turn(self, rng: Optional[random.Random] = None) -> Optional[Move]:
        """Search and play for the side to move. Returns the move, or None on a pass."""
        if self.is_game_over():
            return None
        move = self.request_ai_move(rng)
        if move is None:
            if not self.pass_turn():
                logger.warning("engine returned no move for %s although moves exist", self.current_player.name)
            return None
        self.play(move)
        return move

    def _advance(self, mover: PlayerColor) -> None:
        opponent = mover.opposite()
        if self.board.has_valid_moves(opponent):
            self.current_player = opponent
        elif self.board.has_valid_moves(mover):
            # Opponent is stuck: it passes and the mover continues
            self.history.append(None)
            self.current_player = mover
            logger.info("%s has no legal move and passes", opponent.name)
        else:
            black, white = self.score()
            winner = self.winner()
            logger.info("game over: black=%d white=%d winner=%s", black, white, winner.name if winner else "draw")
            log_event(
                "turns", "game_over", black=black, white=white,
                winner=winner.name if winner else None, record=self.record(),
            )
