from __future__ import annotations

import logging
import random
from concurrent.futures import CancelledError, Executor, Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from typing import Optional

from ..engine.board import Board, Move, PlayerColor
from ..engine.strength import DifficultyTier, get_ai_move

logger = logging.getLogger(__name__)

_PENDING = object()


class AIWorker:
    """Runs the engine off the caller's loop.

    `start` snapshots the board and submits the search; the loop calls `poll`
    every tick and gets the move once the job has finished. A started depth
    is never interrupted, so `cancel` only discards the result.
    """

    PENDING = _PENDING

    def __init__(
        self,
        tier: DifficultyTier,
        rng: Optional[random.Random] = None,
        search_executor: Optional[Executor] = None,
    ) -> None:
        self.tier = tier
        self.rng = rng
        # Optional pool for scoring root moves in parallel
        self.search_executor = search_executor
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="ai-search")
        self._future: Optional[Future] = None

    @property
    def busy(self) -> bool:
        return self._future is not None

    def start(self, board: Board, player: PlayerColor) -> None:
        if self._future is not None:
            raise RuntimeError("a search is already running")
        snapshot = board.copy()
        logger.debug("starting %s search for %s", self.tier.value, player.name)
        self._future = self._executor.submit(
            get_ai_move, self.tier, snapshot, player, self.rng, self.search_executor
        )

    def poll(self):
        """Non-blocking: the finished move (None = pass), or `AIWorker.PENDING`."""
        if self._future is None or not self._future.done():
            return _PENDING
        return self._take()

    def wait(self, timeout: Optional[float] = None) -> Optional[Move]:
        if self._future is None:
            raise RuntimeError("no search running")
        try:
            self._future.result(timeout=timeout)
        except FutureTimeout:
            raise TimeoutError(f"search did not finish within {timeout}s") from None
        return self._take()

    def cancel(self) -> None:
        if self._future is not None:
            if not self._future.cancel():
                logger.debug("search already running; its result will be discarded")
            self._future = None

    def shutdown(self) -> None:
        self.cancel()
        self._executor.shutdown(wait=True)

    def _take(self) -> Optional[Move]:
        future, self._future = self._future, None
        try:
            return future.result()
        except CancelledError:
            return None

    def __enter__(self) -> "AIWorker":
        return self

    def __exit__(self, *exc) -> None:
        self.shutdown()
