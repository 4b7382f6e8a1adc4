"""Tracks the per-layout statistics of a puzzle in progress."""

from __future__ import annotations

import time


class GameState:
    """Holds the drag counter and elapsed time of the current layout."""

    def __init__(self) -> None:
        self.drags: int = 0
        self._start_time: float = time.time()
        self._elapsed_banked: float = 0.0
        self._running: bool = True

    # -- time tracking --------------------------------------------------------

    @property
    def elapsed_time(self) -> float:
        if self._running:
            return self._elapsed_banked + (time.time() - self._start_time)
        return self._elapsed_banked

    @property
    def running(self) -> bool:
        return self._running

    def pause(self) -> None:
        if self._running:
            self._elapsed_banked += time.time() - self._start_time
            self._running = False

    def resume(self) -> None:
        if not self._running:
            self._start_time = time.time()
            self._running = True

    # -- drags ----------------------------------------------------------------

    def increment_drags(self) -> None:
        self.drags += 1
