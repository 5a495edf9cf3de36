"""Tracks the mutable state of a puzzle session in progress."""

from __future__ import annotations

import time
from enum import StrEnum

from backend.models.grid import Grid


class Phase(StrEnum):
    UNINITIALIZED = "uninitialized"
    SHUFFLED = "shuffled"
    SOLVED = "solved"


class GameState:
    """Holds the current grid, move counter and elapsed time."""

    def __init__(self, grid: Grid) -> None:
        self.grid = grid
        self.moves: int = 0
        self._start_time: float = time.time()
        self._elapsed_banked: float = 0.0
        self._running: bool = True

    # -- time tracking --------------------------------------------------------

    @property
    def elapsed_time(self) -> float:
        if self._running:
            return self._elapsed_banked + (time.time() - self._start_time)
        return self._elapsed_banked

    def pause(self) -> None:
        if self._running:
            self._elapsed_banked += time.time() - self._start_time
            self._running = False

    def resume(self) -> None:
        if not self._running:
            self._start_time = time.time()
            self._running = True

    # -- moves ----------------------------------------------------------------

    def increment_moves(self) -> None:
        self.moves += 1

    @property
    def is_solved(self) -> bool:
        return self.grid.is_solved()

    @property
    def phase(self) -> Phase:
        return Phase.SOLVED if self.is_solved else Phase.SHUFFLED
