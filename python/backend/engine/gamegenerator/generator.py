"""Generates solvable tile puzzle grids."""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence
from typing import Protocol, TypeVar

from backend.models.coords import Coord, neighbors
from backend.models.grid import GRID_DIM, Grid

logger = logging.getLogger(__name__)

DEFAULT_SHUFFLE_MOVES = 200

_T = TypeVar("_T")


class Chooser(Protocol):
    def choice(self, seq: Sequence[_T]) -> _T: ...


class GameGenerator:
    """Creates solvable puzzles by replaying random moves from the solved state.

    A random permutation of the tiles is solvable only half the time;
    walking the gap through legal moves always lands on a reachable state.
    """

    @staticmethod
    def solved(dim: int = GRID_DIM) -> Grid:
        """Return the goal-state grid (all tiles home, gap bottom-right)."""
        return Grid.solved(dim)

    @staticmethod
    def shuffle(
        grid: Grid,
        move_count: int = DEFAULT_SHUFFLE_MOVES,
        rng: Chooser | None = None,
    ) -> list[Coord]:
        """Scramble *grid* in-place using *move_count* random legal moves.

        Returns the gap positions visited, in order. Walking the gap back
        along this path restores the starting arrangement.
        """
        chooser: Chooser = rng if rng is not None else random
        path: list[Coord] = []

        for _ in range(move_count):
            target = chooser.choice(neighbors(grid.empty_pos, grid.dim))
            grid.swap(grid.empty_pos, target)
            grid.empty_pos = target
            path.append(target)

        logger.debug(
            "Shuffled %dx%d grid with %d moves, gap at %s",
            grid.dim, grid.dim, len(path), tuple(grid.empty_pos),
        )
        return path

    @staticmethod
    def generate(
        dim: int = GRID_DIM,
        move_count: int = DEFAULT_SHUFFLE_MOVES,
        rng: Chooser | None = None,
    ) -> Grid:
        """Return a shuffled, always-solvable grid of the given size."""
        grid = GameGenerator.solved(dim)
        GameGenerator.shuffle(grid, move_count, rng)
        return grid
