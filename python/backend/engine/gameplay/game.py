"""Core gameplay logic — validates and applies moves, reports the win."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any

from backend.engine.gamegenerator import DEFAULT_SHUFFLE_MOVES, GameGenerator
from backend.engine.gamegenerator.generator import Chooser
from backend.engine.gamestate import GameState, Phase
from backend.models.coords import Coord, Direction, from_pixel, in_bounds, is_adjacent, tile_source
from backend.models.grid import GRID_DIM, Grid

logger = logging.getLogger(__name__)

Listener = Callable[["PuzzleSession"], None]


def _as_coord(target: Any) -> Coord | None:
    """Coerce input to a ``Coord``; ``None`` when it is not an int pair."""
    try:
        x, y = target
    except (TypeError, ValueError):
        return None
    if type(x) is not int or type(y) is not int:
        return None
    return Coord(x, y)


class PuzzleSession:
    """Orchestrates a single puzzle session.

    The session owns the grid, the gap position and the animating latch.
    Frontends drive it through :meth:`attempt_move` (or :meth:`click` /
    :meth:`move`) and repaint from the ``state changed`` notification.
    Illegal moves are ignored: they return ``False`` and notify nobody.
    """

    def __init__(
        self,
        dim: int = GRID_DIM,
        *,
        move_count: int = DEFAULT_SHUFFLE_MOVES,
        rng: Chooser | None = None,
    ) -> None:
        self.dim = dim
        self.move_count = move_count
        self.animating = False
        self.state: GameState | None = None
        self._rng = rng
        self._state_listeners: list[Listener] = []
        self._solved_listeners: list[Listener] = []

    @classmethod
    def from_grid(cls, grid: Grid) -> PuzzleSession:
        """Create a started session around an existing grid (no shuffle)."""
        session = cls(grid.dim, move_count=0)
        session.state = GameState(grid)
        return session

    # -- lifecycle ------------------------------------------------------------

    def start(self) -> None:
        """Build a solved grid, shuffle it and notify listeners."""
        grid = GameGenerator.generate(self.dim, self.move_count, self._rng)
        self.state = GameState(grid)
        logger.info("Started %dx%d puzzle (%d shuffle moves)", self.dim, self.dim, self.move_count)
        self._notify(self._state_listeners)

    def restart(self) -> None:
        self.start()

    @property
    def phase(self) -> Phase:
        if self.state is None:
            return Phase.UNINITIALIZED
        return self.state.phase

    @property
    def grid(self) -> Grid | None:
        return self.state.grid if self.state is not None else None

    # -- notifications --------------------------------------------------------

    def on_state_changed(self, callback: Listener) -> Callable[[], None]:
        """Register *callback* for every grid change; returns an unsubscriber."""
        return self._subscribe(self._state_listeners, callback)

    def on_solved(self, callback: Listener) -> Callable[[], None]:
        """Register *callback* for moves that land on the solved arrangement."""
        return self._subscribe(self._solved_listeners, callback)

    @staticmethod
    def _subscribe(listeners: list[Listener], callback: Listener) -> Callable[[], None]:
        listeners.append(callback)

        def unsubscribe() -> None:
            if callback in listeners:
                listeners.remove(callback)

        return unsubscribe

    def _notify(self, listeners: list[Listener]) -> None:
        for callback in list(listeners):
            callback(self)

    # -- animating latch ------------------------------------------------------

    def begin_transition(self) -> None:
        self.animating = True

    def end_transition(self) -> None:
        self.animating = False

    @contextmanager
    def transition(self) -> Iterator[PuzzleSession]:
        """Hold the latch for the duration of a visual transition."""
        self.begin_transition()
        try:
            yield self
        finally:
            self.end_transition()

    # -- movement -------------------------------------------------------------

    def _legal_coord(self, target: Any) -> Coord | None:
        """Coerce *target* once; return it if its tile may slide into the gap."""
        coord = _as_coord(target)
        if coord is None or self.state is None or self.animating:
            return None
        grid = self.state.grid
        if in_bounds(coord, grid.dim) and is_adjacent(coord, grid.empty_pos):
            return coord
        return None

    def is_legal(self, target: Any) -> bool:
        """Return True if the tile at *target* may slide into the gap."""
        return self._legal_coord(target) is not None

    def attempt_move(self, target: Any) -> bool:
        """Slide the tile at *target* into the gap.

        Returns True if the move was legal and applied.
        """
        coord = self._legal_coord(target)
        if coord is None:
            return False

        assert self.state is not None
        grid = self.state.grid
        gap = grid.empty_pos
        grid.swap(gap, coord)
        grid.empty_pos = coord
        self.state.increment_moves()
        logger.debug("Slid tile %s -> %s", tuple(coord), tuple(gap))
        if not grid.is_solved():
            # Play continued past a solve; frontends pause the clock on solve.
            self.state.resume()

        self._notify(self._state_listeners)
        if grid.is_solved():
            logger.info("Puzzle solved in %d moves", self.state.moves)
            self._notify(self._solved_listeners)
        return True

    def move(self, direction: Direction) -> bool:
        """Slide a tile in *direction* into the adjacent gap.

        E.g. ``Direction.UP`` moves the tile **below** the gap upward.
        """
        if self.state is None:
            return False
        return self.attempt_move(tile_source(self.state.grid.empty_pos, direction))

    def click(self, px: float, py: float, tile_size: float) -> bool:
        """Route a surface-local click to the slot under it."""
        try:
            if not tile_size > 0:
                return False
            coord = from_pixel(px, py, tile_size)
        except (ValueError, OverflowError, TypeError):
            return False
        return self.attempt_move(coord)

    # -- queries --------------------------------------------------------------

    @property
    def is_solved(self) -> bool:
        return self.state is not None and self.state.is_solved
