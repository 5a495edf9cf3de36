"""Session state: phase and clock."""

from __future__ import annotations

import time

from backend.engine.gamestate import GameState, Phase
from backend.models.coords import Coord
from backend.models.grid import Grid


def test_phase_follows_grid() -> None:
    state = GameState(Grid.solved(3))
    assert state.phase is Phase.SOLVED
    state.grid.swap(Coord(2, 2), Coord(2, 1))
    state.grid.empty_pos = Coord(2, 1)
    assert state.phase is Phase.SHUFFLED
    assert not state.is_solved


def test_pause_freezes_clock() -> None:
    state = GameState(Grid.solved(2))
    state.pause()
    frozen = state.elapsed_time
    time.sleep(0.02)
    assert state.elapsed_time == frozen
    state.resume()
    time.sleep(0.02)
    assert state.elapsed_time > frozen


def test_increment_moves() -> None:
    state = GameState(Grid.solved(2))
    state.increment_moves()
    state.increment_moves()
    assert state.moves == 2
