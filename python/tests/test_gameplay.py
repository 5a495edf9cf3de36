"""Move validation, notifications and the animating latch."""

from __future__ import annotations

import random
import time

import pytest

from backend.engine.gamestate import Phase
from backend.engine.gameplay import PuzzleSession
from backend.models.coords import Coord, Direction
from backend.models.grid import Grid, Tile


# -- helpers ------------------------------------------------------------------


class _Recorder:
    def __init__(self, session: PuzzleSession) -> None:
        self.changed = 0
        self.solved = 0
        session.on_state_changed(self._on_changed)
        session.on_solved(self._on_solved)

    def _on_changed(self, session: PuzzleSession) -> None:
        self.changed += 1

    def _on_solved(self, session: PuzzleSession) -> None:
        self.solved += 1


def _snapshot(session: PuzzleSession) -> tuple:
    grid = session.grid
    assert grid is not None
    return grid.homes(), grid.empty_pos, session.state.moves  # type: ignore[union-attr]


# -- scenarios ----------------------------------------------------------------


def test_move_and_move_back_3x3(session_3x3: PuzzleSession) -> None:
    rec = _Recorder(session_3x3)
    grid = session_3x3.grid
    assert grid is not None

    assert session_3x3.attempt_move(Coord(1, 2))
    assert grid.slots[7] is None
    assert grid.slots[8] == Tile(1, 2)
    assert grid.empty_pos == Coord(1, 2)
    assert not session_3x3.is_solved
    assert session_3x3.phase is Phase.SHUFFLED
    assert (rec.changed, rec.solved) == (1, 0)

    assert session_3x3.attempt_move(Coord(1, 2)) is False  # the gap itself
    assert session_3x3.attempt_move(Coord(2, 2))
    assert grid == Grid.solved(3)
    assert session_3x3.is_solved
    assert session_3x3.phase is Phase.SOLVED
    assert (rec.changed, rec.solved) == (2, 1)
    assert session_3x3.state.moves == 2  # type: ignore[union-attr]


def test_far_target_is_ignored(session_3x3: PuzzleSession) -> None:
    rec = _Recorder(session_3x3)
    before = _snapshot(session_3x3)
    assert session_3x3.attempt_move(Coord(0, 0)) is False
    assert _snapshot(session_3x3) == before
    assert (rec.changed, rec.solved) == (0, 0)


@pytest.mark.parametrize(
    "target",
    [
        Coord(1, 1),  # diagonal
        Coord(0, 2),  # two steps along a row
        Coord(3, 2),  # off the right edge
        Coord(2, 3),  # off the bottom edge
        Coord(-1, 2),
        (2, 1.0),
        (True, 2),
        "21",
        None,
        (1, 2, 3),
        object(),
    ],
)
def test_illegal_targets_are_silent_no_ops(session_3x3: PuzzleSession, target: object) -> None:
    rec = _Recorder(session_3x3)
    before = _snapshot(session_3x3)
    assert session_3x3.attempt_move(target) is False
    assert _snapshot(session_3x3) == before
    assert (rec.changed, rec.solved) == (0, 0)


@pytest.mark.parametrize(
    "make_target",
    [
        lambda: iter((2, 1)),
        lambda: (v for v in (2, 1)),
    ],
    ids=["iterator", "generator"],
)
def test_one_shot_iterables_are_read_once(session_3x3: PuzzleSession, make_target) -> None:
    assert session_3x3.is_legal(make_target())
    assert session_3x3.attempt_move(make_target())
    assert session_3x3.grid.empty_pos == Coord(2, 1)  # type: ignore[union-attr]
    assert session_3x3.grid.is_permutation()  # type: ignore[union-attr]


def test_plain_tuples_are_accepted(session_3x3: PuzzleSession) -> None:
    assert session_3x3.attempt_move((2, 1))
    assert session_3x3.grid.empty_pos == Coord(2, 1)  # type: ignore[union-attr]


# -- properties ---------------------------------------------------------------


def test_legality_is_symmetric(rng: random.Random) -> None:
    session = PuzzleSession(4, move_count=60, rng=rng)
    session.start()
    for _ in range(100):
        grid = session.grid
        assert grid is not None
        gap = grid.empty_pos
        target = rng.choice([Coord(gap.x + dx, gap.y + dy) for dx, dy in ((0, 1), (0, -1), (1, 0), (-1, 0))])
        if session.attempt_move(target):
            assert session.is_legal(gap)
            assert grid.empty_pos == target


def test_random_clicks_keep_permutation(rng: random.Random) -> None:
    session = PuzzleSession(3, move_count=30, rng=rng)
    session.start()
    for _ in range(500):
        session.attempt_move(Coord(rng.randint(-1, 3), rng.randint(-1, 3)))
        grid = session.grid
        assert grid is not None
        assert grid.is_permutation()


def test_solved_fires_on_every_return_to_solved(session_3x3: PuzzleSession) -> None:
    rec = _Recorder(session_3x3)
    for _ in range(3):
        assert session_3x3.attempt_move(Coord(2, 1))
        assert session_3x3.attempt_move(Coord(2, 2))
    assert rec.solved == 3
    assert rec.changed == 6


def test_clock_resumes_when_play_leaves_solved(session_3x3: PuzzleSession) -> None:
    state = session_3x3.state
    assert state is not None
    session_3x3.on_solved(lambda s: s.state.pause())  # type: ignore[union-attr]

    session_3x3.attempt_move(Coord(2, 1))
    session_3x3.attempt_move(Coord(2, 2))
    frozen = state.elapsed_time
    time.sleep(0.02)
    assert state.elapsed_time == frozen

    session_3x3.attempt_move(Coord(1, 2))
    time.sleep(0.02)
    assert state.elapsed_time > frozen


def test_moves_are_not_locked_after_solve(session_3x3: PuzzleSession) -> None:
    assert session_3x3.is_solved
    assert session_3x3.attempt_move(Coord(2, 1))
    assert session_3x3.phase is Phase.SHUFFLED


# -- lifecycle ----------------------------------------------------------------


def test_uninitialized_session_ignores_moves() -> None:
    session = PuzzleSession(3)
    rec = _Recorder(session)
    assert session.phase is Phase.UNINITIALIZED
    assert session.grid is None
    assert session.attempt_move(Coord(1, 2)) is False
    assert session.move(Direction.RIGHT) is False
    assert session.click(150, 250, 100) is False
    assert not session.is_solved
    assert (rec.changed, rec.solved) == (0, 0)


def test_start_shuffles_and_notifies(rng: random.Random) -> None:
    session = PuzzleSession(3, move_count=40, rng=rng)
    rec = _Recorder(session)
    session.start()
    assert session.grid is not None
    assert session.grid.is_permutation()
    assert session.state.moves == 0  # type: ignore[union-attr]
    assert rec.changed == 1
    assert rec.solved == 0


def test_restart_resets_counter(rng: random.Random) -> None:
    session = PuzzleSession(3, move_count=40, rng=rng)
    session.start()
    gap = session.grid.empty_pos  # type: ignore[union-attr]
    session.attempt_move(Coord(gap.x, gap.y - 1) if gap.y else Coord(gap.x, gap.y + 1))
    session.restart()
    assert session.state.moves == 0  # type: ignore[union-attr]


# -- latch --------------------------------------------------------------------


def test_latch_blocks_moves(session_3x3: PuzzleSession) -> None:
    rec = _Recorder(session_3x3)
    before = _snapshot(session_3x3)

    with session_3x3.transition():
        assert session_3x3.animating
        assert not session_3x3.is_legal(Coord(1, 2))
        assert session_3x3.attempt_move(Coord(1, 2)) is False
        assert session_3x3.move(Direction.RIGHT) is False
        assert session_3x3.click(150, 250, 100) is False

    assert not session_3x3.animating
    assert _snapshot(session_3x3) == before
    assert rec.changed == 0
    assert session_3x3.attempt_move(Coord(1, 2))


def test_latch_released_when_transition_raises(session_3x3: PuzzleSession) -> None:
    with pytest.raises(RuntimeError):
        with session_3x3.transition():
            raise RuntimeError("overlay failed")
    assert not session_3x3.animating


def test_solved_listener_can_hold_latch(session_3x3: PuzzleSession) -> None:
    session_3x3.on_solved(lambda s: s.begin_transition())
    session_3x3.attempt_move(Coord(2, 1))
    session_3x3.attempt_move(Coord(2, 2))
    assert session_3x3.animating
    assert session_3x3.attempt_move(Coord(2, 1)) is False
    session_3x3.end_transition()
    assert session_3x3.attempt_move(Coord(2, 1))


# -- input adapters -----------------------------------------------------------


@pytest.mark.parametrize(
    "direction, gap_after",
    [
        (Direction.RIGHT, Coord(1, 2)),  # tile left of the gap slides right
        (Direction.DOWN, Coord(2, 1)),  # tile above the gap slides down
    ],
)
def test_keyboard_moves(session_3x3: PuzzleSession, direction: Direction, gap_after: Coord) -> None:
    assert session_3x3.move(direction)
    assert session_3x3.grid.empty_pos == gap_after  # type: ignore[union-attr]


@pytest.mark.parametrize("direction", [Direction.UP, Direction.LEFT])
def test_keyboard_moves_off_grid_are_ignored(session_3x3: PuzzleSession, direction: Direction) -> None:
    assert session_3x3.move(direction) is False


@pytest.mark.parametrize(
    "px, py, tile, moved",
    [
        (150, 250, 100, True),  # slot (1, 2)
        (299, 199.5, 100, True),  # slot (2, 1)
        (50, 50, 100, False),  # slot (0, 0), not adjacent
        (-10, 250, 100, False),  # left of the surface
        (350, 250, 100, False),  # right of the surface
        (150, 250, 0, False),
        (150, 250, -100, False),
        (float("nan"), 250, 100, False),
        (float("inf"), 250, 100, False),
        ("x", 250, 100, False),
    ],
)
def test_click_mapping(session_3x3: PuzzleSession, px: object, py: object, tile: object, moved: bool) -> None:
    before = _snapshot(session_3x3)
    assert session_3x3.click(px, py, tile) is moved  # type: ignore[arg-type]
    if not moved:
        assert _snapshot(session_3x3) == before


# -- listeners ----------------------------------------------------------------


def test_unsubscribe_stops_notifications(session_3x3: PuzzleSession) -> None:
    calls: list[PuzzleSession] = []
    unsubscribe = session_3x3.on_state_changed(calls.append)
    session_3x3.attempt_move(Coord(2, 1))
    unsubscribe()
    unsubscribe()
    session_3x3.attempt_move(Coord(2, 2))
    assert calls == [session_3x3]


def test_listener_errors_propagate(session_3x3: PuzzleSession) -> None:
    def boom(session: PuzzleSession) -> None:
        raise RuntimeError("render failed")

    session_3x3.on_state_changed(boom)
    with pytest.raises(RuntimeError):
        session_3x3.attempt_move(Coord(2, 1))
    # The move itself was applied before listeners ran.
    assert session_3x3.grid.empty_pos == Coord(2, 1)  # type: ignore[union-attr]
