"""Terminal key handling: typed tile numbers and arrow keys."""

from __future__ import annotations

from collections.abc import Callable, Iterable

import pytest

from backend.engine.gameplay import PuzzleSession
from backend.models.coords import Coord
from backend.models.grid import Grid
from frontend.cli.rich.app import _apply_key, _read_number


def _keys(keys: Iterable[str | None]) -> Callable[[], str | None]:
    """Reader that replays *keys*, then times out."""
    it = iter(keys)
    return lambda: next(it, None)


def _no_reads() -> str | None:
    raise AssertionError("no further key expected")


@pytest.fixture
def session_4x4() -> PuzzleSession:
    return PuzzleSession.from_grid(Grid.solved(4))


# -- number collection --------------------------------------------------------


@pytest.mark.parametrize(
    "first, following, limit, expected",
    [
        ("8", [], 8, (8, None)),  # one digit is all a 3×3 needs
        ("1", ["2"], 15, (12, None)),
        ("1", ["5"], 15, (15, None)),
        ("1", [None], 15, (1, None)),  # timed out waiting for a second digit
        ("1", ["up"], 15, (1, "up")),
        ("2", [], 15, (2, None)),  # 20+ cannot exist on a 4×4
        ("6", ["3"], 63, (63, None)),
    ],
)
def test_read_number(
    first: str, following: list[str | None], limit: int, expected: tuple[int, str | None]
) -> None:
    read_next = _keys(following) if following else _no_reads
    assert _read_number(first, limit, read_next) == expected


# -- applying keys ------------------------------------------------------------


def test_single_digit_moves_immediately(session_3x3: PuzzleSession) -> None:
    assert _apply_key(session_3x3, "8", _no_reads) is None
    assert session_3x3.grid.empty_pos == Coord(1, 2)  # type: ignore[union-attr]


@pytest.mark.parametrize(
    "digits, gap_after",
    [
        (["1", "2"], Coord(3, 2)),  # tile 12 sits above the gap
        (["1", "5"], Coord(2, 3)),  # tile 15 sits left of the gap
    ],
)
def test_two_digit_tiles_can_be_selected(
    session_4x4: PuzzleSession, digits: list[str], gap_after: Coord
) -> None:
    first, *rest = digits
    assert _apply_key(session_4x4, first, _keys(rest)) is None
    assert session_4x4.grid.empty_pos == gap_after  # type: ignore[union-attr]


def test_read_ahead_key_is_returned(session_4x4: PuzzleSession) -> None:
    # Tile 1 is nowhere near the gap, so nothing moves.
    assert _apply_key(session_4x4, "1", _keys(["quit"])) == "quit"
    assert session_4x4.grid.empty_pos == Coord(3, 3)  # type: ignore[union-attr]


def test_unknown_tile_number_is_ignored(session_4x4: PuzzleSession) -> None:
    assert _apply_key(session_4x4, "1", _keys(["9"])) is None
    assert session_4x4.grid.empty_pos == Coord(3, 3)  # type: ignore[union-attr]
    assert session_4x4.state.moves == 0  # type: ignore[union-attr]


def test_direction_keys(session_3x3: PuzzleSession) -> None:
    assert _apply_key(session_3x3, "right", _no_reads) is None
    assert session_3x3.grid.empty_pos == Coord(1, 2)  # type: ignore[union-attr]
