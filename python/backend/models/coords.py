"""Coordinate helpers shared by the grid, the engine and every frontend.

All ``(x, y) <-> index`` arithmetic lives here so that rendering and move
validation can never disagree about which slot a coordinate refers to.
``x`` is the column, ``y`` the row; slots are stored row-major.
"""

from __future__ import annotations

import math
from enum import StrEnum
from typing import NamedTuple


class Coord(NamedTuple):
    x: int
    y: int


class Direction(StrEnum):
    """Direction the *tile* travels when sliding into the gap."""

    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


# Order matters: shuffles draw from this list, up/down/left/right.
_STEPS: tuple[tuple[int, int], ...] = ((0, -1), (0, 1), (-1, 0), (1, 0))

# Offset from the gap to the tile that slides into it.
# UP    → tile at (x, y+1) moves up    → gap shifts down
# DOWN  → tile at (x, y-1) moves down  → gap shifts up
# LEFT  → tile at (x+1, y) moves left  → gap shifts right
# RIGHT → tile at (x-1, y) moves right → gap shifts left
_TILE_OFFSETS: dict[Direction, tuple[int, int]] = {
    Direction.UP: (0, 1),
    Direction.DOWN: (0, -1),
    Direction.LEFT: (1, 0),
    Direction.RIGHT: (-1, 0),
}


def to_index(coord: Coord, dim: int) -> int:
    return coord.y * dim + coord.x


def to_coord(index: int, dim: int) -> Coord:
    y, x = divmod(index, dim)
    return Coord(x, y)


def in_bounds(coord: Coord, dim: int) -> bool:
    return 0 <= coord.x < dim and 0 <= coord.y < dim


def neighbors(coord: Coord, dim: int) -> list[Coord]:
    """Return the orthogonal neighbours of *coord* that lie on the grid."""
    out: list[Coord] = []
    for dx, dy in _STEPS:
        n = Coord(coord.x + dx, coord.y + dy)
        if in_bounds(n, dim):
            out.append(n)
    return out


def is_adjacent(a: Coord, b: Coord) -> bool:
    """True when *a* and *b* are exactly one step apart along one axis."""
    return abs(a.x - b.x) + abs(a.y - b.y) == 1


def tile_source(gap: Coord, direction: Direction) -> Coord:
    """Return the slot whose tile would slide into *gap* for *direction*."""
    dx, dy = _TILE_OFFSETS[direction]
    return Coord(gap.x + dx, gap.y + dy)


def from_pixel(px: float, py: float, tile_size: float) -> Coord:
    """Map a surface-local pixel position to the grid slot under it.

    Positions left of or above the surface map to negative coordinates;
    callers rely on the move validator to discard them.
    """
    return Coord(math.floor(px / tile_size), math.floor(py / tile_size))
