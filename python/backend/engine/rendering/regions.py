"""Source/destination rectangles for painting tiles from a picture.

Frontends only need these pairs to draw a frame: the source region is the
tile's home cell of the image, the destination region its current slot on
the surface. Every change is a full redraw.
"""

from __future__ import annotations

from typing import NamedTuple

from backend.models.coords import Coord
from backend.models.grid import Grid, Tile


class Region(NamedTuple):
    x: int
    y: int
    w: int
    h: int


class TileDraw(NamedTuple):
    coord: Coord
    tile: Tile
    source: Region
    dest: Region


def tile_size(surface_px: int, dim: int) -> int:
    """Side length of one slot on a square surface."""
    return surface_px // dim


def image_fits(image_size: tuple[int, int], dim: int) -> bool:
    """True when the image can be cut into ``dim × dim`` non-empty cells."""
    w, h = image_size
    return w >= dim and h >= dim


def tile_draws(
    grid: Grid,
    image_size: tuple[int, int],
    surface_size: tuple[int, int],
) -> list[TileDraw]:
    """Return one draw instruction per visible tile, in slot order."""
    dim = grid.dim
    src_w, src_h = image_size[0] // dim, image_size[1] // dim
    dst_w, dst_h = surface_size[0] // dim, surface_size[1] // dim

    draws: list[TileDraw] = []
    for coord, tile in grid.placements():
        draws.append(
            TileDraw(
                coord=coord,
                tile=tile,
                source=Region(tile.correct_x * src_w, tile.correct_y * src_h, src_w, src_h),
                dest=Region(coord.x * dst_w, coord.y * dst_h, dst_w, dst_h),
            )
        )
    return draws
