"""Grid model for the tile puzzle."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass

from backend.models.coords import Coord, to_coord, to_index

GRID_DIM = 3
MIN_DIM = 2


@dataclass(frozen=True)
class Tile:
    """A movable piece. Its identity is the slot it belongs in when solved."""

    correct_x: int
    correct_y: int

    @property
    def home(self) -> Coord:
        return Coord(self.correct_x, self.correct_y)


@dataclass
class Grid:
    """Square grid of tile slots stored row-major.

    Exactly one slot holds ``None`` (the gap). ``empty_pos`` caches the
    gap's coordinate; whoever swaps the gap is responsible for keeping it
    in sync.
    """

    dim: int
    slots: list[Tile | None]
    empty_pos: Coord

    # -- construction helpers -------------------------------------------------

    @classmethod
    def solved(cls, dim: int = GRID_DIM) -> Grid:
        """Return the goal arrangement (every tile home, gap bottom-right)."""
        if dim < MIN_DIM:
            raise ValueError(f"Grid dimension must be at least {MIN_DIM}, got {dim}.")
        grid = cls(dim=dim, slots=[], empty_pos=Coord(dim - 1, dim - 1))
        grid.initialize()
        return grid

    @classmethod
    def from_homes(
        cls, dim: int, homes: Sequence[tuple[int, int] | None]
    ) -> Grid:
        """Create a grid from a row-major list of home coordinates.

        ``None`` marks the gap. Example::

            Grid.from_homes(2, [(0, 0), (1, 0), None, (0, 1)])
        """
        if dim < MIN_DIM:
            raise ValueError(f"Grid dimension must be at least {MIN_DIM}, got {dim}.")
        if len(homes) != dim * dim:
            raise ValueError(
                f"Expected {dim * dim} slots for a {dim}×{dim} grid, "
                f"got {len(homes)}."
            )
        slots: list[Tile | None] = []
        empty_pos: Coord | None = None
        for i, home in enumerate(homes):
            if home is None:
                if empty_pos is not None:
                    raise ValueError("Grid must contain exactly one gap.")
                empty_pos = to_coord(i, dim)
                slots.append(None)
            else:
                slots.append(Tile(*home))
        if empty_pos is None:
            raise ValueError("Grid must contain exactly one gap.")

        grid = cls(dim=dim, slots=slots, empty_pos=empty_pos)
        if not grid.is_permutation():
            raise ValueError(
                "Tiles must cover every home coordinate except the "
                "bottom-right corner exactly once."
            )
        return grid

    def initialize(self) -> None:
        """Reset in place to the solved arrangement."""
        dim = self.dim
        last = dim * dim - 1
        self.slots = [
            None if i == last else Tile(*to_coord(i, dim)) for i in range(dim * dim)
        ]
        self.empty_pos = Coord(dim - 1, dim - 1)

    # -- mutation -------------------------------------------------------------

    def swap(self, a: Coord, b: Coord) -> None:
        """Exchange the contents of two slots. No legality check."""
        i, j = to_index(a, self.dim), to_index(b, self.dim)
        self.slots[i], self.slots[j] = self.slots[j], self.slots[i]

    # -- queries --------------------------------------------------------------

    def tile_at(self, coord: Coord) -> Tile | None:
        return self.slots[to_index(coord, self.dim)]

    def placements(self) -> Iterator[tuple[Coord, Tile]]:
        """Yield ``(current slot, tile)`` for every non-empty slot."""
        for i, tile in enumerate(self.slots):
            if tile is not None:
                yield to_coord(i, self.dim), tile

    def homes(self) -> list[Coord | None]:
        """Row-major snapshot of home coordinates, ``None`` for the gap."""
        return [None if t is None else t.home for t in self.slots]

    def is_solved(self) -> bool:
        """Check if every tile sits in its home slot."""
        for i, tile in enumerate(self.slots):
            if tile is None:
                continue
            if to_index(tile.home, self.dim) != i:
                return False
        return True

    def is_tile_correct(self, coord: Coord) -> bool:
        """Check if the tile at *coord* is in its home slot.

        The gap counts as correct only in the bottom-right corner.
        """
        tile = self.tile_at(coord)
        if tile is None:
            return coord == Coord(self.dim - 1, self.dim - 1)
        return tile.home == coord

    def is_permutation(self) -> bool:
        """Check the structural invariant: one gap, every home exactly once."""
        dim = self.dim
        if len(self.slots) != dim * dim:
            return False
        if self.tile_at(self.empty_pos) is not None:
            return False
        gaps = sum(1 for t in self.slots if t is None)
        expected = {to_coord(i, dim) for i in range(dim * dim - 1)}
        seen = [t.home for t in self.slots if t is not None]
        return gaps == 1 and len(seen) == len(set(seen)) and set(seen) == expected

    def copy(self) -> Grid:
        return Grid(dim=self.dim, slots=self.slots[:], empty_pos=self.empty_pos)
