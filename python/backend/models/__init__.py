from backend.models.coords import Coord, Direction
from backend.models.grid import GRID_DIM, Grid, Tile

__all__ = ["Coord", "Direction", "GRID_DIM", "Grid", "Tile"]
