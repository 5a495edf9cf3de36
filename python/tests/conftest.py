"""Shared fixtures for the engine tests."""

from __future__ import annotations

import random

import pytest

from backend.engine.gameplay import PuzzleSession
from backend.models.grid import Grid


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def solved_3x3() -> Grid:
    return Grid.solved(3)


@pytest.fixture
def session_3x3(solved_3x3: Grid) -> PuzzleSession:
    """A started 3×3 session sitting on the solved arrangement."""
    return PuzzleSession.from_grid(solved_3x3)
