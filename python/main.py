#!/usr/bin/env python3
"""Tile Puzzle widget.

Usage::

    python main.py                     # interactive menu
    python main.py -f pygame           # pygame widget, 3×3
    python main.py -f pyqt -s 4        # PyQt6 widget, 4×4
    python main.py -f rich -m 50       # terminal board, light shuffle
    python main.py -f pygame -i house.png --seed 7
"""

import importlib
import logging
import random
import sys
from enum import StrEnum
from pathlib import Path
from typing import Optional

import typer
from rich.logging import RichHandler

ROOT = Path(__file__).resolve().parent  # python/
PROJECT_ROOT = ROOT.parent
ASSETS_DIR = PROJECT_ROOT / "assets"

if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from backend.engine.gamegenerator import DEFAULT_SHUFFLE_MOVES  # noqa: E402
from backend.models.grid import GRID_DIM  # noqa: E402


# -- frontend registry -------------------------------------------------------


class Frontend(StrEnum):
    pygame = "pygame"
    pyqt = "pyqt"
    rich = "rich"


_RUNNERS = {
    Frontend.pygame: "frontend.gui.pygame.app",
    Frontend.pyqt: "frontend.gui.pyqt.app",
    Frontend.rich: "frontend.cli.rich.app",
}


class LogLevel(StrEnum):
    debug = "debug"
    info = "info"
    warning = "warning"
    error = "error"


# -- helpers ------------------------------------------------------------------


def _configure_logging(level: LogLevel) -> None:
    logging.basicConfig(
        level=level.value.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


def _launch(frontend: Frontend, size: int, moves: int, image: Optional[Path], seed: Optional[int]) -> None:
    rng = random.Random(seed) if seed is not None else None
    mod = importlib.import_module(_RUNNERS[frontend])
    mod.run(size=size, move_count=moves, image=image, assets_dir=ASSETS_DIR, rng=rng)


def _menu_loop(size: int, moves: int, image: Optional[Path], seed: Optional[int]) -> None:
    while True:
        print()
        print("  ====================================")
        print("         T I L E   P U Z Z L E        ")
        print("  ====================================")
        print()
        print("  1.  Play  (Pygame widget)")
        print("  2.  Play  (PyQt widget)")
        print("  3.  Play  (Rich terminal)")
        print("  0.  Quit")
        print()

        choice = input("  Select: ").strip()

        if choice == "0":
            print("\n  Goodbye!\n")
            return

        picked = {"1": Frontend.pygame, "2": Frontend.pyqt, "3": Frontend.rich}.get(choice)
        if picked is None:
            print("  Unknown option.")
            continue
        _launch(picked, size, moves, image, seed)


# -- CLI entry point ----------------------------------------------------------

app = typer.Typer(add_completion=False)


@app.command()
def main(
    frontend: Optional[Frontend] = typer.Option(
        None, "-f", "--frontend",
        help="Frontend to launch. Omit for interactive menu.",
    ),
    size: int = typer.Option(
        GRID_DIM, "-s", "--size",
        min=2, max=8,
        help="Grid size (2-8).",
    ),
    moves: int = typer.Option(
        DEFAULT_SHUFFLE_MOVES, "-m", "--moves",
        min=0,
        help="Number of random moves used to shuffle.",
    ),
    image: Optional[Path] = typer.Option(
        None, "-i", "--image",
        exists=True, dir_okay=False,
        help="Picture to cut into tiles (default: random PNG in assets/images).",
    ),
    seed: Optional[int] = typer.Option(
        None, "--seed",
        help="Seed for a reproducible shuffle.",
    ),
    log_level: LogLevel = typer.Option(
        LogLevel.warning, "--log-level",
        case_sensitive=False,
        help="Logging level.",
    ),
) -> None:
    """Sliding tile picture puzzle."""
    _configure_logging(log_level)

    if frontend is None:
        _menu_loop(size, moves, image, seed)
        return

    _launch(frontend, size, moves, image, seed)


if __name__ == "__main__":
    app()
