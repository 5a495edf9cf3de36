"""Rich terminal frontend — the puzzle as a coloured table.

Tiles are numbered by their home slot (1 is top-left).  Arrows or WASD
slide a neighbour into the gap; typing a tile's number slides that tile,
the terminal stand-in for clicking it.
"""

from __future__ import annotations

import sys
from collections.abc import Callable

import rich.box
from rich.align import Align
from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from backend.engine.gamegenerator import DEFAULT_SHUFFLE_MOVES
from backend.engine.gamegenerator.generator import Chooser
from backend.engine.gameplay import PuzzleSession
from backend.models.coords import Coord, Direction, to_index
from backend.models.grid import GRID_DIM, Grid
from frontend.cli.input_handler import get_key, get_key_timeout

console = Console()

MIN_SIZE, MAX_SIZE = 2, 8

# Pause allowed between the digits of a two-digit tile number.
_DIGIT_WAIT = 0.6

_DIRECTIONS = {
    "up": Direction.UP,
    "down": Direction.DOWN,
    "left": Direction.LEFT,
    "right": Direction.RIGHT,
}


# -- helpers ------------------------------------------------------------------


def _format_time(seconds: float) -> str:
    m, s = divmod(int(seconds), 60)
    return f"{m:02d}:{s:02d}"


def _tile_number(grid: Grid, coord: Coord) -> int:
    tile = grid.tile_at(coord)
    return 0 if tile is None else to_index(tile.home, grid.dim) + 1


def _coord_of(grid: Grid, number: int) -> Coord | None:
    """Return the slot currently holding tile *number*, if any."""
    for coord, tile in grid.placements():
        if to_index(tile.home, grid.dim) + 1 == number:
            return coord
    return None


# -- board rendering ----------------------------------------------------------


def _render_board(grid: Grid) -> Table:
    """Return a Rich Table representing the puzzle grid."""
    width = len(str(grid.dim * grid.dim - 1))
    table = Table(
        show_header=False,
        show_edge=True,
        pad_edge=True,
        box=rich.box.HEAVY,
        border_style="bright_blue",
        padding=(0, 1),
    )
    for _ in range(grid.dim):
        table.add_column(width=width + 1, justify="center")

    for y in range(grid.dim):
        cells: list[str] = []
        for x in range(grid.dim):
            coord = Coord(x, y)
            val = _tile_number(grid, coord)
            if val == 0:
                cells.append("[dim]·[/dim]")
            elif grid.is_tile_correct(coord):
                cells.append(f"[bold green]{val:>{width}}[/bold green]")
            else:
                cells.append(f"[bold white]{val:>{width}}[/bold white]")
        table.add_row(*cells)

    return table


# -- screens ------------------------------------------------------------------


def _draw_menu(sel_size: int) -> None:
    console.clear()

    sizes = Text()
    for s in range(MIN_SIZE, MAX_SIZE + 1):
        if s > MIN_SIZE:
            sizes.append("  ")
        if s == sel_size:
            sizes.append(f" {s}×{s} ", style="bold green on #313244")
        else:
            sizes.append(f" {s}×{s} ", style="dim")

    opts = Text()
    opts.append("  Enter", style="bold cyan")
    opts.append("  Play    ")
    opts.append("← →", style="bold cyan")
    opts.append("  Size    ")
    opts.append("Q", style="dim bold")
    opts.append("  Quit", style="dim")

    panel = Panel(
        Group(Text(""), Align.center(sizes), Text(""), Align.center(opts), Text("")),
        title="[bold]T I L E   P U Z Z L E[/bold]",
        border_style="bright_blue",
        padding=(1, 4),
    )
    console.print()
    console.print(Align.center(panel))


def _draw_game(session: PuzzleSession) -> None:
    console.clear()
    state = session.state
    assert state is not None

    stats = Text()
    stats.append("  Moves: ", style="dim")
    stats.append(str(state.moves), style="bold yellow")
    stats.append("    Time: ", style="dim")
    stats.append(_format_time(state.elapsed_time), style="bold yellow")

    controls = Text()
    controls.append("  ↑↓←→", style="bold cyan")
    controls.append(" / ", style="dim")
    controls.append("WASD", style="bold cyan")
    controls.append("  slide   ", style="dim")
    controls.append(f"1-{session.dim * session.dim - 1}", style="bold cyan")
    controls.append("  tile   ", style="dim")
    controls.append("R", style="bold cyan")
    controls.append("  reshuffle   ", style="dim")
    controls.append("Q", style="bold cyan")
    controls.append("  back", style="dim")

    panel = Panel(
        Align.center(_render_board(state.grid)),
        title=f"[bold cyan]Tile Puzzle  {session.dim}×{session.dim}[/bold cyan]",
        border_style="bright_blue",
        padding=(1, 2),
    )
    console.print()
    console.print(Align.center(panel))
    console.print(Align.center(stats))
    console.print(Align.center(controls))


def _draw_win(session: PuzzleSession) -> None:
    console.clear()
    state = session.state
    assert state is not None

    congrats = Text()
    congrats.append("\n  ★ ", style="bold yellow")
    congrats.append("Puzzle Solved!", style="bold green")
    congrats.append(" ★\n", style="bold yellow")

    stats = Text()
    stats.append("  Moves: ", style="dim")
    stats.append(str(state.moves), style="bold yellow")
    stats.append("    Time: ", style="dim")
    stats.append(_format_time(state.elapsed_time), style="bold yellow")

    panel = Panel(
        Group(
            Align.center(_render_board(state.grid)),
            Align.center(congrats),
            Align.center(stats),
        ),
        title=f"[bold green]Tile Puzzle  {session.dim}×{session.dim}[/bold green]",
        border_style="bold green",
        padding=(1, 2),
    )
    console.print()
    console.print(Align.center(panel))
    console.print(
        Align.center(Text("\n  Press R to play again, Q to go back.\n", style="dim"))
    )


# -- game loop ----------------------------------------------------------------


def _next_key() -> str | None:
    return get_key_timeout(_DIGIT_WAIT)


def _read_number(first: str, limit: int, read_next: Callable[[], str | None]) -> tuple[int, str | None]:
    """Collect a tile number starting with digit *first*.

    More digits are read only while the number could still grow without
    passing *limit*.  Returns the number and any non-digit key that ended
    it early (``None`` on timeout or when no more digits fit).
    """
    number = int(first)
    while number * 10 <= limit:
        key = read_next()
        if key is None:
            break
        if not key.isdecimal():
            return number, key
        number = number * 10 + int(key)
    return number, None


def _apply_key(
    session: PuzzleSession,
    key: str,
    read_next: Callable[[], str | None] = _next_key,
) -> str | None:
    """Apply one key; returns a key read ahead that still needs handling."""
    if key in _DIRECTIONS:
        session.move(_DIRECTIONS[key])
    elif key.isdecimal() and session.grid is not None:
        grid = session.grid
        number, rest = _read_number(key, grid.dim * grid.dim - 1, read_next)
        coord = _coord_of(grid, number)
        if coord is not None:
            session.attempt_move(coord)
        return rest
    return None


def _play(size: int, move_count: int, rng: Chooser | None) -> None:
    session = PuzzleSession(size, move_count=move_count, rng=rng)
    solved = False

    def on_solved(s: PuzzleSession) -> None:
        nonlocal solved
        solved = True
        assert s.state is not None
        s.state.pause()

    session.on_state_changed(lambda s: _draw_game(s))
    session.on_solved(on_solved)
    session.start()
    pending: str | None = None

    while True:
        if solved:
            pending = None
            # Block moves while the win screen is up.
            with session.transition():
                _draw_win(session)
                while True:
                    key = get_key()
                    if key == "restart":
                        break
                    if key == "quit":
                        return
            solved = False
            session.restart()
            continue

        # Short timeout so the clock keeps ticking.
        key = pending if pending is not None else get_key_timeout(1.0)
        pending = None
        if key is None:
            _draw_game(session)
            continue
        if key == "quit":
            return
        if key == "restart":
            session.restart()
        else:
            pending = _apply_key(session, key)


# -- menu loop ----------------------------------------------------------------


def _menu_loop(size: int, move_count: int, rng: Chooser | None) -> None:
    sel_size = size

    while True:
        _draw_menu(sel_size)
        key = get_key()

        if key == "quit":
            console.clear()
            console.print(Align.center(Text("\nGoodbye!\n", style="bold cyan")))
            return
        elif key == "left":
            sel_size = max(MIN_SIZE, sel_size - 1)
        elif key == "right":
            sel_size = min(MAX_SIZE, sel_size + 1)
        elif key in ("enter", "1"):
            _play(sel_size, move_count, rng)


# -- public entry point -------------------------------------------------------


def run(
    size: int = GRID_DIM,
    move_count: int = DEFAULT_SHUFFLE_MOVES,
    rng: Chooser | None = None,
    **_: object,
) -> None:
    """Launch the Rich CLI with its size menu."""
    if not sys.stdin.isatty():
        console.print("[red]The terminal frontend needs an interactive terminal.[/red]")
        return
    _menu_loop(size, move_count, rng)
