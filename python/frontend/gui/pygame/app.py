"""Pygame GUI frontend — floating puzzle widget.

A round button in the corner opens a small panel with the picture puzzle;
the close cross in the panel header hides it again.  Clicks on the canvas
go straight to the session, which repaints through its change listener.
"""

from __future__ import annotations

import enum
import logging
import random
from pathlib import Path

import pygame

from backend.engine.gamegenerator import DEFAULT_SHUFFLE_MOVES
from backend.engine.gamegenerator.generator import Chooser
from backend.engine.gameplay import PuzzleSession
from backend.engine.rendering import image_fits, tile_draws, tile_size
from backend.models.coords import Direction, to_index
from backend.models.grid import GRID_DIM, Tile

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Palette
# ---------------------------------------------------------------------------
COL_PAGE = (245, 246, 250)
COL_ACCENT = (0, 123, 255)
COL_ACCENT_HOT = (40, 150, 255)
COL_WHITE = (255, 255, 255)
COL_CANVAS = (238, 238, 238)
COL_SHADOW = (0, 0, 0, 70)
COL_TEXT = (40, 44, 52)
COL_SUBTEXT = (108, 112, 134)
COL_GREEN = (46, 160, 67)
COL_TILE = (137, 180, 250)

# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------
WIN_W, WIN_H = 420, 560
PUZZLE_SIZE = 300
HEADER_H = 36
FOOTER_H = 24
PANEL_W, PANEL_H = PUZZLE_SIZE, HEADER_H + PUZZLE_SIZE + FOOTER_H
MARGIN = 20
FAB_D = 60
TILE_BORDER = 2
SOLVED_DELAY_MS = 100
SOLVED_SHOW_MS = 2500


class _View(enum.Enum):
    CLOSED = "closed"
    OPEN = "open"


class PuzzleWidget:
    def __init__(
        self,
        size: int,
        move_count: int,
        image_path: Path | None,
        images_dir: Path,
        rng: Chooser | None = None,
    ) -> None:
        pygame.init()
        self._surf = pygame.display.set_mode((WIN_W, WIN_H))
        pygame.display.set_caption("Tile Puzzle")
        self._clock = pygame.time.Clock()

        self._f_title = pygame.font.SysFont("Arial", 16, bold=True)
        self._f_close = pygame.font.SysFont("Arial", 22, bold=True)
        self._f_small = pygame.font.SysFont("Arial", 13)
        self._f_toast = pygame.font.SysFont("Arial", 20, bold=True)

        self._view = _View.CLOSED
        self._fab = pygame.Rect(WIN_W - MARGIN - FAB_D, WIN_H - MARGIN - FAB_D, FAB_D, FAB_D)
        self._panel = pygame.Rect(
            WIN_W - MARGIN - PANEL_W, WIN_H - 90 - PANEL_H, PANEL_W, PANEL_H
        )
        self._canvas_rect = pygame.Rect(
            self._panel.x, self._panel.y + HEADER_H, PUZZLE_SIZE, PUZZLE_SIZE
        )
        self._close_btn = pygame.Rect(self._panel.right - 32, self._panel.y + 4, 28, 28)
        self._fab_hot = False

        self._canvas = pygame.Surface((PUZZLE_SIZE, PUZZLE_SIZE))
        self._dirty = True
        self._tile_cache: dict[Tile, pygame.Surface] = {}
        self._solved_at: int | None = None
        self._toast_until: int | None = None

        self.session = PuzzleSession(size, move_count=move_count, rng=rng)
        self.session.on_state_changed(self._on_state_changed)
        self.session.on_solved(self._on_solved)

        self._image = self._load_image(image_path, images_dir)
        self.session.start()

    # ── image loading ───────────────────────────────────────────────────────

    def _load_image(self, image_path: Path | None, images_dir: Path) -> pygame.Surface | None:
        """Decode the puzzle picture, or return None for numbered tiles."""
        if image_path is None:
            candidates = sorted(images_dir.glob("*.png")) if images_dir.is_dir() else []
            if not candidates:
                logger.info("No puzzle image found in %s, using numbered tiles", images_dir)
                return None
            image_path = random.choice(candidates)

        try:
            image = pygame.image.load(str(image_path)).convert()
        except (pygame.error, FileNotFoundError) as exc:
            logger.warning("Could not load %s (%s), using numbered tiles", image_path, exc)
            return None

        if not image_fits(image.get_size(), self.session.dim):
            logger.warning("Image %s is too small to tile, using numbered tiles", image_path)
            return None
        logger.info("Loaded puzzle image %s %s", image_path, image.get_size())
        return image

    # ── session listeners ───────────────────────────────────────────────────

    def _on_state_changed(self, session: PuzzleSession) -> None:
        self._dirty = True

    def _on_solved(self, session: PuzzleSession) -> None:
        # Moves stay blocked until the notification has been shown and dismissed.
        session.begin_transition()
        session.state.pause()  # type: ignore[union-attr]
        self._solved_at = pygame.time.get_ticks()

    def _dismiss_toast(self) -> None:
        self._solved_at = None
        self._toast_until = None
        self.session.end_transition()

    # ── drawing ─────────────────────────────────────────────────────────────

    def _tile_surface(self, tile: Tile, source: pygame.Rect, dest_size: tuple[int, int]) -> pygame.Surface:
        cached = self._tile_cache.get(tile)
        if cached is None or cached.get_size() != dest_size:
            assert self._image is not None
            cached = pygame.transform.smoothscale(self._image.subsurface(source), dest_size)
            self._tile_cache[tile] = cached
        return cached

    def _paint_canvas(self) -> None:
        grid = self.session.grid
        self._canvas.fill(COL_CANVAS)
        if grid is None:
            return

        image_size = self._image.get_size() if self._image is not None else (PUZZLE_SIZE, PUZZLE_SIZE)
        f_tile = pygame.font.SysFont("Arial", max(14, tile_size(PUZZLE_SIZE, grid.dim) // 3), bold=True)

        for draw in tile_draws(grid, image_size, (PUZZLE_SIZE, PUZZLE_SIZE)):
            dest = pygame.Rect(draw.dest)
            if self._image is not None:
                self._canvas.blit(
                    self._tile_surface(draw.tile, pygame.Rect(draw.source), dest.size),
                    dest.topleft,
                )
            else:
                col = COL_GREEN if grid.is_tile_correct(draw.coord) else COL_TILE
                pygame.draw.rect(self._canvas, col, dest)
                lbl = f_tile.render(str(to_index(draw.tile.home, grid.dim) + 1), True, COL_WHITE)
                self._canvas.blit(
                    lbl,
                    (
                        dest.centerx - lbl.get_width() // 2,
                        dest.centery - lbl.get_height() // 2,
                    ),
                )
            pygame.draw.rect(self._canvas, COL_WHITE, dest, width=TILE_BORDER)

    def _draw_fab(self) -> None:
        shadow = pygame.Surface((FAB_D + 8, FAB_D + 8), pygame.SRCALPHA)
        pygame.draw.circle(shadow, COL_SHADOW, (FAB_D // 2 + 4, FAB_D // 2 + 6), FAB_D // 2)
        self._surf.blit(shadow, (self._fab.x - 4, self._fab.y - 4))

        col = COL_ACCENT_HOT if self._fab_hot else COL_ACCENT
        pygame.draw.circle(self._surf, col, self._fab.center, FAB_D // 2)
        # 3x3 glyph
        cell, gap = 7, 2
        total = 3 * cell + 2 * gap
        ox, oy = self._fab.centerx - total // 2, self._fab.centery - total // 2
        for r in range(3):
            for c in range(3):
                if r == 2 and c == 2:
                    continue
                pygame.draw.rect(
                    self._surf, COL_WHITE,
                    pygame.Rect(ox + c * (cell + gap), oy + r * (cell + gap), cell, cell),
                )

    def _draw_panel(self) -> None:
        panel = self._panel
        shadow = pygame.Surface((panel.w + 12, panel.h + 12), pygame.SRCALPHA)
        pygame.draw.rect(shadow, COL_SHADOW, shadow.get_rect(), border_radius=12)
        self._surf.blit(shadow, (panel.x - 6, panel.y - 2))
        pygame.draw.rect(self._surf, COL_WHITE, panel, border_radius=10)

        header = pygame.Rect(panel.x, panel.y, panel.w, HEADER_H)
        pygame.draw.rect(
            self._surf, COL_ACCENT, header,
            border_top_left_radius=10, border_top_right_radius=10,
        )
        title = self._f_title.render("Tile Puzzle", True, COL_WHITE)
        self._surf.blit(title, (panel.x + 12, panel.y + (HEADER_H - title.get_height()) // 2))
        cross = self._f_close.render("×", True, COL_WHITE)
        self._surf.blit(
            cross,
            (
                self._close_btn.centerx - cross.get_width() // 2,
                self._close_btn.centery - cross.get_height() // 2,
            ),
        )

        if self._dirty:
            self._paint_canvas()
            self._dirty = False
        self._surf.blit(self._canvas, self._canvas_rect.topleft)

        state = self.session.state
        if state is not None:
            m, s = divmod(int(state.elapsed_time), 60)
            stats = self._f_small.render(
                f"Moves: {state.moves}    Time: {m:02d}:{s:02d}    R  reshuffle",
                True, COL_SUBTEXT,
            )
            self._surf.blit(stats, (panel.x + 12, self._canvas_rect.bottom + 4))

        if self._toast_until is not None:
            self._draw_toast()

    def _draw_toast(self) -> None:
        lbl = self._f_toast.render("Puzzle Solved!", True, COL_WHITE)
        box = pygame.Rect(0, 0, lbl.get_width() + 32, lbl.get_height() + 20)
        box.center = self._canvas_rect.center
        veil = pygame.Surface(box.size, pygame.SRCALPHA)
        veil.fill((0, 0, 0, 170))
        self._surf.blit(veil, box.topleft)
        self._surf.blit(lbl, (box.x + 16, box.y + 10))

    def _draw(self) -> None:
        self._surf.fill(COL_PAGE)
        if self._view == _View.OPEN:
            self._draw_panel()
        else:
            self._draw_fab()

    # ── event handling ──────────────────────────────────────────────────────

    def _ev_closed(self, ev: pygame.event.Event) -> bool:
        if ev.type == pygame.MOUSEMOTION:
            self._fab_hot = self._fab.collidepoint(ev.pos)
        elif ev.type == pygame.MOUSEBUTTONDOWN and ev.button == 1:
            if self._fab.collidepoint(ev.pos):
                self._view = _View.OPEN
                self._dirty = True
        elif ev.type == pygame.KEYDOWN:
            if ev.key in (pygame.K_q, pygame.K_ESCAPE):
                return False
            if ev.key in (pygame.K_RETURN, pygame.K_SPACE):
                self._view = _View.OPEN
        return True

    def _ev_open(self, ev: pygame.event.Event) -> bool:
        if self._toast_until is not None and ev.type in (pygame.MOUSEBUTTONDOWN, pygame.KEYDOWN):
            self._dismiss_toast()
            return True

        if ev.type == pygame.MOUSEBUTTONDOWN and ev.button == 1:
            if self._close_btn.collidepoint(ev.pos):
                self._view = _View.CLOSED
            elif self._canvas_rect.collidepoint(ev.pos):
                self.session.click(
                    ev.pos[0] - self._canvas_rect.x,
                    ev.pos[1] - self._canvas_rect.y,
                    tile_size(PUZZLE_SIZE, self.session.dim),
                )
        elif ev.type == pygame.KEYDOWN:
            _dirs = {
                pygame.K_UP: Direction.UP,
                pygame.K_w: Direction.UP,
                pygame.K_DOWN: Direction.DOWN,
                pygame.K_s: Direction.DOWN,
                pygame.K_LEFT: Direction.LEFT,
                pygame.K_a: Direction.LEFT,
                pygame.K_RIGHT: Direction.RIGHT,
                pygame.K_d: Direction.RIGHT,
            }
            if ev.key in _dirs:
                self.session.move(_dirs[ev.key])
            elif ev.key == pygame.K_r:
                self.session.restart()
            elif ev.key == pygame.K_ESCAPE:
                self._view = _View.CLOSED
        return True

    def _tick_toast(self) -> None:
        now = pygame.time.get_ticks()
        if self._solved_at is not None and now - self._solved_at >= SOLVED_DELAY_MS:
            self._solved_at = None
            self._toast_until = now + SOLVED_SHOW_MS
        elif self._toast_until is not None and now >= self._toast_until:
            self._dismiss_toast()

    # ── main loop ───────────────────────────────────────────────────────────

    def run_loop(self) -> None:
        _dispatch = {
            _View.CLOSED: self._ev_closed,
            _View.OPEN: self._ev_open,
        }

        running = True
        while running:
            for ev in pygame.event.get():
                if ev.type == pygame.QUIT:
                    running = False
                    break
                if not _dispatch[self._view](ev):
                    running = False
                    break

            self._tick_toast()
            self._draw()
            pygame.display.flip()
            self._clock.tick(30)

        pygame.quit()


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------
def run(
    size: int = GRID_DIM,
    move_count: int = DEFAULT_SHUFFLE_MOVES,
    image: Path | None = None,
    assets_dir: Path = Path("assets"),
    rng: Chooser | None = None,
) -> None:
    """Launch the Pygame widget (opens on the floating button)."""
    widget = PuzzleWidget(size, move_count, image, assets_dir / "images", rng)
    widget.run_loop()
