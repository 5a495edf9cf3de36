"""PyQt6 GUI frontend — floating puzzle widget.

Same widget as the pygame frontend: a round button in the bottom-right
corner toggles a panel holding the puzzle canvas.  The canvas paints
straight from the session's tile regions with ``QPainter.drawPixmap``.
"""

from __future__ import annotations

import logging
import random
import sys
from pathlib import Path

from PyQt6.QtCore import QRect, Qt, QTimer
from PyQt6.QtGui import QColor, QFont, QKeyEvent, QMouseEvent, QPainter, QPaintEvent, QPen, QPixmap
from PyQt6.QtWidgets import (
    QApplication,
    QFrame,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from backend.engine.gamegenerator import DEFAULT_SHUFFLE_MOVES
from backend.engine.gamegenerator.generator import Chooser
from backend.engine.gameplay import PuzzleSession
from backend.engine.rendering import image_fits, tile_draws, tile_size
from backend.models.coords import Direction, to_index
from backend.models.grid import GRID_DIM

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# CSS colours
# ---------------------------------------------------------------------------
_PAGE = "#f5f6fa"
_ACCENT = "#007bff"
_ACCENT_H = "#2896ff"
_WHITE = "#ffffff"
_CANVAS = "#eeeeee"
_SUBTEXT = "#6c7086"
_GREEN = "#2ea043"
_TILE = "#89b4fa"

_GLOBAL_CSS = f"""
    QMainWindow, QWidget#page {{ background: {_PAGE}; }}
"""

WIN_W, WIN_H = 420, 560
PUZZLE_SIZE = 300
HEADER_H = 36
MARGIN = 20
FAB_D = 60
SOLVED_DELAY_MS = 100


def _fmt(secs: float) -> str:
    m, s = divmod(int(secs), 60)
    return f"{m:02d}:{s:02d}"


def _load_pixmap(image_path: Path | None, images_dir: Path, dim: int) -> QPixmap | None:
    """Decode the puzzle picture, or return None for numbered tiles."""
    if image_path is None:
        candidates = sorted(images_dir.glob("*.png")) if images_dir.is_dir() else []
        if not candidates:
            logger.info("No puzzle image found in %s, using numbered tiles", images_dir)
            return None
        image_path = random.choice(candidates)

    pixmap = QPixmap(str(image_path))
    if pixmap.isNull():
        logger.warning("Could not load %s, using numbered tiles", image_path)
        return None
    if not image_fits((pixmap.width(), pixmap.height()), dim):
        logger.warning("Image %s is too small to tile, using numbered tiles", image_path)
        return None
    logger.info("Loaded puzzle image %s (%dx%d)", image_path, pixmap.width(), pixmap.height())
    return pixmap


# ═══════════════════════════════════════════════════════════════════════════
# Canvas
# ═══════════════════════════════════════════════════════════════════════════


class _PuzzleCanvas(QWidget):
    """Paints the grid and forwards clicks to the session."""

    def __init__(self, session: PuzzleSession, pixmap: QPixmap | None) -> None:
        super().__init__()
        self._session = session
        self._pixmap = pixmap
        self.setFixedSize(PUZZLE_SIZE, PUZZLE_SIZE)
        self.setCursor(Qt.CursorShape.PointingHandCursor)
        session.on_state_changed(lambda _: self.update())

    def paintEvent(self, event: QPaintEvent | None) -> None:  # noqa: N802
        painter = QPainter(self)
        painter.fillRect(self.rect(), QColor(_CANVAS))
        grid = self._session.grid
        if grid is None:
            painter.end()
            return

        if self._pixmap is not None:
            image_size = (self._pixmap.width(), self._pixmap.height())
        else:
            image_size = (PUZZLE_SIZE, PUZZLE_SIZE)
        font = QFont("Arial", max(12, tile_size(PUZZLE_SIZE, grid.dim) // 4), QFont.Weight.Bold)
        painter.setFont(font)

        for draw in tile_draws(grid, image_size, (PUZZLE_SIZE, PUZZLE_SIZE)):
            dest = QRect(*draw.dest)
            if self._pixmap is not None:
                painter.drawPixmap(dest, self._pixmap, QRect(*draw.source))
            else:
                col = _GREEN if grid.is_tile_correct(draw.coord) else _TILE
                painter.fillRect(dest, QColor(col))
                painter.setPen(QColor(_WHITE))
                painter.drawText(
                    dest,
                    Qt.AlignmentFlag.AlignCenter,
                    str(to_index(draw.tile.home, grid.dim) + 1),
                )
            painter.setPen(QPen(QColor(_WHITE), 2))
            painter.drawRect(dest)
        painter.end()

    def mousePressEvent(self, event: QMouseEvent | None) -> None:  # noqa: N802
        if event is None or event.button() != Qt.MouseButton.LeftButton:
            return
        pos = event.position()
        self._session.click(pos.x(), pos.y(), tile_size(PUZZLE_SIZE, self._session.dim))


# ═══════════════════════════════════════════════════════════════════════════
# Panel
# ═══════════════════════════════════════════════════════════════════════════


class _PuzzlePanel(QFrame):
    """Header with title and close cross, canvas, and a stats line."""

    def __init__(self, session: PuzzleSession, pixmap: QPixmap | None) -> None:
        super().__init__()
        self._session = session
        self.setFixedWidth(PUZZLE_SIZE)
        self.setStyleSheet(f"QFrame {{ background:{_WHITE}; border-radius:10px; }}")

        root = QVBoxLayout(self)
        root.setSpacing(0)
        root.setContentsMargins(0, 0, 0, 6)

        header = QFrame()
        header.setFixedHeight(HEADER_H)
        header.setStyleSheet(
            f"QFrame {{ background:{_ACCENT}; border-bottom-left-radius:0;"
            f" border-bottom-right-radius:0; }}"
        )
        hbox = QHBoxLayout(header)
        hbox.setContentsMargins(12, 0, 6, 0)
        title = QLabel("Tile Puzzle")
        title.setFont(QFont("Arial", 13, QFont.Weight.Bold))
        title.setStyleSheet(f"color:{_WHITE}; background:transparent;")
        hbox.addWidget(title)
        hbox.addStretch(1)
        self.close_btn = QPushButton("×")
        self.close_btn.setFont(QFont("Arial", 18, QFont.Weight.Bold))
        self.close_btn.setFocusPolicy(Qt.FocusPolicy.NoFocus)
        self.close_btn.setCursor(Qt.CursorShape.PointingHandCursor)
        self.close_btn.setStyleSheet(
            f"QPushButton {{ background:none; border:none; color:{_WHITE}; }}"
        )
        hbox.addWidget(self.close_btn)
        root.addWidget(header)

        self.canvas = _PuzzleCanvas(session, pixmap)
        root.addWidget(self.canvas)

        self._stats = QLabel()
        self._stats.setFont(QFont("Arial", 10))
        self._stats.setStyleSheet(f"color:{_SUBTEXT}; background:transparent;")
        self._stats.setContentsMargins(12, 4, 12, 0)
        root.addWidget(self._stats)

        self._timer = QTimer(self)
        self._timer.timeout.connect(self.tick)
        self._timer.start(200)
        session.on_state_changed(lambda _: self.tick())
        self.tick()

    def tick(self) -> None:
        state = self._session.state
        if state is None:
            self._stats.setText("")
            return
        self._stats.setText(
            f"Moves: {state.moves}    Time: {_fmt(state.elapsed_time)}    R  reshuffle"
        )


# ═══════════════════════════════════════════════════════════════════════════
# Main window
# ═══════════════════════════════════════════════════════════════════════════


class _MainWindow(QMainWindow):
    def __init__(
        self,
        size: int,
        move_count: int,
        image_path: Path | None,
        images_dir: Path,
        rng: Chooser | None,
    ) -> None:
        super().__init__()
        self.setWindowTitle("Tile Puzzle")
        self.setStyleSheet(_GLOBAL_CSS)
        self.setFixedSize(WIN_W, WIN_H)

        page = QWidget()
        page.setObjectName("page")
        self.setCentralWidget(page)

        self.session = PuzzleSession(size, move_count=move_count, rng=rng)
        self.session.on_solved(self._on_solved)
        pixmap = _load_pixmap(image_path, images_dir, size)

        # floating button
        self._fab = QPushButton("▦", page)
        self._fab.setFont(QFont("Arial", 24, QFont.Weight.Bold))
        self._fab.setFixedSize(FAB_D, FAB_D)
        self._fab.setFocusPolicy(Qt.FocusPolicy.NoFocus)
        self._fab.setCursor(Qt.CursorShape.PointingHandCursor)
        self._fab.setStyleSheet(
            f"QPushButton {{ background:{_ACCENT}; color:{_WHITE}; border:none;"
            f" border-radius:{FAB_D // 2}px; }}"
            f" QPushButton:hover {{ background:{_ACCENT_H}; }}"
        )
        self._fab.move(WIN_W - MARGIN - FAB_D, WIN_H - MARGIN - FAB_D)
        self._fab.clicked.connect(self._open_panel)

        # panel
        self._panel = _PuzzlePanel(self.session, pixmap)
        self._panel.setParent(page)
        self._panel.adjustSize()
        self._panel.move(
            WIN_W - MARGIN - PUZZLE_SIZE,
            WIN_H - 90 - self._panel.sizeHint().height(),
        )
        self._panel.close_btn.clicked.connect(self._close_panel)
        self._panel.hide()

        self.session.start()

    # -- toggling ---

    def _open_panel(self) -> None:
        self._panel.show()
        self._fab.hide()

    def _close_panel(self) -> None:
        self._panel.hide()
        self._fab.show()

    # -- solved notification ---

    def _on_solved(self, session: PuzzleSession) -> None:
        # Moves stay blocked until the message box is closed.
        session.begin_transition()
        assert session.state is not None
        session.state.pause()
        QTimer.singleShot(SOLVED_DELAY_MS, self._show_solved)

    def _show_solved(self) -> None:
        try:
            QMessageBox.information(self, "Tile Puzzle", "\U0001f389 Puzzle Solved!")
        finally:
            self.session.end_transition()

    # -- keyboard ---

    def keyPressEvent(self, event: QKeyEvent | None) -> None:  # noqa: N802
        if event is None:
            return
        key = event.key()

        if self._panel.isHidden():
            if key in (Qt.Key.Key_Q, Qt.Key.Key_Escape):
                self.close()
            elif key in (Qt.Key.Key_Return, Qt.Key.Key_Space):
                self._open_panel()
            else:
                super().keyPressEvent(event)
            return

        _dirs = {
            Qt.Key.Key_Up: Direction.UP,
            Qt.Key.Key_W: Direction.UP,
            Qt.Key.Key_Down: Direction.DOWN,
            Qt.Key.Key_S: Direction.DOWN,
            Qt.Key.Key_Left: Direction.LEFT,
            Qt.Key.Key_A: Direction.LEFT,
            Qt.Key.Key_Right: Direction.RIGHT,
            Qt.Key.Key_D: Direction.RIGHT,
        }
        if key in _dirs:
            self.session.move(_dirs[key])
        elif key == Qt.Key.Key_R:
            self.session.restart()
        elif key == Qt.Key.Key_Escape:
            self._close_panel()
        else:
            super().keyPressEvent(event)


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
    """Launch the PyQt6 widget (opens on the floating button)."""
    qapp = QApplication.instance() or QApplication(sys.argv)
    window = _MainWindow(size, move_count, image, assets_dir / "images", rng)
    window.show()
    qapp.exec()
