"""PyQt6 GUI frontend — jigsaw board drawn with clip paths.

Each piece is painted by clipping the full picture with a ``QPainterPath``
built straight from the outline segments.  Includes an image picker that
reports rejected files in a message box.
"""

from __future__ import annotations

import random
import sys
from pathlib import Path

from PIL import Image
from PyQt6.QtCore import QPointF, QRectF, Qt, QTimer, pyqtSignal
from PyQt6.QtGui import (
    QColor,
    QFont,
    QImage,
    QKeyEvent,
    QMouseEvent,
    QPainter,
    QPainterPath,
    QPaintEvent,
    QPen,
)
from PyQt6.QtWidgets import (
    QApplication,
    QFileDialog,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from backend.config import DEFAULT_SETTINGS, PuzzleSettings
from backend.engine.dragsession import DragSession
from backend.engine.gameplay import BoardEngine
from backend.engine.gamesolver import Solver
from backend.engine.outline import CubicTo, Outline, OutlineBuilder
from backend.images import ImageLoader, ImageRejected, scale_to_board

# ---------------------------------------------------------------------------
# Catppuccin Mocha CSS colours
# ---------------------------------------------------------------------------
_BASE = "#1e1e2e"
_MANTLE = "#181825"
_SURFACE0 = "#313244"
_SURFACE1 = "#45475a"
_OVERLAY0 = "#6c7086"
_TEXT = "#cdd6f4"
_BLUE = "#89b4fa"
_GREEN = "#a6e3a1"
_PINK = "#f5c2e7"
_YELLOW = "#f9e2af"
_LAVENDER = "#b4befe"

_GLOBAL_CSS = f"""
    QMainWindow, QWidget#page {{ background: {_BASE}; }}
    QLabel {{ color: {_TEXT}; }}
"""

_WIN_W, _WIN_H = 680, 880


def _styled_btn(
    text: str,
    *,
    bg: str = _SURFACE0,
    hover: str = _SURFACE1,
    fg: str = _TEXT,
    font_size: int = 13,
    min_w: int = 120,
    min_h: int = 40,
    radius: int = 8,
) -> QPushButton:
    btn = QPushButton(text)
    btn.setFont(QFont("Helvetica", font_size, QFont.Weight.Bold))
    btn.setMinimumHeight(min_h)
    btn.setMinimumWidth(min_w)
    btn.setFocusPolicy(Qt.FocusPolicy.NoFocus)
    btn.setCursor(Qt.CursorShape.PointingHandCursor)
    btn.setStyleSheet(
        f"QPushButton {{ background:{bg}; color:{fg};"
        f" border:none; border-radius:{radius}px; padding:6px 18px; }}"
        f" QPushButton:hover {{ background:{hover}; }}"
    )
    return btn


def _to_qimage(img: Image.Image) -> QImage:
    rgba = img.convert("RGBA")
    data = rgba.tobytes()
    w, h = rgba.size
    return QImage(data, w, h, w * 4, QImage.Format.Format_RGBA8888).copy()


def _to_path(outline: Outline) -> QPainterPath:
    path = QPainterPath(QPointF(outline.start.x, outline.start.y))
    for seg in outline.segments:
        if isinstance(seg, CubicTo):
            path.cubicTo(
                QPointF(seg.c1.x, seg.c1.y),
                QPointF(seg.c2.x, seg.c2.y),
                QPointF(seg.end.x, seg.end.y),
            )
        else:
            path.lineTo(QPointF(seg.end.x, seg.end.y))
    path.closeSubpath()
    return path


def _fmt(secs: float) -> str:
    m, s = divmod(int(secs), 60)
    return f"{m:02d}:{s:02d}"


# ═══════════════════════════════════════════════════════════════════════════
# Board canvas
# ═══════════════════════════════════════════════════════════════════════════


class _BoardCanvas(QWidget):
    """Paints the pieces and turns mouse events into drags."""

    changed = pyqtSignal()

    def __init__(self, engine: BoardEngine, settings: PuzzleSettings) -> None:
        super().__init__()
        self._engine = engine
        self._settings = settings
        self._session = DragSession(engine)
        self._image = QImage()
        self._paths: dict[int, QPainterPath] = {}
        side = int(engine.board.board_size)
        self.setFixedSize(side, side)

    def set_image(self, img: Image.Image) -> None:
        self._image = _to_qimage(scale_to_board(img, self._engine.board.board_size))
        self.rebuild()

    def rebuild(self) -> None:
        """Recompute clip paths after the board was rebuilt."""
        self._session.cancel()
        board = self._engine.board
        self._paths = {
            snap.id: _to_path(
                OutlineBuilder.build(
                    snap.edges,
                    snap.piece_size,
                    self._settings.tab_ratio,
                    self._settings.neck_ratio,
                )
            )
            for snap in board.snapshot()
        }
        self.update()

    # -- painting --

    def paintEvent(self, event: QPaintEvent | None) -> None:  # noqa: N802
        board = self._engine.board
        full = board.board_size
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        painter.fillRect(self.rect(), QColor(_MANTLE))

        outline_pen = QPen(QColor(_BASE), 1.5)
        for snap in sorted(board.snapshot(), key=lambda s: s.z_index):
            path = self._paths[snap.id]
            s = snap.piece_size
            painter.save()
            painter.translate(snap.position.x, snap.position.y)
            painter.setClipPath(path)
            painter.drawImage(QRectF(-snap.col * s, -snap.row * s, full, full), self._image)
            painter.setClipping(False)
            if not board.completed:
                painter.setPen(outline_pen)
                painter.drawPath(path)
            painter.restore()
        painter.end()

    # -- mouse --

    def mousePressEvent(self, event: QMouseEvent | None) -> None:  # noqa: N802
        if event is None or event.button() != Qt.MouseButton.LeftButton:
            return
        if self._session.active_piece is None:
            p = event.position()
            if self._session.press(p.x(), p.y()) is not None:
                self.update()

    def mouseMoveEvent(self, event: QMouseEvent | None) -> None:  # noqa: N802
        if event is None:
            return
        p = event.position()
        if self._session.move(p.x(), p.y()):
            self.update()

    def mouseReleaseEvent(self, event: QMouseEvent | None) -> None:  # noqa: N802
        if event is None or event.button() != Qt.MouseButton.LeftButton:
            return
        p = event.position()
        self._session.release(p.x(), p.y())
        self.update()
        self.changed.emit()


# ═══════════════════════════════════════════════════════════════════════════
# Main window
# ═══════════════════════════════════════════════════════════════════════════


class _MainWindow(QMainWindow):
    def __init__(
        self,
        grid_size: int,
        image: Image.Image,
        settings: PuzzleSettings,
        seed: int | None,
    ) -> None:
        super().__init__()
        self._settings = settings
        self._grid_size = grid_size
        self._engine = BoardEngine(settings, rng=random.Random(seed))
        self._engine.on_solved(self._on_solved)
        board_size = settings.board_size_for_viewport(_WIN_W, _WIN_H)
        self._engine.initialize(board_size, grid_size)

        self.setWindowTitle("Jigsaw Puzzle")
        self.setStyleSheet(_GLOBAL_CSS)

        page = QWidget()
        page.setObjectName("page")
        root = QVBoxLayout(page)
        root.setSpacing(8)
        root.setContentsMargins(20, 12, 20, 12)
        self.setCentralWidget(page)

        title = QLabel(f"Jigsaw Puzzle  {grid_size}×{grid_size}")
        title.setFont(QFont("Helvetica", 17, QFont.Weight.Bold))
        title.setAlignment(Qt.AlignmentFlag.AlignCenter)
        root.addWidget(title)

        self._stats = QLabel()
        self._stats.setFont(QFont("Helvetica", 13))
        self._stats.setStyleSheet(f"color:{_PINK};")
        self._stats.setAlignment(Qt.AlignmentFlag.AlignCenter)
        root.addWidget(self._stats)

        self._canvas = _BoardCanvas(self._engine, settings)
        self._canvas.set_image(image)
        self._canvas.changed.connect(self._tick)
        root.addWidget(self._canvas, alignment=Qt.AlignmentFlag.AlignCenter)

        row = QHBoxLayout()
        row.setAlignment(Qt.AlignmentFlag.AlignCenter)
        row.setSpacing(10)
        open_btn = _styled_btn("OPEN IMAGE")
        open_btn.clicked.connect(self._open_image)
        shuffle_btn = _styled_btn(
            "SHUFFLE", bg=_BLUE, hover=_LAVENDER, fg=_BASE
        )
        shuffle_btn.clicked.connect(self._shuffle)
        reset_btn = _styled_btn("RESET")
        reset_btn.clicked.connect(self._reset)
        hint_btn = _styled_btn("HINT", bg=_YELLOW, hover="#fff0c8", fg=_BASE)
        hint_btn.clicked.connect(self._hint)
        for btn in (open_btn, shuffle_btn, reset_btn, hint_btn):
            row.addWidget(btn)
        root.addLayout(row)

        self._status = QLabel()
        self._status.setFont(QFont("Helvetica", 12))
        self._status.setAlignment(Qt.AlignmentFlag.AlignCenter)
        root.addWidget(self._status)
        self._set_status(
            "Drag pieces together     O  open     S  shuffle     R  reset"
            "     N  hint     Esc  quit",
            _OVERLAY0,
        )

        self._timer = QTimer(self)
        self._timer.timeout.connect(self._tick)
        self._timer.start(200)
        self._tick()

    # -- helpers --

    def _set_status(self, text: str, colour: str, bold: bool = False) -> None:
        self._status.setText(text)
        weight = "font-weight:bold;" if bold else ""
        self._status.setStyleSheet(f"color:{colour};{weight}")

    def _tick(self) -> None:
        stats = self._engine.stats
        groups = len(self._engine.board.group_ids())
        self._stats.setText(
            f"Drags: {stats.drags}    Groups: {groups}    "
            f"Time: {_fmt(stats.elapsed_time)}"
        )

    def _on_solved(self) -> None:
        stats = self._engine.stats
        self._set_status(
            f"★  Solved in {stats.drags} drags, {_fmt(stats.elapsed_time)}  ★",
            _GREEN,
            bold=True,
        )

    # -- actions --

    def _open_image(self) -> None:
        filename, _ = QFileDialog.getOpenFileName(
            self, "Choose a picture", "", "Images (*.jpg *.jpeg *.png *.webp)"
        )
        if not filename:
            return
        try:
            img = ImageLoader(self._settings).load(Path(filename))
        except ImageRejected as exc:
            QMessageBox.warning(self, "Image rejected", str(exc))
            return
        board = self._engine.board
        self._engine.initialize(board.board_size, self._grid_size)
        self._canvas.set_image(img)
        self._set_status("New picture loaded and shuffled.", _YELLOW)
        self._tick()

    def _shuffle(self) -> None:
        self._engine.shuffle()
        self._canvas.rebuild()
        self._set_status("Shuffled!", _YELLOW)
        self._tick()

    def _reset(self) -> None:
        self._engine.reset()
        self._canvas.rebuild()
        self._set_status("Reset to the solved layout.", _YELLOW)
        self._tick()

    def _hint(self) -> None:
        engine = self._engine
        if engine.active_drags:
            return
        move = Solver.hint(engine.board)
        if move is None:
            self._set_status("Already solved!", _GREEN)
            return
        engine.begin_drag(move.piece_id)
        engine.end_drag(move.piece_id, move.x, move.y)
        if not engine.completed:
            self._set_status(f"Hint: placed piece {move.piece_id}", _YELLOW)
        self._canvas.update()
        self._tick()

    # -- keyboard --

    def keyPressEvent(self, event: QKeyEvent | None) -> None:  # noqa: N802
        if event is None:
            return
        key = event.key()
        if key == Qt.Key.Key_S:
            self._shuffle()
        elif key == Qt.Key.Key_R:
            self._reset()
        elif key == Qt.Key.Key_N:
            self._hint()
        elif key == Qt.Key.Key_O:
            self._open_image()
        elif key in (Qt.Key.Key_Q, Qt.Key.Key_Escape):
            self.close()
        else:
            super().keyPressEvent(event)


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------
def run(
    size: int,
    image: Image.Image,
    seed: int | None = None,
    settings: PuzzleSettings = DEFAULT_SETTINGS,
) -> None:
    """Launch the PyQt6 GUI with a shuffled board."""
    qapp = QApplication.instance() or QApplication(sys.argv)
    window = _MainWindow(size, image, settings, seed)
    window.show()
    qapp.exec()
