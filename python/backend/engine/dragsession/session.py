"""Pointer-driven drag controller on top of ``BoardEngine``.

Frontends feed raw pointer coordinates (board space) into a ``DragSession``;
it picks the piece under the pointer, keeps the grab offset so the piece
does not jump to the cursor, and forwards the begin/update/end protocol to
the engine.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from backend.engine.gameplay.engine import BoardEngine


class DragSessionError(RuntimeError):
    """A drag call arrived out of order (programming error)."""


class DragSession:
    """Single-pointer drag state: at most one piece is held at a time."""

    def __init__(self, engine: BoardEngine) -> None:
        self._engine = engine
        self._piece: int | None = None
        self._grab: tuple[float, float] = (0.0, 0.0)

    @property
    def active_piece(self) -> int | None:
        return self._piece

    def hit_test(self, x: float, y: float) -> int | None:
        """Return the topmost piece whose square contains ``(x, y)``."""
        for snap in sorted(self._engine.snapshot(), key=lambda s: -s.z_index):
            px, py = snap.position.x, snap.position.y
            if px <= x < px + snap.piece_size and py <= y < py + snap.piece_size:
                return snap.id
        return None

    # -- pointer events -------------------------------------------------------

    def press(self, x: float, y: float) -> int | None:
        """Pick up the piece under the pointer, if any; return its id."""
        if self._piece is not None:
            raise DragSessionError(
                f"Piece {self._piece} is still held; release it first."
            )
        piece_id = self.hit_test(x, y)
        if piece_id is None or not self._engine.begin_drag(piece_id):
            return None
        pos = self._engine.board.piece(piece_id).position
        self._piece = piece_id
        self._grab = (x - pos.x, y - pos.y)
        return piece_id

    def move(self, x: float, y: float) -> bool:
        if self._piece is None:
            return False
        gx, gy = self._grab
        return self._engine.update_drag(self._piece, x - gx, y - gy)

    def release(self, x: float, y: float) -> bool:
        """Drop the held piece; True if it merged with a neighbour."""
        if self._piece is None:
            return False
        piece_id, self._piece = self._piece, None
        gx, gy = self._grab
        return self._engine.end_drag(piece_id, x - gx, y - gy)

    def cancel(self) -> None:
        """Forget the held piece (used when the board is rebuilt mid-drag)."""
        self._piece = None
