"""Jigsaw solver — produces the drags that complete a board."""

from __future__ import annotations

from dataclasses import dataclass

from backend.models.board import Board


@dataclass(frozen=True)
class DragMove:
    """Pick up ``piece_id`` and drop its top-left corner at ``(x, y)``."""

    piece_id: int
    x: float
    y: float


class Solver:
    """Stateless solver — all methods are static."""

    @staticmethod
    def solve(board: Board) -> list[DragMove]:
        """Return drags that solve *board*, or ``[]`` if it is already solved.

        Every piece is dropped onto its correct position in id order.  Pieces
        that already sit there are dropped in place too, since a drop is what
        merges a piece with the neighbours around it.
        """
        if board.completed:
            return []
        return [
            DragMove(p.id, p.correct_position.x, p.correct_position.y)
            for p in board.pieces
        ]

    @staticmethod
    def hint(board: Board) -> DragMove | None:
        """Return one useful drag, or ``None`` if the board is solved.

        Prefers a misplaced piece; otherwise drops in place the first piece
        with a grid neighbour outside its group.
        """
        if board.completed:
            return None
        for p in board.pieces:
            if not board.is_piece_correct(p.id):
                return DragMove(p.id, p.correct_position.x, p.correct_position.y)
        for p in board.pieces:
            for q in board.pieces:
                if p.is_adjacent(q) and p.group_id != q.group_id:
                    return DragMove(p.id, p.position.x, p.position.y)
        first = board.pieces[0]
        return DragMove(first.id, first.position.x, first.position.y)
