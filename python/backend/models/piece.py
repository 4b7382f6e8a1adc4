"""Piece entities and the read-only snapshots handed to renderers."""

from __future__ import annotations

from dataclasses import dataclass

from backend.models.edges import PieceEdges


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def offset(self, dx: float, dy: float) -> Point:
        return Point(self.x + dx, self.y + dy)


@dataclass
class Piece:
    """One jigsaw piece owned by a ``Board``.

    ``row``, ``col``, ``edges`` and ``correct_position`` never change after
    construction; ``position``, ``group_id`` and ``z_index`` are updated by
    the engine only.
    """

    id: int
    row: int
    col: int
    edges: PieceEdges
    correct_position: Point
    position: Point
    group_id: int
    z_index: int

    def is_adjacent(self, other: Piece) -> bool:
        return abs(self.row - other.row) + abs(self.col - other.col) == 1

    def distance_to_correct(self) -> tuple[float, float]:
        return (
            abs(self.position.x - self.correct_position.x),
            abs(self.position.y - self.correct_position.y),
        )


@dataclass(frozen=True)
class PieceSnapshot:
    """Everything a renderer needs to draw one piece."""

    id: int
    row: int
    col: int
    edges: PieceEdges
    position: Point
    piece_size: float
    grid_size: int
    z_index: int
    group_id: int
