"""Generates interlocking edge layouts and starting piece positions."""

from __future__ import annotations

import random

from backend.models.edges import EdgeShape, EdgeTable, PieceEdges
from backend.models.piece import Point


class PuzzleGenerator:
    """Creates edge tables and solved / scattered layouts.

    All methods are static; randomness comes from the optional *rng* so
    callers can seed it for reproducible puzzles.
    """

    @staticmethod
    def edges(rows: int, cols: int, rng: random.Random | None = None) -> EdgeTable:
        """Return a ``rows``×``cols`` table of interlocking ``PieceEdges``.

        Each internal boundary is drawn once and read by both pieces that
        share it, the second one taking the complement, so neighbours always
        interlock.  Perimeter sides are flat.
        """
        if rows < 1 or cols < 1:
            raise ValueError(f"Grid must be at least 1×1, got {rows}×{cols}.")
        rng = rng or random.Random()

        # horizontal[r][c] is the bottom edge of piece (r, c)
        horizontal = [
            [PuzzleGenerator._draw(rng) for _ in range(cols)] for _ in range(rows - 1)
        ]
        # vertical[r][c] is the right edge of piece (r, c)
        vertical = [
            [PuzzleGenerator._draw(rng) for _ in range(cols - 1)] for _ in range(rows)
        ]

        table: EdgeTable = []
        for r in range(rows):
            row: list[PieceEdges] = []
            for c in range(cols):
                row.append(
                    PieceEdges(
                        top=(
                            EdgeShape.FLAT if r == 0
                            else horizontal[r - 1][c].complement()
                        ),
                        right=EdgeShape.FLAT if c == cols - 1 else vertical[r][c],
                        bottom=EdgeShape.FLAT if r == rows - 1 else horizontal[r][c],
                        left=(
                            EdgeShape.FLAT if c == 0
                            else vertical[r][c - 1].complement()
                        ),
                    )
                )
            table.append(row)
        return table

    @staticmethod
    def solved(board_size: float, grid_size: int) -> list[Point]:
        """Return every piece's solved top-left corner, indexed by piece id."""
        size = board_size / grid_size
        return [
            Point(c * size, r * size)
            for r in range(grid_size)
            for c in range(grid_size)
        ]

    @staticmethod
    def scatter(
        board_size: float,
        grid_size: int,
        margin: float,
        rng: random.Random | None = None,
    ) -> list[Point]:
        """Return uniformly random positions that keep tabs on the board.

        Top-left corners are drawn from ``[margin, board_size - size - margin]``
        on both axes; the span collapses to ``margin`` when the board is too
        small to leave any room.
        """
        rng = rng or random.Random()
        size = board_size / grid_size
        span = max(0.0, board_size - size - margin * 2)
        return [
            Point(margin + rng.random() * span, margin + rng.random() * span)
            for _ in range(grid_size * grid_size)
        ]

    # -- helpers --------------------------------------------------------------

    @staticmethod
    def _draw(rng: random.Random) -> EdgeShape:
        return EdgeShape.TAB if rng.random() < 0.5 else EdgeShape.BLANK
