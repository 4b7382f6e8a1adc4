"""Shared fixtures: a 600px 3×3 board, so every piece is 200px wide."""

from __future__ import annotations

import random

import pytest

from backend.engine.gameplay import BoardEngine

BOARD_SIZE = 600.0
GRID = 3
PIECE = BOARD_SIZE / GRID


def drop(engine: BoardEngine, piece_id: int, x: float, y: float) -> bool:
    """Pick up *piece_id* and release it at ``(x, y)``."""
    engine.begin_drag(piece_id)
    return engine.end_drag(piece_id, x, y)


def scatter_far(engine: BoardEngine) -> None:
    """Park every piece in a row far off the board.

    Neighbours in a row end up 100px past their snapping offset and every
    other pair is further apart, so no piece merges by accident.  On a 3×3
    board the pieces land at ``(2000 + id * 300, 2000)``.
    """
    step = engine.board.piece_size + 100
    for pid in range(len(engine.board.pieces)):
        drop(engine, pid, 2000 + pid * step, 2000)


@pytest.fixture
def engine() -> BoardEngine:
    """A solved-layout 3×3 board (all pieces on their correct positions)."""
    eng = BoardEngine(rng=random.Random(1234))
    eng.initialize(BOARD_SIZE, GRID, shuffle=False)
    return eng


@pytest.fixture
def solved_calls(engine: BoardEngine) -> list[int]:
    """Records one entry per solved signal fired by ``engine``."""
    calls: list[int] = []
    engine.on_solved(lambda: calls.append(1))
    return calls
