"""Board engine: initialisation, drag protocol, snapping and completion."""

from __future__ import annotations

import random

import pytest

from backend.config import PuzzleSettings
from backend.engine.dragsession import DragSessionError
from backend.engine.gameplay import BoardEngine, Phase
from backend.models.piece import Point

from conftest import BOARD_SIZE, GRID, PIECE, drop, scatter_far


# -- helpers ------------------------------------------------------------------


def _pos(engine: BoardEngine, piece_id: int) -> tuple[float, float]:
    p = engine.board.piece(piece_id).position
    return p.x, p.y


def _group(engine: BoardEngine, piece_id: int) -> int:
    return engine.board.piece(piece_id).group_id


def _assert_groups_consistent(engine: BoardEngine) -> None:
    """Members of one group keep exact solved-layout offsets from each other."""
    board = engine.board
    for gid in board.group_ids():
        members = board.group_members(gid)
        assert members, f"group {gid} is empty"
        first = members[0]
        for p in members[1:]:
            assert p.group_id == gid
            assert p.position.x - first.position.x == pytest.approx(
                (p.col - first.col) * board.piece_size
            )
            assert p.position.y - first.position.y == pytest.approx(
                (p.row - first.row) * board.piece_size
            )


# -- initialisation -----------------------------------------------------------


def test_initialize_solved_layout(engine: BoardEngine) -> None:
    board = engine.board
    assert len(board.pieces) == GRID * GRID
    assert board.piece_size == PIECE
    assert board.highest_z == GRID * GRID + 1
    assert not board.completed
    assert engine.phase is Phase.SOLVED_LAYOUT

    for p in board.pieces:
        assert p.id == p.row * GRID + p.col
        assert p.group_id == p.id
        assert p.z_index == p.id + 1
        assert p.correct_position == Point(p.col * PIECE, p.row * PIECE)
        assert board.is_piece_correct(p.id)
    assert len(board.group_ids()) == GRID * GRID


def test_shuffle_keeps_tabs_on_board(engine: BoardEngine) -> None:
    table = engine.board.edge_table
    engine.shuffle()
    board = engine.board
    margin = 2 * 0.2 * PIECE

    assert board.edge_table is table
    assert engine.phase is Phase.SHUFFLED
    for p in board.pieces:
        assert margin <= p.position.x <= BOARD_SIZE - PIECE - margin
        assert margin <= p.position.y <= BOARD_SIZE - PIECE - margin
        assert p.group_id == p.id


def test_reset_keeps_edges(engine: BoardEngine) -> None:
    table = engine.board.edge_table
    engine.shuffle()
    engine.reset()
    assert engine.board.edge_table is table
    assert engine.phase is Phase.SOLVED_LAYOUT


def test_initialize_without_preserve_draws_new_edges(engine: BoardEngine) -> None:
    table = engine.board.edge_table
    engine.initialize(BOARD_SIZE, GRID)
    assert engine.board.edge_table is not table


def test_preserve_edges_ignored_when_grid_changes(engine: BoardEngine) -> None:
    engine.initialize(800, 4, preserve_edges=True)
    board = engine.board
    assert len(board.edge_table) == 4
    assert len(board.pieces) == 16
    assert board.piece_size == 200


def test_seeded_engines_agree() -> None:
    a = BoardEngine(rng=random.Random(5))
    b = BoardEngine(rng=random.Random(5))
    a.initialize(BOARD_SIZE, 4)
    b.initialize(BOARD_SIZE, 4)
    assert a.snapshot() == b.snapshot()


@pytest.mark.parametrize("board_size, grid_size", [(0, 3), (-10, 3), (600, 0)])
def test_initialize_rejects_bad_sizes(board_size: float, grid_size: int) -> None:
    with pytest.raises(ValueError):
        BoardEngine().initialize(board_size, grid_size)


def test_uninitialised_engine() -> None:
    engine = BoardEngine()
    assert engine.phase is Phase.UNINITIALIZED
    assert not engine.completed
    with pytest.raises(RuntimeError):
        engine.begin_drag(0)
    with pytest.raises(RuntimeError):
        engine.shuffle()


# -- drag protocol ------------------------------------------------------------


def test_begin_drag_raises_piece_to_top(engine: BoardEngine) -> None:
    assert engine.begin_drag(4)
    assert engine.board.piece(4).z_index == GRID * GRID + 2
    assert engine.board.highest_z == GRID * GRID + 2
    assert engine.active_drags == frozenset({4})

    engine.end_drag(4, *_pos(engine, 4))
    engine.begin_drag(0)
    assert engine.board.piece(0).z_index == GRID * GRID + 3
    others = [p.z_index for p in engine.board.pieces if p.id != 0]
    assert engine.board.piece(0).z_index > max(others)


def test_update_drag_moves_without_snapping(engine: BoardEngine) -> None:
    drop(engine, 1, 300, 300)
    engine.begin_drag(0)
    assert engine.update_drag(0, 105, 302)
    assert _pos(engine, 0) == (105, 302)
    assert _group(engine, 0) == 0
    assert engine.stats.drags == 1


def test_end_drag_counts_drags(engine: BoardEngine) -> None:
    drop(engine, 0, 10, 10)
    drop(engine, 0, 20, 20)
    assert engine.stats.drags == 2
    assert engine.active_drags == frozenset()


def test_unknown_piece_id(engine: BoardEngine) -> None:
    with pytest.raises(KeyError):
        engine.begin_drag(GRID * GRID)
    with pytest.raises(KeyError):
        engine.update_drag(-1, 0, 0)


def test_drag_calls_out_of_order(engine: BoardEngine) -> None:
    with pytest.raises(DragSessionError):
        engine.update_drag(0, 10, 10)
    with pytest.raises(DragSessionError):
        engine.end_drag(0, 10, 10)

    engine.begin_drag(0)
    with pytest.raises(DragSessionError):
        engine.begin_drag(0)


def test_rebuild_cancels_active_drags(engine: BoardEngine) -> None:
    engine.begin_drag(0)
    engine.shuffle()
    assert engine.active_drags == frozenset()
    with pytest.raises(DragSessionError):
        engine.update_drag(0, 10, 10)


# -- snapping -----------------------------------------------------------------


@pytest.mark.parametrize(
    "dx, dy, merges",
    [
        (29, 0, True),
        (-29, 0, True),
        (0, 29, True),
        (29, -29, True),
        (30, 0, False),
        (31, 0, False),
        (0, -31, False),
    ],
)
def test_snap_threshold(engine: BoardEngine, dx: float, dy: float, merges: bool) -> None:
    # piece 1 sits alone at (300, 300); piece 0 belongs 200px to its left
    drop(engine, 1, 300, 300)
    merged = drop(engine, 0, 100 + dx, 300 + dy)

    assert merged is merges
    assert engine.board.same_group(0, 1) is merges
    if merges:
        assert _pos(engine, 0) == (100, 300)
        assert _group(engine, 0) == 1
    else:
        assert _pos(engine, 0) == (100 + dx, 300 + dy)


def test_snap_uses_custom_threshold() -> None:
    engine = BoardEngine(PuzzleSettings(snap_threshold=10), rng=random.Random(0))
    engine.initialize(BOARD_SIZE, GRID, shuffle=False)
    drop(engine, 1, 300, 300)
    assert not drop(engine, 0, 112, 300)
    assert drop(engine, 0, 108, 300)


def test_non_adjacent_pieces_never_snap(engine: BoardEngine) -> None:
    scatter_far(engine)
    # exact diagonal offset from piece 4
    x4, y4 = _pos(engine, 4)
    assert not drop(engine, 0, x4 - PIECE, y4 - PIECE)
    assert _group(engine, 0) == 0


def test_merge_is_transitive(engine: BoardEngine) -> None:
    scatter_far(engine)
    # piece 1 is parked at (2300, 2000), piece 2 at (2600, 2000)
    assert drop(engine, 0, 2105, 2003)
    assert _pos(engine, 0) == (2100, 2000)
    assert _group(engine, 0) == 1

    assert drop(engine, 1, 2410, 2004)
    assert {_group(engine, i) for i in (0, 1, 2)} == {2}
    assert _pos(engine, 1) == (2400, 2000)
    # piece 0 rode along with its group
    assert _pos(engine, 0) == (2090, 1996)
    assert engine.phase is Phase.PARTIALLY_MERGED


def test_drop_between_two_neighbours_merges_both(engine: BoardEngine) -> None:
    scatter_far(engine)
    drop(engine, 0, 1000, 1000)
    drop(engine, 2, 1405, 1000)

    assert drop(engine, 1, 1210, 1005)
    # lowest-id neighbour decides the landing spot
    assert _pos(engine, 1) == (1200, 1000)
    # the other neighbour is pulled into exact alignment
    assert _pos(engine, 2) == (1400, 1000)
    assert {_group(engine, i) for i in (0, 1, 2)} == {0}
    _assert_groups_consistent(engine)


def test_group_index_follows_merges(engine: BoardEngine) -> None:
    scatter_far(engine)
    drop(engine, 0, 1000, 1000)
    drop(engine, 1, 1200, 1000)
    drop(engine, 3, 1000, 1200)

    board = engine.board
    assert [p.id for p in board.group_members(0)] == [0, 1, 3]
    assert board.group_members(1) == []
    assert len(board.group_ids()) == GRID * GRID - 2


# -- completion ---------------------------------------------------------------


def test_any_drag_order_completes(engine: BoardEngine, solved_calls: list[int]) -> None:
    engine.shuffle()
    scatter_far(engine)
    order = list(range(GRID * GRID))
    random.Random(7).shuffle(order)

    for pid in order:
        assert not engine.completed
        p = engine.board.piece(pid)
        drop(engine, pid, p.correct_position.x, p.correct_position.y)
        _assert_groups_consistent(engine)

    assert engine.completed
    assert engine.phase is Phase.COMPLETED
    assert engine.board.is_single_group()
    assert all(engine.board.is_piece_correct(p.id) for p in engine.board.pieces)
    assert solved_calls == [1]
    assert not engine.stats.running


def test_completion_snaps_near_misses(engine: BoardEngine, solved_calls: list[int]) -> None:
    # every piece 5px off, assembled into one group
    scatter_far(engine)
    for pid in range(GRID * GRID):
        p = engine.board.piece(pid)
        drop(engine, pid, p.correct_position.x + 5, p.correct_position.y + 5)

    assert engine.completed
    assert all(engine.board.is_piece_correct(p.id) for p in engine.board.pieces)
    assert solved_calls == [1]


def test_assembled_far_away_is_not_complete(engine: BoardEngine, solved_calls: list[int]) -> None:
    scatter_far(engine)
    for pid in range(GRID * GRID):
        p = engine.board.piece(pid)
        drop(engine, pid, 1000 + p.col * PIECE, 1000 + p.row * PIECE)

    assert engine.board.is_single_group()
    assert not engine.completed
    assert engine.phase is Phase.PARTIALLY_MERGED
    assert solved_calls == []


def test_completed_board_ignores_drags(engine: BoardEngine, solved_calls: list[int]) -> None:
    for p in engine.board.pieces:
        drop(engine, p.id, p.correct_position.x, p.correct_position.y)
    assert engine.completed
    before = engine.snapshot()
    drags = engine.stats.drags

    assert engine.begin_drag(0) is False
    assert engine.update_drag(0, 500, 500) is False
    assert engine.end_drag(0, 500, 500) is False
    assert engine.snapshot() == before
    assert engine.stats.drags == drags
    assert solved_calls == [1]


def test_reset_after_completion(engine: BoardEngine, solved_calls: list[int]) -> None:
    for p in engine.board.pieces:
        drop(engine, p.id, p.correct_position.x, p.correct_position.y)
    assert engine.completed

    engine.reset()
    first = engine.snapshot()
    engine.reset()

    assert engine.snapshot() == first
    assert not engine.completed
    assert engine.phase is Phase.SOLVED_LAYOUT
    assert engine.stats.drags == 0
    assert engine.stats.running

    # a second solve fires the signal again
    for p in engine.board.pieces:
        drop(engine, p.id, p.correct_position.x, p.correct_position.y)
    assert solved_calls == [1, 1]
