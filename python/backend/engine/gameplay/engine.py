"""Board engine — owns piece state, drags, snapping and completion."""

from __future__ import annotations

import enum
import logging
import random
from collections.abc import Callable

from backend.config import DEFAULT_SETTINGS, PuzzleSettings
from backend.engine.dragsession.session import DragSessionError
from backend.engine.gamegenerator import PuzzleGenerator
from backend.engine.gamestate import GameState
from backend.models.board import Board
from backend.models.edges import EdgeTable
from backend.models.piece import Piece, PieceSnapshot, Point

logger = logging.getLogger(__name__)

_NEIGHBOUR_OFFSETS = ((-1, 0), (0, 1), (1, 0), (0, -1))


class Phase(enum.Enum):
    UNINITIALIZED = "uninitialized"
    SOLVED_LAYOUT = "solved-layout"
    SHUFFLED = "shuffled"
    PARTIALLY_MERGED = "partially-merged"
    COMPLETED = "completed"


class BoardEngine:
    """Orchestrates a single puzzle instance.

    All mutation goes through ``initialize``/``shuffle``/``reset`` and the
    ``begin_drag``/``update_drag``/``end_drag`` protocol.  Renderers read
    ``snapshot()`` after each call.
    """

    def __init__(
        self,
        settings: PuzzleSettings = DEFAULT_SETTINGS,
        rng: random.Random | None = None,
    ) -> None:
        self.settings = settings
        self.stats = GameState()
        self._rng = rng or random.Random()
        self._board: Board | None = None
        self._edge_table: EdgeTable | None = None
        self._active: set[int] = set()
        self._solved_listeners: list[Callable[[], None]] = []

    # -- queries --------------------------------------------------------------

    @property
    def board(self) -> Board:
        if self._board is None:
            raise RuntimeError("Board not initialised; call initialize() first.")
        return self._board

    @property
    def completed(self) -> bool:
        return self._board is not None and self._board.completed

    @property
    def phase(self) -> Phase:
        board = self._board
        if board is None:
            return Phase.UNINITIALIZED
        if board.completed:
            return Phase.COMPLETED
        if len(board.group_ids()) < len(board.pieces):
            return Phase.PARTIALLY_MERGED
        if all(board.is_piece_correct(p.id) for p in board.pieces):
            return Phase.SOLVED_LAYOUT
        return Phase.SHUFFLED

    @property
    def active_drags(self) -> frozenset[int]:
        return frozenset(self._active)

    def snapshot(self) -> list[PieceSnapshot]:
        return self.board.snapshot()

    def on_solved(self, callback: Callable[[], None]) -> None:
        """Register *callback* to run once each time the puzzle is solved."""
        self._solved_listeners.append(callback)

    # -- lifecycle ------------------------------------------------------------

    def initialize(
        self,
        board_size: float,
        grid_size: int,
        preserve_edges: bool = False,
        shuffle: bool = True,
    ) -> Board:
        """Build a fresh board, replacing any previous one.

        With *preserve_edges* the previous edge table is reused as long as
        it has the requested dimensions.
        """
        if board_size <= 0:
            raise ValueError(f"Board size must be positive, got {board_size}.")
        if grid_size < 1:
            raise ValueError(f"Grid size must be at least 1, got {grid_size}.")

        table = self._edge_table
        reused = preserve_edges and table is not None and len(table) == grid_size
        if not reused or table is None:
            table = PuzzleGenerator.edges(grid_size, grid_size, self._rng)
            self._edge_table = table

        if shuffle:
            margin = 2 * self.settings.tab_extension(board_size / grid_size)
            positions = PuzzleGenerator.scatter(
                board_size, grid_size, margin, self._rng
            )
        else:
            positions = PuzzleGenerator.solved(board_size, grid_size)

        self._board = Board.from_positions(board_size, table, positions)
        self._active.clear()
        self.stats = GameState()
        logger.debug(
            "Built %d×%d board (size=%s, shuffled=%s, edges %s)",
            grid_size,
            grid_size,
            board_size,
            shuffle,
            "kept" if reused else "new",
        )
        return self._board

    def shuffle(self) -> Board:
        board = self.board
        return self.initialize(
            board.board_size, board.grid_size, preserve_edges=True, shuffle=True
        )

    def reset(self) -> Board:
        board = self.board
        return self.initialize(
            board.board_size, board.grid_size, preserve_edges=True, shuffle=False
        )

    # -- drag protocol --------------------------------------------------------

    def begin_drag(self, piece_id: int) -> bool:
        """Raise *piece_id* above every other piece and open its drag.

        Returns False (and does nothing) once the puzzle is completed.
        """
        board = self.board
        piece = board.piece(piece_id)
        if board.completed:
            return False
        if piece_id in self._active:
            raise DragSessionError(f"Piece {piece_id} is already being dragged.")
        board.highest_z += 1
        piece.z_index = board.highest_z
        self._active.add(piece_id)
        return True

    def update_drag(self, piece_id: int, x: float, y: float) -> bool:
        board = self.board
        piece = board.piece(piece_id)
        if board.completed:
            return False
        self._require_active(piece_id)
        piece.position = Point(x, y)
        return True

    def end_drag(self, piece_id: int, x: float, y: float) -> bool:
        """Drop *piece_id* at ``(x, y)``, snap it, then check for completion.

        Returns True if the drop merged the piece's group with another.
        """
        board = self.board
        piece = board.piece(piece_id)
        if board.completed:
            return False
        self._require_active(piece_id)
        self._active.discard(piece_id)
        piece.position = Point(x, y)
        self.stats.increment_drags()

        merged = self._snap(board, piece)
        self._check_completion(board)
        return merged

    # -- snapping -------------------------------------------------------------

    def _snap(self, board: Board, piece: Piece) -> bool:
        matches = self._matching_neighbours(board, piece)
        if not matches:
            return False

        # The lowest-id match decides where the released group lands.
        anchor = matches[0]
        size = board.piece_size
        target_x = anchor.position.x - (anchor.col - piece.col) * size
        target_y = anchor.position.y - (anchor.row - piece.row) * size
        released = piece.group_id
        board.translate_group(
            released, target_x - piece.position.x, target_y - piece.position.y
        )
        board.merge_groups(released, anchor.group_id)
        logger.debug(
            "Piece %d snapped to piece %d (group %d -> %d)",
            piece.id,
            anchor.id,
            released,
            anchor.group_id,
        )

        # Other neighbours that now line up join the same group.
        for other in self._matching_neighbours(board, piece):
            if other.group_id == piece.group_id:
                continue
            ex = piece.position.x + (other.col - piece.col) * size
            ey = piece.position.y + (other.row - piece.row) * size
            group = other.group_id
            board.translate_group(group, ex - other.position.x, ey - other.position.y)
            board.merge_groups(group, piece.group_id)
            logger.debug(
                "Piece %d also joined group %d (group %d)",
                other.id,
                piece.group_id,
                group,
            )
        return True

    def _matching_neighbours(self, board: Board, piece: Piece) -> list[Piece]:
        """Grid neighbours outside *piece*'s group within snap distance, by id."""
        threshold = self.settings.snap_threshold
        size = board.piece_size
        found: list[Piece] = []
        for dr, dc in _NEIGHBOUR_OFFSETS:
            r, c = piece.row + dr, piece.col + dc
            if not (0 <= r < board.grid_size and 0 <= c < board.grid_size):
                continue
            other = board.piece_at_cell(r, c)
            if other.group_id == piece.group_id:
                continue
            actual_dx = other.position.x - piece.position.x
            actual_dy = other.position.y - piece.position.y
            if (
                abs(actual_dx - dc * size) < threshold
                and abs(actual_dy - dr * size) < threshold
            ):
                found.append(other)
        found.sort(key=lambda p: p.id)
        return found

    # -- completion -----------------------------------------------------------

    def _check_completion(self, board: Board) -> bool:
        if board.completed:
            return True
        if not board.is_single_group():
            return False
        if not board.all_within(self.settings.snap_threshold):
            return False

        board.snap_to_solution()
        board.completed = True
        self.stats.pause()
        logger.info(
            "Puzzle solved: %d pieces, %d drags, %.1fs",
            len(board.pieces),
            self.stats.drags,
            self.stats.elapsed_time,
        )
        for callback in self._solved_listeners:
            callback()
        return True

    # -- helpers --------------------------------------------------------------

    def _require_active(self, piece_id: int) -> None:
        if piece_id not in self._active:
            raise DragSessionError(
                f"Piece {piece_id} is not being dragged; call begin_drag() first."
            )
