"""Board model for the jigsaw puzzle."""

from __future__ import annotations

from dataclasses import dataclass, field

from backend.models.edges import EdgeTable
from backend.models.piece import Piece, PieceSnapshot, Point


@dataclass
class Board:
    """Authoritative state of one puzzle instance.

    Pieces are stored in id order (``id = row * grid_size + col``).  Group
    membership is a ``group_id`` tag on every piece, mirrored by an index
    from group id to the ids of its members so merges only touch the group
    being relabelled.
    """

    grid_size: int
    board_size: float
    edge_table: EdgeTable
    pieces: list[Piece]
    highest_z: int
    completed: bool = False
    _groups: dict[int, set[int]] = field(default_factory=dict, repr=False)

    def __post_init__(self) -> None:
        if not self._groups:
            for p in self.pieces:
                self._groups.setdefault(p.group_id, set()).add(p.id)

    # -- construction helpers -------------------------------------------------

    @classmethod
    def from_positions(
        cls,
        board_size: float,
        edge_table: EdgeTable,
        positions: list[Point],
    ) -> Board:
        """Create a board of singleton groups with pieces at *positions*.

        ``positions`` is indexed by piece id.
        """
        size = len(edge_table)
        if len(positions) != size * size:
            raise ValueError(
                f"Expected {size * size} positions for a {size}×{size} board, "
                f"got {len(positions)}."
            )
        piece_size = board_size / size
        pieces: list[Piece] = []
        for r in range(size):
            for c in range(size):
                pid = r * size + c
                pieces.append(
                    Piece(
                        id=pid,
                        row=r,
                        col=c,
                        edges=edge_table[r][c],
                        correct_position=Point(c * piece_size, r * piece_size),
                        position=positions[pid],
                        group_id=pid,
                        z_index=pid + 1,
                    )
                )
        return cls(
            grid_size=size,
            board_size=board_size,
            edge_table=edge_table,
            pieces=pieces,
            highest_z=len(pieces) + 1,
        )

    # -- queries --------------------------------------------------------------

    @property
    def piece_size(self) -> float:
        return self.board_size / self.grid_size

    def piece(self, piece_id: int) -> Piece:
        if not 0 <= piece_id < len(self.pieces):
            raise KeyError(f"Unknown piece id {piece_id}")
        return self.pieces[piece_id]

    def piece_at_cell(self, row: int, col: int) -> Piece:
        return self.piece(row * self.grid_size + col)

    def group_members(self, group_id: int) -> list[Piece]:
        return [self.pieces[i] for i in sorted(self._groups.get(group_id, ()))]

    def group_ids(self) -> set[int]:
        return set(self._groups)

    def same_group(self, a: int, b: int) -> bool:
        return self.piece(a).group_id == self.piece(b).group_id

    def is_single_group(self) -> bool:
        return len(self._groups) == 1

    def is_piece_correct(self, piece_id: int) -> bool:
        """Check if a piece sits exactly on its solved position."""
        p = self.piece(piece_id)
        return p.position == p.correct_position

    def all_within(self, threshold: float) -> bool:
        """Check if every piece is within *threshold* of its solved position."""
        for p in self.pieces:
            dx, dy = p.distance_to_correct()
            if dx >= threshold or dy >= threshold:
                return False
        return True

    def snapshot(self) -> list[PieceSnapshot]:
        """Return read-only views of every piece, in id order."""
        size = self.piece_size
        return [
            PieceSnapshot(
                id=p.id,
                row=p.row,
                col=p.col,
                edges=p.edges,
                position=p.position,
                piece_size=size,
                grid_size=self.grid_size,
                z_index=p.z_index,
                group_id=p.group_id,
            )
            for p in self.pieces
        ]

    # -- mutation (engine only) -----------------------------------------------

    def translate_group(self, group_id: int, dx: float, dy: float) -> None:
        for p in self.group_members(group_id):
            p.position = p.position.offset(dx, dy)

    def merge_groups(self, source: int, target: int) -> None:
        """Relabel every member of group *source* with *target*."""
        if source == target:
            return
        members = self._groups.pop(source)
        for pid in members:
            self.pieces[pid].group_id = target
        self._groups[target] |= members

    def snap_to_solution(self) -> None:
        for p in self.pieces:
            p.position = p.correct_position
