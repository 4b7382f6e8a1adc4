"""Edge shapes shared by two neighbouring jigsaw pieces."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class EdgeShape(StrEnum):
    FLAT = "flat"
    TAB = "tab"
    BLANK = "blank"

    def complement(self) -> EdgeShape:
        """Return the shape a neighbour must have to interlock with this one."""
        if self is EdgeShape.TAB:
            return EdgeShape.BLANK
        if self is EdgeShape.BLANK:
            return EdgeShape.TAB
        return EdgeShape.FLAT


class Side(StrEnum):
    TOP = "top"
    RIGHT = "right"
    BOTTOM = "bottom"
    LEFT = "left"


@dataclass(frozen=True)
class PieceEdges:
    """The four edge shapes of one piece."""

    top: EdgeShape
    right: EdgeShape
    bottom: EdgeShape
    left: EdgeShape

    def get(self, side: Side) -> EdgeShape:
        return getattr(self, side.value)

    def items(self) -> list[tuple[Side, EdgeShape]]:
        """Sides in outline traversal order (top, right, bottom, left)."""
        return [(side, self.get(side)) for side in Side]

    @classmethod
    def all_flat(cls) -> PieceEdges:
        return cls(EdgeShape.FLAT, EdgeShape.FLAT, EdgeShape.FLAT, EdgeShape.FLAT)


EdgeTable = list[list[PieceEdges]]
