"""Closed outline geometry for a jigsaw piece.

Coordinates are relative to the piece's top-left corner with y pointing
down.  The outline runs top → right → bottom → left and starts and ends at
``(0, 0)``.  A tab bulges away from the piece, a blank bulges into it; the
two use the same control points with the protrusion sign flipped, so a tab
and the blank on its neighbour trace the same silhouette.
"""

from __future__ import annotations

from dataclasses import dataclass

from backend.config import DEFAULT_SETTINGS
from backend.models.edges import EdgeShape, PieceEdges, Side
from backend.models.piece import Point

# Fractions of the edge length along the edge.
LEAD_IN = 0.35
SHOULDER = 0.4
APEX = 0.5

# (start corner, direction along the edge, outward normal), in units of the
# piece size for the corner.
_FRAMES: dict[Side, tuple[tuple[int, int], tuple[int, int], tuple[int, int]]] = {
    Side.TOP: ((0, 0), (1, 0), (0, -1)),
    Side.RIGHT: ((1, 0), (0, 1), (1, 0)),
    Side.BOTTOM: ((1, 1), (-1, 0), (0, 1)),
    Side.LEFT: ((0, 1), (0, -1), (-1, 0)),
}


@dataclass(frozen=True)
class LineTo:
    end: Point


@dataclass(frozen=True)
class CubicTo:
    c1: Point
    c2: Point
    end: Point


Segment = LineTo | CubicTo


@dataclass(frozen=True)
class Outline:
    start: Point
    segments: tuple[Segment, ...]

    @property
    def is_closed(self) -> bool:
        return bool(self.segments) and self.segments[-1].end == self.start

    def translated(self, dx: float, dy: float) -> Outline:
        def move(p: Point) -> Point:
            return p.offset(dx, dy)

        segments: list[Segment] = []
        for seg in self.segments:
            if isinstance(seg, CubicTo):
                segments.append(CubicTo(move(seg.c1), move(seg.c2), move(seg.end)))
            else:
                segments.append(LineTo(move(seg.end)))
        return Outline(move(self.start), tuple(segments))

    def to_svg_path(self) -> str:
        """Return SVG path data, e.g. ``"M 0 0 L 100 0 ... Z"``."""
        parts = [f"M {_num(self.start.x)} {_num(self.start.y)}"]
        for seg in self.segments:
            if isinstance(seg, CubicTo):
                parts.append(
                    "C "
                    + " ".join(
                        f"{_num(p.x)} {_num(p.y)}" for p in (seg.c1, seg.c2, seg.end)
                    )
                )
            else:
                parts.append(f"L {_num(seg.end.x)} {_num(seg.end.y)}")
        parts.append("Z")
        return " ".join(parts)

    def polygon(self, points_per_curve: int = 12) -> list[tuple[float, float]]:
        """Flatten the outline into a ring of points.

        Each cubic contributes *points_per_curve* samples.  The closing point
        is not repeated.
        """
        ring = [(self.start.x, self.start.y)]
        cursor = self.start
        for seg in self.segments:
            if isinstance(seg, CubicTo):
                for i in range(1, points_per_curve + 1):
                    ring.append(_bezier(cursor, seg, i / points_per_curve))
            else:
                ring.append((seg.end.x, seg.end.y))
            cursor = seg.end
        if len(ring) > 1 and ring[-1] == ring[0]:
            ring.pop()
        return ring

    def bounds(self) -> tuple[float, float, float, float]:
        """Return ``(min_x, min_y, max_x, max_y)`` of the flattened outline."""
        ring = self.polygon()
        xs = [x for x, _ in ring]
        ys = [y for _, y in ring]
        return min(xs), min(ys), max(xs), max(ys)


class OutlineBuilder:
    """Stateless builder — all methods are static."""

    @staticmethod
    def build(
        edges: PieceEdges,
        size: float,
        tab_ratio: float = DEFAULT_SETTINGS.tab_ratio,
        neck_ratio: float = DEFAULT_SETTINGS.neck_ratio,
    ) -> Outline:
        """Return the closed outline of a piece with the given *edges*."""
        segments: list[Segment] = []
        for side, shape in edges.items():
            segments.extend(
                OutlineBuilder._edge(side, shape, size, tab_ratio, neck_ratio)
            )
        return Outline(Point(0.0, 0.0), tuple(segments))

    @staticmethod
    def piece_margins(
        edges: PieceEdges,
        size: float,
        tab_ratio: float = DEFAULT_SETTINGS.tab_ratio,
    ) -> dict[Side, float]:
        """How far the outline reaches past the square on each side."""
        t = size * tab_ratio
        return {
            side: t if shape is EdgeShape.TAB else 0.0
            for side, shape in edges.items()
        }

    # -- helpers --------------------------------------------------------------

    @staticmethod
    def _edge(
        side: Side,
        shape: EdgeShape,
        size: float,
        tab_ratio: float,
        neck_ratio: float,
    ) -> list[Segment]:
        (sx, sy), (dx, dy), (ox, oy) = _FRAMES[side]

        def at(u: float, v: float = 0.0) -> Point:
            # u: fraction along the edge, v: signed distance outward
            return Point(
                size * (sx + u * dx) + v * ox,
                size * (sy + u * dy) + v * oy,
            )

        if shape is EdgeShape.FLAT:
            return [LineTo(at(1.0))]

        sign = 1.0 if shape is EdgeShape.TAB else -1.0
        t = size * tab_ratio * sign
        n = size * neck_ratio * sign
        lead_out = 1.0 - LEAD_IN
        return [
            LineTo(at(LEAD_IN)),
            CubicTo(at(LEAD_IN, n), at(SHOULDER, t), at(APEX, t)),
            CubicTo(at(1.0 - SHOULDER, t), at(lead_out, n), at(lead_out)),
            LineTo(at(1.0)),
        ]


def _bezier(p0: Point, seg: CubicTo, t: float) -> tuple[float, float]:
    mt = 1.0 - t
    a, b, c, d = mt * mt * mt, 3 * mt * mt * t, 3 * mt * t * t, t * t * t
    return (
        a * p0.x + b * seg.c1.x + c * seg.c2.x + d * seg.end.x,
        a * p0.y + b * seg.c1.y + c * seg.c2.y + d * seg.end.y,
    )


def _num(v: float) -> str:
    return format(round(v, 3) + 0.0, "g")
