"""Render one piece's clipped bitmap from the full puzzle image."""

from __future__ import annotations

import math

from PIL import Image, ImageDraw

from backend.config import DEFAULT_SETTINGS
from backend.engine.outline import OutlineBuilder
from backend.models.piece import PieceSnapshot


def scale_to_board(image: Image.Image, board_size: float) -> Image.Image:
    """Resize the square puzzle image to the on-screen board size."""
    side = max(1, round(board_size))
    return image.resize((side, side), Image.Resampling.LANCZOS)


def cut_piece(
    board_image: Image.Image,
    piece: PieceSnapshot,
    tab_ratio: float = DEFAULT_SETTINGS.tab_ratio,
    points_per_curve: int = 12,
) -> tuple[Image.Image, tuple[float, float]]:
    """Cut *piece* out of *board_image* (already scaled to the board).

    Returns the RGBA piece bitmap and the offset of the piece's top-left
    corner inside it; draw the bitmap at ``position - offset``.
    """
    s = piece.piece_size
    t = s * tab_ratio
    side = math.ceil(s + 2 * t)
    left = round(piece.col * s - t)
    top = round(piece.row * s - t)
    offset = (piece.col * s - left, piece.row * s - top)

    region = board_image.crop((left, top, left + side, top + side)).convert("RGBA")
    outline = OutlineBuilder.build(piece.edges, s, tab_ratio).translated(*offset)

    mask = Image.new("L", (side, side), 0)
    ImageDraw.Draw(mask).polygon(outline.polygon(points_per_curve), fill=255)
    region.putalpha(mask)
    return region, offset
