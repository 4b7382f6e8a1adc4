"""Image acquisition and piece cutting with Pillow."""

from __future__ import annotations

from pathlib import Path

import pytest
from PIL import Image

from backend.config import PuzzleSettings
from backend.images import (
    ImageLoader,
    ImageRejected,
    cut_piece,
    default_image,
    scale_to_board,
)
from backend.models.edges import EdgeShape, PieceEdges
from backend.models.piece import Point, PieceSnapshot


# -- helpers ------------------------------------------------------------------


def _save(tmp_path: Path, name: str, size: tuple[int, int]) -> Path:
    path = tmp_path / name
    Image.new("RGB", size, (200, 40, 40)).save(path)
    return path


def _snapshot(row: int, col: int, edges: PieceEdges, size: float = 200.0) -> PieceSnapshot:
    return PieceSnapshot(
        id=row * 3 + col,
        row=row,
        col=col,
        edges=edges,
        position=Point(col * size, row * size),
        piece_size=size,
        grid_size=3,
        z_index=1,
        group_id=0,
    )


# -- loading ------------------------------------------------------------------


@pytest.mark.parametrize("name", ["wide.png", "wide.JPG", "wide.jpeg", "wide.webp"])
def test_load_crops_to_square(tmp_path: Path, name: str) -> None:
    img = ImageLoader().load(_save(tmp_path, name, (500, 320)))
    assert img.size == (320, 320)
    assert img.mode == "RGB"


def test_load_rejects_small_image(tmp_path: Path) -> None:
    with pytest.raises(ImageRejected, match="at least 300×300"):
        ImageLoader().load(_save(tmp_path, "tiny.png", (299, 400)))


def test_min_size_comes_from_settings(tmp_path: Path) -> None:
    loader = ImageLoader(PuzzleSettings(min_image_size=100))
    assert loader.load(_save(tmp_path, "small.png", (150, 120))).size == (120, 120)


def test_load_rejects_unknown_suffix(tmp_path: Path) -> None:
    path = _save(tmp_path, "anim.gif", (400, 400))
    with pytest.raises(ImageRejected, match="JPG, PNG, or WebP"):
        ImageLoader().load(path)


def test_load_rejects_unreadable_file(tmp_path: Path) -> None:
    path = tmp_path / "broken.png"
    path.write_bytes(b"definitely not a png")
    with pytest.raises(ImageRejected, match="broken.png"):
        ImageLoader().load(path)


def test_prepare_centre_crop() -> None:
    img = Image.new("RGB", (600, 400), (0, 0, 0))
    # mark the centre column band white
    img.paste((255, 255, 255), (100, 0, 500, 400))
    square = ImageLoader().prepare(img)
    assert square.size == (400, 400)
    assert square.getpixel((0, 0)) == (255, 255, 255)
    assert square.getpixel((399, 399)) == (255, 255, 255)


def test_default_image() -> None:
    img = default_image(320)
    assert img.size == (320, 320)
    assert img.mode == "RGB"


# -- cutting ------------------------------------------------------------------


def test_scale_to_board() -> None:
    assert scale_to_board(default_image(400), 600).size == (600, 600)


def test_cut_piece_mask() -> None:
    board_img = default_image(600)
    edges = PieceEdges.all_flat()
    piece_img, (ox, oy) = cut_piece(board_img, _snapshot(1, 1, edges), 0.2)

    # 200px piece plus 40px of room for tabs on every side
    assert piece_img.size == (280, 280)
    assert piece_img.mode == "RGBA"
    assert (ox, oy) == (40, 40)

    alpha = piece_img.getchannel("A")
    assert alpha.getpixel((140, 140)) == 255
    assert alpha.getpixel((5, 5)) == 0
    assert alpha.getpixel((275, 140)) == 0
    # visible pixels come from the matching spot of the board image
    assert piece_img.getpixel((140, 140))[:3] == board_img.getpixel((300, 300))


def test_cut_piece_tab_is_opaque() -> None:
    edges = PieceEdges(
        EdgeShape.FLAT, EdgeShape.TAB, EdgeShape.FLAT, EdgeShape.FLAT
    )
    piece_img, (ox, oy) = cut_piece(default_image(600), _snapshot(0, 0, edges), 0.2)
    alpha = piece_img.getchannel("A")
    # just outside the right edge, halfway down: inside the tab
    assert alpha.getpixel((int(ox + 215), int(oy + 100))) == 255
    # same distance outside the flat bottom edge
    assert alpha.getpixel((int(ox + 100), int(oy + 215))) == 0
