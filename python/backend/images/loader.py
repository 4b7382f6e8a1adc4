"""Image acquisition: validation, square crop and a built-in fallback."""

from __future__ import annotations

import logging
from pathlib import Path

from PIL import Image, ImageDraw

from backend.config import DEFAULT_SETTINGS, PuzzleSettings

logger = logging.getLogger(__name__)


class ImageRejected(ValueError):
    """The chosen image cannot be used; ``str(exc)`` is shown to the user."""


class ImageLoader:
    """Turns a user-supplied file into a square RGB puzzle image."""

    def __init__(self, settings: PuzzleSettings = DEFAULT_SETTINGS) -> None:
        self.settings = settings

    def load(self, path: Path) -> Image.Image:
        suffix = path.suffix.lower()
        if suffix not in self.settings.accepted_suffixes:
            raise ImageRejected("Please choose a JPG, PNG, or WebP image")
        try:
            with Image.open(path) as img:
                img.load()
                prepared = self.prepare(img)
        except (OSError, Image.DecompressionBombError) as exc:
            raise ImageRejected(f"Failed to read image: {path.name}") from exc
        logger.debug("Loaded %s as %d×%d", path, *prepared.size)
        return prepared

    def prepare(self, img: Image.Image) -> Image.Image:
        """Check the minimum size and centre-crop *img* to a square."""
        minimum = self.settings.min_image_size
        width, height = img.size
        if width < minimum or height < minimum:
            raise ImageRejected(
                f"Image must be at least {minimum}×{minimum} pixels"
            )
        side = min(width, height)
        left = (width - side) // 2
        top = (height - side) // 2
        return img.convert("RGB").crop((left, top, left + side, top + side))


def default_image(size: int = 600) -> Image.Image:
    """Render a colourful placeholder so every piece looks different."""
    img = Image.new("RGB", (size, size))
    draw = ImageDraw.Draw(img)
    for y in range(size):
        shade = y / size
        draw.line(
            [(0, y), (size, y)],
            fill=(int(137 + 108 * shade), int(180 - 60 * shade), int(250 - 90 * shade)),
        )
    step = size // 6
    for i in range(7):
        r = step // 2 + (i % 3) * step // 4
        cx = (i * 2 + 1) * size // 14
        cy = size // 2 + int((i % 2 - 0.5) * size / 3)
        draw.ellipse(
            [cx - r, cy - r, cx + r, cy + r],
            fill=(249, 226, 175) if i % 2 else (166, 227, 161),
            outline=(30, 30, 46),
            width=3,
        )
    draw.rectangle([0, 0, size - 1, size - 1], outline=(30, 30, 46), width=4)
    return img
