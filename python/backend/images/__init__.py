from backend.images.cutter import cut_piece, scale_to_board
from backend.images.loader import ImageLoader, ImageRejected, default_image

__all__ = [
    "ImageLoader",
    "ImageRejected",
    "cut_piece",
    "default_image",
    "scale_to_board",
]
