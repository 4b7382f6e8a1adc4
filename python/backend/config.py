"""Tunable constants for the jigsaw engine and its frontends."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class PuzzleSettings:
    """Engine and layout defaults.

    Frontends build one of these (optionally overriding fields from the
    command line) and hand it to the engine.
    """

    # -- engine ---------------------------------------------------------------

    snap_threshold: float = 30.0
    tab_ratio: float = 0.2
    neck_ratio: float = 0.15
    grid_size: int = 3
    min_grid_size: int = 2
    max_grid_size: int = 8

    # -- viewport -------------------------------------------------------------

    board_max: int = 600
    viewport_padding: int = 40
    reserved_height: int = 280

    # -- image acquisition ----------------------------------------------------

    min_image_size: int = 300
    accepted_suffixes: tuple[str, ...] = field(
        default=(".jpg", ".jpeg", ".png", ".webp")
    )

    def tab_extension(self, piece_size: float) -> float:
        return piece_size * self.tab_ratio

    def board_size_for_viewport(self, width: int, height: int) -> int:
        """Largest square board that fits a *width*×*height* viewport.

        Leaves horizontal padding on both sides and room for the controls
        below the board.
        """
        max_width = min(width - self.viewport_padding * 2, self.board_max)
        max_height = height - self.reserved_height
        return max(0, min(max_width, max_height))


DEFAULT_SETTINGS = PuzzleSettings()
