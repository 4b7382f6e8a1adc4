#!/usr/bin/env python3
"""Jigsaw Puzzle.

Usage::

    python main.py                         # Pygame GUI, 3×3, built-in picture
    python main.py -f pyqt -s 4            # PyQt GUI, 4×4
    python main.py -i photo.jpg            # puzzle from your own image
    python main.py -f rich --seed 7        # terminal board inspector
"""

import importlib
import logging
import sys
from enum import StrEnum
from pathlib import Path
from typing import Optional

import typer
from rich.logging import RichHandler

ROOT = Path(__file__).resolve().parent  # python/

if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from backend.config import DEFAULT_SETTINGS  # noqa: E402
from backend.images import ImageLoader, ImageRejected, default_image  # noqa: E402

log = logging.getLogger("jigsaw")


# -- frontend registry -------------------------------------------------------


class Frontend(StrEnum):
    pygame = "pygame"
    pyqt = "pyqt"
    rich = "rich"


_RUNNERS = {
    Frontend.pygame: "frontend.gui.pygame.app",
    Frontend.pyqt: "frontend.gui.pyqt.app",
    Frontend.rich: "frontend.cli.rich.app",
}


# -- helpers ------------------------------------------------------------------


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


# -- CLI entry point ----------------------------------------------------------

app = typer.Typer(add_completion=False)


@app.command()
def main(
    frontend: Frontend = typer.Option(
        Frontend.pygame, "-f", "--frontend",
        help="Frontend to launch.",
    ),
    size: int = typer.Option(
        DEFAULT_SETTINGS.grid_size, "-s", "--size",
        min=DEFAULT_SETTINGS.min_grid_size, max=DEFAULT_SETTINGS.max_grid_size,
        help="Grid size (pieces per side).",
    ),
    image: Optional[Path] = typer.Option(
        None, "-i", "--image",
        exists=True, dir_okay=False,
        help="JPG, PNG or WebP picture to cut up.",
    ),
    seed: Optional[int] = typer.Option(
        None, "--seed",
        help="Seed for edge shapes and scatter positions.",
    ),
    log_level: str = typer.Option(
        "WARNING", "--log-level",
        help="Logging level (DEBUG, INFO, WARNING, ...).",
    ),
) -> None:
    """Jigsaw Puzzle."""
    _configure_logging(log_level)

    if image is None:
        picture = default_image(DEFAULT_SETTINGS.board_max)
    else:
        try:
            picture = ImageLoader(DEFAULT_SETTINGS).load(image)
        except ImageRejected as exc:
            typer.secho(f"  {exc}", fg=typer.colors.RED, err=True)
            raise typer.Exit(code=1) from exc

    log.debug("Launching %s frontend (%d×%d)", frontend.value, size, size)
    mod = importlib.import_module(_RUNNERS[frontend])
    mod.run(size=size, image=picture, seed=seed, settings=DEFAULT_SETTINGS)


if __name__ == "__main__":
    app()
