"""Rich terminal frontend — board inspector and solve replay.

A terminal cannot drag pieces, so this frontend shows the engine state
instead: the interlocking edge layout, where every piece currently sits
and which group it belongs to.  Commands shuffle, reset, apply hints,
replay a full solve through the engine, or print a piece's outline as an
SVG path.
"""

from __future__ import annotations

import random
import sys
import time

import rich.box
from PIL import Image
from rich.align import Align
from rich.console import Console, Group
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table
from rich.text import Text

from backend.config import DEFAULT_SETTINGS, PuzzleSettings
from backend.engine.gameplay import BoardEngine
from backend.engine.gamesolver import Solver
from backend.engine.outline import OutlineBuilder
from backend.models.board import Board
from backend.models.edges import EdgeShape, PieceEdges

console = Console()

# Terminal boards use a fixed virtual size.
_BOARD_SIZE = 600.0


# -- helpers ------------------------------------------------------------------


def _format_time(seconds: float) -> str:
    m, s = divmod(int(seconds), 60)
    return f"{m:02d}:{s:02d}"


def _edge_glyphs(edges: PieceEdges) -> tuple[str, str, str, str]:
    """Top, right, bottom, left glyphs; arrows point the way a tab sticks out."""
    top = {EdgeShape.FLAT: "─", EdgeShape.TAB: "▲", EdgeShape.BLANK: "▽"}
    right = {EdgeShape.FLAT: "│", EdgeShape.TAB: "▶", EdgeShape.BLANK: "◁"}
    bottom = {EdgeShape.FLAT: "─", EdgeShape.TAB: "▼", EdgeShape.BLANK: "△"}
    left = {EdgeShape.FLAT: "│", EdgeShape.TAB: "◀", EdgeShape.BLANK: "▷"}
    return top[edges.top], right[edges.right], bottom[edges.bottom], left[edges.left]


# -- board rendering ----------------------------------------------------------


def _render_layout(board: Board) -> Table:
    """Grid of pieces at their solved cells, with edge shapes and groups."""
    table = Table(
        show_header=False,
        show_edge=True,
        box=rich.box.HEAVY,
        border_style="bright_blue",
        padding=(0, 1),
    )
    for _ in range(board.grid_size):
        table.add_column(justify="center", width=9)

    for r in range(board.grid_size):
        cells: list[str] = []
        for c in range(board.grid_size):
            piece = board.piece_at_cell(r, c)
            top, right, bottom, left = _edge_glyphs(piece.edges)
            style = "bold green" if board.is_piece_correct(piece.id) else "bold white"
            cells.append(
                f"{top}\n"
                f"{left} [{style}]{piece.id:>2}[/{style}] {right}\n"
                f"{bottom}\n"
                f"[dim]g{piece.group_id}[/dim]"
            )
        table.add_row(*cells)
    return table


def _render_positions(board: Board) -> Table:
    table = Table(
        box=rich.box.ROUNDED,
        border_style="dim",
        title="Pieces",
        title_style="bold cyan",
    )
    table.add_column("id", justify="right", style="dim")
    table.add_column("cell", justify="center")
    table.add_column("position", justify="right", style="yellow")
    table.add_column("correct", justify="right", style="dim")
    table.add_column("group", justify="right", style="cyan")
    table.add_column("z", justify="right", style="dim")

    for p in board.pieces:
        table.add_row(
            str(p.id),
            f"{p.row},{p.col}",
            f"{p.position.x:7.1f} {p.position.y:7.1f}",
            f"{p.correct_position.x:5.0f} {p.correct_position.y:5.0f}",
            str(p.group_id),
            str(p.z_index),
        )
    return table


def _draw(engine: BoardEngine, status: str = "") -> None:
    console.clear()
    board = engine.board
    size = board.grid_size

    stats = Text()
    stats.append("  Drags: ", style="dim")
    stats.append(str(engine.stats.drags), style="bold yellow")
    stats.append("    Groups: ", style="dim")
    stats.append(str(len(board.group_ids())), style="bold yellow")
    stats.append("    Time: ", style="dim")
    stats.append(_format_time(engine.stats.elapsed_time), style="bold yellow")
    stats.append("    Phase: ", style="dim")
    stats.append(engine.phase.value, style="bold cyan")

    body = Group(
        Align.center(_render_layout(board)),
        Text(""),
        Align.center(_render_positions(board)),
    )
    border = "bold green" if board.completed else "bright_blue"
    panel = Panel(
        body,
        title=f"[bold cyan]Jigsaw Puzzle  {size}×{size}[/bold cyan]",
        border_style=border,
        padding=(1, 2),
    )

    controls = Text()
    for key, label in (
        ("S", "shuffle"),
        ("R", "reset"),
        ("N", "hint"),
        ("V", "solve"),
        ("P <id>", "outline"),
        ("Q", "quit"),
    ):
        controls.append(f"  {key}", style="bold cyan")
        controls.append(f"  {label} ", style="dim")

    console.print()
    console.print(Align.center(panel))
    console.print(Align.center(stats))
    if status:
        console.print(Align.center(Text.from_markup(f"  {status}")))
    console.print(Align.center(controls))


# -- solver helpers -----------------------------------------------------------


def _apply_hint(engine: BoardEngine) -> str:
    move = Solver.hint(engine.board)
    if move is None:
        return "[green]Already solved![/green]"
    engine.begin_drag(move.piece_id)
    merged = engine.end_drag(move.piece_id, move.x, move.y)
    verb = "snapped" if merged else "placed"
    return f"[cyan]Hint:[/cyan] {verb} piece [bold]{move.piece_id}[/bold]"


def _auto_solve(engine: BoardEngine, delay: float) -> str:
    moves = Solver.solve(engine.board)
    if not moves:
        return "[green]Already solved![/green]"

    for i, move in enumerate(moves):
        if engine.completed:
            break
        engine.begin_drag(move.piece_id)
        engine.end_drag(move.piece_id, move.x, move.y)
        _draw(
            engine,
            f"[bold cyan]Solving… drag {i + 1}/{len(moves)}[/bold cyan] "
            f"[dim](piece {move.piece_id})[/dim]",
        )
        sys.stdout.flush()
        time.sleep(delay)

    if engine.completed:
        return f"[bold green]Solved in {engine.stats.drags} drags![/bold green]"
    return "[yellow]Replay finished without completing the puzzle.[/yellow]"


def _outline(engine: BoardEngine, arg: str) -> str:
    board = engine.board
    try:
        piece = board.piece(int(arg))
    except (ValueError, KeyError):
        return f"[red]No piece {arg!r}.[/red]"
    outline = OutlineBuilder.build(
        piece.edges, board.piece_size, engine.settings.tab_ratio
    )
    return f"[cyan]Piece {piece.id}:[/cyan] [dim]{outline.to_svg_path()}[/dim]"


# -- main loop ----------------------------------------------------------------


def _loop(engine: BoardEngine, delay: float) -> None:
    status = ""
    while True:
        _draw(engine, status)
        command = Prompt.ask("  [bold cyan]>[/bold cyan]", default="").strip()
        key, _, arg = command.partition(" ")
        key = key.lower()

        if key == "q":
            console.print(Align.center(Text("\nGoodbye!\n", style="bold cyan")))
            return
        if key == "s":
            engine.shuffle()
            status = "[yellow]Shuffled![/yellow]"
        elif key == "r":
            engine.reset()
            status = "[yellow]Reset to the solved layout.[/yellow]"
        elif key == "n":
            status = _apply_hint(engine)
        elif key == "v":
            status = _auto_solve(engine, delay)
        elif key == "p":
            status = _outline(engine, arg)
        else:
            status = ""


# -- public entry point -------------------------------------------------------


def run(
    size: int,
    image: Image.Image | None = None,
    seed: int | None = None,
    settings: PuzzleSettings = DEFAULT_SETTINGS,
    delay: float = 0.15,
) -> None:
    """Launch the Rich inspector.  The picture is not drawn in a terminal."""
    engine = BoardEngine(settings, rng=random.Random(seed))
    engine.on_solved(console.bell)
    engine.initialize(_BOARD_SIZE, size)
    _loop(engine, delay)
