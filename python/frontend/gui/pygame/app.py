"""Pygame GUI frontend — drag-and-drop jigsaw board.

Pieces are cut with Pillow once per board build and blitted in z-order.
Mouse events go through a ``DragSession``; buttons and keys drive
shuffle, reset and hint.
"""

from __future__ import annotations

import random

import pygame
from PIL import Image

from backend.config import DEFAULT_SETTINGS, PuzzleSettings
from backend.engine.dragsession import DragSession
from backend.engine.gameplay import BoardEngine
from backend.engine.gamesolver import Solver
from backend.images import cut_piece, scale_to_board

# ---------------------------------------------------------------------------
# Catppuccin Mocha palette
# ---------------------------------------------------------------------------
COL_BASE = (30, 30, 46)
COL_MANTLE = (24, 24, 37)
COL_SURFACE0 = (49, 50, 68)
COL_SURFACE1 = (69, 71, 90)
COL_OVERLAY0 = (108, 112, 134)
COL_TEXT = (205, 214, 244)
COL_BLUE = (137, 180, 250)
COL_LAVENDER = (180, 190, 254)
COL_GREEN = (166, 227, 161)
COL_PINK = (245, 194, 231)
COL_YELLOW = (249, 226, 175)
COL_RED = (243, 139, 168)

# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------
WIN_W, WIN_H = 680, 880
BOARD_TOP = 80


# ---------------------------------------------------------------------------
# Simple clickable button
# ---------------------------------------------------------------------------
class _Btn:
    __slots__ = ("rect", "text", "font", "bg", "hover", "fg", "radius", "_hot")

    def __init__(
        self,
        rect: tuple[int, int, int, int],
        text: str,
        font: pygame.font.Font,
        *,
        bg: tuple = COL_SURFACE0,
        hover: tuple = COL_SURFACE1,
        fg: tuple = COL_TEXT,
        radius: int = 8,
    ) -> None:
        self.rect = pygame.Rect(rect)
        self.text = text
        self.font = font
        self.bg = bg
        self.hover = hover
        self.fg = fg
        self.radius = radius
        self._hot = False

    def draw(self, surf: pygame.Surface) -> None:
        c = self.hover if self._hot else self.bg
        pygame.draw.rect(surf, c, self.rect, border_radius=self.radius)
        lbl = self.font.render(self.text, True, self.fg)
        surf.blit(
            lbl,
            (
                self.rect.centerx - lbl.get_width() // 2,
                self.rect.centery - lbl.get_height() // 2,
            ),
        )

    def motion(self, pos: tuple[int, int]) -> None:
        self._hot = self.rect.collidepoint(pos)

    def hit(self, pos: tuple[int, int]) -> bool:
        return self.rect.collidepoint(pos)


# ---------------------------------------------------------------------------
# Centring helpers
# ---------------------------------------------------------------------------
def _cx(w: int) -> int:
    return (WIN_W - w) // 2


def _blit_center(surf: pygame.Surface, rendered: pygame.Surface, y: int) -> None:
    surf.blit(rendered, (_cx(rendered.get_width()), y))


def _to_surface(img: Image.Image) -> pygame.Surface:
    return pygame.image.frombytes(img.tobytes(), img.size, "RGBA").convert_alpha()


# ---------------------------------------------------------------------------
# Main application
# ---------------------------------------------------------------------------
class PygameApp:
    def __init__(
        self,
        grid_size: int,
        image: Image.Image,
        settings: PuzzleSettings,
        seed: int | None,
    ) -> None:
        self._settings = settings
        self._image = image
        self._engine = BoardEngine(settings, rng=random.Random(seed))
        self._engine.on_solved(self._on_solved)
        self._session = DragSession(self._engine)
        self._status_msg = ""

        pygame.init()
        self._surf = pygame.display.set_mode((WIN_W, WIN_H))
        pygame.display.set_caption("Jigsaw Puzzle")
        self._clock = pygame.time.Clock()

        # Fonts
        self._f_big = pygame.font.SysFont("Helvetica", 38, bold=True)
        self._f_title = pygame.font.SysFont("Helvetica", 22, bold=True)
        self._f_body = pygame.font.SysFont("Helvetica", 16)
        self._f_btn_sm = pygame.font.SysFont("Helvetica", 14, bold=True)
        self._f_small = pygame.font.SysFont("Helvetica", 13)

        board_size = settings.board_size_for_viewport(WIN_W, WIN_H)
        self._engine.initialize(board_size, grid_size)
        self._origin = (_cx(board_size), BOARD_TOP)
        self._piece_surfs: dict[int, tuple[pygame.Surface, tuple[float, float]]] = {}
        self._build_piece_surfaces()
        self._build_btns()

    # ── setup ───────────────────────────────────────────────────────────────

    def _build_piece_surfaces(self) -> None:
        """Cut every piece out of the image, once per board build."""
        board = self._engine.board
        board_img = scale_to_board(self._image, board.board_size)
        self._piece_surfs = {}
        for snap in board.snapshot():
            img, offset = cut_piece(board_img, snap, self._settings.tab_ratio)
            self._piece_surfs[snap.id] = (_to_surface(img), offset)

    def _build_btns(self) -> None:
        bw, gap = 120, 12
        total = 4 * bw + 3 * gap
        sx = _cx(total)
        y = BOARD_TOP + int(self._engine.board.board_size) + 24
        self._shuffle_btn = _Btn(
            (sx, y, bw, 40), "SHUFFLE (S)", self._f_btn_sm,
            bg=COL_BLUE, hover=COL_LAVENDER, fg=COL_BASE,
        )
        self._reset_btn = _Btn(
            (sx + bw + gap, y, bw, 40), "RESET (R)", self._f_btn_sm,
        )
        self._hint_btn = _Btn(
            (sx + 2 * (bw + gap), y, bw, 40), "HINT (N)", self._f_btn_sm,
            bg=COL_YELLOW, hover=(255, 240, 200), fg=COL_BASE,
        )
        self._quit_btn = _Btn(
            (sx + 3 * (bw + gap), y, bw, 40), "QUIT (Q)", self._f_btn_sm,
            bg=COL_RED, hover=(255, 170, 185), fg=COL_BASE,
        )
        self._btns = [self._shuffle_btn, self._reset_btn, self._hint_btn, self._quit_btn]

    # ── helpers ─────────────────────────────────────────────────────────────

    @staticmethod
    def _fmt(seconds: float) -> str:
        m, s = divmod(int(seconds), 60)
        return f"{m:02d}:{s:02d}"

    def _to_board(self, pos: tuple[int, int]) -> tuple[float, float]:
        ox, oy = self._origin
        return pos[0] - ox, pos[1] - oy

    # ── drawing ─────────────────────────────────────────────────────────────

    def _draw(self) -> None:
        self._surf.fill(COL_BASE)
        engine = self._engine
        board = engine.board
        sz = board.grid_size
        ox, oy = self._origin

        _blit_center(
            self._surf,
            self._f_title.render(f"Jigsaw Puzzle  {sz}×{sz}", True, COL_TEXT),
            14,
        )
        _blit_center(
            self._surf,
            self._f_body.render(
                f"Drags: {engine.stats.drags}    "
                f"Groups: {len(board.group_ids())}    "
                f"Time: {self._fmt(engine.stats.elapsed_time)}",
                True,
                COL_PINK,
            ),
            44,
        )

        side = int(board.board_size)
        pygame.draw.rect(
            self._surf, COL_MANTLE, pygame.Rect(ox, oy, side, side), border_radius=10
        )

        for snap in sorted(engine.snapshot(), key=lambda s: s.z_index):
            surf, (dx, dy) = self._piece_surfs[snap.id]
            self._surf.blit(
                surf, (ox + snap.position.x - dx, oy + snap.position.y - dy)
            )

        if board.completed:
            banner = pygame.Surface((side, 110), pygame.SRCALPHA)
            banner.fill((30, 30, 46, 210))
            self._surf.blit(banner, (ox, oy + side // 2 - 55))
            _blit_center(
                self._surf,
                self._f_big.render("★  S O L V E D  ★", True, COL_GREEN),
                oy + side // 2 - 42,
            )
            _blit_center(
                self._surf,
                self._f_body.render(
                    f"{engine.stats.drags} drags in "
                    f"{self._fmt(engine.stats.elapsed_time)}",
                    True,
                    COL_YELLOW,
                ),
                oy + side // 2 + 12,
            )

        for btn in self._btns:
            btn.draw(self._surf)

        footer_y = self._btns[0].rect.bottom + 16
        if self._status_msg:
            _blit_center(
                self._surf,
                self._f_small.render(self._status_msg, True, COL_YELLOW),
                footer_y,
            )
            footer_y += 20
        _blit_center(
            self._surf,
            self._f_small.render(
                "Drag pieces together     S  shuffle     R  reset"
                "     N  hint     Esc  quit",
                True,
                COL_OVERLAY0,
            ),
            footer_y,
        )

    # ── actions ─────────────────────────────────────────────────────────────

    def _do_shuffle(self) -> None:
        self._session.cancel()
        self._engine.shuffle()
        self._status_msg = "Shuffled!"

    def _do_reset(self) -> None:
        self._session.cancel()
        self._engine.reset()
        self._status_msg = "Reset to the solved layout."

    def _do_hint(self) -> None:
        if self._session.active_piece is not None:
            return
        engine = self._engine
        move = Solver.hint(engine.board)
        if move is None:
            self._status_msg = "Already solved!"
            return
        engine.begin_drag(move.piece_id)
        engine.end_drag(move.piece_id, move.x, move.y)
        if not engine.completed:
            self._status_msg = f"Hint: placed piece {move.piece_id}"

    def _on_solved(self) -> None:
        self._status_msg = "Solved! Shuffle to play again."

    # ── event handling ──────────────────────────────────────────────────────

    def _handle(self, ev: pygame.event.Event) -> bool:
        if ev.type == pygame.MOUSEMOTION:
            for btn in self._btns:
                btn.motion(ev.pos)
            self._session.move(*self._to_board(ev.pos))
        elif ev.type == pygame.MOUSEBUTTONDOWN and ev.button == 1:
            if self._shuffle_btn.hit(ev.pos):
                self._do_shuffle()
            elif self._reset_btn.hit(ev.pos):
                self._do_reset()
            elif self._hint_btn.hit(ev.pos):
                self._do_hint()
            elif self._quit_btn.hit(ev.pos):
                return False
            elif self._session.active_piece is None:
                self._session.press(*self._to_board(ev.pos))
        elif ev.type == pygame.MOUSEBUTTONUP and ev.button == 1:
            if self._session.release(*self._to_board(ev.pos)):
                if not self._engine.completed:
                    self._status_msg = "Snap!"
        elif ev.type == pygame.KEYDOWN:
            if ev.key == pygame.K_s:
                self._do_shuffle()
            elif ev.key == pygame.K_r:
                self._do_reset()
            elif ev.key == pygame.K_n:
                self._do_hint()
            elif ev.key in (pygame.K_q, pygame.K_ESCAPE):
                return False
        return True

    # ── main loop ───────────────────────────────────────────────────────────

    def run_loop(self) -> None:
        running = True
        while running:
            for ev in pygame.event.get():
                if ev.type == pygame.QUIT or not self._handle(ev):
                    running = False
                    break

            self._draw()
            pygame.display.flip()
            self._clock.tick(60)

        pygame.quit()


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------
def run(
    size: int,
    image: Image.Image,
    seed: int | None = None,
    settings: PuzzleSettings = DEFAULT_SETTINGS,
) -> None:
    """Launch the Pygame GUI with a shuffled board."""
    app = PygameApp(size, image, settings, seed)
    app.run_loop()
