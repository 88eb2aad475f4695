from __future__ import annotations

from typing import Dict, Optional, Tuple

from match3.components.grid import Grid
from match3.components.token import TokenKind
from match3.constants import TOKEN_PADDING
from match3.systems.board_ops import token_kind
from match3.ui.layout import cell_origin, compute_board_geometry

TOKEN_COLORS: Dict[TokenKind, Tuple[int, int, int]] = {
    TokenKind.RED: (180, 60, 60),
    TokenKind.BLUE: (70, 90, 180),
    TokenKind.GREEN: (80, 170, 80),
    TokenKind.YELLOW: (200, 190, 80),
    TokenKind.PURPLE: (170, 80, 160),
    TokenKind.ORANGE: (200, 130, 60),
}
CELL_BACKGROUND = (40, 40, 48)
SELECTION_OUTLINE = (255, 255, 255)


class BoardRenderer:
    """Flat rendering of the board: one filled circle per token.

    ``last_layout`` maps token -> (center_x, center_y, kind) for the most recent
    frame, and is built even when no window is available.
    """

    def __init__(self, grid: Grid, window, padding: int = TOKEN_PADDING):
        self.grid = grid
        self.window = window
        self.padding = padding
        self.last_layout: Dict[int, Tuple[float, float, Optional[TokenKind]]] = {}

    def render(self, selected: Optional[Tuple[int, int]] = None, score: int = 0) -> None:
        # Local import keeps tests headless without creating a window.
        import arcade
        headless = False
        try:
            arcade.get_window()
        except Exception:
            headless = True

        tile_size, start_x, start_y = compute_board_geometry(
            self.window.width, self.window.height, self.grid.width, self.grid.height
        )
        radius = tile_size / 2 - self.padding
        self.last_layout = {}
        for col, row, token in self.grid.cells():
            left, bottom = cell_origin(col, row, tile_size, start_x, start_y)
            center_x = left + tile_size / 2
            center_y = bottom + tile_size / 2
            kind = token_kind(token) if token is not None else None
            if token is not None:
                self.last_layout[token] = (center_x, center_y, kind)
            if headless:
                continue
            arcade.draw_lrbt_rectangle_filled(left + 1, left + tile_size - 1, bottom + 1, bottom + tile_size - 1,
                                              CELL_BACKGROUND)
            if kind is not None:
                arcade.draw_circle_filled(center_x, center_y, radius, TOKEN_COLORS[kind])
            if selected == (col, row):
                arcade.draw_circle_outline(center_x, center_y, radius + 2, SELECTION_OUTLINE, 3)

        if not headless:
            top = start_y + tile_size * self.grid.height
            arcade.draw_text(f"Score: {score}", start_x, top + 8, arcade.color.WHITE, 16)
