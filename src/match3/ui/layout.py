from match3.constants import (
    BOARD_MAX_HEIGHT_PCT,
    BOARD_MAX_WIDTH_PCT,
    BOTTOM_MARGIN,
    GRID_COLS,
    GRID_ROWS,
    MIN_TILE_SIZE,
)


def compute_board_geometry(window_width: int, window_height: int, cols: int = GRID_COLS, rows: int = GRID_ROWS):
    """Return (tile_size, start_x, start_y) for a board centred horizontally.

    Shared by rendering and input so clicks map onto the drawn tiles.
    """
    max_board_w = window_width * BOARD_MAX_WIDTH_PCT
    max_board_h = (window_height - BOTTOM_MARGIN) * BOARD_MAX_HEIGHT_PCT
    tile_size = int(min(max_board_w / cols, max_board_h / rows))
    if tile_size < MIN_TILE_SIZE:
        tile_size = MIN_TILE_SIZE
    total_width = cols * tile_size
    start_x = (window_width - total_width) / 2
    start_y = BOTTOM_MARGIN
    return tile_size, start_x, start_y


def cell_at_point(x: float, y: float, window_width: int, window_height: int,
                  cols: int = GRID_COLS, rows: int = GRID_ROWS):
    """Map a window point to (col, row), or None when it falls outside the board."""
    tile_size, start_x, start_y = compute_board_geometry(window_width, window_height, cols, rows)
    if x < start_x or y < start_y:
        return None
    col = int((x - start_x) // tile_size)
    row = int((y - start_y) // tile_size)
    if col >= cols or row >= rows:
        return None
    return col, row


def cell_origin(col: int, row: int, tile_size: int, start_x: float, start_y: float):
    """Bottom-left corner of a cell in window coordinates."""
    return start_x + col * tile_size, start_y + row * tile_size
