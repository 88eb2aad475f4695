from match3.constants import BOTTOM_MARGIN, GRID_COLS, GRID_ROWS, MOUSE_BUTTON_LEFT, MOUSE_BUTTON_RIGHT
from match3.events.bus import EventBus, EVENT_MOUSE_PRESS, EVENT_TILE_CLICK
from match3.systems.input import InputSystem
from match3.ui.layout import cell_at_point, compute_board_geometry
from tests.helpers import DummyWindow


def test_geometry_centres_board_horizontally():
    tile_size, start_x, start_y = compute_board_geometry(800, 600)
    # 600 - 20 margin at 90% -> 522 / 8 rows
    assert tile_size == 65
    assert start_x == (800 - GRID_COLS * tile_size) / 2
    assert start_y == BOTTOM_MARGIN


def test_geometry_never_shrinks_below_minimum():
    tile_size, _, _ = compute_board_geometry(50, 50)
    assert tile_size == 20


def test_cell_at_point_bounds():
    tile_size, start_x, start_y = compute_board_geometry(800, 600)
    assert cell_at_point(start_x + 1, start_y + 1, 800, 600) == (0, 0)
    top_right = (start_x + GRID_COLS * tile_size - 1, start_y + GRID_ROWS * tile_size - 1)
    assert cell_at_point(*top_right, 800, 600) == (GRID_COLS - 1, GRID_ROWS - 1)
    assert cell_at_point(start_x - 1, start_y + 1, 800, 600) is None
    assert cell_at_point(start_x + 1, start_y + GRID_ROWS * tile_size + 1, 800, 600) is None


def test_mouse_press_translates_to_tile_click(fresh_world):
    bus = EventBus()
    window = DummyWindow()
    InputSystem(fresh_world, bus, window)
    received = []
    bus.subscribe(EVENT_TILE_CLICK, lambda s, **k: received.append(k))
    tile_size, start_x, start_y = compute_board_geometry(window.width, window.height)
    x = start_x + tile_size * 2 + tile_size / 2
    y = start_y + tile_size * 3 + tile_size / 2
    bus.emit(EVENT_MOUSE_PRESS, x=x, y=y, button=MOUSE_BUTTON_LEFT)
    bus.emit(EVENT_MOUSE_PRESS, x=x, y=y, button=MOUSE_BUTTON_RIGHT)
    assert received == [dict(col=2, row=3)]
