from match3.components.grid import Grid
from match3.constants import MOUSE_BUTTON_LEFT
from match3.events.bus import EventBus, EVENT_MOUSE_PRESS, EVENT_TILE_CLICK
from match3.ui.layout import cell_at_point


class InputSystem:
    """Maps raw left clicks on the board to tile clicks."""

    def __init__(self, grid: Grid, event_bus: EventBus, window):
        self.grid = grid
        self.event_bus = event_bus
        self.window = window
        self.event_bus.subscribe(EVENT_MOUSE_PRESS, self.on_mouse_press)

    def on_mouse_press(self, sender, **kwargs):
        x = kwargs.get("x")
        y = kwargs.get("y")
        if x is None or y is None:
            return
        # Other buttons fall through; SelectionSystem listens to EVENT_MOUSE_PRESS directly.
        if kwargs.get("button") != MOUSE_BUTTON_LEFT:
            return
        cell = cell_at_point(x, y, self.window.width, self.window.height, self.grid.width, self.grid.height)
        if cell is None:
            return
        col, row = cell
        self.event_bus.emit(EVENT_TILE_CLICK, col=col, row=row)
