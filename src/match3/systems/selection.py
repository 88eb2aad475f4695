from typing import Optional, Tuple

from match3.components.grid import Grid
from match3.constants import MOUSE_BUTTON_RIGHT
from match3.events.bus import (
    EventBus,
    EVENT_MOUSE_PRESS,
    EVENT_SWAP_ACCEPTED,
    EVENT_SWAP_REQUEST,
    EVENT_TILE_CLICK,
    EVENT_TILE_DESELECTED,
    EVENT_TILE_SELECTED,
)
from match3.systems.board_ops import are_adjacent


class SelectionSystem:
    """Turns two clicks on neighbouring tiles into a swap request."""

    def __init__(self, grid: Grid, event_bus: EventBus):
        self.grid = grid
        self.event_bus = event_bus
        self.selected: Optional[Tuple[int, int]] = None
        self.event_bus.subscribe(EVENT_TILE_CLICK, self.on_tile_click)
        self.event_bus.subscribe(EVENT_MOUSE_PRESS, self.on_mouse_press)
        self.event_bus.subscribe(EVENT_SWAP_ACCEPTED, self.on_swap_accepted)

    def on_tile_click(self, sender, **kwargs):
        col = kwargs.get("col")
        row = kwargs.get("row")
        if col is None or row is None:
            return
        token = self.grid.peek(col, row)
        if token is None:
            return
        if self.selected is None:
            self._select(col, row, token)
            return
        if self.selected == (col, row):
            self._deselect("same_tile")
            return
        if are_adjacent(self.selected, (col, row)):
            first = self.grid.peek(*self.selected)
            self.selected = None
            self.event_bus.emit(EVENT_SWAP_REQUEST, token_a=first, token_b=token)
        else:
            # Change selection to new tile
            self._select(col, row, token)

    def on_mouse_press(self, sender, **kwargs):
        # Right-click always clears current selection
        if kwargs.get("button") != MOUSE_BUTTON_RIGHT:
            return
        if self.selected is not None:
            self._deselect("right_click")

    def on_swap_accepted(self, sender, **kwargs):
        self.selected = None

    def _select(self, col: int, row: int, token: int) -> None:
        self.selected = (col, row)
        self.event_bus.emit(EVENT_TILE_SELECTED, col=col, row=row, token=token)

    def _deselect(self, reason: str) -> None:
        self.selected = None
        self.event_bus.emit(EVENT_TILE_DESELECTED, reason=reason)
