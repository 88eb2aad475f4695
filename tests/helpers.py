from __future__ import annotations

from typing import Dict, Sequence

from match3.components.grid import Grid
from match3.components.token import TokenKind
from match3.events.bus import EventBus, EVENT_TICK
from match3.factories.tokens import EntityTokenFactory
from match3.systems.board_ops import place_token
from match3.world import create_world

TEST_WORLD = "test"

KIND_CODES: Dict[str, TokenKind] = {
    "R": TokenKind.RED,
    "B": TokenKind.BLUE,
    "G": TokenKind.GREEN,
    "Y": TokenKind.YELLOW,
    "P": TokenKind.PURPLE,
    "O": TokenKind.ORANGE,
}


def build_grid(*rows: str) -> Grid:
    """Create a fresh world whose grid is laid out from text rows, top row first.

    Each character is a kind code from KIND_CODES; ``.`` leaves the cell empty.
    """
    height = len(rows)
    width = len(rows[0])
    grid = create_world(TEST_WORLD, width=width, height=height)
    factory = EntityTokenFactory()
    for index, line in enumerate(rows):
        assert len(line) == width, f"row {index} has {len(line)} cells, expected {width}"
        row = height - 1 - index
        for col, code in enumerate(line):
            if code == ".":
                continue
            token = factory.create(KIND_CODES[code], col, row)
            place_token(grid, token, col, row)
    return grid


def tokens_by_cell(grid: Grid) -> Dict[tuple[int, int], int]:
    return {(col, row): token for col, row, token in grid.occupied()}


def drive_ticks(bus: EventBus, count: int = 60, dt: float = 0.02):
    for _ in range(count):
        bus.emit(EVENT_TICK, dt=dt)


class ScriptedRng:
    """Stands in for random.Random.choice, returning kinds from a fixed script."""

    def __init__(self, script: Sequence[TokenKind]):
        self.script = list(script)
        self.index = 0

    def choice(self, options):
        kind = self.script[self.index % len(self.script)]
        self.index += 1
        if kind in options:
            return kind
        return options[0]


class DummyWindow:
    def __init__(self, width=800, height=600):
        self.width = width
        self.height = height
