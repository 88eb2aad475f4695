import esper

from match3.components.grid import Grid
from match3.constants import GRID_COLS, GRID_ROWS

DEFAULT_WORLD = "match3"


def create_world(name: str = DEFAULT_WORLD, *, width: int = GRID_COLS, height: int = GRID_ROWS) -> Grid:
    """Switch esper to a fresh world context and register the board entity.

    Any tokens left in a previous session under the same name are discarded.
    Returns the Grid component so callers can inject it into systems.
    """
    esper.switch_world(name)
    esper.clear_database()
    grid = Grid(width=width, height=height)
    esper.create_entity(grid)
    return grid


def get_grid() -> Grid | None:
    """Return the Grid registered in the current world, if any."""
    for _, grid in esper.get_component(Grid):
        return grid
    return None
