from __future__ import annotations

import logging
import random
from typing import Dict, List, Sequence, Tuple

import esper

from match3.components.grid import Grid, Position
from match3.components.grid_position import GridPosition
from match3.components.token import ALL_KINDS, TokenKind, TokenType
from match3.errors import InvariantViolation
from match3.factories.tokens import TokenFactory

logger = logging.getLogger(__name__)

KindMap = Dict[Position, TokenKind]


def token_kind(token: int) -> TokenKind | None:
    if not esper.entity_exists(token):
        return None
    tile = esper.try_component(token, TokenType)
    return tile.kind if tile is not None else None


def token_position(token: int) -> Position | None:
    if not esper.entity_exists(token):
        return None
    position = esper.try_component(token, GridPosition)
    return position.as_tuple() if position is not None else None


def token_kind_map(grid: Grid) -> KindMap:
    """Return mapping of occupied cells to their token kinds."""
    mapping: KindMap = {}
    for col, row, token in grid.occupied():
        kind = token_kind(token)
        if kind is None:
            continue
        mapping[(col, row)] = kind
    return mapping


def are_adjacent(a: Position, b: Position) -> bool:
    ac, ar = a
    bc, br = b
    return (abs(ac - bc) == 1 and ar == br) or (abs(ar - br) == 1 and ac == bc)


def place_token(grid: Grid, token: int, col: int, row: int) -> bool:
    """Store token in the cell and update its GridPosition in one step."""
    if not grid.set(col, row, token):
        return False
    position = esper.try_component(token, GridPosition)
    if position is None:
        esper.add_component(token, GridPosition(col=col, row=row))
    else:
        position.col = col
        position.row = row
    return True


def exchange_tokens(grid: Grid, token_a: int, token_b: int) -> bool:
    """Swap two placed tokens: both cells and both stored positions change together."""
    pos_a = token_position(token_a)
    pos_b = token_position(token_b)
    if pos_a is None or pos_b is None:
        return False
    if grid.peek(*pos_a) != token_a or grid.peek(*pos_b) != token_b:
        return False
    place_token(grid, token_b, *pos_a)
    place_token(grid, token_a, *pos_b)
    return True


def check_token_at(grid: Grid, token: int, col: int, row: int, *, strict: bool) -> bool:
    """Verify the cell/position invariant for a token about to be touched.

    Returns False (after logging) when the token should be skipped. Raises
    InvariantViolation instead when ``strict`` is set.
    """
    problem = None
    if not esper.entity_exists(token):
        problem = f"token {token} at ({col}, {row}) is not a live entity"
    elif grid.peek(col, row) != token:
        problem = f"token {token} is not stored at ({col}, {row})"
    elif token_position(token) != (col, row):
        problem = f"token {token} records position {token_position(token)} but sits at ({col}, {row})"
    if problem is None:
        return True
    if strict:
        raise InvariantViolation(problem)
    logger.warning("Skipping inconsistent token: %s", problem)
    return False


def release_all_tokens(grid: Grid) -> List[Tuple[int, int, int]]:
    """Empty the grid, returning the (col, row, token) entries that were removed."""
    removed = list(grid.occupied())
    grid.clear()
    return removed


def fill_board(
    grid: Grid,
    factory: TokenFactory,
    rng: random.Random,
    kinds: Sequence[TokenKind] = ALL_KINDS,
    *,
    avoid_runs: bool = True,
) -> List[Tuple[int, Position]]:
    """Fill every empty cell with a fresh token.

    With ``avoid_runs`` a kind is excluded whenever it would complete a run of
    three with the two cells to its left or the two cells below, or finish a
    2x2 block. Cells are filled column-major, so those neighbours are already
    placed when a cell is chosen.
    """
    choices = list(kinds)
    kinds_at = token_kind_map(grid)
    spawned: List[Tuple[int, Position]] = []
    for col, row, token in list(grid.cells()):
        if token is not None:
            continue
        available = choices
        if avoid_runs:
            available = [k for k in choices if not _completes_run(kinds_at, col, row, k)]
            if not available:
                available = choices
        kind = rng.choice(available)
        new_token = factory.create(kind, col, row)
        place_token(grid, new_token, col, row)
        kinds_at[(col, row)] = kind
        spawned.append((new_token, (col, row)))
    return spawned


def _completes_run(kinds_at: KindMap, col: int, row: int, kind: TokenKind) -> bool:
    # Prevent horizontal triple: two cells to the left already share this kind.
    if kinds_at.get((col - 1, row)) == kind and kinds_at.get((col - 2, row)) == kind:
        return True
    # Prevent vertical triple: two cells below already share this kind.
    if kinds_at.get((col, row - 1)) == kind and kinds_at.get((col, row - 2)) == kind:
        return True
    # Prevent closing a 2x2 block from its upper-right corner.
    if (
        kinds_at.get((col - 1, row)) == kind
        and kinds_at.get((col, row - 1)) == kind
        and kinds_at.get((col - 1, row - 1)) == kind
    ):
        return True
    return False


def has_gaps(grid: Grid) -> bool:
    """Return True if any token sits directly above an empty cell."""
    for col in range(grid.width):
        for row in range(1, grid.height):
            if grid.peek(col, row) is not None and grid.peek(col, row - 1) is None:
                return True
    return False


def validate_swap(grid: Grid, token_a: int, token_b: int) -> bool:
    """Report whether swapping two tokens would produce any match.

    The swap is simulated on the live grid and undone before returning, so the
    grid and both token positions end identical to their state on entry.
    """
    # Local import avoids a cycle: the classifier depends on token_kind_map.
    from match3.systems.shape_classifier import classify

    if token_a == token_b:
        return False
    if not exchange_tokens(grid, token_a, token_b):
        return False
    try:
        return bool(classify(grid))
    finally:
        exchange_tokens(grid, token_a, token_b)


def find_valid_swaps(grid: Grid) -> List[Tuple[int, int]]:
    """Enumerate adjacent token pairs whose swap would produce a match."""
    swaps: List[Tuple[int, int]] = []
    for col, row, token in list(grid.occupied()):
        for neighbour in ((col + 1, row), (col, row + 1)):
            other = grid.peek(*neighbour)
            if other is None:
                continue
            if validate_swap(grid, token, other):
                swaps.append((token, other))
    return swaps
