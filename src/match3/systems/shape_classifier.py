"""Shape classification for a single resolution pass.

Every occupied cell is used as a seed, scanned column-major (outer loop over
columns, inner over rows). For each seed the four one-directional runs of the
seed's kind are measured (each run includes the seed) and shapes are tested in
descending priority order:

    Line5 > T/Cross > L > Square+1 > Square > Line4 (rocket) > Line3

The first matching shape becomes the seed's only candidate. Overlapping
candidates from neighbouring seeds are expected; ``conflict_resolver`` picks the
disjoint subset.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Sequence

from match3.components.grid import Grid, Position
from match3.components.match import MatchCandidate, ShapeType, shape_priority
from match3.components.token import TokenKind
from match3.constants import MIN_MATCH_LENGTH
from match3.systems.board_ops import KindMap, token_kind_map

logger = logging.getLogger(__name__)

UP = (0, 1)
DOWN = (0, -1)
LEFT = (-1, 0)
RIGHT = (1, 0)

# Perimeter of a 2x2 block whose lower-left corner is the seed, as offsets from
# the seed. Walked clockwise starting at the cell left of the seed; the first
# same-kind hit is the one that joins a Square+1.
SQUARE_PERIMETER: tuple[Position, ...] = (
    (-1, 0), (-1, 1),
    (0, 2), (1, 2),
    (2, 1), (2, 0),
    (1, -1), (0, -1),
)


@dataclass(slots=True)
class SeedRuns:
    """One-directional runs from a seed; every run starts with the seed itself."""
    up: List[Position]
    down: List[Position]
    left: List[Position]
    right: List[Position]

    @property
    def horizontal(self) -> List[Position]:
        return list(reversed(self.left)) + self.right[1:]

    @property
    def vertical(self) -> List[Position]:
        return list(reversed(self.down)) + self.up[1:]


def classify(grid: Grid) -> List[MatchCandidate]:
    """Return every seed-level candidate on the grid, in scan order."""
    if grid is None:
        raise ValueError("classify() requires a grid")
    kinds = token_kind_map(grid)
    if not kinds:
        return []
    candidates: List[MatchCandidate] = []
    for col in range(grid.width):
        for row in range(grid.height):
            if (col, row) not in kinds:
                continue
            candidate = classify_seed(grid, kinds, col, row)
            if candidate is not None:
                candidates.append(candidate)
    logger.debug("Classified %d candidates on %dx%d grid", len(candidates), grid.width, grid.height)
    return candidates


def classify_seed(grid: Grid, kinds: KindMap, col: int, row: int) -> MatchCandidate | None:
    kind = kinds.get((col, row))
    if kind is None:
        return None
    seed = (col, row)
    runs = SeedRuns(
        up=_run(kinds, seed, UP),
        down=_run(kinds, seed, DOWN),
        left=_run(kinds, seed, LEFT),
        right=_run(kinds, seed, RIGHT),
    )
    horizontal = runs.horizontal
    vertical = runs.vertical

    if len(horizontal) >= 5:
        return _candidate(grid, ShapeType.LINE5, kind, seed, horizontal, axis="horizontal")
    if len(vertical) >= 5:
        return _candidate(grid, ShapeType.LINE5, kind, seed, vertical, axis="vertical")

    shape_cells = _t_shape(runs, horizontal, vertical)
    if shape_cells is not None:
        return _candidate(grid, ShapeType.TSHAPE, kind, seed, shape_cells)

    shape_cells = _l_shape(runs)
    if shape_cells is not None:
        return _candidate(grid, ShapeType.LSHAPE, kind, seed, shape_cells)

    block = _square(kinds, seed, kind)
    if block is not None:
        extra = _first_perimeter_neighbour(kinds, seed, kind)
        if extra is not None:
            return _candidate(grid, ShapeType.SQUARE_PLUS_ONE, kind, seed, block + [extra])
        return _candidate(grid, ShapeType.SQUARE, kind, seed, block)

    if len(horizontal) == 4:
        return _candidate(grid, ShapeType.LINE4, kind, seed, horizontal, axis="horizontal")
    if len(vertical) == 4:
        return _candidate(grid, ShapeType.LINE4, kind, seed, vertical, axis="vertical")
    if len(horizontal) >= MIN_MATCH_LENGTH:
        return _candidate(grid, ShapeType.LINE3, kind, seed, horizontal, axis="horizontal")
    if len(vertical) >= MIN_MATCH_LENGTH:
        return _candidate(grid, ShapeType.LINE3, kind, seed, vertical, axis="vertical")
    return None


def _run(kinds: KindMap, seed: Position, direction: Position) -> List[Position]:
    kind = kinds[seed]
    dc, dr = direction
    run = [seed]
    col, row = seed[0] + dc, seed[1] + dr
    while kinds.get((col, row)) == kind:
        run.append((col, row))
        col += dc
        row += dr
    return run


def _is_corner(runs: SeedRuns) -> bool:
    # Seed ends both lines: nothing on one horizontal side and nothing on one vertical side.
    return (len(runs.left) == 1 or len(runs.right) == 1) and (len(runs.up) == 1 or len(runs.down) == 1)


def _t_shape(runs: SeedRuns, horizontal: List[Position], vertical: List[Position]) -> List[Position] | None:
    if len(horizontal) >= 3 and len(vertical) >= 3:
        if _is_corner(runs):
            return None
        return _union(horizontal, vertical)
    if len(horizontal) >= 3:
        stem = _single_branch(runs.up, runs.down)
        if stem is not None:
            cells = _union(horizontal, stem)
            if len(cells) >= 5:
                return cells
    if len(vertical) >= 3:
        stem = _single_branch(runs.left, runs.right)
        if stem is not None:
            cells = _union(vertical, stem)
            if len(cells) >= 5:
                return cells
    return None


def _single_branch(first: List[Position], second: List[Position]) -> List[Position] | None:
    """Return the run that reaches past the seed when exactly one of the pair does."""
    first_ok = len(first) >= 2
    second_ok = len(second) >= 2
    if first_ok and not second_ok:
        return first
    if second_ok and not first_ok:
        return second
    return None


def _l_shape(runs: SeedRuns) -> List[Position] | None:
    for arm_a, arm_b in (
        (runs.right, runs.up),
        (runs.right, runs.down),
        (runs.left, runs.up),
        (runs.left, runs.down),
    ):
        if len(arm_a) >= 3 and len(arm_b) >= 3:
            cells = _union(arm_a, arm_b)
            if len(cells) >= 5:
                return cells
    return None


def _square(kinds: KindMap, seed: Position, kind: TokenKind) -> List[Position] | None:
    col, row = seed
    block = [seed, (col + 1, row), (col, row + 1), (col + 1, row + 1)]
    if all(kinds.get(cell) == kind for cell in block[1:]):
        return block
    return None


def _first_perimeter_neighbour(kinds: KindMap, seed: Position, kind: TokenKind) -> Position | None:
    col, row = seed
    hits = [
        (col + dc, row + dr)
        for dc, dr in SQUARE_PERIMETER
        if kinds.get((col + dc, row + dr)) == kind
    ]
    if not hits:
        return None
    if len(hits) > 1:
        # TODO: confirm with product whether extra perimeter neighbours should join the shape.
        logger.debug("Square at %s has %d perimeter neighbours; keeping first %s", seed, len(hits), hits[0])
    return hits[0]


def _union(*groups: Sequence[Position]) -> List[Position]:
    seen: set[Position] = set()
    cells: List[Position] = []
    for group in groups:
        for cell in group:
            if cell not in seen:
                seen.add(cell)
                cells.append(cell)
    return cells


def _candidate(
    grid: Grid,
    shape: ShapeType,
    kind: TokenKind,
    seed: Position,
    cells: Sequence[Position],
    *,
    axis: str | None = None,
) -> MatchCandidate:
    ordered = sorted(set(cells))
    tokens = tuple(grid.peek(col, row) for col, row in ordered)
    return MatchCandidate(
        shape=shape,
        kind=kind,
        tokens=tokens,
        cells=tuple(ordered),
        priority=shape_priority(shape, len(tokens)),
        seed=seed,
        axis=axis,
    )
