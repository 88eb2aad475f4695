from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterator

logger = logging.getLogger(__name__)

Position = tuple[int, int]


@dataclass(slots=True)
class Grid:
    """Fixed width x height array of optional token entity ids.

    Cells are addressed as (col, row). Out-of-range access never raises: ``get``
    returns None and ``set`` returns False, and both log the call as a caller
    error. Only the stored array is touched; token positions are kept in sync by
    the board helpers in ``match3.systems.board_ops``.
    """

    width: int
    height: int
    _cells: list[list[int | None]] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {self.width}x{self.height}")
        self._cells = [[None] * self.height for _ in range(self.width)]

    def is_valid(self, col: int, row: int) -> bool:
        return 0 <= col < self.width and 0 <= row < self.height

    def get(self, col: int, row: int) -> int | None:
        if not self.is_valid(col, row):
            logger.warning("Grid.get out of range: (%s, %s) on %sx%s grid", col, row, self.width, self.height)
            return None
        return self._cells[col][row]

    def peek(self, col: int, row: int) -> int | None:
        """Like ``get`` but treats out-of-range as plain empty (neighbour probing)."""
        if not self.is_valid(col, row):
            return None
        return self._cells[col][row]

    def set(self, col: int, row: int, token: int | None) -> bool:
        if not self.is_valid(col, row):
            logger.warning("Grid.set out of range: (%s, %s) on %sx%s grid", col, row, self.width, self.height)
            return False
        self._cells[col][row] = token
        return True

    def clear(self) -> None:
        for column in self._cells:
            for row in range(self.height):
                column[row] = None

    def cells(self) -> Iterator[tuple[int, int, int | None]]:
        """Yield (col, row, token) in column-major scan order."""
        for col in range(self.width):
            column = self._cells[col]
            for row in range(self.height):
                yield col, row, column[row]

    def occupied(self) -> Iterator[tuple[int, int, int]]:
        for col, row, token in self.cells():
            if token is not None:
                yield col, row, token

    def find(self, token: int) -> Position | None:
        for col, row, occupant in self.occupied():
            if occupant == token:
                return col, row
        return None

    def snapshot(self) -> tuple[tuple[int | None, ...], ...]:
        return tuple(tuple(column) for column in self._cells)

    def count_empty(self) -> int:
        return sum(1 for _, _, token in self.cells() if token is None)

    def occupied_count(self) -> int:
        return self.width * self.height - self.count_empty()
