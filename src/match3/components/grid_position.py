from dataclasses import dataclass

@dataclass(slots=True)
class GridPosition:
    """Logical (column, row) of a token. Row 0 is the bottom of the board.

    Must always equal the key of the Grid cell that holds the token.
    """
    col: int
    row: int

    def as_tuple(self) -> tuple[int, int]:
        return self.col, self.row
