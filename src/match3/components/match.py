from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator

from match3.components.token import TokenKind
from match3.constants import PRIORITY_PER_TOKEN


class ShapeType(Enum):
    """Matchable shapes in descending priority order; value is the shape bonus."""
    LINE5 = ("line5", 1000)
    TSHAPE = ("t_shape", 800)
    LSHAPE = ("l_shape", 700)
    SQUARE_PLUS_ONE = ("square_plus_one", 650)
    SQUARE = ("square", 600)
    LINE4 = ("rocket", 400)
    LINE3 = ("line3", 0)

    def __init__(self, slug: str, bonus: int):
        self.slug = slug
        self.bonus = bonus


def shape_priority(shape: ShapeType, token_count: int) -> int:
    return token_count * PRIORITY_PER_TOKEN + shape.bonus


@dataclass(frozen=True, slots=True)
class MatchCandidate:
    """A provisional shape found for one seed cell.

    ``tokens`` holds each covered token id exactly once; ``cells`` holds the
    matching (col, row) keys in the same order.
    """

    shape: ShapeType
    kind: TokenKind
    tokens: tuple[int, ...]
    cells: tuple[tuple[int, int], ...]
    priority: int
    seed: tuple[int, int]
    axis: str | None = None

    @property
    def token_count(self) -> int:
        return len(self.tokens)

    def overlaps(self, used: set[int]) -> bool:
        return any(token in used for token in self.tokens)


@dataclass(slots=True)
class MatchSelection:
    """Token-disjoint candidates chosen for one resolution pass."""

    candidates: list[MatchCandidate] = field(default_factory=list)

    def __iter__(self) -> Iterator[MatchCandidate]:
        return iter(self.candidates)

    def __len__(self) -> int:
        return len(self.candidates)

    def __bool__(self) -> bool:
        return bool(self.candidates)

    def tokens(self) -> list[int]:
        return [token for candidate in self.candidates for token in candidate.tokens]

    def cells(self) -> list[tuple[int, int]]:
        return [cell for candidate in self.candidates for cell in candidate.cells]

    def candidate_for(self, token: int) -> MatchCandidate | None:
        for candidate in self.candidates:
            if token in candidate.tokens:
                return candidate
        return None
