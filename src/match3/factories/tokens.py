from __future__ import annotations

from typing import Protocol

import esper

from match3.components.grid_position import GridPosition
from match3.components.token import TokenKind, TokenType


class TokenFactory(Protocol):
    """Creates tokens for refill and initial board fill."""

    def create(self, kind: TokenKind, col: int, row: int) -> int:
        ...


class EntityTokenFactory:
    """Default factory: every token is an esper entity in the current world."""

    def __init__(self) -> None:
        self.created = 0

    def create(self, kind: TokenKind, col: int, row: int) -> int:
        self.created += 1
        return esper.create_entity(TokenType(kind=kind), GridPosition(col=col, row=row))
