from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import List, Sequence

from match3.components.grid import Grid, Position
from match3.components.token import ALL_KINDS, TokenKind
from match3.errors import MissingCollaboratorError
from match3.events.bus import EVENT_TOKEN_MOVED, EVENT_TOKEN_SPAWNED, EventBus
from match3.factories.tokens import TokenFactory
from match3.systems.board_ops import place_token

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class GravityMove:
    token: int
    source: Position
    target: Position


@dataclass(slots=True)
class GravityResult:
    moves: List[GravityMove] = field(default_factory=list)
    spawned: List[tuple[int, Position]] = field(default_factory=list)

    @property
    def moved(self) -> bool:
        return bool(self.moves)


class GravityCompactor:
    """Stable per-column compaction followed by refill of every empty cell."""

    def __init__(
        self,
        factory: TokenFactory,
        event_bus: EventBus | None = None,
        *,
        rng: random.Random | None = None,
        kinds: Sequence[TokenKind] = ALL_KINDS,
    ):
        if factory is None:
            raise MissingCollaboratorError("GravityCompactor", "token factory")
        self.factory = factory
        self.event_bus = event_bus
        self.rng = rng or random.Random()
        self.kinds = tuple(kinds)

    def compact(self, grid: Grid) -> bool:
        """Compact and refill; return True when any surviving token changed row."""
        return self.apply(grid).moved

    def apply(self, grid: Grid) -> GravityResult:
        result = GravityResult()
        for col in range(grid.width):
            result.moves.extend(self.compact_column(grid, col))
        result.spawned = self.refill(grid)
        if result.moves or result.spawned:
            logger.debug("Gravity moved %d tokens, spawned %d", len(result.moves), len(result.spawned))
        return result

    def compact_column(self, grid: Grid, col: int) -> List[GravityMove]:
        survivors: List[tuple[int, int]] = []
        for row in range(grid.height):
            token = grid.peek(col, row)
            if token is not None:
                survivors.append((row, token))
        for row in range(grid.height):
            grid.set(col, row, None)
        moves: List[GravityMove] = []
        for target_row, (source_row, token) in enumerate(survivors):
            place_token(grid, token, col, target_row)
            if source_row != target_row:
                moves.append(GravityMove(token=token, source=(col, source_row), target=(col, target_row)))
                self._emit(EVENT_TOKEN_MOVED, token=token, col=col, row=target_row,
                           from_col=col, from_row=source_row)
        return moves

    def refill(self, grid: Grid) -> List[tuple[int, Position]]:
        spawned: List[tuple[int, Position]] = []
        for col, row, token in list(grid.cells()):
            if token is not None:
                continue
            kind = self.rng.choice(self.kinds)
            new_token = self.factory.create(kind, col, row)
            place_token(grid, new_token, col, row)
            spawned.append((new_token, (col, row)))
            self._emit(EVENT_TOKEN_SPAWNED, token=new_token, kind=kind, col=col, row=row)
        return spawned

    def _emit(self, name: str, **payload) -> None:
        if self.event_bus is not None:
            self.event_bus.emit(name, **payload)
