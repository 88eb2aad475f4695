from __future__ import annotations

import logging
from typing import Mapping

from match3.components.match import MatchCandidate, MatchSelection, ShapeType
from match3.constants import BASE_SCORE_PER_TOKEN, EXTRA_TOKEN_BONUS, MIN_MATCH_LENGTH
from match3.events.bus import EVENT_BOARD_RESET, EVENT_MATCH_RESOLVED, EVENT_SCORE_CHANGED, EventBus

logger = logging.getLogger(__name__)


class ScoreCalculator:
    """Pure conversion of a selection into points."""

    def __init__(
        self,
        base: int = BASE_SCORE_PER_TOKEN,
        extra_bonus: int = EXTRA_TOKEN_BONUS,
        shape_bonus: Mapping[ShapeType, int] | None = None,
    ):
        self.base = base
        self.extra_bonus = extra_bonus
        self.shape_bonus = dict(shape_bonus) if shape_bonus is not None else {s: s.bonus for s in ShapeType}

    def score_candidate(self, candidate: MatchCandidate) -> int:
        count = candidate.token_count
        extra = max(0, count - MIN_MATCH_LENGTH)
        return count * self.base + extra * self.extra_bonus + self.shape_bonus.get(candidate.shape, 0)

    def score(self, selection: MatchSelection) -> int:
        return sum(self.score_candidate(candidate) for candidate in selection)


class ScoreSystem:
    """Keeps the running session total from match notifications."""

    def __init__(self, event_bus: EventBus):
        self.event_bus = event_bus
        self.total = 0
        self.event_bus.subscribe(EVENT_MATCH_RESOLVED, self.on_match_resolved)
        self.event_bus.subscribe(EVENT_BOARD_RESET, self.on_board_reset)

    def on_match_resolved(self, sender, **kwargs):
        delta = kwargs.get("score_delta", 0)
        if delta:
            self.add(delta)

    def on_board_reset(self, sender, **kwargs):
        self.reset()

    def add(self, amount: int) -> int:
        self.total += amount
        self.event_bus.emit(EVENT_SCORE_CHANGED, total=self.total, delta=amount)
        return self.total

    def reset(self) -> None:
        if self.total:
            logger.debug("Score reset from %d", self.total)
        self.total = 0
        self.event_bus.emit(EVENT_SCORE_CHANGED, total=0, delta=0)
