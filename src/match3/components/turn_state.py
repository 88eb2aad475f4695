from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional


class TurnPhase(Enum):
    IDLE = auto()
    SWAPPING = auto()
    MATCHING = auto()
    FALLING = auto()


class TurnStep(Enum):
    """Work queued behind the current wait."""
    ENTER_MATCHING = auto()
    RESOLVE = auto()
    ENTER_FALLING = auto()


@dataclass(slots=True)
class TurnState:
    """Tracks turn-level progress for the state machine."""

    phase: TurnPhase = TurnPhase.IDLE
    pending_step: Optional[TurnStep] = None
    wait_remaining: float = 0.0
    cascade_depth: int = 0
    swap: Optional[tuple[int, int]] = None
    running: bool = False
    paused: bool = False

    @property
    def waiting(self) -> bool:
        return self.pending_step is not None
