from dataclasses import dataclass, field

from match3.components.token import ALL_KINDS, TokenKind
from match3.constants import (
    BASE_SCORE_PER_TOKEN,
    CLEAR_DELAY,
    EXTRA_TOKEN_BONUS,
    FALL_DELAY,
    MATCH_CHECK_DELAY,
    SWAP_DELAY,
)


@dataclass(slots=True)
class TurnConfig:
    """Pacing, scoring and policy knobs for a play session."""

    swap_delay: float = SWAP_DELAY
    match_check_delay: float = MATCH_CHECK_DELAY
    clear_delay: float = CLEAR_DELAY
    fall_delay: float = FALL_DELAY
    base_score: int = BASE_SCORE_PER_TOKEN
    extra_token_bonus: int = EXTRA_TOKEN_BONUS
    # Reject swaps up front when they would not produce a match.
    require_match: bool = False
    # Raise InvariantViolation instead of skipping inconsistent tokens.
    strict_invariants: bool = False
    spawn_kinds: tuple[TokenKind, ...] = field(default=ALL_KINDS)

    def __post_init__(self) -> None:
        for name in ("swap_delay", "match_check_delay", "clear_delay", "fall_delay"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative")
        self.spawn_kinds = tuple(self.spawn_kinds)
        if not self.spawn_kinds:
            raise ValueError("spawn_kinds must contain at least one TokenKind")

    @classmethod
    def instant(cls, **overrides) -> "TurnConfig":
        """Configuration with every wait set to zero."""
        values = dict(swap_delay=0.0, match_check_delay=0.0, clear_delay=0.0, fall_delay=0.0)
        values.update(overrides)
        return cls(**values)
