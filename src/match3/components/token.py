from dataclasses import dataclass
from enum import Enum


class TokenKind(Enum):
    """Closed set of token kinds that can appear on the board."""
    RED = "red"
    BLUE = "blue"
    GREEN = "green"
    YELLOW = "yellow"
    PURPLE = "purple"
    ORANGE = "orange"


ALL_KINDS: tuple[TokenKind, ...] = tuple(TokenKind)


@dataclass(slots=True)
class TokenType:
    """Per-token kind assignment. The owning entity id is the token's identity."""
    kind: TokenKind
