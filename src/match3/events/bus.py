from blinker import Signal
from typing import Dict

class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # Use weak=False to retain strong reference to bound methods so systems not kept in a variable still receive events.
        sig.connect(fn, weak=False)

    def unsubscribe(self, name: str, fn):
        sig = self._signals.get(name)
        if sig:
            sig.disconnect(fn)

    def emit(self, name: str, **payload):
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


# ============================================================================
# SYSTEM & TIMING
# ============================================================================
EVENT_TICK = "tick"                                # payload: dt=float


# ============================================================================
# INPUT & INTERACTION
# ============================================================================
EVENT_MOUSE_PRESS = "mouse_press"                  # payload: x, y, button
EVENT_TILE_CLICK = "tile_click"                    # payload: col, row
EVENT_TILE_SELECTED = "tile_selected"              # payload: col, row, token=int
EVENT_TILE_DESELECTED = "tile_deselected"          # payload: reason=str


# ============================================================================
# SWAPS
# ============================================================================
EVENT_SWAP_REQUEST = "swap_request"                # payload: token_a=int, token_b=int
EVENT_SWAP_ACCEPTED = "swap_accepted"              # payload: token_a=int, token_b=int
EVENT_SWAP_REJECTED = "swap_rejected"              # payload: token_a=int|None, token_b=int|None, reason=str


# ============================================================================
# TURN FLOW
# ============================================================================
EVENT_TURN_PHASE_CHANGED = "turn_phase_changed"    # payload: previous=TurnPhase, phase=TurnPhase
EVENT_CASCADE_STEP = "cascade_step"                # payload: depth=int
EVENT_CASCADE_COMPLETE = "cascade_complete"        # payload: depth=int
EVENT_BOARD_RESET = "board_reset"                  # payload: reason=str


# ============================================================================
# TOKENS & MATCHES
# ============================================================================
EVENT_TOKEN_MOVED = "token_moved"                  # payload: token=int, col, row, from_col, from_row
EVENT_TOKEN_SPAWNED = "token_spawned"              # payload: token=int, kind=TokenKind, col, row
EVENT_TOKEN_REMOVED = "token_removed"              # payload: token=int, kind=TokenKind|None, col, row
EVENT_MATCH_RESOLVED = "match_resolved"            # payload: selection=MatchSelection, score_delta=int, depth=int
EVENT_NO_MATCHES = "no_matches"                    # payload: depth=int
EVENT_SCORE_CHANGED = "score_changed"              # payload: total=int, delta=int
