from __future__ import annotations

import logging
import random
from typing import List, Tuple

from match3.components.grid import Grid
from match3.components.match import MatchSelection
from match3.components.turn_config import TurnConfig
from match3.components.turn_state import TurnPhase, TurnState, TurnStep
from match3.errors import MissingCollaboratorError
from match3.events.bus import (
    EventBus,
    EVENT_BOARD_RESET,
    EVENT_CASCADE_COMPLETE,
    EVENT_CASCADE_STEP,
    EVENT_MATCH_RESOLVED,
    EVENT_NO_MATCHES,
    EVENT_SWAP_ACCEPTED,
    EVENT_SWAP_REJECTED,
    EVENT_SWAP_REQUEST,
    EVENT_TICK,
    EVENT_TOKEN_MOVED,
    EVENT_TOKEN_REMOVED,
    EVENT_TURN_PHASE_CHANGED,
)
from match3.factories.tokens import TokenFactory
from match3.systems import board_ops
from match3.systems.conflict_resolver import find_matches
from match3.systems.gravity import GravityCompactor
from match3.systems.scoring import ScoreCalculator

logger = logging.getLogger(__name__)


class TurnStateMachine:
    """Sequences swap, match resolution, clearing, gravity and cascades.

    Flow:
      - Idle: the only phase that accepts swap requests.
      - Swapping: tokens are exchanged immediately, then the swap delay elapses.
      - Matching: after the match-check delay the grid is classified and resolved.
        A non-empty selection is scored and cleared, then the clear delay elapses
        before Falling; an empty one returns to Idle.
      - Falling: gravity compacts and refills once, then the fall delay elapses
        and Matching runs again (cascade).
    Waits are counted down by EVENT_TICK; each expired wait performs exactly one
    transition, and all grid mutations of a transition complete before it returns.
    """

    def __init__(
        self,
        grid: Grid,
        event_bus: EventBus,
        *,
        factory: TokenFactory,
        config: TurnConfig | None = None,
        rng: random.Random | None = None,
        calculator: ScoreCalculator | None = None,
    ):
        if grid is None:
            raise MissingCollaboratorError("TurnStateMachine", "grid")
        if factory is None:
            raise MissingCollaboratorError("TurnStateMachine", "token factory")
        if event_bus is None:
            raise MissingCollaboratorError("TurnStateMachine", "event bus")
        self.grid = grid
        self.event_bus = event_bus
        self.factory = factory
        self.config = config or TurnConfig()
        self.rng = rng or random.Random()
        self.calculator = calculator or ScoreCalculator(
            base=self.config.base_score,
            extra_bonus=self.config.extra_token_bonus,
        )
        self.compactor = GravityCompactor(factory, event_bus, rng=self.rng, kinds=self.config.spawn_kinds)
        self.state = TurnState()
        self.last_selection = MatchSelection()
        self.event_bus.subscribe(EVENT_TICK, self.on_tick)
        self.event_bus.subscribe(EVENT_SWAP_REQUEST, self.on_swap_request)

    @property
    def phase(self) -> TurnPhase:
        return self.state.phase

    @property
    def is_idle(self) -> bool:
        return self.state.phase == TurnPhase.IDLE and not self.state.waiting

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------
    def start(self, reason: str = "start") -> None:
        """Fill empty cells and enter Idle. Cells already holding tokens are kept."""
        spawned = board_ops.fill_board(self.grid, self.factory, self.rng, self.config.spawn_kinds)
        self.state = TurnState(running=True)
        self.last_selection = MatchSelection()
        logger.info("Session started (%s): %d tokens spawned on %dx%d grid",
                    reason, len(spawned), self.grid.width, self.grid.height)
        self.event_bus.emit(EVENT_BOARD_RESET, reason=reason)

    def stop(self) -> None:
        """Stop the loop and release every token, leaving the grid empty."""
        previous = self.state.phase
        self.state = TurnState(running=False)
        for col, row, token in board_ops.release_all_tokens(self.grid):
            self.event_bus.emit(
                EVENT_TOKEN_REMOVED,
                token=token,
                kind=board_ops.token_kind(token),
                col=col,
                row=row,
            )
        if previous != TurnPhase.IDLE:
            self.event_bus.emit(EVENT_TURN_PHASE_CHANGED, previous=previous, phase=TurnPhase.IDLE)
        logger.info("Session stopped")

    def restart(self) -> None:
        self.stop()
        self.start(reason="restart")

    def pause(self) -> None:
        self.state.paused = True
        logger.info("Session paused in %s", self.state.phase.name)

    def resume(self) -> None:
        self.state.paused = False
        logger.info("Session resumed in %s", self.state.phase.name)

    # ------------------------------------------------------------------
    # Driving
    # ------------------------------------------------------------------
    def on_tick(self, sender, **kwargs):
        dt = kwargs.get("dt", 1 / 60)
        self.update(dt)

    def update(self, dt: float) -> None:
        state = self.state
        if not state.running or state.paused or not state.waiting:
            return
        state.wait_remaining -= dt
        if state.wait_remaining > 0:
            return
        self._run_pending_step()

    def settle(self, max_steps: int = 1000) -> bool:
        """Run queued transitions without waiting until the machine is idle.

        Returns False if ``max_steps`` transitions ran without reaching Idle.
        """
        steps = 0
        while self.state.running and self.state.waiting:
            if steps >= max_steps:
                logger.warning("settle() gave up after %d transitions in %s", steps, self.state.phase.name)
                return False
            self._run_pending_step()
            steps += 1
        return True

    def _run_pending_step(self) -> None:
        step = self.state.pending_step
        self.state.pending_step = None
        self.state.wait_remaining = 0.0
        if step == TurnStep.ENTER_MATCHING:
            self._enter_matching()
        elif step == TurnStep.RESOLVE:
            self._resolve()
        elif step == TurnStep.ENTER_FALLING:
            self._enter_falling()

    def _wait(self, seconds: float, step: TurnStep) -> None:
        self.state.pending_step = step
        self.state.wait_remaining = seconds

    def _set_phase(self, phase: TurnPhase) -> None:
        previous = self.state.phase
        if previous == phase:
            return
        self.state.phase = phase
        self.event_bus.emit(EVENT_TURN_PHASE_CHANGED, previous=previous, phase=phase)

    # ------------------------------------------------------------------
    # Swaps
    # ------------------------------------------------------------------
    def on_swap_request(self, sender, **kwargs):
        self.request_swap(kwargs.get("token_a"), kwargs.get("token_b"))

    def request_swap(self, token_a: int | None, token_b: int | None) -> bool:
        reason = self._swap_rejection_reason(token_a, token_b)
        if reason is not None:
            logger.info("Swap %s <-> %s rejected: %s", token_a, token_b, reason)
            self.event_bus.emit(EVENT_SWAP_REJECTED, token_a=token_a, token_b=token_b, reason=reason)
            return False
        pos_a = board_ops.token_position(token_a)
        pos_b = board_ops.token_position(token_b)
        board_ops.exchange_tokens(self.grid, token_a, token_b)
        self.state.swap = (token_a, token_b)
        self.state.cascade_depth = 0
        self.event_bus.emit(EVENT_SWAP_ACCEPTED, token_a=token_a, token_b=token_b)
        self.event_bus.emit(EVENT_TOKEN_MOVED, token=token_a, col=pos_b[0], row=pos_b[1],
                            from_col=pos_a[0], from_row=pos_a[1])
        self.event_bus.emit(EVENT_TOKEN_MOVED, token=token_b, col=pos_a[0], row=pos_a[1],
                            from_col=pos_b[0], from_row=pos_b[1])
        self._set_phase(TurnPhase.SWAPPING)
        self._wait(self.config.swap_delay, TurnStep.ENTER_MATCHING)
        return True

    def _swap_rejection_reason(self, token_a: int | None, token_b: int | None) -> str | None:
        if not self.state.running:
            return "not_running"
        if self.state.paused:
            return "paused"
        if not self.is_idle:
            return "busy"
        if token_a is None or token_b is None:
            return "missing_token"
        if token_a == token_b:
            return "same_token"
        pos_a = self._placed_position(token_a)
        pos_b = self._placed_position(token_b)
        if pos_a is None or pos_b is None:
            return "missing_token"
        if not board_ops.are_adjacent(pos_a, pos_b):
            return "not_adjacent"
        if self.config.require_match and not self.validate_swap(token_a, token_b):
            return "no_match"
        return None

    def _placed_position(self, token: int) -> Tuple[int, int] | None:
        position = board_ops.token_position(token)
        if position is None or self.grid.peek(*position) != token:
            return None
        return position

    def validate_swap(self, token_a: int, token_b: int) -> bool:
        return board_ops.validate_swap(self.grid, token_a, token_b)

    def hints(self) -> List[Tuple[int, int]]:
        return board_ops.find_valid_swaps(self.grid)

    # ------------------------------------------------------------------
    # Matching / Falling
    # ------------------------------------------------------------------
    def _enter_matching(self) -> None:
        self._set_phase(TurnPhase.MATCHING)
        self._wait(self.config.match_check_delay, TurnStep.RESOLVE)

    def _resolve(self) -> None:
        selection = find_matches(self.grid)
        self.last_selection = selection
        if not selection:
            depth = self.state.cascade_depth
            self.event_bus.emit(EVENT_NO_MATCHES, depth=depth)
            if depth:
                self.event_bus.emit(EVENT_CASCADE_COMPLETE, depth=depth)
            self.state.swap = None
            self._set_phase(TurnPhase.IDLE)
            return
        self.state.cascade_depth += 1
        depth = self.state.cascade_depth
        self.event_bus.emit(EVENT_CASCADE_STEP, depth=depth)
        score_delta = self.calculator.score(selection)
        cleared = self._clear_selection(selection)
        logger.debug("Cascade depth %d: cleared %d tokens in %d groups for %d points",
                     depth, cleared, len(selection), score_delta)
        self.event_bus.emit(EVENT_MATCH_RESOLVED, selection=selection, score_delta=score_delta, depth=depth)
        self._wait(self.config.clear_delay, TurnStep.ENTER_FALLING)

    def _clear_selection(self, selection: MatchSelection) -> int:
        strict = self.config.strict_invariants
        cleared = 0
        for candidate in selection:
            for token, (col, row) in zip(candidate.tokens, candidate.cells):
                if not board_ops.check_token_at(self.grid, token, col, row, strict=strict):
                    continue
                self.grid.set(col, row, None)
                cleared += 1
                self.event_bus.emit(EVENT_TOKEN_REMOVED, token=token, kind=candidate.kind, col=col, row=row)
        return cleared

    def _enter_falling(self) -> None:
        self._set_phase(TurnPhase.FALLING)
        moved = self.compactor.compact(self.grid)
        if not moved:
            logger.debug("Falling pass moved no tokens; refill only")
        self._wait(self.config.fall_delay, TurnStep.ENTER_MATCHING)

    def __repr__(self) -> str:
        state = self.state
        return (
            f"TurnStateMachine(phase={state.phase.name}, running={state.running}, "
            f"paused={state.paused}, depth={state.cascade_depth}, "
            f"grid={self.grid.width}x{self.grid.height})"
        )
