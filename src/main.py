"""Entry point for the match-3 demo.

Sets up the esper world, event bus, systems, and Arcade window.
"""
import logging
import random

from arcade import Window, run, set_background_color, color
from arcade import key

from match3.events.bus import EVENT_MOUSE_PRESS, EVENT_TICK, EventBus
from match3.factories.tokens import EntityTokenFactory
from match3.rendering.board_renderer import BoardRenderer
from match3.settings import config_from_settings, load_settings
from match3.systems.input import InputSystem
from match3.systems.scoring import ScoreSystem
from match3.systems.selection import SelectionSystem
from match3.systems.token_lifecycle import TokenLifecycleSystem
from match3.systems.turn_state_machine import TurnStateMachine
from match3.world import create_world

logger = logging.getLogger(__name__)


class Match3Window(Window):
    def __init__(self, settings: dict):
        super().__init__(800, 600, "Match 3", resizable=True)
        self.set_update_rate(1/60)
        self.event_bus = EventBus()
        self.grid = create_world()
        config = config_from_settings(settings)

        # Token bookkeeping and score
        self.token_lifecycle_system = TokenLifecycleSystem(self.event_bus)
        self.score_system = ScoreSystem(self.event_bus)

        # Turn flow
        self.turn_state_machine = TurnStateMachine(
            self.grid,
            self.event_bus,
            factory=EntityTokenFactory(),
            config=config,
            rng=random.Random(settings.get("seed")),
        )

        # Input systems
        self.input_system = InputSystem(self.grid, self.event_bus, self)
        self.selection_system = SelectionSystem(self.grid, self.event_bus)

        self.board_renderer = BoardRenderer(self.grid, self)
        set_background_color(color.BLACK)
        self.turn_state_machine.start()

    def on_draw(self):
        self.clear()
        self.board_renderer.render(selected=self.selection_system.selected, score=self.score_system.total)

    def on_update(self, delta_time: float):
        self.event_bus.emit(EVENT_TICK, dt=delta_time)

    def on_mouse_press(self, x: float, y: float, button: int, modifiers: int):
        self.event_bus.emit(EVENT_MOUSE_PRESS, x=x, y=y, button=button)

    def on_key_press(self, symbol: int, modifiers: int):
        machine = self.turn_state_machine
        if symbol == key.R:
            machine.restart()
        elif symbol == key.P:
            if machine.state.paused:
                machine.resume()
            else:
                machine.pause()
        elif symbol == key.H:
            hints = machine.hints()
            logger.info("%d swaps would produce a match", len(hints))
        elif symbol == key.ESCAPE:
            machine.stop()
            self.close()


def main():
    settings = load_settings()
    logging.basicConfig(
        level=getattr(logging, str(settings.get("log_level", "INFO")).upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    logger.info("Starting match-3 demo")
    Match3Window(settings)
    run()

if __name__ == "__main__":
    main()
