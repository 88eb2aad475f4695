import logging

import esper

from match3.events.bus import EventBus, EVENT_TOKEN_REMOVED

logger = logging.getLogger(__name__)


class TokenLifecycleSystem:
    """Destroys token entities once they have been cleared from the grid."""

    def __init__(self, event_bus: EventBus):
        self.event_bus = event_bus
        self.destroyed = 0
        self.event_bus.subscribe(EVENT_TOKEN_REMOVED, self.on_token_removed)

    def on_token_removed(self, sender, **kwargs):
        token = kwargs.get("token")
        if token is None:
            return
        if not esper.entity_exists(token):
            logger.debug("Token %s already destroyed", token)
            return
        esper.delete_entity(token, immediate=True)
        self.destroyed += 1
