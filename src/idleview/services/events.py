"""Named in-process event channels."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

_logger = logging.getLogger(__name__)

EventHandler = Callable[[object], Awaitable[None]]


@dataclass
class EventChannel:
    """Fan-out channel delivering a payload to every subscriber."""

    name: str
    _handlers: list[EventHandler] = field(default_factory=list, repr=False)

    @property
    def subscriber_count(self) -> int:
        """Return the number of active subscribers."""
        return len(self._handlers)

    def subscribe(self, handler: EventHandler) -> Callable[[], None]:
        """Register a handler and return a callable that removes it."""
        self._handlers.append(handler)

        def unsubscribe() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)

        return unsubscribe

    async def publish(self, payload: object = None) -> None:
        """Deliver the payload to subscribers in registration order."""
        for handler in list(self._handlers):
            try:
                await handler(payload)
            except Exception:
                _logger.exception("Handler failed on channel %s", self.name)


@dataclass
class EventBus:
    """The inbound triggers the photo runtime listens to."""

    settings_updated: EventChannel = field(
        default_factory=lambda: EventChannel("settings-updated")
    )
    refresh_photo: EventChannel = field(
        default_factory=lambda: EventChannel("refresh-photo")
    )
