"""Event bus - NotifierProtocol and InMemoryEventBus."""

from collections.abc import Awaitable, Callable
from typing import Protocol

from core.infrastructure.logging import get_logger

from .events import Event, EventType

EventHandler = Callable[[Event], Awaitable[None]]

ALL_EVENTS = "*"


class NotifierProtocol(Protocol):
    """Protocol for notifier implementations."""

    async def broadcast(self, event: Event) -> None:
        """Fan an event out to every current listener.

        Args:
            event: Event to broadcast
        """
        ...

    def subscribe(self, event_type: EventType | str, handler: EventHandler) -> None:
        """Subscribe a handler to one event type, or to all with ``"*"``.

        Args:
            event_type: Event type to subscribe to
            handler: Async handler function
        """
        ...


class InMemoryEventBus(NotifierProtocol):
    """In-memory notifier with best-effort delivery.

    A handler that raises is logged and skipped; it never fails the
    broadcast and never stops delivery to the remaining handlers.
    """

    def __init__(self) -> None:
        """Initialize in-memory event bus."""
        self._handlers: dict[str, list[EventHandler]] = {}
        self._logger = get_logger("orchestration.event_bus")

    def subscribe(self, event_type: EventType | str, handler: EventHandler) -> None:
        key = self._key(event_type)
        self._handlers.setdefault(key, []).append(handler)

    def unsubscribe(self, event_type: EventType | str, handler: EventHandler) -> None:
        handlers = self._handlers.get(self._key(event_type), [])
        if handler in handlers:
            handlers.remove(handler)

    async def broadcast(self, event: Event) -> None:
        handlers = [*self._handlers.get(event.type.value, []), *self._handlers.get(ALL_EVENTS, [])]
        if not handlers:
            return

        self._logger.debug(
            f"Broadcasting {event.type.value} (run: {event.metadata.run_id}) "
            f"to {len(handlers)} handler(s)"
        )

        for handler in handlers:
            try:
                await handler(event)
            except Exception as exc:
                self._logger.error(
                    f"Listener {getattr(handler, '__qualname__', handler)!s} "
                    f"failed on {event.type.value}: {exc}",
                    exc_info=True,
                )

    @staticmethod
    def _key(event_type: EventType | str) -> str:
        return event_type.value if isinstance(event_type, EventType) else event_type
