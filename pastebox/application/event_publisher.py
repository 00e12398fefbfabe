"""
Event Publisher

Application service for publishing domain events to registered handlers.
"""

import logging
from threading import Lock
from typing import Callable, Dict, List, Type

from pastebox.domain.events import DomainEvent

logger = logging.getLogger(__name__)


class EventPublisher:
    """
    Dispatches domain events synchronously to registered handlers.

    A handler subscribed to a base class also receives its subclasses,
    so subscribing to DomainEvent receives everything. Handler exceptions
    are logged and never reach the publisher's caller.

    Thread-safe for concurrent event publishing.
    """

    def __init__(self):
        self._handlers: Dict[Type[DomainEvent], List[Callable[[DomainEvent], None]]] = {}
        self._lock = Lock()

    def subscribe(
        self,
        event_type: Type[DomainEvent],
        handler: Callable[[DomainEvent], None]
    ) -> None:
        """
        Register a handler for an event type and its subclasses.

        Example:
            publisher = EventPublisher()
            publisher.subscribe(ObjectExpiredEvent, handle_expired)
        """
        with self._lock:
            self._handlers.setdefault(event_type, []).append(handler)
        logger.debug(
            f"Registered handler {getattr(handler, '__name__', handler)} "
            f"for {event_type.__name__}"
        )

    def publish(self, event: DomainEvent) -> None:
        """Publish an event to every handler registered for its type."""
        event_type = type(event)

        with self._lock:
            handlers = [
                handler
                for klass in event_type.__mro__
                for handler in self._handlers.get(klass, [])
            ]

        if not handlers:
            logger.debug(f"No handlers registered for {event_type.__name__}")
            return

        for handler in handlers:
            try:
                handler(event)
            except Exception as e:
                # Side effects must not break ingestion or sweeping.
                logger.error(
                    f"Error in handler {getattr(handler, '__name__', handler)} "
                    f"for {event_type.__name__}: {e}",
                    exc_info=True
                )

    def get_handler_count(self, event_type: Type[DomainEvent]) -> int:
        """Number of handlers registered directly for ``event_type``."""
        with self._lock:
            return len(self._handlers.get(event_type, []))

    def clear_handlers(self) -> None:
        with self._lock:
            self._handlers.clear()
