"""
Message Bus

Routes domain events to the handlers subscribed to their type. Booking
events reach analytics this way; the bus is in-process and synchronous.
"""

from typing import Callable, Dict, Iterable, List, Type
import logging

from shared.domain.base import DomainEvent

logger = logging.getLogger(__name__)

EventHandler = Callable[[DomainEvent], None]


class MessageBus:
    """
    Event type -> handlers registry

    A handler registered for a base class also receives events of its
    subclasses, so ``DomainEvent`` handlers see everything.
    """

    def __init__(self):
        self._handlers: Dict[Type[DomainEvent], List[EventHandler]] = {}

    def register_event_handler(self, event_type: Type[DomainEvent], handler: EventHandler):
        """Subscribe ``handler``; subscribing it twice to one type is a no-op."""
        handlers = self._handlers.setdefault(event_type, [])
        if handler not in handlers:
            handlers.append(handler)
            logger.debug(f"{getattr(handler, '__name__', handler)} subscribed to {event_type.__name__}")

    def unregister_event_handler(self, event_type: Type[DomainEvent], handler: EventHandler):
        handlers = self._handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def handlers_for(self, event: DomainEvent) -> List[EventHandler]:
        found: List[EventHandler] = []
        for event_type in type(event).__mro__:
            for handler in self._handlers.get(event_type, []):
                if handler not in found:
                    found.append(handler)
        return found

    def publish_events(self, events: Iterable[DomainEvent]):
        """
        Deliver each event to its handlers in registration order

        A failing handler is logged and skipped; the remaining handlers and
        events are still delivered.
        """
        for event in events:
            handlers = self.handlers_for(event)
            if not handlers:
                logger.debug(f"Nobody listens to {event.event_name}")
                continue

            logger.info(f"Publishing {event.event_name} {event.payload()}")
            for handler in handlers:
                try:
                    handler(event)
                except Exception as e:
                    logger.error(
                        f"Handler {getattr(handler, '__name__', handler)} failed on {event.event_name}: {e}",
                        exc_info=True
                    )


# Process-wide bus; apps subscribe in AppConfig.ready()
message_bus = MessageBus()
