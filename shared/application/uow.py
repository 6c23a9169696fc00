"""
Unit of Work

Wraps a booking use case in one database transaction and holds back its
domain events until that transaction commits.
"""

from typing import List, Optional
import logging

from django.db import transaction

from shared.application.message_bus import MessageBus
from shared.domain.base import DomainEvent

logger = logging.getLogger(__name__)


class DjangoUnitOfWork:
    """
    Transaction scope for a command handler

    Usage:
        with DjangoUnitOfWork() as uow:
            booking = Booking.objects.select_for_update().get(pk=booking_id)
            previous = booking.transition_to(Booking.Status.CONFIRMED)
            booking.save()
            uow.add_event(BookingStatusChanged(...))
        # handlers run once the outermost transaction has committed

    An exception inside the block rolls the transaction back and drops the
    queued events. Nested in an outer ``atomic`` block, publication waits
    for the outer commit.
    """

    def __init__(self, bus: Optional[MessageBus] = None):
        self._bus = bus
        self._events: List[DomainEvent] = []
        self._atomic = None

    def __enter__(self):
        self._atomic = transaction.atomic()
        self._atomic.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        try:
            if exc_type is None:
                self._schedule_publication()
            else:
                logger.warning(f"Rolling back, {len(self._events)} queued events discarded: {exc_val}")
                self._events.clear()
        finally:
            self._atomic.__exit__(exc_type, exc_val, exc_tb)

    @property
    def events(self) -> List[DomainEvent]:
        return list(self._events)

    def add_event(self, event: DomainEvent):
        self._events.append(event)

    def _schedule_publication(self):
        events, self._events = self._events, []
        if events:
            transaction.on_commit(lambda: self._publish(events))

    def _publish(self, events: List[DomainEvent]):
        bus = self._bus
        if bus is None:
            from shared.application.message_bus import message_bus as bus

        try:
            bus.publish_events(events)
        except Exception as e:
            # The data is committed; a failed publication is only logged
            logger.error(f"Publishing {len(events)} events failed: {e}", exc_info=True)
