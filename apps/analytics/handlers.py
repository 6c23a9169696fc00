"""Domain event handlers keeping the dashboard cache honest."""

from __future__ import annotations

import logging

from apps.bookings.domain.events import BookingCreated, BookingStatusChanged
from shared.application.message_bus import message_bus
from shared.domain.base import DomainEvent

from .services import invalidate_stats_cache

logger = logging.getLogger(__name__)


def invalidate_on_booking_change(event: DomainEvent) -> None:
    logger.debug(f"{type(event).__name__} received, dropping cached dashboard stats")
    invalidate_stats_cache()


def register_handlers() -> None:
    message_bus.register_event_handler(BookingCreated, invalidate_on_booking_change)
    message_bus.register_event_handler(BookingStatusChanged, invalidate_on_booking_change)
