"""
Booking Domain Events

Events that represent things that have happened in the booking domain.
These are published after successful transaction commits.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from shared.domain.base import DomainEvent


# ===== Booking Events =====

@dataclass
class BookingCreated(DomainEvent):
    """
    Event: A new booking was stored

    Triggers:
    - Dashboard statistics invalidation
    """
    booking_id: str = ''
    resource_id: str = ''
    booking_type: str = ''
    start_date: datetime | None = None
    end_date: datetime | None = None
    total_price: Decimal = Decimal('0')


@dataclass
class BookingStatusChanged(DomainEvent):
    """
    Event: A booking moved to another lifecycle status

    Triggers:
    - Dashboard statistics invalidation (revenue and pending counts change)
    """
    booking_id: str = ''
    previous_status: str = ''
    new_status: str = ''
    changed_by: str = ''
