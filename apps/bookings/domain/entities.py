"""
Booking Domain Entities

Typed view of a stored booking:
- BookingStatus: lifecycle states and which of them hold capacity
- BookingType: what kind of resource a booking reserves
- BookingRecord: immutable booking read from the store
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Mapping

from shared.domain.value_objects import TimeWindow


class BookingStatus(Enum):
    """
    Booking Status Finite State Machine

    State transitions:
    - PENDING -> CONFIRMED (operator accepted the booking)
    - PENDING -> CANCELLED (customer or operator cancelled)
    - CONFIRMED -> CANCELLED (customer or operator cancelled)
    - CONFIRMED -> COMPLETED (trip finished)
    """
    PENDING = 'pending'
    CONFIRMED = 'confirmed'
    CANCELLED = 'cancelled'
    COMPLETED = 'completed'

    @property
    def is_active(self) -> bool:
        """Active bookings count against capacity at admission time"""
        return self in ACTIVE_STATUSES


ACTIVE_STATUSES = frozenset({BookingStatus.PENDING, BookingStatus.CONFIRMED})

ALLOWED_TRANSITIONS = {
    BookingStatus.PENDING: frozenset({BookingStatus.CONFIRMED, BookingStatus.CANCELLED}),
    BookingStatus.CONFIRMED: frozenset({BookingStatus.CANCELLED, BookingStatus.COMPLETED}),
    BookingStatus.CANCELLED: frozenset(),
    BookingStatus.COMPLETED: frozenset(),
}


class InvalidStatusTransition(Exception):
    """Raised when a booking is moved to a status its current one cannot reach"""

    def __init__(self, current: BookingStatus, target: BookingStatus):
        self.current = current
        self.target = target
        super().__init__(f"Cannot change booking status from {current.value} to {target.value}")


def check_transition(current: BookingStatus, target: BookingStatus) -> None:
    if target not in ALLOWED_TRANSITIONS[current]:
        raise InvalidStatusTransition(current, target)


class BookingType(Enum):
    TOUR = 'tour'
    VEHICLE = 'vehicle'


def _parse_enum(enum_cls, value, default):
    try:
        return enum_cls(value)
    except ValueError:
        return default


def _parse_price(value) -> Decimal:
    if value in (None, ''):
        return Decimal('0')
    try:
        return Decimal(str(value))
    except InvalidOperation:
        return Decimal('0')


@dataclass(frozen=True)
class BookingRecord:
    """
    Booking as read from the store

    Stored documents may lack optional fields; ``from_document`` fills them
    with fixed fallbacks so callers never have to.
    """

    id: str
    resource_id: str
    booking_type: BookingType
    status: BookingStatus
    start_date: datetime
    end_date: datetime
    total_price: Decimal
    user_id: str
    user_name: str
    user_email: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
    group_size: int = 1
    special_requests: str = ''
    contact_phone: str = ''
    guest_name: str = ''
    guest_email: str = ''
    itinerary_details: dict | None = None

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> 'BookingRecord':
        """
        Build a record from a raw mapping

        Fallbacks for missing fields:
        - status -> pending, booking_type -> tour, total_price -> 0
        - user_name -> guest_name -> "Unknown"
        - user_email -> guest_email -> ""
        """
        guest_name = doc.get('guest_name') or ''
        guest_email = doc.get('guest_email') or ''
        return cls(
            id=str(doc.get('id', '')),
            resource_id=str(doc.get('resource_id') or ''),
            booking_type=_parse_enum(BookingType, doc.get('booking_type'), BookingType.TOUR),
            status=_parse_enum(BookingStatus, doc.get('status'), BookingStatus.PENDING),
            start_date=doc['start_date'],
            end_date=doc['end_date'],
            total_price=_parse_price(doc.get('total_price')),
            user_id=str(doc.get('user_id') or ''),
            user_name=doc.get('user_name') or guest_name or 'Unknown',
            user_email=doc.get('user_email') or guest_email,
            created_at=doc.get('created_at'),
            updated_at=doc.get('updated_at'),
            group_size=int(doc.get('group_size') or 1),
            special_requests=doc.get('special_requests') or '',
            contact_phone=doc.get('contact_phone') or '',
            guest_name=guest_name,
            guest_email=guest_email,
            itinerary_details=doc.get('itinerary_details'),
        )

    @property
    def window(self) -> TimeWindow:
        return TimeWindow(self.start_date, self.end_date)

    @property
    def is_active(self) -> bool:
        return self.status.is_active
