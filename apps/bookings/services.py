"""Domain services for booking workflows."""

from __future__ import annotations

from dataclasses import dataclass, field

from .domain.entities import BookingRecord, BookingStatus, BookingType
from .repositories import AbstractBookingRepository, DjangoBookingRepository


@dataclass
class ActiveBookingsSummary:
    """Pending and confirmed tour bookings a customer already holds."""

    bookings: list[BookingRecord] = field(default_factory=list)

    @property
    def pending_count(self) -> int:
        return sum(1 for booking in self.bookings if booking.status is BookingStatus.PENDING)

    @property
    def confirmed_count(self) -> int:
        return sum(1 for booking in self.bookings if booking.status is BookingStatus.CONFIRMED)

    @property
    def has_pending(self) -> bool:
        return self.pending_count > 0

    @property
    def has_confirmed(self) -> bool:
        return self.confirmed_count > 0


def active_tour_bookings(
    user_id: str,
    repository: AbstractBookingRepository | None = None,
) -> ActiveBookingsSummary:
    """Summarise the user's active tour bookings, shown before booking another tour."""

    repository = repository or DjangoBookingRepository()
    bookings = repository.find(
        filters={"user_id": user_id, "booking_type": BookingType.TOUR.value},
        statuses=(BookingStatus.PENDING.value, BookingStatus.CONFIRMED.value),
    )
    return ActiveBookingsSummary(bookings=bookings)
