"""
Overlap-Based Availability

Counts the bookings that overlap a requested window and compares the count
with the stock of the resource. The store is always queried; nothing here is
cached, and a store failure propagates instead of reporting a resource free.

Two counting modes exist:
- CAPACITY counts confirmed bookings only (reporting, dashboards)
- ADMISSION counts pending and confirmed bookings (before a booking is made)
"""

from __future__ import annotations

import calendar
import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo
from enum import Enum
from typing import Iterable

from shared.domain.value_objects import TimeWindow

from .domain.entities import BookingStatus, BookingType
from .repositories import AbstractBookingRepository

logger = logging.getLogger(__name__)


def overlaps(window: TimeWindow, booking_start: datetime, booking_end: datetime) -> bool:
    """A booking conflicts with the window when ``bS < E and bE > S``.

    Touching boundaries do not conflict.
    """

    return booking_start < window.end and booking_end > window.start


class CountingMode(Enum):
    CAPACITY = 'capacity'
    ADMISSION = 'admission'

    @property
    def statuses(self) -> frozenset[str]:
        if self is CountingMode.CAPACITY:
            return frozenset({BookingStatus.CONFIRMED.value})
        return frozenset({BookingStatus.PENDING.value, BookingStatus.CONFIRMED.value})


@dataclass(frozen=True)
class ResourceStock:
    resource_id: str
    stock_count: int


@dataclass(frozen=True)
class AvailabilityResult:
    resource_id: str
    total_stock: int
    booked_count: int
    available_count: int
    is_available: bool

    @classmethod
    def from_counts(cls, resource_id: str, total_stock: int, booked_count: int) -> 'AvailabilityResult':
        available = max(0, total_stock - booked_count)
        return cls(
            resource_id=resource_id,
            total_stock=total_stock,
            booked_count=booked_count,
            available_count=available,
            is_available=available > 0,
        )


class AvailabilityAggregator:
    """
    Availability checks over a booking repository

    Every entry point issues exactly one store query; the store narrows
    candidates and the overlap count itself is decided here.
    """

    def __init__(self, repository: AbstractBookingRepository):
        self.repository = repository

    def check_resource(
        self,
        resource_id: str,
        window: TimeWindow,
        stock_count: int,
        mode: CountingMode = CountingMode.ADMISSION,
        booking_type: BookingType | None = None,
    ) -> AvailabilityResult:
        filters = {'resource_id': resource_id}
        if booking_type is not None:
            filters['booking_type'] = booking_type.value

        candidates = self.repository.find(filters=filters, statuses=mode.statuses, overlapping=window)
        booked = sum(1 for booking in candidates if overlaps(window, booking.start_date, booking.end_date))

        result = AvailabilityResult.from_counts(resource_id, stock_count, booked)
        logger.debug(
            f"Availability of {resource_id} ({mode.value}) for {window}: "
            f"{result.available_count}/{stock_count}"
        )
        return result

    def check_resources(
        self,
        resources: Iterable[ResourceStock],
        window: TimeWindow,
        mode: CountingMode = CountingMode.CAPACITY,
        booking_type: BookingType = BookingType.VEHICLE,
    ) -> dict[str, AvailabilityResult]:
        """Availability of many resources of one type from a single scan."""

        resources = list(resources)
        candidates = self.repository.find(
            filters={'booking_type': booking_type.value},
            statuses=mode.statuses,
            overlapping=window,
        )

        booked: dict[str, int] = {}
        for booking in candidates:
            if overlaps(window, booking.start_date, booking.end_date):
                booked[booking.resource_id] = booked.get(booking.resource_id, 0) + 1

        return {
            resource.resource_id: AvailabilityResult.from_counts(
                resource.resource_id,
                resource.stock_count,
                booked.get(resource.resource_id, 0),
            )
            for resource in resources
        }

    def available_days(
        self,
        resource: ResourceStock,
        year: int,
        month: int,
        today: date,
        tz: tzinfo | None = None,
        mode: CountingMode = CountingMode.ADMISSION,
        booking_type: BookingType = BookingType.TOUR,
        duration_days: int = 1,
    ) -> list[date]:
        """
        Start days of the month, from ``today`` on, that still have capacity

        A start day is checked over ``duration_days`` whole days, the window a
        booking starting that day would hold; all bookings touching those
        windows are read in one scan.
        """

        last_day = calendar.monthrange(year, month)[1]
        first = max(date(year, month, 1), today)
        last = date(year, month, last_day)
        if first > last:
            return []

        span = timedelta(days=max(1, duration_days) - 1)
        month_window = TimeWindow.for_days(first, last + span, tz)
        candidates = self.repository.find(
            filters={'resource_id': resource.resource_id, 'booking_type': booking_type.value},
            statuses=mode.statuses,
            overlapping=month_window,
        )

        days = []
        current = first
        while current <= last:
            window = TimeWindow.for_days(current, current + span, tz)
            booked = sum(1 for booking in candidates if overlaps(window, booking.start_date, booking.end_date))
            if resource.stock_count - booked > 0:
                days.append(current)
            current += timedelta(days=1)
        return days
