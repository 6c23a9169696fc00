"""
Booking Command Handlers

These are the use cases for the booking domain.
They orchestrate domain operations within transactions.

Commands:
- CreateBookingCommand: Create a vehicle, tour or custom itinerary booking
- UpdateBookingStatusCommand: Confirm, cancel or complete a booking
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Sequence
import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.db.utils import NotSupportedError
from django.utils import timezone

from shared.application.uow import DjangoUnitOfWork
from shared.domain.value_objects import TimeWindow
from apps.bookings.availability import AvailabilityAggregator, AvailabilityResult, CountingMode
from apps.bookings.domain.entities import BookingType
from apps.bookings.domain.events import BookingCreated, BookingStatusChanged
from apps.bookings.models import CUSTOM_ITINERARY_RESOURCE, Booking
from apps.bookings.repositories import AbstractBookingRepository, DjangoBookingRepository
from apps.itineraries.domain import MultiDayItinerary, TWO_DAYS
from apps.itineraries.services import quote_itinerary

logger = logging.getLogger(__name__)


class CapacityUnavailableError(Exception):
    """Raised when every unit of the resource is taken for the window"""

    def __init__(self, result: AvailabilityResult, window: TimeWindow):
        self.result = result
        self.window = window
        super().__init__("The selected resource is not available for the requested dates.")


class ResourceNotFoundError(Exception):
    """Raised when the booked vehicle or tour does not exist or is not offered"""


def _lock_queryset_if_possible(queryset):
    """Apply select_for_update when inside transaction.atomic()."""

    if not transaction.get_connection().in_atomic_block:
        return queryset

    try:
        return queryset.select_for_update()
    except NotSupportedError:
        return queryset


# ===== Commands =====

@dataclass
class CreateBookingCommand:
    """
    Command to create a new booking

    Vehicles use ``start``/``end`` instants. Tours and custom itineraries
    use ``start`` as the tour date; their window spans whole days.
    ``itinerary_days`` holds ``(tour_type, landmark_ids)`` pairs and marks a
    custom itinerary booking.
    """
    booking_type: BookingType
    start: datetime | date
    end: datetime | date | None = None
    resource_id: str = ''
    group_size: int = 1
    user_id: str = ''
    user_name: str = ''
    user_email: str = ''
    guest_name: str = ''
    guest_email: str = ''
    contact_phone: str = ''
    special_requests: str = ''
    itinerary_days: Sequence[tuple[str, Sequence[str]]] = field(default_factory=list)
    is_full_package: bool = False

    @property
    def is_custom_itinerary(self) -> bool:
        return bool(self.itinerary_days)


@dataclass
class UpdateBookingStatusCommand:
    """Command to move a booking to another status"""
    booking_id: str
    status: str
    changed_by: str = ''


def _as_day(value: datetime | date) -> date:
    if isinstance(value, datetime):
        return timezone.localtime(value).date() if timezone.is_aware(value) else value.date()
    return value


# ===== Command Handlers =====

class CreateBookingHandler:
    """
    Handler for CreateBooking command

    Strategy:
    1. Start database transaction (atomic)
    2. Lock the catalog row of the resource (SELECT FOR UPDATE where supported)
    3. Count overlapping pending and confirmed bookings (admission check)
    4. Store the booking and queue BookingCreated
    5. Commit, then publish events

    The row lock serialises concurrent creations for one resource, so two
    requests cannot both pass the check for the last unit.
    """

    def __init__(self, repository: AbstractBookingRepository | None = None):
        self.aggregator = AvailabilityAggregator(repository or DjangoBookingRepository())

    def handle(self, command: CreateBookingCommand) -> Booking:
        logger.info(
            f"Creating {command.booking_type.value} booking for resource "
            f"{command.resource_id or CUSTOM_ITINERARY_RESOURCE}, user {command.user_id or 'guest'}"
        )

        with DjangoUnitOfWork() as uow:
            if command.is_custom_itinerary:
                booking = self._build_custom_itinerary_booking(command)
            else:
                booking = self._build_resource_booking(command)

            booking.save()

            uow.add_event(BookingCreated(
                booking_id=str(booking.pk),
                resource_id=booking.resource_id,
                booking_type=booking.booking_type,
                start_date=booking.start_date,
                end_date=booking.end_date,
                total_price=booking.total_price,
            ))

        logger.info(f"Booking {booking.pk} created with total {booking.total_price}")
        return booking

    def _base_booking(self, command: CreateBookingCommand, window: TimeWindow) -> Booking:
        return Booking(
            booking_type=command.booking_type.value,
            status=Booking.Status.PENDING,
            start_date=window.start,
            end_date=window.end,
            group_size=command.group_size,
            user_id=command.user_id,
            user_name=command.user_name,
            user_email=command.user_email,
            guest_name=command.guest_name,
            guest_email=command.guest_email,
            contact_phone=command.contact_phone,
            special_requests=command.special_requests,
        )

    def _window(self, command: CreateBookingCommand, days: int = 1) -> TimeWindow:
        if command.booking_type is BookingType.VEHICLE:
            return TimeWindow(command.start, command.end or command.start)
        first_day = _as_day(command.start)
        return TimeWindow.for_days(
            first_day,
            first_day + timedelta(days=max(1, days) - 1),
            timezone.get_current_timezone(),
        )

    def _lock_resource(self, command: CreateBookingCommand):
        from apps.catalog.models import Tour, Vehicle

        model = Vehicle if command.booking_type is BookingType.VEHICLE else Tour
        try:
            resource = _lock_queryset_if_possible(
                model.objects.filter(pk=command.resource_id, available=True)
            ).first()
        except DjangoValidationError:
            resource = None
        if resource is None:
            raise ResourceNotFoundError(
                f"{model.__name__} {command.resource_id} not found or not available"
            )
        return resource

    def _build_resource_booking(self, command: CreateBookingCommand) -> Booking:
        resource = self._lock_resource(command)
        days = getattr(resource, 'duration_days', 1)
        window = self._window(command, days)

        result = self.aggregator.check_resource(
            resource.resource_id,
            window,
            resource.stock_count,
            mode=CountingMode.ADMISSION,
            booking_type=command.booking_type,
        )
        if not result.is_available:
            logger.warning(
                f"Rejected booking for {resource.resource_id}: "
                f"{result.booked_count}/{result.total_stock} units taken for {window}"
            )
            raise CapacityUnavailableError(result, window)

        booking = self._base_booking(command, window)
        booking.resource_id = resource.resource_id
        if command.booking_type is BookingType.VEHICLE:
            booking.total_price = resource.price_per_unit * window.duration_days
        else:
            booking.total_price = resource.price_per_unit * command.group_size
        return booking

    def _build_custom_itinerary_booking(self, command: CreateBookingCommand) -> Booking:
        itinerary = quote_itinerary(command.itinerary_days, command.is_full_package)
        days = 2 if isinstance(itinerary, MultiDayItinerary) and itinerary.duration == TWO_DAYS else 1

        # Custom itineraries have no stock to protect
        booking = self._base_booking(command, self._window(command, days))
        booking.resource_id = CUSTOM_ITINERARY_RESOURCE
        booking.itinerary_details = itinerary.to_document()
        booking.total_price = Decimal(itinerary.total_price) * command.group_size
        return booking


class UpdateBookingStatusHandler:
    """
    Handler for booking status changes

    Loads the booking with a row lock, applies the lifecycle transition
    (raises InvalidStatusTransition when not allowed) and queues
    BookingStatusChanged.
    """

    def handle(self, command: UpdateBookingStatusCommand) -> Booking:
        with DjangoUnitOfWork() as uow:
            booking = _lock_queryset_if_possible(
                Booking.objects.filter(pk=command.booking_id)
            ).get()
            previous = booking.transition_to(command.status)
            booking.save(update_fields=['status', 'updated_at'])

            uow.add_event(BookingStatusChanged(
                booking_id=str(booking.pk),
                previous_status=previous,
                new_status=booking.status,
                changed_by=command.changed_by,
            ))

        logger.info(f"Booking {booking.pk} moved from {previous} to {booking.status}")
        return booking
