"""
Booking Store Access

The availability aggregator and the query engine read bookings only through
``AbstractBookingRepository``. The Django implementation queries the
``Booking`` table and pushes live snapshots from model signals.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Callable, Collection, Mapping, NamedTuple
from uuid import uuid4

from django.db import DatabaseError, transaction  # type: ignore
from django.db.models import Q  # type: ignore
from django.db.models.signals import post_delete, post_save  # type: ignore

from shared.domain.value_objects import TimeWindow

from .domain.entities import BookingRecord

logger = logging.getLogger(__name__)

RECORD_FIELDS = (
    "id",
    "resource_id",
    "booking_type",
    "status",
    "start_date",
    "end_date",
    "total_price",
    "user_id",
    "user_name",
    "user_email",
    "created_at",
    "updated_at",
    "group_size",
    "special_requests",
    "contact_phone",
    "guest_name",
    "guest_email",
    "itinerary_details",
)


class BookingStoreError(Exception):
    """The booking store could not be read; the message is shown as is."""


class Cursor(NamedTuple):
    """Position after the last record of a page (newest first ordering)."""

    created_at: datetime
    id: str

    @classmethod
    def after_record(cls, record: BookingRecord) -> 'Cursor':
        return cls(record.created_at, record.id)


SnapshotCallback = Callable[[list[BookingRecord]], None]
ErrorCallback = Callable[[BookingStoreError], None]


class AbstractBookingRepository(ABC):
    """
    Read access to bookings

    ``find`` returns records newest first (``created_at`` desc, ``id`` desc).

    Args shared by ``find`` and ``subscribe``:
        filters: equality filters by field name (status, booking_type,
            user_id, resource_id)
        statuses: restrict to any of these statuses
        overlapping: only bookings whose window overlaps this one
        after: keyset cursor, records strictly after it
        limit: maximum number of records
    """

    @abstractmethod
    def find(
        self,
        *,
        filters: Mapping[str, str] | None = None,
        statuses: Collection[str] | None = None,
        overlapping: TimeWindow | None = None,
        after: Cursor | None = None,
        limit: int | None = None,
    ) -> list[BookingRecord]:
        raise NotImplementedError

    @abstractmethod
    def subscribe(
        self,
        *,
        filters: Mapping[str, str] | None,
        limit: int,
        on_change: SnapshotCallback,
        on_error: ErrorCallback,
    ) -> Callable[[], None]:
        """
        Push the current first ``limit`` matching records now and after every
        committed change. Returns a function that cancels the subscription;
        until it is called the subscription stays registered. Callbacks run
        on the thread that committed the change.
        """
        raise NotImplementedError


class DjangoBookingRepository(AbstractBookingRepository):
    """Repository over the ``Booking`` model."""

    def _queryset(self, filters, statuses, overlapping, after):
        from .models import Booking  # Local import to prevent circular dependency

        qs = Booking.objects.all()
        if filters:
            qs = qs.filter(**dict(filters))
        if statuses is not None:
            qs = qs.filter(status__in=list(statuses))
        if overlapping is not None:
            qs = qs.filter(start_date__lt=overlapping.end, end_date__gt=overlapping.start)
        if after is not None:
            qs = qs.filter(
                Q(created_at__lt=after.created_at)
                | Q(created_at=after.created_at, id__lt=after.id)
            )
        return qs.order_by("-created_at", "-id")

    def find(
        self,
        *,
        filters: Mapping[str, str] | None = None,
        statuses: Collection[str] | None = None,
        overlapping: TimeWindow | None = None,
        after: Cursor | None = None,
        limit: int | None = None,
    ) -> list[BookingRecord]:
        qs = self._queryset(filters, statuses, overlapping, after).values(*RECORD_FIELDS)
        if limit is not None:
            qs = qs[:limit]
        try:
            rows = list(qs)
        except DatabaseError as exc:
            logger.error(f"Booking store query failed: {exc}", exc_info=True)
            raise BookingStoreError(str(exc)) from exc
        return [BookingRecord.from_document(row) for row in rows]

    def subscribe(
        self,
        *,
        filters: Mapping[str, str] | None,
        limit: int,
        on_change: SnapshotCallback,
        on_error: ErrorCallback,
    ) -> Callable[[], None]:
        from .models import Booking

        dispatch_uid = f"bookings-live-{uuid4()}"
        active = True

        def push() -> None:
            if not active:
                return
            try:
                snapshot = self.find(filters=filters, limit=limit)
            except BookingStoreError as exc:
                on_error(exc)
                return
            on_change(snapshot)

        def booking_changed(**_: object) -> None:
            # Snapshots only ever reflect committed data
            transaction.on_commit(push)

        post_save.connect(booking_changed, sender=Booking, weak=False, dispatch_uid=f"{dispatch_uid}-save")
        post_delete.connect(booking_changed, sender=Booking, weak=False, dispatch_uid=f"{dispatch_uid}-delete")
        logger.debug(f"Live booking subscription {dispatch_uid} opened")

        def unsubscribe() -> None:
            nonlocal active
            active = False
            post_save.disconnect(sender=Booking, dispatch_uid=f"{dispatch_uid}-save")
            post_delete.disconnect(sender=Booking, dispatch_uid=f"{dispatch_uid}-delete")
            logger.debug(f"Live booking subscription {dispatch_uid} closed")

        try:
            push()
        except Exception:
            unsubscribe()
            raise
        return unsubscribe
