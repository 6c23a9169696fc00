"""Fixtures for booking engine tests.

``InMemoryBookingRepository`` stands in for the database so the availability
and query engines can be exercised without Django models.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from itertools import count

import pytest

from apps.bookings.domain.entities import BookingRecord
from apps.bookings.repositories import AbstractBookingRepository, BookingStoreError

BASE_TIME = datetime(2025, 1, 1, tzinfo=timezone.utc)
_ids = count(1)


def make_booking(
    *,
    resource_id: str = "vehicle-1",
    booking_type: str = "vehicle",
    status: str = "confirmed",
    start: datetime | None = None,
    end: datetime | None = None,
    created_at: datetime | None = None,
    **extra,
) -> BookingRecord:
    number = next(_ids)
    start = start or BASE_TIME
    document = {
        "id": extra.pop("id", f"{number:08d}-0000-0000-0000-000000000000"),
        "resource_id": resource_id,
        "booking_type": booking_type,
        "status": status,
        "start_date": start,
        "end_date": end or start + timedelta(hours=2),
        "total_price": extra.pop("total_price", 1000),
        "user_id": extra.pop("user_id", "user-1"),
        "user_name": extra.pop("user_name", "Maria Santos"),
        "user_email": extra.pop("user_email", "maria@example.com"),
        "created_at": created_at or BASE_TIME + timedelta(minutes=number),
    }
    document.update(extra)
    return BookingRecord.from_document(document)


class InMemoryBookingRepository(AbstractBookingRepository):
    def __init__(self, records=()):
        self.records: list[BookingRecord] = list(records)
        self.calls: list[dict] = []
        self.fail_with: str | None = None
        self.before_find = None
        self._subscribers: list = []

    def add(self, **kwargs) -> BookingRecord:
        record = make_booking(**kwargs)
        self.records.append(record)
        return record

    @staticmethod
    def _value(record: BookingRecord, name: str) -> str:
        value = getattr(record, name)
        return getattr(value, "value", value)

    def find(self, *, filters=None, statuses=None, overlapping=None, after=None, limit=None):
        self.calls.append(
            {"filters": dict(filters or {}), "statuses": statuses, "after": after, "limit": limit}
        )
        if self.before_find is not None:
            hook, self.before_find = self.before_find, None
            hook()
        if self.fail_with is not None:
            raise BookingStoreError(self.fail_with)

        rows = [
            record
            for record in self.records
            if all(self._value(record, name) == value for name, value in (filters or {}).items())
            and (statuses is None or record.status.value in statuses)
            and (overlapping is None or record.window.overlaps_with(overlapping))
        ]
        rows.sort(key=lambda record: (record.created_at, record.id), reverse=True)
        if after is not None:
            rows = [record for record in rows if (record.created_at, record.id) < (after.created_at, after.id)]
        return rows[:limit] if limit is not None else rows

    def subscribe(self, *, filters, limit, on_change, on_error):
        def push():
            try:
                snapshot = self.find(filters=filters, limit=limit)
            except BookingStoreError as exc:
                on_error(exc)
                return
            on_change(snapshot)

        def unsubscribe():
            if push in self._subscribers:
                self._subscribers.remove(push)

        self._subscribers.append(push)
        try:
            push()
        except Exception:
            unsubscribe()
            raise
        return unsubscribe

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def notify(self) -> None:
        """Simulate a committed change reaching live subscribers."""
        for push in list(self._subscribers):
            push()


@pytest.fixture
def repository() -> InMemoryBookingRepository:
    return InMemoryBookingRepository()


@pytest.fixture
def booking_factory():
    return make_booking
