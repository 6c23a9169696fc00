"""Tests for booking records and the status lifecycle."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from apps.bookings.domain.entities import (
    BookingRecord,
    BookingStatus,
    BookingType,
    InvalidStatusTransition,
    check_transition,
)

START = datetime(2025, 5, 1, 9, tzinfo=timezone.utc)
END = datetime(2025, 5, 1, 17, tzinfo=timezone.utc)


def test_record_fallbacks_for_missing_fields():
    record = BookingRecord.from_document({"id": "b-1", "start_date": START, "end_date": END})

    assert record.status is BookingStatus.PENDING
    assert record.booking_type is BookingType.TOUR
    assert record.user_name == "Unknown"
    assert record.user_email == ""
    assert record.user_id == ""
    assert record.total_price == Decimal("0")


def test_record_prefers_guest_details_over_unknown():
    record = BookingRecord.from_document({
        "id": "b-2",
        "start_date": START,
        "end_date": END,
        "guest_name": "Rosa",
        "guest_email": "rosa@example.com",
    })

    assert record.user_name == "Rosa"
    assert record.user_email == "rosa@example.com"


def test_record_keeps_known_values():
    record = BookingRecord.from_document({
        "id": "b-3",
        "start_date": START,
        "end_date": END,
        "status": "confirmed",
        "booking_type": "vehicle",
        "total_price": Decimal("4500.00"),
        "user_name": "Leo",
        "guest_name": "Someone Else",
    })

    assert record.status is BookingStatus.CONFIRMED
    assert record.booking_type is BookingType.VEHICLE
    assert record.total_price == Decimal("4500.00")
    assert record.user_name == "Leo"
    assert record.is_active


def test_unknown_status_reads_as_pending():
    record = BookingRecord.from_document(
        {"id": "b-4", "start_date": START, "end_date": END, "status": "on-hold"}
    )

    assert record.status is BookingStatus.PENDING


@pytest.mark.parametrize(
    "current,target",
    [
        (BookingStatus.PENDING, BookingStatus.CONFIRMED),
        (BookingStatus.PENDING, BookingStatus.CANCELLED),
        (BookingStatus.CONFIRMED, BookingStatus.CANCELLED),
        (BookingStatus.CONFIRMED, BookingStatus.COMPLETED),
    ],
)
def test_allowed_transitions(current, target):
    check_transition(current, target)


@pytest.mark.parametrize(
    "current,target",
    [
        (BookingStatus.PENDING, BookingStatus.COMPLETED),
        (BookingStatus.CANCELLED, BookingStatus.CONFIRMED),
        (BookingStatus.COMPLETED, BookingStatus.CANCELLED),
        (BookingStatus.CONFIRMED, BookingStatus.PENDING),
    ],
)
def test_rejected_transitions(current, target):
    with pytest.raises(InvalidStatusTransition):
        check_transition(current, target)


def test_only_pending_and_confirmed_are_active():
    assert BookingStatus.PENDING.is_active
    assert BookingStatus.CONFIRMED.is_active
    assert not BookingStatus.CANCELLED.is_active
    assert not BookingStatus.COMPLETED.is_active
