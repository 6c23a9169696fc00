"""Tests for the Django booking repository."""

from __future__ import annotations

from datetime import timedelta

from django.test import TestCase
from django.utils import timezone

from apps.bookings.models import Booking
from apps.bookings.repositories import Cursor, DjangoBookingRepository
from shared.domain.value_objects import TimeWindow


class DjangoBookingRepositoryTests(TestCase):
    def setUp(self) -> None:
        self.repository = DjangoBookingRepository()
        self.start = timezone.now() + timedelta(days=1)

    def _booking(self, **fields) -> Booking:
        fields.setdefault("resource_id", "vehicle-1")
        fields.setdefault("booking_type", Booking.Type.VEHICLE)
        fields.setdefault("start_date", self.start)
        fields.setdefault("end_date", self.start + timedelta(hours=3))
        return Booking.objects.create(**fields)

    def test_keyset_paging_has_no_gaps_or_repeats(self) -> None:
        created = [self._booking() for _ in range(7)]

        first = self.repository.find(limit=4)
        rest = self.repository.find(after=Cursor.after_record(first[-1]), limit=4)

        ids = [record.id for record in first + rest]
        self.assertEqual(len(ids), 7)
        self.assertEqual(set(ids), {str(booking.pk) for booking in created})

    def test_overlap_and_status_filters(self) -> None:
        self._booking(status=Booking.Status.CONFIRMED)
        self._booking(status=Booking.Status.CANCELLED)
        self._booking(
            status=Booking.Status.CONFIRMED,
            start_date=self.start + timedelta(hours=3),
            end_date=self.start + timedelta(hours=5),
        )

        rows = self.repository.find(
            filters={"resource_id": "vehicle-1"},
            statuses=["confirmed"],
            overlapping=TimeWindow(self.start, self.start + timedelta(hours=3)),
        )

        self.assertEqual(len(rows), 1)
        self.assertEqual(rows[0].status.value, "confirmed")

    def test_records_carry_fallback_names(self) -> None:
        self._booking(guest_name="Walk-in Guest")

        record = self.repository.find()[0]

        self.assertEqual(record.user_name, "Walk-in Guest")

    def test_subscription_pushes_committed_changes(self) -> None:
        snapshots = []
        unsubscribe = self.repository.subscribe(
            filters={"status": "pending"},
            limit=2,
            on_change=snapshots.append,
            on_error=self.fail,
        )
        self.assertEqual(snapshots, [[]])

        with self.captureOnCommitCallbacks(execute=True):
            self._booking()
        with self.captureOnCommitCallbacks(execute=True):
            self._booking(status=Booking.Status.CONFIRMED)

        self.assertEqual([len(snapshot) for snapshot in snapshots], [0, 1, 1])

        unsubscribe()
        with self.captureOnCommitCallbacks(execute=True):
            self._booking()

        self.assertEqual(len(snapshots), 3)

    def test_failed_first_snapshot_releases_the_subscription(self) -> None:
        calls = []

        def refuse(snapshot):
            calls.append(snapshot)
            raise RuntimeError("listener crashed")

        with self.assertRaises(RuntimeError):
            self.repository.subscribe(filters=None, limit=5, on_change=refuse, on_error=self.fail)

        with self.captureOnCommitCallbacks(execute=True):
            self._booking()

        self.assertEqual(len(calls), 1)
