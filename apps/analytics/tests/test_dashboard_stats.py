"""Tests for cached dashboard statistics."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.analytics.services import STATS_CACHE_KEY, calculate_and_cache_stats, get_dashboard_stats
from apps.analytics.tasks import refresh_dashboard_stats
from apps.bookings.application.command_handlers import UpdateBookingStatusCommand, UpdateBookingStatusHandler
from apps.bookings.models import Booking
from apps.catalog.models import Tour, Vehicle

User = get_user_model()


class DashboardStatsTests(APITestCase):
    def setUp(self) -> None:
        cache.clear()
        self.operator = User.objects.create_user(
            username="operator", password="OperatorPass123", is_staff=True
        )
        self.customer = User.objects.create_user(username="customer", password="CustomerPass123")
        Tour.objects.create(title="Bantayan Island Hopping", price=Decimal("3000.00"))
        Tour.objects.create(title="Hidden tour", price=Decimal("1000.00"), available=False)
        Vehicle.objects.create(name="Mitsubishi Montero", price_per_day=Decimal("3000.00"))
        start = timezone.now() + timedelta(days=3)
        self.confirmed = self._booking(Booking.Status.CONFIRMED, "4500.00", start)
        self._booking(Booking.Status.CONFIRMED, "1500.00", start)
        self.pending = self._booking(Booking.Status.PENDING, "9999.00", start)
        self._booking(Booking.Status.CANCELLED, "800.00", start)

    def _booking(self, booking_status: str, price: str, start) -> Booking:
        return Booking.objects.create(
            resource_id="custom-itinerary",
            booking_type=Booking.Type.TOUR,
            status=booking_status,
            start_date=start,
            end_date=start + timedelta(hours=8),
            total_price=Decimal(price),
        )

    def test_figures(self) -> None:
        stats = calculate_and_cache_stats()

        self.assertEqual(stats.pending_bookings, 1)
        self.assertEqual(stats.monthly_revenue, Decimal("6000.00"))
        self.assertEqual(stats.active_tours, 1)
        self.assertEqual(stats.active_vehicles, 1)
        self.assertEqual(stats.total_users, 2)

    def test_revenue_only_counts_this_month(self) -> None:
        month_start = timezone.localtime().replace(day=1, hour=0, minute=0, second=0, microsecond=0)
        Booking.objects.filter(pk=self.confirmed.pk).update(created_at=month_start - timedelta(days=1))

        self.assertEqual(calculate_and_cache_stats().monthly_revenue, Decimal("1500.00"))

    def test_cached_stats_are_reused(self) -> None:
        first = get_dashboard_stats()
        Booking.objects.filter(pk=self.pending.pk).update(status=Booking.Status.CANCELLED)

        self.assertEqual(get_dashboard_stats().pending_bookings, first.pending_bookings)

    def test_status_change_drops_cached_stats(self) -> None:
        get_dashboard_stats()
        self.assertIsNotNone(cache.get(STATS_CACHE_KEY))

        with self.captureOnCommitCallbacks(execute=True):
            UpdateBookingStatusHandler().handle(
                UpdateBookingStatusCommand(booking_id=str(self.pending.pk), status=Booking.Status.CONFIRMED)
            )

        self.assertIsNone(cache.get(STATS_CACHE_KEY))
        self.assertEqual(get_dashboard_stats().pending_bookings, 0)

    def test_refresh_task_warms_the_cache(self) -> None:
        result = refresh_dashboard_stats.delay().get()

        self.assertEqual(result["pending_bookings"], 1)
        self.assertEqual(Decimal(result["monthly_revenue"]), Decimal("6000"))
        self.assertIsNotNone(cache.get(STATS_CACHE_KEY))

    def test_dashboard_is_for_operators_only(self) -> None:
        url = reverse("analytics-dashboard")

        self.client.force_authenticate(self.customer)
        forbidden = self.client.get(url)
        self.client.force_authenticate(self.operator)
        response = self.client.get(url)

        self.assertEqual(forbidden.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["pending_bookings"], 1)
