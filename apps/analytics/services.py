"""Dashboard statistics with a short-lived cache."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from django.conf import settings  # type: ignore
from django.contrib.auth import get_user_model  # type: ignore
from django.core.cache import cache  # type: ignore
from django.db.models import Sum  # type: ignore
from django.utils import timezone  # type: ignore

from apps.bookings.models import Booking
from apps.catalog.models import Tour, Vehicle

logger = logging.getLogger(__name__)

STATS_CACHE_KEY = "analytics:dashboard_stats"


def _cache_timeout() -> int:
    return getattr(settings, "DASHBOARD_STATS_CACHE_TIMEOUT", 5 * 60)


@dataclass
class DashboardStats:
    pending_bookings: int
    monthly_revenue: Decimal
    active_tours: int
    active_vehicles: int
    total_users: int
    last_updated: datetime


def calculate_and_cache_stats() -> DashboardStats:
    """Recompute the dashboard figures and store them in the cache.

    Monthly revenue sums confirmed bookings created since the first day of
    the current month.
    """

    now = timezone.now()
    month_start = timezone.localtime(now).replace(day=1, hour=0, minute=0, second=0, microsecond=0)

    revenue = (
        Booking.objects.filter(status=Booking.Status.CONFIRMED, created_at__gte=month_start)
        .aggregate(total=Sum("total_price"))
        .get("total")
    )
    stats = DashboardStats(
        pending_bookings=Booking.objects.filter(status=Booking.Status.PENDING).count(),
        monthly_revenue=revenue or Decimal("0"),
        active_tours=Tour.objects.filter(available=True).count(),
        active_vehicles=Vehicle.objects.filter(available=True).count(),
        total_users=get_user_model().objects.count(),
        last_updated=now,
    )
    cache.set(STATS_CACHE_KEY, stats, _cache_timeout())
    logger.info(f"Dashboard stats refreshed: {stats.pending_bookings} pending bookings")
    return stats


def get_dashboard_stats() -> DashboardStats:
    """Cached stats when fresh, otherwise a fresh calculation."""

    stats: DashboardStats | None = cache.get(STATS_CACHE_KEY)
    if stats is not None:
        return stats
    return calculate_and_cache_stats()


def invalidate_stats_cache() -> None:
    cache.delete(STATS_CACHE_KEY)
    logger.debug("Dashboard stats cache invalidated")
