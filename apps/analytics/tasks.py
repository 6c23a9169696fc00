"""Celery tasks for analytics."""

from __future__ import annotations

import logging

from celery import shared_task  # type: ignore

from .services import calculate_and_cache_stats

logger = logging.getLogger(__name__)


@shared_task(name="analytics.refresh_dashboard_stats")
def refresh_dashboard_stats() -> dict:
    """Keeps the dashboard cache warm; scheduled by beat every five minutes."""

    stats = calculate_and_cache_stats()
    return {
        "pending_bookings": stats.pending_bookings,
        "monthly_revenue": str(stats.monthly_revenue),
    }
