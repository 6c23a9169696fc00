"""API views for analytics.

Provides the operator dashboard figures: pending bookings, revenue of
confirmed bookings this month, active tours and vehicles, and user count.
"""

from __future__ import annotations

from rest_framework.permissions import IsAdminUser  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from .services import get_dashboard_stats


class DashboardStatsView(APIView):
    """Return cached dashboard statistics."""

    permission_classes = [IsAdminUser]

    def get(self, request, format=None):  # type: ignore
        stats = get_dashboard_stats()
        return Response(
            {
                'pending_bookings': stats.pending_bookings,
                'monthly_revenue': stats.monthly_revenue,
                'active_tours': stats.active_tours,
                'active_vehicles': stats.active_vehicles,
                'total_users': stats.total_users,
                'last_updated': stats.last_updated,
            }
        )
