"""URL routing for analytics endpoints."""

from django.urls import path  # type: ignore

from .views import DashboardStatsView


urlpatterns = [
    # Do not prefix with 'analytics/' here; the namespace is defined in config.urls
    path('dashboard/', DashboardStatsView.as_view(), name='analytics-dashboard'),
]
