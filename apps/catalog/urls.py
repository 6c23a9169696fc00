"""URL routing for the catalog."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import DefaultRouter  # type: ignore

from .views import LandmarkViewSet, TourViewSet, VehicleViewSet

router = DefaultRouter()
router.register(r"vehicles", VehicleViewSet, basename="vehicle")
router.register(r"tours", TourViewSet, basename="tour")
router.register(r"landmarks", LandmarkViewSet, basename="landmark")

urlpatterns = [
    path("", include(router.urls)),
]
