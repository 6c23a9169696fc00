"""URL routing for the booking domain.

Besides the router's list/create/detail routes the viewset exposes
``availability/``, ``active-summary/`` and ``<id>/cancel|confirm|complete/``.
"""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import SimpleRouter  # type: ignore

from .views import BookingViewSet

# The viewset sits at the prefix root, where an API root view would shadow the list route
router = SimpleRouter()
router.register(r"", BookingViewSet, basename="booking")

urlpatterns = [
    path("", include(router.urls)),
]
