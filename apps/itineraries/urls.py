"""URL routing for itineraries."""

from __future__ import annotations

from django.urls import path  # type: ignore

from .views import ItineraryQuoteView

urlpatterns = [
    path("quote/", ItineraryQuoteView.as_view(), name="itinerary-quote"),
]
