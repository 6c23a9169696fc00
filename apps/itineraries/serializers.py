"""Serializers for itinerary requests."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from apps.catalog.models import TourType


def itinerary_days_from(data) -> list[tuple[str, list[str]]]:
    """(tour_type, landmark_ids) pairs from validated itinerary data."""

    return [
        (day.get("tour_type", ""), [str(landmark_id) for landmark_id in day["landmark_ids"]])
        for day in data["days"]
    ]


class ItineraryDaySerializer(serializers.Serializer):
    tour_type = serializers.ChoiceField(choices=TourType.choices, required=False, allow_blank=True, default="")
    landmark_ids = serializers.ListField(child=serializers.UUIDField(), min_length=1)


class ItineraryRequestSerializer(serializers.Serializer):
    """Landmark ids per day plus the full-package flag.

    Used both for quotes and inside custom itinerary bookings.
    """

    days = ItineraryDaySerializer(many=True, min_length=1, max_length=2)
    is_full_package = serializers.BooleanField(default=False)

    def itinerary_days(self) -> list[tuple[str, list[str]]]:
        return itinerary_days_from(self.validated_data)
