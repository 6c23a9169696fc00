"""Itinerary API views."""

from __future__ import annotations

from rest_framework import permissions, serializers  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from . import geo, pricing
from .domain import MultiDayItinerary, TWO_DAYS
from .serializers import ItineraryRequestSerializer
from .services import UnknownLandmarkError, load_landmarks, quote_itinerary


class ItineraryQuoteView(APIView):
    """Recomputes time and price of an itinerary from catalog landmarks.

    Nothing is stored; totals sent by the client are never read.
    """

    permission_classes = [permissions.AllowAny]

    def post(self, request):  # type: ignore
        serializer = ItineraryRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        days = serializer.itinerary_days()
        is_full_package = serializer.validated_data["is_full_package"]

        try:
            itinerary = quote_itinerary(days, is_full_package)
            routes = [load_landmarks(landmark_ids) for _, landmark_ids in days]
        except UnknownLandmarkError as exc:
            raise serializers.ValidationError({"days": [str(exc)]})
        except ValueError as exc:
            raise serializers.ValidationError({"non_field_errors": [str(exc)]})

        if isinstance(itinerary, MultiDayItinerary):
            day_minutes = [plan.total_time for plan in itinerary.days]
            breakdown = pricing.multi_day_breakdown(
                day_minutes[0],
                day_minutes[1] if itinerary.duration == TWO_DAYS else 0,
                is_full_package,
                len(itinerary.days[0].landmarks),
                len(itinerary.days[1].landmarks) if itinerary.duration == TWO_DAYS else 0,
            )
        else:
            day_minutes = [itinerary.total_time]
            breakdown = pricing.pricing_breakdown(itinerary.total_time, is_full_package, len(itinerary.landmarks))

        return Response({
            "itinerary": itinerary.to_document(),
            "total_price": itinerary.total_price,
            "breakdown": breakdown,
            "days": [
                {
                    "total_time": minutes,
                    "duration": geo.format_duration(minutes),
                    "distance_km": round(geo.route_distance(landmark.location for landmark in route), 2),
                    "full_package_suggested": pricing.is_full_package_better(minutes),
                }
                for minutes, route in zip(day_minutes, routes)
            ],
            "pricing": pricing.pricing_constants(),
        })
