"""Catalog API views."""

from __future__ import annotations

from django.utils import timezone  # type: ignore
from django_filters.rest_framework import DjangoFilterBackend  # type: ignore
from rest_framework import permissions, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.filters import OrderingFilter  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.bookings.availability import AvailabilityAggregator, CountingMode, ResourceStock
from apps.bookings.repositories import BookingStoreError, DjangoBookingRepository
from apps.bookings.serializers import BookingStoreUnavailable
from shared.domain.value_objects import TimeWindow

from .filters import LandmarkFilterSet, TourFilterSet, VehicleFilterSet
from .models import Landmark, Tour, Vehicle
from .serializers import (
    LandmarkSerializer,
    MonthQuerySerializer,
    TourSerializer,
    VehicleAvailabilitySerializer,
    VehicleSerializer,
    WindowQuerySerializer,
)


class VehicleViewSet(viewsets.ReadOnlyModelViewSet):
    """Vehicles offered for rent."""

    queryset = Vehicle.objects.filter(available=True)
    serializer_class = VehicleSerializer
    permission_classes = [permissions.AllowAny]
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_class = VehicleFilterSet
    ordering_fields = ["price_per_day", "capacity", "name"]

    @action(detail=False, methods=["get"])
    def availability(self, request):  # type: ignore
        """Free units of every listed vehicle for ``start``..``end`` (confirmed bookings only)."""

        query = WindowQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        window = TimeWindow(query.validated_data["start"], query.validated_data["end"])

        vehicles = list(self.filter_queryset(self.get_queryset()))
        aggregator = AvailabilityAggregator(DjangoBookingRepository())
        try:
            results = aggregator.check_resources(
                [ResourceStock(vehicle.resource_id, vehicle.stock_count) for vehicle in vehicles],
                window,
                mode=CountingMode.CAPACITY,
            )
        except BookingStoreError as exc:
            raise BookingStoreUnavailable(str(exc))

        rows = [
            {
                "vehicle": vehicle,
                "total_stock": results[vehicle.resource_id].total_stock,
                "booked_count": results[vehicle.resource_id].booked_count,
                "available_count": results[vehicle.resource_id].available_count,
                "is_available": results[vehicle.resource_id].is_available,
            }
            for vehicle in vehicles
        ]
        return Response(VehicleAvailabilitySerializer(rows, many=True).data)


class TourViewSet(viewsets.ReadOnlyModelViewSet):
    """Scheduled tours."""

    queryset = Tour.objects.filter(available=True)
    serializer_class = TourSerializer
    permission_classes = [permissions.AllowAny]
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    filterset_class = TourFilterSet
    ordering_fields = ["price", "title"]

    @action(detail=True, methods=["get"], url_path="available-dates")
    def available_dates(self, request, pk=None):  # type: ignore
        """Dates of a month, from today on, with a free slot for this tour."""

        tour: Tour = self.get_object()  # type: ignore
        today = timezone.localdate()
        query = MonthQuerySerializer(
            data={
                "year": request.query_params.get("year", today.year),
                "month": request.query_params.get("month", today.month),
            }
        )
        query.is_valid(raise_exception=True)

        aggregator = AvailabilityAggregator(DjangoBookingRepository())
        try:
            days = aggregator.available_days(
                ResourceStock(tour.resource_id, tour.stock_count),
                query.validated_data["year"],
                query.validated_data["month"],
                today=today,
                tz=timezone.get_current_timezone(),
                duration_days=tour.duration_days,
            )
        except BookingStoreError as exc:
            raise BookingStoreUnavailable(str(exc))

        return Response({
            "tour_id": tour.resource_id,
            "year": query.validated_data["year"],
            "month": query.validated_data["month"],
            "available_dates": [day.isoformat() for day in days],
        })


class LandmarkViewSet(viewsets.ReadOnlyModelViewSet):
    """Landmarks customers can add to a custom itinerary."""

    queryset = Landmark.objects.filter(is_active=True)
    serializer_class = LandmarkSerializer
    permission_classes = [permissions.AllowAny]
    filter_backends = [DjangoFilterBackend]
    filterset_class = LandmarkFilterSet
