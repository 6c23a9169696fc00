"""API views for the booking domain."""

from __future__ import annotations

import uuid

from rest_framework import mixins, permissions, serializers, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.exceptions import PermissionDenied  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.catalog.models import Tour, Vehicle
from shared.domain.value_objects import TimeWindow

from .application.command_handlers import UpdateBookingStatusCommand, UpdateBookingStatusHandler
from .availability import AvailabilityAggregator, CountingMode
from .domain.entities import BookingType, InvalidStatusTransition
from .models import Booking
from .queries import BookingFilters, BookingQueryService, QueryMode, decode_cursor, encode_cursor
from .repositories import BookingStoreError, DjangoBookingRepository
from .serializers import (
    AvailabilityQuerySerializer,
    AvailabilityResultSerializer,
    BookingCreateSerializer,
    BookingRecordSerializer,
    BookingSerializer,
    BookingStoreUnavailable,
)
from .services import active_tour_bookings


def _is_operator(user) -> bool:  # type: ignore
    return bool(getattr(user, "is_staff", False) or getattr(user, "is_superuser", False))


class IsBookingStakeholder(permissions.BasePermission):
    """The customer who made the booking and operators have access to it."""

    def has_object_permission(self, request, view, obj: Booking):  # type: ignore
        user = request.user
        if not user.is_authenticated:
            return False
        if _is_operator(user):
            return True
        return obj.user_id == str(user.pk)


class BookingViewSet(
    mixins.CreateModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """Viewset for creating, browsing and managing bookings."""

    queryset = Booking.objects.all()
    permission_classes = [permissions.IsAuthenticated, IsBookingStakeholder]

    def get_serializer_class(self):  # type: ignore
        if self.action == "create":
            return BookingCreateSerializer
        return BookingSerializer

    def get_queryset(self):  # type: ignore
        user = self.request.user
        qs = super().get_queryset()
        if _is_operator(user):
            return qs
        return qs.filter(user_id=str(user.pk))

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = serializer.save()
        read_serializer = BookingSerializer(booking, context=self.get_serializer_context())
        headers = self.get_success_headers(read_serializer.data)
        return Response(read_serializer.data, status=status.HTTP_201_CREATED, headers=headers)

    def list(self, request, *args, **kwargs):  # type: ignore
        """Newest first, one page per request, or one bounded search when ``search`` is set."""

        params = request.query_params
        filters = BookingFilters.from_params(params)
        if not _is_operator(request.user):
            filters = BookingFilters(
                status=filters.status,
                booking_type=filters.booking_type,
                user_id=str(request.user.pk),
            )

        cursor = None
        if params.get("cursor"):
            try:
                cursor = decode_cursor(params["cursor"])
            except ValueError as exc:
                raise serializers.ValidationError({"cursor": [str(exc)]})

        service = BookingQueryService(DjangoBookingRepository())
        term = params.get("search", "").strip()
        try:
            page = service.search(filters, term) if term else service.fetch_page(filters, cursor)
        except BookingStoreError as exc:
            raise BookingStoreUnavailable(str(exc))

        context = self.get_serializer_context()
        return Response({
            "mode": (QueryMode.SEARCH if term else QueryMode.PAGE).value,
            "results": BookingRecordSerializer(page.bookings, many=True, context=context).data,
            "has_more": page.has_more,
            "next_cursor": encode_cursor(page.next_cursor) if page.next_cursor else None,
            "count": len(page.bookings),
        })

    def _change_status(self, request, new_status: str) -> Response:  # type: ignore
        booking: Booking = self.get_object()  # type: ignore
        command = UpdateBookingStatusCommand(
            booking_id=str(booking.pk),
            status=new_status,
            changed_by=str(request.user.pk),
        )
        try:
            booking = UpdateBookingStatusHandler().handle(command)
        except InvalidStatusTransition as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response({"id": str(booking.pk), "status": booking.status}, status=status.HTTP_200_OK)

    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):  # type: ignore
        return self._change_status(request, Booking.Status.CANCELLED)

    @action(detail=True, methods=["post"], permission_classes=[permissions.IsAdminUser])
    def confirm(self, request, pk=None):  # type: ignore
        return self._change_status(request, Booking.Status.CONFIRMED)

    @action(detail=True, methods=["post"], permission_classes=[permissions.IsAdminUser])
    def complete(self, request, pk=None):  # type: ignore
        return self._change_status(request, Booking.Status.COMPLETED)

    @action(detail=False, methods=["get"], permission_classes=[permissions.AllowAny])
    def availability(self, request):  # type: ignore
        """Units of one vehicle or tour still free for a window."""

        query = AvailabilityQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        data = query.validated_data

        model = Vehicle if data["booking_type"] == Booking.Type.VEHICLE else Tour
        resource = model.objects.filter(pk=data["resource_id"]).first() if _is_uuid(data["resource_id"]) else None
        if resource is None:
            return Response({"detail": "Resource not found."}, status=status.HTTP_404_NOT_FOUND)

        aggregator = AvailabilityAggregator(DjangoBookingRepository())
        try:
            result = aggregator.check_resource(
                resource.resource_id,
                TimeWindow(data["start"], data["end"]),
                resource.stock_count,
                mode=CountingMode(data["mode"]),
                booking_type=BookingType(data["booking_type"]),
            )
        except BookingStoreError as exc:
            raise BookingStoreUnavailable(str(exc))
        return Response(AvailabilityResultSerializer(result).data)

    @action(detail=False, methods=["get"], url_path="active-summary")
    def active_summary(self, request):  # type: ignore
        """Pending and confirmed tour bookings the caller already holds."""

        user_id = request.query_params.get("user_id") or str(request.user.pk)
        if user_id != str(request.user.pk) and not _is_operator(request.user):
            raise PermissionDenied("You can only see your own bookings.")

        try:
            summary = active_tour_bookings(user_id)
        except BookingStoreError as exc:
            raise BookingStoreUnavailable(str(exc))

        context = self.get_serializer_context()
        return Response({
            "has_pending": summary.has_pending,
            "has_confirmed": summary.has_confirmed,
            "pending_count": summary.pending_count,
            "confirmed_count": summary.confirmed_count,
            "bookings": BookingRecordSerializer(summary.bookings, many=True, context=context).data,
        })


def _is_uuid(value: str) -> bool:
    try:
        uuid.UUID(str(value))
    except ValueError:
        return False
    return True
