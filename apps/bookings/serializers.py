"""Serializers for the booking domain."""

from __future__ import annotations

from django.utils import timezone  # type: ignore
from rest_framework import serializers  # type: ignore
from rest_framework.exceptions import APIException  # type: ignore

from apps.itineraries import domain as itinerary_domain
from apps.itineraries.serializers import ItineraryRequestSerializer, itinerary_days_from
from apps.itineraries.services import UnknownLandmarkError

from .application.command_handlers import (
    CapacityUnavailableError,
    CreateBookingCommand,
    CreateBookingHandler,
    ResourceNotFoundError,
)
from .availability import CountingMode
from .domain.entities import BookingType
from .models import Booking
from .repositories import BookingStoreError


class BookingStoreUnavailable(APIException):
    status_code = 503
    default_detail = "Bookings are temporarily unavailable."
    default_code = "booking_store_unavailable"


class ItineraryDisplayMixin(serializers.Serializer):
    """Short texts about the stored itinerary, shown on booking lists."""

    itinerary_summary = serializers.SerializerMethodField()
    itinerary_landmarks = serializers.SerializerMethodField()
    itinerary_pricing = serializers.SerializerMethodField()
    itinerary_image = serializers.SerializerMethodField()

    def _details(self, obj):  # type: ignore
        return itinerary_domain.parse_itinerary_details(obj.itinerary_details)

    def get_itinerary_summary(self, obj) -> str | None:  # type: ignore
        details = self._details(obj)
        if not itinerary_domain.has_valid_itinerary(details):
            return None
        return itinerary_domain.itinerary_summary(details)

    def get_itinerary_landmarks(self, obj) -> str | None:  # type: ignore
        details = self._details(obj)
        if not itinerary_domain.has_valid_itinerary(details):
            return None
        return itinerary_domain.landmark_names(details)

    def get_itinerary_pricing(self, obj) -> str:  # type: ignore
        return itinerary_domain.pricing_breakdown_text(self._details(obj))

    def get_itinerary_image(self, obj) -> str | None:  # type: ignore
        return itinerary_domain.first_landmark_image(self._details(obj))


class BookingSerializer(ItineraryDisplayMixin, serializers.ModelSerializer):
    """Booking as stored, with itinerary display texts."""

    class Meta:
        model = Booking
        fields = [
            "id",
            "resource_id",
            "booking_type",
            "status",
            "start_date",
            "end_date",
            "total_price",
            "user_id",
            "user_name",
            "user_email",
            "group_size",
            "special_requests",
            "contact_phone",
            "guest_name",
            "guest_email",
            "itinerary_details",
            "itinerary_summary",
            "itinerary_landmarks",
            "itinerary_pricing",
            "itinerary_image",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class BookingRecordSerializer(ItineraryDisplayMixin, serializers.Serializer):
    """Read-only view of ``BookingRecord`` values returned by the query engine."""

    id = serializers.CharField()
    resource_id = serializers.CharField()
    booking_type = serializers.CharField(source="booking_type.value")
    status = serializers.CharField(source="status.value")
    start_date = serializers.DateTimeField()
    end_date = serializers.DateTimeField()
    total_price = serializers.DecimalField(max_digits=12, decimal_places=2)
    user_id = serializers.CharField()
    user_name = serializers.CharField()
    user_email = serializers.CharField()
    group_size = serializers.IntegerField()
    special_requests = serializers.CharField()
    contact_phone = serializers.CharField()
    itinerary_details = serializers.JSONField()
    created_at = serializers.DateTimeField()


class BookingCreateSerializer(serializers.Serializer):
    """Creates a vehicle, tour or custom itinerary booking for the caller."""

    booking_type = serializers.ChoiceField(choices=Booking.Type.choices)
    resource_id = serializers.CharField(required=False, allow_blank=True, default="")
    start_date = serializers.DateTimeField(required=False)
    end_date = serializers.DateTimeField(required=False)
    tour_date = serializers.DateField(required=False)
    group_size = serializers.IntegerField(min_value=1, default=1)
    contact_phone = serializers.CharField(required=False, allow_blank=True, default="")
    special_requests = serializers.CharField(required=False, allow_blank=True, default="")
    guest_name = serializers.CharField(required=False, allow_blank=True, default="")
    guest_email = serializers.EmailField(required=False, allow_blank=True, default="")
    itinerary = ItineraryRequestSerializer(required=False)

    def validate(self, attrs):  # type: ignore
        booking_type = attrs["booking_type"]
        itinerary = attrs.get("itinerary")

        if booking_type == Booking.Type.VEHICLE:
            if itinerary:
                raise serializers.ValidationError("Itineraries can only be booked as tours.")
            if not attrs.get("resource_id"):
                raise serializers.ValidationError({"resource_id": ["This field is required."]})
            start, end = attrs.get("start_date"), attrs.get("end_date")
            if start is None or end is None:
                raise serializers.ValidationError("Vehicle bookings need start_date and end_date.")
            if end < start:
                raise serializers.ValidationError("End date must not be before the start date.")
            if start < timezone.now():
                raise serializers.ValidationError("Start date cannot be in the past.")
            return attrs

        tour_date = attrs.get("tour_date")
        if tour_date is None:
            raise serializers.ValidationError({"tour_date": ["This field is required."]})
        if tour_date < timezone.localdate():
            raise serializers.ValidationError({"tour_date": ["Tour date cannot be in the past."]})
        if itinerary and attrs.get("resource_id"):
            raise serializers.ValidationError("A custom itinerary is not booked against a tour.")
        if not itinerary and not attrs.get("resource_id"):
            raise serializers.ValidationError({"resource_id": ["This field is required."]})
        return attrs

    def _command(self, validated) -> CreateBookingCommand:  # type: ignore
        user = self.context["request"].user
        booking_type = BookingType(validated["booking_type"])
        itinerary = validated.get("itinerary")

        if booking_type is BookingType.VEHICLE:
            start, end = validated["start_date"], validated["end_date"]
        else:
            start, end = validated["tour_date"], None

        itinerary_days = itinerary_days_from(itinerary) if itinerary else []

        return CreateBookingCommand(
            booking_type=booking_type,
            start=start,
            end=end,
            resource_id=validated.get("resource_id", ""),
            group_size=validated["group_size"],
            user_id=str(user.pk),
            user_name=user.get_full_name() or user.get_username(),
            user_email=user.email or "",
            guest_name=validated.get("guest_name", ""),
            guest_email=validated.get("guest_email", ""),
            contact_phone=validated.get("contact_phone", ""),
            special_requests=validated.get("special_requests", ""),
            itinerary_days=itinerary_days,
            is_full_package=bool(itinerary and itinerary.get("is_full_package")),
        )

    def create(self, validated_data):  # type: ignore
        command = self._command(validated_data)
        try:
            return CreateBookingHandler().handle(command)
        except CapacityUnavailableError as exc:
            raise serializers.ValidationError({"non_field_errors": [str(exc)]})
        except ResourceNotFoundError as exc:
            raise serializers.ValidationError({"resource_id": [str(exc)]})
        except UnknownLandmarkError as exc:
            raise serializers.ValidationError({"itinerary": [str(exc)]})
        except ValueError as exc:
            raise serializers.ValidationError({"non_field_errors": [str(exc)]})
        except BookingStoreError as exc:
            raise BookingStoreUnavailable(str(exc))


class AvailabilityQuerySerializer(serializers.Serializer):
    resource_id = serializers.CharField()
    booking_type = serializers.ChoiceField(choices=Booking.Type.choices)
    start = serializers.DateTimeField()
    end = serializers.DateTimeField()
    mode = serializers.ChoiceField(
        choices=[(mode.value, mode.value) for mode in CountingMode],
        default=CountingMode.ADMISSION.value,
    )

    def validate(self, attrs):  # type: ignore
        if attrs["end"] < attrs["start"]:
            raise serializers.ValidationError("end must not be before start.")
        return attrs


class AvailabilityResultSerializer(serializers.Serializer):
    resource_id = serializers.CharField()
    total_stock = serializers.IntegerField()
    booked_count = serializers.IntegerField()
    available_count = serializers.IntegerField()
    is_available = serializers.BooleanField()
