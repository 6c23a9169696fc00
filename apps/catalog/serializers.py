"""Serializers for the catalog."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Landmark, Tour, Vehicle


class VehicleSerializer(serializers.ModelSerializer):
    class Meta:
        model = Vehicle
        fields = [
            "id",
            "name",
            "type",
            "price_per_day",
            "capacity",
            "transmission",
            "with_driver",
            "stock_count",
            "available",
            "image_url",
        ]


class TourSerializer(serializers.ModelSerializer):
    class Meta:
        model = Tour
        fields = [
            "id",
            "title",
            "category",
            "short_description",
            "price",
            "duration_days",
            "location",
            "min_group_size",
            "max_group_size",
            "daily_slots",
            "available",
            "featured",
        ]


class LandmarkSerializer(serializers.ModelSerializer):
    class Meta:
        model = Landmark
        fields = [
            "id",
            "name",
            "description",
            "lat",
            "lng",
            "estimated_duration",
            "image_url",
            "category",
            "tour_type",
        ]


class WindowQuerySerializer(serializers.Serializer):
    start = serializers.DateTimeField()
    end = serializers.DateTimeField()

    def validate(self, attrs):  # type: ignore
        if attrs["end"] < attrs["start"]:
            raise serializers.ValidationError("end must not be before start.")
        return attrs


class MonthQuerySerializer(serializers.Serializer):
    year = serializers.IntegerField(min_value=2000, max_value=2100)
    month = serializers.IntegerField(min_value=1, max_value=12)


class VehicleAvailabilitySerializer(serializers.Serializer):
    """Vehicle listing with the units still free for the requested window."""

    vehicle = VehicleSerializer()
    total_stock = serializers.IntegerField()
    booked_count = serializers.IntegerField()
    available_count = serializers.IntegerField()
    is_available = serializers.BooleanField()
