"""Admin registration for bookings."""

from __future__ import annotations

from django.contrib import admin

from .models import Booking


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "booking_type",
        "resource_id",
        "user_name",
        "status",
        "start_date",
        "end_date",
        "total_price",
        "created_at",
    )
    list_filter = ("status", "booking_type", "start_date")
    search_fields = ("id", "user_name", "user_email", "resource_id")
    readonly_fields = (
        "id",
        "created_at",
        "updated_at",
        "total_price",
        "itinerary_details",
    )
