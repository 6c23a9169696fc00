"""Admin registrations for the catalog."""

from __future__ import annotations

from django.contrib import admin  # type: ignore

from .models import Landmark, Tour, Vehicle


@admin.register(Vehicle)
class VehicleAdmin(admin.ModelAdmin):
    list_display = ("name", "type", "price_per_day", "stock_count", "available")
    list_filter = ("type", "transmission", "available", "with_driver")
    search_fields = ("name",)
    readonly_fields = ("created_at", "updated_at")


@admin.register(Tour)
class TourAdmin(admin.ModelAdmin):
    list_display = ("title", "category", "price", "daily_slots", "available", "featured")
    list_filter = ("category", "available", "featured")
    search_fields = ("title", "location")
    readonly_fields = ("created_at", "updated_at")


@admin.register(Landmark)
class LandmarkAdmin(admin.ModelAdmin):
    list_display = ("name", "tour_type", "category", "estimated_duration", "is_active")
    list_filter = ("tour_type", "category", "is_active")
    search_fields = ("name",)
