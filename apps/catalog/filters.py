"""FilterSet definitions for catalog listings."""

from __future__ import annotations

import django_filters  # type: ignore

from .models import Landmark, Tour, Vehicle


class VehicleFilterSet(django_filters.FilterSet):
    """Filters used by the vehicle list."""

    type = django_filters.CharFilter(field_name="type", lookup_expr="exact")
    transmission = django_filters.CharFilter(field_name="transmission", lookup_expr="exact")
    with_driver = django_filters.BooleanFilter(field_name="with_driver")
    capacity_min = django_filters.NumberFilter(field_name="capacity", lookup_expr="gte")
    price_min = django_filters.NumberFilter(field_name="price_per_day", lookup_expr="gte")
    price_max = django_filters.NumberFilter(field_name="price_per_day", lookup_expr="lte")

    class Meta:
        model = Vehicle
        fields = ["type", "transmission", "with_driver"]


class TourFilterSet(django_filters.FilterSet):
    category = django_filters.CharFilter(field_name="category", lookup_expr="exact")
    featured = django_filters.BooleanFilter(field_name="featured")
    price_max = django_filters.NumberFilter(field_name="price", lookup_expr="lte")
    guests = django_filters.NumberFilter(method="filter_guests")

    class Meta:
        model = Tour
        fields = ["category", "featured"]

    def filter_guests(self, queryset, name, value):  # type: ignore
        return queryset.filter(min_group_size__lte=value, max_group_size__gte=value)


class LandmarkFilterSet(django_filters.FilterSet):
    tour_type = django_filters.CharFilter(field_name="tour_type", lookup_expr="exact")
    category = django_filters.CharFilter(field_name="category", lookup_expr="exact")
    # CSV of ids, used by the itinerary builder to reload a saved route
    ids = django_filters.CharFilter(method="filter_ids")

    class Meta:
        model = Landmark
        fields = ["tour_type", "category"]

    def filter_ids(self, queryset, name, value):  # type: ignore
        ids = [item for item in str(value).replace(" ", "").split(",") if item]
        if not ids:
            return queryset
        return queryset.filter(id__in=ids)
