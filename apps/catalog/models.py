"""Catalog models for CebuGo.

Vehicles and tours are the rentable resources whose stock the booking engine
protects; landmarks are the stops customers assemble into custom itineraries.
The booking engine only reads these records.
"""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.core.validators import MaxValueValidator, MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from shared.domain.value_objects import GeoPoint


class TourType(models.TextChoices):
    CEBU_CITY = "cebu-city", _("Cebu City")
    MOUNTAIN = "mountain", _("Mountain")


class Vehicle(models.Model):
    """A rentable vehicle model; ``stock_count`` units can be out at once."""

    class Type(models.TextChoices):
        SEDAN = "sedan", _("Sedan")
        SUV = "suv", _("SUV")
        VAN = "van", _("Van")

    class Transmission(models.TextChoices):
        AUTOMATIC = "automatic", _("Automatic")
        MANUAL = "manual", _("Manual")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    type = models.CharField(max_length=20, choices=Type.choices, default=Type.SEDAN)
    price_per_day = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))
    capacity = models.PositiveSmallIntegerField(default=4)
    transmission = models.CharField(
        max_length=20,
        choices=Transmission.choices,
        default=Transmission.AUTOMATIC,
    )
    with_driver = models.BooleanField(default=False)
    stock_count = models.PositiveIntegerField(
        default=1,
        help_text=_("Units of this vehicle that can be rented concurrently."),
    )
    available = models.BooleanField(default=True)
    image_url = models.URLField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Vehicle")
        verbose_name_plural = _("Vehicles")
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name

    @property
    def resource_id(self) -> str:
        return str(self.pk)

    @property
    def price_per_unit(self) -> Decimal:
        return self.price_per_day


class Tour(models.Model):
    """A scheduled tour; each date offers ``daily_slots`` bookable groups."""

    class Category(models.TextChoices):
        BEACH = "beach", _("Beach")
        ADVENTURE = "adventure", _("Adventure")
        CULTURAL = "cultural", _("Cultural")
        FOOD = "food", _("Food")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=255)
    category = models.CharField(max_length=20, choices=Category.choices, default=Category.CULTURAL)
    short_description = models.CharField(max_length=500, blank=True)
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text=_("Price per guest."),
    )
    duration_days = models.PositiveSmallIntegerField(default=1)
    location = models.CharField(max_length=255, blank=True)
    min_group_size = models.PositiveSmallIntegerField(default=1)
    max_group_size = models.PositiveSmallIntegerField(default=10)
    daily_slots = models.PositiveIntegerField(
        default=1,
        help_text=_("Groups that can be booked on the same date."),
    )
    available = models.BooleanField(default=True)
    featured = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Tour")
        verbose_name_plural = _("Tours")
        ordering = ["title"]

    def __str__(self) -> str:
        return self.title

    @property
    def resource_id(self) -> str:
        return str(self.pk)

    @property
    def stock_count(self) -> int:
        return self.daily_slots

    @property
    def price_per_unit(self) -> Decimal:
        return self.price


class Landmark(models.Model):
    """A stop available for custom itineraries."""

    class Category(models.TextChoices):
        HISTORICAL = "historical", _("Historical")
        RELIGIOUS = "religious", _("Religious")
        CULTURAL = "cultural", _("Cultural")
        NATURE = "nature", _("Nature")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    lat = models.FloatField(validators=[MinValueValidator(-90), MaxValueValidator(90)])
    lng = models.FloatField(validators=[MinValueValidator(-180), MaxValueValidator(180)])
    estimated_duration = models.PositiveIntegerField(
        help_text=_("Minutes a visitor spends on site."),
    )
    image_url = models.URLField(blank=True)
    category = models.CharField(max_length=20, choices=Category.choices, default=Category.HISTORICAL)
    tour_type = models.CharField(max_length=20, choices=TourType.choices, default=TourType.CEBU_CITY)
    is_active = models.BooleanField(default=True)

    class Meta:
        verbose_name = _("Landmark")
        verbose_name_plural = _("Landmarks")
        ordering = ["name"]
        indexes = [
            models.Index(fields=["tour_type", "category"]),
        ]

    def __str__(self) -> str:
        return self.name

    @property
    def location(self) -> GeoPoint:
        return GeoPoint(self.lat, self.lng)
