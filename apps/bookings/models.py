"""Booking models for CebuGo."""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.core.exceptions import ValidationError  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from .domain.entities import BookingStatus, check_transition

CUSTOM_ITINERARY_RESOURCE = "custom-itinerary"


class Booking(models.Model):
    """Reservation of a vehicle or a tour date.

    The booked resource is referenced by ``resource_id`` (the catalog primary
    key as text) rather than a foreign key so that custom itineraries, which
    have no catalog row, share the table.
    """

    class Status(models.TextChoices):
        PENDING = "pending", _("Pending")
        CONFIRMED = "confirmed", _("Confirmed")
        CANCELLED = "cancelled", _("Cancelled")
        COMPLETED = "completed", _("Completed")

    class Type(models.TextChoices):
        TOUR = "tour", _("Tour")
        VEHICLE = "vehicle", _("Vehicle")

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    resource_id = models.CharField(max_length=64, db_index=True)
    booking_type = models.CharField(max_length=20, choices=Type.choices, default=Type.TOUR)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    start_date = models.DateTimeField()
    end_date = models.DateTimeField()
    total_price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    # Customer details are copied onto the booking when it is made
    user_id = models.CharField(max_length=64, blank=True, db_index=True)
    user_name = models.CharField(max_length=255, blank=True)
    user_email = models.EmailField(blank=True)
    group_size = models.PositiveSmallIntegerField(default=1)
    special_requests = models.TextField(blank=True)
    contact_phone = models.CharField(max_length=32, blank=True)
    guest_name = models.CharField(max_length=255, blank=True)
    guest_email = models.EmailField(blank=True)
    itinerary_details = models.JSONField(
        null=True,
        blank=True,
        help_text=_("Priced itinerary document for custom tours."),
    )
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Booking")
        verbose_name_plural = _("Bookings")
        ordering = ["-created_at", "-id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(end_date__gte=models.F("start_date")),
                name="booking_valid_window",
            ),
            models.CheckConstraint(
                condition=models.Q(total_price__gte=0),
                name="booking_non_negative_price",
            ),
        ]
        indexes = [
            models.Index(fields=["resource_id", "status", "start_date"]),
            models.Index(fields=["booking_type", "status"]),
        ]

    def __str__(self) -> str:
        return f"Booking {self.pk} for {self.resource_id}"

    def clean(self) -> None:
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValidationError(_("End date must not be before the start date."))

    @property
    def is_custom_itinerary(self) -> bool:
        return self.resource_id == CUSTOM_ITINERARY_RESOURCE

    def transition_to(self, status: str) -> str:
        """Move to ``status`` if the lifecycle allows it; returns the old status.

        Raises ``InvalidStatusTransition`` otherwise. The caller saves.
        """

        previous = self.status
        check_transition(BookingStatus(previous), BookingStatus(status))
        self.status = status
        return previous
