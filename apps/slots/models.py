"""Slot inventory models."""

from __future__ import annotations

from decimal import Decimal

from django.db import models  # type: ignore
from django.db.models import F, Q  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Slot(models.Model):
    """Бронируемый интервал фиксированной длительности с рассчитанной ценой.

    Slots are created and replaced only by regeneration; bookings only flip
    ``is_booked``/``booking`` through conditional updates.
    """

    resource = models.ForeignKey(
        "resources.Resource",
        on_delete=models.CASCADE,
        related_name="slots",
    )
    start_time = models.DateTimeField()
    end_time = models.DateTimeField()
    price = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))
    is_booked = models.BooleanField(default=False)
    booking = models.ForeignKey(
        "bookings.Booking",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="held_slots",
        help_text=_("Confirmed booking currently holding the slot."),
    )
    schedule_date = models.DateField(
        help_text=_("Local calendar date whose schedule produced the slot."),
    )
    slot_name = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Slot")
        verbose_name_plural = _("Slots")
        ordering = ["resource", "start_time"]
        constraints = [
            models.UniqueConstraint(
                fields=["resource", "start_time"],
                name="slot_unique_start_per_resource",
            ),
            models.CheckConstraint(
                condition=Q(end_time__gt=F("start_time")),
                name="slot_valid_interval",
            ),
        ]
        indexes = [
            models.Index(fields=["resource", "schedule_date"], name="slot_resource_date_idx"),
            models.Index(fields=["end_time", "is_booked"], name="slot_end_booked_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.slot_name or self.resource_id} {self.start_time:%Y-%m-%d %H:%M}"

    @property
    def duration_minutes(self) -> int:
        return int((self.end_time - self.start_time).total_seconds() // 60)
