"""Resource domain models.

A resource is a single bookable unit owned by a business. Its weekly
schedule decides when slots exist, its pricing rules decide what they cost.
Times on both templates are local wall-clock values in the platform's fixed
offset (see shared.infrastructure.clock).
"""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings  # type: ignore
from django.core.exceptions import ValidationError  # type: ignore
from django.core.validators import MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Resource(models.Model):
    """Bookable unit (e.g. one futsal court) belonging to a business."""

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="resources",
    )
    business_name = models.CharField(max_length=255, blank=True)
    name = models.CharField(max_length=255)
    base_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text=_("Price of a slot when no pricing rule matches."),
    )
    currency = models.CharField(max_length=3, default="MMK")
    slot_duration_minutes = models.PositiveSmallIntegerField(
        default=60,
        validators=[MinValueValidator(1)],
    )
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Resource")
        verbose_name_plural = _("Resources")
        ordering = ["name", "id"]
        indexes = [
            models.Index(fields=["owner", "is_active"], name="resource_owner_active_idx"),
        ]

    def __str__(self) -> str:
        if self.business_name:
            return f"{self.business_name}: {self.name}"
        return self.name


class WeeklyScheduleRule(models.Model):
    """Open/close template of a resource for one weekday."""

    class Weekday(models.IntegerChoices):
        MONDAY = 1, _("Monday")
        TUESDAY = 2, _("Tuesday")
        WEDNESDAY = 3, _("Wednesday")
        THURSDAY = 4, _("Thursday")
        FRIDAY = 5, _("Friday")
        SATURDAY = 6, _("Saturday")
        SUNDAY = 7, _("Sunday")

    resource = models.ForeignKey(
        Resource,
        on_delete=models.CASCADE,
        related_name="schedule_rules",
    )
    day_of_week = models.PositiveSmallIntegerField(choices=Weekday.choices)
    is_open = models.BooleanField(default=False)
    open_time = models.TimeField(null=True, blank=True)
    close_time = models.TimeField(
        null=True,
        blank=True,
        help_text=_("A close time at or before the open time falls on the next day."),
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Weekly schedule rule")
        verbose_name_plural = _("Weekly schedule rules")
        ordering = ["resource", "day_of_week"]
        constraints = [
            models.UniqueConstraint(
                fields=["resource", "day_of_week"],
                name="schedule_rule_one_per_day",
            ),
            models.CheckConstraint(
                condition=models.Q(day_of_week__gte=1) & models.Q(day_of_week__lte=7),
                name="schedule_rule_valid_weekday",
            ),
        ]

    def __str__(self) -> str:
        if not self.is_open:
            return f"{self.resource}: {self.get_day_of_week_display()} closed"
        return f"{self.resource}: {self.get_day_of_week_display()} {self.open_time}-{self.close_time}"

    def clean(self) -> None:
        if self.is_open and (self.open_time is None or self.close_time is None):
            raise ValidationError(_("Open days need both an open and a close time."))


class PricingRule(models.Model):
    """Time-boxed override of a resource's base price.

    Rules are evaluated in stored order (ascending id); the first match wins.
    """

    resource = models.ForeignKey(
        Resource,
        on_delete=models.CASCADE,
        related_name="pricing_rules",
    )
    rule_name = models.CharField(max_length=100)
    day_of_week = models.JSONField(
        default=list,
        blank=True,
        help_text=_("Weekdays the rule applies to (1=Mon ... 7=Sun, 0 also means Sunday). Empty means every day."),
    )
    start_time = models.TimeField()
    end_time = models.TimeField(help_text=_("Exclusive end of the local time window."))
    price_override = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Pricing rule")
        verbose_name_plural = _("Pricing rules")
        ordering = ["id"]
        indexes = [
            models.Index(fields=["resource", "id"], name="pricing_rule_resource_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.rule_name}: {self.start_time}-{self.end_time} @ {self.price_override}"
