from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Resource",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("business_name", models.CharField(blank=True, max_length=255)),
                ("name", models.CharField(max_length=255)),
                (
                    "base_price",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        help_text="Price of a slot when no pricing rule matches.",
                        max_digits=10,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.00"))],
                    ),
                ),
                ("currency", models.CharField(default="MMK", max_length=3)),
                (
                    "slot_duration_minutes",
                    models.PositiveSmallIntegerField(
                        default=60, validators=[django.core.validators.MinValueValidator(1)]
                    ),
                ),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "owner",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="resources",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Resource",
                "verbose_name_plural": "Resources",
                "ordering": ["name", "id"],
                "indexes": [models.Index(fields=["owner", "is_active"], name="resource_owner_active_idx")],
            },
        ),
        migrations.CreateModel(
            name="PricingRule",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("rule_name", models.CharField(max_length=100)),
                (
                    "day_of_week",
                    models.JSONField(
                        blank=True,
                        default=list,
                        help_text="Weekdays the rule applies to (1=Mon ... 7=Sun, 0 also means Sunday). Empty means every day.",
                    ),
                ),
                ("start_time", models.TimeField()),
                ("end_time", models.TimeField(help_text="Exclusive end of the local time window.")),
                (
                    "price_override",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=10,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.00"))],
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "resource",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="pricing_rules",
                        to="resources.resource",
                    ),
                ),
            ],
            options={
                "verbose_name": "Pricing rule",
                "verbose_name_plural": "Pricing rules",
                "ordering": ["id"],
                "indexes": [models.Index(fields=["resource", "id"], name="pricing_rule_resource_idx")],
            },
        ),
        migrations.CreateModel(
            name="WeeklyScheduleRule",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "day_of_week",
                    models.PositiveSmallIntegerField(
                        choices=[
                            (1, "Monday"),
                            (2, "Tuesday"),
                            (3, "Wednesday"),
                            (4, "Thursday"),
                            (5, "Friday"),
                            (6, "Saturday"),
                            (7, "Sunday"),
                        ]
                    ),
                ),
                ("is_open", models.BooleanField(default=False)),
                ("open_time", models.TimeField(blank=True, null=True)),
                (
                    "close_time",
                    models.TimeField(
                        blank=True,
                        help_text="A close time at or before the open time falls on the next day.",
                        null=True,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "resource",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="schedule_rules",
                        to="resources.resource",
                    ),
                ),
            ],
            options={
                "verbose_name": "Weekly schedule rule",
                "verbose_name_plural": "Weekly schedule rules",
                "ordering": ["resource", "day_of_week"],
                "constraints": [
                    models.UniqueConstraint(fields=("resource", "day_of_week"), name="schedule_rule_one_per_day"),
                    models.CheckConstraint(
                        condition=models.Q(("day_of_week__gte", 1), ("day_of_week__lte", 7)),
                        name="schedule_rule_valid_weekday",
                    ),
                ],
            },
        ),
    ]
