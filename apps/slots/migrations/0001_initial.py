from decimal import Decimal

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("resources", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Slot",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("start_time", models.DateTimeField()),
                ("end_time", models.DateTimeField()),
                ("price", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=10)),
                ("is_booked", models.BooleanField(default=False)),
                ("schedule_date", models.DateField(help_text="Local calendar date whose schedule produced the slot.")),
                ("slot_name", models.CharField(blank=True, max_length=255)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "resource",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="slots",
                        to="resources.resource",
                    ),
                ),
            ],
            options={
                "verbose_name": "Slot",
                "verbose_name_plural": "Slots",
                "ordering": ["resource", "start_time"],
                "indexes": [
                    models.Index(fields=["resource", "schedule_date"], name="slot_resource_date_idx"),
                    models.Index(fields=["end_time", "is_booked"], name="slot_end_booked_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("resource", "start_time"), name="slot_unique_start_per_resource"),
                    models.CheckConstraint(
                        condition=models.Q(("end_time__gt", models.F("start_time"))),
                        name="slot_valid_interval",
                    ),
                ],
            },
        ),
    ]
