import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ("slots", "0001_initial"),
        ("bookings", "0001_initial"),
    ]

    operations = [
        migrations.AddField(
            model_name="slot",
            name="booking",
            field=models.ForeignKey(
                blank=True,
                help_text="Confirmed booking currently holding the slot.",
                null=True,
                on_delete=django.db.models.deletion.SET_NULL,
                related_name="held_slots",
                to="bookings.booking",
            ),
        ),
    ]
