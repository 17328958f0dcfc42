import os

from celery import Celery
from celery.schedules import crontab  # type: ignore

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.dev")

app = Celery("slotbook")

app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()


# ============================================================================
# CELERY BEAT SCHEDULE (Periodic Tasks)
# ============================================================================

app.conf.beat_schedule = {
    # Purge stale unbooked slots - daily
    "sweep-stale-slots": {
        "task": "slots.sweep_stale_slots",
        "schedule": crontab(minute=30, hour=3),
    },
    # Keep the generated slot horizon filled - daily, after the sweep
    "ensure-slot-horizon": {
        "task": "slots.ensure_slot_horizon",
        "schedule": crontab(minute=0, hour=4),
    },
}

app.conf.timezone = "UTC"
