from datetime import datetime, time, timedelta, timezone as dt_timezone
from decimal import Decimal
from unittest import mock

import pytest
from django.contrib.auth import get_user_model
from django.db import DatabaseError
from django.test import override_settings

from apps.bookings.models import Booking
from apps.resources.models import Resource, WeeklyScheduleRule
from apps.slots import tasks
from apps.slots.models import Slot
from apps.slots.services.retention import sweep_stale_slots
from shared.infrastructure.clock import Clock

NOW = datetime(2024, 6, 20, 6, 0, tzinfo=dt_timezone.utc)


@pytest.fixture
def clock():
    return Clock(390, now_func=lambda: NOW)


@pytest.fixture
def court():
    owner = get_user_model().objects.create_user(username="owner", password="pass")
    return Resource.objects.create(owner=owner, name="Court 1", base_price=Decimal("100.00"))


def make_slot(resource, ends_days_ago, **kwargs):
    end = NOW - timedelta(days=ends_days_ago)
    return Slot.objects.create(
        resource=resource,
        start_time=end - timedelta(hours=1),
        end_time=end,
        price=resource.base_price,
        schedule_date=end.date(),
        **kwargs,
    )


@pytest.mark.django_db
def test_sweeper_deletes_only_stale_unclaimed_slots(court, clock):
    stale = make_slot(court, 8)
    recent = make_slot(court, 6)
    booked = make_slot(court, 9, is_booked=True)
    referenced = make_slot(court, 10)
    customer = get_user_model().objects.create_user(username="customer", password="pass")
    Booking.objects.create(
        slot=referenced,
        resource=court,
        user=customer,
        payment_amount=referenced.price,
        receipt_url="https://receipts.example.com/r.png",
        status=Booking.Status.REJECTED,
    )

    deleted = sweep_stale_slots(clock=clock)

    assert deleted == 1
    remaining = set(Slot.objects.values_list("id", flat=True))
    assert stale.id not in remaining
    assert {recent.id, booked.id, referenced.id} <= remaining


@pytest.mark.django_db
def test_sweeper_respects_retention_setting(court, clock):
    make_slot(court, 3)

    assert sweep_stale_slots(clock=clock) == 0
    assert sweep_stale_slots(clock=clock, retention_days=2) == 1


@pytest.mark.django_db
def test_sweep_task_reports_storage_errors():
    with mock.patch.object(tasks, "sweep", side_effect=DatabaseError("db down")):
        result = tasks.sweep_stale_slots()

    assert result["deleted"] == 0
    assert "db down" in result["error"]


@pytest.mark.django_db
@override_settings(SLOT_HORIZON_DAYS=3)
def test_horizon_task_fills_missing_days(court, clock):
    for weekday in range(1, 8):
        WeeklyScheduleRule.objects.create(
            resource=court,
            day_of_week=weekday,
            is_open=True,
            open_time=time(9),
            close_time=time(11),
        )
    today = clock.today()

    with mock.patch.object(tasks, "get_clock", return_value=clock):
        first = tasks.ensure_slot_horizon()
        second = tasks.ensure_slot_horizon()

    assert first == {"regenerated": 1, "created": 8, "skipped": 0, "failed": 0}
    assert second == {"regenerated": 0, "created": 0, "skipped": 0, "failed": 0}
    dates = set(Slot.objects.filter(resource=court).values_list("schedule_date", flat=True))
    assert dates == {today + timedelta(days=offset) for offset in range(4)}


@pytest.mark.django_db
@override_settings(SLOT_HORIZON_DAYS=2)
def test_horizon_task_extends_from_last_generated_day(court, clock):
    for weekday in range(1, 8):
        WeeklyScheduleRule.objects.create(
            resource=court,
            day_of_week=weekday,
            is_open=True,
            open_time=time(9),
            close_time=time(10),
        )
    with mock.patch.object(tasks, "get_clock", return_value=clock):
        tasks.ensure_slot_horizon()
    slot = Slot.objects.filter(resource=court).order_by("start_time").first()
    Slot.objects.filter(pk=slot.pk).update(is_booked=True)

    later = Clock(390, now_func=lambda: NOW + timedelta(days=1))
    with mock.patch.object(tasks, "get_clock", return_value=later):
        result = tasks.ensure_slot_horizon()

    assert result == {"regenerated": 1, "created": 1, "skipped": 0, "failed": 0}
    assert Slot.objects.get(pk=slot.pk).is_booked
    assert Slot.objects.filter(resource=court).count() == 4


@pytest.mark.django_db
def test_horizon_task_ignores_inactive_resources(court, clock):
    court.is_active = False
    court.save()

    with mock.patch.object(tasks, "get_clock", return_value=clock):
        result = tasks.ensure_slot_horizon()

    assert result["regenerated"] == 0
