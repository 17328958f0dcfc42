"""
Slot generator

Expands a resource's weekly schedule into concrete slots for a range of
calendar dates and prices every slot through the price resolver.

Schedule and pricing times are local wall-clock values in the clock's fixed
offset. A slot is built as a local aware datetime and stored as an instant,
so a 09:00 opening in UTC+6:30 is persisted as 02:30 UTC.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo
from decimal import Decimal
from typing import Mapping, Optional, Sequence

from django.conf import settings  # type: ignore

from apps.resources.models import PricingRule, Resource, WeeklyScheduleRule
from shared.domain import errors
from shared.domain.base import ValueObject
from shared.domain.value_objects import DateRange
from shared.infrastructure.clock import Clock, get_clock

from . import inventory
from .pricing import PricingRuleLike, resolve_price

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SlotDraft(ValueObject):
    """A computed slot that has not been persisted yet."""

    start_time: datetime
    end_time: datetime
    price: Decimal
    schedule_date: date


def open_window(day: date, open_time: time, close_time: time, tz: tzinfo) -> tuple[datetime, datetime]:
    """Local open/close instants of ``day``; a close at or before the open falls on the next day."""
    opens_at = datetime.combine(day, open_time, tzinfo=tz)
    closes_at = datetime.combine(day, close_time, tzinfo=tz)
    if closes_at <= opens_at:
        closes_at += timedelta(days=1)
    return opens_at, closes_at


def compute_slots(
    schedule: Mapping[int, WeeklyScheduleRule],
    pricing_rules: Sequence[PricingRuleLike],
    base_price: Decimal,
    date_range: DateRange,
    duration_minutes: int,
    tz: tzinfo,
) -> list[SlotDraft]:
    """
    Partition every open day of ``date_range`` into ``duration_minutes`` slots.

    ``schedule`` maps ISO weekday to its rule. Closed or missing weekdays
    yield nothing and a trailing remainder shorter than the duration is
    dropped. Pricing uses the weekday of the schedule day and the local time
    of day of the slot start, so the post-midnight part of an overnight
    window keeps the weekday of the day that opened it.
    """
    step = timedelta(minutes=duration_minutes)
    drafts: list[SlotDraft] = []
    for day in date_range.days():
        rule = schedule.get(day.isoweekday())
        if rule is None or not rule.is_open or rule.open_time is None or rule.close_time is None:
            continue

        opens_at, closes_at = open_window(day, rule.open_time, rule.close_time, tz)
        start = opens_at
        while start + step <= closes_at:
            price = resolve_price(pricing_rules, base_price, day.isoweekday(), start.time())
            drafts.append(SlotDraft(start_time=start, end_time=start + step, price=price, schedule_date=day))
            start += step
    return drafts


def regenerate_slots(
    resource_id: int,
    date_range: DateRange,
    duration_minutes: Optional[int] = None,
    clock: Optional[Clock] = None,
) -> int:
    """
    Replace the slots of a resource for an inclusive date range.

    Returns the number of slots created. Running it twice with unchanged
    templates leaves the same set of slots.

    Raises:
        ValidationError: non-positive duration
        NotFound: resource missing
        Conflict: a slot in the range is booked or held by an active booking
        StorageFailure: the replacement could not be written
    """
    clock = clock or get_clock()

    resource = Resource.objects.filter(pk=resource_id).first()
    if resource is None:
        raise errors.NotFound(f"Resource {resource_id} not found.")

    if duration_minutes is None:
        duration_minutes = resource.slot_duration_minutes or settings.SLOT_DEFAULT_DURATION_MINUTES
    if int(duration_minutes) <= 0:
        raise errors.ValidationError("Slot duration must be a positive number of minutes.")

    schedule = {rule.day_of_week: rule for rule in WeeklyScheduleRule.objects.filter(resource=resource)}
    pricing_rules = list(PricingRule.objects.filter(resource=resource).order_by("id"))

    drafts = compute_slots(
        schedule,
        pricing_rules,
        resource.base_price,
        date_range,
        int(duration_minutes),
        clock.tz,
    )
    window_start = clock.local_midnight(date_range.start_date)
    window_end = clock.local_midnight(date_range.end_date + timedelta(days=1))

    created = inventory.replace_range(resource, date_range, window_start, window_end, drafts)
    logger.info(
        f"Generated {created} slots for resource {resource.pk} over {date_range} "
        f"({duration_minutes} min, offset {clock.utc_offset_minutes} min)"
    )
    return created

