"""Domain services for resource templates: pricing rule authoring and weekly schedules."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, time
from decimal import Decimal, InvalidOperation
from typing import Iterable

from django.db import DatabaseError, transaction  # type: ignore

from shared.domain import errors

from .models import PricingRule, Resource, WeeklyScheduleRule

logger = logging.getLogger(__name__)

MSG_NO_COMPLETE_RULE = "Please complete at least one rule before saving."


@dataclass
class PricingRuleDraft:
    """A rule as typed by the business owner; any field may still be empty."""

    rule_name: str = ""
    price_override: str = ""
    start_time: str = ""
    end_time: str = ""
    day_of_week: list[int] = field(default_factory=list)

    def is_complete(self) -> bool:
        return all(
            str(value).strip()
            for value in (self.rule_name, self.price_override, self.start_time, self.end_time)
        )


def normalize_wall_clock(value: str) -> time:
    """Parse HH:MM or HH:MM:SS; values without seconds get ':00' appended."""
    raw = str(value).strip()
    if len(raw) == 5:
        raw = f"{raw}:00"
    try:
        return datetime.strptime(raw, "%H:%M:%S").time()
    except ValueError:
        raise errors.ValidationError(f"Invalid time {value!r}, expected HH:MM or HH:MM:SS.")


def _parse_price(value: str) -> Decimal:
    try:
        price = Decimal(str(value).strip())
    except InvalidOperation:
        raise errors.ValidationError(f"Invalid price override {value!r}.")
    if not price.is_finite() or price < 0:
        raise errors.ValidationError(f"Invalid price override {value!r}.")
    return price


def _parse_days(days: Iterable[int] | None) -> list[int]:
    parsed = []
    for day in days or []:
        try:
            number = int(day)
        except (TypeError, ValueError):
            raise errors.ValidationError(f"Invalid weekday {day!r}.")
        if not 0 <= number <= 7:
            raise errors.ValidationError(f"Weekday {number} is out of range 0..7.")
        if number not in parsed:
            parsed.append(number)
    return sorted(parsed)


def save_pricing_rules(resource: Resource, drafts: Iterable[PricingRuleDraft]) -> list[PricingRule]:
    """
    Persist the completed drafts of a batch as pricing rules.

    Incomplete drafts are skipped. Rules are stored as given and existing
    slots keep their prices until the resource's slots are regenerated.

    Raises:
        ValidationError: no draft is complete, or a complete draft is malformed
        StorageFailure: the insert failed
    """
    complete = [draft for draft in drafts if draft.is_complete()]
    if not complete:
        raise errors.ValidationError(MSG_NO_COMPLETE_RULE)

    rules = [
        PricingRule(
            resource=resource,
            rule_name=draft.rule_name.strip(),
            day_of_week=_parse_days(draft.day_of_week),
            start_time=normalize_wall_clock(draft.start_time),
            end_time=normalize_wall_clock(draft.end_time),
            price_override=_parse_price(draft.price_override),
        )
        for draft in complete
    ]
    for rule in rules:
        if rule.end_time <= rule.start_time:
            logger.warning(
                f"Pricing rule '{rule.rule_name}' for resource {resource.pk} has an empty window "
                f"{rule.start_time}-{rule.end_time} and will never match"
            )

    try:
        with transaction.atomic():
            # save() one by one keeps ids ascending in batch order on every backend
            for rule in rules:
                rule.save()
    except DatabaseError as e:
        logger.error(f"Failed to save pricing rules for resource {resource.pk}: {e}")
        raise errors.StorageFailure("Failed to save pricing rules.") from e

    logger.info(f"Saved {len(rules)} pricing rules for resource {resource.pk}")
    return rules


@transaction.atomic
def replace_weekly_schedule(resource: Resource, days: Iterable[dict]) -> list[WeeklyScheduleRule]:
    """
    Upsert the weekly template of a resource.

    Each entry carries day_of_week, is_open, open_time, close_time. Weekdays
    that are not mentioned keep their current rule.
    """
    saved = []
    for entry in days:
        is_open = bool(entry.get("is_open"))
        rule, _ = WeeklyScheduleRule.objects.update_or_create(
            resource=resource,
            day_of_week=entry["day_of_week"],
            defaults={
                "is_open": is_open,
                "open_time": entry.get("open_time") if is_open else None,
                "close_time": entry.get("close_time") if is_open else None,
            },
        )
        saved.append(rule)
    logger.info(f"Updated {len(saved)} weekly schedule rules for resource {resource.pk}")
    return saved
