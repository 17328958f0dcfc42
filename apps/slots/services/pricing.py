"""
Price resolver

Turns a slot's local start into a price: the first pricing rule (in stored
order) whose weekday list and half-open time window cover the start wins,
otherwise the resource's base price applies.
"""

from __future__ import annotations

from datetime import time
from decimal import Decimal
from typing import Iterable, Protocol, Sequence


class PricingRuleLike(Protocol):
    day_of_week: Sequence[int] | None
    start_time: time
    end_time: time
    price_override: Decimal


def normalize_weekday(day: int) -> int:
    """Map 0 (Sunday in some clients) onto ISO Sunday 7."""
    day = int(day)
    return 7 if day == 0 else day


def rule_matches(rule: PricingRuleLike, weekday: int, time_of_day: time) -> bool:
    days = rule.day_of_week or []
    if days and weekday not in {normalize_weekday(day) for day in days}:
        return False
    # an empty or inverted window never matches
    return rule.start_time <= time_of_day < rule.end_time


def resolve_price(
    rules: Iterable[PricingRuleLike],
    base_price: Decimal,
    weekday: int,
    time_of_day: time,
) -> Decimal:
    """
    Resolve the price of a slot starting at ``time_of_day`` on ISO ``weekday``.

    ``rules`` must already be in evaluation order (ascending id).
    """
    for rule in rules:
        if rule_matches(rule, weekday, time_of_day):
            return rule.price_override
    return base_price
