"""Retention sweeper for stale, unbooked slots."""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Optional

from django.conf import settings  # type: ignore

from shared.infrastructure.clock import Clock, get_clock

from ..models import Slot

logger = logging.getLogger(__name__)


def sweep_stale_slots(clock: Optional[Clock] = None, retention_days: Optional[int] = None) -> int:
    """
    Delete slots that ended more than ``retention_days`` ago and were never claimed.

    A slot is kept while it is booked or any booking references it. Returns
    the number of deleted slots.
    """
    clock = clock or get_clock()
    if retention_days is None:
        retention_days = settings.SLOT_RETENTION_DAYS
    cutoff = clock.now() - timedelta(days=retention_days)

    stale = Slot.objects.filter(end_time__lt=cutoff, is_booked=False, bookings__isnull=True)
    deleted, _ = Slot.objects.filter(id__in=stale.values("id")).delete()
    logger.info(f"Swept {deleted} stale slots ended before {cutoff.isoformat()}")
    return deleted
