"""
Slot inventory writes

The only two ways slot rows change after creation:
- replace_range: transactional delete-then-insert of a resource's slots
  for a local date window (regeneration)
- apply_slot_state: conditional claim/release of one slot on behalf of a
  booking decision
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING, Sequence

from django.db import DatabaseError, transaction  # type: ignore
from django.db.models import Q  # type: ignore
from django.db.utils import NotSupportedError  # type: ignore
from django.utils import timezone  # type: ignore

from apps.bookings.models import Booking
from shared.domain import errors
from shared.domain.value_objects import DateRange, SlotState

from ..models import Slot

if TYPE_CHECKING:
    from apps.resources.models import Resource

    from .generator import SlotDraft

logger = logging.getLogger(__name__)

MSG_RANGE_HAS_BOOKINGS = "Slots in this range are booked or awaiting confirmation; regeneration refused."


def _lock_queryset_if_possible(queryset):
    """Apply select_for_update when inside transaction.atomic()."""

    if not transaction.get_connection().in_atomic_block:
        return queryset

    try:
        return queryset.select_for_update()
    except NotSupportedError:
        return queryset


def _held_filter() -> Q:
    return Q(is_booked=True) | Q(booking__isnull=False) | Q(bookings__status__in=Booking.ACTIVE_STATUSES)


def replace_range(
    resource: "Resource",
    date_range: DateRange,
    window_start: datetime,
    window_end: datetime,
    drafts: Sequence["SlotDraft"],
) -> int:
    """
    Delete the resource's slots starting in ``[window_start, window_end)`` and insert ``drafts``.

    Slots produced by the schedule of a day in ``date_range`` are replaced as
    well when an overnight window carries them past ``window_end``; the
    spill of the day before the range is left alone. Everything runs in one
    transaction: a refused or failed replacement leaves the previous slots
    untouched.
    """
    in_window = Q(start_time__gte=window_start, start_time__lt=window_end) & ~Q(
        schedule_date__lt=date_range.start_date
    )
    scope = in_window | Q(schedule_date__range=(date_range.start_date, date_range.end_date))

    try:
        with transaction.atomic():
            existing_ids = list(
                _lock_queryset_if_possible(Slot.objects.filter(resource=resource).filter(scope))
                .values_list("id", flat=True)
            )
            if Slot.objects.filter(id__in=existing_ids).filter(_held_filter()).exists():
                logger.warning(
                    f"Regeneration refused for resource {resource.pk}: "
                    f"held slots between {window_start.isoformat()} and {window_end.isoformat()}"
                )
                raise errors.Conflict(MSG_RANGE_HAS_BOOKINGS)

            deleted, _ = Slot.objects.filter(id__in=existing_ids).delete()
            Slot.objects.bulk_create(
                [
                    Slot(
                        resource=resource,
                        start_time=draft.start_time,
                        end_time=draft.end_time,
                        price=draft.price,
                        schedule_date=draft.schedule_date,
                        slot_name=resource.name,
                    )
                    for draft in drafts
                ]
            )
    except DatabaseError as e:
        logger.error(f"Failed to replace slots for resource {resource.pk}: {e}")
        raise errors.StorageFailure("Failed to regenerate slots.") from e

    logger.info(f"Replaced {deleted} rows with {len(drafts)} slots for resource {resource.pk}")
    return len(drafts)


def apply_slot_state(booking: Booking, state: SlotState) -> int:
    """
    Move the booking's slot to ``state`` if it is free or already held by this booking.

    Returns the number of rows updated (0 or 1). Database errors propagate.
    """
    return (
        Slot.objects.filter(pk=booking.slot_id)
        .filter(Q(booking__isnull=True) | Q(booking_id=booking.pk))
        .update(is_booked=state.is_booked, booking_id=state.booking_id, updated_at=timezone.now())
    )
