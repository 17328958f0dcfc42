"""Domain services for booking workflows.

Submission creates a Pending booking without touching the slot. Finalization
moves a Pending booking to Confirmed or Rejected and then synchronizes the
slot. Every step is a conditional write; the database decides races:

- the Pending guard on the status update picks one winner between Confirm
  and Reject
- the partial unique constraint on (slot, active status) picks one winner
  between concurrent submissions
- the slot update only touches a slot that is free or held by the booking
"""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from typing import Callable, Optional

from django.conf import settings  # type: ignore
from django.db import DatabaseError, IntegrityError, transaction  # type: ignore
from django.utils import timezone  # type: ignore

from apps.slots.models import Slot
from apps.slots.services import inventory
from shared.domain import errors
from shared.domain.value_objects import SlotState
from shared.infrastructure.storage import ReceiptStorage, build_receipt_path, get_receipt_storage

from .models import Booking

logger = logging.getLogger(__name__)


def _to_decimal(amount) -> Decimal:  # type: ignore
    try:
        value = Decimal(str(amount))
    except (InvalidOperation, TypeError, ValueError):
        raise errors.ValidationError(f"Invalid amount {amount!r}.")
    if not value.is_finite():
        raise errors.ValidationError(f"Invalid amount {amount!r}.")
    return value


def store_receipt(
    file_obj,
    *,
    slot_id: int,
    user_id: int,
    storage: Optional[ReceiptStorage] = None,
) -> str:  # type: ignore
    """Upload a receipt file and return its public URL."""
    storage = storage or get_receipt_storage()
    path = build_receipt_path(slot_id, user_id, getattr(file_obj, "name", "") or "")
    url = storage.upload(file_obj, path)
    logger.info(f"Stored receipt for slot {slot_id} by user {user_id} at {path}")
    return url


def _report_orphaned_receipt(receipt, receipt_url: Optional[str]) -> None:  # type: ignore
    if receipt is not None:
        logger.warning(f"Receipt {receipt_url} has no booking and can be removed from storage")


def submit_booking(
    slot_id: int,
    user,
    amount,
    receipt_url: Optional[str] = None,
    receipt=None,
    storage: Optional[ReceiptStorage] = None,
) -> Booking:  # type: ignore
    """
    Create a Pending booking for a slot.

    The amount must equal the slot's current price exactly; it is never
    corrected. The slot itself is not marked booked until Confirm. A
    ``receipt`` file is uploaded only after the slot and amount checks pass
    and its URL replaces ``receipt_url``.

    Raises:
        NotFound: the slot does not exist
        Conflict: the slot is booked or taken, or the amount does not match
        ValidationError: the amount is not a number
        StorageFailure: the insert failed for another reason
    """
    slot = Slot.objects.select_related("resource").filter(pk=slot_id).first()
    if slot is None:
        raise errors.NotFound(f"Slot {slot_id} not found.")

    if slot.is_booked or slot.booking_id is not None:
        raise errors.Conflict(errors.MSG_SLOT_ALREADY_BOOKED, code="slot_booked")

    if _to_decimal(amount) != slot.price:
        logger.info(f"Rejected submission for slot {slot.pk} by user {user.pk}: amount {amount} != {slot.price}")
        raise errors.Conflict(errors.MSG_AMOUNT_MISMATCH, code="amount_mismatch")

    if receipt is not None:
        receipt_url = store_receipt(receipt, slot_id=slot.pk, user_id=user.pk, storage=storage)

    try:
        with transaction.atomic():
            booking = Booking.objects.create(
                slot=slot,
                resource=slot.resource,
                user=user,
                payment_amount=slot.price,
                receipt_url=receipt_url or settings.RECEIPT_NO_RECEIPT_SENTINEL,
                status=Booking.Status.PENDING,
            )
    except IntegrityError:
        logger.info(f"Slot {slot.pk} was taken concurrently; submission by user {user.pk} refused")
        _report_orphaned_receipt(receipt, receipt_url)
        raise errors.Conflict(errors.MSG_SLOT_TAKEN_CONCURRENTLY, code="slot_booked")
    except DatabaseError as e:
        logger.error(f"Failed to create booking for slot {slot.pk}: {e}")
        _report_orphaned_receipt(receipt, receipt_url)
        raise errors.StorageFailure("Failed to create booking.") from e

    logger.info(f"Booking {booking.pk} submitted for slot {slot.pk} by user {user.pk}")
    return booking


def _transition(booking_id: int, target: str, staff) -> Booking:  # type: ignore
    """Pending -> target, guarded by the current status. Exactly one caller wins."""
    updated = Booking.objects.filter(pk=booking_id, status=Booking.Status.PENDING).update(
        status=target,
        confirmed_by=staff,
        updated_at=timezone.now(),
    )
    if updated == 0:
        if not Booking.objects.filter(pk=booking_id).exists():
            raise errors.NotFound(f"Booking {booking_id} not found.")
        raise errors.Conflict(errors.MSG_ALREADY_PROCESSED, code="already_processed")
    return Booking.objects.select_related("slot", "resource").get(pk=booking_id)


def synchronize_slot_state(
    booking: Booking,
    target: SlotState,
    compensate: Optional[Callable[[], None]] = None,
) -> None:
    """
    Move the booking's slot to ``target``.

    A storage error or a slot held by another booking is a failure. With
    ``compensate`` the callback runs first and the failure is reported as
    PartialFailure; without it the failure is logged for manual
    reconciliation and reported as PartialFailure as well.
    """
    if booking.slot_id is None:
        if target.is_booked:
            failure: Optional[str] = "slot no longer exists"
        else:
            logger.info(f"Booking {booking.pk} has no slot left to release")
            return
    else:
        try:
            updated = inventory.apply_slot_state(booking, target)
        except DatabaseError as e:
            failure = f"storage error: {e}"
        else:
            failure = None if updated else "slot is held by another booking"

    if failure is None:
        logger.info(
            f"Slot {booking.slot_id} synchronized for booking {booking.pk}: is_booked={target.is_booked}"
        )
        return

    if compensate is not None:
        logger.error(f"Slot update failed for booking {booking.pk} ({failure}); compensating")
        compensate()
        raise errors.PartialFailure(
            "Failed to update the slot; the booking was returned to pending.",
            code="slot_update_failed",
        )

    logger.error(
        f"Slot {booking.slot_id} could not be synchronized for booking {booking.pk} ({failure}); "
        f"manual reconciliation required"
    )
    raise errors.PartialFailure(
        "Booking status updated but the slot could not be updated; manual reconciliation required.",
        code="reconciliation_required",
    )


def confirm_booking(booking_id: int, staff) -> Booking:  # type: ignore
    """
    Confirm a Pending booking and mark its slot booked.

    When the slot cannot be claimed the booking is reverted to Pending and
    PartialFailure is raised: callers treat the operation as not applied.
    """
    booking = _transition(booking_id, Booking.Status.CONFIRMED, staff)
    logger.info(f"Booking {booking.pk} confirmed by user {getattr(staff, 'pk', None)}")

    def revert() -> None:
        reverted = Booking.objects.filter(pk=booking.pk, status=Booking.Status.CONFIRMED).update(
            status=Booking.Status.PENDING,
            confirmed_by=None,
            updated_at=timezone.now(),
        )
        logger.warning(f"Booking {booking.pk} reverted to pending (rows={reverted})")

    synchronize_slot_state(booking, SlotState.booked_by(booking.pk), compensate=revert)
    booking.refresh_from_db()
    return booking


def reject_booking(booking_id: int, staff) -> Booking:  # type: ignore
    """
    Reject a Pending booking and release its slot.

    The rejection stands even when releasing the slot fails; that case is
    logged and raised as PartialFailure.
    """
    booking = _transition(booking_id, Booking.Status.REJECTED, staff)
    logger.info(f"Booking {booking.pk} rejected by user {getattr(staff, 'pk', None)}")

    synchronize_slot_state(booking, SlotState.released())
    booking.refresh_from_db()
    return booking
