from datetime import datetime, timedelta, timezone as dt_timezone
from decimal import Decimal
from unittest import mock

import pytest
from django.contrib.auth import get_user_model
from django.db import DatabaseError, IntegrityError

from apps.bookings import services
from apps.bookings.models import Booking
from apps.resources.models import Resource
from apps.slots.models import Slot
from shared.domain import errors
from shared.domain.value_objects import SlotState

START = datetime(2024, 6, 3, 2, 30, tzinfo=dt_timezone.utc)
SENTINEL = "Cash on Arrival - No receipt required"
RECEIPT = "https://receipts.example.com/7/1/receipt.png"


@pytest.fixture
def users():
    model = get_user_model()
    return {
        "owner": model.objects.create_user(username="owner", password="pass"),
        "customer": model.objects.create_user(username="customer", password="pass"),
        "rival": model.objects.create_user(username="rival", password="pass"),
        "staff": model.objects.create_user(username="staff", password="pass", is_staff=True),
    }


@pytest.fixture
def slot(users):
    resource = Resource.objects.create(owner=users["owner"], name="Court 1", base_price=Decimal("100.00"))
    return Slot.objects.create(
        resource=resource,
        start_time=START,
        end_time=START + timedelta(hours=1),
        price=Decimal("100.00"),
        schedule_date=START.date(),
    )


def receipt_file():
    upload = mock.Mock()
    upload.name = "receipt.png"
    return upload


@pytest.fixture
def pending(slot, users):
    return services.submit_booking(slot.pk, users["customer"], "100.00", receipt_url=RECEIPT)


@pytest.mark.django_db
def test_submission_creates_pending_booking_without_claiming_slot(slot, users):
    booking = services.submit_booking(slot.pk, users["customer"], Decimal("100"), receipt_url=RECEIPT)

    assert booking.status == Booking.Status.PENDING
    assert booking.payment_amount == Decimal("100.00")
    assert booking.resource_id == slot.resource_id
    assert booking.receipt_url == RECEIPT
    slot.refresh_from_db()
    assert slot.is_booked is False
    assert slot.booking_id is None


@pytest.mark.django_db
def test_submission_without_receipt_stores_pay_on_arrival_marker(slot, users):
    booking = services.submit_booking(slot.pk, users["customer"], "100")

    assert booking.receipt_url == SENTINEL


@pytest.mark.django_db
def test_amount_mismatch_creates_nothing(slot, users):
    with pytest.raises(errors.Conflict) as excinfo:
        services.submit_booking(slot.pk, users["customer"], "99.99", receipt_url=RECEIPT)

    assert excinfo.value.message == errors.MSG_AMOUNT_MISMATCH
    assert not Booking.objects.exists()


@pytest.mark.django_db
def test_missing_slot_and_malformed_amount(slot, users):
    with pytest.raises(errors.NotFound):
        services.submit_booking(slot.pk + 1, users["customer"], "100")
    with pytest.raises(errors.ValidationError):
        services.submit_booking(slot.pk, users["customer"], "a lot")


@pytest.mark.django_db
def test_second_active_submission_loses(pending, slot, users):
    with pytest.raises(errors.Conflict) as excinfo:
        services.submit_booking(slot.pk, users["rival"], "100", receipt_url=RECEIPT)

    assert excinfo.value.message == errors.MSG_SLOT_TAKEN_CONCURRENTLY
    assert Booking.objects.filter(slot=slot).count() == 1


@pytest.mark.django_db
def test_booked_slot_refuses_submission(slot, users):
    Slot.objects.filter(pk=slot.pk).update(is_booked=True)

    with pytest.raises(errors.Conflict) as excinfo:
        services.submit_booking(slot.pk, users["customer"], "100")

    assert excinfo.value.message == errors.MSG_SLOT_ALREADY_BOOKED


@pytest.mark.django_db
def test_submission_after_rejection_is_allowed(pending, slot, users):
    services.reject_booking(pending.pk, users["staff"])

    booking = services.submit_booking(slot.pk, users["rival"], "100")

    assert booking.status == Booking.Status.PENDING


@pytest.mark.django_db
def test_integrity_error_maps_to_conflict(slot, users):
    with mock.patch.object(services.Booking.objects, "create", side_effect=IntegrityError("unique")):
        with pytest.raises(errors.Conflict):
            services.submit_booking(slot.pk, users["customer"], "100")


@pytest.mark.django_db
def test_confirm_claims_slot(pending, slot, users):
    booking = services.confirm_booking(pending.pk, users["staff"])

    assert booking.status == Booking.Status.CONFIRMED
    assert booking.confirmed_by == users["staff"]
    slot.refresh_from_db()
    assert slot.is_booked is True
    assert slot.booking_id == booking.pk


@pytest.mark.django_db
def test_reject_releases_slot_and_records_staff(pending, slot, users):
    booking = services.reject_booking(pending.pk, users["staff"])

    assert booking.status == Booking.Status.REJECTED
    assert booking.confirmed_by == users["staff"]
    slot.refresh_from_db()
    assert slot.is_booked is False
    assert slot.booking_id is None


@pytest.mark.django_db
def test_reject_then_confirm_reports_already_processed(pending, slot, users):
    services.reject_booking(pending.pk, users["staff"])

    with pytest.raises(errors.Conflict) as excinfo:
        services.confirm_booking(pending.pk, users["staff"])

    assert excinfo.value.message == errors.MSG_ALREADY_PROCESSED
    assert Booking.objects.get(pk=pending.pk).status == Booking.Status.REJECTED
    slot.refresh_from_db()
    assert slot.is_booked is False


@pytest.mark.django_db
def test_confirm_twice_reports_already_processed(pending, users):
    services.confirm_booking(pending.pk, users["staff"])

    with pytest.raises(errors.Conflict):
        services.confirm_booking(pending.pk, users["staff"])


@pytest.mark.django_db
def test_finalizing_unknown_booking(users):
    with pytest.raises(errors.NotFound):
        services.confirm_booking(4242, users["staff"])
    with pytest.raises(errors.NotFound):
        services.reject_booking(4242, users["staff"])


@pytest.mark.django_db
def test_confirm_compensates_when_slot_update_fails(pending, slot, users):
    with mock.patch.object(services.inventory, "apply_slot_state", side_effect=DatabaseError("timeout")):
        with pytest.raises(errors.PartialFailure):
            services.confirm_booking(pending.pk, users["staff"])

    booking = Booking.objects.get(pk=pending.pk)
    assert booking.status == Booking.Status.PENDING
    assert booking.confirmed_by is None
    slot.refresh_from_db()
    assert slot.is_booked is False


@pytest.mark.django_db
def test_confirm_compensates_when_slot_held_elsewhere(pending, slot, users):
    other = Booking.objects.create(
        slot=None,
        resource=slot.resource,
        user=users["rival"],
        payment_amount=slot.price,
        receipt_url=SENTINEL,
        status=Booking.Status.CONFIRMED,
    )
    Slot.objects.filter(pk=slot.pk).update(is_booked=True, booking=other)

    with pytest.raises(errors.PartialFailure):
        services.confirm_booking(pending.pk, users["staff"])

    assert Booking.objects.get(pk=pending.pk).status == Booking.Status.PENDING
    slot.refresh_from_db()
    assert slot.booking_id == other.pk


@pytest.mark.django_db
def test_reject_keeps_rejection_when_slot_release_fails(pending, slot, users):
    with mock.patch.object(services.inventory, "apply_slot_state", side_effect=DatabaseError("timeout")):
        with pytest.raises(errors.PartialFailure):
            services.reject_booking(pending.pk, users["staff"])

    booking = Booking.objects.get(pk=pending.pk)
    assert booking.status == Booking.Status.REJECTED
    assert booking.confirmed_by == users["staff"]


@pytest.mark.django_db
def test_reject_without_slot_is_clean(pending, slot, users):
    Slot.objects.filter(pk=slot.pk).delete()

    booking = services.reject_booking(pending.pk, users["staff"])

    assert booking.status == Booking.Status.REJECTED
    assert booking.slot_id is None


@pytest.mark.django_db
def test_synchronize_runs_compensation_once(pending):
    compensate = mock.Mock()
    with mock.patch.object(services.inventory, "apply_slot_state", return_value=0):
        with pytest.raises(errors.PartialFailure):
            services.synchronize_slot_state(pending, SlotState.booked_by(pending.pk), compensate)

    compensate.assert_called_once_with()


@pytest.mark.django_db
def test_store_receipt_uses_storage_port(users):
    storage = mock.Mock()
    storage.upload.return_value = "https://cdn.example.com/receipt.png"
    upload = mock.Mock()
    upload.name = "My Receipt.PNG"

    url = services.store_receipt(upload, slot_id=5, user_id=users["customer"].pk, storage=storage)

    assert url == "https://cdn.example.com/receipt.png"
    (file_obj, path), _ = storage.upload.call_args
    assert file_obj is upload
    assert path.startswith(f"{users['customer'].pk}/5/")
    assert path.endswith("-my-receipt.png")


@pytest.mark.django_db
def test_receipt_is_not_uploaded_when_submission_is_refused(slot, users):
    storage = mock.Mock()

    with pytest.raises(errors.Conflict):
        services.submit_booking(slot.pk, users["customer"], "90", receipt=receipt_file(), storage=storage)
    with pytest.raises(errors.NotFound):
        services.submit_booking(slot.pk + 1, users["customer"], "100", receipt=receipt_file(), storage=storage)

    storage.upload.assert_not_called()


@pytest.mark.django_db
def test_uploaded_receipt_is_stored_on_booking(slot, users):
    storage = mock.Mock()
    storage.upload.return_value = RECEIPT

    booking = services.submit_booking(slot.pk, users["customer"], "100", receipt=receipt_file(), storage=storage)

    assert booking.receipt_url == RECEIPT
    storage.upload.assert_called_once()


@pytest.mark.django_db
def test_lost_race_reports_orphaned_receipt(slot, users):
    storage = mock.Mock()
    storage.upload.return_value = RECEIPT

    with mock.patch.object(services.Booking.objects, "create", side_effect=IntegrityError("unique")):
        with mock.patch.object(services, "logger") as logger:
            with pytest.raises(errors.Conflict):
                services.submit_booking(slot.pk, users["customer"], "100", receipt=receipt_file(), storage=storage)

    assert RECEIPT in logger.warning.call_args[0][0]
