"""
Domain error taxonomy

Every failure the scheduling core reports to a caller is one of these.
The API layer maps them to HTTP responses in
shared.infrastructure.exception_handler; Celery tasks log them and return
an error payload instead.

- NotFound: resource, slot or booking missing
- Conflict: slot already booked, amount mismatch, booking already processed,
  regeneration over active bookings
- ValidationError: missing or malformed input
- StorageFailure: the database refused a write
- PartialFailure: a finalization step applied partially; compensation ran
  or manual reconciliation is required
"""

from __future__ import annotations


class DomainError(Exception):
    """Base class for expected, user-facing domain failures."""

    status_code = 400
    default_message = "Request could not be processed."
    code = "domain_error"

    def __init__(self, message: str | None = None, *, code: str | None = None):
        self.message = message or self.default_message
        if code:
            self.code = code
        super().__init__(self.message)


class NotFound(DomainError):
    status_code = 404
    default_message = "Not found."
    code = "not_found"


class Conflict(DomainError):
    status_code = 409
    default_message = "Conflict with the current state."
    code = "conflict"


class ValidationError(DomainError):
    status_code = 400
    default_message = "Invalid input."
    code = "invalid"


class StorageFailure(DomainError):
    status_code = 503
    default_message = "Storage is temporarily unavailable."
    code = "storage_failure"


class PartialFailure(DomainError):
    status_code = 502
    default_message = "Operation was only partially applied."
    code = "partial_failure"


# User-visible messages shared by services and tests
MSG_SLOT_ALREADY_BOOKED = "This slot has already been booked by another customer."
MSG_SLOT_TAKEN_CONCURRENTLY = "This slot was already booked. Please choose another available slot."
MSG_AMOUNT_MISMATCH = "Submitted amount does not match the slot price."
MSG_ALREADY_PROCESSED = "This booking has already been processed."
