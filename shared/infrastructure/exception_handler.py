"""DRF exception handler that renders domain errors as API responses."""

from __future__ import annotations

import logging

from rest_framework.response import Response  # type: ignore
from rest_framework.views import exception_handler  # type: ignore

from shared.domain.errors import DomainError, PartialFailure, StorageFailure

logger = logging.getLogger(__name__)


def domain_exception_handler(exc, context):  # type: ignore
    """
    Map DomainError subclasses to their HTTP status.

    Everything else is delegated to the default DRF handler, so framework
    validation and authentication errors keep their usual shape.
    """
    if isinstance(exc, DomainError):
        view = context.get("view")
        view_name = view.__class__.__name__ if view is not None else "unknown"
        if isinstance(exc, (PartialFailure, StorageFailure)):
            logger.error(f"{exc.__class__.__name__} in {view_name}: {exc.message}")
        else:
            logger.info(f"{exc.__class__.__name__} in {view_name}: {exc.message}")
        return Response({"detail": exc.message, "code": exc.code}, status=exc.status_code)
    return exception_handler(exc, context)
