"""Celery tasks for the slot inventory."""

from __future__ import annotations

import logging
from datetime import timedelta

from celery import shared_task  # type: ignore
from django.conf import settings  # type: ignore
from django.db import DatabaseError  # type: ignore
from django.db.models import Max  # type: ignore

from apps.resources.models import Resource
from shared.domain import errors
from shared.domain.value_objects import DateRange
from shared.infrastructure.clock import get_clock

from .models import Slot
from .services.generator import regenerate_slots
from .services.retention import sweep_stale_slots as sweep

logger = logging.getLogger(__name__)


# ============================================================================
# PERIODIC TASKS (запускаются автоматически через Celery Beat)
# ============================================================================

@shared_task(name="slots.sweep_stale_slots")
def sweep_stale_slots() -> dict[str, object]:
    """
    Удаление устаревших незабронированных слотов.

    Ошибка не фатальна: она логируется, следующий запуск повторит очистку.

    Returns:
        dict: {"deleted": количество удалённых слотов} или {"deleted": 0, "error": текст}
    """
    try:
        deleted = sweep()
    except DatabaseError as e:
        logger.error(f"Stale slot sweep failed: {e}", exc_info=True)
        return {"deleted": 0, "error": str(e)}
    return {"deleted": deleted}


@shared_task(name="slots.ensure_slot_horizon")
def ensure_slot_horizon() -> dict[str, int]:
    """
    Поддержание горизонта сгенерированных слотов.

    Для каждого активного ресурса проверяет, есть ли слоты на локальную
    дату today + SLOT_HORIZON_DAYS. Если нет, генерирует недостающий хвост
    диапазона [today, today + SLOT_HORIZON_DAYS]: от дня после последней
    сгенерированной даты (или от today). Ресурсы с активными бронями в
    диапазоне пропускаются.

    Returns:
        dict: {"regenerated": ..., "created": ..., "skipped": ..., "failed": ...}
    """
    clock = get_clock()
    today = clock.today()
    horizon_day = today + timedelta(days=settings.SLOT_HORIZON_DAYS)

    result = {"regenerated": 0, "created": 0, "skipped": 0, "failed": 0}
    for resource in Resource.objects.filter(is_active=True).order_by("id"):
        generated = Slot.objects.filter(resource=resource, schedule_date__gte=today)
        last_day = generated.aggregate(last=Max("schedule_date"))["last"]
        if last_day is not None and last_day >= horizon_day:
            continue
        first_day = today if last_day is None else last_day + timedelta(days=1)

        try:
            created = regenerate_slots(resource.pk, DateRange(first_day, horizon_day), clock=clock)
        except errors.Conflict as e:
            logger.warning(f"Horizon regeneration skipped for resource {resource.pk}: {e}")
            result["skipped"] += 1
            continue
        except errors.DomainError as e:
            logger.error(f"Horizon regeneration failed for resource {resource.pk}: {e}")
            result["failed"] += 1
            continue

        result["regenerated"] += 1
        result["created"] += created

    if result["regenerated"] > 0:
        logger.info(f"Slot horizon extended for {result['regenerated']} resources ({result['created']} slots)")

    return result
