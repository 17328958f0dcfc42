"""FilterSet definitions for slot listing."""

from __future__ import annotations

import django_filters  # type: ignore

from .models import Slot


class SlotFilterSet(django_filters.FilterSet):
    """Slots by resource and local schedule date (single day or inclusive range)."""

    resource = django_filters.NumberFilter(field_name="resource_id", lookup_expr="exact")
    date = django_filters.DateFilter(field_name="schedule_date", lookup_expr="exact")
    start = django_filters.DateFilter(field_name="schedule_date", lookup_expr="gte")
    end = django_filters.DateFilter(field_name="schedule_date", lookup_expr="lte")
    is_booked = django_filters.BooleanFilter(field_name="is_booked")

    class Meta:
        model = Slot
        fields = ["resource", "date", "start", "end", "is_booked"]
