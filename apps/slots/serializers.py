"""Serializers for the slot inventory."""

from __future__ import annotations

from datetime import date

from django.conf import settings  # type: ignore
from rest_framework import serializers  # type: ignore

from .models import Slot


class SlotSerializer(serializers.ModelSerializer):
    class Meta:
        model = Slot
        fields = [
            "id",
            "resource",
            "slot_name",
            "schedule_date",
            "start_time",
            "end_time",
            "price",
            "is_booked",
            "booking",
        ]
        read_only_fields = fields


class SlotGenerationSerializer(serializers.Serializer):
    """Generation request; field names follow the public camelCase contract."""

    resourceId = serializers.IntegerField(min_value=1)
    startDate = serializers.DateField()
    endDate = serializers.DateField()
    slotDurationMinutes = serializers.IntegerField(required=False, allow_null=True)

    def validate(self, attrs):  # type: ignore
        start_date, end_date = attrs["startDate"], attrs["endDate"]
        # the local window of the range ends at midnight after endDate
        if end_date >= date.max:
            raise serializers.ValidationError({"endDate": "End date is out of range."})
        if end_date < start_date:
            return attrs

        max_days = settings.SLOT_MAX_GENERATION_DAYS
        if (end_date - start_date).days + 1 > max_days:
            raise serializers.ValidationError(
                {"endDate": f"A generation request may cover at most {max_days} days."}
            )
        return attrs
