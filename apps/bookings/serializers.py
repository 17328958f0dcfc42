"""Serializers for the booking domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Booking


class BookingCreateSerializer(serializers.Serializer):
    """Подача заявки на слот клиентом."""

    slot_id = serializers.IntegerField(min_value=1)
    amount = serializers.DecimalField(max_digits=10, decimal_places=2)
    receipt_url = serializers.URLField(required=False, allow_blank=True, max_length=500)
    receipt = serializers.FileField(required=False, allow_empty_file=False)

    def validate(self, attrs):  # type: ignore
        if attrs.get("receipt") is not None and attrs.get("receipt_url"):
            raise serializers.ValidationError("Send either a receipt file or a receipt URL, not both.")
        return attrs


class BookingSerializer(serializers.ModelSerializer):
    slot_start = serializers.DateTimeField(source="slot.start_time", read_only=True, default=None)
    slot_end = serializers.DateTimeField(source="slot.end_time", read_only=True, default=None)
    resource_name = serializers.ReadOnlyField(source="resource.name")
    status_display = serializers.ReadOnlyField(source="get_status_display")

    class Meta:
        model = Booking
        fields = [
            "id",
            "slot",
            "slot_start",
            "slot_end",
            "resource",
            "resource_name",
            "user",
            "payment_amount",
            "receipt_url",
            "status",
            "status_display",
            "confirmed_by",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
