"""Serializers for the resources domain."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import PricingRule, Resource, WeeklyScheduleRule
from .services import PricingRuleDraft


class ResourceSerializer(serializers.ModelSerializer):
    owner_id = serializers.ReadOnlyField(source="owner.id")

    class Meta:
        model = Resource
        fields = [
            "id",
            "owner_id",
            "business_name",
            "name",
            "base_price",
            "currency",
            "slot_duration_minutes",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "owner_id", "created_at", "updated_at"]


class WeeklyScheduleRuleSerializer(serializers.ModelSerializer):
    day_name = serializers.ReadOnlyField(source="get_day_of_week_display")

    class Meta:
        model = WeeklyScheduleRule
        fields = ["day_of_week", "day_name", "is_open", "open_time", "close_time"]
        # uniqueness per weekday is handled by the upsert, not by the serializer
        validators = []

    def validate(self, attrs):  # type: ignore
        if attrs.get("is_open") and (attrs.get("open_time") is None or attrs.get("close_time") is None):
            raise serializers.ValidationError("Open days need both an open and a close time.")
        return attrs


class WeeklyScheduleSerializer(serializers.Serializer):
    """Full or partial 7-day template submitted in one request."""

    days = WeeklyScheduleRuleSerializer(many=True)

    def validate_days(self, value):  # type: ignore
        seen = [entry["day_of_week"] for entry in value]
        if len(seen) != len(set(seen)):
            raise serializers.ValidationError("Each weekday may appear only once.")
        return value


class PricingRuleSerializer(serializers.ModelSerializer):
    class Meta:
        model = PricingRule
        fields = [
            "id",
            "rule_name",
            "day_of_week",
            "start_time",
            "end_time",
            "price_override",
            "created_at",
        ]
        read_only_fields = fields


class PricingRuleDraftSerializer(serializers.Serializer):
    """Shape of one draft; completeness and parsing happen in save_pricing_rules."""

    rule_name = serializers.CharField(allow_blank=True, required=False, default="", max_length=100)
    price_override = serializers.CharField(allow_blank=True, required=False, default="")
    start_time = serializers.CharField(allow_blank=True, required=False, default="")
    end_time = serializers.CharField(allow_blank=True, required=False, default="")
    day_of_week = serializers.ListField(
        child=serializers.IntegerField(min_value=0, max_value=7),
        required=False,
        allow_null=True,
        default=list,
    )

    def to_draft(self, data: dict) -> PricingRuleDraft:
        return PricingRuleDraft(
            rule_name=data.get("rule_name", ""),
            price_override=data.get("price_override", ""),
            start_time=data.get("start_time", ""),
            end_time=data.get("end_time", ""),
            day_of_week=data.get("day_of_week") or [],
        )


class PricingRuleBatchSerializer(serializers.Serializer):
    rules = PricingRuleDraftSerializer(many=True)

    def drafts(self) -> list[PricingRuleDraft]:
        child = PricingRuleDraftSerializer()
        return [child.to_draft(entry) for entry in self.validated_data["rules"]]
