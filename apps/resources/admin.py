"""Admin registrations for resources domain."""

from __future__ import annotations

from django.contrib import admin

from .models import PricingRule, Resource, WeeklyScheduleRule


class WeeklyScheduleRuleInline(admin.TabularInline):
    model = WeeklyScheduleRule
    extra = 0
    fields = ("day_of_week", "is_open", "open_time", "close_time")


class PricingRuleInline(admin.TabularInline):
    model = PricingRule
    extra = 0
    fields = ("rule_name", "day_of_week", "start_time", "end_time", "price_override")


@admin.register(Resource)
class ResourceAdmin(admin.ModelAdmin):
    list_display = (
        "name",
        "business_name",
        "owner",
        "base_price",
        "currency",
        "slot_duration_minutes",
        "is_active",
    )
    list_filter = ("is_active", "currency")
    search_fields = ("name", "business_name", "owner__username", "owner__email")
    inlines = (WeeklyScheduleRuleInline, PricingRuleInline)
    readonly_fields = ("created_at", "updated_at")


@admin.register(PricingRule)
class PricingRuleAdmin(admin.ModelAdmin):
    list_display = ("rule_name", "resource", "start_time", "end_time", "price_override")
    search_fields = ("rule_name", "resource__name")
