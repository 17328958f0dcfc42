"""Admin registration for slots."""

from __future__ import annotations

from django.contrib import admin

from .models import Slot


@admin.register(Slot)
class SlotAdmin(admin.ModelAdmin):
    list_display = ("resource", "schedule_date", "start_time", "end_time", "price", "is_booked", "booking")
    list_filter = ("is_booked", "resource")
    search_fields = ("slot_name", "resource__name")
    date_hierarchy = "start_time"
    readonly_fields = ("is_booked", "booking", "created_at", "updated_at")
