"""Admin registration for bookings."""

from __future__ import annotations

from django.contrib import admin

from .models import Booking


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "resource",
        "slot",
        "user",
        "status",
        "payment_amount",
        "confirmed_by",
        "created_at",
    )
    list_filter = ("status", "resource")
    search_fields = ("id", "resource__name", "user__username", "user__email")
    # status changes go through confirm/reject so the slot stays in sync
    readonly_fields = (
        "slot",
        "resource",
        "user",
        "payment_amount",
        "status",
        "confirmed_by",
        "created_at",
        "updated_at",
    )
