from django.contrib import admin

from .models import ManagerAssignment, PriceHistoryEntry, Station


@admin.register(Station)
class StationAdmin(admin.ModelAdmin):
    list_display = ["name", "email", "is_available", "is_active", "price_per_kg", "updated_at"]
    list_filter = ["is_available", "is_active"]
    search_fields = ["name", "address", "email"]


@admin.register(PriceHistoryEntry)
class PriceHistoryEntryAdmin(admin.ModelAdmin):
    list_display = ["station", "price_per_kg", "effective_from", "updated_by"]
    readonly_fields = ["station", "price_per_kg", "effective_from", "updated_by", "created_at"]


@admin.register(ManagerAssignment)
class ManagerAssignmentAdmin(admin.ModelAdmin):
    list_display = ["station", "manager", "assigned_at", "removed_at", "removal_reason"]
    list_filter = ["removed_at"]
    # Rows are written through AssignmentLedger only
    readonly_fields = [
        "station",
        "manager",
        "assigned_by",
        "assigned_at",
        "removed_at",
        "removed_by",
        "removal_reason",
    ]
