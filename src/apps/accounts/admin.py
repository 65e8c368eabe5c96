from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ["username", "email", "name", "role", "is_active", "station"]
    list_filter = ["role", "is_active", "is_staff"]
    search_fields = ["username", "email", "name"]
    ordering = ["name", "email"]
    fieldsets = BaseUserAdmin.fieldsets + (
        ("Station role", {"fields": ("name", "role", "station")}),
    )
