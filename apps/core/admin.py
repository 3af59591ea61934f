"""
Django admin configuration for core models.
"""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import Activity, User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Admin interface for User model."""

    list_display = ["username", "email", "name", "role", "is_active", "date_joined"]

    list_filter = ["role", "is_active", "is_staff", "is_superuser"]

    search_fields = ["username", "email", "name", "phone"]

    readonly_fields = ["date_joined", "last_login", "updated_at"]

    fieldsets = (
        (None, {"fields": ("username", "password")}),
        (
            "Personal Information",
            {"fields": ("name", "first_name", "last_name", "email", "phone", "image")},
        ),
        ("Role", {"fields": ("role", "provider", "notifications")}),
        (
            "Permissions",
            {"fields": ("is_active", "is_staff", "is_superuser", "groups", "user_permissions")},
        ),
        ("Important Dates", {"fields": ("last_login", "date_joined", "updated_at")}),
    )


@admin.register(Activity)
class ActivityAdmin(admin.ModelAdmin):
    """Read-only view of the activity log."""

    list_display = ["created_at", "user_name", "action", "entity_type", "entity_name"]

    list_filter = ["action", "entity_type"]

    search_fields = ["user_name", "entity_name", "description"]

    readonly_fields = [
        "id",
        "user_id",
        "user_name",
        "action",
        "entity_type",
        "entity_id",
        "entity_name",
        "description",
        "metadata",
        "created_at",
    ]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
