"""
Django admin configuration for licenses app.
"""
from django.contrib import admin
from django.utils.html import format_html

from activations.infrastructure.models import ActivationEntry
from licenses.infrastructure.models import License


class ActivationEntryInline(admin.TabularInline):
    """Read-only binding history shown on the license page."""

    model = ActivationEntry
    extra = 0
    fields = ["machine_id", "ip", "os", "app", "activated_at"]
    readonly_fields = fields
    can_delete = False

    def has_add_permission(self, request, obj=None):
        """History is append-only through the API."""
        return False


@admin.register(License)
class LicenseAdmin(admin.ModelAdmin):
    """Admin interface for License model."""

    list_display = [
        "email",
        "platform",
        "sale_id",
        "status_display",
        "active_devices",
        "max_activations",
        "expires_at",
        "created_at",
    ]
    list_filter = ["platform", "is_active", "expires_at", "created_at"]
    search_fields = ["email", "name", "sale_id", "product_id"]
    # Limits and expiry are signed into the key; change them by reissuing.
    readonly_fields = [
        "id",
        "license_key",
        "key_hash",
        "token_payload",
        "platform",
        "sale_id",
        "max_activations",
        "machine_ids",
        "expires_at",
        "created_at",
        "updated_at",
    ]
    fieldsets = (
        (
            "Basic Information",
            {
                "fields": ("id", "email", "name", "product_id", "is_active"),
            },
        ),
        (
            "Sale",
            {
                "fields": ("platform", "sale_id", "notes", "metadata"),
            },
        ),
        (
            "Activations",
            {
                "fields": ("max_activations", "machine_ids"),
            },
        ),
        (
            "Key",
            {
                "fields": ("license_key", "key_hash", "token_payload"),
                "classes": ("collapse",),
            },
        ),
        (
            "Timestamps",
            {
                "fields": ("expires_at", "created_at", "updated_at"),
                "classes": ("collapse",),
            },
        ),
    )
    inlines = [ActivationEntryInline]

    def status_display(self, obj):
        """Display active flag with color coding."""
        if obj.is_active:
            return format_html('<span style="color: green; font-weight: bold;">ACTIVE</span>')
        return format_html('<span style="color: red; font-weight: bold;">DISABLED</span>')

    status_display.short_description = "Status"

    def has_delete_permission(self, request, obj=None):
        """Licenses are disabled, never deleted."""
        return False
