"""
Django admin configuration for activations app.
"""

from django.contrib import admin
from django.utils.html import format_html

from activations.infrastructure.models import ActivationEntry


@admin.register(ActivationEntry)
class ActivationEntryAdmin(admin.ModelAdmin):
    """Read-only admin interface for the binding history."""

    list_display = [
        "license",
        "machine_id_display",
        "ip",
        "os",
        "app",
        "activated_at",
    ]
    list_filter = ["activated_at", "license__platform"]
    search_fields = ["machine_id", "license__email", "license__sale_id"]
    readonly_fields = ["id", "license", "machine_id", "ip", "os", "app", "activated_at"]

    def machine_id_display(self, obj):
        """Display machine identifier with truncation."""
        if len(obj.machine_id) > 50:
            return format_html(
                '<span title="{}">{}</span>',
                obj.machine_id,
                obj.machine_id[:47] + "...",
            )
        return obj.machine_id

    machine_id_display.short_description = "Machine"

    def has_add_permission(self, request):
        """History is append-only through the API."""
        return False

    def has_change_permission(self, request, obj=None):
        """History entries are immutable."""
        return False

    def has_delete_permission(self, request, obj=None):
        """History entries are never deleted."""
        return False

    def get_queryset(self, request):
        """Optimize queryset."""
        return super().get_queryset(request).select_related("license")
