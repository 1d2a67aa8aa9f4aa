"""Admin configuration for disputes.

Resolution goes through the dispute engine (API); the admin only browses.
"""

from django.contrib import admin

from .models import Dispute


@admin.register(Dispute)
class DisputeAdmin(admin.ModelAdmin):
    list_display = ("id", "order", "initiator", "status", "resolution", "reviewer", "resolved_at", "created_at")
    list_filter = ("status", "resolution", "created_at")
    search_fields = ("order__id", "reason", "initiator__email")
    date_hierarchy = "created_at"
    readonly_fields = (
        "order",
        "initiator",
        "reason",
        "status",
        "reviewer",
        "resolution",
        "refund_percentage",
        "admin_note",
        "resolved_by",
        "resolved_at",
        "created_at",
        "updated_at",
    )

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
