"""Admin configuration for settlement instructions."""

from django.contrib import admin, messages

from .models import SettlementInstruction
from .services import retry_instruction


@admin.register(SettlementInstruction)
class SettlementInstructionAdmin(admin.ModelAdmin):
    """Read-mostly admin; amounts are fixed at resolution time."""

    list_display = (
        "id",
        "dispute_id",
        "order_id",
        "resolution",
        "refund_amount",
        "seller_amount",
        "commission_amount",
        "status",
        "attempts",
        "created_at",
    )
    list_filter = ("status", "resolution", "created_at")
    search_fields = ("order__id", "dispute__id")
    readonly_fields = (
        "dispute",
        "order",
        "resolution",
        "order_amount",
        "refund_amount",
        "seller_amount",
        "commission_amount",
        "status",
        "attempts",
        "last_error",
        "created_at",
        "updated_at",
    )
    ordering = ("-id",)
    actions = ["retry_failed"]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    def retry_failed(self, request, queryset):
        retried = 0
        for instruction in queryset.filter(status=SettlementInstruction.STATUS_FAILED):
            retry_instruction(instruction.id)
            retried += 1
        messages.info(request, f"Retried {retried} instruction(s).")

    retry_failed.short_description = "Retry failed dispatches"
