"""Read-only admin for the service edit ledger."""

from django.contrib import admin

from .models import ServiceEditEvent


@admin.register(ServiceEditEvent)
class ServiceEditEventAdmin(admin.ModelAdmin):
    list_display = ("id", "service_id", "user_id", "field_changed", "has_active_orders", "changed_at")
    list_filter = ("field_changed", "has_active_orders", "changed_at")
    search_fields = ("service_id", "user_id", "field_changed")
    date_hierarchy = "changed_at"
    ordering = ("-changed_at", "-id")

    def get_readonly_fields(self, request, obj=None):
        return [f.name for f in self.model._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
