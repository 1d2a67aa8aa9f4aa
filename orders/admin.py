from django.contrib import admin

from .models import Order, OrderStatusEvent


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """Status is read-only: transitions go through the order state machine."""

    list_display = ("id", "service", "buyer", "seller", "price", "status", "created_at")
    list_filter = ("status", "created_at")
    search_fields = ("id", "buyer__email", "seller__email", "service__title")
    date_hierarchy = "created_at"
    readonly_fields = ("service", "buyer", "seller", "price", "terms", "commission_rate", "status")


@admin.register(OrderStatusEvent)
class OrderStatusEventAdmin(admin.ModelAdmin):
    list_display = ("id", "order", "from_status", "to_status", "event", "actor_id", "reason", "created_at")
    list_filter = ("from_status", "to_status", "event", "created_at")
    search_fields = ("order__id", "reason")
    date_hierarchy = "created_at"
