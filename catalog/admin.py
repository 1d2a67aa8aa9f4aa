from django.contrib import admin

from .models import Category, Service


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ("name", "slug", "is_active", "created_at", "updated_at")
    list_filter = ("is_active",)
    search_fields = ("name", "slug")
    ordering = ("name",)
    prepopulated_fields = {"slug": ("name",)}


@admin.register(Service)
class ServiceAdmin(admin.ModelAdmin):
    """Browse listings. Term fields are read-only; sellers edit them through
    `catalog.services.update_service`."""

    list_display = ("title", "seller", "category", "price", "delivery_days", "status", "updated_at")
    list_filter = ("status", "category")
    search_fields = ("title", "description", "seller__email")
    ordering = ("title",)
    raw_id_fields = ("seller",)
    readonly_fields = ("price", "delivery_days", "description", "category", "created_at", "updated_at")
