"""URL routes for the orders app (v1)."""

from django.urls import path

from .views import (
    OrderActivateView,
    OrderCancelView,
    OrderCreateView,
    OrderDeliverView,
    OrderDetailView,
    OrderDisputeView,
)

app_name = "orders"

urlpatterns = [
    path("", OrderCreateView.as_view(), name="order-create"),
    path("<int:order_id>/", OrderDetailView.as_view(), name="order-detail"),
    path("<int:order_id>/activate/", OrderActivateView.as_view(), name="order-activate"),
    path("<int:order_id>/deliver/", OrderDeliverView.as_view(), name="order-deliver"),
    path("<int:order_id>/cancel/", OrderCancelView.as_view(), name="order-cancel"),
    path("<int:order_id>/dispute/", OrderDisputeView.as_view(), name="order-dispute"),
]
