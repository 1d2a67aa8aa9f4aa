"""Read-only query helpers for orders."""

from __future__ import annotations

from typing import Optional

from django.db.models import Q, QuerySet

from .models import Order, OrderStatusEvent


def service_has_active_orders(service_id: int) -> bool:
    """True when the service has any order still pending or in progress."""

    return Order.objects.filter(service_id=service_id, status__in=Order.ACTIVE_STATUSES).exists()


def get_order(order_id: int) -> Optional[Order]:
    return Order.objects.select_related("service", "buyer", "seller").filter(pk=order_id).first()


def list_orders_for_user(user_id: int, status: Optional[str] = None) -> QuerySet[Order]:
    """Orders where the user is buyer or seller, newest first."""

    qs = Order.objects.select_related("service").filter(Q(buyer_id=user_id) | Q(seller_id=user_id))
    if status:
        qs = qs.filter(status=status)
    return qs


def list_status_events(order_id: int) -> QuerySet[OrderStatusEvent]:
    return OrderStatusEvent.objects.filter(order_id=order_id)
