"""Business logic for orders.

Order status changes go through `transition_order`, which locks the row and
applies the change as a compare-and-set on the observed status so that only
one of two concurrent transitions can win.
"""

import logging
from decimal import Decimal
from typing import Optional

from common.choices import OrderEvent
from common.exceptions import InvalidTransitionError, ValidationError
from common.validators import require_id
from django.conf import settings
from django.db import transaction
from django.utils import timezone

from .models import Order, OrderStatusEvent
from .state import next_status

logger = logging.getLogger("studentgigs.orders")


def snapshot_terms(service) -> dict:
    """Terms of a service as the buyer saw them when ordering."""

    return {
        "title": service.title,
        "description": service.description,
        "delivery_days": service.delivery_days,
        "category_id": service.category_id,
    }


def place_order(*, service, buyer) -> Order:
    """Create a pending order capturing the service's current price and terms."""

    if service.seller_id == buyer.id:
        raise ValidationError("You cannot order your own service", field="service")
    rate = Decimal(str(getattr(settings, "PLATFORM_COMMISSION_RATE", "0.00")))
    order = Order.objects.create(
        service=service,
        buyer=buyer,
        seller_id=service.seller_id,
        price=service.price,
        terms=snapshot_terms(service),
        commission_rate=rate,
    )
    logger.info(
        "order_placed",
        extra={"order_id": order.id, "service_id": service.id, "buyer_id": buyer.id, "price": str(order.price)},
    )
    return order


def transition_order(*, order_id: int, event: str, actor_id: Optional[int] = None, reason: str = "") -> Order:
    """Apply `event` to the order or raise `InvalidTransitionError`.

    Raises `Order.DoesNotExist` for unknown ids. On failure the status is left
    untouched.
    """

    order_id = require_id(order_id, "order_id")
    with transaction.atomic():
        order = Order.objects.select_for_update().get(pk=order_id)
        current = order.status
        target = next_status(current, event)
        updated = Order.objects.filter(pk=order_id, status=current).update(status=target, updated_at=timezone.now())
        if updated != 1:
            logger.warning(
                "order_transition_lost_race",
                extra={"order_id": order_id, "event": event, "from_status": current},
            )
            raise InvalidTransitionError()
        OrderStatusEvent.objects.create(
            order_id=order_id,
            from_status=current,
            to_status=target,
            event=event,
            actor_id=actor_id,
            reason=(reason or "")[:200],
        )
    order.refresh_from_db()
    logger.info(
        "order_transitioned",
        extra={"order_id": order_id, "event": event, "from_status": current, "to_status": target},
    )
    return order


def activate_order(order: Order, *, actor_id: Optional[int] = None) -> Order:
    """Seller accepts a pending order."""

    return transition_order(order_id=order.id, event=OrderEvent.ACTIVATE, actor_id=actor_id, reason="accepted")


def confirm_delivery(order: Order, *, actor_id: Optional[int] = None) -> Order:
    return transition_order(
        order_id=order.id, event=OrderEvent.CONFIRM_DELIVERY, actor_id=actor_id, reason="delivery confirmed"
    )


def cancel_order(order: Order, *, actor_id: Optional[int] = None, reason: str = "cancelled") -> Order:
    """Cancel a pending order.

    Disputes can only exist on active or completed orders, so a pending order
    never carries one.
    """

    return transition_order(order_id=order.id, event=OrderEvent.CANCEL, actor_id=actor_id, reason=reason)
