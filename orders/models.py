"""Order domain models.

An order snapshots the price and terms of a service at creation so later
service edits cannot reach it.
"""

from decimal import Decimal

from common.choices import OrderEvent, OrderStatus
from common.models import TimeStampedModel
from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models


class Order(TimeStampedModel):
    """One purchase of a service by a buyer from the service's seller."""

    STATUS_PENDING = OrderStatus.PENDING
    STATUS_ACTIVE = OrderStatus.ACTIVE
    STATUS_COMPLETED = OrderStatus.COMPLETED
    STATUS_DISPUTED = OrderStatus.DISPUTED
    STATUS_RESOLVED_REFUND = OrderStatus.RESOLVED_REFUND
    STATUS_RESOLVED_PARTIAL_REFUND = OrderStatus.RESOLVED_PARTIAL_REFUND
    STATUS_RESOLVED_RELEASE = OrderStatus.RESOLVED_RELEASE
    STATUS_CANCELLED = OrderStatus.CANCELLED
    STATUS_CHOICES = OrderStatus.choices

    ACTIVE_STATUSES = (OrderStatus.PENDING, OrderStatus.ACTIVE)

    service = models.ForeignKey("catalog.Service", related_name="orders", on_delete=models.PROTECT)
    buyer = models.ForeignKey(settings.AUTH_USER_MODEL, related_name="orders_placed", on_delete=models.PROTECT)
    seller = models.ForeignKey(settings.AUTH_USER_MODEL, related_name="orders_received", on_delete=models.PROTECT)
    price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    terms = models.JSONField(default=dict, blank=True)
    commission_rate = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00")), MaxValueValidator(Decimal("100.00"))],
    )
    status = models.CharField(max_length=32, choices=STATUS_CHOICES, default=STATUS_PENDING, db_index=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["service", "status"], name="orders_service_status_idx"),
        ]
        constraints = [
            models.CheckConstraint(condition=models.Q(price__gte=0), name="order_price_non_negative"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"Order#{self.id} service={self.service_id} status={self.status}"

    def is_party(self, user_id) -> bool:
        return user_id in (self.buyer_id, self.seller_id)


class OrderStatusEvent(TimeStampedModel):
    """History of status transitions for an order."""

    order = models.ForeignKey(Order, related_name="status_events", on_delete=models.CASCADE)
    from_status = models.CharField(max_length=32, choices=OrderStatus.choices)
    to_status = models.CharField(max_length=32, choices=OrderStatus.choices)
    event = models.CharField(max_length=32, choices=OrderEvent.choices)
    actor_id = models.PositiveBigIntegerField(null=True, blank=True)
    reason = models.CharField(max_length=200, blank=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["order", "created_at"], name="orders_event_order_created_idx"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"Order#{self.order_id} {self.from_status}->{self.to_status}"
