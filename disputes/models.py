"""Dispute domain models."""

from decimal import Decimal

from common.choices import DisputeResolution, DisputeStatus, OrderEvent
from common.models import TimeStampedModel
from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models


class Dispute(TimeStampedModel):
    """A formal contest of an order's outcome, decided once by an admin."""

    STATUS_OPEN = DisputeStatus.OPEN
    STATUS_UNDER_REVIEW = DisputeStatus.UNDER_REVIEW
    STATUS_RESOLVED = DisputeStatus.RESOLVED
    STATUS_CHOICES = DisputeStatus.choices

    # resolution -> order event that applies it
    RESOLUTION_EVENTS = {
        DisputeResolution.REFUND_BUYER: OrderEvent.RESOLVE_REFUND,
        DisputeResolution.PARTIAL_REFUND: OrderEvent.RESOLVE_PARTIAL_REFUND,
        DisputeResolution.RELEASE_TO_SELLER: OrderEvent.RESOLVE_RELEASE,
    }

    order = models.ForeignKey("orders.Order", related_name="disputes", on_delete=models.PROTECT)
    initiator = models.ForeignKey(settings.AUTH_USER_MODEL, related_name="disputes_opened", on_delete=models.PROTECT)
    reason = models.TextField()
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_OPEN, db_index=True)
    reviewer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        related_name="disputes_reviewing",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
    )
    resolution = models.CharField(max_length=32, choices=DisputeResolution.choices, null=True, blank=True)
    refund_percentage = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal("0.00")), MaxValueValidator(Decimal("100.00"))],
    )
    admin_note = models.TextField(blank=True)
    resolved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        related_name="disputes_resolved",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
    )
    resolved_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["status", "created_at"], name="disputes_status_created_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["order"],
                condition=~models.Q(status="resolved"),
                name="dispute_one_unresolved_per_order",
            ),
            models.CheckConstraint(
                condition=models.Q(status="resolved", resolution__isnull=False)
                | (~models.Q(status="resolved") & models.Q(resolution__isnull=True)),
                name="dispute_resolution_matches_status",
            ),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"Dispute#{self.id} order={self.order_id} status={self.status}"

    @property
    def is_resolved(self) -> bool:
        return self.status == self.STATUS_RESOLVED
