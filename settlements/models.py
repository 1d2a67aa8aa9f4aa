"""Settlement domain models.

A SettlementInstruction is the outward record of a dispute resolution: the
amounts to refund and to release. Fund movement happens elsewhere; this model
only guarantees the instruction exists exactly once per resolved dispute.
"""

from decimal import Decimal

from common.choices import DisputeResolution, SettlementStatus
from common.models import TimeStampedModel
from django.core.validators import MinValueValidator
from django.db import models


class SettlementInstruction(TimeStampedModel):
    """Financial outcome of one resolved dispute, pending external execution."""

    STATUS_PENDING = SettlementStatus.PENDING
    STATUS_DISPATCHED = SettlementStatus.DISPATCHED
    STATUS_FAILED = SettlementStatus.FAILED
    STATUS_CHOICES = SettlementStatus.choices

    dispute = models.OneToOneField("disputes.Dispute", related_name="settlement", on_delete=models.PROTECT)
    order = models.ForeignKey("orders.Order", related_name="settlements", on_delete=models.PROTECT, db_index=True)
    resolution = models.CharField(max_length=32, choices=DisputeResolution.choices)
    order_amount = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(Decimal("0.00"))])
    refund_amount = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00"), validators=[MinValueValidator(Decimal("0.00"))]
    )
    seller_amount = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00"), validators=[MinValueValidator(Decimal("0.00"))]
    )
    commission_amount = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00"), validators=[MinValueValidator(Decimal("0.00"))]
    )
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_PENDING, db_index=True)
    attempts = models.PositiveIntegerField(default=0)
    last_error = models.CharField(max_length=255, blank=True)

    class Meta:
        ordering = ["-id"]
        indexes = [
            models.Index(fields=["status", "created_at"], name="settlement_status_created_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(refund_amount__gte=0, seller_amount__gte=0, commission_amount__gte=0),
                name="settlement_amounts_non_negative",
            ),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"SettlementInstruction#{self.id} order={self.order_id} {self.resolution} status={self.status}"

    def as_payload(self) -> dict:
        return {
            "instruction_id": self.id,
            "dispute_id": self.dispute_id,
            "order_id": self.order_id,
            "resolution": self.resolution,
            "order_amount": str(self.order_amount),
            "refund_amount": str(self.refund_amount),
            "seller_amount": str(self.seller_amount),
            "commission_amount": str(self.commission_amount),
        }
