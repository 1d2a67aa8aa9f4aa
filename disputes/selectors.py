"""Read-only query helpers for disputes."""

from __future__ import annotations

from typing import Optional

from common.validators import require_id
from django.db.models import QuerySet

from .models import Dispute


def get_dispute(dispute_id: int) -> Optional[Dispute]:
    did = require_id(dispute_id, "dispute_id")
    return Dispute.objects.select_related("order", "initiator", "reviewer", "resolved_by").filter(pk=did).first()


def get_by_order(order_id: int) -> Optional[Dispute]:
    """The order's dispute: the unresolved one if any, otherwise the latest."""

    oid = require_id(order_id, "order_id")
    qs = Dispute.objects.select_related("order").filter(order_id=oid)
    current = qs.exclude(status=Dispute.STATUS_RESOLVED).first()
    return current or qs.order_by("-created_at", "-id").first()


def has_open_dispute(order_id: int) -> bool:
    return Dispute.objects.filter(order_id=order_id).exclude(status=Dispute.STATUS_RESOLVED).exists()


def list_disputes(status: Optional[str] = None) -> QuerySet[Dispute]:
    """Admin queue, newest first, optionally filtered by `status`."""

    qs = Dispute.objects.select_related("order", "initiator", "reviewer")
    if status:
        qs = qs.filter(status=status)
    return qs
