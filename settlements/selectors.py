"""Read-only query helpers for settlements."""

from __future__ import annotations

from typing import Optional

from django.db.models import QuerySet
from settlements.models import SettlementInstruction


def get_instruction_for_dispute(dispute_id: int) -> Optional[SettlementInstruction]:
    if not dispute_id:
        return None
    return SettlementInstruction.objects.select_related("order").filter(dispute_id=dispute_id).first()


def list_instructions_for_order(order_id: int, status: Optional[str] = None) -> QuerySet[SettlementInstruction]:
    qs = SettlementInstruction.objects.select_related("order").filter(order_id=order_id)
    if status:
        qs = qs.filter(status=status)
    return qs


def list_recent_failed_instructions(limit: int = 20) -> QuerySet[SettlementInstruction]:
    """Failed dispatches, most recent first, for operators to retry."""

    qs = SettlementInstruction.objects.filter(status=SettlementInstruction.STATUS_FAILED).order_by("-created_at")
    return qs[:limit]
