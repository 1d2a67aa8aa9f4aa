"""Settlement trigger for resolved disputes.

Computes the financial outcome of a resolution, records it as a
SettlementInstruction inside the resolving transaction, and hands it to the
external settlement endpoint once that transaction has committed.
"""

import hashlib
import hmac
import json
import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

import httpx
import sentry_sdk
from common.choices import DisputeResolution
from django.conf import settings
from django.utils import timezone
from settlements.models import SettlementInstruction

logger = logging.getLogger("studentgigs.settlements")

CENT = Decimal("0.01")


def _money(value) -> Decimal:
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class SettlementAmounts:
    order_amount: Decimal
    refund_amount: Decimal
    seller_amount: Decimal
    commission_amount: Decimal


def compute_settlement(
    *,
    price: Decimal,
    commission_rate: Decimal,
    resolution: str,
    refund_percentage: Optional[Decimal] = None,
) -> SettlementAmounts:
    """Split the order amount between buyer refund, seller payout and commission.

    Commission is only taken on the part released to the seller.
    """

    price = _money(price)
    rate = Decimal(commission_rate or 0) / Decimal(100)
    if resolution == DisputeResolution.REFUND_BUYER:
        refund = price
    elif resolution == DisputeResolution.PARTIAL_REFUND:
        refund = _money(price * Decimal(refund_percentage or 0) / Decimal(100))
    elif resolution == DisputeResolution.RELEASE_TO_SELLER:
        refund = Decimal("0.00")
    else:
        raise ValueError(f"Unknown resolution: {resolution}")
    released = price - refund
    commission = _money(released * rate)
    return SettlementAmounts(
        order_amount=price,
        refund_amount=refund,
        seller_amount=released - commission,
        commission_amount=commission,
    )


def create_instruction(*, dispute) -> SettlementInstruction:
    """Record the settlement for a just-resolved dispute.

    Must run inside the resolution transaction; the one-to-one constraint on
    `dispute` rejects a second instruction.
    """

    order = dispute.order
    amounts = compute_settlement(
        price=order.price,
        commission_rate=order.commission_rate,
        resolution=dispute.resolution,
        refund_percentage=dispute.refund_percentage,
    )
    return SettlementInstruction.objects.create(
        dispute=dispute,
        order=order,
        resolution=dispute.resolution,
        order_amount=amounts.order_amount,
        refund_amount=amounts.refund_amount,
        seller_amount=amounts.seller_amount,
        commission_amount=amounts.commission_amount,
    )


def sign_payload(raw_body: bytes) -> str:
    """HMAC SHA512 of the body with the shared settlement secret."""

    secret = (getattr(settings, "SETTLEMENT_WEBHOOK_SECRET", "") or "").encode("utf-8")
    return hmac.new(secret, msg=raw_body, digestmod=hashlib.sha512).hexdigest()


def dispatch_instruction(instruction_id: int) -> Optional[SettlementInstruction]:
    """Send a pending instruction to the settlement endpoint.

    Claims the row with a pending -> dispatched compare-and-set so concurrent
    callers cannot send it twice. Without a configured endpoint the
    instruction stays pending for an external worker to collect. Failures are
    recorded on the row and never propagate; the resolution is already final.
    """

    url = getattr(settings, "SETTLEMENT_WEBHOOK_URL", "")
    if not url:
        logger.info("settlement_awaiting_pickup", extra={"instruction_id": instruction_id})
        return SettlementInstruction.objects.filter(pk=instruction_id).first()

    claimed = SettlementInstruction.objects.filter(
        pk=instruction_id, status=SettlementInstruction.STATUS_PENDING
    ).update(status=SettlementInstruction.STATUS_DISPATCHED, updated_at=timezone.now())
    instruction = SettlementInstruction.objects.filter(pk=instruction_id).first()
    if not claimed:
        logger.info("settlement_already_claimed", extra={"instruction_id": instruction_id})
        return instruction

    raw = json.dumps(instruction.as_payload(), sort_keys=True).encode("utf-8")
    headers = {"Content-Type": "application/json", "X-Settlement-Signature": sign_payload(raw)}
    timeout = getattr(settings, "SETTLEMENT_WEBHOOK_TIMEOUT", 15)
    try:
        r = httpx.post(url, content=raw, headers=headers, timeout=timeout)
        ok = 200 <= r.status_code < 300
        error = "" if ok else f"HTTP {r.status_code}"
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        ok = False
        error = exc.__class__.__name__

    instruction.attempts += 1
    if ok:
        instruction.last_error = ""
        instruction.save(update_fields=["attempts", "last_error", "updated_at"])
        logger.info(
            "settlement_dispatched",
            extra={"instruction_id": instruction.id, "order_id": instruction.order_id, "resolution": instruction.resolution},
        )
        return instruction

    instruction.status = SettlementInstruction.STATUS_FAILED
    instruction.last_error = error[:255]
    instruction.save(update_fields=["status", "attempts", "last_error", "updated_at"])
    logger.error(
        "settlement_dispatch_failed",
        extra={"instruction_id": instruction.id, "order_id": instruction.order_id, "error": error},
    )
    sentry_sdk.capture_message("settlement_dispatch_failed", level="error")
    return instruction


def retry_instruction(instruction_id: int) -> Optional[SettlementInstruction]:
    """Move a failed instruction back to pending and dispatch it again."""

    reset = SettlementInstruction.objects.filter(
        pk=instruction_id, status=SettlementInstruction.STATUS_FAILED
    ).update(status=SettlementInstruction.STATUS_PENDING, updated_at=timezone.now())
    if not reset:
        return SettlementInstruction.objects.filter(pk=instruction_id).first()
    return dispatch_instruction(instruction_id)
