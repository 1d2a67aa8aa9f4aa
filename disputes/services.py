"""Business logic for disputes.

Opening a dispute flips the order to `disputed`; resolving it moves the order
to the matching `resolved_*` state and records the settlement instruction. Each
operation commits as one transaction, and resolution is final.
"""

import logging
from decimal import Decimal, InvalidOperation
from functools import partial
from typing import Optional

from common.choices import DisputeResolution, OrderEvent
from common.exceptions import (
    AlreadyResolvedError,
    DuplicateDisputeError,
    InvalidStateError,
    InvalidTransitionError,
    PermissionDeniedError,
    ValidationError,
)
from common.validators import require_id
from django.conf import settings
from django.db import IntegrityError, transaction
from django.utils import timezone
from orders.models import Order
from orders.services import transition_order
from orders.state import DISPUTABLE_STATES
from settlements.services import create_instruction, dispatch_instruction
from users.selectors import get_user

from .models import Dispute
from .selectors import has_open_dispute

logger = logging.getLogger("studentgigs.disputes")


def _require_moderator(user_id):
    user = get_user(require_id(user_id, "admin_user_id"))
    if user is None or not user.is_moderator:
        raise PermissionDeniedError("Only administrators can handle disputes.")
    return user


def _clean_refund_percentage(resolution: str, value) -> Optional[Decimal]:
    if resolution != DisputeResolution.PARTIAL_REFUND:
        return None
    if value is None or value == "":
        value = getattr(settings, "DISPUTES_DEFAULT_PARTIAL_REFUND_PERCENT", 50)
    try:
        percentage = Decimal(str(value)).quantize(Decimal("0.01"))
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError("Refund percentage must be a number", field="refund_percentage")
    if percentage < 0 or percentage > 100:
        raise ValidationError("Refund percentage must be between 0 and 100", field="refund_percentage")
    return percentage


def open_dispute(*, order_id: int, initiator_id: int, reason: str) -> Dispute:
    """Open a dispute on an active or completed order.

    The initiator must be the buyer or the seller. Raises `ValidationError`
    for an empty reason, `DuplicateDisputeError` when an unresolved dispute
    exists, `InvalidStateError` when the order cannot be disputed and
    `Order.DoesNotExist` for unknown orders.
    """

    order_id = require_id(order_id, "order_id")
    initiator_id = require_id(initiator_id, "initiator_user_id")
    reason = (reason or "").strip()
    if not reason:
        raise ValidationError("Dispute reason is required", field="reason")

    try:
        with transaction.atomic():
            order = Order.objects.select_for_update().get(pk=order_id)
            if not order.is_party(initiator_id):
                raise PermissionDeniedError("You are not authorized to open a dispute for this order.")
            if has_open_dispute(order.id):
                raise DuplicateDisputeError()
            if order.status not in DISPUTABLE_STATES:
                raise InvalidStateError("This order cannot be disputed in its current state.")
            try:
                order = transition_order(
                    order_id=order.id, event=OrderEvent.OPEN_DISPUTE, actor_id=initiator_id, reason="dispute opened"
                )
            except InvalidTransitionError:
                raise InvalidStateError("This order cannot be disputed in its current state.")
            dispute = Dispute.objects.create(order=order, initiator_id=initiator_id, reason=reason)
    except IntegrityError:
        logger.warning("dispute_duplicate_race", extra={"order_id": order_id, "initiator_id": initiator_id})
        raise DuplicateDisputeError()

    logger.info(
        "dispute_opened",
        extra={"dispute_id": dispute.id, "order_id": order_id, "initiator_id": initiator_id},
    )
    return dispute


def begin_review(*, dispute_id: int, admin_id: int) -> Dispute:
    """Move an open dispute under review by `admin_id`.

    Repeating the call as the same admin is a no-op; another admin takes the
    review over.
    """

    dispute_id = require_id(dispute_id, "dispute_id")
    admin = _require_moderator(admin_id)
    with transaction.atomic():
        dispute = Dispute.objects.select_for_update().get(pk=dispute_id)
        if dispute.is_resolved:
            raise InvalidStateError("This dispute has already been resolved.")
        if dispute.status == Dispute.STATUS_UNDER_REVIEW and dispute.reviewer_id == admin.id:
            return dispute
        previous_reviewer = dispute.reviewer_id
        dispute.status = Dispute.STATUS_UNDER_REVIEW
        dispute.reviewer = admin
        dispute.save(update_fields=["status", "reviewer", "updated_at"])

    logger.info(
        "dispute_review_started",
        extra={"dispute_id": dispute.id, "admin_id": admin.id, "previous_reviewer_id": previous_reviewer},
    )
    return dispute


def resolve_dispute(
    *,
    dispute_id: int,
    admin_id: int,
    resolution: str,
    admin_note: str = "",
    refund_percentage=None,
) -> Dispute:
    """Record the binding decision on a dispute.

    Raises `AlreadyResolvedError` when a resolution already exists; the
    settlement instruction is created with the resolution and dispatched only
    after commit, so it is triggered exactly once.
    """

    dispute_id = require_id(dispute_id, "dispute_id")
    if resolution not in DisputeResolution.values:
        raise ValidationError("Invalid resolution type", field="resolution")
    percentage = _clean_refund_percentage(resolution, refund_percentage)
    admin = _require_moderator(admin_id)

    with transaction.atomic():
        dispute = Dispute.objects.select_for_update().select_related("order").get(pk=dispute_id)
        if dispute.is_resolved:
            logger.warning(
                "dispute_already_resolved",
                extra={"dispute_id": dispute.id, "admin_id": admin.id, "resolution": dispute.resolution},
            )
            raise AlreadyResolvedError(dispute)

        transition_order(
            order_id=dispute.order_id,
            event=Dispute.RESOLUTION_EVENTS[resolution],
            actor_id=admin.id,
            reason=f"dispute resolved: {resolution}",
        )
        dispute.status = Dispute.STATUS_RESOLVED
        dispute.resolution = resolution
        dispute.refund_percentage = percentage
        dispute.admin_note = (admin_note or "").strip()
        dispute.resolved_by = admin
        dispute.resolved_at = timezone.now()
        dispute.save(
            update_fields=[
                "status",
                "resolution",
                "refund_percentage",
                "admin_note",
                "resolved_by",
                "resolved_at",
                "updated_at",
            ]
        )
        dispute.order.refresh_from_db()
        instruction = create_instruction(dispute=dispute)
        transaction.on_commit(partial(dispatch_instruction, instruction.id))

    logger.info(
        "dispute_resolved",
        extra={
            "dispute_id": dispute.id,
            "order_id": dispute.order_id,
            "admin_id": admin.id,
            "resolution": resolution,
            "instruction_id": instruction.id,
        },
    )
    return dispute
