"""Edit guard for service attribute changes.

Edits are never blocked: orders hold their own price and terms snapshot, so a
change cannot reach an order that already committed. When the service has
active orders the ledger entry is flagged so the pre-edit terms can be shown
and disputes over stale terms can be adjudicated.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from orders.selectors import service_has_active_orders

from .services import record_edit

logger = logging.getLogger("studentgigs.audit")

# Fields that make up the commercial terms of a listing
TERM_FIELDS = frozenset({"price", "delivery_days", "description", "category"})


@dataclass(frozen=True)
class EditOutcome:
    applied: bool
    flagged: bool
    audit_event_id: int
    field: str = ""


def guarded_edit(
    *,
    service_id: int,
    user_id: int,
    field_changed: str,
    old_value: Any,
    new_value: Any,
    active_order_checker: Optional[Callable[[int], bool]] = None,
) -> EditOutcome:
    checker = active_order_checker or service_has_active_orders
    has_active = bool(checker(service_id))
    event_id = record_edit(
        service_id=service_id,
        user_id=user_id,
        field_changed=field_changed,
        old_value=old_value,
        new_value=new_value,
        has_active_orders=has_active,
    )
    if has_active and field_changed in TERM_FIELDS:
        logger.warning(
            "service_terms_edited_with_active_orders",
            extra={"service_id": service_id, "user_id": user_id, "field": field_changed, "event_id": event_id},
        )
    return EditOutcome(applied=True, flagged=has_active, audit_event_id=event_id, field=field_changed)
