"""Write side of the service edit ledger."""

import logging
from typing import Any

from common.exceptions import PersistenceError, ValidationError
from common.validators import require_id
from django.db import DatabaseError

from .models import ServiceEditEvent
from .values import to_snapshot

logger = logging.getLogger("studentgigs.audit")


def record_edit(
    *,
    service_id: int,
    user_id: int,
    field_changed: str,
    old_value: Any,
    new_value: Any,
    has_active_orders: bool,
) -> int:
    """Append one edit event and return its id.

    A single INSERT; storage failures surface as `PersistenceError` so the
    enclosing transaction rolls back together with the edit it describes.
    """

    service_id = require_id(service_id, "service_id")
    user_id = require_id(user_id, "user_id")
    field_changed = (field_changed or "").strip()
    if not field_changed:
        raise ValidationError("field_changed is required", field="field_changed")

    old = to_snapshot(old_value)
    new = to_snapshot(new_value)
    try:
        event = ServiceEditEvent.objects.create(
            service_id=service_id,
            user_id=user_id,
            field_changed=field_changed,
            old_value=old.text,
            new_value=new.text,
            old_kind=old.kind,
            new_kind=new.kind,
            has_active_orders=bool(has_active_orders),
        )
    except DatabaseError as exc:
        logger.error(
            "audit_record_failed",
            extra={"service_id": service_id, "user_id": user_id, "field": field_changed},
        )
        raise PersistenceError() from exc
    return event.id
