"""Business logic for editing service listings."""

import logging
from decimal import Decimal, InvalidOperation
from typing import Callable, Dict, List, Optional

from audit.guard import EditOutcome, guarded_edit
from common.exceptions import PermissionDeniedError, ValidationError
from common.validators import require_id
from django.db import transaction

from .models import Category, Service

logger = logging.getLogger("studentgigs.catalog")

EDITABLE_FIELDS = ("title", "description", "price", "delivery_days", "category")


def _clean_value(field: str, value):
    if field == "price":
        try:
            price = Decimal(str(value)).quantize(Decimal("0.01"))
        except (InvalidOperation, TypeError, ValueError):
            raise ValidationError("Price must be a number", field=field)
        if not price.is_finite():
            raise ValidationError("Price must be a number", field=field)
        if price < 0:
            raise ValidationError("Price must be non-negative", field=field)
        return price
    if field == "delivery_days":
        if isinstance(value, bool):
            raise ValidationError("Delivery days must be a whole number", field=field)
        try:
            amount = Decimal(str(value).strip())
        except (InvalidOperation, TypeError, ValueError):
            raise ValidationError("Delivery days must be a whole number", field=field)
        # Fractional days are rejected, never truncated
        if not amount.is_finite() or amount != amount.to_integral_value():
            raise ValidationError("Delivery days must be a whole number", field=field)
        days = int(amount)
        if days < 1:
            raise ValidationError("Delivery days must be at least 1", field=field)
        return days
    if field == "category":
        if value in (None, ""):
            return None
        cid = require_id(value, "category")
        if not Category.objects.filter(pk=cid, is_active=True).exists():
            raise ValidationError("Unknown category", field=field)
        return cid
    if field == "title":
        title = str(value or "").strip()
        if not title:
            raise ValidationError("Title is required", field=field)
        return title
    return str(value or "")


def update_service(
    *,
    service_id: int,
    user_id: int,
    changes: Dict[str, object],
    active_order_checker: Optional[Callable[[int], bool]] = None,
) -> List[EditOutcome]:
    """Apply a seller's edits and their ledger entries in one transaction.

    Unchanged fields are skipped. Returns one outcome per applied field.
    """

    service_id = require_id(service_id, "service_id")
    user_id = require_id(user_id, "user_id")
    unknown = sorted(set(changes or {}) - set(EDITABLE_FIELDS))
    if unknown:
        raise ValidationError(f"Field cannot be edited: {unknown[0]}", field=unknown[0])
    cleaned = {field: _clean_value(field, value) for field, value in (changes or {}).items()}

    outcomes: List[EditOutcome] = []
    with transaction.atomic():
        service = Service.objects.select_for_update().get(pk=service_id)
        if service.seller_id != user_id:
            raise PermissionDeniedError()

        touched = []
        for field in EDITABLE_FIELDS:
            if field not in cleaned:
                continue
            attname = "category_id" if field == "category" else field
            old = getattr(service, attname)
            new = cleaned[field]
            if old == new:
                continue
            setattr(service, attname, new)
            touched.append(attname)
            outcomes.append(
                guarded_edit(
                    service_id=service.id,
                    user_id=user_id,
                    field_changed=field,
                    old_value=old,
                    new_value=new,
                    active_order_checker=active_order_checker,
                )
            )
        if touched:
            service.save(update_fields=touched + ["updated_at"])

    logger.info(
        "service_updated",
        extra={
            "service_id": service_id,
            "user_id": user_id,
            "fields": [o.field for o in outcomes],
            "flagged": any(o.flagged for o in outcomes),
        },
    )
    return outcomes
