"""Read-only history queries over the edit ledger.

Both selectors run a single query; `limit` only adds a slice bound.
"""

from __future__ import annotations

from typing import Optional

from common.validators import optional_limit, require_id
from django.db.models import QuerySet

from .models import ServiceEditEvent


def _bounded(qs: QuerySet, limit) -> QuerySet:
    bound = optional_limit(limit)
    if bound is None:
        return qs
    return qs[:bound]


def history_for_service(service_id: int, limit: Optional[int] = None) -> QuerySet[ServiceEditEvent]:
    """Events for one service, newest first."""

    sid = require_id(service_id, "service_id")
    return _bounded(ServiceEditEvent.objects.filter(service_id=sid).order_by("-changed_at", "-id"), limit)


def history_for_user(user_id: int, limit: Optional[int] = None) -> QuerySet[ServiceEditEvent]:
    """Events made by one user across all services, newest first."""

    uid = require_id(user_id, "user_id")
    return _bounded(ServiceEditEvent.objects.filter(user_id=uid).order_by("-changed_at", "-id"), limit)
