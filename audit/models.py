"""Append-only ledger of service attribute changes.

Events reference services and users by id only, so they outlive both and are
never purged when either is deleted.
"""

from common.choices import SnapshotKind
from common.models import AppendOnlyModel
from django.db import models


class ServiceEditEvent(AppendOnlyModel):
    """One immutable record of a single field change on a service."""

    service_id = models.PositiveBigIntegerField(db_index=True)
    user_id = models.PositiveBigIntegerField(db_index=True)
    field_changed = models.CharField(max_length=64)
    old_value = models.TextField(null=True, blank=True)
    new_value = models.TextField(null=True, blank=True)
    old_kind = models.CharField(max_length=16, choices=SnapshotKind.choices, default=SnapshotKind.NULL)
    new_kind = models.CharField(max_length=16, choices=SnapshotKind.choices, default=SnapshotKind.NULL)
    has_active_orders = models.BooleanField(default=False)
    changed_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        ordering = ["-changed_at", "-id"]
        indexes = [
            models.Index(fields=["service_id", "changed_at"], name="audit_edit_service_idx"),
            models.Index(fields=["user_id", "changed_at"], name="audit_edit_user_idx"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"ServiceEditEvent#{self.id} service={self.service_id} field={self.field_changed}"
