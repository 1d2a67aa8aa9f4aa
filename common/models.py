"""Abstract base models shared across apps.

`TimeStampedModel` adds creation and modification timestamps to mutable rows.
`AppendOnlyModel` is the base for ledger rows that may be inserted but never
changed or removed, neither through the instance nor through a queryset.
"""

from django.db import models

from .exceptions import LedgerImmutableError


class TimeStampedModel(models.Model):
    """Abstract base model adding `created_at` and `updated_at` timestamps."""

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class AppendOnlyQuerySet(models.QuerySet):
    def update(self, **kwargs):
        raise LedgerImmutableError()

    def delete(self):
        raise LedgerImmutableError()


class AppendOnlyModel(models.Model):
    """Rows are written once on insert; later saves and deletes raise."""

    objects = AppendOnlyQuerySet.as_manager()

    class Meta:
        abstract = True

    def save(self, *args, **kwargs):
        if not self._state.adding or kwargs.get("force_update") or kwargs.get("update_fields") is not None:
            raise LedgerImmutableError()
        # A fresh instance carrying an existing pk would otherwise take the UPDATE path
        if self.pk is not None and type(self)._base_manager.filter(pk=self.pk).exists():
            raise LedgerImmutableError()
        kwargs["force_insert"] = True
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise LedgerImmutableError()
