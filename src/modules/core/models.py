"""Base abstract model for the catalog service.

Provides:
- ``BaseModel``: ``created_at`` / ``updated_at`` timestamp bookkeeping.

Design decisions:
- Both timestamps are stamped from a single ``timezone.now()`` call on the
  first persist, so a freshly created row has ``created_at == updated_at``.
  Django's ``auto_now_add`` / ``auto_now`` pair reads the clock twice.
- Every later ``save()`` refreshes ``updated_at``; the ``update_fields``
  guard ensures the column is written even for partial saves.
- Entity mutators may stamp ``updated_at`` themselves before saving.
"""

from __future__ import annotations

from django.db import models
from django.utils import timezone


class BaseModel(models.Model):
    """Abstract base with timestamp bookkeeping."""

    created_at = models.DateTimeField(editable=False)
    updated_at = models.DateTimeField()

    class Meta:
        abstract = True

    def touch(self) -> None:
        """Stamp ``updated_at`` with the current time."""
        self.updated_at = timezone.now()

    def save(self, *args, **kwargs) -> None:
        now = timezone.now()
        if self._state.adding and self.created_at is None:
            self.created_at = now
        self.updated_at = now

        update_fields = kwargs.get("update_fields")
        if update_fields is not None and "updated_at" not in update_fields:
            kwargs["update_fields"] = list(update_fields) + ["updated_at"]
        super().save(*args, **kwargs)
