"""
Base models for the platform.

These abstract models provide common functionality that is inherited by
every tenant-scoped model of the investment apps.
"""

import uuid
from django.db import models
from django.core.exceptions import ValidationError

from core.managers import GroupFilteredManager


class UUIDModel(models.Model):
    """
    Abstract model that uses UUID as primary key instead of auto-incrementing integer.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    class Meta:
        abstract = True


class TimestampedModel(models.Model):
    """
    Abstract model that provides created and updated timestamp fields.
    """
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
        ordering = ['-created_at']


class GroupFilteredModel(UUIDModel, TimestampedModel):
    """
    Abstract model that provides group-based filtering for multi-tenancy.

    Subclasses inherit ``GroupFilteredManager`` as ``objects`` unless they
    declare their own manager. When ``group`` is not set on save,
    it is taken from the owning user (``self.user``) if the model has one.
    """
    group = models.ForeignKey(
        'accounts.Group',
        on_delete=models.CASCADE,
        related_name='%(app_label)s_%(class)s_set',
        help_text="The tenant group this object belongs to",
        db_index=True
    )

    objects = GroupFilteredManager()

    class Meta:
        abstract = True
        ordering = ['-created_at']

    def resolve_group(self):
        """Return the group implied by the owning user, if any."""
        owner = getattr(self, 'user', None)
        if owner is not None and getattr(owner, 'group_id', None):
            return owner.group
        return None

    def save(self, *args, **kwargs):
        if not self.group_id:
            group = self.resolve_group()
            if group is not None:
                self.group = group

            if not self.group_id:
                raise ValidationError(
                    f"Group must be set for {self.__class__.__name__} instances"
                )

        super().save(*args, **kwargs)
