"""
Base managers for the platform.

These managers provide tenant filtering and per-owner filtering.
"""

from django.db import models
from django.contrib.auth.models import AnonymousUser


def _is_platform_admin(user) -> bool:
    return bool(getattr(user, 'is_platform_admin', False) or user.is_superuser)


class GroupFilteredQuerySet(models.QuerySet):
    """
    Custom QuerySet that filters by group for multi-tenancy.
    """

    def for_user(self, user):
        """Filter queryset based on the user's tenant group."""
        if not user or isinstance(user, AnonymousUser):
            return self.none()

        if user.is_superuser:
            return self

        if getattr(user, 'group_id', None):
            return self.filter(group_id=user.group_id)

        return self.none()

    def for_group(self, group):
        """Filter queryset for a specific group."""
        if not group:
            return self.none()
        return self.filter(group=group)


class GroupFilteredManager(models.Manager.from_queryset(GroupFilteredQuerySet)):
    """
    Default manager for models that inherit from GroupFilteredModel.
    """


class OwnedQuerySet(GroupFilteredQuerySet):
    """
    QuerySet for tenant records that also belong to a single user.

    Admins see every record of their group, superusers see everything and
    everyone else only sees their own rows.
    """

    owner_field = 'user'

    def owned_by(self, user):
        return self.filter(**{self.owner_field: user})

    def for_user(self, user):
        if not user or isinstance(user, AnonymousUser):
            return self.none()

        if _is_platform_admin(user):
            return super().for_user(user)

        return self.owned_by(user)


class OwnedManager(models.Manager.from_queryset(OwnedQuerySet)):
    """
    Manager for user-owned tenant records.
    """
