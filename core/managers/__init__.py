"""
Core managers package.

Exports manager classes that provide multi-tenancy and ownership filtering.
"""

from .base import (
    GroupFilteredQuerySet,
    GroupFilteredManager,
    OwnedQuerySet,
    OwnedManager,
)

__all__ = [
    'GroupFilteredQuerySet',
    'GroupFilteredManager',
    'OwnedQuerySet',
    'OwnedManager',
]
