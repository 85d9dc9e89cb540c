"""
Platform Core Infrastructure

Provides base functionality used throughout the platform:
- Base models (GroupFilteredModel, TimestampedModel, UUIDModel)
- Managers for multi-tenancy and record ownership
- Base service class and service errors
- Money helpers
"""
