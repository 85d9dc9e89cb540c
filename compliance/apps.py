"""
Compliance App Configuration
"""
from django.apps import AppConfig


class ComplianceConfig(AppConfig):
    """Configuration for the Compliance module."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'compliance'
    verbose_name = 'Compliance & KYC'
