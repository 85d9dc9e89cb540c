"""
Wallets App Configuration
"""
from django.apps import AppConfig


class WalletsConfig(AppConfig):
    """Configuration for the wallets app."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'wallets'
    verbose_name = 'Wallets & Ledger'

    def ready(self):
        """Register signal handlers when Django starts."""
        from . import signals  # noqa: F401
