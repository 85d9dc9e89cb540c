"""
Signal handlers for the wallets app.
"""
import logging

from django.conf import settings
from django.db.models.signals import post_save
from django.dispatch import receiver

from .models import Wallet

logger = logging.getLogger(__name__)


@receiver(post_save, sender=settings.AUTH_USER_MODEL)
def create_user_wallet(sender, instance, created, **kwargs):
    """Open an empty wallet for every new user that belongs to a group."""
    if not created or not instance.group_id:
        return

    wallet, wallet_created = Wallet.objects.get_or_create(
        user=instance,
        defaults={'group_id': instance.group_id}
    )
    if wallet_created:
        logger.info(f"Created wallet {wallet.id} for user {instance.email}")
