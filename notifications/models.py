"""
Notification models: in-app notifications, per-user preferences and
the outgoing email log.
"""
import uuid
from typing import Optional, Dict, Any, List

from django.conf import settings
from django.db import models
from django.utils import timezone

from core.models import TimestampedModel


class NotificationQuerySet(models.QuerySet):
    """Custom QuerySet for Notification with specialized filtering."""

    def unread(self):
        return self.filter(is_read=False)

    def read(self):
        return self.filter(is_read=True)

    def for_user(self, user):
        """Get notifications for a specific user."""
        return self.filter(recipient=user)

    def recent(self, days: int = 7):
        cutoff = timezone.now() - timezone.timedelta(days=days)
        return self.filter(created_at__gte=cutoff)

    def by_type(self, notification_type: str):
        return self.filter(type=notification_type)

    def mark_all_read(self):
        """Mark all notifications in queryset as read."""
        return self.update(is_read=True, read_at=timezone.now())


class NotificationManager(models.Manager):
    """Custom manager for Notification model."""

    def get_queryset(self):
        return NotificationQuerySet(self.model, using=self._db)

    def for_user(self, user):
        return self.get_queryset().for_user(user)

    def create_for_user(
        self,
        recipient,
        type: str,
        title: str,
        message: str,
        action_url: str = '',
        metadata: Optional[Dict[str, Any]] = None,
    ):
        """Create a notification for a user."""
        return self.create(
            recipient=recipient,
            type=type,
            title=title,
            message=message,
            action_url=action_url or '',
            metadata=metadata or {},
        )

    def create_bulk(self, recipients: List, **kwargs):
        """Create notifications for multiple recipients."""
        return [self.create_for_user(recipient=recipient, **kwargs) for recipient in recipients]


class Notification(TimestampedModel):
    """
    In-app notification delivered to a single user.
    """

    class Type(models.TextChoices):
        WALLET_UPDATED = 'WALLET_UPDATED', 'Wallet Updated'
        COMMISSION_EARNED = 'COMMISSION_EARNED', 'Commission Earned'
        COMMISSION_PAID = 'COMMISSION_PAID', 'Commission Paid'
        INVESTMENT_CREATED = 'INVESTMENT_CREATED', 'Investment Created'
        INVESTMENT_MATURED = 'INVESTMENT_MATURED', 'Investment Matured'
        INVESTMENT_CANCELLED = 'INVESTMENT_CANCELLED', 'Investment Cancelled'
        KYC_SUBMITTED = 'KYC_SUBMITTED', 'KYC Submitted'
        KYC_APPROVED = 'KYC_APPROVED', 'KYC Approved'
        KYC_REJECTED = 'KYC_REJECTED', 'KYC Rejected'
        PURCHASE_UPDATED = 'PURCHASE_UPDATED', 'Purchase Updated'
        SYSTEM_UPDATE = 'SYSTEM_UPDATE', 'System Update'
        SECURITY_ALERT = 'SECURITY_ALERT', 'Security Alert'

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    recipient = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='notifications',
        help_text="User who receives the notification"
    )

    type = models.CharField(
        max_length=50,
        choices=Type.choices,
        default=Type.SYSTEM_UPDATE,
        db_index=True
    )
    title = models.CharField(max_length=255)
    message = models.TextField()
    action_url = models.CharField(
        max_length=500,
        blank=True,
        help_text="URL for the primary action"
    )
    metadata = models.JSONField(default=dict, blank=True)

    is_read = models.BooleanField(default=False)
    read_at = models.DateTimeField(null=True, blank=True)

    email_sent = models.BooleanField(default=False)
    email_sent_at = models.DateTimeField(null=True, blank=True)

    objects = NotificationManager()

    class Meta:
        db_table = 'notifications'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['recipient', '-created_at'], name='notif_recipient_created_idx'),
            models.Index(fields=['recipient', 'is_read'], name='notif_recipient_read_idx'),
        ]

    def __str__(self):
        return f"{self.title} for {self.recipient}"

    def mark_as_read(self):
        if not self.is_read:
            self.is_read = True
            self.read_at = timezone.now()
            self.save(update_fields=['is_read', 'read_at', 'updated_at'])


class NotificationPreference(models.Model):
    """User notification preferences, one row per user."""

    # Notification type -> category flag that gates its email
    CATEGORY_BY_TYPE = {
        Notification.Type.WALLET_UPDATED: 'wallet_notifications',
        Notification.Type.COMMISSION_EARNED: 'commission_notifications',
        Notification.Type.COMMISSION_PAID: 'commission_notifications',
        Notification.Type.INVESTMENT_CREATED: 'investment_notifications',
        Notification.Type.INVESTMENT_MATURED: 'investment_notifications',
        Notification.Type.INVESTMENT_CANCELLED: 'investment_notifications',
        Notification.Type.KYC_SUBMITTED: 'kyc_notifications',
        Notification.Type.KYC_APPROVED: 'kyc_notifications',
        Notification.Type.KYC_REJECTED: 'kyc_notifications',
        Notification.Type.PURCHASE_UPDATED: 'payment_notifications',
        Notification.Type.SYSTEM_UPDATE: 'system_notifications',
        Notification.Type.SECURITY_ALERT: 'security_notifications',
    }

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='notification_preferences'
    )

    # Channels
    email_enabled = models.BooleanField(default=True)
    push_enabled = models.BooleanField(default=True)

    # Categories
    investment_notifications = models.BooleanField(default=True)
    payment_notifications = models.BooleanField(default=True)
    kyc_notifications = models.BooleanField(default=True)
    referral_notifications = models.BooleanField(default=True)
    wallet_notifications = models.BooleanField(default=True)
    system_notifications = models.BooleanField(default=True)
    commission_notifications = models.BooleanField(default=True)
    security_notifications = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'notification_preferences'

    def __str__(self):
        return f"Preferences for {self.user}"

    def category_enabled(self, notification_type: str) -> bool:
        flag = self.CATEGORY_BY_TYPE.get(notification_type, 'system_notifications')
        return getattr(self, flag)

    def should_send_email(self, notification_type: str) -> bool:
        """Check if email should be sent for a notification type."""
        return self.email_enabled and self.category_enabled(notification_type)


class EmailNotification(TimestampedModel):
    """Outgoing email log for notifications."""

    class Status(models.TextChoices):
        PENDING = 'pending', 'Pending'
        SENT = 'sent', 'Sent'
        FAILED = 'failed', 'Failed'

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    notification = models.OneToOneField(
        Notification,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='email_notification'
    )

    recipient_email = models.EmailField()
    subject = models.CharField(max_length=255)
    body = models.TextField()

    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING
    )
    sent_at = models.DateTimeField(null=True, blank=True)
    error_message = models.TextField(blank=True)

    class Meta:
        db_table = 'email_notifications'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status', '-created_at'], name='email_notif_status_idx'),
        ]

    def __str__(self):
        return f"Email to {self.recipient_email}: {self.subject}"
