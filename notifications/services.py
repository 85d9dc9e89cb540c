"""
Notification delivery service.
"""
import logging
from typing import Any, Dict, Iterable, List, Optional

from django.db import transaction

from .models import Notification, NotificationPreference, EmailNotification

logger = logging.getLogger(__name__)


class NotificationService:
    """
    Creates in-app notifications and queues the matching email when the
    recipient's preferences allow it.
    """

    def get_preferences(self, user) -> NotificationPreference:
        preferences, _ = NotificationPreference.objects.get_or_create(user=user)
        return preferences

    def notify(
        self,
        user,
        title: str,
        message: str,
        type: str = Notification.Type.SYSTEM_UPDATE,
        action_url: str = '',
        metadata: Optional[Dict[str, Any]] = None,
        send_email: bool = True,
    ) -> Notification:
        notification = Notification.objects.create_for_user(
            recipient=user,
            type=type,
            title=title,
            message=message,
            action_url=action_url,
            metadata=metadata,
        )

        if send_email and user.email and self.get_preferences(user).should_send_email(type):
            self._queue_email(notification)

        logger.debug(f"Notification {notification.id} ({type}) created for {user.email}")
        return notification

    def notify_bulk(self, users: Iterable, **kwargs) -> List[Notification]:
        return [self.notify(user, **kwargs) for user in users]

    def _queue_email(self, notification: Notification) -> EmailNotification:
        from .tasks import send_email_notification

        email = EmailNotification.objects.create(
            notification=notification,
            recipient_email=notification.recipient.email,
            subject=notification.title,
            body=notification.message,
        )
        transaction.on_commit(lambda: send_email_notification.delay(str(email.id)))
        return email
