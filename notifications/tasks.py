from celery import shared_task
from django.conf import settings
from django.core.mail import send_mail
from django.utils import timezone
import logging

from .models import EmailNotification

logger = logging.getLogger(__name__)


@shared_task
def send_email_notification(email_notification_id):
    """Send a queued notification email"""
    try:
        email_notification = EmailNotification.objects.select_related('notification').get(
            id=email_notification_id
        )
    except EmailNotification.DoesNotExist:
        logger.error(f"Email notification {email_notification_id} not found")
        return

    if email_notification.status == EmailNotification.Status.SENT:
        return

    body = email_notification.body
    notification = email_notification.notification
    if notification and notification.action_url:
        body = f"{body}\n\n{settings.FRONTEND_URL.rstrip('/')}{notification.action_url}"

    try:
        send_mail(
            subject=email_notification.subject,
            message=body,
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[email_notification.recipient_email],
        )
    except Exception as e:
        email_notification.status = EmailNotification.Status.FAILED
        email_notification.error_message = str(e)
        email_notification.save(update_fields=['status', 'error_message', 'updated_at'])
        logger.error(f"Failed to send email to {email_notification.recipient_email}: {e}")
        raise

    now = timezone.now()
    email_notification.status = EmailNotification.Status.SENT
    email_notification.sent_at = now
    email_notification.save(update_fields=['status', 'sent_at', 'updated_at'])

    if notification:
        notification.email_sent = True
        notification.email_sent_at = now
        notification.save(update_fields=['email_sent', 'email_sent_at', 'updated_at'])

    logger.info(f"Email sent to {email_notification.recipient_email}")
