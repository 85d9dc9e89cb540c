"""
Serializers for the notifications app.
"""
from django.contrib.auth import get_user_model
from rest_framework import serializers

from .models import Notification, NotificationPreference

User = get_user_model()


class NotificationSerializer(serializers.ModelSerializer):
    """Serializer for notification display."""

    type_display = serializers.CharField(source='get_type_display', read_only=True)

    class Meta:
        model = Notification
        fields = [
            'id', 'type', 'type_display', 'title', 'message', 'action_url',
            'metadata', 'is_read', 'read_at', 'created_at'
        ]
        read_only_fields = [
            'id', 'type', 'title', 'message', 'action_url', 'metadata',
            'read_at', 'created_at'
        ]


class NotificationCreateSerializer(serializers.Serializer):
    """Serializer for creating a notification for a single user."""

    recipient = serializers.PrimaryKeyRelatedField(queryset=User.objects.all())
    type = serializers.ChoiceField(choices=Notification.Type.choices, default=Notification.Type.SYSTEM_UPDATE)
    title = serializers.CharField(max_length=255)
    message = serializers.CharField()
    action_url = serializers.CharField(max_length=500, required=False, allow_blank=True)
    send_email = serializers.BooleanField(default=True)


class BulkNotificationSerializer(serializers.Serializer):
    """Serializer for creating notifications for many users."""

    recipient_ids = serializers.ListField(
        child=serializers.UUIDField(),
        required=False,
        allow_empty=True,
        help_text="Leave empty to notify every user in the group"
    )
    type = serializers.ChoiceField(choices=Notification.Type.choices, default=Notification.Type.SYSTEM_UPDATE)
    title = serializers.CharField(max_length=255)
    message = serializers.CharField()
    action_url = serializers.CharField(max_length=500, required=False, allow_blank=True)
    send_email = serializers.BooleanField(default=False)


class NotificationMarkReadSerializer(serializers.Serializer):
    notification_ids = serializers.ListField(
        child=serializers.UUIDField(),
        allow_empty=False
    )


class NotificationPreferenceSerializer(serializers.ModelSerializer):
    """Serializer for notification preferences."""

    class Meta:
        model = NotificationPreference
        fields = [
            'email_enabled', 'push_enabled',
            'investment_notifications', 'payment_notifications',
            'kyc_notifications', 'referral_notifications',
            'wallet_notifications', 'system_notifications',
            'commission_notifications', 'security_notifications',
            'updated_at'
        ]
        read_only_fields = ['updated_at']
