"""
Views for the notifications app.
"""
from django.contrib.auth import get_user_model
from rest_framework import generics, viewsets, mixins, permissions, status
from rest_framework.decorators import action
from rest_framework.response import Response

from accounts.permissions import IsAdmin, IsNotBanned

from .models import Notification
from .serializers import (
    NotificationSerializer, NotificationCreateSerializer,
    BulkNotificationSerializer, NotificationMarkReadSerializer,
    NotificationPreferenceSerializer
)
from .services import NotificationService

User = get_user_model()


class NotificationViewSet(mixins.ListModelMixin,
                          mixins.RetrieveModelMixin,
                          mixins.DestroyModelMixin,
                          viewsets.GenericViewSet):
    """
    Notifications of the current user.

    Admin-only actions create notifications for other users.
    """

    serializer_class = NotificationSerializer
    permission_classes = [permissions.IsAuthenticated, IsNotBanned]

    def get_queryset(self):
        queryset = Notification.objects.for_user(self.request.user)

        is_read = self.request.query_params.get('is_read')
        if is_read is not None:
            queryset = queryset.read() if is_read.lower() == 'true' else queryset.unread()

        notification_type = self.request.query_params.get('type')
        if notification_type:
            queryset = queryset.by_type(notification_type)

        days = self.request.query_params.get('days')
        if days:
            try:
                queryset = queryset.recent(days=int(days))
            except ValueError:
                pass

        return queryset

    def get_serializer_class(self):
        if self.action == 'send':
            return NotificationCreateSerializer
        elif self.action == 'bulk_create':
            return BulkNotificationSerializer
        elif self.action == 'mark_read':
            return NotificationMarkReadSerializer
        return NotificationSerializer

    @action(detail=True, methods=['post'])
    def mark_as_read(self, request, pk=None):
        """Mark a single notification as read."""
        notification = self.get_object()
        notification.mark_as_read()
        return Response(NotificationSerializer(notification).data)

    @action(detail=False, methods=['post'])
    def mark_read(self, request):
        """Mark several notifications as read."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        updated = Notification.objects.for_user(request.user).filter(
            id__in=serializer.validated_data['notification_ids']
        ).unread().mark_all_read()

        return Response({
            'message': f'{updated} notifications marked as read',
            'updated_count': updated
        })

    @action(detail=False, methods=['post'])
    def mark_all_read(self, request):
        """Mark all notifications as read for the current user."""
        updated = Notification.objects.for_user(request.user).unread().mark_all_read()

        return Response({
            'message': 'All notifications marked as read',
            'updated_count': updated
        })

    @action(detail=False, methods=['get'])
    def unread_count(self, request):
        count = Notification.objects.for_user(request.user).unread().count()
        return Response({'unread_count': count})

    @action(detail=False, methods=['post'], permission_classes=[IsAdmin])
    def send(self, request):
        """Create a notification for one user of the admin's group."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        recipient = data['recipient']
        if not request.user.is_superuser and recipient.group_id != request.user.group_id:
            return Response({'error': 'User not found'}, status=status.HTTP_404_NOT_FOUND)

        notification = NotificationService().notify(
            recipient,
            title=data['title'],
            message=data['message'],
            type=data['type'],
            action_url=data.get('action_url', ''),
            send_email=data['send_email'],
        )
        return Response(NotificationSerializer(notification).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=['post'], permission_classes=[IsAdmin])
    def bulk_create(self, request):
        """Create notifications for several users, or the whole group."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        recipients = User.objects.filter(is_active=True)
        if not request.user.is_superuser:
            recipients = recipients.filter(group_id=request.user.group_id)

        recipient_ids = data.get('recipient_ids')
        if recipient_ids:
            recipients = recipients.filter(id__in=recipient_ids)

        if not recipients.exists():
            return Response(
                {'error': 'No valid recipients found'},
                status=status.HTTP_400_BAD_REQUEST
            )

        notifications = NotificationService().notify_bulk(
            recipients,
            title=data['title'],
            message=data['message'],
            type=data['type'],
            action_url=data.get('action_url', ''),
            send_email=data['send_email'],
        )

        return Response({
            'message': f'{len(notifications)} notifications created',
            'notification_count': len(notifications)
        }, status=status.HTTP_201_CREATED)


class NotificationPreferenceView(generics.RetrieveUpdateAPIView):
    """Read and update the current user's notification preferences."""

    serializer_class = NotificationPreferenceSerializer
    permission_classes = [permissions.IsAuthenticated, IsNotBanned]

    def get_object(self):
        return NotificationService().get_preferences(self.request.user)
