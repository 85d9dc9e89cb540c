"""Tests for notification API endpoints."""
from django.urls import reverse
from rest_framework import status

from notifications.models import Notification
from notifications.services import NotificationService
from tests.base import BaseAPITestCase


class NotificationAPITests(BaseAPITestCase):

    def setUp(self):
        super().setUp()
        Notification.objects.all().delete()
        service = NotificationService()
        self.first = service.notify(
            self.investor, "First", "One", type=Notification.Type.WALLET_UPDATED, send_email=False
        )
        self.second = service.notify(
            self.investor, "Second", "Two", type=Notification.Type.KYC_APPROVED, send_email=False
        )
        self.foreign = service.notify(self.admin, "Admin only", "Three", send_email=False)
        self.login(self.investor)

    def test_list_own_notifications(self):
        response = self.client.get(reverse('notification-list'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        titles = {item['title'] for item in response.data['results']}
        self.assertEqual(titles, {"First", "Second"})

    def test_filter_by_type_and_read_state(self):
        self.first.mark_as_read()

        response = self.client.get(reverse('notification-list'), {'type': Notification.Type.KYC_APPROVED})
        self.assertEqual([item['title'] for item in response.data['results']], ["Second"])

        response = self.client.get(reverse('notification-list'), {'is_read': 'true'})
        self.assertEqual([item['title'] for item in response.data['results']], ["First"])

    def test_cannot_read_other_users_notification(self):
        response = self.client.get(reverse('notification-detail', args=[self.foreign.id]))
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_mark_as_read_and_unread_count(self):
        response = self.client.post(reverse('notification-mark-as-read', args=[self.first.id]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['is_read'])

        response = self.client.get(reverse('notification-unread-count'))
        self.assertEqual(response.data['unread_count'], 1)

    def test_mark_all_read(self):
        response = self.client.post(reverse('notification-mark-all-read'))

        self.assertEqual(response.data['updated_count'], 2)
        self.foreign.refresh_from_db()
        self.assertFalse(self.foreign.is_read)

    def test_delete_own_notification(self):
        response = self.client.delete(reverse('notification-detail', args=[self.first.id]))

        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Notification.objects.filter(pk=self.first.pk).exists())

    def test_preferences_get_and_patch(self):
        response = self.client.get(reverse('notification-preferences'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['email_enabled'])

        response = self.client.patch(
            reverse('notification-preferences'), {'kyc_notifications': False}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data['kyc_notifications'])
        self.assertTrue(response.data['wallet_notifications'])

    def test_bulk_create_requires_admin(self):
        response = self.client.post(
            reverse('notification-bulk-create'), {'title': "Hi", 'message': "All"}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_bulk_create_targets_admins_group(self):
        outsider = self.create_user('outsider@example.com', group=self.other_group)
        self.login(self.admin)

        response = self.client.post(
            reverse('notification-bulk-create'), {'title': "Hi", 'message': "All"}, format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['notification_count'], 2)
        self.assertFalse(Notification.objects.filter(recipient=outsider, title="Hi").exists())
