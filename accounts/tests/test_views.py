"""Tests for authentication and user endpoints."""
from django.urls import reverse
from rest_framework import status

from accounts.models import User
from referrals.services import ReferralService
from tests.base import BaseAPITestCase


class AuthAPITests(BaseAPITestCase):

    def test_register(self):
        response = self.client.post(reverse('auth-register'), {
            'email': 'new@example.com',
            'username': 'newbie',
            'password': 'strongpass1',
            'referral_code': self.investor.referral_code,
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertIn('access', response.data)
        self.assertEqual(User.objects.get(email='new@example.com').referred_by, self.investor)

    def test_register_bad_referral_code(self):
        response = self.client.post(reverse('auth-register'), {
            'email': 'new@example.com', 'username': 'newbie', 'password': 'strongpass1',
            'referral_code': 'ZZZZZZZZ',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Invalid referral code')

    def test_login_refresh_logout(self):
        response = self.client.post(reverse('auth-login'), {
            'email': 'investor@example.com', 'password': self.password
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        refresh = response.data['refresh']

        response = self.client.post(reverse('auth-refresh'), {'refresh': refresh}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        refresh = response.data.get('refresh', refresh)

        self.login(self.investor)
        response = self.client.post(reverse('auth-logout'), {'refresh': refresh}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        response = self.client.post(reverse('auth-refresh'), {'refresh': refresh}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_banned_login(self):
        self.investor.ban()
        response = self.client.post(reverse('auth-login'), {
            'email': 'investor@example.com', 'password': self.password
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class UserAPITests(BaseAPITestCase):

    def test_me_and_update_profile(self):
        self.login(self.investor)

        response = self.client.patch(reverse('user-update-profile'), {'name': 'Ivy Investor'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        response = self.client.get(reverse('user-me'))
        self.assertEqual(response.data['name'], 'Ivy Investor')
        self.assertNotIn('is_banned', response.data)

    def test_banned_user_is_locked_out(self):
        self.investor.ban('abuse')
        self.login(self.investor)
        response = self.client.get(reverse('user-me'))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_my_referrals(self):
        friend = self.create_user('friend@example.com', referred_by=self.investor)
        ReferralService().record_referral(referrer=self.investor, referred=friend)
        self.login(self.investor)

        response = self.client.get(reverse('user-referrals'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['referred_email'], 'friend@example.com')

    def test_admin_lists_group_users_only(self):
        self.create_user('outsider@example.com', group=self.other_group)
        self.login(self.admin)

        response = self.client.get(reverse('user-list'))

        emails = {row['email'] for row in response.data['results']}
        self.assertEqual(emails, {'investor@example.com', 'admin@example.com'})

    def test_investor_cannot_list_users(self):
        self.login(self.investor)
        response = self.client.get(reverse('user-list'))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_ban(self):
        self.login(self.admin)
        response = self.client.post(reverse('user-ban', args=[self.investor.id]), {'reason': 'spam'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['is_banned'])

    def test_activities(self):
        self.login(self.admin)
        response = self.client.get(reverse('user-activities', args=[self.investor.id]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, [])
