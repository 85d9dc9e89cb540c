"""Tests for account services."""
from decimal import Decimal

from django.test import override_settings

from accounts.models import User, Group
from accounts.services import AccountService, UserAdminService
from core.services import ValidationServiceError, PermissionServiceError, NotFoundServiceError
from notifications.models import Notification
from referrals.models import Referral
from tests.base import BaseTestCase
from wallets.models import Wallet


class RegistrationTests(BaseTestCase):

    @override_settings(DEFAULT_GROUP_NAME='Public')
    def test_register_into_default_group(self):
        user = AccountService().register('new@example.com', 'new', 'strongpass1')

        self.assertEqual(user.group, Group.objects.get(name='Public'))
        self.assertEqual(len(user.referral_code), 8)
        self.assertTrue(user.referral_code.isupper() or user.referral_code.isdigit())
        self.assertTrue(Wallet.objects.filter(user=user, balance=Decimal('0')).exists())

    def test_register_with_referral_code(self):
        user = AccountService().register(
            'friend@example.com', 'friend', 'strongpass1', referral_code=self.investor.referral_code.lower()
        )

        self.assertEqual(user.referred_by, self.investor)
        self.assertEqual(user.group, self.group)
        referral = Referral.objects.get(referred=user)
        self.assertEqual(referral.status, Referral.Status.COMPLETED)

    def test_register_with_unknown_referral_code(self):
        with self.assertRaisesMessage(ValidationServiceError, 'Invalid referral code'):
            AccountService().register('x@example.com', 'x', 'strongpass1', referral_code='NOPE0000')

    def test_register_duplicate_email(self):
        with self.assertRaises(ValidationServiceError):
            AccountService().register('INVESTOR@example.com', 'dupe', 'strongpass1')


class LoginTests(BaseTestCase):

    def test_login_returns_tokens(self):
        user, tokens = AccountService().login('investor@example.com', self.password)
        self.assertEqual(user, self.investor)
        self.assertIn('access', tokens)
        self.assertIn('refresh', tokens)
        user.refresh_from_db()
        self.assertIsNotNone(user.last_login_at)

    def test_wrong_password(self):
        with self.assertRaisesMessage(ValidationServiceError, 'Invalid credentials'):
            AccountService().login('investor@example.com', 'wrong')

    def test_banned_user_cannot_login(self):
        self.investor.ban('fraud')
        with self.assertRaises(PermissionServiceError):
            AccountService().login('investor@example.com', self.password)


class ChangePasswordTests(BaseTestCase):

    def test_change_password(self):
        AccountService(user=self.investor).change_password(self.password, 'newpassword1', 'newpassword1')

        self.investor.refresh_from_db()
        self.assertTrue(self.investor.check_password('newpassword1'))
        self.assertTrue(Notification.objects.filter(
            recipient=self.investor, type=Notification.Type.SECURITY_ALERT
        ).exists())

    def test_wrong_current_password(self):
        with self.assertRaisesMessage(ValidationServiceError, 'Current password is incorrect'):
            AccountService(user=self.investor).change_password('bad', 'newpassword1', 'newpassword1')

    def test_short_password(self):
        with self.assertRaises(ValidationServiceError):
            AccountService(user=self.investor).change_password(self.password, 'short', 'short')

    def test_mismatched_confirmation(self):
        with self.assertRaisesMessage(ValidationServiceError, "Passwords don't match"):
            AccountService(user=self.investor).change_password(self.password, 'newpassword1', 'newpassword2')


class UserAdminTests(BaseTestCase):

    def test_ban_and_unban(self):
        service = UserAdminService(user=self.admin)

        user = service.ban(self.investor.id, 'spam')
        self.assertTrue(user.is_banned)
        self.assertEqual(user.ban_reason, 'spam')

        user = service.unban(self.investor.id)
        self.assertFalse(user.is_banned)
        self.assertIsNone(user.banned_at)

    def test_cannot_ban_self(self):
        with self.assertRaises(ValidationServiceError):
            UserAdminService(user=self.admin).ban(self.admin.id)

    def test_other_group_is_hidden(self):
        outsider = self.create_user('outsider@example.com', group=self.other_group)
        with self.assertRaises(NotFoundServiceError):
            UserAdminService(user=self.admin).ban(outsider.id)

    def test_investor_cannot_ban(self):
        other = self.create_user('other@example.com')
        with self.assertRaises(PermissionServiceError):
            UserAdminService(user=self.investor).ban(other.id)

    def test_activities(self):
        from wallets.services import WalletService

        WalletService(user=self.investor).deposit(amount=Decimal('50'))

        entries = UserAdminService(user=self.admin).activities(self.investor.id)

        self.assertEqual(len(entries), 1)
        self.assertEqual(entries[0]['kind'], 'wallet_transaction')
        self.assertEqual(entries[0]['amount'], Decimal('50.00'))


class UserModelTests(BaseTestCase):

    def test_referral_codes_are_unique(self):
        codes = {self.create_user(f'user{i}@example.com').referral_code for i in range(5)}
        self.assertEqual(len(codes), 5)

    def test_is_platform_admin(self):
        self.assertTrue(self.admin.is_platform_admin)
        self.assertFalse(self.investor.is_platform_admin)
        superuser = User.objects.create_superuser(username='root', email='root@example.com', password='x')
        self.assertTrue(superuser.is_platform_admin)
