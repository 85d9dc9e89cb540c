"""Tests for referral services."""
from decimal import Decimal

from django.core.cache import cache

from core.services import ValidationServiceError, PermissionServiceError
from notifications.models import Notification
from referrals.models import Referral, ReferralCommission, ReferralSettings
from referrals.services import ReferralService
from tests.base import BaseTestCase
from wallets.models import WalletTransaction


class ReferralTestCase(BaseTestCase):

    def setUp(self):
        super().setUp()
        cache.clear()
        self.referred = self.create_user('referred@example.com', referred_by=self.investor)
        self.referral = ReferralService().record_referral(referrer=self.investor, referred=self.referred)
        self.admin_service = ReferralService(user=self.admin)

    def set_rates(self, **rates):
        return self.admin_service.update_settings(**rates)


class ReferralSettingsTests(ReferralTestCase):

    def test_default_settings_are_zero(self):
        current = ReferralService(user=self.investor).get_settings()
        self.assertEqual(current.property_commission_rate, Decimal('0'))
        self.assertEqual(ReferralSettings.objects.for_group(self.group).count(), 1)

    def test_update_keeps_unspecified_rates(self):
        self.set_rates(property_commission_rate=Decimal('5'), market_commission_rate=Decimal('2.5'))
        updated = self.set_rates(market_commission_rate=Decimal('3'))

        self.assertEqual(updated.property_commission_rate, Decimal('5.00'))
        self.assertEqual(updated.market_commission_rate, Decimal('3.00'))
        self.assertEqual(ReferralService(user=self.investor).get_settings().pk, updated.pk)

    def test_rate_out_of_range(self):
        with self.assertRaises(ValidationServiceError):
            self.set_rates(equipment_commission_rate=Decimal('101'))

    def test_investor_cannot_update(self):
        with self.assertRaises(PermissionServiceError):
            ReferralService(user=self.investor).update_settings(property_commission_rate=Decimal('1'))


class ReferralCommissionTests(ReferralTestCase):

    def test_record_referral_is_completed(self):
        self.assertEqual(self.referral.status, Referral.Status.COMPLETED)
        self.assertEqual(self.referral.group, self.group)

    def test_no_commission_without_referral(self):
        result = ReferralService().process_referral_commission(
            self.investor, Decimal('1000'), ReferralCommission.TransactionType.MARKET_INVESTMENT
        )
        self.assertIsNone(result)

    def test_no_commission_at_zero_rate(self):
        result = ReferralService().process_referral_commission(
            self.referred, Decimal('1000'), ReferralCommission.TransactionType.MARKET_INVESTMENT
        )
        self.assertIsNone(result)

    def test_commission_uses_type_rate(self):
        self.set_rates(property_commission_rate=Decimal('2'), equipment_commission_rate=Decimal('10'))

        commission = ReferralService().process_referral_commission(
            self.referred,
            Decimal('300000'),
            ReferralCommission.TransactionType.REAL_ESTATE_INVESTMENT,
            'inv-1'
        )

        self.assertEqual(commission.amount, Decimal('6000.00'))
        self.assertEqual(commission.rate, Decimal('2.00'))
        self.assertEqual(commission.status, ReferralCommission.Status.PENDING)
        notification = Notification.objects.get(recipient=self.investor, type=Notification.Type.COMMISSION_EARNED)
        self.assertEqual(
            notification.message,
            "You've earned a 2.00% commission of $6000.00 from your referral's "
            "real estate investment of $300000.00."
        )

    def test_approve_commission_credits_referrer(self):
        self.set_rates(market_commission_rate=Decimal('5'))
        commission = ReferralService().process_referral_commission(
            self.referred, Decimal('200'), ReferralCommission.TransactionType.MARKET_INVESTMENT
        )

        approved = self.admin_service.approve_commission(commission.id)

        self.assertEqual(approved.status, ReferralCommission.Status.PAID)
        self.assertIsNotNone(approved.paid_at)
        self.investor.wallet.refresh_from_db()
        self.assertEqual(self.investor.wallet.balance, Decimal('10.00'))
        row = WalletTransaction.objects.get(type=WalletTransaction.Type.COMMISSION)
        self.assertEqual(row.description, 'Referral commission for market investment')
        self.referral.refresh_from_db()
        self.assertTrue(self.referral.commission_paid)

    def test_reject_commission(self):
        self.set_rates(market_commission_rate=Decimal('5'))
        commission = ReferralService().process_referral_commission(
            self.referred, Decimal('200'), ReferralCommission.TransactionType.MARKET_INVESTMENT
        )

        rejected = self.admin_service.reject_commission(commission.id, 'Duplicate')

        self.assertEqual(rejected.status, ReferralCommission.Status.REJECTED)
        self.assertEqual(rejected.rejection_reason, 'Duplicate')
        with self.assertRaises(ValidationServiceError):
            self.admin_service.approve_commission(commission.id)

    def test_bulk_approve_reports_failures(self):
        self.set_rates(market_commission_rate=Decimal('5'))
        service = ReferralService()
        first = service.process_referral_commission(
            self.referred, Decimal('100'), ReferralCommission.TransactionType.MARKET_INVESTMENT
        )
        second = service.process_referral_commission(
            self.referred, Decimal('100'), ReferralCommission.TransactionType.MARKET_INVESTMENT
        )
        self.admin_service.reject_commission(second.id, 'No')

        result = self.admin_service.bulk_approve([first.id, second.id])

        self.assertEqual(result['approved'], [str(first.id)])
        self.assertEqual(result['failed'][0]['id'], str(second.id))
        self.assertEqual(result['failed'][0]['error'], 'Commission is not pending')

    def test_summary(self):
        summary = ReferralService(user=self.investor).summary()
        self.assertEqual(summary['total_referrals'], 1)
        self.assertEqual(summary['referral_code'], self.investor.referral_code)
