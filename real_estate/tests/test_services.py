"""Tests for real estate services."""
from datetime import timedelta
from decimal import Decimal

from django.core.cache import cache
from django.db.models import Sum
from django.utils import timezone

from core.services import ValidationServiceError, PermissionServiceError
from notifications.models import Notification
from real_estate.models import Property, RealEstateInvestment, PropertyTransaction
from real_estate.services import PropertyService, RealEstateService, RealEstateAdminService
from referrals.models import ReferralCommission
from referrals.services import ReferralService
from tests.base import BaseTestCase
from wallets.models import WalletTransaction


class RealEstateTestCase(BaseTestCase):

    def setUp(self):
        super().setUp()
        cache.clear()
        self.approve_kyc(self.investor)
        self.fund(self.investor, '3000000')
        self.service = RealEstateService(user=self.investor)
        self.admin_service = RealEstateAdminService(user=self.admin)
        self.property = Property.objects.create(
            group=self.group,
            name='Lakeview Villa',
            price=Decimal('900000'),
            location='Naivasha',
        )

    def balance(self):
        self.investor.wallet.refresh_from_db()
        return self.investor.wallet.balance


class InvestmentTests(RealEstateTestCase):

    def test_create_semi_annual_investment(self):
        investment = self.service.create_investment('SEMI_ANNUAL', Decimal('400000'))

        self.assertEqual(investment.status, RealEstateInvestment.Status.ACTIVE)
        self.assertEqual(investment.expected_return, Decimal('60000.00'))
        self.assertEqual((investment.end_date - investment.start_date).days, 180)
        self.assertEqual(self.balance(), Decimal('2600000.00'))

        row = WalletTransaction.objects.get(type=WalletTransaction.Type.INVESTMENT)
        self.assertEqual(row.description, 'Real Estate Investment - SEMI_ANNUAL')
        self.assertEqual(row.reference, str(investment.id))
        self.assertTrue(
            Notification.objects.filter(recipient=self.investor, type=Notification.Type.INVESTMENT_CREATED).exists()
        )

    def test_annual_investment_return(self):
        investment = self.service.create_investment('ANNUAL', Decimal('1500000'))
        self.assertEqual(investment.expected_return, Decimal('450000.00'))
        self.assertEqual((investment.end_date - investment.start_date).days, 360)

    def test_amount_outside_plan_bounds(self):
        with self.assertRaises(ValidationServiceError):
            self.service.create_investment('SEMI_ANNUAL', Decimal('800000'))
        with self.assertRaises(ValidationServiceError):
            self.service.create_investment('ANNUAL', Decimal('100'))

    def test_requires_kyc(self):
        other = self.create_user('nokyc@example.com')
        self.fund(other, '500000')
        with self.assertRaisesMessage(PermissionServiceError, 'KYC verification required'):
            RealEstateService(user=other).create_investment('SEMI_ANNUAL', Decimal('400000'))

    def test_insufficient_balance(self):
        self.fund(self.investor, '1000')
        with self.assertRaisesMessage(ValidationServiceError, 'Insufficient balance'):
            self.service.create_investment('SEMI_ANNUAL', Decimal('400000'))
        self.assertFalse(RealEstateInvestment.objects.exists())

    def test_commission_for_referrer(self):
        referred = self.create_user('referred@example.com', referred_by=self.investor)
        ReferralService().record_referral(referrer=self.investor, referred=referred)
        ReferralService(user=self.admin).update_settings(property_commission_rate=Decimal('1'))
        self.approve_kyc(referred)
        self.fund(referred, '500000')

        RealEstateService(user=referred).create_investment('SEMI_ANNUAL', Decimal('300000'))

        commission = ReferralCommission.objects.get(referrer=self.investor)
        self.assertEqual(commission.amount, Decimal('3000.00'))
        self.assertEqual(commission.transaction_type, ReferralCommission.TransactionType.REAL_ESTATE_INVESTMENT)

    def test_update_reinvest_only_when_active(self):
        investment = self.service.create_investment('SEMI_ANNUAL', Decimal('400000'))
        self.assertTrue(self.service.update_investment(investment.id, True).reinvest)

        self.admin_service.update_investment_status(investment.id, RealEstateInvestment.Status.MATURED)
        with self.assertRaises(ValidationServiceError):
            self.service.update_investment(investment.id, False)

    def test_withdraw_matured_investment(self):
        investment = self.service.create_investment('SEMI_ANNUAL', Decimal('400000'))
        with self.assertRaises(ValidationServiceError):
            self.service.withdraw_investment(investment.id)

        self.admin_service.update_investment_status(investment.id, RealEstateInvestment.Status.MATURED)
        withdrawn = self.service.withdraw_investment(investment.id)

        self.assertEqual(withdrawn.status, RealEstateInvestment.Status.CANCELLED)
        self.assertEqual(withdrawn.actual_return, Decimal('60000.00'))
        self.assertEqual(self.balance(), Decimal('3060000.00'))
        row = WalletTransaction.objects.get(type=WalletTransaction.Type.RETURN)
        self.assertEqual(row.description, f'Return from investment {investment.id}')

    def test_withdrawn_investment_cannot_be_matured_again(self):
        investment = self.service.create_investment('SEMI_ANNUAL', Decimal('400000'))
        self.admin_service.update_investment_status(investment.id, RealEstateInvestment.Status.MATURED)
        self.service.withdraw_investment(investment.id)

        with self.assertRaisesMessage(ValidationServiceError, 'Only active investments can be updated'):
            self.admin_service.update_investment_status(investment.id, RealEstateInvestment.Status.MATURED)
        with self.assertRaises(ValidationServiceError):
            self.service.withdraw_investment(investment.id)

        self.assertEqual(self.balance(), Decimal('3060000.00'))

    def test_status_cannot_go_back_to_active(self):
        investment = self.service.create_investment('SEMI_ANNUAL', Decimal('400000'))
        with self.assertRaisesMessage(ValidationServiceError, 'Invalid status'):
            self.admin_service.update_investment_status(investment.id, RealEstateInvestment.Status.ACTIVE)

    def test_cancel_refunds_principal(self):
        investment = self.service.create_investment('SEMI_ANNUAL', Decimal('400000'))
        self.assertEqual(self.balance(), Decimal('2600000.00'))

        cancelled = self.admin_service.cancel_investment(investment.id)

        self.assertEqual(cancelled.status, RealEstateInvestment.Status.CANCELLED)
        self.assertEqual(self.balance(), Decimal('3000000.00'))
        refund = WalletTransaction.objects.get(type=WalletTransaction.Type.RETURN)
        self.assertEqual(refund.amount, Decimal('400000.00'))
        self.assertEqual(refund.status, WalletTransaction.Status.COMPLETED)
        self.assertTrue(
            Notification.objects.filter(recipient=self.investor, type=Notification.Type.INVESTMENT_CANCELLED).exists()
        )

        with self.assertRaises(ValidationServiceError):
            self.admin_service.cancel_investment(investment.id)
        self.assertEqual(self.balance(), Decimal('3000000.00'))

    def test_cancel_through_status_update_refunds(self):
        investment = self.service.create_investment('SEMI_ANNUAL', Decimal('400000'))
        self.admin_service.update_investment_status(investment.id, RealEstateInvestment.Status.CANCELLED)
        self.assertEqual(self.balance(), Decimal('3000000.00'))

    def test_matured_investment_cannot_be_cancelled(self):
        investment = self.service.create_investment('SEMI_ANNUAL', Decimal('400000'))
        self.admin_service.update_investment_status(investment.id, RealEstateInvestment.Status.MATURED)

        with self.assertRaises(ValidationServiceError):
            self.admin_service.cancel_investment(investment.id)

    def test_investor_cannot_cancel(self):
        investment = self.service.create_investment('SEMI_ANNUAL', Decimal('400000'))
        with self.assertRaises(PermissionServiceError):
            RealEstateAdminService(user=self.investor).cancel_investment(investment.id)

    def test_mature_due_investments(self):
        investment = self.service.create_investment('SEMI_ANNUAL', Decimal('400000'))
        self.service.create_investment('SEMI_ANNUAL', Decimal('400000'))
        RealEstateInvestment.objects.filter(pk=investment.pk).update(end_date=timezone.now() - timedelta(days=1))

        matured = RealEstateAdminService().mature_due_investments()

        self.assertEqual(matured, 1)
        investment.refresh_from_db()
        self.assertEqual(investment.status, RealEstateInvestment.Status.MATURED)
        self.assertTrue(
            Notification.objects.filter(recipient=self.investor, type=Notification.Type.INVESTMENT_MATURED).exists()
        )

    def test_portfolio(self):
        self.service.create_investment('SEMI_ANNUAL', Decimal('400000'))
        portfolio = self.service.portfolio()
        self.assertEqual(portfolio['total_invested'], Decimal('400000.00'))
        self.assertEqual(portfolio['total_expected_returns'], Decimal('60000.00'))
        self.assertEqual(portfolio['active_investments'], 1)


class PropertyPurchaseTests(RealEstateTestCase):

    def test_full_purchase(self):
        purchase = self.service.purchase_property(self.property.id, PropertyTransaction.Type.FULL)

        self.assertEqual(purchase.status, PropertyTransaction.Status.COMPLETED)
        self.property.refresh_from_db()
        self.assertEqual(self.property.status, Property.Status.SOLD)
        self.assertEqual(self.balance(), Decimal('2100000.00'))
        row = WalletTransaction.objects.get(type=WalletTransaction.Type.PURCHASE)
        self.assertEqual(row.description, 'Purchase of property: Lakeview Villa')

    def test_sold_property_cannot_be_bought(self):
        self.service.purchase_property(self.property.id, PropertyTransaction.Type.FULL)
        with self.assertRaisesMessage(ValidationServiceError, 'Property is not available'):
            self.service.purchase_property(self.property.id, PropertyTransaction.Type.FULL)

    def test_installment_count_bounds(self):
        with self.assertRaises(ValidationServiceError):
            self.service.purchase_property(self.property.id, PropertyTransaction.Type.INSTALLMENT, 4)
        with self.assertRaises(ValidationServiceError):
            self.service.purchase_property(self.property.id, PropertyTransaction.Type.INSTALLMENT, 1)

    def test_installment_plan(self):
        purchase = self.service.purchase_property(self.property.id, PropertyTransaction.Type.INSTALLMENT, 3)

        self.assertEqual(purchase.installment_amount, Decimal('300000.00'))
        self.assertEqual(purchase.paid_installments, 1)
        self.assertEqual(purchase.status, PropertyTransaction.Status.PENDING)
        self.assertIsNotNone(purchase.next_payment_due)
        self.property.refresh_from_db()
        self.assertEqual(self.property.status, Property.Status.PENDING)
        self.assertEqual(self.balance(), Decimal('2700000.00'))

        self.service.make_installment_payment(purchase.id)
        purchase = self.service.make_installment_payment(purchase.id)

        self.assertEqual(purchase.paid_installments, 3)
        self.assertEqual(purchase.status, PropertyTransaction.Status.COMPLETED)
        self.assertIsNone(purchase.next_payment_due)
        self.property.refresh_from_db()
        self.assertEqual(self.property.status, Property.Status.SOLD)
        self.assertEqual(self.balance(), Decimal('2100000.00'))

        with self.assertRaises(ValidationServiceError):
            self.service.make_installment_payment(purchase.id)

    def test_full_purchase_has_no_installments_to_pay(self):
        purchase = self.service.purchase_property(self.property.id, PropertyTransaction.Type.FULL)
        with self.assertRaisesMessage(ValidationServiceError, 'This is not an installment purchase'):
            self.service.make_installment_payment(purchase.id)

    def test_admin_completes_transaction(self):
        purchase = self.service.purchase_property(self.property.id, PropertyTransaction.Type.INSTALLMENT, 2)

        self.admin_service.update_property_transaction_status(purchase.id, PropertyTransaction.Status.COMPLETED)

        self.property.refresh_from_db()
        self.assertEqual(self.property.status, Property.Status.SOLD)
        self.assertTrue(
            Notification.objects.filter(recipient=self.investor, type=Notification.Type.SYSTEM_UPDATE).exists()
        )

    def test_cancel_installment_purchase_refunds_and_releases_property(self):
        purchase = self.service.purchase_property(self.property.id, PropertyTransaction.Type.INSTALLMENT, 3)
        self.service.make_installment_payment(purchase.id)
        self.assertEqual(self.balance(), Decimal('2400000.00'))

        purchase = self.admin_service.update_property_transaction_status(
            purchase.id, PropertyTransaction.Status.CANCELLED
        )

        self.assertEqual(purchase.status, PropertyTransaction.Status.CANCELLED)
        self.assertEqual(self.balance(), Decimal('3000000.00'))
        self.property.refresh_from_db()
        self.assertEqual(self.property.status, Property.Status.AVAILABLE)

        with self.assertRaisesMessage(ValidationServiceError, 'Only pending purchases can be updated'):
            self.admin_service.update_property_transaction_status(purchase.id, PropertyTransaction.Status.CANCELLED)
        self.assertEqual(self.balance(), Decimal('3000000.00'))

        again = self.service.purchase_property(self.property.id, PropertyTransaction.Type.FULL)
        self.assertEqual(again.status, PropertyTransaction.Status.COMPLETED)

    def test_failed_purchase_releases_property(self):
        purchase = self.service.purchase_property(self.property.id, PropertyTransaction.Type.INSTALLMENT, 2)

        self.admin_service.update_property_transaction_status(purchase.id, PropertyTransaction.Status.FAILED)

        self.assertEqual(self.balance(), Decimal('3000000.00'))
        self.property.refresh_from_db()
        self.assertEqual(self.property.status, Property.Status.AVAILABLE)

    def test_completed_purchase_is_final(self):
        purchase = self.service.purchase_property(self.property.id, PropertyTransaction.Type.FULL)

        with self.assertRaises(ValidationServiceError):
            self.admin_service.update_property_transaction_status(purchase.id, PropertyTransaction.Status.CANCELLED)

        self.assertEqual(self.balance(), Decimal('2100000.00'))
        self.property.refresh_from_db()
        self.assertEqual(self.property.status, Property.Status.SOLD)

    def test_last_installment_collects_rounding_remainder(self):
        estate = Property.objects.create(
            group=self.group, name='Ridge Estate', price=Decimal('1000000'), location='Nanyuki'
        )
        purchase = self.service.purchase_property(estate.id, PropertyTransaction.Type.INSTALLMENT, 3)
        self.assertEqual(purchase.installment_amount, Decimal('333333.33'))

        self.service.make_installment_payment(purchase.id)
        purchase = self.service.make_installment_payment(purchase.id)

        self.assertEqual(purchase.status, PropertyTransaction.Status.COMPLETED)
        self.assertEqual(self.balance(), Decimal('2000000.00'))
        paid = WalletTransaction.objects.filter(reference=str(purchase.id)).aggregate(total=Sum('amount'))['total']
        self.assertEqual(paid, Decimal('1000000.00'))

    def test_delete_property_with_transactions_refused(self):
        self.service.purchase_property(self.property.id, PropertyTransaction.Type.FULL)
        with self.assertRaises(ValidationServiceError):
            PropertyService(user=self.admin).delete_property(self.property)
