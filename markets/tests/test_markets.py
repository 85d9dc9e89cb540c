"""Tests for market investments."""
from decimal import Decimal

from django.core.cache import cache
from django.urls import reverse
from rest_framework import status

from core.services import ValidationServiceError, PermissionServiceError
from markets.models import MarketInvestmentPlan, MarketInvestment
from markets.services import MarketPlanService, MarketInvestmentService
from notifications.models import Notification
from referrals.models import ReferralCommission
from referrals.services import ReferralService
from tests.base import BaseTestCase, BaseAPITestCase
from wallets.models import WalletTransaction


def make_plan(group, **extra):
    values = {
        'name': 'Global Equities',
        'type': MarketInvestmentPlan.Type.ANNUAL,
        'min_amount': Decimal('1000'),
        'max_amount': Decimal('10000'),
        'return_rate': Decimal('12'),
        'duration_months': 12,
    }
    values.update(extra)
    return MarketInvestmentPlan.objects.create(group=group, **values)


class MarketInvestmentServiceTests(BaseTestCase):

    def setUp(self):
        super().setUp()
        cache.clear()
        self.plan = make_plan(self.group)
        self.approve_kyc(self.investor)
        self.fund(self.investor, '5000')
        self.service = MarketInvestmentService(user=self.investor)

    def test_invest(self):
        investment = self.service.invest(self.plan.id, Decimal('2000'))

        self.assertEqual(investment.expected_return, Decimal('240.00'))
        self.assertEqual((investment.end_date - investment.start_date).days, 360)
        self.investor.wallet.refresh_from_db()
        self.assertEqual(self.investor.wallet.balance, Decimal('3000.00'))
        row = WalletTransaction.objects.get(type=WalletTransaction.Type.INVESTMENT)
        self.assertEqual(row.status, WalletTransaction.Status.COMPLETED)
        self.assertEqual(row.description, 'Investment in Global Equities')
        self.assertTrue(Notification.objects.filter(
            recipient=self.investor, type=Notification.Type.INVESTMENT_CREATED
        ).exists())

    def test_invest_insufficient_balance(self):
        with self.assertRaisesMessage(ValidationServiceError, 'Insufficient'):
            self.service.invest(self.plan.id, Decimal('6000'))

    def test_invest_requires_kyc(self):
        other = self.create_user('nokyc@example.com')
        self.fund(other, '5000')
        with self.assertRaises(PermissionServiceError):
            MarketInvestmentService(user=other).invest(self.plan.id, Decimal('2000'))

    def test_mature(self):
        investment = self.service.invest(self.plan.id, Decimal('2000'))

        MarketInvestmentService(user=self.admin).mature(investment.id, Decimal('300'))

        investment.refresh_from_db()
        self.assertEqual(investment.status, MarketInvestment.Status.MATURED)
        self.investor.wallet.refresh_from_db()
        self.assertEqual(self.investor.wallet.balance, Decimal('5300.00'))
        row = WalletTransaction.objects.get(type=WalletTransaction.Type.RETURN)
        self.assertEqual(row.description, 'Return from Global Equities investment')

    def test_mature_requires_admin(self):
        investment = self.service.invest(self.plan.id, Decimal('2000'))
        with self.assertRaises(PermissionServiceError):
            self.service.mature(investment.id)

    def test_commission(self):
        referred = self.create_user('referred@example.com', referred_by=self.investor)
        ReferralService().record_referral(referrer=self.investor, referred=referred)
        ReferralService(user=self.admin).update_settings(market_commission_rate=Decimal('5'))
        self.approve_kyc(referred)
        self.fund(referred, '2000')

        MarketInvestmentService(user=referred).invest(self.plan.id, Decimal('2000'))

        commission = ReferralCommission.objects.get(referrer=self.investor)
        self.assertEqual(commission.amount, Decimal('100.00'))
        self.assertEqual(commission.transaction_type, ReferralCommission.TransactionType.MARKET_INVESTMENT)

    def test_delete_plan_with_investments(self):
        self.service.invest(self.plan.id, Decimal('2000'))
        with self.assertRaises(ValidationServiceError):
            MarketPlanService(user=self.admin).delete_plan(self.plan)
        self.assertTrue(MarketInvestmentPlan.objects.filter(pk=self.plan.pk).exists())


class MarketAPITests(BaseAPITestCase):

    def setUp(self):
        super().setUp()
        self.plan = make_plan(self.group)

    def test_investor_cannot_create_plan(self):
        self.login(self.investor)
        response = self.client.post(reverse('market-plan-list'), {
            'name': 'x', 'type': 'ANNUAL', 'min_amount': '1', 'max_amount': '2',
            'return_rate': '5', 'duration_months': 6,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_admin_creates_plan(self):
        self.login(self.admin)
        response = self.client.post(reverse('market-plan-list'), {
            'name': 'Bonds', 'type': 'SEMI_ANNUAL', 'min_amount': '100', 'max_amount': '900',
            'return_rate': '6', 'duration_months': 6,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(MarketInvestmentPlan.objects.get(name='Bonds').group, self.group)

    def test_invest_and_portfolio(self):
        self.approve_kyc(self.investor)
        self.fund(self.investor, '1500')
        self.login(self.investor)

        response = self.client.post(reverse('market-investment-list'), {
            'plan_id': str(self.plan.id), 'amount': '1000'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

        response = self.client.get(reverse('market-investment-portfolio'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(Decimal(response.data['total_invested']), Decimal('1000.00'))
        self.assertEqual(response.data['active_investments'], 1)

    def test_invest_without_kyc_is_forbidden(self):
        self.fund(self.investor, '1500')
        self.login(self.investor)
        response = self.client.post(reverse('market-investment-list'), {
            'plan_id': str(self.plan.id), 'amount': '1000'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
