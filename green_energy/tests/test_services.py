"""Tests for green energy services."""
from datetime import timedelta
from decimal import Decimal

from django.core.cache import cache
from django.utils import timezone

from core.services import ValidationServiceError, PermissionServiceError
from green_energy.models import GreenEnergyPlan, GreenEnergyInvestment, Equipment, EquipmentTransaction
from green_energy.services import GreenEnergyPlanService, GreenEnergyService, EquipmentService
from notifications.models import Notification
from referrals.models import ReferralCommission
from referrals.services import ReferralService
from tests.base import BaseTestCase
from wallets.models import WalletTransaction

ADDRESS = {'street': '4 Solar Way', 'city': 'Mombasa', 'country': 'Kenya'}


class GreenEnergyTestCase(BaseTestCase):

    def setUp(self):
        super().setUp()
        cache.clear()
        self.approve_kyc(self.investor)
        self.fund(self.investor, '1000000')
        self.plan = GreenEnergyPlan.objects.create(
            group=self.group,
            name='Solar Farm',
            type='SEMI_ANNUAL',
            min_amount=Decimal('300000'),
            max_amount=Decimal('700000'),
            return_rate=Decimal('15'),
            duration_months=6,
        )
        self.service = GreenEnergyService(user=self.investor)
        self.admin_service = GreenEnergyService(user=self.admin)

    def balance(self):
        self.investor.wallet.refresh_from_db()
        return self.investor.wallet.balance


class InvestmentTests(GreenEnergyTestCase):

    def test_invest(self):
        investment = self.service.invest(self.plan.id, Decimal('400000'))

        self.assertEqual(investment.expected_return, Decimal('60000.00'))
        self.assertEqual((investment.end_date - investment.start_date).days, 180)
        self.assertEqual(self.balance(), Decimal('600000.00'))
        row = WalletTransaction.objects.get(type=WalletTransaction.Type.INVESTMENT)
        self.assertEqual(row.description, 'Investment in Solar Farm (SEMI_ANNUAL)')

    def test_invest_outside_bounds(self):
        with self.assertRaises(ValidationServiceError):
            self.service.invest(self.plan.id, Decimal('200000'))

    def test_invest_in_inactive_plan(self):
        self.plan.is_active = False
        self.plan.save()
        with self.assertRaisesMessage(Exception, 'not found'):
            self.service.invest(self.plan.id, Decimal('400000'))

    def test_invest_requires_kyc(self):
        other = self.create_user('other@example.com')
        with self.assertRaises(PermissionServiceError):
            GreenEnergyService(user=other).invest(self.plan.id, Decimal('400000'))

    def test_mature_pays_out(self):
        investment = self.service.invest(self.plan.id, Decimal('400000'))

        matured = self.admin_service.mature(investment.id)

        self.assertEqual(matured.status, GreenEnergyInvestment.Status.MATURED)
        self.assertEqual(matured.actual_return, Decimal('60000.00'))
        self.assertEqual(self.balance(), Decimal('1060000.00'))
        row = WalletTransaction.objects.get(type=WalletTransaction.Type.RETURN)
        self.assertEqual(row.description, 'Return from Solar Farm investment')

    def test_mature_with_reinvest(self):
        investment = self.service.invest(self.plan.id, Decimal('400000'), reinvest=True)

        self.admin_service.mature(investment.id, Decimal('50000'))

        renewed = GreenEnergyInvestment.objects.get(reinvested_from=investment)
        self.assertEqual(renewed.amount, Decimal('450000.00'))
        self.assertEqual(renewed.status, GreenEnergyInvestment.Status.ACTIVE)
        self.assertEqual(self.balance(), Decimal('600000.00'))

    def test_mature_twice_fails(self):
        investment = self.service.invest(self.plan.id, Decimal('400000'))
        self.admin_service.mature(investment.id)
        with self.assertRaises(ValidationServiceError):
            self.admin_service.mature(investment.id)

    def test_investor_cannot_mature(self):
        investment = self.service.invest(self.plan.id, Decimal('400000'))
        with self.assertRaises(PermissionServiceError):
            self.service.mature(investment.id)

    def test_cancel_refunds(self):
        investment = self.service.invest(self.plan.id, Decimal('400000'))

        self.admin_service.cancel(investment.id)

        self.assertEqual(self.balance(), Decimal('1000000.00'))
        self.assertTrue(
            Notification.objects.filter(recipient=self.investor, type=Notification.Type.INVESTMENT_CANCELLED).exists()
        )

    def test_scheduled_maturity(self):
        investment = self.service.invest(self.plan.id, Decimal('400000'))
        GreenEnergyInvestment.objects.filter(pk=investment.pk).update(end_date=timezone.now() - timedelta(hours=1))

        self.assertEqual(GreenEnergyService().mature_due_investments(), 1)
        investment.refresh_from_db()
        self.assertEqual(investment.status, GreenEnergyInvestment.Status.MATURED)

    def test_delete_plan_with_investments(self):
        self.service.invest(self.plan.id, Decimal('400000'))
        with self.assertRaisesMessage(ValidationServiceError, 'Cannot delete plan with existing investments'):
            GreenEnergyPlanService(user=self.admin).delete_plan(self.plan)

    def test_commission(self):
        referred = self.create_user('referred@example.com', referred_by=self.investor)
        ReferralService().record_referral(referrer=self.investor, referred=referred)
        ReferralService(user=self.admin).update_settings(green_energy_commission_rate=Decimal('2'))
        self.approve_kyc(referred)
        self.fund(referred, '500000')

        GreenEnergyService(user=referred).invest(self.plan.id, Decimal('300000'))

        commission = ReferralCommission.objects.get(referrer=self.investor)
        self.assertEqual(commission.amount, Decimal('6000.00'))


class EquipmentTests(GreenEnergyTestCase):

    def setUp(self):
        super().setUp()
        self.equipment = Equipment.objects.create(
            group=self.group,
            name='Solar Panel 400W',
            type=Equipment.Type.SOLAR_PANEL,
            price=Decimal('250'),
            stock_quantity=5,
        )
        self.equipment_service = EquipmentService(user=self.investor)
        self.admin_equipment_service = EquipmentService(user=self.admin)

    def purchase(self, quantity=2):
        return self.equipment_service.purchase(self.equipment.id, quantity, ADDRESS)

    def test_purchase(self):
        order = self.purchase()

        self.assertEqual(order.total_amount, Decimal('500.00'))
        self.assertEqual(order.status, EquipmentTransaction.Status.PENDING)
        self.assertEqual(len(order.delivery_pin), 6)
        self.assertTrue(order.delivery_pin.isdigit())
        self.assertIsNotNone(order.estimated_delivery_date)
        self.equipment.refresh_from_db()
        self.assertEqual(self.equipment.stock_quantity, 3)
        row = WalletTransaction.objects.get(type=WalletTransaction.Type.PURCHASE)
        self.assertEqual(row.description, 'Purchase of 2 Solar Panel 400W')

    def test_last_units_mark_sold(self):
        self.purchase(5)
        self.equipment.refresh_from_db()
        self.assertEqual(self.equipment.status, Equipment.Status.SOLD)

    def test_insufficient_stock(self):
        with self.assertRaisesMessage(ValidationServiceError, 'Insufficient stock'):
            self.purchase(6)

    def test_missing_address(self):
        with self.assertRaises(ValidationServiceError):
            self.equipment_service.purchase(self.equipment.id, 1, {'street': 'x'})

    def test_delivery_workflow(self):
        order = self.purchase()
        Status = EquipmentTransaction.Status

        self.admin_equipment_service.update_transaction_status(order.id, Status.ACCEPTED)
        self.admin_equipment_service.update_transaction_status(order.id, Status.PROCESSING)
        with self.assertRaisesMessage(ValidationServiceError, 'A tracking number is required'):
            self.admin_equipment_service.update_transaction_status(order.id, Status.OUT_FOR_DELIVERY)
        order = self.admin_equipment_service.update_transaction_status(
            order.id, Status.OUT_FOR_DELIVERY, 'TRK-001'
        )
        self.assertIsNotNone(order.delivery_date)

        with self.assertRaisesMessage(ValidationServiceError, 'Invalid delivery PIN'):
            self.equipment_service.confirm_delivery(order.id, '000000' if order.delivery_pin != '000000' else '111111')

        order = self.equipment_service.confirm_delivery(order.id, order.delivery_pin)
        self.assertEqual(order.status, Status.COMPLETED)

    def test_non_ascii_pin_is_rejected(self):
        order = self.purchase()
        Status = EquipmentTransaction.Status
        for status in (Status.ACCEPTED, Status.PROCESSING):
            self.admin_equipment_service.update_transaction_status(order.id, status)
        self.admin_equipment_service.update_transaction_status(order.id, Status.OUT_FOR_DELIVERY, 'TRK-002')

        with self.assertRaisesMessage(ValidationServiceError, 'Invalid delivery PIN'):
            self.equipment_service.confirm_delivery(order.id, '\u00e912345')
        order.refresh_from_db()
        self.assertEqual(order.status, Status.OUT_FOR_DELIVERY)

    def test_invalid_transition(self):
        order = self.purchase()
        with self.assertRaises(ValidationServiceError):
            self.admin_equipment_service.update_transaction_status(
                order.id, EquipmentTransaction.Status.COMPLETED
            )

    def test_cancel_refunds_and_restocks(self):
        order = self.purchase(5)

        self.admin_equipment_service.update_transaction_status(order.id, EquipmentTransaction.Status.CANCELLED)

        self.assertEqual(self.balance(), Decimal('1000000.00'))
        self.equipment.refresh_from_db()
        self.assertEqual(self.equipment.stock_quantity, 5)
        self.assertEqual(self.equipment.status, Equipment.Status.AVAILABLE)

    def test_update_delivery_address(self):
        order = self.purchase()
        updated = self.equipment_service.update_delivery_address(
            order.id, {'street': '9 Wind Rd', 'city': 'Kisumu', 'country': 'Kenya'}
        )
        self.assertEqual(updated.delivery_address['city'], 'Kisumu')

        self.admin_equipment_service.update_transaction_status(order.id, EquipmentTransaction.Status.ACCEPTED)
        self.admin_equipment_service.update_transaction_status(order.id, EquipmentTransaction.Status.PROCESSING)
        with self.assertRaises(ValidationServiceError):
            self.equipment_service.update_delivery_address(order.id, ADDRESS)
