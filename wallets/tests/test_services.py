"""Tests for wallet services."""
from decimal import Decimal

from django.core.cache import cache

from core.services import ValidationServiceError, PermissionServiceError, NotFoundServiceError
from notifications.models import Notification
from tests.base import BaseTestCase
from wallets.models import Wallet, WalletTransaction, InsufficientFundsError
from wallets.services import WalletService, WalletAdminService


class WalletModelTests(BaseTestCase):

    def test_wallet_created_for_new_user(self):
        self.assertTrue(Wallet.objects.filter(user=self.investor).exists())
        self.assertEqual(self.investor.wallet.balance, Decimal('0'))
        self.assertEqual(self.investor.wallet.group, self.group)

    def test_debit_refuses_negative_balance(self):
        wallet = self.fund(self.investor, '10.00')

        with self.assertRaises(InsufficientFundsError):
            wallet.debit(Decimal('10.01'))

        wallet.refresh_from_db()
        self.assertEqual(wallet.balance, Decimal('10.00'))

    def test_credit_and_debit(self):
        wallet = self.investor.wallet
        wallet.credit(Decimal('25.50'))
        wallet.debit(Decimal('5.50'))
        self.assertEqual(wallet.balance, Decimal('20.00'))


class WalletServiceTests(BaseTestCase):

    def setUp(self):
        super().setUp()
        self.service = WalletService(user=self.investor)

    def test_deposit_is_pending_and_does_not_change_balance(self):
        deposit = self.service.deposit(Decimal('100'), tx_hash='0xabc')

        self.assertEqual(deposit.status, WalletTransaction.Status.PENDING)
        self.assertEqual(deposit.type, WalletTransaction.Type.DEPOSIT)
        self.assertEqual(deposit.crypto_type, 'USDT')
        self.assertEqual(deposit.description, 'Deposit of 100.00 USD via USDT')
        self.investor.wallet.refresh_from_db()
        self.assertEqual(self.investor.wallet.balance, Decimal('0'))
        self.assertTrue(
            Notification.objects.filter(
                recipient=self.investor, type=Notification.Type.WALLET_UPDATED
            ).exists()
        )

    def test_deposit_rejects_non_positive_amount(self):
        with self.assertRaises(ValidationServiceError):
            self.service.deposit(Decimal('0'))
        with self.assertRaises(ValidationServiceError):
            self.service.deposit('abc')

    def test_withdraw_holds_funds(self):
        self.fund(self.investor, '200')

        withdrawal = self.service.withdraw(Decimal('150'), wallet_address='0xwallet')

        self.assertEqual(withdrawal.status, WalletTransaction.Status.PENDING)
        self.assertEqual(withdrawal.wallet_address, '0xwallet')
        self.investor.wallet.refresh_from_db()
        self.assertEqual(self.investor.wallet.balance, Decimal('50.00'))

    def test_withdraw_requires_funds(self):
        self.fund(self.investor, '10')
        with self.assertRaises(ValidationServiceError):
            self.service.withdraw(Decimal('11'), wallet_address='0xwallet')
        self.assertFalse(WalletTransaction.objects.filter(type=WalletTransaction.Type.WITHDRAWAL).exists())

    def test_withdraw_requires_address(self):
        self.fund(self.investor, '10')
        with self.assertRaises(ValidationServiceError):
            self.service.withdraw(Decimal('5'), wallet_address='')

    def test_payout_description_includes_reason(self):
        self.fund(self.investor, '100')
        payout = self.service.payout(Decimal('40'), wallet_address='0xpay', reason='Rent')

        self.assertEqual(payout.type, WalletTransaction.Type.PAYOUT)
        self.assertTrue(payout.description.endswith(': Rent'))

    def test_stats(self):
        self.fund(self.investor, '300')
        self.service.deposit(Decimal('50'))
        self.service.withdraw(Decimal('100'), wallet_address='0xwallet')

        stats = self.service.get_stats()

        self.assertEqual(stats['balance'], Decimal('200.00'))
        self.assertEqual(stats['total_deposits'], Decimal('50.00'))
        self.assertEqual(stats['total_withdrawals'], Decimal('0'))
        self.assertEqual(stats['pending_transactions'], 2)

    def test_wallet_settings_defaults(self):
        cache.clear()
        data = self.service.get_wallet_settings()
        self.assertEqual(data['usdt_wallet_type'], 'BEP-20')
        self.assertEqual(data['btc_wallet_address'], '')


class WalletAdminServiceTests(BaseTestCase):

    def setUp(self):
        super().setUp()
        cache.clear()
        self.service = WalletAdminService(user=self.admin)
        self.investor_service = WalletService(user=self.investor)

    def test_approve_deposit_credits_wallet(self):
        deposit = self.investor_service.deposit(Decimal('75'))

        approved = self.service.approve_deposit(deposit.id)

        self.assertEqual(approved.status, WalletTransaction.Status.COMPLETED)
        self.investor.wallet.refresh_from_db()
        self.assertEqual(self.investor.wallet.balance, Decimal('75.00'))

    def test_approve_deposit_twice_fails(self):
        deposit = self.investor_service.deposit(Decimal('75'))
        self.service.approve_deposit(deposit.id)

        with self.assertRaisesMessage(ValidationServiceError, 'Transaction is not pending'):
            self.service.approve_deposit(deposit.id)
        self.investor.wallet.refresh_from_db()
        self.assertEqual(self.investor.wallet.balance, Decimal('75.00'))

    def test_reject_withdrawal_twice_refunds_once(self):
        self.fund(self.investor, '100')
        withdrawal = self.investor_service.withdraw(Decimal('60'), wallet_address='0xwallet')
        self.service.reject_withdrawal(withdrawal.id, 'Invalid address')

        with self.assertRaisesMessage(ValidationServiceError, 'Transaction is not pending'):
            self.service.reject_withdrawal(withdrawal.id, 'Invalid address')
        self.investor.wallet.refresh_from_db()
        self.assertEqual(self.investor.wallet.balance, Decimal('100.00'))

    def test_reject_deposit(self):
        deposit = self.investor_service.deposit(Decimal('75'))

        rejected = self.service.reject_deposit(deposit.id, 'Hash not found')

        self.assertEqual(rejected.status, WalletTransaction.Status.FAILED)
        self.assertIn('Rejected: Hash not found', rejected.description)
        self.investor.wallet.refresh_from_db()
        self.assertEqual(self.investor.wallet.balance, Decimal('0'))

    def test_reject_withdrawal_refunds(self):
        self.fund(self.investor, '100')
        withdrawal = self.investor_service.withdraw(Decimal('60'), wallet_address='0xwallet')

        self.service.reject_withdrawal(withdrawal.id, 'Invalid address')

        self.investor.wallet.refresh_from_db()
        self.assertEqual(self.investor.wallet.balance, Decimal('100.00'))

    def test_approve_withdrawal_keeps_hold(self):
        self.fund(self.investor, '100')
        withdrawal = self.investor_service.withdraw(Decimal('60'), wallet_address='0xwallet')

        approved = self.service.approve_withdrawal(withdrawal.id)

        self.assertEqual(approved.status, WalletTransaction.Status.COMPLETED)
        self.investor.wallet.refresh_from_db()
        self.assertEqual(self.investor.wallet.balance, Decimal('40.00'))

    def test_approve_withdrawal_rejects_deposit(self):
        deposit = self.investor_service.deposit(Decimal('10'))
        with self.assertRaises(ValidationServiceError):
            self.service.approve_withdrawal(deposit.id)

    def test_investor_cannot_approve(self):
        deposit = self.investor_service.deposit(Decimal('10'))
        with self.assertRaises(PermissionServiceError):
            WalletAdminService(user=self.investor).approve_deposit(deposit.id)

    def test_admin_of_other_group_cannot_see_transaction(self):
        outsider = self.create_user('outsider@example.com', group=self.other_group, role='admin')
        deposit = self.investor_service.deposit(Decimal('10'))

        with self.assertRaises(NotFoundServiceError):
            WalletAdminService(user=outsider).approve_deposit(deposit.id)

    def test_fund_and_deduct(self):
        self.service.fund_user_wallet(self.investor.id, Decimal('500'), 'Bonus')
        deduction = self.service.deduct_from_user_wallet(self.investor.id, Decimal('120'), 'Fee')

        self.assertEqual(deduction.description, 'Admin deduction: Fee')
        self.investor.wallet.refresh_from_db()
        self.assertEqual(self.investor.wallet.balance, Decimal('380.00'))

    def test_deduct_more_than_balance_fails(self):
        with self.assertRaises(ValidationServiceError):
            self.service.deduct_from_user_wallet(self.investor.id, Decimal('1'), 'Fee')

    def test_update_wallet_settings_invalidates_cache(self):
        self.assertEqual(self.investor_service.get_wallet_settings()['btc_wallet_address'], '')

        self.service.update_wallet_settings(btc_wallet_address='bc1qexample', usdt_wallet_type='TRC-20')

        data = self.investor_service.get_wallet_settings()
        self.assertEqual(data['btc_wallet_address'], 'bc1qexample')
        self.assertEqual(data['usdt_wallet_type'], 'TRC-20')
