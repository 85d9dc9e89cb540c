"""
Wallet services.

``WalletService`` covers the investor-facing requests and the credit and
debit primitives every other app uses to move money. ``WalletAdminService``
covers approval of pending requests and manual balance adjustments.
"""
from decimal import Decimal
from typing import Any, Dict, Optional

from django.conf import settings
from django.core.cache import cache
from django.db import transaction

from core.services import (
    BaseService, ValidationServiceError, NotFoundServiceError
)
from core.utils import quantize_money
from notifications.models import Notification
from notifications.services import NotificationService

from .models import Wallet, WalletTransaction, WalletSettings

WALLET_SETTINGS_CACHE_KEY = 'wallet_settings:{group_id}'

DEFAULT_WALLET_SETTINGS = {
    'btc_wallet_address': '',
    'usdt_wallet_address': '',
    'usdt_wallet_type': 'BEP-20',
}


class WalletService(BaseService):
    """Investor wallet operations and ledger primitives"""

    def __init__(self, user=None, context=None):
        super().__init__(user, context)
        self.notifications = NotificationService()

    def get_wallet(self, user=None, lock: bool = False) -> Wallet:
        """
        Return the wallet of ``user`` (default: the acting user), creating
        it if the user has none yet.
        """
        owner = user or self.user
        if owner is None:
            raise ValidationServiceError("Authentication required")

        queryset = Wallet.objects.select_for_update() if lock else Wallet.objects.all()
        wallet = queryset.filter(user=owner).first()
        if wallet is None:
            if not owner.group_id:
                raise NotFoundServiceError("Wallet not found")
            wallet = Wallet.objects.create(user=owner, group=owner.group)
            if lock:
                wallet = Wallet.objects.select_for_update().get(pk=wallet.pk)
        return wallet

    def record(self, wallet: Wallet, type: str, amount: Decimal, description: str,
               status: str = WalletTransaction.Status.COMPLETED, reference: str = '',
               **extra) -> WalletTransaction:
        """Write a ledger row without touching the balance."""
        return WalletTransaction.objects.create(
            wallet=wallet,
            group_id=wallet.group_id,
            type=type,
            amount=quantize_money(amount),
            status=status,
            description=description,
            reference=str(reference) if reference else '',
            **extra
        )

    def credit(self, wallet: Wallet, amount: Decimal, type: str, description: str,
               reference: str = '', **extra) -> WalletTransaction:
        """Add ``amount`` to the wallet and record a completed transaction."""
        amount = quantize_money(amount)
        wallet.credit(amount)
        return self.record(wallet, type, amount, description, reference=reference, **extra)

    def debit(self, wallet: Wallet, amount: Decimal, type: str, description: str,
              reference: str = '', status: str = WalletTransaction.Status.COMPLETED,
              **extra) -> WalletTransaction:
        """
        Subtract ``amount`` from the wallet and record the transaction.

        Raises:
            InsufficientFundsError: If the balance does not cover the amount
        """
        amount = quantize_money(amount)
        wallet.debit(amount)
        return self.record(wallet, type, amount, description, status=status,
                           reference=reference, **extra)

    def ensure_funds(self, wallet: Wallet, amount: Decimal, message: str = "Insufficient balance") -> None:
        if wallet.balance < amount:
            raise ValidationServiceError(message)

    def _notify_wallet(self, user, title: str, message: str):
        self.notifications.notify(
            user,
            title=title,
            message=message,
            type=Notification.Type.WALLET_UPDATED,
            action_url='/dashboard/wallet',
        )

    @transaction.atomic
    def deposit(self, amount, crypto_type: Optional[str] = None, tx_hash: str = '') -> WalletTransaction:
        """Submit a deposit request. The balance changes on admin approval."""
        self._check_permission('deposit')
        amount = quantize_money(self.validate_amount(amount))
        crypto_type = crypto_type or settings.DEFAULT_CRYPTO_TYPE
        wallet = self.get_wallet()

        deposit = self.record(
            wallet,
            WalletTransaction.Type.DEPOSIT,
            amount,
            f"Deposit of {amount} USD via {crypto_type}",
            status=WalletTransaction.Status.PENDING,
            crypto_type=crypto_type,
            tx_hash=tx_hash or '',
        )

        self._notify_wallet(
            self.user,
            "New Deposit Request",
            f"A new deposit request of {amount} USD has been submitted."
        )
        self._log_operation("deposit_requested", {'transaction': str(deposit.id), 'amount': str(amount)})
        return deposit

    def _request_outgoing(self, type: str, amount: Decimal, crypto_type: str, wallet_address: str,
                          description: str, title: str, label: str) -> WalletTransaction:
        if not wallet_address:
            raise ValidationServiceError("Wallet address is required")

        wallet = self.get_wallet(lock=True)
        self.ensure_funds(wallet, amount)

        # Funds are held until an admin approves or rejects the request
        outgoing = self.debit(
            wallet,
            amount,
            type,
            description,
            status=WalletTransaction.Status.PENDING,
            crypto_type=crypto_type,
            wallet_address=wallet_address,
        )

        self._notify_wallet(
            self.user,
            title,
            f"A new {label} request of {amount} USD has been submitted."
        )
        self._log_operation(f"{label}_requested", {'transaction': str(outgoing.id), 'amount': str(amount)})
        return outgoing

    @transaction.atomic
    def withdraw(self, amount, wallet_address: str, crypto_type: Optional[str] = None) -> WalletTransaction:
        self._check_permission('withdraw')
        amount = quantize_money(self.validate_amount(amount))
        crypto_type = crypto_type or settings.DEFAULT_CRYPTO_TYPE
        return self._request_outgoing(
            WalletTransaction.Type.WITHDRAWAL,
            amount,
            crypto_type,
            wallet_address,
            f"Withdrawal of {amount} USD via {crypto_type}",
            "New Withdrawal Request",
            "withdrawal",
        )

    @transaction.atomic
    def payout(self, amount, wallet_address: str, crypto_type: Optional[str] = None,
               reason: str = '') -> WalletTransaction:
        self._check_permission('payout')
        amount = quantize_money(self.validate_amount(amount))
        crypto_type = crypto_type or settings.DEFAULT_CRYPTO_TYPE
        description = f"Payout of {amount} USD via {crypto_type} to external wallet"
        if reason:
            description = f"{description}: {reason}"
        return self._request_outgoing(
            WalletTransaction.Type.PAYOUT,
            amount,
            crypto_type,
            wallet_address,
            description,
            "New Payout Request",
            "payout",
        )

    def get_stats(self, user=None) -> Dict[str, Any]:
        wallet = self.get_wallet(user)
        transactions = wallet.transactions.all()
        Type = WalletTransaction.Type

        return {
            'balance': wallet.balance,
            'total_deposits': transactions.of_type(Type.DEPOSIT).total(),
            'total_withdrawals': transactions.of_type(Type.WITHDRAWAL).completed().total(),
            'total_payouts': transactions.of_type(Type.PAYOUT).total(),
            'total_returns': transactions.of_type(Type.RETURN).completed().total(),
            'pending_transactions': transactions.pending().count(),
        }

    def get_wallet_settings(self) -> Dict[str, str]:
        """Active deposit addresses for the acting user's group."""
        if not self.group:
            return dict(DEFAULT_WALLET_SETTINGS)

        cache_key = WALLET_SETTINGS_CACHE_KEY.format(group_id=self.group.pk)
        data = cache.get(cache_key)
        if data is None:
            active = WalletSettings.objects.for_group(self.group).filter(is_active=True).first()
            data = dict(DEFAULT_WALLET_SETTINGS)
            if active:
                data.update({
                    'btc_wallet_address': active.btc_wallet_address,
                    'usdt_wallet_address': active.usdt_wallet_address,
                    'usdt_wallet_type': active.usdt_wallet_type or 'BEP-20',
                })
            cache.set(cache_key, data, settings.SETTINGS_CACHE_TIMEOUT)
        return data


class WalletAdminService(WalletService):
    """Admin review of pending wallet requests and manual adjustments"""

    def _get_transaction(self, transaction_id, types) -> WalletTransaction:
        self._require_admin()
        transaction_obj = self.get_or_404(
            WalletTransaction,
            queryset=WalletTransaction.objects.for_user(self.user)
            .select_related('wallet__user')
            .select_for_update(of=('self',)),
            id=transaction_id,
        )
        if transaction_obj.type not in types:
            raise ValidationServiceError(f"Transaction is not a {' or '.join(t.lower() for t in types)}")
        if transaction_obj.status != WalletTransaction.Status.PENDING:
            raise ValidationServiceError("Transaction is not pending")
        return transaction_obj

    def _get_user_wallet(self, user_id) -> Wallet:
        self._require_admin()
        from accounts.services import UserAdminService

        target = UserAdminService(user=self.user).get_user(user_id)
        return self.get_wallet(target, lock=True)

    @transaction.atomic
    def approve_deposit(self, transaction_id) -> WalletTransaction:
        deposit = self._get_transaction(transaction_id, [WalletTransaction.Type.DEPOSIT])
        wallet = Wallet.objects.select_for_update().get(pk=deposit.wallet_id)

        deposit.status = WalletTransaction.Status.COMPLETED
        deposit.save(update_fields=['status', 'updated_at'])
        wallet.credit(deposit.amount)

        self._notify_wallet(
            wallet.user,
            "Deposit Approved",
            f"Your deposit of {deposit.amount} {deposit.crypto_type} has been approved."
        )
        self._log_operation("approve_deposit", {'transaction': str(deposit.id)})
        return deposit

    @transaction.atomic
    def reject_deposit(self, transaction_id, reason: str) -> WalletTransaction:
        if not reason:
            raise ValidationServiceError("A rejection reason is required")
        deposit = self._get_transaction(transaction_id, [WalletTransaction.Type.DEPOSIT])

        deposit.status = WalletTransaction.Status.FAILED
        deposit.description = f"{deposit.description} (Rejected: {reason})"
        deposit.save(update_fields=['status', 'description', 'updated_at'])

        self._notify_wallet(
            deposit.wallet.user,
            "Deposit Rejected",
            f"Your deposit of {deposit.amount} {deposit.crypto_type} has been rejected. Reason: {reason}"
        )
        self._log_operation("reject_deposit", {'transaction': str(deposit.id), 'reason': reason})
        return deposit

    @transaction.atomic
    def approve_withdrawal(self, transaction_id) -> WalletTransaction:
        withdrawal = self._get_transaction(
            transaction_id, [WalletTransaction.Type.WITHDRAWAL, WalletTransaction.Type.PAYOUT]
        )

        withdrawal.status = WalletTransaction.Status.COMPLETED
        withdrawal.save(update_fields=['status', 'updated_at'])

        self._notify_wallet(
            withdrawal.wallet.user,
            f"{withdrawal.get_type_display()} Approved",
            f"Your {withdrawal.get_type_display().lower()} of {withdrawal.amount} "
            f"{withdrawal.crypto_type} has been approved."
        )
        self._log_operation("approve_withdrawal", {'transaction': str(withdrawal.id)})
        return withdrawal

    @transaction.atomic
    def reject_withdrawal(self, transaction_id, reason: str) -> WalletTransaction:
        if not reason:
            raise ValidationServiceError("A rejection reason is required")
        withdrawal = self._get_transaction(
            transaction_id, [WalletTransaction.Type.WITHDRAWAL, WalletTransaction.Type.PAYOUT]
        )
        wallet = Wallet.objects.select_for_update().get(pk=withdrawal.wallet_id)

        withdrawal.status = WalletTransaction.Status.FAILED
        withdrawal.description = f"{withdrawal.description} (Rejected: {reason})"
        withdrawal.save(update_fields=['status', 'description', 'updated_at'])
        wallet.credit(withdrawal.amount)

        self._notify_wallet(
            wallet.user,
            f"{withdrawal.get_type_display()} Rejected",
            f"Your {withdrawal.get_type_display().lower()} of {withdrawal.amount} "
            f"{withdrawal.crypto_type} has been rejected. Reason: {reason}"
        )
        self._log_operation("reject_withdrawal", {'transaction': str(withdrawal.id), 'reason': reason})
        return withdrawal

    @transaction.atomic
    def fund_user_wallet(self, user_id, amount, reason: str) -> WalletTransaction:
        amount = quantize_money(self.validate_amount(amount))
        if not reason:
            raise ValidationServiceError("A reason is required")
        wallet = self._get_user_wallet(user_id)

        funding = self.credit(
            wallet,
            amount,
            WalletTransaction.Type.DEPOSIT,
            f"Admin funding: {reason}",
        )

        self._notify_wallet(
            wallet.user,
            "Wallet Funded",
            f"Your wallet has been funded with {amount} {funding.crypto_type} by admin. Reason: {reason}"
        )
        self._log_operation("fund_user_wallet", {'wallet': str(wallet.id), 'amount': str(amount)})
        return funding

    @transaction.atomic
    def deduct_from_user_wallet(self, user_id, amount, reason: str) -> WalletTransaction:
        amount = quantize_money(self.validate_amount(amount))
        if not reason:
            raise ValidationServiceError("A reason is required")
        wallet = self._get_user_wallet(user_id)
        self.ensure_funds(wallet, amount)

        deduction = self.debit(
            wallet,
            amount,
            WalletTransaction.Type.WITHDRAWAL,
            f"Admin deduction: {reason}",
        )

        self._notify_wallet(
            wallet.user,
            "Wallet Deduction",
            f"{amount} {deduction.crypto_type} has been deducted from your wallet. Reason: {reason}"
        )
        self._log_operation("deduct_from_user_wallet", {'wallet': str(wallet.id), 'amount': str(amount)})
        return deduction

    def create_property_purchase_transaction(self, wallet: Wallet, amount, property_name: str,
                                             reference: str = '') -> WalletTransaction:
        """Debit a property purchase. Callers hold the transaction."""
        amount = quantize_money(self.validate_amount(amount))
        purchase = self.debit(
            wallet,
            amount,
            WalletTransaction.Type.PURCHASE,
            f"Purchase of property: {property_name}",
            reference=reference,
        )

        self.notifications.notify(
            wallet.user,
            title="Property Purchase",
            message=f"{amount} {purchase.crypto_type} has been deducted from your wallet "
                    f"for the purchase of property: {property_name}",
            type=Notification.Type.WALLET_UPDATED,
            action_url='/dashboard/wallet',
        )
        return purchase

    def get_user_wallet_detail(self, user_id) -> Dict[str, Any]:
        self._require_admin()
        from accounts.services import UserAdminService

        target = UserAdminService(user=self.user).get_user(user_id)
        wallet = self.get_wallet(target)
        return {
            'wallet': wallet,
            'stats': self.get_stats(target),
            'transactions': wallet.transactions.all()[:50],
        }

    @transaction.atomic
    def update_wallet_settings(self, **values) -> WalletSettings:
        self._require_admin()
        if not self.group:
            raise ValidationServiceError("Admin has no group")

        current = WalletSettings.objects.for_group(self.group).select_for_update().filter(
            is_active=True
        ).first()
        if current is None:
            current = WalletSettings(group=self.group)

        for field in DEFAULT_WALLET_SETTINGS:
            if field in values and values[field] is not None:
                setattr(current, field, values[field])
        current.updated_by = self.user
        current.save()

        cache.delete(WALLET_SETTINGS_CACHE_KEY.format(group_id=self.group.pk))
        self._log_operation("update_wallet_settings")
        return current
