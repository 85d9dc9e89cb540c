"""
Wallet models: balances, the transaction ledger and deposit addresses.
"""
from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import F, Q, Sum

from core.managers import OwnedQuerySet
from core.models import GroupFilteredModel
from core.services import ValidationServiceError


class InsufficientFundsError(ValidationServiceError):
    """Raised when a debit would make a wallet balance negative."""

    def __init__(self, message: str = "Insufficient balance"):
        super().__init__(message)


class Wallet(GroupFilteredModel):
    """
    A user's platform wallet. One per user, created on registration.
    """

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='wallet'
    )
    balance = models.DecimalField(
        max_digits=15,
        decimal_places=2,
        default=Decimal('0'),
        validators=[MinValueValidator(Decimal('0'))]
    )

    objects = OwnedQuerySet.as_manager()

    class Meta:
        db_table = 'wallets'
        ordering = ['-created_at']

    def __str__(self):
        return f"Wallet of {self.user.email}: {self.balance}"

    def credit(self, amount: Decimal) -> None:
        Wallet.objects.filter(pk=self.pk).update(balance=F('balance') + amount)
        self.refresh_from_db(fields=['balance'])

    def debit(self, amount: Decimal) -> None:
        """Subtract ``amount`` from the balance, refusing to go negative."""
        updated = Wallet.objects.filter(pk=self.pk, balance__gte=amount).update(
            balance=F('balance') - amount
        )
        if not updated:
            raise InsufficientFundsError()
        self.refresh_from_db(fields=['balance'])


class WalletTransactionQuerySet(OwnedQuerySet):
    owner_field = 'wallet__user'

    def of_type(self, transaction_type):
        return self.filter(type=transaction_type)

    def completed(self):
        return self.filter(status=WalletTransaction.Status.COMPLETED)

    def pending(self):
        return self.filter(status=WalletTransaction.Status.PENDING)

    def total(self) -> Decimal:
        return self.aggregate(total=Sum('amount'))['total'] or Decimal('0')


class WalletTransaction(GroupFilteredModel):
    """
    A ledger row recording a balance event for a wallet.
    """

    class Type(models.TextChoices):
        DEPOSIT = 'DEPOSIT', 'Deposit'
        WITHDRAWAL = 'WITHDRAWAL', 'Withdrawal'
        PAYOUT = 'PAYOUT', 'Payout'
        RETURN = 'RETURN', 'Return'
        INVESTMENT = 'INVESTMENT', 'Investment'
        PURCHASE = 'PURCHASE', 'Purchase'
        COMMISSION = 'COMMISSION', 'Commission'

    class Status(models.TextChoices):
        PENDING = 'PENDING', 'Pending'
        COMPLETED = 'COMPLETED', 'Completed'
        FAILED = 'FAILED', 'Failed'

    wallet = models.ForeignKey(
        Wallet,
        on_delete=models.CASCADE,
        related_name='transactions'
    )
    type = models.CharField(max_length=20, choices=Type.choices, db_index=True)
    amount = models.DecimalField(
        max_digits=15,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
        db_index=True
    )
    crypto_type = models.CharField(max_length=20, default=settings.DEFAULT_CRYPTO_TYPE)
    tx_hash = models.CharField(max_length=255, blank=True)
    wallet_address = models.CharField(max_length=255, blank=True)
    description = models.TextField(blank=True)
    reference = models.CharField(
        max_length=100,
        blank=True,
        help_text="Identifier of the investment or purchase this row settles"
    )

    objects = WalletTransactionQuerySet.as_manager()

    class Meta:
        db_table = 'wallet_transactions'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['wallet', '-created_at'], name='wallet_tx_wallet_created_idx'),
            models.Index(fields=['type', 'status'], name='wallet_tx_type_status_idx'),
        ]

    def __str__(self):
        return f"{self.type} {self.amount} ({self.status})"

    def resolve_group(self):
        return self.wallet.group if self.wallet_id else None

    @property
    def user(self):
        return self.wallet.user

    @property
    def is_outgoing(self) -> bool:
        return self.type in (self.Type.WITHDRAWAL, self.Type.PAYOUT)


class WalletSettings(GroupFilteredModel):
    """
    Deposit addresses shown to investors. At most one active row per group.
    """

    btc_wallet_address = models.CharField(max_length=255, blank=True)
    usdt_wallet_address = models.CharField(max_length=255, blank=True)
    usdt_wallet_type = models.CharField(max_length=20, default='BEP-20')
    is_active = models.BooleanField(default=True)
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+'
    )

    class Meta:
        db_table = 'wallet_settings'
        verbose_name_plural = 'wallet settings'
        ordering = ['-created_at']
        constraints = [
            models.UniqueConstraint(
                fields=['group'],
                condition=Q(is_active=True),
                name='one_active_wallet_settings_per_group'
            ),
        ]

    def __str__(self):
        return f"Wallet settings for {self.group}"
