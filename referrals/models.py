"""
Referral models.
"""
from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models

from core.managers import OwnedQuerySet
from core.models import GroupFilteredModel

RATE_VALIDATORS = [MinValueValidator(Decimal('0')), MaxValueValidator(Decimal('100'))]


class Referral(GroupFilteredModel):
    """A referrer/referred pair recorded at registration."""

    class Status(models.TextChoices):
        PENDING = 'PENDING', 'Pending'
        COMPLETED = 'COMPLETED', 'Completed'

    referrer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='referrals_made'
    )
    referred = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='referral'
    )
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    commission_paid = models.BooleanField(default=False)

    objects = OwnedQuerySet.as_manager()

    class Meta:
        db_table = 'referrals'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.referrer.email} -> {self.referred.email}"

    def resolve_group(self):
        return self.referrer.group if self.referrer_id else None


class ReferralSettings(GroupFilteredModel):
    """
    Commission rates (percent) per product. Rows are history; the newest
    row of a group is the one in force.
    """

    property_commission_rate = models.DecimalField(
        max_digits=5, decimal_places=2, default=Decimal('0'), validators=RATE_VALIDATORS
    )
    equipment_commission_rate = models.DecimalField(
        max_digits=5, decimal_places=2, default=Decimal('0'), validators=RATE_VALIDATORS
    )
    market_commission_rate = models.DecimalField(
        max_digits=5, decimal_places=2, default=Decimal('0'), validators=RATE_VALIDATORS
    )
    green_energy_commission_rate = models.DecimalField(
        max_digits=5, decimal_places=2, default=Decimal('0'), validators=RATE_VALIDATORS
    )
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+'
    )

    RATE_FIELDS = (
        'property_commission_rate',
        'equipment_commission_rate',
        'market_commission_rate',
        'green_energy_commission_rate',
    )

    class Meta:
        db_table = 'referral_settings'
        verbose_name_plural = 'referral settings'
        ordering = ['-created_at']

    def __str__(self):
        return f"Referral settings for {self.group} ({self.created_at:%Y-%m-%d})"


class ReferralCommissionQuerySet(OwnedQuerySet):
    owner_field = 'referrer'

    def pending(self):
        return self.filter(status=ReferralCommission.Status.PENDING)

    def paid(self):
        return self.filter(status=ReferralCommission.Status.PAID)


class ReferralCommission(GroupFilteredModel):
    """A commission owed to a referrer for one investment or purchase."""

    class Status(models.TextChoices):
        PENDING = 'PENDING', 'Pending'
        PAID = 'PAID', 'Paid'
        REJECTED = 'REJECTED', 'Rejected'

    class TransactionType(models.TextChoices):
        REAL_ESTATE_INVESTMENT = 'REAL_ESTATE_INVESTMENT', 'Real estate investment'
        PROPERTY_PURCHASE = 'PROPERTY_PURCHASE', 'Property purchase'
        EQUIPMENT_PURCHASE = 'EQUIPMENT_PURCHASE', 'Equipment purchase'
        MARKET_INVESTMENT = 'MARKET_INVESTMENT', 'Market investment'
        GREEN_ENERGY_INVESTMENT = 'GREEN_ENERGY_INVESTMENT', 'Green energy investment'

    referral = models.ForeignKey(Referral, on_delete=models.CASCADE, related_name='commissions')
    referrer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='commissions_earned'
    )
    referred = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='commissions_generated'
    )
    amount = models.DecimalField(max_digits=15, decimal_places=2)
    rate = models.DecimalField(max_digits=5, decimal_places=2, validators=RATE_VALIDATORS)
    transaction_type = models.CharField(max_length=30, choices=TransactionType.choices)
    investment_reference = models.CharField(max_length=100, blank=True)
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
        db_index=True
    )
    paid_at = models.DateTimeField(null=True, blank=True)
    rejection_reason = models.TextField(blank=True)

    objects = ReferralCommissionQuerySet.as_manager()

    class Meta:
        db_table = 'referral_commissions'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['referrer', 'status'], name='commission_referrer_status_idx'),
        ]

    def __str__(self):
        return f"{self.amount} to {self.referrer.email} ({self.status})"

    def resolve_group(self):
        return self.referral.group if self.referral_id else None
