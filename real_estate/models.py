"""
Real estate models.
"""
import builtins
from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from core.managers import OwnedQuerySet
from core.models import GroupFilteredModel


class Property(GroupFilteredModel):
    """A property listed for investment or purchase."""

    class Status(models.TextChoices):
        AVAILABLE = 'AVAILABLE', 'Available'
        PENDING = 'PENDING', 'Pending'
        SOLD = 'SOLD', 'Sold'

    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    price = models.DecimalField(
        max_digits=15,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    location = models.CharField(max_length=255)
    map_url = models.URLField(max_length=500, blank=True)
    features = models.JSONField(default=list, blank=True)
    main_image = models.URLField(max_length=500, blank=True)
    images = models.JSONField(default=list, blank=True)
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.AVAILABLE,
        db_index=True
    )
    min_investment = models.DecimalField(max_digits=15, decimal_places=2, default=Decimal('0'))
    max_investment = models.DecimalField(max_digits=15, decimal_places=2, default=Decimal('0'))
    expected_return = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal('0'),
        help_text="Expected annual return in percent"
    )

    class Meta:
        db_table = 'properties'
        verbose_name_plural = 'properties'
        ordering = ['-created_at']

    def __str__(self):
        return self.name

    @property
    def is_available(self):
        return self.status == self.Status.AVAILABLE


class RealEstateInvestmentQuerySet(OwnedQuerySet):

    def active(self):
        return self.filter(status=RealEstateInvestment.Status.ACTIVE)

    def matured(self):
        return self.filter(status=RealEstateInvestment.Status.MATURED)

    def due(self, now=None):
        return self.active().filter(end_date__lte=now or timezone.now())


class RealEstateInvestment(GroupFilteredModel):
    """A fixed-term investment in one of the real estate plans."""

    class Type(models.TextChoices):
        SEMI_ANNUAL = 'SEMI_ANNUAL', 'Semi-Annual'
        ANNUAL = 'ANNUAL', 'Annual'

    class Status(models.TextChoices):
        ACTIVE = 'ACTIVE', 'Active'
        MATURED = 'MATURED', 'Matured'
        CANCELLED = 'CANCELLED', 'Cancelled'

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='real_estate_investments'
    )
    property = models.ForeignKey(
        Property,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='investments'
    )
    amount = models.DecimalField(max_digits=15, decimal_places=2)
    type = models.CharField(max_length=20, choices=Type.choices)
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.ACTIVE,
        db_index=True
    )
    start_date = models.DateTimeField(default=timezone.now)
    end_date = models.DateTimeField()
    expected_return = models.DecimalField(max_digits=15, decimal_places=2)
    actual_return = models.DecimalField(max_digits=15, decimal_places=2, null=True, blank=True)
    reinvest = models.BooleanField(default=False)

    objects = RealEstateInvestmentQuerySet.as_manager()

    class Meta:
        db_table = 'real_estate_investments'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status', 'end_date'], name='re_investment_status_end_idx'),
        ]

    def __str__(self):
        return f"{self.get_type_display()} investment of {self.amount} by {self.user.email}"


class PropertyTransaction(GroupFilteredModel):
    """A purchase of a whole property, in full or in installments."""

    class Type(models.TextChoices):
        FULL = 'FULL', 'Full Payment'
        INSTALLMENT = 'INSTALLMENT', 'Installment'

    class Status(models.TextChoices):
        PENDING = 'PENDING', 'Pending'
        COMPLETED = 'COMPLETED', 'Completed'
        FAILED = 'FAILED', 'Failed'
        CANCELLED = 'CANCELLED', 'Cancelled'

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='property_transactions'
    )
    property = models.ForeignKey(Property, on_delete=models.PROTECT, related_name='transactions')
    amount = models.DecimalField(max_digits=15, decimal_places=2)
    type = models.CharField(max_length=20, choices=Type.choices)
    installments = models.PositiveSmallIntegerField(default=1)
    installment_amount = models.DecimalField(max_digits=15, decimal_places=2, null=True, blank=True)
    paid_installments = models.PositiveSmallIntegerField(default=0)
    next_payment_due = models.DateTimeField(null=True, blank=True)
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
        db_index=True
    )

    objects = OwnedQuerySet.as_manager()

    class Meta:
        db_table = 'property_transactions'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.get_type_display()} purchase of {self.property.name} by {self.user.email}"

    # The "property" field shadows the builtin in this class body
    @builtins.property
    def is_fully_paid(self):
        return self.paid_installments >= self.installments

    @builtins.property
    def remaining_installments(self):
        return max(self.installments - self.paid_installments, 0)

    @builtins.property
    def next_installment_amount(self) -> Decimal:
        """The last installment carries the rounding remainder of the split."""
        if self.remaining_installments == 1:
            return self.amount - self.installment_amount * (self.installments - 1)
        return self.installment_amount

    @builtins.property
    def amount_paid(self) -> Decimal:
        if self.is_fully_paid:
            return self.amount
        return self.installment_amount * self.paid_installments
