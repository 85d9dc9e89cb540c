"""
Market investment models.
"""
from django.conf import settings
from django.db import models
from django.utils import timezone

from core.managers import OwnedQuerySet
from core.models import GroupFilteredModel
from core.validators import validate_plan_terms


class MarketInvestmentPlan(GroupFilteredModel):
    """A fixed-term plan on the markets desk."""

    class Type(models.TextChoices):
        SEMI_ANNUAL = 'SEMI_ANNUAL', 'Semi-Annual'
        ANNUAL = 'ANNUAL', 'Annual'

    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    type = models.CharField(max_length=20, choices=Type.choices)
    min_amount = models.DecimalField(max_digits=15, decimal_places=2)
    max_amount = models.DecimalField(max_digits=15, decimal_places=2)
    return_rate = models.DecimalField(max_digits=5, decimal_places=2)
    duration_months = models.PositiveSmallIntegerField()
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = 'market_investment_plans'
        ordering = ['min_amount']

    def __str__(self):
        return self.name

    def clean(self):
        validate_plan_terms(self.min_amount, self.max_amount, self.return_rate, self.duration_months)


class MarketInvestmentQuerySet(OwnedQuerySet):

    def active(self):
        return self.filter(status=MarketInvestment.Status.ACTIVE)


class MarketInvestment(GroupFilteredModel):

    class Status(models.TextChoices):
        ACTIVE = 'ACTIVE', 'Active'
        MATURED = 'MATURED', 'Matured'
        CANCELLED = 'CANCELLED', 'Cancelled'

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='market_investments'
    )
    plan = models.ForeignKey(MarketInvestmentPlan, on_delete=models.PROTECT, related_name='investments')
    amount = models.DecimalField(max_digits=15, decimal_places=2)
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

    objects = MarketInvestmentQuerySet.as_manager()

    class Meta:
        db_table = 'market_investments'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.user.email} - {self.plan.name}: {self.amount}"
