"""
Green energy models.
"""
import secrets
from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from core.managers import OwnedQuerySet
from core.models import GroupFilteredModel
from core.validators import validate_plan_terms

DELIVERY_PIN_LENGTH = 6


def generate_delivery_pin() -> str:
    return ''.join(secrets.choice('0123456789') for _ in range(DELIVERY_PIN_LENGTH))


class PlanType(models.TextChoices):
    SEMI_ANNUAL = 'SEMI_ANNUAL', 'Semi-Annual'
    ANNUAL = 'ANNUAL', 'Annual'


class InvestmentStatus(models.TextChoices):
    ACTIVE = 'ACTIVE', 'Active'
    MATURED = 'MATURED', 'Matured'
    CANCELLED = 'CANCELLED', 'Cancelled'


class GreenEnergyPlan(GroupFilteredModel):
    """An investment plan offered by the green energy desk."""

    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    type = models.CharField(max_length=20, choices=PlanType.choices)
    min_amount = models.DecimalField(max_digits=15, decimal_places=2)
    max_amount = models.DecimalField(max_digits=15, decimal_places=2)
    return_rate = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        help_text="Return over the plan duration in percent"
    )
    duration_months = models.PositiveSmallIntegerField()
    image = models.URLField(max_length=500, blank=True)
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = 'green_energy_plans'
        ordering = ['min_amount']

    def __str__(self):
        return f"{self.name} ({self.get_type_display()})"

    def clean(self):
        validate_plan_terms(self.min_amount, self.max_amount, self.return_rate, self.duration_months)


class GreenEnergyInvestmentQuerySet(OwnedQuerySet):

    def active(self):
        return self.filter(status=InvestmentStatus.ACTIVE)

    def due(self, now=None):
        return self.active().filter(end_date__lte=now or timezone.now())


class GreenEnergyInvestment(GroupFilteredModel):
    """An investment in a green energy plan."""

    Status = InvestmentStatus

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='green_energy_investments'
    )
    plan = models.ForeignKey(GreenEnergyPlan, on_delete=models.PROTECT, related_name='investments')
    amount = models.DecimalField(max_digits=15, decimal_places=2)
    status = models.CharField(
        max_length=20,
        choices=InvestmentStatus.choices,
        default=InvestmentStatus.ACTIVE,
        db_index=True
    )
    start_date = models.DateTimeField(default=timezone.now)
    end_date = models.DateTimeField()
    expected_return = models.DecimalField(max_digits=15, decimal_places=2)
    actual_return = models.DecimalField(max_digits=15, decimal_places=2, null=True, blank=True)
    reinvest = models.BooleanField(default=False)
    reinvested_from = models.ForeignKey(
        'self',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='reinvestments'
    )

    objects = GreenEnergyInvestmentQuerySet.as_manager()

    class Meta:
        db_table = 'green_energy_investments'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status', 'end_date'], name='ge_investment_status_end_idx'),
        ]

    def __str__(self):
        return f"{self.amount} in {self.plan.name} by {self.user.email}"


class Equipment(GroupFilteredModel):
    """Equipment sold to investors and delivered to their address."""

    class Type(models.TextChoices):
        SOLAR_PANEL = 'SOLAR_PANEL', 'Solar Panel'
        WIND_TURBINE = 'WIND_TURBINE', 'Wind Turbine'
        BATTERY_STORAGE = 'BATTERY_STORAGE', 'Battery Storage'
        INVERTER = 'INVERTER', 'Inverter'

    class Status(models.TextChoices):
        AVAILABLE = 'AVAILABLE', 'Available'
        PENDING = 'PENDING', 'Pending'
        SOLD = 'SOLD', 'Sold'

    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    type = models.CharField(max_length=20, choices=Type.choices)
    price = models.DecimalField(
        max_digits=15,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    stock_quantity = models.PositiveIntegerField(default=0)
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.AVAILABLE,
        db_index=True
    )
    features = models.JSONField(default=list, blank=True)
    specifications = models.JSONField(default=dict, blank=True)
    images = models.JSONField(default=list, blank=True)

    class Meta:
        db_table = 'green_energy_equipment'
        verbose_name_plural = 'equipment'
        ordering = ['-created_at']

    def __str__(self):
        return self.name


class EquipmentTransaction(GroupFilteredModel):
    """An equipment order and its delivery."""

    class Status(models.TextChoices):
        PENDING = 'PENDING', 'Pending'
        ACCEPTED = 'ACCEPTED', 'Accepted'
        PROCESSING = 'PROCESSING', 'Processing'
        OUT_FOR_DELIVERY = 'OUT_FOR_DELIVERY', 'Out for Delivery'
        COMPLETED = 'COMPLETED', 'Completed'
        CANCELLED = 'CANCELLED', 'Cancelled'

    TRANSITIONS = {
        Status.PENDING: (Status.ACCEPTED, Status.CANCELLED),
        Status.ACCEPTED: (Status.PROCESSING, Status.CANCELLED),
        Status.PROCESSING: (Status.OUT_FOR_DELIVERY, Status.CANCELLED),
        Status.OUT_FOR_DELIVERY: (Status.COMPLETED,),
    }

    ADDRESS_FIELDS = ('street', 'city', 'state', 'postal_code', 'country')

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='equipment_transactions'
    )
    equipment = models.ForeignKey(Equipment, on_delete=models.PROTECT, related_name='transactions')
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    total_amount = models.DecimalField(max_digits=15, decimal_places=2)
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
        db_index=True
    )
    delivery_address = models.JSONField(default=dict)
    tracking_number = models.CharField(max_length=100, blank=True)
    delivery_pin = models.CharField(max_length=DELIVERY_PIN_LENGTH, blank=True)
    delivery_date = models.DateTimeField(null=True, blank=True)
    estimated_delivery_date = models.DateTimeField(null=True, blank=True)

    objects = OwnedQuerySet.as_manager()

    class Meta:
        db_table = 'green_energy_equipment_transactions'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.quantity} x {self.equipment.name} for {self.user.email}"

    def can_transition_to(self, status) -> bool:
        return status in self.TRANSITIONS.get(self.status, ())
