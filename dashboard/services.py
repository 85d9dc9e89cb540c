"""
Dashboard aggregates for investors and admins.
"""
from datetime import timedelta
from decimal import Decimal
from typing import Any, Dict

from django.contrib.auth import get_user_model
from django.db.models import Count, Q, Sum
from django.utils import timezone

from compliance.models import KYCVerification
from core.services import BaseService
from green_energy.models import GreenEnergyInvestment, EquipmentTransaction
from markets.models import MarketInvestmentPlan, MarketInvestment
from real_estate.models import Property, RealEstateInvestment, PropertyTransaction
from referrals.models import ReferralCommission
from wallets.models import Wallet, WalletTransaction

User = get_user_model()

RECENT_ACTIVITY_LIMIT = 5
NEW_USER_WINDOW_DAYS = 30


def _sum(queryset, field: str) -> Decimal:
    return queryset.aggregate(total=Sum(field))['total'] or Decimal('0')


class DashboardService(BaseService):
    """Read-only statistics. No writes happen here."""

    def user_stats(self, user=None) -> Dict[str, Any]:
        """Totals per product, wallet balance and recent activity for one user."""
        self._check_permission('view_dashboard')
        owner = user or self.user

        real_estate = RealEstateInvestment.objects.owned_by(owner)
        properties = PropertyTransaction.objects.owned_by(owner).exclude(
            status=PropertyTransaction.Status.CANCELLED
        )
        green_energy = GreenEnergyInvestment.objects.owned_by(owner)
        equipment = EquipmentTransaction.objects.owned_by(owner).exclude(
            status=EquipmentTransaction.Status.CANCELLED
        )
        markets = MarketInvestment.objects.owned_by(owner)

        wallet = Wallet.objects.filter(user=owner).first()
        recent = WalletTransaction.objects.owned_by(owner)[:RECENT_ACTIVITY_LIMIT]

        return {
            'real_estate': {
                'total_value': _sum(real_estate, 'amount') + _sum(properties, 'amount'),
                'count': real_estate.count() + properties.count(),
            },
            'green_energy': {
                'total_value': _sum(green_energy, 'amount') + _sum(equipment, 'total_amount'),
                'count': green_energy.count() + equipment.count(),
            },
            'markets': {
                'total_value': _sum(markets, 'amount'),
                'count': markets.count(),
            },
            'wallet_balance': wallet.balance if wallet else Decimal('0'),
            'recent_activity': list(recent),
        }

    def admin_stats(self, group=None) -> Dict[str, Any]:
        """Group-wide counters for the admin overview."""
        self._require_admin()
        group = group or self.group

        users = User.objects.filter(group=group)
        since = timezone.now() - timedelta(days=NEW_USER_WINDOW_DAYS)

        kyc = KYCVerification.objects.for_group(group).aggregate(
            pending=Count('id', filter=Q(status=KYCVerification.Status.PENDING)),
            approved=Count('id', filter=Q(status=KYCVerification.Status.APPROVED)),
            rejected=Count('id', filter=Q(status=KYCVerification.Status.REJECTED)),
        )
        properties = Property.objects.for_group(group).aggregate(
            available=Count('id', filter=Q(status=Property.Status.AVAILABLE)),
            pending=Count('id', filter=Q(status=Property.Status.PENDING)),
            sold=Count('id', filter=Q(status=Property.Status.SOLD)),
        )

        real_estate = RealEstateInvestment.objects.for_group(group)
        green_energy = GreenEnergyInvestment.objects.for_group(group)
        markets = MarketInvestment.objects.for_group(group)
        equipment_sold = EquipmentTransaction.objects.for_group(group).exclude(
            status=EquipmentTransaction.Status.CANCELLED
        )

        pending = WalletTransaction.objects.for_group(group).pending()
        commissions = ReferralCommission.objects.for_group(group)

        return {
            'users': {
                'total': users.count(),
                'new_last_30_days': users.filter(created_at__gte=since).count(),
            },
            'kyc': kyc,
            'properties': properties,
            'investments': {
                'real_estate': real_estate.count(),
                'green_energy': green_energy.count(),
                'markets': markets.count(),
            },
            'equipment_sold': equipment_sold.aggregate(total=Sum('quantity'))['total'] or 0,
            'market_plans': MarketInvestmentPlan.objects.for_group(group).count(),
            'total_invested': _sum(real_estate, 'amount') + _sum(green_energy, 'amount') + _sum(markets, 'amount'),
            'wallets': {
                'total_balance': _sum(Wallet.objects.for_group(group), 'balance'),
                'pending_deposits': pending.of_type(WalletTransaction.Type.DEPOSIT).total(),
                'pending_withdrawals': pending.filter(
                    type__in=[WalletTransaction.Type.WITHDRAWAL, WalletTransaction.Type.PAYOUT]
                ).total(),
            },
            'commissions': {
                'pending': _sum(commissions.pending(), 'amount'),
                'paid': _sum(commissions.paid(), 'amount'),
            },
        }
