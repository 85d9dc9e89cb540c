"""
Referral services.

Commissions are computed when a referred user invests or buys, held as
PENDING and credited to the referrer's wallet once an admin approves them.
"""
from decimal import Decimal
from typing import Any, Dict, Iterable, Optional

from django.conf import settings
from django.core.cache import cache
from django.db import transaction
from django.db.models import DecimalField, Q, Sum, Value
from django.db.models.functions import Coalesce
from django.utils import timezone

from core.services import BaseService, ServiceError, ValidationServiceError
from core.utils import quantize_money, percent_of, humanize_choice
from notifications.models import Notification
from notifications.services import NotificationService

from .models import Referral, ReferralSettings, ReferralCommission

REFERRAL_SETTINGS_CACHE_KEY = 'referral_settings:{group_id}'

RATE_FIELD_BY_TYPE = {
    ReferralCommission.TransactionType.REAL_ESTATE_INVESTMENT: 'property_commission_rate',
    ReferralCommission.TransactionType.PROPERTY_PURCHASE: 'property_commission_rate',
    ReferralCommission.TransactionType.EQUIPMENT_PURCHASE: 'equipment_commission_rate',
    ReferralCommission.TransactionType.MARKET_INVESTMENT: 'market_commission_rate',
    ReferralCommission.TransactionType.GREEN_ENERGY_INVESTMENT: 'green_energy_commission_rate',
}


class ReferralService(BaseService):
    """Referral bookkeeping and commission workflow"""

    def __init__(self, user=None, context=None):
        super().__init__(user, context)
        self.notifications = NotificationService()

    def record_referral(self, referrer, referred) -> Referral:
        if referrer.pk == referred.pk:
            raise ValidationServiceError("Users cannot refer themselves")

        referral, created = Referral.objects.get_or_create(
            referred=referred,
            defaults={
                'referrer': referrer,
                'group_id': referrer.group_id or referred.group_id,
                'status': Referral.Status.COMPLETED,
            }
        )
        if created:
            self._log_operation("record_referral", {'referrer': str(referrer.id), 'referred': str(referred.id)})
        return referral

    def get_my_referrals(self):
        self._check_permission('view_referrals')
        return Referral.objects.filter(referrer=self.user).select_related('referred').annotate(
            commission_total=Coalesce(
                Sum('commissions__amount', filter=~Q(commissions__status=ReferralCommission.Status.REJECTED)),
                Value(Decimal('0')),
                output_field=DecimalField(max_digits=15, decimal_places=2),
            )
        )

    # Settings

    def get_settings(self, group=None) -> ReferralSettings:
        """Rates in force for ``group``. A zero-rate row is created on first use."""
        group = group or self.group
        if group is None:
            raise ValidationServiceError("A tenant group is required")

        cache_key = REFERRAL_SETTINGS_CACHE_KEY.format(group_id=group.pk)
        current = cache.get(cache_key)
        if current is None:
            current = ReferralSettings.objects.for_group(group).order_by('-created_at').first()
            if current is None:
                current = ReferralSettings.objects.create(group=group)
            cache.set(cache_key, current, settings.SETTINGS_CACHE_TIMEOUT)
        return current

    @transaction.atomic
    def update_settings(self, **rates) -> ReferralSettings:
        """Append a settings row. Rates not given keep their current value."""
        self._require_admin()
        if self.group is None:
            raise ValidationServiceError("Admin has no group")

        current = self.get_settings(self.group)
        values = {}
        for field in ReferralSettings.RATE_FIELDS:
            value = rates.get(field)
            if value is None:
                value = getattr(current, field)
            value = quantize_money(value)
            if value < 0 or value > 100:
                raise ValidationServiceError(f"{humanize_choice(field).capitalize()} must be between 0 and 100")
            values[field] = value

        new_settings = ReferralSettings.objects.create(
            group=self.group,
            updated_by=self.user,
            **values
        )
        cache.delete(REFERRAL_SETTINGS_CACHE_KEY.format(group_id=self.group.pk))
        self._log_operation("update_referral_settings", {k: str(v) for k, v in values.items()})
        return new_settings

    # Commissions

    def process_referral_commission(self, referred_user, amount, transaction_type: str,
                                    investment_reference: str = '') -> Optional[ReferralCommission]:
        """
        Create a pending commission for the referrer of ``referred_user``.

        Returns None when the user was not referred or the rate yields
        nothing. Callers run this inside their own transaction.
        """
        referral = Referral.objects.select_related('referrer').filter(
            referred=referred_user,
            status=Referral.Status.COMPLETED
        ).first()
        if referral is None:
            return None

        rates = self.get_settings(referral.group)
        rate = getattr(rates, RATE_FIELD_BY_TYPE[transaction_type])
        base_amount = quantize_money(amount)
        commission_amount = percent_of(base_amount, rate)
        if commission_amount <= 0:
            return None

        commission = ReferralCommission.objects.create(
            referral=referral,
            group_id=referral.group_id,
            referrer=referral.referrer,
            referred=referred_user,
            amount=commission_amount,
            rate=rate,
            transaction_type=transaction_type,
            investment_reference=str(investment_reference or ''),
        )

        self.notifications.notify(
            referral.referrer,
            title="New Commission Earned",
            message=f"You've earned a {rate}% commission of ${commission_amount} from your "
                    f"referral's {humanize_choice(transaction_type)} of ${base_amount}.",
            type=Notification.Type.COMMISSION_EARNED,
            action_url='/dashboard/referrals',
            metadata={'commission_id': str(commission.id)},
        )
        self.logger.info(
            f"Commission {commission.id} of {commission_amount} created for {referral.referrer.email}"
        )
        return commission

    def _get_pending_commission(self, commission_id) -> ReferralCommission:
        self._require_admin()
        commission = self.get_or_404(
            ReferralCommission,
            queryset=ReferralCommission.objects.for_user(self.user).select_for_update(),
            id=commission_id,
        )
        if commission.status != ReferralCommission.Status.PENDING:
            raise ValidationServiceError("Commission is not pending")
        return commission

    @transaction.atomic
    def approve_commission(self, commission_id) -> ReferralCommission:
        from wallets.models import WalletTransaction
        from wallets.services import WalletService

        commission = self._get_pending_commission(commission_id)

        commission.status = ReferralCommission.Status.PAID
        commission.paid_at = timezone.now()
        commission.save(update_fields=['status', 'paid_at', 'updated_at'])

        wallets = WalletService(user=self.user)
        wallet = wallets.get_wallet(commission.referrer, lock=True)
        wallets.credit(
            wallet,
            commission.amount,
            WalletTransaction.Type.COMMISSION,
            f"Referral commission for {humanize_choice(commission.transaction_type)}",
            reference=str(commission.id),
        )

        self.notifications.notify(
            commission.referrer,
            title="Commission Paid",
            message=f"Your commission of ${commission.amount} has been paid to your wallet.",
            type=Notification.Type.COMMISSION_PAID,
            action_url='/dashboard/wallet',
        )

        referral = commission.referral
        if not referral.commissions.filter(status=ReferralCommission.Status.PENDING).exists():
            referral.commission_paid = True
            referral.save(update_fields=['commission_paid', 'updated_at'])

        self._log_operation("approve_commission", {'commission': str(commission.id)})
        return commission

    @transaction.atomic
    def reject_commission(self, commission_id, reason: str) -> ReferralCommission:
        if not reason:
            raise ValidationServiceError("A rejection reason is required")
        commission = self._get_pending_commission(commission_id)

        commission.status = ReferralCommission.Status.REJECTED
        commission.rejection_reason = reason
        commission.save(update_fields=['status', 'rejection_reason', 'updated_at'])

        self.notifications.notify(
            commission.referrer,
            title="Commission Rejected",
            message=f"Your commission of ${commission.amount} has been rejected. Reason: {reason}",
            type=Notification.Type.SYSTEM_UPDATE,
            action_url='/dashboard/referrals',
        )
        self._log_operation("reject_commission", {'commission': str(commission.id), 'reason': reason})
        return commission

    def bulk_approve(self, commission_ids: Iterable) -> Dict[str, Any]:
        """Approve each commission on its own; one failure does not stop the rest."""
        self._require_admin()
        approved, failed = [], []
        for commission_id in commission_ids:
            try:
                self.approve_commission(commission_id)
                approved.append(str(commission_id))
            except ServiceError as e:
                failed.append({'id': str(commission_id), 'error': str(e)})
        return {'approved': approved, 'failed': failed}

    def list_commissions(self, status: Optional[str] = None):
        self._check_permission('view_commissions')
        queryset = ReferralCommission.objects.for_user(self.user).select_related('referrer', 'referred')
        if status:
            queryset = queryset.filter(status=status)
        return queryset

    def my_commissions(self):
        self._check_permission('view_commissions')
        return ReferralCommission.objects.owned_by(self.user).select_related('referred')

    def summary(self, user=None) -> Dict[str, Any]:
        """Referral count and commission totals for a referrer."""
        referrer = user or self.user
        commissions = ReferralCommission.objects.owned_by(referrer)
        zero = Decimal('0')
        return {
            'referral_code': referrer.referral_code,
            'total_referrals': Referral.objects.filter(referrer=referrer).count(),
            'pending_commissions': sum((c.amount for c in commissions.pending()), zero),
            'paid_commissions': sum((c.amount for c in commissions.paid()), zero),
        }
