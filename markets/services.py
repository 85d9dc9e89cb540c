"""
Market investment services.
"""
from decimal import Decimal
from typing import Any, Dict

from django.db import transaction
from django.utils import timezone

from compliance.services import KYCService
from core.services import BaseService, ValidationServiceError
from core.utils import quantize_money, percent_of, add_months_as_days
from notifications.models import Notification
from notifications.services import NotificationService
from referrals.models import ReferralCommission
from referrals.services import ReferralService
from wallets.models import WalletTransaction
from wallets.services import WalletService

from .models import MarketInvestmentPlan, MarketInvestment


class MarketPlanService(BaseService):

    def delete_plan(self, plan: MarketInvestmentPlan) -> None:
        self._require_admin()
        if plan.investments.exists():
            raise ValidationServiceError("Cannot delete plan with existing investments")
        self._log_operation("delete_market_plan", {'plan': str(plan.id)})
        plan.delete()


class MarketInvestmentService(BaseService):
    """Investments in market plans"""

    def __init__(self, user=None, context=None):
        super().__init__(user, context)
        self.notifications = NotificationService()
        self.wallets = WalletService(user=user)

    @transaction.atomic
    def invest(self, plan_id, amount) -> MarketInvestment:
        self._check_permission('invest')
        KYCService.require_approved(self.user)

        plan = self.get_or_404(
            MarketInvestmentPlan,
            queryset=MarketInvestmentPlan.objects.for_user(self.user).filter(is_active=True),
            id=plan_id,
        )
        amount = quantize_money(self.validate_amount(amount))
        if amount < plan.min_amount or amount > plan.max_amount:
            raise ValidationServiceError(
                f"Investment amount must be between {plan.min_amount:,} and {plan.max_amount:,}"
            )

        wallet = self.wallets.get_wallet(lock=True)
        self.wallets.ensure_funds(wallet, amount)

        start_date = timezone.now()
        investment = MarketInvestment.objects.create(
            user=self.user,
            group=plan.group,
            plan=plan,
            amount=amount,
            start_date=start_date,
            end_date=add_months_as_days(start_date, plan.duration_months),
            expected_return=percent_of(amount, plan.return_rate),
        )
        self.wallets.debit(
            wallet,
            amount,
            WalletTransaction.Type.INVESTMENT,
            f"Investment in {plan.name}",
            reference=investment.id,
        )

        ReferralService().process_referral_commission(
            self.user,
            amount,
            ReferralCommission.TransactionType.MARKET_INVESTMENT,
            investment.id,
        )

        self.notifications.notify(
            self.user,
            title="Investment Created",
            message=f"Your investment of ${amount} in {plan.name} has been created. "
                    f"Expected return: ${investment.expected_return}.",
            type=Notification.Type.INVESTMENT_CREATED,
            action_url=f'/markets/portfolio/{investment.id}',
        )
        self._log_operation("market_invest", {'investment': str(investment.id), 'amount': str(amount)})
        return investment

    @transaction.atomic
    def mature(self, investment_id, actual_return=None) -> MarketInvestment:
        self._require_admin()
        investment = self.get_or_404(
            MarketInvestment,
            queryset=MarketInvestment.objects.for_user(self.user).select_for_update().select_related('plan', 'user'),
            id=investment_id,
        )
        if investment.status != MarketInvestment.Status.ACTIVE:
            raise ValidationServiceError("Only active investments can be matured")

        if actual_return is None:
            actual_return = investment.expected_return
        actual_return = quantize_money(actual_return)
        if actual_return < 0:
            raise ValidationServiceError("Actual return cannot be negative")

        investment.status = MarketInvestment.Status.MATURED
        investment.actual_return = actual_return
        investment.end_date = timezone.now()
        investment.save(update_fields=['status', 'actual_return', 'end_date', 'updated_at'])

        total = investment.amount + actual_return
        wallet = self.wallets.get_wallet(investment.user, lock=True)
        self.wallets.credit(
            wallet,
            total,
            WalletTransaction.Type.RETURN,
            f"Return from {investment.plan.name} investment",
            reference=investment.id,
        )

        self.notifications.notify(
            investment.user,
            title="Investment Matured",
            message=f"Your investment in {investment.plan.name} has matured and ${total} "
                    f"was credited to your wallet.",
            type=Notification.Type.INVESTMENT_MATURED,
            action_url=f'/markets/portfolio/{investment.id}',
        )
        self._log_operation("market_mature", {'investment': str(investment.id), 'total': str(total)})
        return investment

    def portfolio(self, user=None) -> Dict[str, Any]:
        investments = MarketInvestment.objects.owned_by(user or self.user).select_related('plan')
        zero = Decimal('0')
        return {
            'investments': investments,
            'total_invested': sum((i.amount for i in investments), zero),
            'expected_returns': sum(
                (i.expected_return for i in investments if i.status == MarketInvestment.Status.ACTIVE), zero
            ),
            'active_investments': sum(1 for i in investments if i.status == MarketInvestment.Status.ACTIVE),
        }
