"""
Real estate services.

``RealEstateService`` covers plan investments and property purchases of the
acting investor. ``RealEstateAdminService`` covers status changes made by
admins and the scheduled maturity sweep.
"""
from decimal import Decimal
from datetime import timedelta
from typing import Any, Dict, Optional

from django.conf import settings
from django.db import transaction
from django.db.models import Sum
from django.utils import timezone

from compliance.services import KYCService
from core.services import BaseService, ValidationServiceError
from core.utils import quantize_money, add_months_as_days
from notifications.models import Notification
from notifications.services import NotificationService
from referrals.models import ReferralCommission
from referrals.services import ReferralService
from wallets.models import WalletTransaction
from wallets.services import WalletService, WalletAdminService

from .constants import INVESTMENT_PLANS, MIN_INVESTMENT, MAX_INVESTMENT
from .models import Property, RealEstateInvestment, PropertyTransaction


class PropertyService(BaseService):
    """Property listing management"""

    def delete_property(self, property_obj: Property) -> None:
        self._require_admin()
        if property_obj.transactions.exists() or property_obj.investments.exists():
            raise ValidationServiceError("Cannot delete property with existing transactions or investments")
        self._log_operation("delete_property", {'property': str(property_obj.id)})
        property_obj.delete()


class RealEstateService(BaseService):
    """Investments and purchases of the acting investor"""

    def __init__(self, user=None, context=None):
        super().__init__(user, context)
        self.notifications = NotificationService()
        self.wallets = WalletService(user=user)

    def _prepare_wallet(self, amount: Decimal):
        KYCService.require_approved(self.user)
        wallet = self.wallets.get_wallet(lock=True)
        self.wallets.ensure_funds(wallet, amount)
        return wallet

    @transaction.atomic
    def create_investment(self, type: str, amount, reinvest: bool = False,
                          property_obj: Optional[Property] = None) -> RealEstateInvestment:
        """
        Invest in a semi-annual or annual plan.

        Raises:
            PermissionServiceError: If the investor's KYC is not approved
            ValidationServiceError: On an unknown plan, an amount outside the
                plan bounds or an insufficient balance
        """
        self._check_permission('invest')
        plan = INVESTMENT_PLANS.get(type)
        if plan is None:
            raise ValidationServiceError("Invalid investment type")

        amount = quantize_money(self.validate_amount(amount))
        if amount < MIN_INVESTMENT or amount > MAX_INVESTMENT:
            raise ValidationServiceError(
                f"Investment amount must be between {MIN_INVESTMENT:,} and {MAX_INVESTMENT:,}"
            )
        if amount < plan['min_amount'] or amount > plan['max_amount']:
            raise ValidationServiceError(
                f"{type.replace('_', '-').title()} investments must be between "
                f"{plan['min_amount']:,} and {plan['max_amount']:,}"
            )
        if property_obj is not None and property_obj.group_id != self.user.group_id:
            raise ValidationServiceError("Property not found")

        wallet = self._prepare_wallet(amount)
        start_date = timezone.now()

        investment = RealEstateInvestment.objects.create(
            user=self.user,
            group=self.user.group,
            property=property_obj,
            amount=amount,
            type=type,
            start_date=start_date,
            end_date=add_months_as_days(start_date, plan['months']),
            expected_return=quantize_money(amount * plan['rate']),
            reinvest=reinvest,
        )

        self.wallets.debit(
            wallet,
            amount,
            WalletTransaction.Type.INVESTMENT,
            f"Real Estate Investment - {type}",
            reference=investment.id,
        )

        ReferralService().process_referral_commission(
            self.user,
            amount,
            ReferralCommission.TransactionType.REAL_ESTATE_INVESTMENT,
            investment.id,
        )

        self.notifications.notify(
            self.user,
            title="Investment Created",
            message=f"Your {investment.get_type_display().lower()} real estate investment of "
                    f"${amount} has been created. Expected return: ${investment.expected_return}.",
            type=Notification.Type.INVESTMENT_CREATED,
            action_url=f'/real-estate/portfolio/{investment.id}',
        )

        self._log_operation("create_investment", {'investment': str(investment.id), 'amount': str(amount)})
        return investment

    def get_investment(self, investment_id, lock: bool = False) -> RealEstateInvestment:
        queryset = RealEstateInvestment.objects.for_user(self.user)
        if lock:
            queryset = queryset.select_for_update()
        investment = self.get_or_404(RealEstateInvestment, queryset=queryset, id=investment_id)
        self._check_owner(investment)
        return investment

    def update_investment(self, investment_id, reinvest: bool) -> RealEstateInvestment:
        investment = self.get_investment(investment_id)
        if investment.status != RealEstateInvestment.Status.ACTIVE:
            raise ValidationServiceError("Only active investments can be updated")

        investment.reinvest = reinvest
        investment.save(update_fields=['reinvest', 'updated_at'])
        self._log_operation("update_investment", {'investment': str(investment.id), 'reinvest': reinvest})
        return investment

    @transaction.atomic
    def withdraw_investment(self, investment_id) -> RealEstateInvestment:
        """Pay out a matured investment: principal plus expected return."""
        investment = self.get_investment(investment_id, lock=True)
        if investment.user_id != self.user.id:
            raise ValidationServiceError("Only the investor can withdraw an investment")
        if investment.status != RealEstateInvestment.Status.MATURED:
            raise ValidationServiceError("Only matured investments can be withdrawn")

        investment.status = RealEstateInvestment.Status.CANCELLED
        investment.actual_return = investment.expected_return
        investment.save(update_fields=['status', 'actual_return', 'updated_at'])

        payout = investment.amount + investment.expected_return
        wallet = self.wallets.get_wallet(lock=True)
        self.wallets.credit(
            wallet,
            payout,
            WalletTransaction.Type.RETURN,
            f"Return from investment {investment.id}",
            reference=investment.id,
        )

        self.notifications.notify(
            self.user,
            title="Investment Withdrawn",
            message=f"${payout} from your matured real estate investment has been credited to your wallet.",
            type=Notification.Type.WALLET_UPDATED,
            action_url='/dashboard/wallet',
        )
        self._log_operation("withdraw_investment", {'investment': str(investment.id), 'payout': str(payout)})
        return investment

    @transaction.atomic
    def purchase_property(self, property_id, type: str,
                          installments: Optional[int] = None) -> PropertyTransaction:
        """
        Buy a property outright or open an installment plan.

        An installment plan charges the first installment now and reserves
        the property until the last one is paid.
        """
        self._check_permission('purchase')
        KYCService.require_approved(self.user)

        property_obj = self.get_or_404(
            Property,
            queryset=Property.objects.for_user(self.user).select_for_update(),
            id=property_id,
        )
        if not property_obj.is_available:
            raise ValidationServiceError("Property is not available")

        price = quantize_money(property_obj.price)
        now = timezone.now()

        if type == PropertyTransaction.Type.FULL:
            installments = 1
            installment_amount = price
            charge = price
        elif type == PropertyTransaction.Type.INSTALLMENT:
            if not installments or installments < 2 or installments > settings.MAX_INSTALLMENTS:
                raise ValidationServiceError(
                    f"Installments must be between 2 and {settings.MAX_INSTALLMENTS}"
                )
            installment_amount = quantize_money(price / installments)
            charge = installment_amount
        else:
            raise ValidationServiceError("Invalid purchase type")

        wallet = self.wallets.get_wallet(lock=True)
        self.wallets.ensure_funds(wallet, charge)

        is_full = type == PropertyTransaction.Type.FULL
        purchase = PropertyTransaction.objects.create(
            user=self.user,
            group=self.user.group,
            property=property_obj,
            amount=price,
            type=type,
            installments=installments,
            installment_amount=installment_amount,
            paid_installments=1,
            next_payment_due=None if is_full else now + timedelta(days=settings.INSTALLMENT_INTERVAL_DAYS),
            status=PropertyTransaction.Status.COMPLETED if is_full else PropertyTransaction.Status.PENDING,
        )

        WalletAdminService(user=self.user).create_property_purchase_transaction(
            wallet, charge, property_obj.name, reference=purchase.id
        )

        property_obj.status = Property.Status.SOLD if is_full else Property.Status.PENDING
        property_obj.save(update_fields=['status', 'updated_at'])

        ReferralService().process_referral_commission(
            self.user,
            charge,
            ReferralCommission.TransactionType.PROPERTY_PURCHASE,
            purchase.id,
        )

        self._log_operation("purchase_property", {
            'property': str(property_obj.id), 'type': type, 'charged': str(charge)
        })
        return purchase

    @transaction.atomic
    def make_installment_payment(self, transaction_id) -> PropertyTransaction:
        purchase = self.get_or_404(
            PropertyTransaction,
            queryset=PropertyTransaction.objects.owned_by(self.user).select_for_update().select_related('property'),
            id=transaction_id,
        )
        if purchase.type != PropertyTransaction.Type.INSTALLMENT:
            raise ValidationServiceError("This is not an installment purchase")
        if purchase.status != PropertyTransaction.Status.PENDING or purchase.is_fully_paid:
            raise ValidationServiceError("All installments have already been paid")

        charge = purchase.next_installment_amount
        wallet = self.wallets.get_wallet(lock=True)
        self.wallets.ensure_funds(wallet, charge)

        purchase.paid_installments += 1
        self.wallets.debit(
            wallet,
            charge,
            WalletTransaction.Type.INVESTMENT,
            f"Installment {purchase.paid_installments}/{purchase.installments} "
            f"for property: {purchase.property.name}",
            reference=purchase.id,
        )

        if purchase.is_fully_paid:
            purchase.next_payment_due = None
            purchase.status = PropertyTransaction.Status.COMPLETED
            purchase.property.status = Property.Status.SOLD
            purchase.property.save(update_fields=['status', 'updated_at'])
        else:
            purchase.next_payment_due = timezone.now() + timedelta(days=settings.INSTALLMENT_INTERVAL_DAYS)
        purchase.save(update_fields=['paid_installments', 'next_payment_due', 'status', 'updated_at'])

        ReferralService().process_referral_commission(
            self.user,
            charge,
            ReferralCommission.TransactionType.PROPERTY_PURCHASE,
            purchase.id,
        )

        self._log_operation("installment_payment", {
            'transaction': str(purchase.id), 'paid': purchase.paid_installments
        })
        return purchase

    def portfolio(self, user=None) -> Dict[str, Any]:
        owner = user or self.user
        investments = RealEstateInvestment.objects.owned_by(owner).select_related('property')
        transactions = PropertyTransaction.objects.owned_by(owner).select_related('property')
        live = investments.exclude(status=RealEstateInvestment.Status.CANCELLED)

        return {
            'investments': investments,
            'property_transactions': transactions,
            'total_invested': investments.aggregate(total=Sum('amount'))['total'] or Decimal('0'),
            'total_expected_returns': live.aggregate(total=Sum('expected_return'))['total'] or Decimal('0'),
            'active_investments': investments.active().count(),
            'matured_investments': investments.matured().count(),
        }


class RealEstateAdminService(RealEstateService):
    """Admin status changes and the maturity sweep"""

    def portfolio(self, user=None) -> Dict[str, Any]:
        self._require_admin()
        if user is None:
            raise ValidationServiceError("A user is required")
        from accounts.services import UserAdminService

        target = UserAdminService(user=self.user).get_user(getattr(user, 'pk', user))
        return super().portfolio(target)

    def _get_active_investment(self, investment_id) -> RealEstateInvestment:
        investment = self.get_or_404(
            RealEstateInvestment,
            queryset=RealEstateInvestment.objects.for_user(self.user).select_for_update(),
            id=investment_id,
        )
        if investment.status != RealEstateInvestment.Status.ACTIVE:
            raise ValidationServiceError("Only active investments can be updated")
        return investment

    @transaction.atomic
    def update_investment_status(self, investment_id, status: str) -> RealEstateInvestment:
        """
        Move an active investment to MATURED or CANCELLED.

        Cancelling refunds the principal. Matured and cancelled investments
        are final.
        """
        self._require_admin()
        if status not in (RealEstateInvestment.Status.MATURED, RealEstateInvestment.Status.CANCELLED):
            raise ValidationServiceError("Invalid status")

        if status == RealEstateInvestment.Status.CANCELLED:
            return self.cancel_investment(investment_id)

        investment = self._get_active_investment(investment_id)
        investment.status = status
        investment.save(update_fields=['status', 'updated_at'])
        self._notify_matured(investment)

        self._log_operation("update_investment_status", {
            'investment': str(investment.id), 'to': status
        })
        return investment

    @transaction.atomic
    def cancel_investment(self, investment_id) -> RealEstateInvestment:
        """Cancel an active investment and refund the principal to the investor."""
        self._require_admin()
        investment = self._get_active_investment(investment_id)

        investment.status = RealEstateInvestment.Status.CANCELLED
        investment.save(update_fields=['status', 'updated_at'])

        wallet = self.wallets.get_wallet(investment.user, lock=True)
        self.wallets.credit(
            wallet,
            investment.amount,
            WalletTransaction.Type.RETURN,
            f"Refund from cancelled real estate investment {investment.id}",
            reference=investment.id,
        )

        self.notifications.notify(
            investment.user,
            title="Investment Cancelled",
            message=f"Your real estate investment of ${investment.amount} was cancelled "
                    f"and refunded to your wallet.",
            type=Notification.Type.INVESTMENT_CANCELLED,
            action_url='/dashboard/wallet',
        )
        self._log_operation("cancel_investment", {'investment': str(investment.id)})
        return investment

    @transaction.atomic
    def update_property_transaction_status(self, transaction_id, status: str) -> PropertyTransaction:
        """
        Settle a pending purchase.

        COMPLETED marks the property SOLD. CANCELLED and FAILED refund what
        was paid and put the property back on sale.
        """
        self._require_admin()
        Status = PropertyTransaction.Status
        if status not in (Status.COMPLETED, Status.CANCELLED, Status.FAILED):
            raise ValidationServiceError("Invalid status")

        purchase = self.get_or_404(
            PropertyTransaction,
            queryset=PropertyTransaction.objects.for_user(self.user).select_for_update().select_related('property'),
            id=transaction_id,
        )
        if purchase.status != Status.PENDING:
            raise ValidationServiceError("Only pending purchases can be updated")

        property_obj = purchase.property
        purchase.status = status
        purchase.save(update_fields=['status', 'updated_at'])

        if status == Status.COMPLETED:
            if property_obj.status == Property.Status.PENDING:
                property_obj.status = Property.Status.SOLD
                property_obj.save(update_fields=['status', 'updated_at'])
        else:
            refund = purchase.amount_paid
            if refund > 0:
                wallet = self.wallets.get_wallet(purchase.user, lock=True)
                self.wallets.credit(
                    wallet,
                    refund,
                    WalletTransaction.Type.RETURN,
                    f"Refund for {purchase.get_status_display().lower()} purchase of property: {property_obj.name}",
                    reference=purchase.id,
                )
            if property_obj.status == Property.Status.PENDING:
                property_obj.status = Property.Status.AVAILABLE
                property_obj.save(update_fields=['status', 'updated_at'])

        self.notifications.notify(
            purchase.user,
            title="Property Purchase Updated",
            message=f"Your purchase of {property_obj.name} is now {purchase.get_status_display().lower()}.",
            type=Notification.Type.SYSTEM_UPDATE,
            action_url=f'/real-estate/portfolio/transaction/{purchase.id}',
        )

        self._log_operation("update_property_transaction_status", {
            'transaction': str(purchase.id), 'to': status
        })
        return purchase

    def _notify_matured(self, investment: RealEstateInvestment):
        self.notifications.notify(
            investment.user,
            title="Investment Matured",
            message=f"Your real estate investment of ${investment.amount} has matured. "
                    f"You can now withdraw ${investment.amount + investment.expected_return}.",
            type=Notification.Type.INVESTMENT_MATURED,
            action_url=f'/real-estate/portfolio/{investment.id}',
        )

    def mature_due_investments(self, now=None) -> int:
        """Mark every active investment past its end date as matured."""
        matured = 0
        for investment in RealEstateInvestment.objects.due(now).select_related('user'):
            with transaction.atomic():
                updated = RealEstateInvestment.objects.filter(
                    pk=investment.pk, status=RealEstateInvestment.Status.ACTIVE
                ).update(status=RealEstateInvestment.Status.MATURED, updated_at=timezone.now())
                if updated:
                    self._notify_matured(investment)
                    matured += updated
        if matured:
            self.logger.info(f"Matured {matured} real estate investments")
        return matured
