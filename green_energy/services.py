"""
Green energy services.

Plan investments mature into wallet returns or reinvestments; equipment
orders move through a delivery workflow confirmed with a PIN.
"""
import secrets
from datetime import timedelta
from decimal import Decimal
from typing import Any, Dict, Optional

from django.conf import settings
from django.db import transaction
from django.db.models import F
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

from .models import (
    GreenEnergyPlan, GreenEnergyInvestment, Equipment, EquipmentTransaction,
    generate_delivery_pin
)


class GreenEnergyPlanService(BaseService):
    """Admin management of plans"""

    def delete_plan(self, plan: GreenEnergyPlan) -> None:
        self._require_admin()
        if plan.investments.exists():
            raise ValidationServiceError("Cannot delete plan with existing investments")
        self._log_operation("delete_green_energy_plan", {'plan': str(plan.id)})
        plan.delete()


class GreenEnergyService(BaseService):
    """Plan investments and their lifecycle"""

    def __init__(self, user=None, context=None):
        super().__init__(user, context)
        self.notifications = NotificationService()
        self.wallets = WalletService(user=user)

    @transaction.atomic
    def invest(self, plan_id, amount, reinvest: bool = False) -> GreenEnergyInvestment:
        self._check_permission('invest')
        KYCService.require_approved(self.user)

        plan = self.get_or_404(
            GreenEnergyPlan,
            queryset=GreenEnergyPlan.objects.for_user(self.user).filter(is_active=True),
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
        self.wallets.debit(
            wallet,
            amount,
            WalletTransaction.Type.INVESTMENT,
            f"Investment in {plan.name} ({plan.type})",
        )

        investment = GreenEnergyInvestment.objects.create(
            user=self.user,
            group=plan.group,
            plan=plan,
            amount=amount,
            start_date=start_date,
            end_date=add_months_as_days(start_date, plan.duration_months),
            expected_return=percent_of(amount, plan.return_rate),
            reinvest=reinvest,
        )

        ReferralService().process_referral_commission(
            self.user,
            amount,
            ReferralCommission.TransactionType.GREEN_ENERGY_INVESTMENT,
            investment.id,
        )

        self.notifications.notify(
            self.user,
            title="Investment Created",
            message=f"Your investment of ${amount} in {plan.name} has been created. "
                    f"Expected return: ${investment.expected_return}.",
            type=Notification.Type.INVESTMENT_CREATED,
            action_url=f'/green-energy/portfolio/investments/{investment.id}',
        )

        self._log_operation("green_energy_invest", {'investment': str(investment.id), 'amount': str(amount)})
        return investment

    def _get_active(self, investment_id) -> GreenEnergyInvestment:
        queryset = GreenEnergyInvestment.objects.select_for_update().select_related('plan', 'user')
        if self.user is not None:
            queryset = queryset.for_user(self.user)
        investment = self.get_or_404(GreenEnergyInvestment, queryset=queryset, id=investment_id)
        if investment.status != GreenEnergyInvestment.Status.ACTIVE:
            raise ValidationServiceError("Only active investments can be changed")
        return investment

    @transaction.atomic
    def mature(self, investment_id, actual_return=None) -> GreenEnergyInvestment:
        """
        Close an active investment.

        With ``reinvest`` set the principal and return roll into a new
        investment in the same plan, otherwise both are paid to the wallet.
        Runs without a user when called by the scheduled sweep.
        """
        if self.user is not None:
            self._require_admin()
        investment = self._get_active(investment_id)

        if actual_return is None:
            actual_return = investment.expected_return
        actual_return = quantize_money(actual_return)
        if actual_return < 0:
            raise ValidationServiceError("Actual return cannot be negative")

        now = timezone.now()
        investment.status = GreenEnergyInvestment.Status.MATURED
        investment.actual_return = actual_return
        investment.end_date = now
        investment.save(update_fields=['status', 'actual_return', 'end_date', 'updated_at'])

        total = investment.amount + actual_return
        plan = investment.plan

        if investment.reinvest:
            renewed = GreenEnergyInvestment.objects.create(
                user=investment.user,
                group=investment.group,
                plan=plan,
                amount=total,
                start_date=now,
                end_date=add_months_as_days(now, plan.duration_months),
                expected_return=percent_of(total, plan.return_rate),
                reinvest=True,
                reinvested_from=investment,
            )
            message = f"Your investment in {plan.name} has matured and ${total} was reinvested."
            self.logger.info(f"Investment {investment.id} reinvested as {renewed.id}")
        else:
            wallet = self.wallets.get_wallet(investment.user, lock=True)
            self.wallets.credit(
                wallet,
                total,
                WalletTransaction.Type.RETURN,
                f"Return from {plan.name} investment",
                reference=investment.id,
            )
            message = f"Your investment in {plan.name} has matured and ${total} was credited to your wallet."

        self.notifications.notify(
            investment.user,
            title="Investment Matured",
            message=message,
            type=Notification.Type.INVESTMENT_MATURED,
            action_url=f'/green-energy/portfolio/investments/{investment.id}',
        )
        self._log_operation("green_energy_mature", {'investment': str(investment.id), 'total': str(total)})
        return investment

    @transaction.atomic
    def cancel(self, investment_id) -> GreenEnergyInvestment:
        self._require_admin()
        investment = self._get_active(investment_id)

        investment.status = GreenEnergyInvestment.Status.CANCELLED
        investment.save(update_fields=['status', 'updated_at'])

        wallet = self.wallets.get_wallet(investment.user, lock=True)
        self.wallets.credit(
            wallet,
            investment.amount,
            WalletTransaction.Type.RETURN,
            f"Refund from cancelled {investment.plan.name} investment",
            reference=investment.id,
        )

        self.notifications.notify(
            investment.user,
            title="Investment Cancelled",
            message=f"Your investment of ${investment.amount} in {investment.plan.name} was cancelled "
                    f"and refunded to your wallet.",
            type=Notification.Type.INVESTMENT_CANCELLED,
            action_url='/dashboard/wallet',
        )
        self._log_operation("green_energy_cancel", {'investment': str(investment.id)})
        return investment

    def portfolio(self, user=None) -> Dict[str, Any]:
        owner = user or self.user
        investments = GreenEnergyInvestment.objects.owned_by(owner).select_related('plan')
        orders = EquipmentTransaction.objects.owned_by(owner).select_related('equipment')
        zero = Decimal('0')
        return {
            'investments': investments,
            'equipment_transactions': orders,
            'total_invested': sum((i.amount for i in investments), zero),
            'total_equipment': sum(
                (o.total_amount for o in orders if o.status != EquipmentTransaction.Status.CANCELLED), zero
            ),
            'active_investments': sum(1 for i in investments if i.status == GreenEnergyInvestment.Status.ACTIVE),
        }

    def mature_due_investments(self, now=None) -> int:
        matured = 0
        for investment_id in GreenEnergyInvestment.objects.due(now).values_list('id', flat=True):
            try:
                self.mature(investment_id)
                matured += 1
            except ValidationServiceError as e:
                self.logger.warning(f"Skipped maturing investment {investment_id}: {e}")
        return matured


class EquipmentService(BaseService):
    """Equipment orders and their delivery workflow"""

    def __init__(self, user=None, context=None):
        super().__init__(user, context)
        self.notifications = NotificationService()
        self.wallets = WalletService(user=user)

    def delete_equipment(self, equipment: Equipment) -> None:
        self._require_admin()
        if equipment.transactions.exists():
            raise ValidationServiceError("Cannot delete equipment with existing transactions")
        self._log_operation("delete_equipment", {'equipment': str(equipment.id)})
        equipment.delete()

    @staticmethod
    def _clean_address(address: Optional[Dict[str, Any]]) -> Dict[str, str]:
        address = address or {}
        missing = [f for f in ('street', 'city', 'country') if not address.get(f)]
        if missing:
            raise ValidationServiceError(f"Delivery address is missing: {', '.join(missing)}")
        return {f: str(address.get(f, '')) for f in EquipmentTransaction.ADDRESS_FIELDS}

    def _notify_order(self, order: EquipmentTransaction, message: str):
        self.notifications.notify(
            order.user,
            title="Equipment Order Update",
            message=message,
            type=Notification.Type.PURCHASE_UPDATED,
            action_url=f'/green-energy/portfolio/equipment/{order.id}',
        )

    @transaction.atomic
    def purchase(self, equipment_id, quantity: int, delivery_address: Dict[str, Any]) -> EquipmentTransaction:
        self._check_permission('purchase')
        if not quantity or int(quantity) < 1:
            raise ValidationServiceError("Quantity must be at least 1")
        quantity = int(quantity)
        address = self._clean_address(delivery_address)

        equipment = self.get_or_404(
            Equipment,
            queryset=Equipment.objects.for_user(self.user).select_for_update(),
            id=equipment_id,
        )
        if equipment.status != Equipment.Status.AVAILABLE:
            raise ValidationServiceError("Equipment is not available")
        if equipment.stock_quantity < quantity:
            raise ValidationServiceError("Insufficient stock")

        total = quantize_money(equipment.price * quantity)
        wallet = self.wallets.get_wallet(lock=True)
        self.wallets.ensure_funds(wallet, total)

        now = timezone.now()
        order = EquipmentTransaction.objects.create(
            user=self.user,
            group=equipment.group,
            equipment=equipment,
            quantity=quantity,
            total_amount=total,
            delivery_address=address,
            delivery_pin=generate_delivery_pin(),
            estimated_delivery_date=now + timedelta(days=settings.EQUIPMENT_DELIVERY_DAYS),
        )

        self.wallets.debit(
            wallet,
            total,
            WalletTransaction.Type.PURCHASE,
            f"Purchase of {quantity} {equipment.name}",
            reference=order.id,
        )

        equipment.stock_quantity -= quantity
        if equipment.stock_quantity == 0:
            equipment.status = Equipment.Status.SOLD
        equipment.save(update_fields=['stock_quantity', 'status', 'updated_at'])

        ReferralService().process_referral_commission(
            self.user,
            total,
            ReferralCommission.TransactionType.EQUIPMENT_PURCHASE,
            order.id,
        )

        self._notify_order(
            order,
            f"Your order of {quantity} {equipment.name} for ${total} has been placed. "
            f"Your delivery PIN is {order.delivery_pin}."
        )
        self._log_operation("equipment_purchase", {'order': str(order.id), 'total': str(total)})
        return order

    @transaction.atomic
    def update_transaction_status(self, transaction_id, status: str,
                                  tracking_number: str = '') -> EquipmentTransaction:
        self._require_admin()
        order = self.get_or_404(
            EquipmentTransaction,
            queryset=EquipmentTransaction.objects.for_user(self.user).select_for_update().select_related(
                'equipment', 'user'
            ),
            id=transaction_id,
        )
        if not order.can_transition_to(status):
            raise ValidationServiceError(f"Cannot change status from {order.status} to {status}")

        Status = EquipmentTransaction.Status
        update_fields = ['status', 'updated_at']

        if status == Status.OUT_FOR_DELIVERY:
            if not tracking_number:
                raise ValidationServiceError("A tracking number is required")
            order.tracking_number = tracking_number
            order.delivery_date = timezone.now()
            if not order.delivery_pin:
                order.delivery_pin = generate_delivery_pin()
            update_fields += ['tracking_number', 'delivery_date', 'delivery_pin']

        if status == Status.CANCELLED:
            wallet = self.wallets.get_wallet(order.user, lock=True)
            self.wallets.credit(
                wallet,
                order.total_amount,
                WalletTransaction.Type.RETURN,
                f"Refund for cancelled order of {order.quantity} {order.equipment.name}",
                reference=order.id,
            )
            Equipment.objects.filter(pk=order.equipment_id).update(
                stock_quantity=F('stock_quantity') + order.quantity,
                status=Equipment.Status.AVAILABLE,
            )

        previous = order.status
        order.status = status
        order.save(update_fields=update_fields)

        message = f"Your order of {order.quantity} {order.equipment.name} is now {order.get_status_display().lower()}."
        if status == Status.OUT_FOR_DELIVERY:
            message = f"{message} Tracking number: {order.tracking_number}."
        self._notify_order(order, message)

        self._log_operation("equipment_status", {'order': str(order.id), 'from': previous, 'to': status})
        return order

    def _get_own_order(self, transaction_id) -> EquipmentTransaction:
        return self.get_or_404(
            EquipmentTransaction,
            queryset=EquipmentTransaction.objects.owned_by(self.user).select_for_update().select_related('equipment'),
            id=transaction_id,
        )

    @transaction.atomic
    def update_delivery_address(self, transaction_id, delivery_address: Dict[str, Any]) -> EquipmentTransaction:
        self._check_permission('update_delivery_address')
        order = self._get_own_order(transaction_id)
        if order.status not in (EquipmentTransaction.Status.PENDING, EquipmentTransaction.Status.ACCEPTED):
            raise ValidationServiceError("The delivery address can no longer be changed")

        order.delivery_address = self._clean_address(delivery_address)
        order.save(update_fields=['delivery_address', 'updated_at'])
        self._log_operation("update_delivery_address", {'order': str(order.id)})
        return order

    @transaction.atomic
    def confirm_delivery(self, transaction_id, pin: str) -> EquipmentTransaction:
        self._check_permission('confirm_delivery')
        order = self._get_own_order(transaction_id)
        if order.status != EquipmentTransaction.Status.OUT_FOR_DELIVERY:
            raise ValidationServiceError("Order is not out for delivery")
        if not pin or not secrets.compare_digest(order.delivery_pin.encode(), str(pin).encode()):
            raise ValidationServiceError("Invalid delivery PIN")

        order.status = EquipmentTransaction.Status.COMPLETED
        order.save(update_fields=['status', 'updated_at'])

        self._notify_order(order, f"Delivery of {order.quantity} {order.equipment.name} has been confirmed.")
        self._log_operation("confirm_delivery", {'order': str(order.id)})
        return order

