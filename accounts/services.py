"""
Account services: registration, authentication and moderation.
"""
import logging
from typing import Any, Dict, List, Optional, Tuple

from django.conf import settings
from django.contrib.auth import authenticate
from django.db import transaction
from django.utils import timezone
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken

from core.services import (
    BaseService, ValidationServiceError, PermissionServiceError
)
from notifications.models import Notification
from notifications.services import NotificationService
from referrals.services import ReferralService

from .models import User, Group

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


class TokenBlacklistService:
    """Service for managing the refresh token blacklist"""

    @staticmethod
    def blacklist_token(token: str) -> bool:
        """Blacklist a refresh token. Returns False for an invalid token."""
        try:
            RefreshToken(token).blacklist()
            logger.info("Refresh token blacklisted")
            return True
        except TokenError as e:
            logger.warning(f"Failed to blacklist token: {e}")
            return False


class AccountService(BaseService):
    """Registration, login and profile operations"""

    @staticmethod
    def issue_tokens(user: User) -> Dict[str, str]:
        refresh = RefreshToken.for_user(user)
        return {
            'access': str(refresh.access_token),
            'refresh': str(refresh),
        }

    def get_default_group(self) -> Group:
        group, created = Group.objects.get_or_create(name=settings.DEFAULT_GROUP_NAME)
        if created:
            logger.info(f"Created default tenant group {group.name}")
        return group

    @transaction.atomic
    def register(self, email: str, username: str, password: str,
                 name: str = '', referral_code: Optional[str] = None) -> User:
        """
        Create an investor account.

        A referral code places the new user in the referrer's group and
        records the referral.
        """
        referrer = None
        if referral_code:
            referrer = User.objects.filter(referral_code=referral_code.strip().upper()).first()
            if referrer is None:
                raise ValidationServiceError("Invalid referral code")

        if User.objects.filter(email__iexact=email).exists():
            raise ValidationServiceError("A user with this email already exists")

        group = referrer.group if referrer and referrer.group_id else self.get_default_group()

        user = User.objects.create_user(
            username=username,
            email=email,
            password=password,
            name=name,
            group=group,
            referred_by=referrer,
        )

        if referrer is not None:
            ReferralService(user=user).record_referral(referrer=referrer, referred=user)

        self.user = user
        self.group = group
        self._log_operation("register", {'referred_by': str(referrer.id) if referrer else None})
        return user

    def login(self, email: str, password: str, request=None) -> Tuple[User, Dict[str, str]]:
        user = authenticate(request=request, username=email, password=password)
        if user is None:
            logger.warning(f"Failed login attempt for {email}")
            raise ValidationServiceError("Invalid credentials")

        if user.is_banned:
            raise PermissionServiceError("Your account has been suspended")

        user.last_login_at = timezone.now()
        user.save(update_fields=['last_login_at'])

        self.user = user
        self._log_operation("login")
        return user, self.issue_tokens(user)

    def change_password(self, current_password: str, new_password: str, confirm_password: str) -> None:
        self._check_permission('change_password')

        if not self.user.check_password(current_password):
            raise ValidationServiceError("Current password is incorrect")
        if len(new_password) < MIN_PASSWORD_LENGTH:
            raise ValidationServiceError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
            )
        if new_password != confirm_password:
            raise ValidationServiceError("Passwords don't match")

        self.user.set_password(new_password)
        self.user.save(update_fields=['password'])

        NotificationService().notify(
            self.user,
            title="Password Changed",
            message="Your account password was changed. If this wasn't you, contact support immediately.",
            type=Notification.Type.SECURITY_ALERT,
        )
        self._log_operation("change_password")


class UserAdminService(BaseService):
    """Admin moderation of users in the admin's group"""

    def get_user(self, user_id) -> User:
        self._require_admin()
        return self.get_or_404(User, queryset=self.visible_users(), id=user_id)

    def visible_users(self):
        if self.user.is_superuser:
            return User.objects.all()
        return User.objects.filter(group_id=self.user.group_id)

    def ban(self, user_id, reason: str = '') -> User:
        target = self.get_user(user_id)
        if target.id == self.user.id:
            raise ValidationServiceError("You cannot ban yourself")
        if target.is_superuser:
            raise PermissionServiceError("Superusers cannot be banned")

        target.ban(reason)
        self._log_operation("ban_user", {'target': str(target.id), 'reason': reason}, level='warning')
        return target

    def unban(self, user_id) -> User:
        target = self.get_user(user_id)
        if not target.is_banned:
            raise ValidationServiceError("User is not banned")

        target.unban()
        self._log_operation("unban_user", {'target': str(target.id)})
        return target

    def activities(self, user_id, limit: int = 20) -> List[Dict[str, Any]]:
        """Recent wallet transactions and investments of a user, newest first."""
        from green_energy.models import GreenEnergyInvestment
        from markets.models import MarketInvestment
        from real_estate.models import RealEstateInvestment
        from wallets.models import WalletTransaction

        target = self.get_user(user_id)
        entries = []

        for row in WalletTransaction.objects.owned_by(target)[:limit]:
            entries.append({
                'kind': 'wallet_transaction',
                'id': row.id,
                'type': row.type,
                'amount': row.amount,
                'status': row.status,
                'description': row.description,
                'created_at': row.created_at,
            })

        investments = (
            ('real_estate_investment', RealEstateInvestment.objects.owned_by(target)),
            ('green_energy_investment', GreenEnergyInvestment.objects.owned_by(target).select_related('plan')),
            ('market_investment', MarketInvestment.objects.owned_by(target).select_related('plan')),
        )
        for kind, queryset in investments:
            for investment in queryset[:limit]:
                plan = getattr(investment, 'plan', None)
                entries.append({
                    'kind': kind,
                    'id': investment.id,
                    'type': plan.name if plan else investment.type,
                    'amount': investment.amount,
                    'status': investment.status,
                    'description': str(investment),
                    'created_at': investment.created_at,
                })

        entries.sort(key=lambda entry: entry['created_at'], reverse=True)
        return entries[:limit]
