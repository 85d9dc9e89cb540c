import secrets
import string
import uuid

from django.contrib.auth.models import AbstractUser
from django.db import models
from django.utils import timezone

REFERRAL_CODE_LENGTH = 8
REFERRAL_CODE_ALPHABET = string.ascii_uppercase + string.digits


def generate_referral_code() -> str:
    return ''.join(secrets.choice(REFERRAL_CODE_ALPHABET) for _ in range(REFERRAL_CODE_LENGTH))


class Group(models.Model):
    """Tenant groups for multi-tenant access control"""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100, unique=True)
    description = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'tenant_groups'
        ordering = ['name']

    def __str__(self):
        return self.name


class User(AbstractUser):
    """Platform user with role-based access and a tenant group"""

    class Role(models.TextChoices):
        INVESTOR = 'investor', 'Investor'
        ADMIN = 'admin', 'Admin'

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(unique=True)
    name = models.CharField(max_length=150, blank=True)
    phone = models.CharField(max_length=30, blank=True)
    role = models.CharField(max_length=20, choices=Role.choices, default=Role.INVESTOR)
    group = models.ForeignKey(
        Group,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='members',
        help_text="Tenant group the user belongs to"
    )

    # Referrals
    referral_code = models.CharField(max_length=16, unique=True, editable=False)
    referred_by = models.ForeignKey(
        'self',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='referred_users'
    )

    # Moderation
    is_banned = models.BooleanField(default=False)
    banned_at = models.DateTimeField(null=True, blank=True)
    ban_reason = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    last_login_at = models.DateTimeField(null=True, blank=True)

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['username']

    class Meta:
        db_table = 'users'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.email} ({self.get_role_display()})"

    def save(self, *args, **kwargs):
        if not self.referral_code:
            self.referral_code = self._unique_referral_code()
        super().save(*args, **kwargs)

    @classmethod
    def _unique_referral_code(cls) -> str:
        while True:
            code = generate_referral_code()
            if not cls.objects.filter(referral_code=code).exists():
                return code

    @property
    def is_platform_admin(self) -> bool:
        return self.is_superuser or self.role == self.Role.ADMIN

    @property
    def display_name(self) -> str:
        return self.name or self.get_full_name() or self.email

    def ban(self, reason: str = ''):
        self.is_banned = True
        self.banned_at = timezone.now()
        self.ban_reason = reason
        self.save(update_fields=['is_banned', 'banned_at', 'ban_reason', 'updated_at'])

    def unban(self):
        self.is_banned = False
        self.banned_at = None
        self.ban_reason = ''
        self.save(update_fields=['is_banned', 'banned_at', 'ban_reason', 'updated_at'])
