"""
Shared fixtures for API and service tests.
"""
from datetime import date
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework.test import APIClient, APITestCase
from rest_framework_simplejwt.tokens import RefreshToken

from accounts.models import Group

User = get_user_model()


class PlatformFixturesMixin:
    """Creates a tenant group with an investor and an admin."""

    password = 'testpass123'

    def create_user(self, email, group=None, role=User.Role.INVESTOR, **extra):
        return User.objects.create_user(
            username=email.split('@')[0],
            email=email,
            password=self.password,
            role=role,
            group=group if group is not None else self.group,
            **extra
        )

    def fund(self, user, amount):
        """Set a user's wallet balance directly."""
        wallet = user.wallet
        wallet.balance = Decimal(str(amount))
        wallet.save(update_fields=['balance'])
        return wallet

    def approve_kyc(self, user):
        from compliance.models import KYCVerification

        return KYCVerification.objects.create(
            user=user,
            group=user.group,
            status=KYCVerification.Status.APPROVED,
            full_name=user.display_name,
            date_of_birth=date(1990, 1, 1),
            nationality="Kenyan",
            address="1 Test Street",
            document_type=KYCVerification.DocumentType.PASSPORT,
            document_number="P1234567",
            document_front_url="https://files.example.com/front.jpg",
        )

    def setUp(self):
        super().setUp()
        self.group = Group.objects.create(name='Test Group')
        self.other_group = Group.objects.create(name='Other Group')
        self.investor = self.create_user('investor@example.com')
        self.admin = self.create_user('admin@example.com', role=User.Role.ADMIN)


class BaseTestCase(PlatformFixturesMixin, TestCase):
    """Base class for service and model tests."""


class BaseAPITestCase(PlatformFixturesMixin, APITestCase):
    """Base class for API tests with JWT authentication helpers."""

    def setUp(self):
        super().setUp()
        self.client = APIClient()

    def login(self, user):
        refresh = RefreshToken.for_user(user)
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
