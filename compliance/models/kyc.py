"""
KYC (Know Your Customer) Models

Models for identity verification of investors.
"""
from django.conf import settings
from django.db import models

from core.managers import OwnedQuerySet
from core.models import GroupFilteredModel


class KYCVerificationQuerySet(OwnedQuerySet):

    def pending(self):
        return self.filter(status=KYCVerification.Status.PENDING)

    def latest_for(self, user):
        return self.filter(user=user).order_by('-created_at').first()


class KYCVerification(GroupFilteredModel):
    """
    A KYC submission. A user may resubmit after a rejection, so the
    newest record of a user is the one that counts.
    """

    class Status(models.TextChoices):
        PENDING = 'PENDING', 'Pending Review'
        APPROVED = 'APPROVED', 'Approved'
        REJECTED = 'REJECTED', 'Rejected'

    class DocumentType(models.TextChoices):
        PASSPORT = 'PASSPORT', 'Passport'
        NATIONAL_ID = 'NATIONAL_ID', 'National ID Card'
        DRIVERS_LICENSE = 'DRIVERS_LICENSE', "Driver's License"

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='kyc_verifications'
    )
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
        db_index=True
    )

    # Personal Information
    full_name = models.CharField(max_length=255)
    date_of_birth = models.DateField()
    nationality = models.CharField(max_length=100)
    address = models.TextField()

    # Identity Document
    document_type = models.CharField(max_length=20, choices=DocumentType.choices)
    document_number = models.CharField(max_length=100)
    document_front_url = models.URLField(max_length=500)
    document_back_url = models.URLField(max_length=500, blank=True)
    selfie_url = models.URLField(max_length=500, blank=True)

    # Review
    rejection_reason = models.TextField(blank=True)
    reviewed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True, blank=True,
        related_name='kyc_reviews'
    )
    reviewed_at = models.DateTimeField(null=True, blank=True)

    objects = KYCVerificationQuerySet.as_manager()

    class Meta:
        db_table = 'compliance_kyc_verifications'
        verbose_name = 'KYC verification'
        verbose_name_plural = 'KYC verifications'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', 'status'], name='kyc_user_status_idx'),
        ]

    def __str__(self):
        return f"KYC verification for {self.user.email} ({self.status})"

    @property
    def is_approved(self):
        return self.status == self.Status.APPROVED

    @property
    def is_pending(self):
        return self.status == self.Status.PENDING
