"""
KYC Service

Service layer for KYC verification operations.
"""
import logging
from typing import Any, Dict, Optional, Union

from django.db import transaction
from django.utils import timezone

from core.services import BaseService, ValidationServiceError, PermissionServiceError
from notifications.models import Notification
from notifications.services import NotificationService

from ..models import KYCVerification

logger = logging.getLogger(__name__)

NOT_SUBMITTED = 'NOT_SUBMITTED'

KYC_FIELDS = (
    'full_name', 'date_of_birth', 'nationality', 'address',
    'document_type', 'document_number',
    'document_front_url', 'document_back_url', 'selfie_url',
)


class KYCService(BaseService):
    """
    Service for managing KYC verification processes.
    """

    def __init__(self, user=None, context=None):
        super().__init__(user, context)
        self.notification_service = NotificationService()

    @staticmethod
    def latest(user) -> Optional[KYCVerification]:
        return KYCVerification.objects.latest_for(user)

    @classmethod
    def is_approved(cls, user) -> bool:
        """Whether the user's newest KYC record is approved."""
        latest = cls.latest(user)
        return bool(latest and latest.is_approved)

    @classmethod
    def require_approved(cls, user) -> None:
        """
        Raises:
            PermissionServiceError: If the user has no approved KYC record
        """
        if not cls.is_approved(user):
            raise PermissionServiceError("KYC verification required")

    def status(self, user=None) -> Union[KYCVerification, str]:
        """The newest record of ``user``, or ``NOT_SUBMITTED``."""
        return self.latest(user or self.user) or NOT_SUBMITTED

    @transaction.atomic
    def submit(self, data: Dict[str, Any]) -> KYCVerification:
        """
        Submit KYC details for review.

        Args:
            data: Personal and document fields of the submission

        Returns:
            The new PENDING KYCVerification
        """
        self._check_permission('submit_kyc')
        self.validate_required_fields(
            data,
            ['full_name', 'date_of_birth', 'nationality', 'address',
             'document_type', 'document_number', 'document_front_url']
        )

        existing = KYCVerification.objects.filter(
            user=self.user,
            status__in=[KYCVerification.Status.PENDING, KYCVerification.Status.APPROVED]
        ).first()
        if existing:
            raise ValidationServiceError(
                "KYC already approved" if existing.is_approved else "KYC submission already pending review"
            )

        verification = KYCVerification.objects.create(
            user=self.user,
            group=self.user.group,
            **{field: data[field] for field in KYC_FIELDS if field in data}
        )

        self.notification_service.notify(
            self.user,
            title="KYC Submitted",
            message="Your KYC documents have been submitted and are pending review.",
            type=Notification.Type.KYC_SUBMITTED,
            action_url='/dashboard/kyc',
        )

        logger.info(f"KYC verification {verification.id} submitted by user {self.user.id}")
        return verification

    def _get_pending(self, verification_id) -> KYCVerification:
        self._require_admin()
        verification = self.get_or_404(
            KYCVerification,
            queryset=KYCVerification.objects.for_user(self.user).select_for_update().select_related('user'),
            id=verification_id,
        )
        if not verification.is_pending:
            raise ValidationServiceError("Only pending KYC verifications can be reviewed")
        return verification

    @transaction.atomic
    def approve(self, verification_id) -> KYCVerification:
        verification = self._get_pending(verification_id)

        verification.status = KYCVerification.Status.APPROVED
        verification.rejection_reason = ''
        verification.reviewed_by = self.user
        verification.reviewed_at = timezone.now()
        verification.save(update_fields=[
            'status', 'rejection_reason', 'reviewed_by', 'reviewed_at', 'updated_at'
        ])

        self.notification_service.notify(
            verification.user,
            title="KYC Approved",
            message="Your KYC verification has been approved. You can now invest on the platform.",
            type=Notification.Type.KYC_APPROVED,
            action_url='/dashboard',
        )

        self._log_operation("approve_kyc", {'verification': str(verification.id)})
        return verification

    @transaction.atomic
    def reject(self, verification_id, reason: str) -> KYCVerification:
        if not reason:
            raise ValidationServiceError("A rejection reason is required")
        verification = self._get_pending(verification_id)

        verification.status = KYCVerification.Status.REJECTED
        verification.rejection_reason = reason
        verification.reviewed_by = self.user
        verification.reviewed_at = timezone.now()
        verification.save(update_fields=[
            'status', 'rejection_reason', 'reviewed_by', 'reviewed_at', 'updated_at'
        ])

        self.notification_service.notify(
            verification.user,
            title="KYC Rejected",
            message=f"Your KYC verification has been rejected. Reason: {reason}",
            type=Notification.Type.KYC_REJECTED,
            action_url='/dashboard/kyc',
        )

        self._log_operation("reject_kyc", {'verification': str(verification.id), 'reason': reason})
        return verification
