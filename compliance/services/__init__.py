"""
Compliance Services

Business logic for KYC verification.
"""

from .kyc_service import KYCService, NOT_SUBMITTED

__all__ = [
    'KYCService',
    'NOT_SUBMITTED',
]
