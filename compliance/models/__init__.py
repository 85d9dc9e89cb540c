"""
Compliance Models

Identity verification records of investors.
"""

from .kyc import KYCVerification

__all__ = [
    'KYCVerification',
]
