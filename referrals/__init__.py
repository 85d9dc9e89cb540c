"""
Referral tracking and referral commissions.
"""
