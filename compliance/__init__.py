"""
Compliance app: KYC identity verification of investors.
"""
