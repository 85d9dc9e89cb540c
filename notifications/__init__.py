"""
Notifications App

In-app notifications for wallet, investment, KYC and referral events,
per-user notification preferences and queued notification emails.
"""
