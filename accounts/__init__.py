"""
Accounts App

Provides authentication, authorization and multi-tenancy support
for the investment platform:
- User registration and JWT authentication
- Investor and admin roles
- Tenant groups
- Referral codes and user moderation
"""
