"""
Real estate investment plans.
"""
from decimal import Decimal

SEMI_ANNUAL = 'SEMI_ANNUAL'
ANNUAL = 'ANNUAL'

INVESTMENT_PLANS = {
    SEMI_ANNUAL: {
        'months': 6,
        'rate': Decimal('0.15'),
        'min_amount': Decimal('300000'),
        'max_amount': Decimal('700000'),
    },
    ANNUAL: {
        'months': 12,
        'rate': Decimal('0.30'),
        'min_amount': Decimal('1500000'),
        'max_amount': Decimal('2000000'),
    },
}

MIN_INVESTMENT = Decimal('300000')
MAX_INVESTMENT = Decimal('2000000')
