"""
Money and date helpers shared by the investment apps.
"""
from datetime import timedelta
from decimal import Decimal, ROUND_HALF_UP

CENT = Decimal('0.01')

# Plan durations are counted in 30-day months.
DAYS_PER_MONTH = 30


def to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def quantize_money(value) -> Decimal:
    """Round a monetary value to cents."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def percent_of(amount, rate) -> Decimal:
    """Return ``rate`` percent of ``amount``, rounded to cents."""
    return quantize_money(to_decimal(amount) * to_decimal(rate) / Decimal('100'))


def add_months_as_days(start, months: int):
    return start + timedelta(days=months * DAYS_PER_MONTH)


def humanize_choice(value: str) -> str:
    """``REAL_ESTATE_INVESTMENT`` -> ``real estate investment``."""
    return value.replace('_', ' ').lower()
