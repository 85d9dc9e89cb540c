"""
Validators shared by the investment plan models.
"""
from django.core.exceptions import ValidationError


def validate_plan_terms(min_amount, max_amount, return_rate, duration_months):
    """Raise ``ValidationError`` keyed by field when plan terms are inconsistent."""
    errors = {}
    if min_amount is not None and min_amount <= 0:
        errors['min_amount'] = "Minimum amount must be greater than zero"
    if min_amount is not None and max_amount is not None and max_amount <= min_amount:
        errors['max_amount'] = "Maximum amount must be greater than the minimum amount"
    if return_rate is not None and not (0 < return_rate <= 100):
        errors['return_rate'] = "Return rate must be between 0 and 100"
    if duration_months is not None and duration_months <= 0:
        errors['duration_months'] = "Duration must be greater than zero"
    if errors:
        raise ValidationError(errors)
