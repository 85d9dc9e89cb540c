from django.apps import AppConfig


class RealEstateConfig(AppConfig):
    """Configuration for the real estate app."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'real_estate'
    verbose_name = 'Real Estate'
