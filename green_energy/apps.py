from django.apps import AppConfig


class GreenEnergyConfig(AppConfig):
    """Configuration for the green energy app."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'green_energy'
    verbose_name = 'Green Energy'
