"""
Celery Configuration
"""
import os

from celery import Celery
from celery.schedules import crontab

# Set the default Django settings module for the 'celery' program.
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'investment_platform.settings')

app = Celery('investment_platform')

# Using a string here means the worker doesn't have to serialize
# the configuration object to child processes.
app.config_from_object('django.conf:settings', namespace='CELERY')

# Load task modules from all registered Django apps.
app.autodiscover_tasks()

# Celery Beat Schedule
app.conf.beat_schedule = {
    # Mark real estate investments past their end date as matured
    'mature-real-estate-investments': {
        'task': 'real_estate.tasks.mature_due_investments',
        'schedule': crontab(minute=0),
    },

    # Pay out or reinvest green energy investments past their end date
    'mature-green-energy-investments': {
        'task': 'green_energy.tasks.mature_due_investments',
        'schedule': crontab(minute=15),
    },
}

app.conf.update(
    task_serializer='json',
    accept_content=['json'],
    result_serializer='json',
    timezone='UTC',
    enable_utc=True,
    task_track_started=True,
    task_time_limit=30 * 60,
    task_soft_time_limit=25 * 60,
    worker_prefetch_multiplier=1,
)
