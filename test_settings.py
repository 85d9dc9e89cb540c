"""
Test settings for the investment platform.
"""
from investment_platform.settings import *  # noqa: F401,F403

DEBUG = False
TESTING = True

SECRET_KEY = 'test-secret-key-for-investment-platform-tests'

ALLOWED_HOSTS = ['*']

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

AUTH_PASSWORD_VALIDATORS = []

PASSWORD_HASHERS = [
    'django.contrib.auth.hashers.MD5PasswordHasher',
]

# Cache configuration
CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        'LOCATION': 'investment-platform-tests',
    }
}

EMAIL_BACKEND = 'django.core.mail.backends.locmem.EmailBackend'

# Run Celery tasks inline
CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True
CELERY_BROKER_URL = 'memory://'
CELERY_RESULT_BACKEND = 'cache+memory://'

REST_FRAMEWORK = {
    **REST_FRAMEWORK,  # noqa: F405
    'DEFAULT_THROTTLE_RATES': {
        'auth': '1000/minute',
    },
}

DEFAULT_GROUP_NAME = 'Investors'
DEFAULT_CRYPTO_TYPE = 'USDT'
MAX_INSTALLMENTS = 3
INSTALLMENT_INTERVAL_DAYS = 30
EQUIPMENT_DELIVERY_DAYS = 14
SETTINGS_CACHE_TIMEOUT = 300

# Logging
LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'WARNING',
    },
}
