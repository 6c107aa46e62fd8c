"""
Test settings: in-memory SQLite, fast hashing, dummy provider credentials.
"""

from .base import *

DEBUG = False
ENVIRONMENT = 'test'

ALLOWED_HOSTS = ['testserver', 'localhost']

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

PASSWORD_HASHERS = [
    'django.contrib.auth.hashers.MD5PasswordHasher',
]

JWT_SECRET = 'test-jwt-secret'
STRIPE_SECRET_KEY = 'sk_test_dummy'
STRIPE_WEBHOOK_SECRET = 'whsec_test_dummy'
FRONTEND_URL = 'http://localhost:3000'

STORAGES['staticfiles'] = {
    'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage',
}

LOGGING['loggers']['apps']['level'] = 'WARNING'
LOGGING['loggers']['services']['level'] = 'WARNING'
