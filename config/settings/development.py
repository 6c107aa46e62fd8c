"""
Development specific settings for the Local Guide API
"""

from .base import *

DEBUG = True
ENVIRONMENT = 'development'

ALLOWED_HOSTS = ['localhost', '127.0.0.1']

INTERNAL_IPS = ['127.0.0.1']

STORAGES['staticfiles'] = {
    'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage',
}
