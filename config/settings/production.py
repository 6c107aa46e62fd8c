"""
Production specific settings for the Local Guide API
"""

import os

import dj_database_url
from django.core.exceptions import ImproperlyConfigured

from .base import *

# ----------------------------------------
# ✅ Required Environment
# ----------------------------------------
for _required in ('JWT_SECRET', 'DATABASE_URL'):
    if not os.environ.get(_required):
        raise ImproperlyConfigured(f"Missing required environment variable: {_required}")

# ----------------------------------------
# 🔐 Security Settings
# ----------------------------------------
DEBUG = False
ENVIRONMENT = 'production'

CSRF_COOKIE_SECURE = True
SESSION_COOKIE_SECURE = True
SECURE_SSL_REDIRECT = os.environ.get('SECURE_SSL_REDIRECT', 'True') == 'True'
SECURE_PROXY_SSL_HEADER = ('HTTP_X_FORWARDED_PROTO', 'https')
CSRF_TRUSTED_ORIGINS = [FRONTEND_URL]
JWT_COOKIE_SECURE = True

# ----------------------------------------
# 🗄️ PostgreSQL Database
# ----------------------------------------
DATABASES = {
    'default': dj_database_url.config(
        conn_max_age=600,
        conn_health_checks=True,
        ssl_require=True
    )
}
