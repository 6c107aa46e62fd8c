"""
Django base settings for the Local Guide marketplace API.
"""

import os
from pathlib import Path
import dj_database_url
from dotenv import load_dotenv
load_dotenv()
# ----------------------------------------
# 🔧 Project Structure
# ----------------------------------------
BASE_DIR = Path(__file__).resolve().parent.parent.parent

# ----------------------------------------
# 🔐 Security
# ----------------------------------------
SECRET_KEY = os.environ.get('DJANGO_SECRET_KEY', 'django-insecure-*dummy-key-for-dev*')
DEBUG = os.environ.get('DJANGO_DEBUG', 'False') == 'True'
ENVIRONMENT = os.environ.get('DJANGO_ENV', 'development')

ALLOWED_HOSTS = [
    host.strip()
    for host in os.environ.get('ALLOWED_HOSTS', '127.0.0.1,localhost').split(',')
    if host.strip()
]

# ----------------------------------------
# 📦 Installed Applications
# ----------------------------------------
INSTALLED_APPS = [
    'whitenoise.runserver_nostatic',
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',

    # Third party
    'rest_framework',
    'django_filters',
    'cloudinary',

    # Local apps
    'apps.core',
    'apps.accounts',
    'apps.listings',
    'apps.bookings',
    'apps.payments',
    'apps.reviews',
    'apps.dashboard',
    'apps.uploads',
]

# ----------------------------------------
# ⚙️ Middleware
# ----------------------------------------
MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'whitenoise.middleware.WhiteNoiseMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

# ----------------------------------------
# 🔗 URL Configuration
# ----------------------------------------
ROOT_URLCONF = 'config.urls'
APPEND_SLASH = False

# ----------------------------------------
# 🧠 Templates (Django admin only)
# ----------------------------------------
TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.debug',
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

# ----------------------------------------
# 🔌 WSGI Application
# ----------------------------------------
WSGI_APPLICATION = 'config.wsgi.application'

# ----------------------------------------
# 🗄️ Database
# ----------------------------------------
DATABASES = {
    'default': dj_database_url.config(
        default=f"sqlite:///{BASE_DIR / 'db.sqlite3'}",
        conn_max_age=600,
        conn_health_checks=True,
    )
}

# ----------------------------------------
# 👤 Users & Passwords
# ----------------------------------------
AUTH_USER_MODEL = 'accounts.User'

# BCryptSHA256PasswordHasher runs bcrypt with a cost factor of 12
PASSWORD_HASHERS = [
    'django.contrib.auth.hashers.BCryptSHA256PasswordHasher',
    'django.contrib.auth.hashers.PBKDF2PasswordHasher',
]

AUTHENTICATION_BACKENDS = [
    'django.contrib.auth.backends.ModelBackend',
]

# ----------------------------------------
# 🔑 JWT Session Tokens
# ----------------------------------------
JWT_SECRET = os.environ.get('JWT_SECRET', 'local-guide-dev-jwt-secret')
JWT_ALGORITHM = 'HS256'
JWT_EXPIRES_DAYS = int(os.environ.get('JWT_EXPIRES_DAYS', '7'))
JWT_COOKIE_NAME = 'token'
JWT_COOKIE_EXPIRES_DAYS = int(os.environ.get('JWT_COOKIE_EXPIRES_DAYS', '7'))
JWT_COOKIE_SECURE = False

# ----------------------------------------
# 🌐 Django REST Framework
# ----------------------------------------
REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': [
        'apps.accounts.authentication.JWTAuthentication',
    ],
    'DEFAULT_PERMISSION_CLASSES': [
        'rest_framework.permissions.IsAuthenticated',
    ],
    'DEFAULT_FILTER_BACKENDS': [
        'django_filters.rest_framework.DjangoFilterBackend',
    ],
    'DEFAULT_PAGINATION_CLASS': 'apps.core.pagination.StandardPagination',
    'PAGE_SIZE': 10,
    'EXCEPTION_HANDLER': 'apps.core.handlers.api_exception_handler',
    'UNAUTHENTICATED_USER': 'django.contrib.auth.models.AnonymousUser',
}

# ----------------------------------------
# 💳 Stripe
# ----------------------------------------
STRIPE_SECRET_KEY = os.environ.get('STRIPE_SECRET_KEY', '')
STRIPE_WEBHOOK_SECRET = os.environ.get('STRIPE_WEBHOOK_SECRET', '')
STRIPE_TIMEOUT = int(os.environ.get('STRIPE_TIMEOUT', '30'))
STRIPE_MAX_RETRIES = int(os.environ.get('STRIPE_MAX_RETRIES', '2'))
PAYMENT_CURRENCY = os.environ.get('PAYMENT_CURRENCY', 'usd')

# ----------------------------------------
# ☁️ Cloudinary
# ----------------------------------------
CLOUDINARY_STORAGE = {
    'CLOUD_NAME': os.environ.get('CLOUDINARY_CLOUD_NAME', ''),
    'API_KEY': os.environ.get('CLOUDINARY_API_KEY', ''),
    'API_SECRET': os.environ.get('CLOUDINARY_API_SECRET', ''),
}
UPLOAD_FOLDER = 'local-guide'
UPLOAD_MAX_SIZE = 5 * 1024 * 1024
UPLOAD_MAX_FILES = 10
UPLOAD_ALLOWED_TYPES = ['image/jpeg', 'image/png', 'image/webp']

# ----------------------------------------
# 🖥️ Frontend
# ----------------------------------------
FRONTEND_URL = os.environ.get('FRONTEND_URL', 'http://localhost:3000')

# ----------------------------------------
# 🌍 Localization
# ----------------------------------------
LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'UTC'
USE_I18N = True
USE_TZ = True

# ----------------------------------------
# 📂 Static Files
# ----------------------------------------
STATIC_URL = '/static/'
STATIC_ROOT = BASE_DIR / 'staticfiles'
STORAGES = {
    'default': {
        'BACKEND': 'django.core.files.storage.FileSystemStorage',
    },
    'staticfiles': {
        'BACKEND': 'whitenoise.storage.CompressedManifestStaticFilesStorage',
    },
}

# ----------------------------------------
# 🆔 Default Auto Field
# ----------------------------------------
DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# ----------------------------------------
# 🪵 Logging
# ----------------------------------------
LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '[{levelname}] {asctime} {module} - {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'verbose'
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'WARNING',
    },
    'loggers': {
        'apps': {
            'handlers': ['console'],
            'level': LOG_LEVEL,
            'propagate': False,
        },
        'services': {
            'handlers': ['console'],
            'level': LOG_LEVEL,
            'propagate': False,
        },
    },
}
