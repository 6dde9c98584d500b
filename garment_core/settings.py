import os
import sys
from datetime import timedelta
from pathlib import Path

from garment_core.utils.env_loader import env_flag, env_list, load_env_from_file

BASE_DIR = Path(__file__).resolve().parent.parent

# Try the project root first, then the settings package directory
for env_path in (BASE_DIR / 'env_var.env', Path(__file__).resolve().parent / 'env_var.env'):
    if env_path.exists() and load_env_from_file(str(env_path), override=False):
        break

TESTING = 'test' in sys.argv or 'pytest' in sys.modules

SECRET_KEY = os.getenv('GARMENT_SECRET_KEY')
if not SECRET_KEY:
    if not TESTING and not env_flag('GARMENT_DEBUG', True):
        raise ValueError("GARMENT_SECRET_KEY must be set when DEBUG is off.")
    SECRET_KEY = 'django-insecure-garment-dispatch-dev-key'

DEBUG = env_flag('GARMENT_DEBUG', True)
ALLOWED_HOSTS = env_list('GARMENT_ALLOWED_HOSTS', 'localhost,127.0.0.1')

INSTALLED_APPS = [
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.staticfiles',

    'rest_framework',
    'rest_framework_simplejwt',
    'django_filters',
    'drf_yasg',

    'core',
    'fleet',
    'shops',
    'orders',
    'notifications',
    'assignment',
    'dispatch',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'garment_core.urls'
WSGI_APPLICATION = 'garment_core.wsgi.application'

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

# SQLite takes the write lock at BEGIN in IMMEDIATE mode, so every atomic
# block that writes is serialized against the others.
DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': os.getenv('GARMENT_DB_PATH', str(BASE_DIR / 'garment.sqlite3')),
        'OPTIONS': {
            'transaction_mode': 'IMMEDIATE',
            'timeout': int(os.getenv('GARMENT_DB_TIMEOUT', '20')),
        },
    }
}

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

LANGUAGE_CODE = 'en-us'
TIME_ZONE = os.getenv('GARMENT_TIME_ZONE', 'UTC')
USE_I18N = True
USE_TZ = True

STATIC_URL = 'static/'

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        'LOCATION': 'garment-dispatch',
    }
}

REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': (
        'rest_framework_simplejwt.authentication.JWTAuthentication',
        'rest_framework.authentication.SessionAuthentication',
    ),
    'DEFAULT_PERMISSION_CLASSES': (
        'rest_framework.permissions.IsAuthenticated',
    ),
    'DEFAULT_FILTER_BACKENDS': (
        'django_filters.rest_framework.DjangoFilterBackend',
        'rest_framework.filters.SearchFilter',
        'rest_framework.filters.OrderingFilter',
    ),
    'EXCEPTION_HANDLER': 'core.exceptions.api_exception_handler',
}

SIMPLE_JWT = {
    'ACCESS_TOKEN_LIFETIME': timedelta(minutes=int(os.getenv('GARMENT_JWT_ACCESS_MINUTES', '60'))),
    'REFRESH_TOKEN_LIFETIME': timedelta(days=int(os.getenv('GARMENT_JWT_REFRESH_DAYS', '7'))),
    'AUTH_HEADER_TYPES': ('Bearer',),
}

SWAGGER_SETTINGS = {
    'SECURITY_DEFINITIONS': {
        'Bearer': {'type': 'apiKey', 'name': 'Authorization', 'in': 'header'},
    },
    'USE_SESSION_AUTH': False,
}

# Dispatch
DISPATCH_ROLES = env_list('GARMENT_DISPATCH_ROLES', 'ecommerce,admin')
DISPATCH_STRICT_INVENTORY = env_flag('GARMENT_STRICT_INVENTORY', False)
DRIVER_DEPARTMENT_NAME = os.getenv('GARMENT_DRIVER_DEPARTMENT', 'Drivers')

LOG_LEVEL = os.getenv('GARMENT_LOG_LEVEL', 'INFO').upper()

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '{asctime} {levelname} {name} {message}',
            'style': '{',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'verbose',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'WARNING',
    },
    'loggers': {
        'django': {'handlers': ['console'], 'level': 'WARNING', 'propagate': False},
        **{
            app: {'handlers': ['console'], 'level': LOG_LEVEL, 'propagate': False}
            for app in ('core', 'fleet', 'shops', 'orders', 'notifications', 'assignment', 'dispatch', 'garment_core')
        },
    },
}
