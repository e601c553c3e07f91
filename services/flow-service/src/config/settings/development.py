"""
Development settings for Flow Service
"""

from .base import *

DEBUG = True

ALLOWED_HOSTS = ['*']

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.postgresql',
        'NAME': os.environ.get('DB_NAME', 'flow_db'),
        'USER': os.environ.get('DB_USER', 'flow_service'),
        'PASSWORD': os.environ.get('DB_PASSWORD', 'flow_service_password'),
        'HOST': os.environ.get('DB_HOST', 'localhost'),
        'PORT': os.environ.get('DB_PORT', '5432'),
    }
}

# CORS - Allow all in development
CORS_ALLOW_ALL_ORIGINS = True

# Simplified logging
LOGGING['formatters']['standard'] = {
    'format': '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
}
LOGGING['handlers']['console']['formatter'] = 'standard'
LOGGING['root']['level'] = 'DEBUG'
