"""
Django settings for committee.

Values are read from environment variables, with defaults suitable for
local development.
"""

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent


def _env_bool(key, default=False):
    value = os.environ.get(key)
    if value is None:
        return default
    return value.lower() in ('true', '1', 'yes')


def _env_list(key, default):
    value = os.environ.get(key)
    if not value:
        return list(default)
    return [item.strip() for item in value.split(',') if item.strip()]


SECRET_KEY = os.environ.get('COMMITTEE_SECRET_KEY', 'committee-insecure-development-key')

DEBUG = _env_bool('COMMITTEE_DEBUG', True)

ALLOWED_HOSTS = _env_list('COMMITTEE_ALLOWED_HOSTS', ['localhost', '127.0.0.1'])

INSTALLED_APPS = [
    'django.contrib.contenttypes',
    'django.contrib.auth',
    'committee.tournament_core',
    'committee.tournament',
]

# Tournaments are stored outside Django; the local database only backs auth
DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': os.environ.get('COMMITTEE_DB_PATH', str(BASE_DIR / 'committee.sqlite3')),
    }
}

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'UTC'
USE_I18N = True
USE_TZ = True

# Defaults for tournaments that do not configure their own rules
COMMITTEE_AWAY_GOALS_RULE = _env_bool('COMMITTEE_AWAY_GOALS_RULE', False)
COMMITTEE_TIEBREAKER_RULES = _env_list(
    'COMMITTEE_TIEBREAKER_RULES', ['goalDifference', 'goalsFor', 'headToHead']
)

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'simple': {
            'format': '%(asctime)s %(levelname)s %(name)s: %(message)s',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'simple',
        },
    },
    'loggers': {
        'committee': {
            'handlers': ['console'],
            'level': os.environ.get('COMMITTEE_LOG_LEVEL', 'INFO'),
        },
    },
}
