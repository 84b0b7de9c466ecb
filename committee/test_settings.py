"""
Test settings - in-memory database and quiet logging for tests
"""
from .settings import *

DEBUG = False

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

# Keep test output readable; tests that check logs use assertLogs
LOGGING['loggers']['committee']['level'] = 'CRITICAL'

COMMITTEE_AWAY_GOALS_RULE = False
COMMITTEE_TIEBREAKER_RULES = ['goalDifference', 'goalsFor', 'headToHead']
