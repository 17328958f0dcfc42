"""Test settings for the SlotBook project.

Runs against an in-memory SQLite database unless TEST_DB_ENGINE names a
server backend (configured by the usual DB_* variables). Celery tasks run
eagerly and receipts go to a temporary media directory.
"""

import tempfile

from config.env import get_env

from .base import *  # noqa: F401,F403

DEBUG = False

TEST_DB_ENGINE = get_env('TEST_DB_ENGINE', '')
if TEST_DB_ENGINE:
    DATABASES['default']['ENGINE'] = TEST_DB_ENGINE  # noqa: F405
else:
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.sqlite3',
            'NAME': ':memory:',
        }
    }

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

STORAGES = {
    'default': {
        'BACKEND': 'django.core.files.storage.FileSystemStorage',
    },
    'staticfiles': {
        'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage',
    },
}

MEDIA_ROOT = tempfile.mkdtemp(prefix='slotbook-media-')

RECEIPT_STORAGE_BACKEND = 'shared.infrastructure.storage.DjangoFileReceiptStorage'

SLOT_LOCAL_UTC_OFFSET_MINUTES = 390

CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True
CELERY_BROKER_URL = 'memory://'
CELERY_RESULT_BACKEND = 'cache+memory://'
