"""Development settings for the SlotBook project.

This module extends the base settings with development specific
configuration, such as enabling debug, allowing all hosts, storing
receipts on the local filesystem and using the console email backend.
Do not use these settings in production!
"""

from .base import *  # noqa: F401,F403

# Enable debug mode for development
DEBUG = True

# Allow all hosts in development
ALLOWED_HOSTS = ['*']

# Receipts land in MEDIA_ROOT instead of S3/MinIO
RECEIPT_STORAGE_BACKEND = get_env(  # noqa: F405
    'RECEIPT_STORAGE_BACKEND',
    'shared.infrastructure.storage.DjangoFileReceiptStorage',
)

# Use console email backend during development
EMAIL_BACKEND = 'django.core.mail.backends.console.EmailBackend'
