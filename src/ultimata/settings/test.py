"""Test settings."""

from .base import *  # noqa: F401,F403

SECRET_KEY = "test-secret-key-not-for-production"
DEBUG = False

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
    }
}

# No channel layer: notification delivery is skipped
CHANNEL_LAYERS = {}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

STORE_TAX_RATE = "0"
BLOB_STORAGE_URL = "http://blob.test/api"
BLOB_STORAGE_TOKEN = "test-token"
