"""
Test settings for LicenseService.
"""

import os

from .base import *  # noqa: F403, F401

DEBUG = False

# Use PostgreSQL in CI (from DATABASE_URL), SQLite in-memory for local tests
DATABASE_URL = os.environ.get("DATABASE_URL")
if DATABASE_URL and DATABASE_URL.startswith("postgresql"):
    import urllib.parse

    parsed = urllib.parse.urlparse(DATABASE_URL)
    db_name = parsed.path[1:] if parsed.path.startswith("/") else parsed.path
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.postgresql",
            "NAME": db_name,
            "USER": parsed.username or "postgres",
            "PASSWORD": parsed.password or "",
            "HOST": parsed.hostname or "localhost",
            "PORT": parsed.port or 5432,
            "TEST": {
                "NAME": db_name + "_test",
            },
        }
    }
else:
    DATABASES = {
        "default": {
            "ENGINE": "django.db.backends.sqlite3",
            "NAME": ":memory:",
        }
    }

# Password hashers for faster tests
PASSWORD_HASHERS = [
    "django.contrib.auth.hashers.MD5PasswordHasher",
]

LICENSE_SIGNING_SECRET = "test-license-signing-secret"
ADMIN_SECRET = "test-admin-secret"
GUMROAD_SELLER_ID = "test-seller"
APPSUMO_SECRET = "test-appsumo-secret"
STRIPE_WEBHOOK_SECRET = "whsec_test_secret"
LICENSE_DEFAULT_MAX_ACTIVATIONS = 3
LICENSE_DEFAULT_TERM_DAYS = 365

# Disable logging during tests
LOGGING_CONFIG = None
