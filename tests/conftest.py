"""Test environment: settings are read at import time, so set them before venio is imported."""

import os

os.environ["APP_ENV"] = "dev"
os.environ["JWT_SECRET"] = "test-secret-key-for-venio-unit-tests-0123456789"
os.environ["JWT_ISSUER"] = "venio"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["DEFAULT_USER_ROLE"] = "user"
os.environ.setdefault("LOG_LEVEL", "WARNING")
