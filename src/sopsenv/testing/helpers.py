"""Test doubles shared by the test modules."""

import contextlib
import os
from pathlib import Path

from sopsenv.decryption.provider import Decryptor
from sopsenv.exceptions import DecryptionFailedError

SAMPLE_DOTENV = b"""\
# Database
DB_HOST=localhost
DB_PORT=5432
DB_NAME=myapp
DB_USER=app_user
DB_PASSWORD=super_secret_password_123
DB_MAX_CONNECTIONS=20

REDIS_URL=redis://:redispass@localhost:6379/0
REDIS_PASSWORD=redispass

API_KEY=ak_live_1234567890
GOOGLE_CLIENT_ID=google-client-id.apps.example.com
GOOGLE_CLIENT_SECRET=gcs_abcdefghijkl
ENVIRONMENT=development
DEBUG=true
UNRELATED_SETTING=kept
"""

SAMPLE_YAML = b"""\
storage:
  psql:
    host: db.internal
    port: 5433
    database: orders
    username: orders_rw
    password: pg_password_value
    pg_pool_max_conn: 50
  redis:
    addr: cache.internal
    port: 6380
    username: default
    password: redis_password_value
    db: 2
jwt:
  auth: jwt_signing_material
"""


class StaticDecryptor(Decryptor):
    """Returns fixed plaintext for any path and records the paths it was asked to decrypt."""

    def __init__(self, plaintext: bytes):
        self.plaintext = plaintext
        self.calls: list[Path] = []

    def name(self) -> str:
        return "static"

    def decrypt(self, path: Path) -> bytes:
        self.calls.append(path)
        return self.plaintext


class FailingDecryptor(Decryptor):
    def name(self) -> str:
        return "failing"

    def decrypt(self, path: Path) -> bytes:
        raise DecryptionFailedError("simulated failure", path=path)


@contextlib.contextmanager
def temporary_env_var(name: str, value: str):
    """Temporarily set environment variable for the duration of the context."""
    previous = os.environ.get(name)
    os.environ[name] = value
    try:
        yield
    finally:
        if previous is not None:
            os.environ[name] = previous
        else:
            os.environ.pop(name, None)


@contextlib.contextmanager
def preserved_environ():
    """Restores os.environ to its current contents when the context exits."""
    saved = dict(os.environ)
    try:
        yield
    finally:
        os.environ.clear()
        os.environ.update(saved)
