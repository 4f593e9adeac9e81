"""
Test configuration and fixtures.

This module provides shared fixtures for all tests: settings without network
waits, signed session tokens, in-memory storage and a session context.
"""

import time

import pytest
from jose import jwt

from console.auth import SessionContext
from console.utils import Toaster
from shared.config import Settings
from shared.storage import MemoryStorage

TEST_SECRET = "test-secret"
TEST_USER_ID = "user-1"
TEST_ORG_ID = "org-1"


def _make_token(expires_in: int = 3600, **claims) -> str:
    """Build a signed JWT carrying console claims."""
    payload = {
        "userId": TEST_USER_ID,
        "orgId": TEST_ORG_ID,
        "role": "ADMIN",
        "permissions": ["*:*"],
        "exp": int(time.time()) + expires_in,
    }
    payload.update(claims)
    return jwt.encode(payload, TEST_SECRET, algorithm="HS256")


@pytest.fixture
def make_token():
    """Factory for signed session tokens."""
    return _make_token


@pytest.fixture
def settings():
    """Settings for tests: memory storage, retries without waiting, logging left to pytest."""
    return Settings(
        _env_file=None,
        API_BASE_URL="http://console.test/api/v1",
        API_TIMEOUT_SECONDS=5.0,
        API_MAX_RETRIES=2,
        API_RETRY_MIN_WAIT_SECONDS=0,
        API_RETRY_MAX_WAIT_SECONDS=0,
        STORAGE_BACKEND="memory",
        LOG_CONFIGURE=False,
    )


@pytest.fixture
def token():
    return _make_token()


@pytest.fixture
def storage(token):
    """Storage already holding a valid session token."""
    return MemoryStorage({"token": token})


@pytest.fixture
def empty_storage():
    return MemoryStorage()


@pytest.fixture
def session(storage):
    return SessionContext(storage, token_key="token")


@pytest.fixture
def anonymous_session(empty_storage):
    return SessionContext(empty_storage, token_key="token")


@pytest.fixture
def toaster():
    return Toaster()
