"""Unit tests for the session context and token claims."""

import pytest
from jose import JWTError

from console.auth import SessionClaims, SessionContext, decode_claims
from shared.storage import MemoryStorage


class TestDecodeClaims:
    """Tests for decode_claims."""

    def test_decodes_console_claims(self, make_token):
        claims = decode_claims(make_token(permissions=["customers:read"], role="MANAGER"))

        assert claims.user_id == "user-1"
        assert claims.org_id == "org-1"
        assert claims.permissions == ["customers:read"]
        assert claims.role == "MANAGER"

    def test_alternate_claim_names(self):
        claims = SessionClaims.model_validate({"id": 42, "organizationId": "org-9"})

        assert claims.user_id == "42"
        assert claims.org_id == "org-9"

    def test_numeric_user_id_becomes_string(self):
        claims = SessionClaims.model_validate({"userId": 7})
        assert claims.user_id == "7"

    def test_rejects_non_jwt(self):
        with pytest.raises(JWTError):
            decode_claims("not-a-token")

    def test_expiry(self):
        assert SessionClaims(exp=100).is_expired(now=200)
        assert not SessionClaims(exp=300).is_expired(now=200)
        assert not SessionClaims().is_expired()


class TestSessionContext:
    """Tests for SessionContext token handling."""

    @pytest.mark.asyncio
    async def test_valid_token_is_returned(self, session, token):
        assert await session.get_valid_token() == token
        assert await session.is_authenticated()

    @pytest.mark.asyncio
    async def test_missing_token(self, anonymous_session):
        assert await anonymous_session.get_valid_token() is None
        assert await anonymous_session.get_claims() is None
        assert not await anonymous_session.is_authenticated()

    @pytest.mark.asyncio
    async def test_expired_token_is_removed(self, make_token):
        storage = MemoryStorage({"token": make_token(expires_in=-60)})
        session = SessionContext(storage)

        assert await session.get_valid_token() is None
        assert await storage.get_item("token") is None

    @pytest.mark.asyncio
    async def test_malformed_token_is_removed(self):
        storage = MemoryStorage({"token": "garbage"})
        session = SessionContext(storage)

        assert await session.get_valid_token() is None
        assert await storage.get_item("token") is None

    @pytest.mark.asyncio
    async def test_get_claims(self, session):
        claims = await session.get_claims()

        assert claims.user_id == "user-1"
        assert claims.org_id == "org-1"

    @pytest.mark.asyncio
    async def test_clear(self, session, storage):
        await session.clear()
        assert await storage.get_item("token") is None
