"""
Session context - read-only view of the logged-in user's token.

The token is issued by the login flow of the application shell and lives in
local storage under SESSION_TOKEN_KEY. This module only reads it, decodes its
claims without verifying the signature (the server does that), and drops it
when it is malformed, expired or rejected by the API.
"""

import logging
import time

from jose import JWTError, jwt
from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from shared.storage import KeyValueStorage

logger = logging.getLogger(__name__)

AUTH_REQUIRED_MESSAGE = "Authentication required"


class SessionClaims(BaseModel):
    """Decoded token claims used by the console."""
    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    user_id: str | None = Field(default=None, validation_alias=AliasChoices("userId", "id"))
    org_id: str | None = Field(default=None, validation_alias=AliasChoices("orgId", "organizationId"))
    permissions: list[str] = Field(default_factory=list)
    role: str | None = None
    exp: float | None = None

    def is_expired(self, now: float | None = None) -> bool:
        if self.exp is None:
            return False
        return self.exp < (now if now is not None else time.time())


def decode_claims(token: str) -> SessionClaims:
    """
    Decode a JWT payload without signature verification.

    Raises:
        JWTError: If the token is not a decodable JWT
    """
    if token.count(".") != 2:
        raise JWTError("Invalid token format (not 3 parts)")
    return SessionClaims.model_validate(jwt.get_unverified_claims(token))


class SessionContext:
    """Reads the bearer token and its claims from storage."""

    def __init__(self, storage: KeyValueStorage, token_key: str = "token"):
        self.storage = storage
        self.token_key = token_key

    async def get_token(self) -> str | None:
        """Raw stored token, valid or not."""
        return await self.storage.get_item(self.token_key)

    async def get_valid_token(self) -> str | None:
        """
        Return the stored token if it decodes and has not expired.

        Malformed and expired tokens are removed from storage.
        """
        token = await self.get_token()
        if not token:
            return None

        try:
            claims = decode_claims(token)
        except (JWTError, ValueError) as e:
            logger.warning(f"Discarding undecodable session token: {e}")
            await self.clear()
            return None

        if claims.is_expired():
            logger.info("Session token expired, removing")
            await self.clear()
            return None

        return token

    async def get_claims(self) -> SessionClaims | None:
        """Claims of the current valid token, or None."""
        token = await self.get_valid_token()
        if token is None:
            return None
        return decode_claims(token)

    async def is_authenticated(self) -> bool:
        return await self.get_valid_token() is not None

    async def clear(self) -> None:
        """Forget the token (logout or auth failure)."""
        await self.storage.remove_item(self.token_key)
