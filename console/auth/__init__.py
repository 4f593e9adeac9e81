"""
Session and permission helpers.

- SessionContext: read-only access to the stored bearer token and its claims
- PermissionChecker / has_permission: wildcard-aware display gate
"""

from console.auth.permissions import (
    PermissionChecker,
    has_all_permissions,
    has_any_permission,
    has_permission,
)
from console.auth.session import (
    AUTH_REQUIRED_MESSAGE,
    SessionClaims,
    SessionContext,
    decode_claims,
)

__all__ = [
    "AUTH_REQUIRED_MESSAGE",
    "PermissionChecker",
    "SessionClaims",
    "SessionContext",
    "decode_claims",
    "has_all_permissions",
    "has_any_permission",
    "has_permission",
]
