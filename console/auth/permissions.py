"""
Permission gate for mutating affordances.

Permissions are "resource:action" strings. A grant matches a request when it
is identical, or one of the wildcard forms "*:*", "resource:*", "*:action".

This is a display gate only. The API enforces the same rule independently.
"""

from collections.abc import Iterable

from console.auth.session import SessionClaims

GLOBAL_WILDCARD = "*:*"


def has_permission(granted: Iterable[str] | None, permission: str) -> bool:
    """
    Check a single "resource:action" permission against the granted set.

    Args:
        granted: Permission strings from the session claims
        permission: Permission being requested

    Returns:
        True on an exact or wildcard match
    """
    if not granted:
        return False

    granted = set(granted)
    if permission in granted or GLOBAL_WILDCARD in granted:
        return True

    resource, _, action = permission.partition(":")
    return f"{resource}:*" in granted or f"*:{action}" in granted


def has_any_permission(granted: Iterable[str] | None, permissions: Iterable[str]) -> bool:
    if not granted:
        return False
    granted = list(granted)
    return any(has_permission(granted, p) for p in permissions)


def has_all_permissions(granted: Iterable[str] | None, permissions: Iterable[str]) -> bool:
    if not granted:
        return False
    granted = list(granted)
    return all(has_permission(granted, p) for p in permissions)


class PermissionChecker:
    """Capability checks bound to one session's claims."""

    def __init__(self, claims: SessionClaims | None):
        self.permissions: list[str] = list(claims.permissions) if claims else []
        self.role: str | None = claims.role if claims else None

    def has(self, permission: str) -> bool:
        return has_permission(self.permissions, permission)

    def can(self, resource: str, action: str) -> bool:
        return self.has(f"{resource}:{action}")

    def can_read(self, resource: str) -> bool:
        return self.can(resource, "read")

    def can_write(self, resource: str) -> bool:
        return self.can(resource, "write") or self.can(resource, "create")

    def can_update(self, resource: str) -> bool:
        return self.can(resource, "update") or self.can(resource, "write")

    def can_delete(self, resource: str) -> bool:
        return self.can(resource, "delete")

    def can_manage(self, resource: str) -> bool:
        return self.can(resource, "manage")

    def is_admin(self) -> bool:
        return self.role == "ADMIN"

    def is_manager(self) -> bool:
        return self.role == "MANAGER"
