"""Unit tests for the permission gate."""

from console.auth import (
    PermissionChecker,
    SessionClaims,
    has_all_permissions,
    has_any_permission,
    has_permission,
)


# ============================================================================
# has_permission
# ============================================================================


class TestHasPermission:
    """Wildcard matching of resource:action strings."""

    def test_exact_match(self):
        assert has_permission(["customers:read"], "customers:read")

    def test_no_match(self):
        assert not has_permission(["customers:read"], "customers:delete")

    def test_global_wildcard(self):
        assert has_permission(["*:*"], "inventory:delete")

    def test_resource_wildcard(self):
        assert has_permission(["jobs:*"], "jobs:update")
        assert not has_permission(["jobs:*"], "refunds:update")

    def test_action_wildcard(self):
        assert has_permission(["*:read"], "warranties:read")
        assert not has_permission(["*:read"], "warranties:write")

    def test_empty_grants(self):
        assert not has_permission([], "customers:read")
        assert not has_permission(None, "customers:read")

    def test_any_and_all(self):
        granted = ["customers:read", "jobs:*"]

        assert has_any_permission(granted, ["refunds:read", "jobs:delete"])
        assert not has_any_permission(granted, ["refunds:read"])
        assert has_all_permissions(granted, ["customers:read", "jobs:create"])
        assert not has_all_permissions(granted, ["customers:read", "customers:write"])
        assert not has_all_permissions(None, ["customers:read"])


# ============================================================================
# PermissionChecker
# ============================================================================


class TestPermissionChecker:
    """Capability helpers bound to session claims."""

    def test_can_write_accepts_create(self):
        checker = PermissionChecker(SessionClaims(permissions=["customers:create"]))
        assert checker.can_write("customers")

    def test_can_update_accepts_write(self):
        checker = PermissionChecker(SessionClaims(permissions=["customers:write"]))
        assert checker.can_update("customers")
        assert not checker.can_delete("customers")

    def test_roles(self):
        admin = PermissionChecker(SessionClaims(role="ADMIN"))
        manager = PermissionChecker(SessionClaims(role="MANAGER"))

        assert admin.is_admin() and not admin.is_manager()
        assert manager.is_manager() and not manager.is_admin()

    def test_no_claims_denies_everything(self):
        checker = PermissionChecker(None)

        assert not checker.can_read("customers")
        assert not checker.can_manage("customers")
        assert not checker.is_admin()
