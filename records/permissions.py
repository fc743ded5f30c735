"""
Permission classes for tenant isolation and role based access control.
"""
from rest_framework.permissions import BasePermission

from records.repositories.rbac import RbacRepository
from records.repositories.super_admins import SuperAdminRepository


class IsTenantMember(BasePermission):
    """The tenant named by the request must be the user's own; super admins may act in any tenant."""
    message = "Tenant mismatch"

    def has_permission(self, request, view) -> bool:
        user = getattr(request, "user", None)
        if not (user and user.is_authenticated):
            return False
        tenant = getattr(request, "tenant", None)
        if tenant is None:
            return False
        if user.tenant_id == tenant.pk:
            return True
        return SuperAdminRepository().for_user(user.pk) is not None


class HasRole(BasePermission):
    """User must hold one of ``roles``, as account role or active RBAC role; ``admin`` always passes."""
    roles: tuple = ()

    def has_permission(self, request, view) -> bool:
        user = getattr(request, "user", None)
        if not (user and user.is_authenticated):
            return False
        return RbacRepository().has_role(user, self.roles, getattr(request, "tenant", None))


class HasCatalogPermission(BasePermission):
    """User must hold the catalogue permission ``required`` in the request's tenant."""
    required: str = ""

    def has_permission(self, request, view) -> bool:
        user = getattr(request, "user", None)
        if not (user and user.is_authenticated):
            return False
        return RbacRepository().has_permission(user, self.required, getattr(request, "tenant", None))


def role_required(*roles):
    return type("RoleRequired", (HasRole,), {
        "roles": roles,
        "message": f"Access denied. Required roles: {', '.join(roles)}",
    })


def permission_required(name):
    return type("PermissionRequired", (HasCatalogPermission,), {
        "required": name,
        "message": f"Missing permission: {name}",
    })
