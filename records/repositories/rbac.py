"""
Role and permission catalogue.

A user's effective permissions are the union of the permissions carried
by their active, unexpired role assignments and of the permissions
granted to them directly.  Assignments and grants scoped to a tenant
only count inside that tenant; unscoped ones count everywhere.  A
permission with ``min_level_required`` is further withheld from users
whose clearance (see :meth:`RbacRepository.clearance_level`) is lower.
"""
from __future__ import annotations

from django.db.models import Max, Q
from django.utils import timezone

from records.models import Permission, Personnel, Role, RolePermission, Tenant, User, UserPermission, UserRole

from .base import Repository
from .super_admins import SuperAdminRepository

ADMIN_ROLE = 'admin'
MEDICAL_ROLES = ('doctor', 'midwife')


class RbacRepository(Repository[Role]):
    model = Role

    def _in_tenant(self, tenant: Tenant | None) -> Q:
        if tenant is None:
            return Q(tenant__isnull=True)
        return Q(tenant__isnull=True) | Q(tenant=tenant)

    def get_role(self, name: str, tenant: Tenant | None = None) -> Role | None:
        return self.queryset().filter(name=name, tenant=tenant).first()

    def get_permission(self, name: str) -> Permission | None:
        return Permission.objects.using(self.using).filter(name=name).first()

    def assign_role(
        self,
        user: User,
        role: Role,
        tenant: Tenant | None = None,
        *,
        assigned_by: User | None = None,
        reason: str | None = None,
        is_primary: bool = False,
        expires_at=None,
    ) -> UserRole:
        if not role.is_assignable:
            raise ValueError(f"role {role.name} cannot be assigned")
        assignment, _ = UserRole.objects.using(self.using).update_or_create(
            user=user, tenant=tenant, role=role,
            defaults={
                'assigned_by': assigned_by, 'assignment_reason': reason, 'is_primary': is_primary,
                'expires_at': expires_at, 'is_active': True, 'assigned_at': timezone.now(),
            },
        )
        return assignment

    def revoke_role(self, user: User, role: Role, tenant: Tenant | None = None) -> bool:
        return bool(
            UserRole.objects.using(self.using)
            .filter(user=user, role=role, tenant=tenant, is_active=True)
            .update(is_active=False, updated_at=timezone.now())
        )

    def grant_role_permission(
        self, role: Role, permission: Permission, tenant: Tenant | None = None, *,
        granted_by: User | None = None, reason: str | None = None, valid_until=None,
    ) -> RolePermission:
        grant, _ = RolePermission.objects.using(self.using).update_or_create(
            role=role, permission=permission, tenant=tenant,
            defaults={'granted_by': granted_by, 'grant_reason': reason, 'valid_until': valid_until, 'is_active': True},
        )
        return grant

    def grant_user_permission(
        self, user: User, permission: Permission, tenant: Tenant | None = None, *,
        granted_by: User | None = None, reason: str | None = None, expires_at=None,
    ) -> UserPermission:
        grant, _ = UserPermission.objects.using(self.using).update_or_create(
            user=user, permission=permission, tenant=tenant,
            defaults={'granted_by': granted_by, 'grant_reason': reason, 'expires_at': expires_at, 'is_active': True},
        )
        return grant

    def _assignments(self, user: User, tenant: Tenant | None):
        now = timezone.now()
        return (
            UserRole.objects.using(self.using)
            .filter(self._in_tenant(tenant), user=user, is_active=True, role__is_active=True)
            .filter(Q(expires_at__isnull=True) | Q(expires_at__gt=now))
        )

    def active_roles(self, user: User, tenant: Tenant | None = None) -> list[Role]:
        role_ids = self._assignments(user, tenant).values('role_id')
        return list(self.queryset().filter(pk__in=role_ids).order_by('-level', 'name'))

    def clearance_level(self, user: User, tenant: Tenant | None = None) -> int:
        """Highest level among the user's active roles, else of their personnel types; 0 for neither."""
        level = self._assignments(user, tenant).aggregate(level=Max('role__level'))['level']
        if level is None:
            level = (
                Personnel.objects.using(self.using)
                .filter(user=user, is_active=True, deleted_at__isnull=True)
                .aggregate(level=Max('type_personnel__level'))['level']
            )
        return level or 0

    def permission_names(self, user: User, tenant: Tenant | None = None) -> set[str]:
        now = timezone.now()
        role_ids = self._assignments(user, tenant).values('role_id')
        via_roles = (
            RolePermission.objects.using(self.using)
            .filter(self._in_tenant(tenant), role_id__in=role_ids, is_active=True, permission__is_active=True)
            .filter(Q(valid_from__isnull=True) | Q(valid_from__lte=now))
            .filter(Q(valid_until__isnull=True) | Q(valid_until__gt=now))
            .values_list('permission_id', flat=True)
        )
        direct = (
            UserPermission.objects.using(self.using)
            .filter(self._in_tenant(tenant), user=user, is_active=True, permission__is_active=True)
            .filter(Q(expires_at__isnull=True) | Q(expires_at__gt=now))
            .values_list('permission_id', flat=True)
        )
        clearance = self.clearance_level(user, tenant)
        return set(
            Permission.objects.using(self.using)
            .filter(Q(pk__in=via_roles) | Q(pk__in=direct))
            .filter(Q(min_level_required__isnull=True) | Q(min_level_required__lte=clearance))
            .values_list('name', flat=True)
        )

    def has_permission(self, user: User, name: str, tenant: Tenant | None = None) -> bool:
        """Super-admin overrides win, then the ``admin`` account role, then the catalogue."""
        super_admin = SuperAdminRepository(self.using).for_user(user.pk)
        if super_admin is not None and SuperAdminRepository(self.using).effective_permission(super_admin, name):
            return True
        if user.role == ADMIN_ROLE:
            return True
        return name in self.permission_names(user, tenant)

    def has_role(self, user: User, names, tenant: Tenant | None = None) -> bool:
        if user.role == ADMIN_ROLE or user.role in names:
            return True
        return any(role.name in names for role in self.active_roles(user, tenant))

    def is_medical_staff(self, user: User) -> bool:
        if user.role in MEDICAL_ROLES:
            return True
        medical_personnel = Personnel.objects.using(self.using).filter(
            user=user, is_active=True, deleted_at__isnull=True, type_personnel__is_medical_staff=True,
        )
        if medical_personnel.exists():
            return True
        return any(role.is_medical for role in self.active_roles(user, user.tenant))
