from __future__ import annotations

from records.codecs import decode_permissions_override, encode_permissions_override
from records.models import SuperAdmin, User
from records.serializers.super_admins import SuperAdminSchema

from .base import Repository


class SuperAdminRepository(Repository[SuperAdmin]):
    model = SuperAdmin

    def grant(self, user: User, access_level: str = 'full', permissions_override=None, notes=None) -> SuperAdmin:
        """Create or refresh the super-admin record of ``user``.

        A previously revoked (tombstoned) record is brought back rather
        than duplicated, since the link to the user is one-to-one.
        """
        schema = SuperAdminSchema(data={
            'access_level': access_level,
            'permissions_override': permissions_override,
            'notes': notes,
        })
        schema.is_valid(raise_exception=True)
        data = schema.validated_data
        fields = {
            'access_level': data['access_level'],
            'permissions_override': encode_permissions_override(data.get('permissions_override')),
            'notes': data.get('notes'),
            'deleted_at': None,
        }
        admin, _ = SuperAdmin.objects.using(self.using).update_or_create(user=user, defaults=fields)
        return admin

    def for_user(self, user_id) -> SuperAdmin | None:
        return self.queryset().filter(user_id=user_id).first()

    def effective_permission(self, super_admin: SuperAdmin, key: str, default=None):
        """Override value for ``key``; full-access admins default to ``True``."""
        overrides = decode_permissions_override(super_admin.permissions_override)
        if key in overrides:
            return overrides[key]
        if super_admin.has_full_access:
            return True
        return default
