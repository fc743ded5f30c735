from __future__ import annotations

from records.codecs import decode_specialties, encode_specialties
from records.models import Personnel, Tenant

from .base import Repository


class PersonnelRepository(Repository[Personnel]):
    model = Personnel

    def create(self, **fields) -> Personnel:
        if 'specialties' in fields:
            fields['specialties'] = encode_specialties(fields['specialties'])
        return super().create(**fields)

    def active_for_tenant(self, tenant: Tenant) -> list[Personnel]:
        return list(
            self.queryset()
            .filter(tenant=tenant, is_active=True)
            .select_related('user', 'type_personnel')
            .order_by('user__last_name', 'user__first_name')
        )

    def on_duty(self, tenant: Tenant) -> list[Personnel]:
        return list(
            self.queryset()
            .filter(tenant=tenant, is_active=True, is_on_duty=True)
            .select_related('user', 'type_personnel')
        )

    def for_user(self, user) -> Personnel | None:
        return self.queryset().filter(user=user, is_active=True).select_related('type_personnel').first()

    def specialties(self, personnel: Personnel) -> list[str]:
        return decode_specialties(personnel.specialties)
