from __future__ import annotations

from records.codecs import decode_personnel_type_ids, encode_personnel_type_ids
from records.models import TypePersonnel, TypeVisite

from .base import Repository


class TypeVisiteRepository(Repository[TypeVisite]):
    model = TypeVisite

    def create(self, **fields) -> TypeVisite:
        if 'allowed_personnel_types' in fields:
            fields['allowed_personnel_types'] = encode_personnel_type_ids(fields['allowed_personnel_types'])
        return super().create(**fields)

    def active(self) -> list[TypeVisite]:
        return list(self.queryset().filter(is_active=True).order_by('sort_order', 'id'))

    def get_by_name(self, name: str) -> TypeVisite | None:
        return self.queryset().filter(name=name).first()

    def allows(self, type_visite: TypeVisite, type_personnel: TypePersonnel) -> bool:
        """An empty allow-list admits every personnel type."""
        allowed = decode_personnel_type_ids(type_visite.allowed_personnel_types)
        return not allowed or type_personnel.pk in allowed
