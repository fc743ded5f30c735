"""
Personnel taxonomy: category > subcategory > personnel type.

The hierarchy is exactly two levels deep.  Listings are ordered by
``sort_order`` (then id) for categories and subcategories, and by
``level`` then ``sort_order`` for personnel types.  Display paths are
cached because the hierarchy only changes when reference data is seeded.
"""
from __future__ import annotations

from django.conf import settings
from django.core.cache import cache

from records.models import PersonnelCategory, PersonnelSubcategory, TypePersonnel

from .base import Repository

PATH_SEPARATOR = ' > '


class TaxonomyRepository(Repository[PersonnelCategory]):
    model = PersonnelCategory

    def _subcategories(self):
        return PersonnelSubcategory.objects.using(self.using)

    def _types(self):
        return TypePersonnel.objects.using(self.using)

    def _cache_key(self, kind: str, pk) -> str:
        return f"records:taxonomy:{self.using}:{kind}:{pk}"

    def active_categories(self) -> list[PersonnelCategory]:
        return list(self.queryset().filter(is_active=True).order_by('sort_order', 'id'))

    def get_subcategory(self, subcategory_id) -> PersonnelSubcategory:
        return self._subcategories().select_related('category').get(pk=subcategory_id)

    def list_active_subcategories(self, category_id) -> list[PersonnelSubcategory]:
        return list(
            self._subcategories()
            .filter(category_id=category_id, is_active=True)
            .order_by('sort_order', 'id')
        )

    def list_personnel_types(self, subcategory_id, include_inactive: bool = False) -> list[TypePersonnel]:
        qs = self._types().filter(subcategory_id=subcategory_id)
        if not include_inactive:
            qs = qs.filter(is_active=True)
        return list(qs.order_by('level', 'sort_order', 'id'))

    def category_personnel_types(self, category_id, include_inactive: bool = False) -> list[TypePersonnel]:
        qs = self._types().filter(category_id=category_id)
        if not include_inactive:
            qs = qs.filter(is_active=True)
        return list(qs.select_related('subcategory').order_by('level', 'sort_order', 'id'))

    def full_path(self, subcategory_id) -> str:
        key = self._cache_key('subcategory', subcategory_id)
        path = cache.get(key)
        if path is None:
            sub = self.get_subcategory(subcategory_id)
            path = f"{sub.category.nom_category}{PATH_SEPARATOR}{sub.nom_subcategory}"
            cache.set(key, path, settings.TAXONOMY_CACHE_TTL)
        return path

    def type_full_path(self, type_id) -> str:
        key = self._cache_key('type', type_id)
        path = cache.get(key)
        if path is None:
            tp = self._types().select_related('category', 'subcategory').get(pk=type_id)
            parts = [tp.category.nom_category]
            if tp.subcategory is not None:
                parts.append(tp.subcategory.nom_subcategory)
            parts.append(tp.nom_type)
            path = PATH_SEPARATOR.join(parts)
            cache.set(key, path, settings.TAXONOMY_CACHE_TTL)
        return path

    def find_types_by_capabilities(
        self,
        *,
        can_prescribe: bool | None = None,
        can_supervise: bool | None = None,
        is_medical_staff: bool | None = None,
        min_level: int | None = None,
    ) -> list[TypePersonnel]:
        qs = self._types().filter(is_active=True)
        if can_prescribe is not None:
            qs = qs.filter(can_prescribe=can_prescribe)
        if can_supervise is not None:
            qs = qs.filter(can_supervise=can_supervise)
        if is_medical_staff is not None:
            qs = qs.filter(is_medical_staff=is_medical_staff)
        if min_level is not None:
            qs = qs.filter(level__gte=min_level)
        return list(qs.select_related('category', 'subcategory').order_by('-level', 'sort_order', 'id'))

    def get_type_by_name(self, name: str) -> TypePersonnel | None:
        return self._types().filter(name=name).first()

    def invalidate_paths(self) -> None:
        keys = [self._cache_key('subcategory', pk) for pk in self._subcategories().values_list('pk', flat=True)]
        keys += [self._cache_key('type', pk) for pk in self._types().values_list('pk', flat=True)]
        cache.delete_many(keys)
