"""
Shared plumbing for the per-entity repositories.

A repository is a small object bound to one model and one database
alias.  Each request handler or seeder builds the repositories it
needs; nothing is cached at module level, so a tenant hosted on its own
database is served by passing that connection's alias.
"""
from __future__ import annotations

from typing import Any, Generic, TypeVar

from django.db import DEFAULT_DB_ALIAS, models
from rest_framework import serializers

from records.services.soft_delete import restore, soft_delete

M = TypeVar("M", bound=models.Model)


class Repository(Generic[M]):
    model: type[M]

    def __init__(self, using: str | None = None) -> None:
        self.using = using or DEFAULT_DB_ALIAS

    def __repr__(self) -> str:
        return f"{type(self).__name__}(using={self.using!r})"

    @property
    def soft_deletable(self) -> bool:
        return any(f.name == 'deleted_at' for f in self.model._meta.concrete_fields)

    def queryset(self, include_deleted: bool = False) -> models.QuerySet:
        qs = self.model._default_manager.using(self.using)
        if self.soft_deletable and not include_deleted:
            qs = qs.filter(deleted_at__isnull=True)
        return qs

    def get(self, pk: Any) -> M:
        """Fetch by primary key, tombstoned rows included."""
        return self.model._default_manager.using(self.using).get(pk=pk)

    def find(self, pk: Any) -> M | None:
        return self.model._default_manager.using(self.using).filter(pk=pk).first()

    def list(self, include_deleted: bool = False, **filters) -> list[M]:
        return list(self.queryset(include_deleted=include_deleted).filter(**filters))

    def create(self, **fields) -> M:
        instance = self.model(**fields)
        instance.save(using=self.using)
        return instance

    def update(self, instance: M, **fields) -> M:
        """Assign and save ``fields``; a tombstoned row cannot be reactivated here, only by ``restore``."""
        if self.soft_deletable and instance.deleted_at is not None:
            if fields.get('is_active') or fields.get('status') == 'active':
                raise serializers.ValidationError({'deleted_at': 'Deleted records must be restored before reactivation'})
        for name, value in fields.items():
            setattr(instance, name, value)
        instance.save(using=self.using)
        return instance

    def soft_delete(self, instance: M) -> bool:
        return soft_delete(instance, using=self.using)

    def restore(self, instance: M) -> bool:
        return restore(instance, using=self.using)
