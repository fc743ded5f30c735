"""
Soft deletion: rows are tombstoned with ``deleted_at`` instead of being
removed.  Entities with an ``is_active`` column are deactivated as well,
and tenants move to the ``inactive`` status.
"""
import logging

from django.db import models
from django.utils import timezone

from records.models import Tenant

logger = logging.getLogger(__name__)


def _has_field(instance: models.Model, name: str) -> bool:
    return any(f.name == name for f in instance._meta.concrete_fields)


def soft_delete(instance: models.Model, using=None) -> bool:
    """Tombstone ``instance``.

    Returns ``False`` without touching the row when it is already
    tombstoned, so the original ``deleted_at`` is preserved.
    """
    if not _has_field(instance, 'deleted_at'):
        raise TypeError(f"{type(instance).__name__} is not soft-deletable")
    if instance.deleted_at is not None:
        return False

    instance.deleted_at = timezone.now()
    update_fields = ['deleted_at']
    if isinstance(instance, Tenant):
        instance.status = 'inactive'
        update_fields.append('status')
    elif _has_field(instance, 'is_active'):
        instance.is_active = False
        update_fields.append('is_active')
    if _has_field(instance, 'updated_at'):
        update_fields.append('updated_at')

    instance.save(using=using, update_fields=update_fields)
    logger.info("Soft-deleted %s #%s", type(instance).__name__, instance.pk)
    return True


def restore(instance: models.Model, using=None) -> bool:
    """Clear the tombstone and reactivate; ``False`` if the row was not deleted."""
    if not _has_field(instance, 'deleted_at'):
        raise TypeError(f"{type(instance).__name__} is not soft-deletable")
    if instance.deleted_at is None:
        return False

    instance.deleted_at = None
    update_fields = ['deleted_at']
    if isinstance(instance, Tenant):
        instance.status = 'active'
        update_fields.append('status')
    elif _has_field(instance, 'is_active'):
        instance.is_active = True
        update_fields.append('is_active')
    if _has_field(instance, 'updated_at'):
        update_fields.append('updated_at')

    instance.save(using=using, update_fields=update_fields)
    logger.info("Restored %s #%s", type(instance).__name__, instance.pk)
    return True
