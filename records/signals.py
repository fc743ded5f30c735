"""
Cache invalidation for the personnel taxonomy.

Display paths are cached by :class:`~records.repositories.taxonomy.TaxonomyRepository`;
saving or deleting a category, subcategory or personnel type drops them.
Queryset ``update()`` sends no signal and still needs an explicit
``invalidate_paths()``.
"""
from django.db.models.signals import post_save, pre_delete
from django.dispatch import receiver

from records.models import PersonnelCategory, PersonnelSubcategory, TypePersonnel
from records.repositories.taxonomy import TaxonomyRepository


@receiver(post_save, sender=PersonnelCategory)
@receiver(post_save, sender=PersonnelSubcategory)
@receiver(post_save, sender=TypePersonnel)
@receiver(pre_delete, sender=PersonnelCategory)
@receiver(pre_delete, sender=PersonnelSubcategory)
@receiver(pre_delete, sender=TypePersonnel)
def invalidate_taxonomy_paths(sender, using=None, raw=False, **kwargs):
    if raw:
        return
    TaxonomyRepository(using).invalidate_paths()
