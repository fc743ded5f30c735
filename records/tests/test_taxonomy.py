import pytest

from records.models import PersonnelSubcategory, TypePersonnel
from records.repositories import TaxonomyRepository

pytestmark = pytest.mark.django_db


def test_active_subcategories_are_ordered_and_filtered(taxonomy):
    category = taxonomy['category']
    PersonnelSubcategory.objects.create(
        category=category, name='anesthesie', nom_subcategory='Anesthésie', sort_order=0, is_active=False,
    )
    first = PersonnelSubcategory.objects.create(
        category=category, name='pediatrie', nom_subcategory='Pédiatrie', sort_order=0,
    )
    names = [s.name for s in TaxonomyRepository().list_active_subcategories(category.pk)]
    assert names == [first.name, 'obstetrique', 'medecine_generale']


def test_personnel_types_ordered_by_level_then_sort_order(taxonomy):
    category, obstetrics = taxonomy['category'], taxonomy['obstetrics']
    TypePersonnel.objects.create(
        category=category, subcategory=obstetrics, name='sage_femme_senior', nom_type='Sage-femme Senior',
        level=3, sort_order=1,
    )
    TypePersonnel.objects.create(
        category=category, subcategory=obstetrics, name='sage_femme_junior', nom_type='Sage-femme Junior',
        level=1, sort_order=9,
    )
    TypePersonnel.objects.create(
        category=category, subcategory=obstetrics, name='stagiaire', nom_type='Stagiaire',
        level=1, sort_order=1, is_active=False,
    )
    repo = TaxonomyRepository()
    names = [t.name for t in repo.list_personnel_types(obstetrics.pk)]
    assert names == ['sage_femme_junior', 'sage_femme', 'sage_femme_senior']
    assert len(repo.list_personnel_types(obstetrics.pk, include_inactive=True)) == 4


def test_full_path_of_subcategory(taxonomy):
    assert TaxonomyRepository().full_path(taxonomy['obstetrics'].pk) == 'Médical > Obstétrique'


def test_full_path_of_personnel_type(taxonomy):
    path = TaxonomyRepository().type_full_path(taxonomy['midwife'].pk)
    assert path == 'Médical > Obstétrique > Sage-femme'


def test_full_path_is_cached_until_invalidated(taxonomy):
    repo = TaxonomyRepository()
    sub = taxonomy['obstetrics']
    assert repo.full_path(sub.pk) == 'Médical > Obstétrique'
    PersonnelSubcategory.objects.filter(pk=sub.pk).update(nom_subcategory='Gynécologie')
    assert repo.full_path(sub.pk) == 'Médical > Obstétrique'
    repo.invalidate_paths()
    assert repo.full_path(sub.pk) == 'Médical > Gynécologie'


def test_rename_through_save_refreshes_cached_paths(taxonomy):
    repo = TaxonomyRepository()
    sub = taxonomy['obstetrics']
    assert repo.type_full_path(taxonomy['midwife'].pk) == 'Médical > Obstétrique > Sage-femme'

    sub.nom_subcategory = 'Gynécologie'
    sub.save()
    assert repo.full_path(sub.pk) == 'Médical > Gynécologie'
    assert repo.type_full_path(taxonomy['midwife'].pk) == 'Médical > Gynécologie > Sage-femme'

    category = taxonomy['category']
    category.nom_category = 'Personnel médical'
    category.save(update_fields=['nom_category'])
    assert repo.full_path(sub.pk) == 'Personnel médical > Gynécologie'


def test_find_types_by_capabilities(taxonomy):
    TypePersonnel.objects.create(
        category=taxonomy['category'], subcategory=taxonomy['obstetrics'], name='gyneco_obstetricien',
        nom_type='Gynéco-obstétricien', level=4, can_prescribe=True, can_supervise=True, is_medical_staff=True,
    )
    repo = TaxonomyRepository()
    supervisors = repo.find_types_by_capabilities(can_supervise=True)
    assert [t.name for t in supervisors] == ['gyneco_obstetricien']
    prescribers = repo.find_types_by_capabilities(can_prescribe=True, min_level=2)
    assert prescribers[0].name == 'gyneco_obstetricien'
    assert {t.name for t in prescribers} == {'gyneco_obstetricien', 'sage_femme', 'medecin_generaliste'}


def test_type_properties(taxonomy):
    midwife = taxonomy['midwife']
    assert midwife.has_medical_permissions is True
    assert midwife.is_supervision_role is False
    assert TaxonomyRepository().get_type_by_name('sage_femme').pk == midwife.pk
    assert TaxonomyRepository().get_type_by_name('unknown') is None
