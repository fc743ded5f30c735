from datetime import timedelta

import pytest
from django.core.cache import cache
from django.utils import timezone

from records.models import PersonnelCategory, PersonnelSubcategory, TypePersonnel
from records.repositories import (
    PatientRepository,
    PersonnelRepository,
    TenantRepository,
    TypeVisiteRepository,
    UserRepository,
)
from records.services.visits import schedule_visit


@pytest.fixture(autouse=True)
def _clear_cache():
    # Taxonomy paths and throttle history live in the cache; ids are reused between tests.
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def tenant(db):
    return TenantRepository().create(
        name='Centre de Santé Dakar', subdomain='dakar-health', email='admin@dakar-health.sn',
        settings={'language': 'fr', 'appointmentDuration': 30},
    )


@pytest.fixture
def other_tenant(db):
    return TenantRepository().create(
        name='Clinique Almadies', subdomain='almadies', email='contact@almadies-clinic.sn',
        domain='carnet.almadies-clinic.sn',
    )


@pytest.fixture
def taxonomy(db):
    medical = PersonnelCategory.objects.create(name='medical', nom_category='Médical', sort_order=1)
    obstetrics = PersonnelSubcategory.objects.create(
        category=medical, name='obstetrique', nom_subcategory='Obstétrique', sort_order=1,
    )
    general = PersonnelSubcategory.objects.create(
        category=medical, name='medecine_generale', nom_subcategory='Médecine Générale', sort_order=2,
    )
    midwife = TypePersonnel.objects.create(
        category=medical, subcategory=obstetrics, name='sage_femme', nom_type='Sage-femme',
        level=2, can_prescribe=True, is_medical_staff=True,
    )
    doctor = TypePersonnel.objects.create(
        category=medical, subcategory=general, name='medecin_generaliste', nom_type='Médecin Généraliste',
        level=2, can_prescribe=True, is_medical_staff=True,
    )
    return {
        'category': medical, 'obstetrics': obstetrics, 'general': general,
        'midwife': midwife, 'doctor': doctor,
    }


@pytest.fixture
def midwife(tenant, taxonomy):
    user = UserRepository().create(
        email='fatou.seck@demo.com', password='password123', tenant=tenant,
        first_name='Fatou', last_name='Seck', role='midwife',
    )
    return PersonnelRepository().create(tenant=tenant, user=user, type_personnel=taxonomy['midwife'])


@pytest.fixture
def doctor(tenant, taxonomy):
    user = UserRepository().create(
        email='moussa.fall@demo.com', password='password123', tenant=tenant,
        first_name='Moussa', last_name='Fall', role='doctor',
    )
    return PersonnelRepository().create(tenant=tenant, user=user, type_personnel=taxonomy['doctor'])


@pytest.fixture
def patient(tenant):
    return PatientRepository().create(
        tenant, first_name='Khadija', last_name='Ba', date_of_birth='1994-03-12', gender='female',
        phone='+221 77 123 45 67', allergies=['Pénicilline'],
    )


@pytest.fixture
def type_visite(db):
    return TypeVisiteRepository().create(
        name='consultation_prenatal_1t', nom_type='Consultation prénatale 1er trimestre',
        duration_minutes=45, requires_midwife=True,
    )


@pytest.fixture
def visit(patient, midwife, type_visite):
    return schedule_visit(
        patient=patient, personnel=midwife, type_visite=type_visite,
        scheduled_at=timezone.now() + timedelta(days=1),
    )
