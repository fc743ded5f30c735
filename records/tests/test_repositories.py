from datetime import timedelta

import pytest
from django.db import IntegrityError, transaction
from django.utils import timezone

from records.repositories import (
    PersonnelRepository,
    TypeVisiteRepository,
    UserRepository,
    VisitRepository,
)
from records.services.visits import cancel_visit, schedule_visit

pytestmark = pytest.mark.django_db


def test_user_email_is_normalised_and_unique_per_tenant(tenant, other_tenant):
    repo = UserRepository()
    user = repo.create(email=' Awa.Ndiaye@Patient.com ', password='password123', tenant=tenant)
    assert user.email == 'awa.ndiaye@patient.com'
    assert user.username == f'awa.ndiaye@patient.com+t{tenant.pk}'
    assert repo.find_in_tenant(tenant, 'AWA.NDIAYE@patient.com').pk == user.pk
    assert repo.find_in_tenant(other_tenant, 'awa.ndiaye@patient.com') is None

    # the same address may exist in another tenant
    repo.create(email='awa.ndiaye@patient.com', tenant=other_tenant)
    with pytest.raises(IntegrityError), transaction.atomic():
        repo.create(email='awa.ndiaye@patient.com', tenant=tenant, username='other')


def test_users_without_password_cannot_log_in(tenant):
    user = UserRepository().create(email='patient@demo.com', tenant=tenant)
    assert not user.has_usable_password()


def test_personnel_listings(tenant, midwife, doctor):
    repo = PersonnelRepository()
    assert [p.pk for p in repo.active_for_tenant(tenant)] == [doctor.pk, midwife.pk]
    repo.update(doctor, is_on_duty=True)
    assert [p.pk for p in repo.on_duty(tenant)] == [doctor.pk]
    assert repo.for_user(midwife.user).pk == midwife.pk


def test_personnel_specialties(tenant, taxonomy):
    user = UserRepository().create(email='ousmane.diop@demo.com', tenant=tenant, role='doctor')
    personnel = PersonnelRepository().create(
        tenant=tenant, user=user, type_personnel=taxonomy['doctor'], specialties=['Échographie', ''],
    )
    assert PersonnelRepository().specialties(personnel) == ['Échographie']
    assert personnel.type_personnel.level_description


def test_type_visite_allow_list(taxonomy):
    repo = TypeVisiteRepository()
    open_type = repo.create(name='consultation_generale', nom_type='Consultation générale')
    closed = repo.create(
        name='vaccination_routine', nom_type='Vaccination de routine',
        allowed_personnel_types=[taxonomy['midwife'].pk], sort_order=0,
    )
    assert repo.allows(open_type, taxonomy['doctor'])
    assert repo.allows(closed, taxonomy['midwife'])
    assert not repo.allows(closed, taxonomy['doctor'])
    assert [t.name for t in repo.active()] == ['vaccination_routine', 'consultation_generale']
    assert repo.get_by_name('vaccination_routine').pk == closed.pk


def test_visit_queries(patient, midwife, type_visite, visit):
    now = timezone.now()
    later = schedule_visit(
        patient=patient, personnel=midwife, type_visite=type_visite, scheduled_at=now + timedelta(days=5),
    )
    repo = VisitRepository()
    assert [v.pk for v in repo.for_patient(patient.pk)] == [later.pk, visit.pk]
    assert repo.next_for_patient(patient.pk, now).pk == visit.pk

    cancel_visit(visit, midwife)
    assert repo.next_for_patient(patient.pk, now).pk == later.pk
    assert [v.pk for v in repo.for_patient(patient.pk, status='cancelled')] == [visit.pk]
    assert [v.pk for v in repo.for_personnel(midwife.pk)] == [visit.pk, later.pk]

    with pytest.raises(NotImplementedError):
        repo.create(patient=patient)
