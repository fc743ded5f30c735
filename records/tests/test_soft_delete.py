import pytest
from rest_framework.exceptions import ValidationError

from records.models import Patient, VisitHistory
from records.repositories import (
    MedicalHistoryRepository,
    PatientRepository,
    SuperAdminRepository,
    TenantRepository,
    UserRepository,
)
from records.services.soft_delete import restore, soft_delete

pytestmark = pytest.mark.django_db


def test_soft_delete_tombstones_and_deactivates(patient):
    repo = PatientRepository()
    assert repo.soft_delete(patient) is True
    patient.refresh_from_db()
    assert patient.deleted_at is not None
    assert patient.is_active is False
    # still addressable by primary key
    assert repo.get(patient.pk).pk == patient.pk
    assert Patient.objects.filter(pk=patient.pk).exists()


def test_soft_deleted_rows_leave_default_listings(tenant, patient):
    repo = PatientRepository()
    repo.soft_delete(patient)
    assert repo.active_for_tenant(tenant.pk) == []
    assert repo.search_in_tenant(tenant.pk, 'Ba', include_inactive=True) == []
    assert [p.pk for p in repo.list(include_deleted=True)] == [patient.pk]


def test_double_soft_delete_keeps_first_timestamp(patient):
    assert soft_delete(patient) is True
    first = patient.deleted_at
    assert soft_delete(patient) is False
    patient.refresh_from_db()
    assert patient.deleted_at == first


def test_restore_reactivates(patient):
    soft_delete(patient)
    assert restore(patient) is True
    patient.refresh_from_db()
    assert patient.deleted_at is None
    assert patient.is_active is True
    assert restore(patient) is False


def test_tenant_soft_delete_sets_inactive_status(tenant):
    TenantRepository().soft_delete(tenant)
    tenant.refresh_from_db()
    assert tenant.status == 'inactive'
    assert tenant.is_active is False
    assert TenantRepository().find_active(tenant.pk) is None


def test_medical_history_soft_delete(patient):
    repo = MedicalHistoryRepository()
    entry = repo.create(patient, type='condition', title='Hypertension', severity='low')
    repo.soft_delete(entry)
    entry.refresh_from_db()
    assert entry.is_active is False
    assert repo.for_patient(patient.pk) == []
    assert [e.pk for e in repo.for_patient(patient.pk, include_deleted=True)] == [entry.pk]


def test_revoked_super_admin_is_not_found(tenant):
    user = UserRepository().create(email='root@samacarnet.sn', password='password123')
    repo = SuperAdminRepository()
    admin = repo.grant(user)
    repo.soft_delete(admin)
    assert repo.for_user(user.pk) is None
    regranted = repo.grant(user, notes='back')
    assert regranted.pk == admin.pk
    assert regranted.deleted_at is None


def test_models_without_tombstone_are_refused(visit):
    entry = VisitHistory.objects.get(visit=visit)
    with pytest.raises(TypeError):
        soft_delete(entry)


def test_deleted_patient_cannot_be_reactivated_by_update(patient):
    repo = PatientRepository()
    repo.soft_delete(patient)
    with pytest.raises(ValidationError):
        repo.update(patient, is_active=True)
    patient.refresh_from_db()
    assert patient.is_active is False
