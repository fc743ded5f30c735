from datetime import date

import pytest
from rest_framework.exceptions import ValidationError

from records.repositories import MedicalHistoryRepository

pytestmark = pytest.mark.django_db


def test_severity_may_be_null(patient):
    entry = MedicalHistoryRepository().create(patient, type='surgery', title='Césarienne', severity=None)
    entry.refresh_from_db()
    assert entry.severity is None
    assert entry.is_active is True


def test_unknown_type_is_rejected(patient):
    with pytest.raises(ValidationError):
        MedicalHistoryRepository().create(patient, type='vaccination', title='BCG')


def test_unknown_severity_is_rejected(patient):
    with pytest.raises(ValidationError):
        MedicalHistoryRepository().create(patient, type='allergy', title='Arachide', severity='extreme')


def test_markup_is_stripped_from_free_text(patient):
    entry = MedicalHistoryRepository().create(
        patient, type='condition', title='<script>x</script>Asthme', description='<i>léger</i>',
    )
    assert '<' not in entry.title
    assert entry.description == 'léger'


def test_for_patient_orders_newest_first_and_filters_type(patient):
    repo = MedicalHistoryRepository()
    old = repo.create(patient, type='condition', title='Hypertension', date_recorded=date(2023, 1, 10))
    new = repo.create(patient, type='condition', title='Anémie', date_recorded=date(2024, 6, 2))
    allergy = repo.create(patient, type='allergy', title='Pénicilline', date_recorded=date(2024, 1, 5))

    assert [e.pk for e in repo.for_patient(patient.pk)] == [new.pk, allergy.pk, old.pk]
    assert [e.pk for e in repo.for_patient(patient.pk, type='allergy')] == [allergy.pk]


def test_update_revalidates(patient):
    repo = MedicalHistoryRepository()
    entry = repo.create(patient, type='condition', title='Hypertension', severity='low')
    repo.update(entry, severity='high')
    entry.refresh_from_db()
    assert entry.severity == 'high'
    with pytest.raises(ValidationError):
        repo.update(entry, severity='extreme')


def test_deleted_entry_cannot_be_reactivated_by_update(patient):
    repo = MedicalHistoryRepository()
    entry = repo.create(patient, type='allergy', title='Pénicilline')
    repo.soft_delete(entry)

    with pytest.raises(ValidationError):
        repo.update(entry, is_active=True)
    entry.refresh_from_db()
    assert entry.deleted_at is not None
    assert entry.is_active is False

    repo.update(entry, severity='high')
    entry.refresh_from_db()
    assert entry.severity == 'high'
    assert entry.is_active is False

    assert repo.restore(entry) is True
    entry.refresh_from_db()
    assert entry.is_active is True
