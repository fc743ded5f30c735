import pytest

from records.exceptions import ImmutableRecordError
from records.models import CrossTenantAccessLog, Role
from records.repositories import (
    AccessLogRepository,
    MedicalHistoryRepository,
    PatientQrRepository,
    RbacRepository,
    UserRepository,
)
from records.services.cross_tenant import grade_for_level, patient_data_for_access, scan_patient_qr

pytestmark = pytest.mark.django_db


@pytest.fixture
def qr(patient):
    return PatientQrRepository(renderer=lambda token: token).generate_for_patient(patient)


@pytest.fixture
def visiting_doctor(other_tenant):
    return UserRepository().create(
        email='ousmane.diop@almadies-clinic.sn', password='password123', tenant=other_tenant,
        first_name='Ousmane', last_name='Diop', role='doctor',
    )


def with_level(user, level):
    role = Role.objects.create(name=f'level_{level}', display_name=f'Level {level}', level=level, is_medical=True)
    RbacRepository().assign_role(user, role, user.tenant)
    return user


@pytest.mark.parametrize('level, grade', [(5, 'full'), (4, 'full'), (3, 'basic'), (2, 'basic'), (1, 'emergency'), (0, 'none')])
def test_grade_for_level(level, grade):
    assert grade_for_level(level) == grade


def test_grades_follow_settings(settings):
    settings.CROSS_TENANT_ACCESS_LEVELS = (('full', 3), ('basic', 2), ('emergency', 1))
    assert grade_for_level(3) == 'full'


def test_same_tenant_scan_is_full(qr, midwife, patient):
    result = scan_patient_qr(qr.qr_code, midwife.user, ip_address='10.0.0.5', user_agent='pytest')
    assert result.success
    assert result.access_level == 'full'
    assert result.message == 'Full access granted'
    assert result.patient == patient
    assert result.data['phone'] == '+221 77 123 45 67'

    log = result.log
    assert log.access_granted
    assert not log.is_cross_tenant
    assert log.access_type == 'qr_scan'
    assert log.ip_address == '10.0.0.5'
    assert 'phone' in log.accessed_data['fields']


@pytest.mark.parametrize('level, grade', [(4, 'full'), (2, 'basic'), (1, 'emergency')])
def test_other_tenant_scan_is_graded_by_clearance(qr, visiting_doctor, patient, level, grade):
    result = scan_patient_qr(qr.qr_code, with_level(visiting_doctor, level))
    assert result.success
    assert result.access_level == grade
    assert result.log.is_cross_tenant
    assert result.log.scanner_tenant_id == visiting_doctor.tenant_id
    assert result.log.patient_tenant_id == patient.tenant_id


def test_other_tenant_scan_without_clearance_is_refused(qr, visiting_doctor):
    result = scan_patient_qr(qr.qr_code, visiting_doctor)
    assert not result.success
    assert result.access_level == 'none'
    assert result.message == 'Access denied'
    assert result.data is None
    assert result.log.access_granted is False
    assert result.log.denial_reason == 'Insufficient clearance level'


def test_non_medical_scanner_is_refused_and_logged(qr, tenant):
    receptionist = UserRepository().create(
        email='awa.ndiaye@demo.com', password='password123', tenant=tenant,
        first_name='Awa', last_name='Ndiaye', role='patient',
    )
    result = scan_patient_qr(qr.qr_code, receptionist)
    assert not result.success
    assert result.log.denial_reason == 'Scanner is not medical staff'
    assert result.log.accessed_data is None


def test_unknown_or_revoked_code_is_not_logged(qr, midwife, patient):
    assert scan_patient_qr('not-a-code', midwife.user).message == 'Invalid QR code'
    PatientQrRepository(renderer=lambda token: token).generate_for_patient(patient)
    result = scan_patient_qr(qr.qr_code, midwife.user)
    assert not result.success
    assert result.patient is None
    assert CrossTenantAccessLog.objects.count() == 0


def test_data_slices(patient):
    repo = MedicalHistoryRepository()
    repo.create(patient, type='allergy', title='Allergie à la pénicilline', severity='high')
    repo.create(patient, type='condition', title='Anémie légère', severity='low')

    emergency = patient_data_for_access(patient, 'emergency')
    assert [h['title'] for h in emergency['criticalHistory']] == ['Allergie à la pénicilline']
    assert 'currentMedications' not in emergency
    assert 'phone' not in emergency
    assert emergency['allergies'] == ['Pénicilline']

    basic = patient_data_for_access(patient, 'basic')
    assert len(basic['medicalHistories']) == 2
    assert 'phone' not in basic

    full = patient_data_for_access(patient, 'full')
    assert full['phone'] == '+221 77 123 45 67'
    assert 'medicalHistory' in full

    assert patient_data_for_access(patient, 'none') is None


def test_access_log_is_append_only(qr, midwife):
    log = scan_patient_qr(qr.qr_code, midwife.user).log
    log.access_granted = False
    with pytest.raises(ImmutableRecordError):
        log.save()
    with pytest.raises(ImmutableRecordError):
        log.delete()
    with pytest.raises(ImmutableRecordError):
        CrossTenantAccessLog.objects.filter(pk=log.pk).update(access_granted=False)
    with pytest.raises(ImmutableRecordError):
        CrossTenantAccessLog.objects.all().delete()


def test_stats_and_recent_cross_tenant(qr, midwife, visiting_doctor, patient, tenant, other_tenant):
    scan_patient_qr(qr.qr_code, midwife.user)
    scan_patient_qr(qr.qr_code, visiting_doctor)
    scan_patient_qr(qr.qr_code, with_level(visiting_doctor, 2))

    repo = AccessLogRepository()
    assert repo.patient_access_stats(patient.pk) == {'full_granted': 1, 'none_denied': 1, 'basic_granted': 1}
    assert len(repo.for_patient(patient.pk)) == 3

    # own-tenant and refused scans are left out
    recent = repo.recent_cross_tenant(tenant.pk)
    assert [log.access_level for log in recent] == ['basic']
    assert [log.pk for log in repo.recent_cross_tenant(other_tenant.pk)] == [recent[0].pk]
