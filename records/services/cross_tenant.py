"""
Patient lookup by QR code across tenants.

Any medical staff member may scan a patient's card.  Staff of the
patient's own tenant get ``full`` access; staff of another tenant get a
grade that depends on their clearance level (``CROSS_TENANT_ACCESS_LEVELS``)
and see correspondingly less of the record.  Every scan that resolves a
patient, granted or refused, appends a :class:`CrossTenantAccessLog` row.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from django.conf import settings

from records.codecs import decode_allergies, decode_medical_summary, decode_medications
from records.models import CrossTenantAccessLog, Patient, User
from records.repositories.access_logs import AccessLogRepository
from records.repositories.medical_histories import MedicalHistoryRepository
from records.repositories.patient_qrs import PatientQrRepository
from records.repositories.rbac import RbacRepository

logger = logging.getLogger(__name__)

CRITICAL_SEVERITIES = ('high', 'critical')


@dataclass
class QrScanResult:
    success: bool
    access_level: str
    message: str
    patient: Optional[Patient] = None
    data: Optional[Dict[str, Any]] = None
    log: Optional[CrossTenantAccessLog] = None


def grade_for_level(level: int) -> str:
    for grade, minimum in settings.CROSS_TENANT_ACCESS_LEVELS:
        if level >= minimum:
            return grade
    return 'none'


def _history_entries(patient: Patient, using: str, critical_only: bool = False) -> list:
    entries = [h for h in MedicalHistoryRepository(using).for_patient(patient.pk) if h.is_active]
    if critical_only:
        entries = [h for h in entries if h.severity in CRITICAL_SEVERITIES]
    return [
        {
            'type': h.type,
            'title': h.title,
            'severity': h.severity,
            'dateRecorded': h.date_recorded.isoformat() if h.date_recorded else None,
        }
        for h in entries
    ]


def patient_data_for_access(patient: Patient, access_level: str, using: Optional[str] = None) -> Optional[dict]:
    """The slice of ``patient`` a scanner with ``access_level`` may read; ``None`` for ``none``."""
    if access_level not in ('full', 'basic', 'emergency'):
        return None
    using = using or patient._state.db or 'default'
    data = {
        'id': patient.pk,
        'patientNumber': patient.patient_number,
        'firstName': patient.first_name,
        'lastName': patient.last_name,
        'dateOfBirth': patient.date_of_birth.isoformat(),
        'gender': patient.gender,
        'bloodType': patient.blood_type,
        'emergencyContact': {
            'name': patient.emergency_contact_name,
            'phone': patient.emergency_contact_phone,
            'relation': patient.emergency_contact_relation,
        },
        'allergies': decode_allergies(patient.allergies),
    }
    if access_level == 'emergency':
        data['criticalHistory'] = _history_entries(patient, using, critical_only=True)
        return data

    data['currentMedications'] = decode_medications(patient.current_medications)
    data['medicalHistories'] = _history_entries(patient, using)
    if access_level == 'full':
        data.update({
            'phone': patient.phone,
            'email': patient.email,
            'address': patient.address,
            'city': patient.city,
            'region': patient.region,
            'medicalHistory': decode_medical_summary(patient.medical_history),
        })
    return data


def scan_patient_qr(
    qr_code: str,
    scanner: User,
    *,
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None,
    using: Optional[str] = None,
) -> QrScanResult:
    patient = PatientQrRepository(using).find_patient_by_qr_code(qr_code)
    if patient is None:
        logger.info("QR scan by user %s matched no active code", scanner.pk)
        return QrScanResult(False, 'none', 'Invalid QR code')

    rbac = RbacRepository(using)
    denial = None
    if not rbac.is_medical_staff(scanner):
        access_level, denial = 'none', 'Scanner is not medical staff'
    elif scanner.tenant_id == patient.tenant_id:
        access_level = 'full'
    else:
        access_level = grade_for_level(rbac.clearance_level(scanner, scanner.tenant))
        if access_level == 'none':
            denial = 'Insufficient clearance level'

    data = None if denial else patient_data_for_access(patient, access_level, using)
    log = AccessLogRepository(using).log_access(
        scanner_user=scanner,
        scanner_tenant_id=scanner.tenant_id,
        patient=patient,
        patient_tenant_id=patient.tenant_id,
        qr_code=qr_code,
        access_level=access_level,
        access_type='qr_scan',
        ip_address=(ip_address or '')[:45] or None,
        user_agent=(user_agent or '')[:255] or None,
        accessed_data={'fields': sorted(data)} if data else None,
        access_granted=denial is None,
        denial_reason=denial,
    )
    if denial:
        logger.warning("QR scan of patient %s refused for user %s: %s", patient.pk, scanner.pk, denial)
        return QrScanResult(False, 'none', 'Access denied', patient=patient, log=log)

    logger.info("QR scan of patient %s by user %s granted %s access", patient.pk, scanner.pk, access_level)
    return QrScanResult(True, access_level, f'{access_level.capitalize()} access granted', patient, data, log)
