"""
Demo dataset: staff and patients, a super administrator, visits with
their history, medical histories and patient QR codes.

Rows are only added when missing, so a second run adds nothing.
"""
from __future__ import annotations

import logging
from datetime import timedelta

from django.utils import timezone

from records.models import MedicalHistory, Patient, PatientQr, Tenant, TypeVisite, Visit
from records.repositories.medical_histories import MedicalHistoryRepository
from records.repositories.patient_qrs import PatientQrRepository
from records.repositories.patients import PatientRepository
from records.repositories.personnel import PersonnelRepository
from records.repositories.super_admins import SuperAdminRepository
from records.repositories.taxonomy import TaxonomyRepository
from records.repositories.users import UserRepository
from records.services.visits import complete_visit, schedule_visit, start_visit

from .base import BaseSeeder

logger = logging.getLogger(__name__)

DEMO_PASSWORD = 'password123'
SUPER_ADMIN_EMAIL = 'superadmin@samacarnet.sn'

# subdomain -> [(email, first name, last name, role, personnel type)]
STAFF = {
    'dakar-health': [
        ('fatou.seck@demo.com', 'Fatou', 'Seck', 'midwife', 'sage_femme'),
        ('aminata.diallo@demo.com', 'Aminata', 'Diallo', 'admin', 'directeur_medical'),
        ('moussa.fall@demo.com', 'Moussa', 'Fall', 'doctor', 'medecin_generaliste'),
    ],
    'almadies': [
        ('mariama.sy@almadies-clinic.sn', 'Mariama', 'Sy', 'midwife', 'sage_femme_senior'),
    ],
    'thies': [
        ('ousmane.diop@hopital-thies.sn', 'Ousmane', 'Diop', 'doctor', 'gyneco_obstetricien'),
    ],
}

# subdomain -> [(email, first name, last name, date of birth, gender, blood type, allergies)]
PATIENTS = {
    'dakar-health': [
        ('khadija.ba@patient.com', 'Khadija', 'Ba', '1994-03-12', 'female', 'O+', ['Pénicilline']),
        ('aissatou.cisse@patient.com', 'Aissatou', 'Cissé', '1998-07-25', 'female', 'A+', []),
        ('ibrahima.sarr@patient.com', 'Ibrahima', 'Sarr', '1987-11-02', 'male', 'B+', []),
    ],
    'almadies': [
        ('awa.ndiaye@patient.com', 'Awa', 'Ndiaye', '1996-01-30', 'female', 'O-', ['Arachide']),
    ],
}

MEDICAL_HISTORIES = [
    {'type': 'allergy', 'title': 'Allergie à la pénicilline',
     'description': 'Réaction allergique modérée à la pénicilline', 'severity': 'medium', 'days_ago': 180},
    {'type': 'condition', 'title': 'Hypertension',
     'description': 'Hypertension artérielle légère', 'severity': 'low', 'days_ago': 365},
    {'type': 'family_history', 'title': 'Diabète familial',
     'description': 'Antécédents familiaux de diabète type 2', 'severity': 'medium', 'days_ago': 90},
]


def _tenants(using):
    return {t.subdomain: t for t in Tenant.objects.using(using).filter(deleted_at__isnull=True)}


class PeopleSeeder(BaseSeeder):
    """Staff users with their personnel records, then patients."""
    name = 'users_personnel_patients'

    def _ensure_user(self, tenant, email, first_name, last_name, role):
        users = UserRepository(self.using)
        user = users.find_in_tenant(tenant, email)
        if user is None:
            user = users.create(
                email=email, password=DEMO_PASSWORD, tenant=tenant,
                first_name=first_name, last_name=last_name, role=role,
            )
            self.created += 1
        return user

    def _staff(self, tenant, email, first_name, last_name, role, type_name):
        user = self._ensure_user(tenant, email, first_name, last_name, role)
        personnel = PersonnelRepository(self.using)
        if personnel.for_user(user) is None:
            type_personnel = TaxonomyRepository(self.using).get_type_by_name(type_name)
            if type_personnel is None:
                raise LookupError(f"personnel type {type_name} is not seeded")
            personnel.create(
                tenant=tenant, user=user, type_personnel=type_personnel,
                hire_date=timezone.localdate(), contract_type='CDI', is_on_duty=True,
                specialties=[type_personnel.nom_type],
            )

    def _patient(self, tenant, email, first_name, last_name, dob, gender, blood_type, allergies):
        self._ensure_user(tenant, email, first_name, last_name, 'patient')
        if Patient.objects.using(self.using).filter(tenant=tenant, email=email).exists():
            return
        PatientRepository(self.using).create(
            tenant,
            first_name=first_name, last_name=last_name, date_of_birth=dob, gender=gender,
            email=email, blood_type=blood_type, allergies=allergies, city='Dakar',
        )

    def run(self) -> None:
        tenants = _tenants(self.using)
        for subdomain, rows in STAFF.items():
            tenant = tenants.get(subdomain)
            if tenant is None:
                logger.warning("%s: tenant %s is missing", self.name, subdomain)
                continue
            for row in rows:
                self.attempt(row[0], self._staff, tenant, *row)
        for subdomain, rows in PATIENTS.items():
            tenant = tenants.get(subdomain)
            if tenant is None:
                logger.warning("%s: tenant %s is missing", self.name, subdomain)
                continue
            for row in rows:
                self.attempt(row[0], self._patient, tenant, *row)


class SuperAdminsSeeder(BaseSeeder):
    name = 'super_admins'

    def _grant(self):
        users = UserRepository(self.using)
        user = users.queryset().filter(tenant__isnull=True, email=SUPER_ADMIN_EMAIL).first()
        if user is None:
            user = users.create(
                email=SUPER_ADMIN_EMAIL, password=DEMO_PASSWORD,
                first_name='Super', last_name='Admin', role='admin', is_staff=True,
            )
            self.created += 1
        SuperAdminRepository(self.using).grant(user, 'full', notes='System super administrator')

    def run(self) -> None:
        self.attempt(SUPER_ADMIN_EMAIL, self._grant)


class VisitsSeeder(BaseSeeder):
    """A completed prenatal visit and an upcoming consultation per patient.

    Visits go through the lifecycle services so each one carries its
    history rows.
    """
    name = 'visits'

    def _for_patient(self, patient, midwife, doctor, prenatal, general):
        now = timezone.now()
        if midwife is not None and prenatal is not None:
            visit = schedule_visit(
                patient=patient, personnel=midwife, type_visite=prenatal,
                scheduled_at=now - timedelta(days=14), reason='Initial visit creation',
                using=self.using, chief_complaint='Suivi prénatal de routine',
            )
            visit = start_visit(visit, midwife, using=self.using)
            complete_visit(
                visit, midwife, using=self.using,
                physical_examination='Examen général normal, abdomen souple',
                diagnosis='Grossesse évolutive normale',
                treatment_plan='Poursuite du suivi mensuel',
                recommendations='Alimentation équilibrée, repos suffisant',
                weight_kg='68.50', height_cm='165.00',
                systolic_bp=118, diastolic_bp=76, heart_rate=78, temperature_c='36.80',
            )
            self.created += 1
        if doctor is not None and general is not None:
            schedule_visit(
                patient=patient, personnel=doctor, type_visite=general,
                scheduled_at=now + timedelta(days=7), using=self.using,
                chief_complaint='Consultation de contrôle',
            )
            self.created += 1

    def run(self) -> None:
        personnel = PersonnelRepository(self.using)
        prenatal = TypeVisite.objects.using(self.using).filter(name='consultation_prenatal_1t').first()
        general = TypeVisite.objects.using(self.using).filter(name='consultation_generale').first()
        for tenant in _tenants(self.using).values():
            staff = personnel.active_for_tenant(tenant)
            midwife = next((p for p in staff if p.user.role == 'midwife'), None)
            doctor = next((p for p in staff if p.user.role == 'doctor'), midwife)
            patients = PatientRepository(self.using).active_for_tenant(tenant.pk)
            for patient in patients:
                if Visit.objects.using(self.using).filter(patient=patient).exists():
                    continue
                self.attempt(patient.patient_number, self._for_patient, patient, midwife, doctor, prenatal, general)


class MedicalHistoriesSeeder(BaseSeeder):
    name = 'medical_histories'

    def _for_patient(self, patient):
        repo = MedicalHistoryRepository(self.using)
        today = timezone.localdate()
        for row in MEDICAL_HISTORIES:
            row = dict(row)
            days_ago = row.pop('days_ago')
            repo.create(patient, date_recorded=today - timedelta(days=days_ago), **row)
            self.created += 1

    def run(self) -> None:
        patients = Patient.objects.using(self.using).filter(deleted_at__isnull=True)
        for patient in patients:
            if MedicalHistory.objects.using(self.using).filter(patient=patient).exists():
                continue
            self.attempt(patient.patient_number, self._for_patient, patient)


class PatientQrSeeder(BaseSeeder):
    name = 'patient_qr'
    limit = 10

    def run(self) -> None:
        repo = PatientQrRepository(self.using, renderer=self.options.get('renderer'))
        holders = PatientQr.objects.using(self.using).filter(is_active=True).values('patient_id')
        patients = (
            Patient.objects.using(self.using)
            .filter(is_active=True, deleted_at__isnull=True)
            .exclude(pk__in=holders)
            .order_by('id')[:self.limit]
        )
        for patient in patients:
            if self.attempt(patient.patient_number, repo.generate_for_patient, patient) is not None:
                self.created += 1
