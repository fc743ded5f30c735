from __future__ import annotations

from django.db.models import Q

from records.codecs import (
    decode_allergies,
    decode_medical_summary,
    decode_medications,
    encode_allergies,
    encode_medical_summary,
    encode_medications,
)
from records.models import Patient, Tenant
from records.serializers.patients import PatientSchema

from .base import Repository


def _encode_structured(data: dict) -> dict:
    if 'allergies' in data:
        data['allergies'] = encode_allergies(data['allergies'])
    if 'current_medications' in data:
        data['current_medications'] = encode_medications(data['current_medications'])
    if 'medical_history' in data:
        data['medical_history'] = encode_medical_summary(data['medical_history'])
    return data


class PatientRepository(Repository[Patient]):
    model = Patient

    def create(self, tenant: Tenant, **fields) -> Patient:
        schema = PatientSchema(data=fields)
        schema.is_valid(raise_exception=True)
        data = _encode_structured(dict(schema.validated_data))
        if not data.get('patient_number'):
            data.pop('patient_number', None)
        patient = Patient(tenant=tenant, **data)
        patient.save(using=self.using)
        return patient

    def update(self, instance: Patient, **fields) -> Patient:
        schema = PatientSchema(instance, data=fields, partial=True)
        schema.is_valid(raise_exception=True)
        return super().update(instance, **_encode_structured(dict(schema.validated_data)))

    def get_in_tenant(self, tenant: Tenant, pk) -> Patient:
        return self.queryset().get(tenant=tenant, pk=pk)

    def active_for_tenant(self, tenant_id) -> list[Patient]:
        return list(
            self.queryset()
            .filter(tenant_id=tenant_id, is_active=True)
            .order_by('last_name', 'first_name')
        )

    def search_in_tenant(self, tenant_id, term: str, include_inactive: bool = False, limit: int = 50) -> list[Patient]:
        term = (term or '').strip()
        qs = self.queryset().filter(tenant_id=tenant_id).filter(
            Q(first_name__icontains=term)
            | Q(last_name__icontains=term)
            | Q(patient_number__icontains=term)
            | Q(phone__icontains=term)
        )
        if not include_inactive:
            qs = qs.filter(is_active=True)
        return list(
            qs.select_related('assigned_doctor__user', 'assigned_midwife__user')
            .order_by('last_name', 'first_name')[:limit]
        )

    def medical_profile(self, patient: Patient) -> dict:
        return {
            'allergies': decode_allergies(patient.allergies),
            'current_medications': decode_medications(patient.current_medications),
            'medical_history': decode_medical_summary(patient.medical_history),
        }
