from __future__ import annotations

from records.models import MedicalHistory, Patient
from records.serializers.medical_histories import MedicalHistorySchema

from .base import Repository


class MedicalHistoryRepository(Repository[MedicalHistory]):
    model = MedicalHistory

    def create(self, patient: Patient, **fields) -> MedicalHistory:
        schema = MedicalHistorySchema(data=fields)
        schema.is_valid(raise_exception=True)
        history = MedicalHistory(patient=patient, **schema.validated_data)
        history.save(using=self.using)
        return history

    def update(self, instance: MedicalHistory, **fields) -> MedicalHistory:
        schema = MedicalHistorySchema(instance, data=fields, partial=True)
        schema.is_valid(raise_exception=True)
        return super().update(instance, **schema.validated_data)

    def for_patient(self, patient_id, type: str | None = None, include_deleted: bool = False) -> list[MedicalHistory]:
        qs = self.queryset(include_deleted=include_deleted).filter(patient_id=patient_id)
        if type:
            qs = qs.filter(type=type)
        return list(qs.order_by('-date_recorded', '-id'))
