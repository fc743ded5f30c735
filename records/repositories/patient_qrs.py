from __future__ import annotations

import logging
import uuid
from datetime import timedelta

from django.conf import settings
from django.db import transaction
from django.db.models import F, Q
from django.utils import timezone

from records.models import Patient, PatientQr
from records.services.qr_images import get_renderer

from .base import Repository

logger = logging.getLogger(__name__)


class PatientQrRepository(Repository[PatientQr]):
    model = PatientQr

    def __init__(self, using: str | None = None, renderer=None) -> None:
        super().__init__(using)
        self.renderer = renderer or get_renderer()

    def _expiry(self):
        days = settings.QR_CODE_TTL_DAYS
        return timezone.now() + timedelta(days=days) if days > 0 else None

    def active_for_patient(self, patient: Patient) -> PatientQr | None:
        return self.queryset().filter(patient=patient, is_active=True).order_by('-id').first()

    def generate_for_patient(self, patient: Patient) -> PatientQr:
        """Issue a fresh code, deactivating any code the patient already holds."""
        token = str(uuid.uuid4())
        image = self.renderer(token)
        with transaction.atomic(using=self.using):
            self.queryset().filter(patient=patient, is_active=True).update(is_active=False)
            qr = self.create(
                patient=patient,
                qr_code=token,
                qr_code_image=image,
                is_active=True,
                expires_at=self._expiry(),
                scan_count=0,
            )
        logger.info("Generated QR code for patient %s", patient.pk)
        return qr

    def find_patient_by_qr_code(self, qr_code: str) -> Patient | None:
        """Resolve a scanned code across tenants and count the scan."""
        now = timezone.now()
        qr = (
            self.queryset()
            .filter(qr_code=qr_code, is_active=True, patient__deleted_at__isnull=True)
            .filter(Q(expires_at__isnull=True) | Q(expires_at__gt=now))
            .select_related('patient__tenant')
            .first()
        )
        if qr is None:
            return None
        self.queryset().filter(pk=qr.pk).update(scan_count=F('scan_count') + 1, last_scanned_at=now)
        return qr.patient

    def regenerate(self, qr: PatientQr) -> PatientQr:
        qr.qr_code = str(uuid.uuid4())
        qr.qr_code_image = self.renderer(qr.qr_code)
        qr.expires_at = self._expiry()
        qr.save(using=self.using, update_fields=['qr_code', 'qr_code_image', 'expires_at', 'updated_at'])
        return qr

    def deactivate(self, qr: PatientQr) -> PatientQr:
        qr.is_active = False
        qr.save(using=self.using, update_fields=['is_active', 'updated_at'])
        return qr
