from __future__ import annotations

from datetime import timedelta

from django.db.models import Count, Q
from django.utils import timezone

from records.models import CrossTenantAccessLog

from .base import Repository


class AccessLogRepository(Repository[CrossTenantAccessLog]):
    model = CrossTenantAccessLog

    def log_access(self, **fields) -> CrossTenantAccessLog:
        fields.setdefault('accessed_at', timezone.now())
        return self.create(**fields)

    def for_patient(self, patient_id, limit: int = 50) -> list[CrossTenantAccessLog]:
        return list(self.queryset().filter(patient_id=patient_id).order_by('-accessed_at', '-id')[:limit])

    def patient_access_stats(self, patient_id, days: int = 30) -> dict[str, int]:
        """Counts keyed ``<level>_granted`` / ``<level>_denied`` over the last ``days`` days."""
        since = timezone.now() - timedelta(days=days)
        rows = (
            self.queryset()
            .filter(patient_id=patient_id, accessed_at__gte=since)
            .values('access_level', 'access_granted')
            .annotate(total=Count('id'))
        )
        return {
            f"{row['access_level']}_{'granted' if row['access_granted'] else 'denied'}": row['total']
            for row in rows
        }

    def recent_cross_tenant(self, tenant_id, limit: int = 50) -> list[CrossTenantAccessLog]:
        """Granted reads where ``tenant_id`` is on one side and another tenant on the other."""
        return list(
            self.queryset()
            .filter(Q(scanner_tenant_id=tenant_id) | Q(patient_tenant_id=tenant_id), access_granted=True)
            .exclude(scanner_tenant_id=tenant_id, patient_tenant_id=tenant_id)
            .select_related('scanner_user', 'patient')
            .order_by('-accessed_at', '-id')[:limit]
        )
