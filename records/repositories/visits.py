from __future__ import annotations

from records.models import Visit

from .base import Repository


class VisitRepository(Repository[Visit]):
    """Read side of visits; mutations go through :mod:`records.services.visits`."""
    model = Visit

    def create(self, **fields):
        raise NotImplementedError("use records.services.visits.schedule_visit")

    def for_patient(self, patient_id, status: str | None = None, limit: int = 50) -> list[Visit]:
        qs = self.queryset().filter(patient_id=patient_id)
        if status:
            qs = qs.filter(status=status)
        return list(
            qs.select_related('personnel__user', 'type_visite')
            .order_by('-scheduled_at', '-id')[:limit]
        )

    def for_personnel(self, personnel_id, day=None) -> list[Visit]:
        qs = self.queryset().filter(personnel_id=personnel_id)
        if day is not None:
            qs = qs.filter(scheduled_at__date=day)
        return list(qs.select_related('patient', 'type_visite').order_by('scheduled_at'))

    def next_for_patient(self, patient_id, now) -> Visit | None:
        return (
            self.queryset()
            .filter(patient_id=patient_id, status='scheduled', scheduled_at__gt=now)
            .order_by('scheduled_at')
            .first()
        )
