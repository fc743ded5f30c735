"""
Visit lifecycle.

Each operation locks the visit row, checks the current status against
``ALLOWED_FROM``, mutates the visit and appends exactly one history row,
all inside one transaction.  A refused transition raises
:class:`VisitTransitionError` and writes nothing.

    operation         allowed from                    history action
    schedule_visit    (new)                           created
    update_visit      scheduled, in_progress, no_show updated
    start_visit       scheduled                       updated
    complete_visit    in_progress                     completed
    cancel_visit      scheduled, in_progress          cancelled
    reschedule_visit  scheduled                       rescheduled
    mark_no_show      scheduled                       updated
"""
from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Optional

from django.db import transaction
from django.utils import timezone

from records.exceptions import VisitTransitionError
from records.models import Patient, Personnel, TypeVisite, Visit
from records.repositories.visit_types import TypeVisiteRepository
from records.serializers.visits import VisitDetailsSchema
from records.services.audit import record_visit_action

logger = logging.getLogger(__name__)

ALLOWED_FROM = {
    'update': {'scheduled', 'in_progress', 'no_show'},
    'start': {'scheduled'},
    'complete': {'in_progress'},
    'cancel': {'scheduled', 'in_progress'},
    'reschedule': {'scheduled'},
    'no_show': {'scheduled'},
}

TWO_PLACES = Decimal('0.01')


def _validated_details(details: Dict[str, Any]) -> Dict[str, Any]:
    schema = VisitDetailsSchema(data=details, partial=True)
    schema.is_valid(raise_exception=True)
    return dict(schema.validated_data)


def _lock(visit: Visit, using: str) -> Visit:
    return Visit.objects.using(using).select_for_update().get(pk=visit.pk)


def _check(locked: Visit, operation: str) -> None:
    if locked.status not in ALLOWED_FROM[operation]:
        raise VisitTransitionError(
            f"cannot {operation.replace('_', ' ')} a visit that is {locked.status}"
        )


def _alias(visit: Visit, using: Optional[str]) -> str:
    return using or visit._state.db or 'default'


def compute_bmi(weight_kg, height_cm) -> Optional[Decimal]:
    if not weight_kg or not height_cm:
        return None
    height_m = Decimal(str(height_cm)) / 100
    return (Decimal(str(weight_kg)) / (height_m * height_m)).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def schedule_visit(
    *,
    patient: Patient,
    personnel: Personnel,
    type_visite: TypeVisite,
    scheduled_at,
    actor: Optional[Personnel] = None,
    reason: Optional[str] = None,
    using: Optional[str] = None,
    **details,
) -> Visit:
    using = using or patient._state.db or 'default'
    if personnel.tenant_id != patient.tenant_id:
        raise ValueError("personnel and patient belong to different tenants")
    if not TypeVisiteRepository(using).allows(type_visite, personnel.type_personnel):
        raise ValueError(f"{personnel.type_personnel.name} may not perform {type_visite.name}")
    data = _validated_details(details)

    with transaction.atomic(using=using):
        visit = Visit(
            tenant_id=patient.tenant_id,
            patient=patient,
            personnel=personnel,
            type_visite=type_visite,
            scheduled_at=scheduled_at,
            status='scheduled',
            **data,
        )
        visit.save(using=using)
        record_visit_action(
            visit, actor or personnel, 'created',
            changes={'status': 'scheduled', 'scheduled_at': scheduled_at},
            reason=reason, using=using,
        )
    logger.info("Scheduled visit %s for patient %s", visit.pk, patient.pk)
    return visit


def update_visit(visit: Visit, actor: Personnel, reason: Optional[str] = None, using: Optional[str] = None, **fields) -> Visit:
    """Apply clinical field changes; a call that changes nothing records nothing."""
    using = _alias(visit, using)
    data = _validated_details(fields)
    with transaction.atomic(using=using):
        locked = _lock(visit, using)
        _check(locked, 'update')
        changes = {}
        for name, value in data.items():
            old = getattr(locked, name)
            if old != value:
                changes[name] = {'from': old, 'to': value}
                setattr(locked, name, value)
        if changes:
            locked.save(using=using, update_fields=[*changes, 'updated_at'])
            record_visit_action(locked, actor, 'updated', changes=changes, reason=reason, using=using)
    visit.refresh_from_db(using=using)
    return locked


def start_visit(visit: Visit, actor: Personnel, using: Optional[str] = None) -> Visit:
    using = _alias(visit, using)
    with transaction.atomic(using=using):
        locked = _lock(visit, using)
        _check(locked, 'start')
        locked.status = 'in_progress'
        locked.started_at = timezone.now()
        locked.save(using=using, update_fields=['status', 'started_at', 'updated_at'])
        record_visit_action(
            locked, actor, 'updated',
            changes={'status': {'from': 'scheduled', 'to': 'in_progress'}, 'started_at': locked.started_at},
            using=using,
        )
    visit.refresh_from_db(using=using)
    return locked


def complete_visit(visit: Visit, actor: Personnel, using: Optional[str] = None, **details) -> Visit:
    using = _alias(visit, using)
    data = _validated_details(details)
    with transaction.atomic(using=using):
        locked = _lock(visit, using)
        _check(locked, 'complete')
        for name, value in data.items():
            setattr(locked, name, value)
        locked.status = 'completed'
        locked.ended_at = timezone.now()
        if locked.started_at:
            locked.duration_minutes = int((locked.ended_at - locked.started_at).total_seconds() // 60)
        bmi = compute_bmi(locked.weight_kg, locked.height_cm)
        if bmi is not None:
            locked.bmi = bmi
        locked.save(using=using)
        changes = {
            'status': {'from': 'in_progress', 'to': 'completed'},
            'ended_at': locked.ended_at,
            'duration_minutes': locked.duration_minutes,
        }
        if bmi is not None:
            changes['bmi'] = bmi
        changes.update(data)
        record_visit_action(locked, actor, 'completed', changes=changes, using=using)
    visit.refresh_from_db(using=using)
    return locked


def cancel_visit(visit: Visit, actor: Personnel, reason: Optional[str] = None, using: Optional[str] = None) -> Visit:
    using = _alias(visit, using)
    with transaction.atomic(using=using):
        locked = _lock(visit, using)
        _check(locked, 'cancel')
        previous = locked.status
        locked.status = 'cancelled'
        if reason:
            line = f"Cancellation reason: {reason}"
            locked.notes = f"{locked.notes}\n\n{line}" if locked.notes else line
        locked.save(using=using, update_fields=['status', 'notes', 'updated_at'])
        record_visit_action(
            locked, actor, 'cancelled',
            changes={'status': {'from': previous, 'to': 'cancelled'}},
            reason=reason, using=using,
        )
    visit.refresh_from_db(using=using)
    return locked


def reschedule_visit(visit: Visit, actor: Personnel, scheduled_at, reason: Optional[str] = None, using: Optional[str] = None) -> Visit:
    using = _alias(visit, using)
    with transaction.atomic(using=using):
        locked = _lock(visit, using)
        _check(locked, 'reschedule')
        previous = locked.scheduled_at
        locked.scheduled_at = scheduled_at
        locked.save(using=using, update_fields=['scheduled_at', 'updated_at'])
        record_visit_action(
            locked, actor, 'rescheduled',
            changes={'scheduled_at': {'from': previous, 'to': scheduled_at}},
            reason=reason, using=using,
        )
    visit.refresh_from_db(using=using)
    return locked


def mark_no_show(visit: Visit, actor: Personnel, using: Optional[str] = None) -> Visit:
    using = _alias(visit, using)
    with transaction.atomic(using=using):
        locked = _lock(visit, using)
        _check(locked, 'no_show')
        locked.status = 'no_show'
        locked.save(using=using, update_fields=['status', 'updated_at'])
        record_visit_action(
            locked, actor, 'updated',
            changes={'status': {'from': 'scheduled', 'to': 'no_show'}},
            using=using,
        )
    visit.refresh_from_db(using=using)
    return locked
