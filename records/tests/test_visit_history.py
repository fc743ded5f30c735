from datetime import timedelta

import pytest
from django.utils import timezone

from records.exceptions import ImmutableRecordError, VisitTransitionError
from records.models import VisitHistory
from records.services.audit import latest_visit_history, record_visit_action, visit_timeline
from records.services.visits import (
    cancel_visit,
    complete_visit,
    mark_no_show,
    reschedule_visit,
    schedule_visit,
    start_visit,
    update_visit,
)

pytestmark = pytest.mark.django_db


def actions(visit):
    return [h.action for h in visit_timeline(visit.pk)]


def test_scheduling_appends_created_row(visit, midwife):
    entries = visit_timeline(visit.pk)
    assert [e.action for e in entries] == ['created']
    assert entries[0].modified_by_id == midwife.pk
    assert entries[0].changes['status'] == 'scheduled'
    assert visit.status == 'scheduled'
    assert visit.tenant_id == visit.patient.tenant_id


def test_full_lifecycle_records_one_row_per_transition(visit, midwife):
    visit = start_visit(visit, midwife)
    assert visit.status == 'in_progress'
    assert visit.started_at is not None

    visit = complete_visit(visit, midwife, diagnosis='Grossesse évolutive normale', weight_kg='68.50', height_cm='165')
    assert visit.status == 'completed'
    assert visit.ended_at is not None
    assert visit.duration_minutes == 0
    assert str(visit.bmi) == '25.16'
    assert actions(visit) == ['created', 'updated', 'completed']

    completed = latest_visit_history(visit.pk)
    assert completed.action == 'completed'
    assert completed.changes['status'] == {'from': 'in_progress', 'to': 'completed'}
    assert completed.changes['diagnosis'] == 'Grossesse évolutive normale'


def test_refused_transition_writes_nothing(visit, midwife):
    with pytest.raises(VisitTransitionError):
        complete_visit(visit, midwife)
    visit.refresh_from_db()
    assert visit.status == 'scheduled'
    assert VisitHistory.objects.filter(visit=visit).count() == 1


def test_transition_error_is_a_value_error(visit, midwife):
    cancel_visit(visit, midwife)
    with pytest.raises(ValueError):
        start_visit(visit, midwife)


def test_cancel_appends_reason_to_notes(visit, midwife):
    visit = cancel_visit(visit, midwife, reason='Patiente indisponible')
    assert visit.status == 'cancelled'
    assert 'Cancellation reason: Patiente indisponible' in visit.notes
    last = latest_visit_history(visit.pk)
    assert last.action == 'cancelled'
    assert last.reason == 'Patiente indisponible'


def test_reschedule_records_old_and_new_time(visit, midwife):
    old = visit.scheduled_at
    new = old + timedelta(days=3)
    visit = reschedule_visit(visit, midwife, new, reason='Conflit de planning')
    assert visit.scheduled_at == new
    last = latest_visit_history(visit.pk)
    assert last.action == 'rescheduled'
    assert set(last.changes['scheduled_at']) == {'from', 'to'}


def test_update_records_field_diff(visit, midwife):
    visit = update_visit(visit, midwife, chief_complaint='<b>Douleurs</b> lombaires')
    assert visit.chief_complaint == 'Douleurs lombaires'
    last = latest_visit_history(visit.pk)
    assert last.action == 'updated'
    assert last.changes == {'chief_complaint': {'from': None, 'to': 'Douleurs lombaires'}}


def test_update_without_changes_records_nothing(visit, midwife):
    update_visit(visit, midwife, chief_complaint='Suivi')
    update_visit(visit, midwife, chief_complaint='Suivi')
    assert actions(visit) == ['created', 'updated']


def test_no_show_only_from_scheduled(visit, midwife):
    visit = mark_no_show(visit, midwife)
    assert visit.status == 'no_show'
    with pytest.raises(VisitTransitionError):
        mark_no_show(visit, midwife)


def test_schedule_rejects_personnel_from_other_tenant(patient, type_visite, other_tenant, taxonomy):
    from records.repositories import PersonnelRepository, UserRepository

    user = UserRepository().create(email='mariama.sy@almadies.sn', password='x', tenant=other_tenant)
    outsider = PersonnelRepository().create(tenant=other_tenant, user=user, type_personnel=taxonomy['midwife'])
    with pytest.raises(ValueError):
        schedule_visit(patient=patient, personnel=outsider, type_visite=type_visite, scheduled_at=timezone.now())


def test_schedule_rejects_disallowed_personnel_type(patient, doctor, taxonomy):
    from records.repositories import TypeVisiteRepository

    prenatal = TypeVisiteRepository().create(
        name='consultation_prenatal_2t', nom_type='Consultation prénatale 2ème trimestre',
        allowed_personnel_types=[taxonomy['midwife'].pk],
    )
    with pytest.raises(ValueError):
        schedule_visit(patient=patient, personnel=doctor, type_visite=prenatal, scheduled_at=timezone.now())


def test_history_rows_refuse_update_and_delete(visit):
    entry = VisitHistory.objects.get(visit=visit)
    entry.reason = 'edited'
    with pytest.raises(ImmutableRecordError):
        entry.save()
    with pytest.raises(ImmutableRecordError):
        entry.delete()
    with pytest.raises(ImmutableRecordError):
        VisitHistory.objects.filter(visit=visit).update(reason='edited')
    with pytest.raises(ImmutableRecordError):
        VisitHistory.objects.filter(visit=visit).delete()
    assert VisitHistory.objects.get(pk=entry.pk).reason is None


def test_latest_uses_action_date_not_insertion_order(visit, midwife):
    earlier = timezone.now() - timedelta(days=10)
    record_visit_action(visit, midwife, 'updated', changes={'note': 'backfilled'}, action_date=earlier)
    assert latest_visit_history(visit.pk).action == 'created'
    assert actions(visit) == ['updated', 'created']


def test_latest_breaks_ties_by_insertion_order(visit, midwife):
    moment = timezone.now() + timedelta(hours=1)
    record_visit_action(visit, midwife, 'updated', action_date=moment)
    second = record_visit_action(visit, midwife, 'rescheduled', action_date=moment)
    assert latest_visit_history(visit.pk).pk == second.pk


def test_unknown_action_is_rejected(visit, midwife):
    with pytest.raises(ValueError):
        record_visit_action(visit, midwife, 'archived')
