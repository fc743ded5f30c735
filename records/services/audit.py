"""
Append-only visit audit trail.

Every visit lifecycle transition appends one :class:`VisitHistory` row
recording who acted, what changed, why and when the event happened.
Rows are never updated or deleted.  When several rows share the same
``action_date`` the primary key (insertion order) decides which is
latest.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from django.utils import timezone

from records.codecs import encode_changes
from records.models import Personnel, Visit, VisitHistory

logger = logging.getLogger(__name__)

ACTIONS = frozenset(choice for choice, _ in VisitHistory.ACTION_CHOICES)


def record_visit_action(
    visit: Visit,
    actor: Personnel,
    action: str,
    changes: Optional[Dict[str, Any]] = None,
    reason: Optional[str] = None,
    action_date=None,
    using: Optional[str] = None,
) -> VisitHistory:
    if action not in ACTIONS:
        raise ValueError(f"unknown visit history action: {action!r}")
    entry = VisitHistory.objects.using(using or visit._state.db or 'default').create(
        visit=visit,
        modified_by=actor,
        action=action,
        changes=encode_changes(changes),
        reason=reason or None,
        action_date=action_date or timezone.now(),
    )
    logger.debug("Visit %s: %s by personnel %s", visit.pk, action, actor.pk)
    return entry


def latest_visit_history(visit_id, using: Optional[str] = None) -> Optional[VisitHistory]:
    return (
        VisitHistory.objects.using(using or 'default')
        .filter(visit_id=visit_id)
        .order_by('-action_date', '-id')
        .first()
    )


def visit_timeline(visit_id, using: Optional[str] = None) -> List[VisitHistory]:
    return list(
        VisitHistory.objects.using(using or 'default')
        .filter(visit_id=visit_id)
        .select_related('modified_by__user')
        .order_by('action_date', 'id')
    )
