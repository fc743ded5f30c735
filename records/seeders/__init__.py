"""
Database seeders, run in dependency order by :func:`run_all`.
"""
from __future__ import annotations

import logging
import time

from django.db import transaction

from .base import BaseSeeder, SeedReport
from .demo import MedicalHistoriesSeeder, PatientQrSeeder, PeopleSeeder, SuperAdminsSeeder, VisitsSeeder
from .rbac import RbacSeeder, UserRolesSeeder
from .reference import TaxonomySeeder, TenantsSeeder, TypeVisiteSeeder

logger = logging.getLogger(__name__)

SEEDERS = (
    TenantsSeeder,
    TaxonomySeeder,
    TypeVisiteSeeder,
    RbacSeeder,
    PeopleSeeder,
    SuperAdminsSeeder,
    UserRolesSeeder,
    VisitsSeeder,
    MedicalHistoriesSeeder,
    PatientQrSeeder,
)


def run_all(using: str | None = None, seeders=SEEDERS, **options) -> SeedReport:
    """Run ``seeders`` in order; a failing one is logged and the next one still runs.

    ``options`` reach every seeder (the QR seeder reads ``renderer``).
    """
    report = SeedReport()
    for seeder_class in seeders:
        seeder = seeder_class(using=using, report=report, **options)
        started = time.monotonic()
        try:
            with transaction.atomic(using=seeder.using):
                seeder.run()
        except Exception as exc:
            logger.warning("Seeder %s failed: %s", seeder.name, exc)
            report.failed.append(seeder.name)
            continue
        elapsed = (time.monotonic() - started) * 1000
        logger.info("Seeder %s completed: %d created in %.0f ms", seeder.name, seeder.created, elapsed)
        report.succeeded.append(seeder.name)
    return report


__all__ = ['BaseSeeder', 'SEEDERS', 'SeedReport', 'run_all']
