"""
Seeder plumbing.

Seeding is best effort: a record that fails is logged as a warning and
skipped, and a seeder that fails outright does not stop the ones after
it.  Each record is written inside its own savepoint so one failure
leaves the surrounding transaction usable.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field

from django.db import DEFAULT_DB_ALIAS, transaction

logger = logging.getLogger(__name__)


@dataclass
class SeedReport:
    succeeded: list = field(default_factory=list)
    failed: list = field(default_factory=list)
    record_errors: int = 0

    @property
    def total(self) -> int:
        return len(self.succeeded) + len(self.failed)


class BaseSeeder:
    name = 'base'

    def __init__(self, using: str | None = None, report: SeedReport | None = None, **options) -> None:
        self.using = using or DEFAULT_DB_ALIAS
        self.report = report if report is not None else SeedReport()
        self.options = options
        self.created = 0

    def run(self) -> None:
        raise NotImplementedError

    def attempt(self, label: str, func, *args, **kwargs):
        """Run ``func`` in a savepoint; on failure log, count and return None."""
        try:
            with transaction.atomic(using=self.using):
                return func(*args, **kwargs)
        except Exception as exc:
            logger.warning("%s: skipped %s: %s", self.name, label, exc)
            self.report.record_errors += 1
            return None
