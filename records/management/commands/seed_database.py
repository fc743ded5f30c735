"""
Management command to populate the database with the demo dataset.
"""
from django.core.management.base import BaseCommand
from django.db import DEFAULT_DB_ALIAS

from records.seeders import SEEDERS, run_all


class Command(BaseCommand):
    help = 'Seed tenants, the personnel taxonomy, visit types and demo records'

    def add_arguments(self, parser):
        parser.add_argument('--database', default=DEFAULT_DB_ALIAS, help='Database alias to seed.')
        parser.add_argument(
            '--only', nargs='+', metavar='NAME',
            help='Run only these seeders: ' + ', '.join(s.name for s in SEEDERS),
        )

    def handle(self, *args, **options):
        seeders = SEEDERS
        if options['only']:
            wanted = set(options['only'])
            seeders = tuple(s for s in SEEDERS if s.name in wanted)
        self.stdout.write('Seeding database...')
        report = run_all(using=options['database'], seeders=seeders)

        self.stdout.write(f"Successful: {len(report.succeeded)}/{report.total}")
        if report.record_errors:
            self.stdout.write(self.style.WARNING(f"Skipped records: {report.record_errors}"))
        if report.failed:
            self.stdout.write(self.style.ERROR(f"Failed: {', '.join(report.failed)}"))
        else:
            self.stdout.write(self.style.SUCCESS('Database seeding completed.'))
