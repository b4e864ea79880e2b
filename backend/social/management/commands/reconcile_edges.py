"""
Repair edges whose two sides disagree.

Usage:
    python manage.py reconcile_edges             # repair
    python manage.py reconcile_edges --dry-run   # report only
"""

from django.core.management.base import BaseCommand

from social.reconcile import reconcile


class Command(BaseCommand):
    help = 'Detect and repair asymmetric edges and drifted like/dislike counters'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Report what would change without saving'
        )

    def handle(self, *args, **options):
        report = reconcile(dry_run=options['dry_run'])

        if report.clean:
            self.stdout.write(self.style.SUCCESS('All edges are consistent.'))
            return

        for repair in report.repairs:
            self.stdout.write(f'  - {repair}')

        if report.dry_run:
            self.stdout.write(self.style.WARNING(
                f'{len(report.repairs)} repairs needed (dry run, nothing saved).'
            ))
        else:
            self.stdout.write(self.style.SUCCESS(
                f'{len(report.repairs)} repairs applied to {report.rows_saved} rows.'
            ))
