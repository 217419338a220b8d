"""
Management command to audit item stock against the transaction ledger.

Usage:
    python manage.py verify_ledger
    python manage.py verify_ledger --fix
"""

from django.core.management.base import BaseCommand

from opname import stock


class Command(BaseCommand):
    """Verify ledger command."""

    help = 'Cocokkan stok barang dengan riwayat transaksi'

    def add_arguments(self, parser):
        parser.add_argument(
            '--fix',
            action='store_true',
            help='Perbaiki stok barang sesuai hasil replay transaksi'
        )

    def handle(self, *args, **options):
        mismatches = stock.verify_ledger(fix=options['fix'])

        if not mismatches:
            self.stdout.write(self.style.SUCCESS('Stok seluruh barang konsisten dengan transaksi'))
            return

        for mismatch in mismatches:
            self.stdout.write(
                f'{mismatch.item.sku}: tercatat {mismatch.recorded}, '
                f'replay {mismatch.replayed} (selisih {mismatch.diff:+d})'
            )

        if options['fix']:
            self.stdout.write(self.style.SUCCESS(f'{len(mismatches)} barang diperbaiki'))
        else:
            self.stdout.write(self.style.WARNING(f'{len(mismatches)} barang tidak konsisten'))
