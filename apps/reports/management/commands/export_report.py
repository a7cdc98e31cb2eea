"""
Management command to write a property's PDF report to disk.

Usage:
    python manage.py export_report --property <uuid> [--output <path>]

Without --output the file is written to the current directory as
relatorio_<name>_<timestamp>.pdf.
"""

from pathlib import Path
import logging

from django.core.management.base import BaseCommand, CommandError

from apps.ledger.coordinator import LedgerCoordinator
from apps.ledger.exceptions import LedgerServiceError
from apps.reports.pdf import build_property_report, report_filename


logger = logging.getLogger(__name__)


class Command(BaseCommand):
    help = "Export a property's transactions as a PDF report"

    def add_arguments(self, parser):
        parser.add_argument(
            '--property',
            required=True,
            help='ID of the property to export',
        )
        parser.add_argument(
            '--output',
            help='Destination file (defaults to relatorio_<name>_<timestamp>.pdf)',
        )

    def handle(self, *args, **options):
        try:
            ledger = LedgerCoordinator.loaded()
            prop = ledger.get_property(options['property'])
        except LedgerServiceError as e:
            raise CommandError(str(e)) from e

        transactions = ledger.property_transactions(prop.id)
        pdf = build_property_report(prop, transactions)

        output = Path(options['output'] or report_filename(prop))
        output.write_bytes(pdf)

        logger.info("Exported report of property %s to %s", prop.id, output)
        self.stdout.write(self.style.SUCCESS(
            f'Report for {prop.name} written to {output} ({len(transactions)} transactions)'
        ))
