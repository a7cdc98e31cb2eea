"""
Management command to create sample data for trying the API.

Usage:
    python manage.py create_sample_data [--clear]

This creates:
- The default properties (Apartamento Centro, Casa de Praia)
- Revenues and expenses in every category, paid and pending
- One renovation expense split into 10 monthly installments
"""

from datetime import timedelta
from decimal import Decimal
import logging

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction
from django.utils import timezone

from apps.ledger.coordinator import LedgerCoordinator
from apps.ledger.domain import TransactionEntry
from apps.ledger.exceptions import LedgerServiceError
from apps.ledger.models import (
    Transaction,
    TransactionType,
    TransactionCategory,
    TransactionStatus,
    Payer,
    InstallmentValueType,
)
from apps.properties.models import Property


logger = logging.getLogger(__name__)


# (days ago, description, amount, type, category, payer, status)
SAMPLE_ENTRIES = [
    (90, 'Sinal do apartamento', '45000.00', TransactionType.EXPENSE, TransactionCategory.ACQUISITION, Payer.TODOS, TransactionStatus.PAID),
    (85, 'ITBI', '6200.00', TransactionType.EXPENSE, TransactionCategory.ACQUISITION, Payer.MICHELL, TransactionStatus.PAID),
    (80, 'Escritura e registro', '3850.00', TransactionType.EXPENSE, TransactionCategory.ACQUISITION, Payer.PAULO, TransactionStatus.PAID),
    (60, 'Pintura completa', '4800.00', TransactionType.EXPENSE, TransactionCategory.RENOVATION, Payer.WILLIAM, TransactionStatus.PAID),
    (45, 'Condomínio', '780.00', TransactionType.EXPENSE, TransactionCategory.MONTHLY, Payer.CIDA, TransactionStatus.PAID),
    (15, 'Condomínio', '780.00', TransactionType.EXPENSE, TransactionCategory.MONTHLY, Payer.CIDA, TransactionStatus.PENDING),
    (10, 'IPTU', '1240.50', TransactionType.EXPENSE, TransactionCategory.MONTHLY, Payer.TODOS, TransactionStatus.PENDING),
    (20, 'Taxa de mudança', '350.00', TransactionType.EXPENSE, TransactionCategory.OTHER, Payer.PAULO, TransactionStatus.PAID),
    (30, 'Aluguel', '2500.00', TransactionType.REVENUE, TransactionCategory.REVENUE, Payer.TODOS, TransactionStatus.PAID),
    (0, 'Aluguel', '2500.00', TransactionType.REVENUE, TransactionCategory.REVENUE, Payer.TODOS, TransactionStatus.PENDING),
]


class Command(BaseCommand):
    help = 'Create sample properties and transactions'

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Clear existing data before creating new sample data',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options['clear']:
            self.stdout.write('Clearing existing data...')
            self.clear_data()

        self.stdout.write('Creating sample data...')

        try:
            ledger = LedgerCoordinator.loaded()
            properties = ledger.properties()

            created = self.create_transactions(ledger, properties[0])
            created += self.create_installments(ledger, properties[0])
            if len(properties) > 1:
                created += self.create_beach_house(ledger, properties[1])
        except LedgerServiceError as e:
            raise CommandError(str(e)) from e

        logger.info("Sample data: %d transactions", created)
        self.stdout.write(self.style.SUCCESS('Sample data created successfully!'))
        self.stdout.write('')
        self.stdout.write('Properties:')
        for prop in properties:
            self.stdout.write(f'  {prop.name} ({prop.id})')

    def clear_data(self):
        """Clear all transactions and properties."""
        Transaction.objects.all().delete()
        Property.objects.all().delete()

    def create_transactions(self, ledger, prop):
        self.stdout.write(f'  Creating transactions for {prop.name}...')
        today = timezone.localdate()

        for days_ago, description, amount, tx_type, category, payer, tx_status in SAMPLE_ENTRIES:
            ledger.create_transaction(TransactionEntry(
                property_id=prop.id,
                description=description,
                amount=Decimal(amount),
                date=today - timedelta(days=days_ago),
                type=tx_type,
                category=category,
                payer=payer,
                status=tx_status,
            ))
        return len(SAMPLE_ENTRIES)

    def create_installments(self, ledger, prop):
        self.stdout.write('  Creating installment group...')
        today = timezone.localdate()

        siblings = ledger.create_transaction(TransactionEntry(
            property_id=prop.id,
            description='Móveis planejados',
            amount=Decimal('12000.00'),
            date=today.replace(day=1) - timedelta(days=61),
            type=TransactionType.EXPENSE,
            category=TransactionCategory.RENOVATION,
            payer=Payer.MICHELL,
            status=TransactionStatus.PENDING,
            is_installment=True,
            installments_count=10,
            installment_value_type=InstallmentValueType.TOTAL,
        ))

        # First two installments already settled
        for tx in siblings[:2]:
            ledger.toggle_status(tx.id)
        return len(siblings)

    def create_beach_house(self, ledger, prop):
        self.stdout.write(f'  Creating transactions for {prop.name}...')
        today = timezone.localdate()

        ledger.create_transaction(TransactionEntry(
            property_id=prop.id,
            description='Temporada de verão',
            amount=Decimal('8400.00'),
            date=today - timedelta(days=40),
            type=TransactionType.REVENUE,
            category=TransactionCategory.REVENUE,
            payer=Payer.TODOS,
            status=TransactionStatus.PAID,
        ))
        siblings = ledger.create_transaction(TransactionEntry(
            property_id=prop.id,
            description='Seguro residencial',
            amount=Decimal('210.00'),
            date=today,
            type=TransactionType.EXPENSE,
            category=TransactionCategory.MONTHLY,
            payer=Payer.WILLIAM,
            status=TransactionStatus.PENDING,
            is_installment=True,
            installments_count=3,
            installment_value_type=InstallmentValueType.SINGLE,
        ))
        return 1 + len(siblings)
