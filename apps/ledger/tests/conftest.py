import pytest
from decimal import Decimal
from datetime import date
from rest_framework.test import APIClient
from apps.properties.models import Property
from apps.ledger.coordinator import LedgerCoordinator
from apps.ledger.domain import TransactionEntry
from apps.ledger.models import (
    Transaction,
    TransactionType,
    TransactionCategory,
    TransactionStatus,
    Payer,
)
from apps.ledger.services import InstallmentService


@pytest.fixture
def api_client():
    """Return an API client (the API has no authentication)."""
    return APIClient()


@pytest.fixture
def ledger_property(db):
    """Create and return the main test property."""
    return Property.objects.create(name='Apartamento Centro')


@pytest.fixture
def other_property(db, ledger_property):
    """Create and return a second property."""
    return Property.objects.create(name='Casa de Praia')


@pytest.fixture
def make_transaction(db, ledger_property):
    """Factory creating a saved standalone transaction with sensible defaults."""
    def _make(**overrides):
        fields = {
            'property': ledger_property,
            'description': 'Condomínio',
            'amount': Decimal('100.00'),
            'date': date(2024, 1, 10),
            'type': TransactionType.EXPENSE,
            'category': TransactionCategory.MONTHLY,
            'payer': Payer.CIDA,
            'status': TransactionStatus.PENDING,
        }
        fields.update(overrides)
        return Transaction.objects.create(**fields)
    return _make


@pytest.fixture
def installment_group(db, ledger_property):
    """Create and return a saved group of 3 renovation installments."""
    siblings = InstallmentService.generate(
        template={
            'property_id': ledger_property.id,
            'description': 'Reforma cozinha',
            'type': TransactionType.EXPENSE,
            'category': TransactionCategory.RENOVATION,
            'payer': Payer.MICHELL,
            'status': TransactionStatus.PENDING,
        },
        count=3,
        start_date=date(2024, 1, 31),
        amount=Decimal('400.00'),
    )
    Transaction.objects.bulk_create(siblings)
    return siblings


@pytest.fixture
def make_entry(ledger_property):
    """Factory returning a form entry for the main property."""
    def _make(**overrides):
        fields = {
            'property_id': ledger_property.id,
            'description': 'IPTU',
            'amount': Decimal('1200.00'),
            'date': date(2024, 1, 31),
            'type': TransactionType.EXPENSE,
            'category': TransactionCategory.MONTHLY,
            'payer': Payer.TODOS,
            'status': TransactionStatus.PENDING,
        }
        fields.update(overrides)
        return TransactionEntry(**fields)
    return _make


@pytest.fixture
def ledger(db, ledger_property):
    """Return a coordinator loaded from the test database."""
    return LedgerCoordinator.loaded()
