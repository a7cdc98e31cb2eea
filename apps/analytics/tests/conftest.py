import pytest
import uuid
from decimal import Decimal
from datetime import date
from rest_framework.test import APIClient
from apps.properties.models import Property
from apps.ledger.models import Transaction


@pytest.fixture
def api_client():
    """Return an API client (the API has no authentication)."""
    return APIClient()


@pytest.fixture
def build_transaction():
    """Factory for unsaved transactions, for pure aggregation tests."""
    property_id = uuid.uuid4()

    def _build(**overrides):
        fields = {
            'property_id': property_id,
            'description': 'Condomínio',
            'amount': Decimal('100.00'),
            'date': date(2024, 1, 10),
            'type': 'expense',
            'category': 'monthly',
            'payer': 'Cida',
            'status': 'pending',
        }
        fields.update(overrides)
        if isinstance(fields['amount'], (int, str)):
            fields['amount'] = Decimal(fields['amount'])
        return Transaction(**fields)
    return _build


@pytest.fixture
def apartment(db):
    """Create and return the first property."""
    return Property.objects.create(name='Apartamento Centro')


@pytest.fixture
def beach_house(db, apartment):
    """Create and return a second property."""
    return Property.objects.create(name='Casa de Praia')


@pytest.fixture
def make_transaction(db, apartment):
    """Factory creating a saved transaction on the apartment."""
    def _make(**overrides):
        fields = {
            'property': apartment,
            'description': 'Condomínio',
            'amount': Decimal('100.00'),
            'date': date(2024, 1, 10),
            'type': 'expense',
            'category': 'monthly',
            'payer': 'Cida',
            'status': 'pending',
        }
        fields.update(overrides)
        return Transaction.objects.create(**fields)
    return _make
