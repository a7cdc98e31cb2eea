import pytest
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
def apartment(db):
    """Create and return a property."""
    return Property.objects.create(name='Apartamento Centro')


@pytest.fixture
def beach_house(db, apartment):
    """Create and return a second property."""
    return Property.objects.create(name='Casa de Praia')


@pytest.fixture
def make_transaction(db):
    """Factory creating a saved expense on ``prop``."""
    def _make(prop, **overrides):
        fields = {
            'property': prop,
            'description': 'Condomínio',
            'amount': Decimal('100.00'),
            'date': date(2024, 1, 10),
            'type': 'expense',
            'category': 'monthly',
        }
        fields.update(overrides)
        return Transaction.objects.create(**fields)
    return _make
