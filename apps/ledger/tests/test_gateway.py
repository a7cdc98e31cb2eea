import pytest
import uuid
from decimal import Decimal
from datetime import date
from unittest import mock
from django.db import DatabaseError
from apps.properties.models import Property
from apps.ledger.exceptions import (
    PersistenceError,
    PropertyNotFoundError,
    TransactionNotFoundError,
)
from apps.ledger.gateway import StorageGateway, seed_property_id
from apps.ledger.models import Transaction, TransactionStatus


@pytest.fixture
def gateway():
    return StorageGateway()


# =============================================================================
# Properties
# =============================================================================

@pytest.mark.django_db
class TestPropertyStore:
    """Tests for property operations of StorageGateway"""

    def test_empty_store_seeds_defaults(self, gateway):
        properties = gateway.list_properties()

        assert [p.name for p in properties] == ['Apartamento Centro', 'Casa de Praia']
        assert Property.objects.count() == 2

    def test_seeding_happens_once(self, gateway):
        gateway.list_properties()
        properties = gateway.list_properties()

        assert len(properties) == 2
        assert Property.objects.count() == 2

    def test_concurrent_seed_does_not_duplicate(self, gateway):
        """A second reader that also saw an empty store reuses the seeded rows."""
        seeded = gateway.list_properties()

        with mock.patch.object(Property.objects, 'all', return_value=Property.objects.none()):
            again = gateway.list_properties()

        assert [p.id for p in again] == [p.id for p in seeded]
        assert Property.objects.count() == 2

    def test_seeded_ids_are_fixed(self, gateway):
        properties = gateway.list_properties()
        assert properties[0].id == seed_property_id('Apartamento Centro')

    def test_existing_properties_are_not_seeded(self, gateway, ledger_property):
        properties = gateway.list_properties()
        assert properties == [ledger_property]

    def test_seed_names_follow_settings(self, gateway, settings):
        settings.LEDGER_DEFAULT_PROPERTIES = ['Sítio']
        assert [p.name for p in gateway.list_properties()] == ['Sítio']

    def test_create_property(self, gateway):
        prop = gateway.create_property('Loja Centro')
        assert Property.objects.get(id=prop.id).name == 'Loja Centro'

    def test_rename_property(self, gateway, ledger_property):
        gateway.rename_property(ledger_property.id, 'Apartamento Jardins')

        ledger_property.refresh_from_db()
        assert ledger_property.name == 'Apartamento Jardins'

    def test_rename_unknown_property(self, gateway):
        with pytest.raises(PropertyNotFoundError):
            gateway.rename_property(uuid.uuid4(), 'Nada')


# =============================================================================
# Transactions
# =============================================================================

@pytest.mark.django_db
class TestTransactionStore:
    """Tests for transaction operations of StorageGateway"""

    def test_list_transactions(self, gateway, make_transaction):
        tx = make_transaction()
        assert gateway.list_transactions() == [tx]

    def test_create_uses_own_id(self, gateway, ledger_property):
        tx = Transaction(
            id=uuid.uuid4(),
            property=ledger_property,
            description='Luz',
            amount=Decimal('180.00'),
            date=date(2024, 2, 5),
            type='expense',
            category='monthly',
        )
        gateway.create_transaction(tx)

        assert Transaction.objects.filter(id=tx.id).exists()

    def test_create_with_existing_id_fails(self, gateway, make_transaction):
        existing = make_transaction()
        duplicate = Transaction.objects.get(id=existing.id)

        with pytest.raises(PersistenceError):
            gateway.create_transaction(duplicate)

    def test_batch_creates_every_record(self, gateway, ledger_property, make_entry):
        from apps.ledger.services import InstallmentService
        siblings = InstallmentService.build_from_entry(
            make_entry(is_installment=True, installments_count=4)
        )
        gateway.create_transactions_batch(siblings)

        assert Transaction.objects.filter(
            installment_group_id=siblings[0].installment_group_id
        ).count() == 4

    def test_batch_is_all_or_nothing(self, gateway, make_entry):
        """A failing record rolls back the whole batch."""
        from apps.ledger.services import InstallmentService
        siblings = InstallmentService.build_from_entry(
            make_entry(is_installment=True, installments_count=3)
        )
        siblings[2].id = siblings[0].id  # primary key clash inside the batch

        with pytest.raises(PersistenceError):
            gateway.create_transactions_batch(siblings)

        assert Transaction.objects.count() == 0

    def test_update_replaces_record(self, gateway, make_transaction):
        tx = make_transaction()
        tx.description = 'Condomínio março'
        tx.status = TransactionStatus.PAID
        gateway.update_transaction(tx)

        stored = Transaction.objects.get(id=tx.id)
        assert stored.description == 'Condomínio março'
        assert stored.status == TransactionStatus.PAID

    def test_update_unknown_transaction(self, gateway, make_transaction):
        tx = make_transaction()
        Transaction.objects.filter(id=tx.id).delete()

        with pytest.raises(TransactionNotFoundError):
            gateway.update_transaction(tx)

    def test_delete_transaction(self, gateway, make_transaction):
        tx = make_transaction()
        gateway.delete_transaction(tx.id)
        assert not Transaction.objects.filter(id=tx.id).exists()

    def test_delete_unknown_transaction(self, gateway):
        with pytest.raises(TransactionNotFoundError):
            gateway.delete_transaction(uuid.uuid4())

    def test_delete_by_group_removes_all_siblings(self, gateway, installment_group, make_transaction):
        unrelated = make_transaction()
        group_id = installment_group[0].installment_group_id

        deleted = gateway.delete_transactions_by_group_id(group_id)

        assert deleted == 3
        assert not Transaction.objects.filter(installment_group_id=group_id).exists()
        assert Transaction.objects.filter(id=unrelated.id).exists()

    def test_delete_unknown_group(self, gateway):
        assert gateway.delete_transactions_by_group_id(uuid.uuid4()) == 0


# =============================================================================
# Failures
# =============================================================================

@pytest.mark.django_db
class TestStoreFailures:
    """Database errors surface as PersistenceError."""

    def test_list_failure_is_wrapped(self, gateway):
        with mock.patch.object(Transaction.objects, 'all', side_effect=DatabaseError('down')):
            with pytest.raises(PersistenceError) as exc_info:
                gateway.list_transactions()

        assert isinstance(exc_info.value.__cause__, DatabaseError)

    def test_delete_failure_is_wrapped(self, gateway, make_transaction):
        tx = make_transaction()
        with mock.patch.object(Transaction.objects, 'filter', side_effect=DatabaseError('down')):
            with pytest.raises(PersistenceError):
                gateway.delete_transaction(tx.id)

        assert Transaction.objects.filter(id=tx.id).exists()
