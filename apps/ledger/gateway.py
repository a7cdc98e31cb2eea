"""
Persistence gateway for the ledger.

A thin facade over the Django ORM keyed by entity id. Every call either
completes or raises; store failures surface as ``PersistenceError`` with
the database error chained, and nothing is retried.
"""

from contextlib import contextmanager
import logging
import uuid

from django.conf import settings
from django.db import DatabaseError, transaction
from django.utils import timezone

from apps.properties.models import Property
from .exceptions import PersistenceError, PropertyNotFoundError, TransactionNotFoundError
from .models import Transaction


logger = logging.getLogger(__name__)


# Columns written by a full-record replace
TRANSACTION_FIELDS = [
    'property_id',
    'description',
    'amount',
    'date',
    'type',
    'category',
    'payer',
    'status',
    'installment_group_id',
    'installment_current',
    'installment_total',
    'created_at',
]


# Namespace for the ids of seeded properties
SEED_NAMESPACE = uuid.UUID('b5f1c2a0-6d7e-4c1a-9f3e-2a8d4b6c0e17')


def seed_property_id(name):
    """
    Fixed id of a seeded default property.

    Concurrent first reads of an empty store insert the same keys, so
    only one of them creates each default.
    """
    return uuid.uuid5(SEED_NAMESPACE, name)


@contextmanager
def _store_call(operation):
    try:
        yield
    except DatabaseError as e:
        logger.exception("Store call failed: %s", operation)
        raise PersistenceError(f"{operation} failed: {e}") from e


class StorageGateway:
    """
    Reads and writes properties and transactions.

    Methods mirror the store's primitives: list, create, batch create,
    full replace and delete. Group deletes look the siblings up first and
    then remove them in one batch, inside one atomic block.
    """

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    def list_properties(self):
        """
        Return every property, seeding the defaults on an empty store.

        Returns:
            list[Property]: Ordered by creation.
        """
        with _store_call('list_properties'):
            with transaction.atomic():
                properties = list(Property.objects.all())
                if properties:
                    return properties

                names = settings.LEDGER_DEFAULT_PROPERTIES
                logger.info("Empty store, seeding default properties: %s", ', '.join(names))
                for name in names:
                    prop, _ = Property.objects.get_or_create(
                        id=seed_property_id(name),
                        defaults={'name': name}
                    )
                    properties.append(prop)
                return properties

    def create_property(self, name):
        with _store_call('create_property'):
            prop = Property.objects.create(name=name)
        logger.info("Created property %s (%s)", prop.id, prop.name)
        return prop

    def rename_property(self, property_id, name):
        """
        Raises:
            PropertyNotFoundError: If no property has this id.
        """
        with _store_call('rename_property'):
            updated = Property.objects.filter(id=property_id).update(
                name=name,
                updated_at=timezone.now()
            )
        if not updated:
            logger.warning("Rename of unknown property %s", property_id)
            raise PropertyNotFoundError(f"Property {property_id} not found")
        logger.info("Renamed property %s to %s", property_id, name)

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    def list_transactions(self):
        with _store_call('list_transactions'):
            return list(Transaction.objects.all())

    def create_transaction(self, tx):
        """Insert one record using the transaction's own id as key."""
        with _store_call('create_transaction'):
            with transaction.atomic():
                tx.save(force_insert=True)
        logger.info("Created transaction %s", tx.id)

    def create_transactions_batch(self, txs):
        """
        Insert all records or none.

        Raises:
            PersistenceError: If any insert fails; nothing is committed.
        """
        txs = list(txs)
        with _store_call('create_transactions_batch'):
            with transaction.atomic():
                Transaction.objects.bulk_create(txs)
        logger.info("Created %d transactions in one batch", len(txs))

    def update_transaction(self, tx):
        """
        Full-record replace by id. Siblings are never touched.

        Raises:
            TransactionNotFoundError: If the id does not exist in the store.
        """
        values = {name: getattr(tx, name) for name in TRANSACTION_FIELDS}
        with _store_call('update_transaction'):
            # update() skips auto_now, so the timestamp is set here
            values['updated_at'] = timezone.now()
            with transaction.atomic():
                updated = Transaction.objects.filter(id=tx.id).update(**values)
        if not updated:
            logger.warning("Update of unknown transaction %s", tx.id)
            raise TransactionNotFoundError(f"Transaction {tx.id} not found")
        tx.updated_at = values['updated_at']
        logger.info("Updated transaction %s", tx.id)

    def delete_transaction(self, transaction_id):
        """
        Raises:
            TransactionNotFoundError: If the id does not exist in the store.
        """
        with _store_call('delete_transaction'):
            with transaction.atomic():
                deleted, _ = Transaction.objects.filter(id=transaction_id).delete()
        if not deleted:
            logger.warning("Delete of unknown transaction %s", transaction_id)
            raise TransactionNotFoundError(f"Transaction {transaction_id} not found")
        logger.info("Deleted transaction %s", transaction_id)

    def delete_transactions_by_group_id(self, group_id):
        """
        Delete every record sharing ``group_id``.

        Returns:
            int: Number of records removed.
        """
        with _store_call('delete_transactions_by_group_id'):
            with transaction.atomic():
                ids = list(
                    Transaction.objects.filter(installment_group_id=group_id)
                    .values_list('id', flat=True)
                )
                deleted, _ = Transaction.objects.filter(id__in=ids).delete()
        logger.info("Deleted installment group %s (%d transactions)", group_id, deleted)
        return deleted
