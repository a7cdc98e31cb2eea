"""
Application state coordinator.

``LedgerCoordinator`` owns the in-memory lists of transactions and
properties. Every mutation is persisted through the gateway first and the
cache is reconciled only after the gateway returns, so a failed call leaves
the cache exactly as it was. Readers get snapshots, never the live lists.
"""

import copy
import logging

from .domain import DeletePlan, DeleteScope, InstallmentMember, LedgerView
from .exceptions import PropertyNotFoundError, TransactionNotFoundError
from .gateway import StorageGateway
from .models import TransactionCategory, TransactionStatus, TransactionType
from .services import InstallmentService


logger = logging.getLogger(__name__)


GROUP_DELETE_MESSAGE = (
    "Esta transação faz parte de um grupo de {total} parcelas. "
    "Deseja excluir TODAS as parcelas?"
)
SINGLE_DELETE_MESSAGE = "Tem certeza que deseja excluir esta transação?"

# Views that list transactions of one category
CATEGORY_VIEWS = {
    LedgerView.TRANSACTIONS_ACQUISITION: TransactionCategory.ACQUISITION,
    LedgerView.TRANSACTIONS_RENOVATION: TransactionCategory.RENOVATION,
    LedgerView.TRANSACTIONS_MONTHLY: TransactionCategory.MONTHLY,
    LedgerView.TRANSACTIONS_OTHER: TransactionCategory.OTHER,
}

# Views that show every transaction of the property
UNFILTERED_VIEWS = {
    LedgerView.DASHBOARD,
    LedgerView.CALENDAR,
    LedgerView.PAYERS,
    LedgerView.TRANSACTIONS_ALL,
}


def sort_transactions(transactions):
    """Newest date first, then newest creation first."""
    return sorted(transactions, key=lambda t: (t.date, t.created_at), reverse=True)


class LedgerCoordinator:
    """
    Explicit state container for one ledger session.

    Pass the instance to every consumer (views, analytics, reports);
    nothing is shared implicitly.

    Example:
        >>> ledger = LedgerCoordinator.loaded()
        >>> created = ledger.create_transaction(entry)
        >>> plan = ledger.plan_delete(created[0])
        >>> plan.message
        'Esta transação faz parte de um grupo de 3 parcelas. ...'
        >>> ledger.execute_delete(plan)
    """

    def __init__(self, gateway=None):
        self.gateway = gateway or StorageGateway()
        self._transactions = []
        self._properties = []
        self.current_property_id = None

    @classmethod
    def loaded(cls, gateway=None):
        coordinator = cls(gateway)
        coordinator.load()
        return coordinator

    def load(self):
        """Reload both lists from the store."""
        transactions = self.gateway.list_transactions()
        properties = self.gateway.list_properties()

        self._transactions = sort_transactions(transactions)
        self._properties = list(properties)

        known = {p.id for p in self._properties}
        if self.current_property_id not in known:
            self.current_property_id = self._properties[0].id if self._properties else None

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    def transactions(self):
        return list(self._transactions)

    def properties(self):
        return list(self._properties)

    def get_transaction(self, transaction_id):
        for tx in self._transactions:
            if str(tx.id) == str(transaction_id):
                return tx
        raise TransactionNotFoundError(f"Transaction {transaction_id} not found")

    def get_property(self, property_id):
        for prop in self._properties:
            if str(prop.id) == str(property_id):
                return prop
        raise PropertyNotFoundError(f"Property {property_id} not found")

    def select_property(self, property_id):
        self.current_property_id = self.get_property(property_id).id

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    def add_property(self, name):
        """Create a property and make it the current one."""
        prop = self.gateway.create_property(name)
        self._properties = self._properties + [prop]
        self.current_property_id = prop.id
        return prop

    def rename_property(self, property_id, name):
        current = self.get_property(property_id)
        self.gateway.rename_property(current.id, name)

        renamed = copy.copy(current)
        renamed.name = name
        self._properties = [renamed if p.id == current.id else p for p in self._properties]
        return renamed

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    def create_transaction(self, entry, *, now=None):
        """
        Persist a form entry as one transaction or a whole installment group.

        Installment groups go through the gateway's atomic batch insert.

        Returns:
            list[Transaction]: The created records in generation order.
        """
        self.get_property(entry.property_id)
        created = InstallmentService.build_from_entry(entry, now=now)

        if entry.is_installment:
            self.gateway.create_transactions_batch(created)
            logger.info(
                "Created installment group %s with %d transactions",
                created[0].installment_group_id,
                len(created),
            )
        else:
            self.gateway.create_transaction(created[0])

        self._transactions = sort_transactions(self._transactions + created)
        return created

    def update_transaction(self, updated):
        """
        Replace one record. Siblings of an installment group are not touched.

        ``updated`` must be a copy; the cached instance is swapped out only
        after the store accepts the change.
        """
        current = self.get_transaction(updated.id)
        if updated is current:
            raise ValueError("Pass a modified copy, not the cached instance")

        self.gateway.update_transaction(updated)
        self._transactions = sort_transactions(
            [updated if t.id == current.id else t for t in self._transactions]
        )
        return updated

    def toggle_status(self, transaction_id):
        """Flip paid <-> pending for a single record."""
        current = self.get_transaction(transaction_id)
        updated = copy.copy(current)

        if current.status == TransactionStatus.PAID:
            updated.status = TransactionStatus.PENDING
        elif current.status == TransactionStatus.PENDING:
            updated.status = TransactionStatus.PAID
        else:
            raise ValueError(f"Unhandled transaction status: {current.status!r}")

        return self.update_transaction(updated)

    def plan_delete(self, transaction):
        """
        Describe what deleting ``transaction`` would remove.

        Pure query: nothing is deleted until the plan is passed to
        ``execute_delete``.
        """
        current = self.get_transaction(transaction.id)
        membership = current.get_membership()

        if isinstance(membership, InstallmentMember):
            affected = tuple(
                t.id for t in self._transactions
                if t.installment_group_id == membership.group_id
            )
            return DeletePlan(
                scope=DeleteScope.GROUP,
                transaction_id=current.id,
                group_id=membership.group_id,
                affected_ids=affected,
                message=GROUP_DELETE_MESSAGE.format(total=membership.total),
            )

        return DeletePlan(
            scope=DeleteScope.SINGLE,
            transaction_id=current.id,
            group_id=None,
            affected_ids=(current.id,),
            message=SINGLE_DELETE_MESSAGE,
        )

    def execute_delete(self, plan):
        """
        Carry out a delete plan.

        Returns:
            int: Number of records removed from the store.
        """
        if plan.scope == DeleteScope.GROUP:
            deleted = self.gateway.delete_transactions_by_group_id(plan.group_id)
            self._transactions = [
                t for t in self._transactions if t.installment_group_id != plan.group_id
            ]
            return deleted

        if plan.scope == DeleteScope.SINGLE:
            self.gateway.delete_transaction(plan.transaction_id)
            self._transactions = [t for t in self._transactions if t.id != plan.transaction_id]
            return 1

        raise ValueError(f"Unhandled delete scope: {plan.scope!r}")

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def property_transactions(self, property_id=None):
        """Transactions of ``property_id`` (defaults to the current property)."""
        property_id = property_id or self.current_property_id
        if property_id is None:
            return self.transactions()
        return [t for t in self._transactions if str(t.property_id) == str(property_id)]

    def displayed_transactions(self, view=LedgerView.TRANSACTIONS_ALL, property_id=None, status=None):
        """
        Transactions shown by ``view`` for one property.

        Args:
            view (LedgerView): Active screen.
            property_id (UUID, optional): Defaults to the current property.
            status (str, optional): Narrow to ``paid`` or ``pending``.
        """
        view = LedgerView(view)
        transactions = self.property_transactions(property_id)

        if view == LedgerView.TRANSACTIONS_REVENUE:
            transactions = [t for t in transactions if t.type == TransactionType.REVENUE]
        elif view in CATEGORY_VIEWS:
            category = CATEGORY_VIEWS[view]
            transactions = [t for t in transactions if t.category == category]
        elif view not in UNFILTERED_VIEWS:
            raise ValueError(f"Unhandled view: {view!r}")

        if status:
            transactions = [t for t in transactions if t.status == status]
        return transactions
