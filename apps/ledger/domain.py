"""
Plain domain values used by the ledger.

These are pure data classes, independent of the database schema. The
Transaction model exposes its installment columns through
``Standalone`` / ``InstallmentMember`` so callers match on the variant
instead of testing nullable fields.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional
import uuid

from django.db import models


@dataclass(frozen=True)
class Standalone:
    """A transaction that belongs to no installment group."""

    def label(self) -> str:
        return ''


@dataclass(frozen=True)
class InstallmentMember:
    """Position of a transaction inside an installment group."""

    group_id: uuid.UUID
    current: int
    total: int

    def label(self) -> str:
        return f"({self.current}/{self.total})"


class DeleteScope(models.TextChoices):
    SINGLE = 'single', 'Single'
    GROUP = 'group', 'Group'


@dataclass(frozen=True)
class DeletePlan:
    """
    Result of the query phase of a delete.

    Callers inspect ``scope``, ``affected_ids`` and ``message`` (the
    confirmation text shown to the user) before handing the plan back
    for execution.
    """

    scope: str
    transaction_id: uuid.UUID
    group_id: Optional[uuid.UUID]
    affected_ids: tuple
    message: str


class LedgerView(models.TextChoices):
    """Screens of the ledger; the label is the screen title."""
    DASHBOARD = 'dashboard', 'Dashboard'
    CALENDAR = 'calendar', 'Calendário'
    PAYERS = 'payers', 'Pagadores'
    TRANSACTIONS_REVENUE = 'transactions_revenue', 'Receitas'
    TRANSACTIONS_ACQUISITION = 'transactions_acquisition', 'Despesas de Aquisição'
    TRANSACTIONS_RENOVATION = 'transactions_renovation', 'Despesas de Reforma'
    TRANSACTIONS_MONTHLY = 'transactions_monthly', 'Despesas Mensais'
    TRANSACTIONS_OTHER = 'transactions_other', 'Outras Despesas'
    TRANSACTIONS_ALL = 'transactions_all', 'Todas as Transações'


@dataclass
class TransactionEntry:
    """
    What the entry form submits.

    When ``is_installment`` is set the entry expands into
    ``installments_count`` siblings; ``installment_value_type`` tells
    whether ``amount`` is the group total or the per-installment value.
    """

    property_id: uuid.UUID
    description: str
    amount: Decimal
    date: date
    type: str
    category: str
    payer: str
    status: str
    is_installment: bool = False
    installments_count: int = 2
    installment_value_type: str = 'total'

    def template(self) -> dict:
        """Fields shared by every transaction generated from this entry."""
        return {
            'property_id': self.property_id,
            'description': self.description.strip(),
            'type': self.type,
            'category': self.category,
            'payer': self.payer,
            'status': self.status,
        }
