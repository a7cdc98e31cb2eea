"""
Analytics Module
=================

This module provides the aggregations behind the dashboard, the calendar
and the payers screen. Every method is a pure function over an iterable of
transactions; property scoping happens before the call (see
``LedgerCoordinator.property_transactions``).

Classes:
    LedgerAnalytics: Static methods for balances, totals and the calendar.

Key Features:
    - Paid and pending balances
    - Paid/pending totals per category and the paid expense breakdown
    - Calendar month grid with per-day status (overdue, paid, pending)
    - Paid expense totals per payer
    - Paid-details and day-details lists

Example:
    Dashboard cards for the current property::

        from apps.analytics.analytics import LedgerAnalytics

        transactions = ledger.property_transactions()
        print(LedgerAnalytics.paid_balance(transactions))
        print(LedgerAnalytics.pending_balance(transactions))

Note:
    This module is read-only and doesn't modify any data. All methods
    are static and can be called without instantiation.
"""

import calendar
from datetime import date
from decimal import Decimal

from django.db import models
from django.utils import timezone

from apps.ledger.formatters import format_date, month_name, shift_month, WEEKDAY_NAMES
from apps.ledger.models import (
    CATEGORY_COLORS,
    Payer,
    TransactionCategory,
    TransactionStatus,
    TransactionType,
)
from .exceptions import InvalidMonthError, MissingParameterError


ZERO = Decimal('0.00')

# Colours assigned to payer chart slices, in slice order
PAYER_CHART_COLORS = ['#3b82f6', '#10b981', '#f59e0b', '#8b5cf6', '#ec4899']


class DayStatus(models.TextChoices):
    OVERDUE = 'overdue', 'Atrasado'
    PAID = 'paid', 'Pago'
    PENDING = 'pending', 'Pendente'


def _total(transactions):
    return sum((t.amount for t in transactions), ZERO)


class LedgerAnalytics:
    """
    Aggregations over in-memory transaction lists.

    Methods:
        paid_balance: Paid revenue minus paid expense.
        pending_balance: Signed sum of pending transactions.
        category_totals: Paid/pending totals for every category.
        expense_breakdown: Paid expenses per category, for the pie chart.
        dashboard: Everything the dashboard cards show.
        day_status: Calendar status of one date.
        calendar_month: Sunday-first month grid.
        day_details: Transactions of one date.
        payer_totals: Paid expenses per payer.
        payer_chart: Payer totals without ``Todos`` and zero slices.
        paid_details: Paid transactions, optionally of one category.

    Note:
        All methods return plain dictionaries, lists and Decimals. Calendar
        and detail lists carry the transaction instances themselves;
        views serialize them.
    """

    @staticmethod
    def paid_balance(transactions):
        """
        Sum of paid revenue minus sum of paid expense.

        Example:
            Paid expense 100, paid revenue 300, pending expense 50::

                LedgerAnalytics.paid_balance(transactions)  # Decimal('200.00')
        """
        balance = ZERO
        for t in transactions:
            if t.status != TransactionStatus.PAID:
                continue
            balance += t.get_signed_amount()
        return balance

    @staticmethod
    def pending_balance(transactions):
        """Sum over pending transactions of +amount (revenue) / -amount (expense)."""
        balance = ZERO
        for t in transactions:
            if t.status != TransactionStatus.PENDING:
                continue
            balance += t.get_signed_amount()
        return balance

    @staticmethod
    def category_totals(transactions):
        """
        Paid and pending totals for every category, in category order.

        Returns:
            list[dict]: ``{'category', 'label', 'color', 'paid', 'pending'}``.
            Categories without transactions are listed with zeros.
        """
        transactions = list(transactions)
        totals = []
        for category in TransactionCategory:
            in_category = [t for t in transactions if t.category == category]
            totals.append({
                'category': category.value,
                'label': category.label,
                'color': CATEGORY_COLORS[category],
                'paid': _total(t for t in in_category if t.status == TransactionStatus.PAID),
                'pending': _total(t for t in in_category if t.status == TransactionStatus.PENDING),
            })
        return totals

    @staticmethod
    def expense_breakdown(transactions):
        """
        Paid expenses summed per category. Zero-value categories are omitted.

        Returns:
            list[dict]: ``{'category', 'label', 'color', 'value'}``.
        """
        grouped = {}
        for t in transactions:
            if t.type == TransactionType.EXPENSE and t.status == TransactionStatus.PAID:
                key = str(t.category)
                grouped[key] = grouped.get(key, ZERO) + t.amount

        breakdown = []
        for category in TransactionCategory:
            value = grouped.get(category.value, ZERO)
            if value > 0:
                breakdown.append({
                    'category': category.value,
                    'label': category.label,
                    'color': CATEGORY_COLORS[category],
                    'value': value,
                })
        return breakdown

    @staticmethod
    def dashboard(transactions):
        """
        Cards and charts of the dashboard.

        Returns:
            dict: {
                'paid_revenue': Decimal,
                'paid_expense': Decimal,
                'paid_balance': Decimal,
                'pending_balance': Decimal,
                'transaction_count': int,
                'categories': list (see ``category_totals``),
                'expense_breakdown': list (see ``expense_breakdown``),
            }
        """
        transactions = list(transactions)
        paid = [t for t in transactions if t.status == TransactionStatus.PAID]

        return {
            'paid_revenue': _total(t for t in paid if t.type == TransactionType.REVENUE),
            'paid_expense': _total(t for t in paid if t.type == TransactionType.EXPENSE),
            'paid_balance': LedgerAnalytics.paid_balance(transactions),
            'pending_balance': LedgerAnalytics.pending_balance(transactions),
            'transaction_count': len(transactions),
            'categories': LedgerAnalytics.category_totals(transactions),
            'expense_breakdown': LedgerAnalytics.expense_breakdown(transactions),
        }

    @staticmethod
    def day_status(transactions, day, today=None):
        """
        Calendar status of ``day``.

        ``overdue`` when a pending expense on that day is dated before
        ``today``; otherwise ``paid`` when every transaction of the day is
        paid, else ``pending``. Days without transactions have no status.

        Args:
            transactions (iterable): Transactions of the property.
            day (date): The calendar day.
            today (date, optional): Defaults to ``timezone.localdate()``.

        Returns:
            str | None: A ``DayStatus`` value or None.
        """
        if today is None:
            today = timezone.localdate()

        of_day = [t for t in transactions if t.date == day]
        if not of_day:
            return None

        has_overdue = any(
            t.status == TransactionStatus.PENDING
            and t.type == TransactionType.EXPENSE
            and t.date < today
            for t in of_day
        )
        if has_overdue:
            return DayStatus.OVERDUE

        if all(t.status == TransactionStatus.PAID for t in of_day):
            return DayStatus.PAID
        return DayStatus.PENDING

    @staticmethod
    def calendar_month(transactions, year, month, today=None):
        """
        Sunday-first grid of one month.

        Leading slots before the first weekday are ``None``; every day of
        the month gets a cell with its date, status and transactions.

        Returns:
            dict: {
                'year': int, 'month': int,
                'title': str,            # e.g. 'janeiro de 2024'
                'weekdays': list[str],   # Dom .. Sáb
                'previous': {'year', 'month'},
                'next': {'year', 'month'},
                'days': list[dict | None],
            }

        Raises:
            InvalidMonthError: If month is outside 1-12.
        """
        if not 1 <= month <= 12:
            raise InvalidMonthError(f"Invalid month: {month}. Use 1-12")
        if today is None:
            today = timezone.localdate()

        transactions = list(transactions)
        by_day = {}
        for t in transactions:
            if t.date.year == year and t.date.month == month:
                by_day.setdefault(t.date, []).append(t)

        first = date(year, month, 1)
        # date.weekday() is Monday=0; the grid starts on Sunday
        leading = (first.weekday() + 1) % 7
        days = [None] * leading

        for day_number in range(1, calendar.monthrange(year, month)[1] + 1):
            day = date(year, month, day_number)
            of_day = by_day.get(day, [])
            days.append({
                'date': day,
                'day': day_number,
                'status': LedgerAnalytics.day_status(of_day, day, today=today),
                'transactions': of_day,
            })

        prev_year, prev_month = shift_month(year, month, -1)
        next_year, next_month = shift_month(year, month, 1)
        return {
            'year': year,
            'month': month,
            'title': month_name(year, month),
            'weekdays': WEEKDAY_NAMES,
            'previous': {'year': prev_year, 'month': prev_month},
            'next': {'year': next_year, 'month': next_month},
            'days': days,
        }

    @staticmethod
    def day_details(transactions, day):
        """Transactions of one date, titled ``Transações do dia dd/mm/yyyy``."""
        if day is None:
            raise MissingParameterError("A date is required")
        of_day = [t for t in transactions if t.date == day]
        return {
            'title': f"Transações do dia {format_date(day)}",
            'date': day,
            'total': _total(of_day),
            'transactions': of_day,
        }

    @staticmethod
    def payer_totals(transactions):
        """
        Paid expenses summed per payer, in payer order.

        ``Todos`` only accumulates transactions explicitly tagged ``Todos``;
        it is not a sum over the other payers.

        Returns:
            list[dict]: ``{'payer', 'value'}`` for every payer.
        """
        totals = {payer: ZERO for payer in Payer}
        for t in transactions:
            if t.type == TransactionType.EXPENSE and t.status == TransactionStatus.PAID:
                payer = Payer(t.payer)
                totals[payer] += t.amount
        return [{'payer': payer.value, 'value': value} for payer, value in totals.items()]

    @staticmethod
    def payer_chart(transactions):
        """Pie slices: payer totals without ``Todos`` and zero values."""
        slices = [
            entry for entry in LedgerAnalytics.payer_totals(transactions)
            if entry['payer'] != Payer.TODOS and entry['value'] > 0
        ]
        for index, entry in enumerate(slices):
            entry['color'] = PAYER_CHART_COLORS[index % len(PAYER_CHART_COLORS)]
        return slices

    @staticmethod
    def paid_details(transactions, category=None):
        """
        Paid transactions, all of them or one category's.

        Returns:
            dict: ``{'title', 'category', 'total', 'transactions'}``. The
            title is ``Extrato Realizado (Geral)`` or ``Detalhes: <LABEL>``.
        """
        paid = [t for t in transactions if t.status == TransactionStatus.PAID]

        if category is None:
            title = 'Extrato Realizado (Geral)'
        else:
            category = TransactionCategory(category)
            paid = [t for t in paid if t.category == category]
            title = f"Detalhes: {category.label}"

        return {
            'title': title,
            'category': category.value if category is not None else None,
            'total': _total(paid),
            'transactions': paid,
        }
