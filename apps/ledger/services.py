"""
Ledger Services Module
======================

This module provides the business logic for installment plans: entry
validation, per-installment amount resolution and the expansion of one
entry into N dated sibling transactions.

Classes:
    InstallmentService: Validates entries and generates installment groups.

Example:
    Splitting a R$ 1.200,00 purchase into 3 monthly installments::

        from apps.ledger.services import InstallmentService
        from decimal import Decimal

        per_unit = InstallmentService.resolve_amount(
            Decimal('1200.00'), 3, InstallmentValueType.TOTAL
        )
        siblings = InstallmentService.generate(
            template=entry.template(),
            count=3,
            start_date=date(2024, 1, 31),
            amount=per_unit,
        )

        # Dates: 2024-01-31, 2024-03-02, 2024-03-31; 400.00 each
        for tx in siblings:
            print(tx.date, tx.amount, tx.get_membership().label())
"""

from datetime import timedelta
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from django.conf import settings
from django.utils import timezone

from .domain import InstallmentMember
from .exceptions import (
    ValidationFailedError,
    InvalidAmountError,
    InvalidInstallmentError,
)
from .formatters import add_months, generate_id
from .models import Transaction, InstallmentValueType


CENT = Decimal('0.01')


class InstallmentService:
    """
    Service for expanding an entry into an installment group.

    Resolving the per-installment amount (dividing a declared total) is
    kept apart from generation: the generator never divides, so every
    sibling of a group carries exactly the amount it was given.

    Methods:
        validate_entry: Reject entries without description or amount.
        resolve_amount: Per-installment amount from the entered value.
        generate: Expand a template into N unsaved sibling transactions.
        build_from_entry: Validate, resolve and build from a form entry.
    """

    @staticmethod
    def max_installments():
        return getattr(settings, 'LEDGER_MAX_INSTALLMENTS', 60)

    @staticmethod
    def validate_amount(amount):
        """
        Return ``amount`` as a Decimal, or raise if it is not usable.

        Raises:
            InvalidAmountError: If the value is not a finite number > 0.
        """
        try:
            value = Decimal(str(amount))
        except (InvalidOperation, TypeError, ValueError):
            raise InvalidAmountError(f"Invalid amount: {amount!r}")

        if not value.is_finite() or value <= 0:
            raise InvalidAmountError(f"Amount must be a finite positive number, got {amount!r}")
        return value

    @staticmethod
    def validate_count(count):
        """
        Raises:
            InvalidInstallmentError: If count is not an integer in
                ``[2, LEDGER_MAX_INSTALLMENTS]``.
        """
        if isinstance(count, bool) or not isinstance(count, int):
            raise InvalidInstallmentError(f"Installment count must be an integer, got {count!r}")

        limit = InstallmentService.max_installments()
        if count < 2 or count > limit:
            raise InvalidInstallmentError(
                f"Installment count must be between 2 and {limit}, got {count}"
            )

    @staticmethod
    def validate_entry(entry):
        """
        Check the fields the entry form requires.

        Args:
            entry (TransactionEntry): The submitted entry.

        Raises:
            ValidationFailedError: If description or amount is missing.
            InvalidAmountError: If the amount is not a positive number.
            InvalidInstallmentError: If an installment entry has a bad count.
        """
        if not entry.description or not entry.description.strip():
            raise ValidationFailedError("Description is required")
        if entry.amount is None or entry.amount == '':
            raise ValidationFailedError("Amount is required")

        InstallmentService.validate_amount(entry.amount)
        if entry.is_installment:
            InstallmentService.validate_count(entry.installments_count)

    @staticmethod
    def resolve_amount(amount, count, value_type):
        """
        Compute the amount each installment carries.

        Args:
            amount (Decimal): Value typed into the form.
            count (int): Number of installments.
            value_type (str): ``InstallmentValueType.TOTAL`` when ``amount``
                is the group total, ``SINGLE`` when it is already the
                per-installment value.

        Returns:
            Decimal: ``amount / count`` rounded half-up to cents for
            ``total``, ``amount`` unchanged for ``single``.

        Example:
            >>> InstallmentService.resolve_amount(Decimal('100'), 3, 'total')
            Decimal('33.33')
            >>> InstallmentService.resolve_amount(Decimal('100'), 3, 'single')
            Decimal('100')
        """
        amount = InstallmentService.validate_amount(amount)
        InstallmentService.validate_count(count)

        if value_type == InstallmentValueType.TOTAL:
            return (amount / count).quantize(CENT, rounding=ROUND_HALF_UP)
        if value_type == InstallmentValueType.SINGLE:
            return amount
        raise InvalidInstallmentError(f"Unknown installment value type: {value_type!r}")

    @staticmethod
    def generate(template, count, start_date, amount, *, now=None):
        """
        Expand a template into ``count`` dated sibling transactions.

        Sibling ``i`` (0-based) gets:
            - a fresh id
            - ``start_date`` advanced by ``i`` months (see ``add_months``)
            - ``created_at`` = ``now + i`` milliseconds
            - membership ``(group_id, i + 1, count)``

        Args:
            template (dict): Transaction fields except id, date, amount,
                installment and created_at. Must include ``property`` or
                ``property_id``.
            count (int): Group size, ``2 <= count <= LEDGER_MAX_INSTALLMENTS``.
            start_date (date): Date of the first installment.
            amount (Decimal): Already-resolved per-installment amount.
            now (datetime, optional): Base creation timestamp. Defaults to
                ``timezone.now()``.

        Returns:
            list[Transaction]: Unsaved instances in generation order.

        Raises:
            InvalidInstallmentError: If count is out of range, or a sibling
                would fall after the last representable date.
            InvalidAmountError: If amount is not a finite positive number.
        """
        InstallmentService.validate_count(count)
        amount = InstallmentService.validate_amount(amount)

        if now is None:
            now = timezone.now()
        try:
            dates = [add_months(start_date, i) for i in range(count)]
        except (ValueError, OverflowError):
            raise InvalidInstallmentError("Installment dates exceed the supported range")
        group_id = generate_id()

        siblings = []
        for i, due in enumerate(dates):
            tx = Transaction(
                id=generate_id(),
                amount=amount,
                date=due,
                created_at=now + timedelta(milliseconds=i),
                **template,
            )
            tx.set_membership(InstallmentMember(group_id=group_id, current=i + 1, total=count))
            siblings.append(tx)
        return siblings

    @staticmethod
    def build_from_entry(entry, *, now=None):
        """
        Turn a validated form entry into unsaved transactions.

        Returns a one-element list for standalone entries and the full
        sibling list for installment entries.
        """
        InstallmentService.validate_entry(entry)

        if not entry.is_installment:
            return [
                Transaction(
                    id=generate_id(),
                    amount=InstallmentService.validate_amount(entry.amount),
                    date=entry.date,
                    created_at=now or timezone.now(),
                    **entry.template(),
                )
            ]

        per_unit = InstallmentService.resolve_amount(
            entry.amount,
            entry.installments_count,
            entry.installment_value_type,
        )
        return InstallmentService.generate(
            entry.template(),
            entry.installments_count,
            entry.date,
            per_unit,
            now=now,
        )
