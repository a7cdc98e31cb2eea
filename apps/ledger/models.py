from django.db import models
from django.core.validators import MinValueValidator
from django.utils import timezone
from decimal import Decimal
import uuid

from .domain import Standalone, InstallmentMember


class TransactionType(models.TextChoices):
    REVENUE = 'revenue', 'Receita'
    EXPENSE = 'expense', 'Despesa'


class TransactionCategory(models.TextChoices):
    REVENUE = 'revenue', 'RECEITAS'
    ACQUISITION = 'acquisition', 'AQUISIÇÃO'
    RENOVATION = 'renovation', 'REFORMA'
    MONTHLY = 'monthly', 'MENSAIS'
    OTHER = 'other', 'OUTROS'


CATEGORY_COLORS = {
    TransactionCategory.REVENUE: '#10b981',
    TransactionCategory.ACQUISITION: '#a855f7',
    TransactionCategory.RENOVATION: '#f97316',
    TransactionCategory.MONTHLY: '#3b82f6',
    TransactionCategory.OTHER: '#ec4899',
}


class TransactionStatus(models.TextChoices):
    PAID = 'paid', 'Pago'
    PENDING = 'pending', 'Pendente'


class Payer(models.TextChoices):
    """Fixed, ordered set of contributors. ``TODOS`` is the catch-all."""
    TODOS = 'Todos', 'Todos'
    CIDA = 'Cida', 'Cida'
    MICHELL = 'Michell', 'Michell'
    PAULO = 'Paulo', 'Paulo'
    WILLIAM = 'William', 'William'


class InstallmentValueType(models.TextChoices):
    TOTAL = 'total', 'Valor Total (será dividido)'
    SINGLE = 'single', 'Valor de cada Parcela'


class Transaction(models.Model):
    """
    Atomic financial record of a property.

    The amount is always positive; its sign is implied by ``type``.
    Installment siblings share ``installment_group_id``; the three
    installment columns are either all set or all null.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    property = models.ForeignKey(
        'properties.Property',
        on_delete=models.PROTECT,
        related_name='transactions'
    )

    description = models.CharField(max_length=255)
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    date = models.DateField()

    type = models.CharField(max_length=10, choices=TransactionType.choices)
    category = models.CharField(max_length=20, choices=TransactionCategory.choices)
    payer = models.CharField(max_length=20, choices=Payer.choices, default=Payer.CIDA)
    status = models.CharField(
        max_length=10,
        choices=TransactionStatus.choices,
        default=TransactionStatus.PENDING
    )

    # Installment group membership
    installment_group_id = models.UUIDField(null=True, blank=True, db_index=True)
    installment_current = models.PositiveSmallIntegerField(null=True, blank=True)
    installment_total = models.PositiveSmallIntegerField(null=True, blank=True)

    # Set explicitly by the installment generator for deterministic ordering
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'transactions'
        indexes = [
            models.Index(fields=['property', 'date'], name='transaction_prop_date_idx'),
            models.Index(fields=['property', 'status'], name='transaction_prop_status_idx'),
            models.Index(fields=['date'], name='transaction_date_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=(
                    models.Q(
                        installment_group_id__isnull=True,
                        installment_current__isnull=True,
                        installment_total__isnull=True,
                    ) | models.Q(
                        installment_group_id__isnull=False,
                        installment_current__gte=1,
                        installment_total__gte=models.F('installment_current'),
                    )
                ),
                name='transaction_installment_complete',
            ),
        ]
        ordering = ['-date', '-created_at']

    def __str__(self):
        return f"{self.get_display_description()} - {self.amount} ({self.get_status_display()})"

    def get_membership(self):
        """Return the installment variant: ``Standalone`` or ``InstallmentMember``."""
        if self.installment_group_id is None:
            return Standalone()
        return InstallmentMember(
            group_id=self.installment_group_id,
            current=self.installment_current,
            total=self.installment_total,
        )

    def set_membership(self, membership):
        if isinstance(membership, InstallmentMember):
            self.installment_group_id = membership.group_id
            self.installment_current = membership.current
            self.installment_total = membership.total
        elif isinstance(membership, Standalone):
            self.installment_group_id = None
            self.installment_current = None
            self.installment_total = None
        else:
            raise TypeError(f"Unknown membership variant: {membership!r}")

    def get_display_description(self):
        """Description with the ``(i/N)`` suffix for installment members."""
        membership = self.get_membership()
        if isinstance(membership, InstallmentMember):
            return f"{self.description} {membership.label()}"
        return self.description

    def get_signed_amount(self):
        if self.type == TransactionType.REVENUE:
            return self.amount
        if self.type == TransactionType.EXPENSE:
            return -self.amount
        raise ValueError(f"Unhandled transaction type: {self.type!r}")
