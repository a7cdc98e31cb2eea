from decimal import Decimal

from django.conf import settings
from rest_framework import serializers

from .domain import DeleteScope, InstallmentMember, LedgerView, TransactionEntry
from .models import (
    Transaction,
    TransactionType,
    TransactionCategory,
    TransactionStatus,
    Payer,
    InstallmentValueType,
)


def _max_installments():
    return getattr(settings, 'LEDGER_MAX_INSTALLMENTS', 60)


# =============================================================================
# Input Serializers
# =============================================================================

class TransactionFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for the transaction list.

    Query Parameters:
        property (UUID): Property scope, defaults to the first property
        view (str): Active screen, narrows by type or category
        status (str): Filter by paid/pending
    """

    property = serializers.UUIDField(required=False)
    view = serializers.ChoiceField(
        choices=LedgerView.choices,
        required=False,
        default=LedgerView.TRANSACTIONS_ALL
    )
    status = serializers.ChoiceField(
        choices=TransactionStatus.choices,
        required=False
    )


class TransactionFieldsSerializer(serializers.Serializer):
    """Fields editable on a single transaction."""

    property = serializers.UUIDField()
    description = serializers.CharField(max_length=255)
    amount = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        min_value=Decimal('0.01')
    )
    date = serializers.DateField()
    type = serializers.ChoiceField(choices=TransactionType.choices)
    category = serializers.ChoiceField(choices=TransactionCategory.choices)
    payer = serializers.ChoiceField(choices=Payer.choices, default=Payer.CIDA)
    status = serializers.ChoiceField(
        choices=TransactionStatus.choices,
        default=TransactionStatus.PENDING
    )

    def validate_description(self, value):
        if not value.strip():
            raise serializers.ValidationError('Description is required')
        return value.strip()


class TransactionCreateSerializer(TransactionFieldsSerializer):
    """
    Validate the entry form.

    With ``is_installment`` the entry expands into ``installments_count``
    monthly siblings. ``installment_value_type`` tells whether ``amount``
    is the group total (divided) or the value of each installment.
    """

    is_installment = serializers.BooleanField(required=False, default=False)
    installments_count = serializers.IntegerField(required=False, default=2, min_value=2)
    installment_value_type = serializers.ChoiceField(
        choices=InstallmentValueType.choices,
        required=False,
        default=InstallmentValueType.TOTAL
    )

    def validate_installments_count(self, value):
        limit = _max_installments()
        if value > limit:
            raise serializers.ValidationError(f'Maximum is {limit} installments')
        return value

    def to_entry(self):
        data = self.validated_data
        return TransactionEntry(
            property_id=data['property'],
            description=data['description'],
            amount=data['amount'],
            date=data['date'],
            type=data['type'],
            category=data['category'],
            payer=data['payer'],
            status=data['status'],
            is_installment=data['is_installment'],
            installments_count=data['installments_count'],
            installment_value_type=data['installment_value_type'],
        )


# =============================================================================
# Output Serializers
# =============================================================================

class TransactionSerializer(serializers.ModelSerializer):
    """Full transaction details."""

    display_description = serializers.CharField(source='get_display_description', read_only=True)
    type_display = serializers.CharField(source='get_type_display', read_only=True)
    category_display = serializers.CharField(source='get_category_display', read_only=True)
    status_display = serializers.CharField(source='get_status_display', read_only=True)
    signed_amount = serializers.DecimalField(
        source='get_signed_amount',
        max_digits=12,
        decimal_places=2,
        read_only=True
    )
    installment = serializers.SerializerMethodField()

    class Meta:
        model = Transaction
        fields = [
            'id',
            'property',
            'description',
            'display_description',
            'amount',
            'signed_amount',
            'date',
            'type',
            'type_display',
            'category',
            'category_display',
            'payer',
            'status',
            'status_display',
            'installment',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

    def get_installment(self, obj) -> dict | None:
        membership = obj.get_membership()
        if isinstance(membership, InstallmentMember):
            return {
                'group_id': str(membership.group_id),
                'current': membership.current,
                'total': membership.total,
            }
        return None


class DeletePlanSerializer(serializers.Serializer):
    """What a delete would remove, and the confirmation to show."""

    scope = serializers.ChoiceField(choices=DeleteScope.choices)
    transaction_id = serializers.UUIDField()
    group_id = serializers.UUIDField(allow_null=True)
    affected_ids = serializers.ListField(child=serializers.UUIDField())
    message = serializers.CharField()


class DeleteResultSerializer(serializers.Serializer):
    scope = serializers.ChoiceField(choices=DeleteScope.choices)
    deleted = serializers.IntegerField()
