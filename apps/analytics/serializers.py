"""
Serializers for analytics app.

This module contains:
1. Input serializers - Query parameter validation
2. Response serializers - Output formatting and API documentation

Input Serializers:
    PropertyQuerySerializer - Property scope
    CalendarQuerySerializer - Property scope plus year/month
    DayQuerySerializer - Property scope plus one date
    PaidDetailsQuerySerializer - Property scope plus optional category

Response Serializers:
    DashboardResponseSerializer - Balances, category totals, breakdown
    CalendarResponseSerializer - Month grid with day status
    DayDetailsResponseSerializer - Transactions of one day
    PayersResponseSerializer - Paid expenses per payer
    PaidDetailsResponseSerializer - Paid transactions list
"""

from rest_framework import serializers

from apps.ledger.models import Payer, TransactionCategory
from apps.ledger.serializers import TransactionSerializer
from .analytics import DayStatus


def _money(**kwargs):
    return serializers.DecimalField(max_digits=14, decimal_places=2, **kwargs)


# =============================================================================
# Input Serializers (Query Parameter Validation)
# =============================================================================

class PropertyQuerySerializer(serializers.Serializer):
    """
    Query Parameters:
        property (UUID): Property scope, defaults to the first property
    """

    property = serializers.UUIDField(required=False)


class CalendarQuerySerializer(PropertyQuerySerializer):
    """
    Query Parameters:
        property (UUID): Property scope
        year (int): Calendar year, defaults to the current year
        month (int): Calendar month 1-12, defaults to the current month

    Note:
        ``year`` and ``month`` go together; giving only one is rejected.
    """

    year = serializers.IntegerField(required=False, min_value=1, max_value=9999)
    month = serializers.IntegerField(required=False, min_value=1, max_value=12)

    def validate(self, attrs):
        if ('year' in attrs) != ('month' in attrs):
            raise serializers.ValidationError('Provide both year and month, or neither')
        return attrs


class DayQuerySerializer(PropertyQuerySerializer):
    """
    Query Parameters:
        property (UUID): Property scope
        date (date): The day (YYYY-MM-DD)
    """

    date = serializers.DateField()


class PaidDetailsQuerySerializer(PropertyQuerySerializer):
    """
    Query Parameters:
        property (UUID): Property scope
        category (str): Narrow to one category; omit for the general statement
    """

    category = serializers.ChoiceField(
        choices=TransactionCategory.choices,
        required=False
    )


# =============================================================================
# Response Serializers
# =============================================================================

class CategoryTotalSerializer(serializers.Serializer):
    category = serializers.ChoiceField(choices=TransactionCategory.choices)
    label = serializers.CharField()
    color = serializers.CharField()
    paid = _money()
    pending = _money()


class ExpenseSliceSerializer(serializers.Serializer):
    category = serializers.ChoiceField(choices=TransactionCategory.choices)
    label = serializers.CharField()
    color = serializers.CharField()
    value = _money()


class DashboardResponseSerializer(serializers.Serializer):
    """Dashboard cards and charts of one property."""
    property = serializers.UUIDField()
    property_name = serializers.CharField()
    paid_revenue = _money()
    paid_expense = _money()
    paid_balance = _money()
    pending_balance = _money()
    transaction_count = serializers.IntegerField()
    categories = CategoryTotalSerializer(many=True)
    expense_breakdown = ExpenseSliceSerializer(many=True)


class MonthRefSerializer(serializers.Serializer):
    year = serializers.IntegerField()
    month = serializers.IntegerField()


class CalendarDaySerializer(serializers.Serializer):
    date = serializers.DateField()
    day = serializers.IntegerField()
    status = serializers.ChoiceField(choices=DayStatus.choices, allow_null=True)
    transactions = TransactionSerializer(many=True)


class CalendarDayOrEmptyField(serializers.Field):
    """A grid slot: a day cell, or null for leading empty slots."""

    def to_representation(self, value):
        if value is None:
            return None
        return CalendarDaySerializer(value).data


class CalendarResponseSerializer(serializers.Serializer):
    """Sunday-first month grid."""
    property = serializers.UUIDField()
    year = serializers.IntegerField()
    month = serializers.IntegerField()
    title = serializers.CharField()
    weekdays = serializers.ListField(child=serializers.CharField())
    previous = MonthRefSerializer()
    next = MonthRefSerializer()
    days = serializers.ListField(child=CalendarDayOrEmptyField(allow_null=True))


class DayDetailsResponseSerializer(serializers.Serializer):
    property = serializers.UUIDField()
    title = serializers.CharField()
    date = serializers.DateField()
    total = _money()
    transactions = TransactionSerializer(many=True)


class PayerTotalSerializer(serializers.Serializer):
    payer = serializers.ChoiceField(choices=Payer.choices)
    value = _money()


class PayerSliceSerializer(PayerTotalSerializer):
    color = serializers.CharField()


class PayersResponseSerializer(serializers.Serializer):
    """Paid expenses per payer; ``chart`` leaves out Todos and zeros."""
    property = serializers.UUIDField()
    totals = PayerTotalSerializer(many=True)
    chart = PayerSliceSerializer(many=True)


class PaidDetailsResponseSerializer(serializers.Serializer):
    property = serializers.UUIDField()
    title = serializers.CharField()
    category = serializers.CharField(allow_null=True)
    total = _money()
    transactions = TransactionSerializer(many=True)


class ErrorSerializer(serializers.Serializer):
    """Standard error response serializer."""
    error = serializers.CharField()
