from rest_framework.decorators import api_view
from rest_framework.response import Response
from rest_framework import status
from django.utils import timezone
from drf_spectacular.utils import extend_schema

from apps.ledger.coordinator import LedgerCoordinator
from apps.ledger.exceptions import LedgerServiceError
from apps.ledger.views import ledger_error_response
from .analytics import LedgerAnalytics
from .serializers import (
    # Input serializers
    PropertyQuerySerializer,
    CalendarQuerySerializer,
    DayQuerySerializer,
    PaidDetailsQuerySerializer,
    # Response serializers
    DashboardResponseSerializer,
    CalendarResponseSerializer,
    DayDetailsResponseSerializer,
    PayersResponseSerializer,
    PaidDetailsResponseSerializer,
    ErrorSerializer,
)
from .exceptions import AnalyticsServiceError


def _load_scope(params):
    """
    Load the ledger and select the requested property.

    Returns:
        tuple: (coordinator, property, transactions of that property)
    """
    ledger = LedgerCoordinator.loaded()
    if params.get('property'):
        ledger.select_property(params['property'])
    prop = ledger.get_property(ledger.current_property_id)
    return ledger, prop, ledger.property_transactions(prop.id)


@extend_schema(
    parameters=[PropertyQuerySerializer],
    responses={
        200: DashboardResponseSerializer,
        404: ErrorSerializer,
    },
    description="Balances, per-category totals and expense breakdown of a property.",
    tags=['analytics'],
)
@api_view(['GET'])
def dashboard(request):
    """Dashboard cards - thin HTTP handler."""
    query_serializer = PropertyQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)

    try:
        _, prop, transactions = _load_scope(query_serializer.validated_data)
    except LedgerServiceError as e:
        return ledger_error_response(e)

    data = LedgerAnalytics.dashboard(transactions)
    data.update(property=prop.id, property_name=prop.name)
    return Response(DashboardResponseSerializer(data).data)


@extend_schema(
    parameters=[CalendarQuerySerializer],
    responses={
        200: CalendarResponseSerializer,
        400: ErrorSerializer,
        404: ErrorSerializer,
    },
    description="Sunday-first month grid with the status of every day.",
    tags=['analytics'],
)
@api_view(['GET'])
def calendar_month(request):
    """Calendar month grid - thin HTTP handler."""
    query_serializer = CalendarQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)
    params = query_serializer.validated_data

    today = timezone.localdate()
    year = params.get('year', today.year)
    month = params.get('month', today.month)

    try:
        _, prop, transactions = _load_scope(params)
    except LedgerServiceError as e:
        return ledger_error_response(e)

    try:
        data = LedgerAnalytics.calendar_month(transactions, year, month, today=today)
    except AnalyticsServiceError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    data['property'] = prop.id
    return Response(CalendarResponseSerializer(data).data)


@extend_schema(
    parameters=[DayQuerySerializer],
    responses={
        200: DayDetailsResponseSerializer,
        404: ErrorSerializer,
    },
    description="Transactions of one calendar day.",
    tags=['analytics'],
)
@api_view(['GET'])
def calendar_day(request):
    """Day details - thin HTTP handler."""
    query_serializer = DayQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)
    params = query_serializer.validated_data

    try:
        _, prop, transactions = _load_scope(params)
    except LedgerServiceError as e:
        return ledger_error_response(e)

    try:
        data = LedgerAnalytics.day_details(transactions, params.get('date'))
    except AnalyticsServiceError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    data['property'] = prop.id
    return Response(DayDetailsResponseSerializer(data).data)


@extend_schema(
    parameters=[PropertyQuerySerializer],
    responses={
        200: PayersResponseSerializer,
        404: ErrorSerializer,
    },
    description="Paid expenses per payer. Todos only counts transactions tagged Todos.",
    tags=['analytics'],
)
@api_view(['GET'])
def payers(request):
    """Payer totals - thin HTTP handler."""
    query_serializer = PropertyQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)

    try:
        _, prop, transactions = _load_scope(query_serializer.validated_data)
    except LedgerServiceError as e:
        return ledger_error_response(e)

    data = {
        'property': prop.id,
        'totals': LedgerAnalytics.payer_totals(transactions),
        'chart': LedgerAnalytics.payer_chart(transactions),
    }
    return Response(PayersResponseSerializer(data).data)


@extend_schema(
    parameters=[PaidDetailsQuerySerializer],
    responses={
        200: PaidDetailsResponseSerializer,
        404: ErrorSerializer,
    },
    description="Paid transactions of a property, optionally of one category.",
    tags=['analytics'],
)
@api_view(['GET'])
def paid_details(request):
    """Paid statement - thin HTTP handler."""
    query_serializer = PaidDetailsQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)
    params = query_serializer.validated_data

    try:
        _, prop, transactions = _load_scope(params)
    except LedgerServiceError as e:
        return ledger_error_response(e)

    data = LedgerAnalytics.paid_details(transactions, category=params.get('category'))
    data['property'] = prop.id
    return Response(PaidDetailsResponseSerializer(data).data)
