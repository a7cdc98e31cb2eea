import copy

from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from .coordinator import LedgerCoordinator
from .domain import LedgerView
from .exceptions import (
    LedgerServiceError,
    ValidationFailedError,
    TransactionNotFoundError,
    PropertyNotFoundError,
    PersistenceError,
)
from .serializers import (
    TransactionSerializer,
    TransactionCreateSerializer,
    TransactionFieldsSerializer,
    TransactionFilterSerializer,
    DeletePlanSerializer,
    DeleteResultSerializer,
)


def ledger_error_response(error):
    """Map a ledger service error to an HTTP error response."""
    if isinstance(error, (TransactionNotFoundError, PropertyNotFoundError)):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(error, ValidationFailedError):
        code = status.HTTP_400_BAD_REQUEST
    elif isinstance(error, PersistenceError):
        code = status.HTTP_503_SERVICE_UNAVAILABLE
    else:
        code = status.HTTP_500_INTERNAL_SERVER_ERROR
    return Response({'error': str(error)}, status=code)


class TransactionViewSet(viewsets.ViewSet):
    """
    ViewSet for transactions.

    Every request loads a LedgerCoordinator and works through it;
    views are thin HTTP handlers only.

    list: Transactions of a property, narrowed by view and status
    create: Create one transaction or a whole installment group
    retrieve: Get a specific transaction
    update: Replace one transaction (siblings untouched)
    partial_update: Update some fields of one transaction
    destroy: Execute the delete plan (whole group for installments)
    """

    serializer_class = TransactionSerializer

    def get_coordinator(self):
        return LedgerCoordinator.loaded()

    @extend_schema(
        parameters=[TransactionFilterSerializer],
        responses=TransactionSerializer(many=True),
    )
    def list(self, request):
        filter_serializer = TransactionFilterSerializer(data=request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        try:
            ledger = self.get_coordinator()
            property_id = params.get('property')
            if property_id:
                ledger.select_property(property_id)
        except LedgerServiceError as e:
            return ledger_error_response(e)

        view = params['view']
        transactions = ledger.displayed_transactions(
            view=view,
            status=params.get('status'),
        )
        serializer = TransactionSerializer(transactions, many=True)
        return Response({
            'property': ledger.current_property_id,
            'view': view,
            'title': LedgerView(view).label,
            'count': len(transactions),
            'results': serializer.data,
        })

    @extend_schema(
        request=TransactionCreateSerializer,
        responses={201: TransactionSerializer(many=True)},
    )
    def create(self, request):
        """
        Create a transaction.

        POST /api/transactions/
        Body with ``is_installment: true`` creates ``installments_count``
        siblings in one atomic batch. The response always lists every
        created record.
        """
        serializer = TransactionCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            ledger = self.get_coordinator()
            created = ledger.create_transaction(serializer.to_entry())
        except PropertyNotFoundError as e:
            return Response({'property': [str(e)]}, status=status.HTTP_400_BAD_REQUEST)
        except LedgerServiceError as e:
            return ledger_error_response(e)

        output_serializer = TransactionSerializer(created, many=True)
        return Response(output_serializer.data, status=status.HTTP_201_CREATED)

    @extend_schema(responses=TransactionSerializer)
    def retrieve(self, request, pk=None):
        try:
            tx = self.get_coordinator().get_transaction(pk)
        except LedgerServiceError as e:
            return ledger_error_response(e)
        return Response(TransactionSerializer(tx).data)

    @extend_schema(request=TransactionFieldsSerializer, responses=TransactionSerializer)
    def update(self, request, pk=None):
        return self._update(request, pk, partial=False)

    @extend_schema(request=TransactionFieldsSerializer, responses=TransactionSerializer)
    def partial_update(self, request, pk=None):
        return self._update(request, pk, partial=True)

    def _update(self, request, pk, partial):
        serializer = TransactionFieldsSerializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)

        try:
            ledger = self.get_coordinator()
            current = ledger.get_transaction(pk)
        except LedgerServiceError as e:
            return ledger_error_response(e)

        updated = copy.copy(current)
        if 'property' in data:
            try:
                updated.property_id = ledger.get_property(data.pop('property')).id
            except PropertyNotFoundError as e:
                return Response({'property': [str(e)]}, status=status.HTTP_400_BAD_REQUEST)
        for field, value in data.items():
            setattr(updated, field, value)

        try:
            ledger.update_transaction(updated)
        except LedgerServiceError as e:
            return ledger_error_response(e)

        return Response(TransactionSerializer(updated).data)

    @extend_schema(responses=DeleteResultSerializer)
    def destroy(self, request, pk=None):
        """
        Delete a transaction.

        DELETE /api/transactions/{id}/
        Installment members take their whole group with them; read
        ``delete_plan`` first to show the confirmation.
        """
        try:
            ledger = self.get_coordinator()
            plan = ledger.plan_delete(ledger.get_transaction(pk))
            deleted = ledger.execute_delete(plan)
        except LedgerServiceError as e:
            return ledger_error_response(e)

        result = DeleteResultSerializer({'scope': plan.scope, 'deleted': deleted})
        return Response(result.data)

    @extend_schema(responses=DeletePlanSerializer)
    @action(detail=True, methods=['get'])
    def delete_plan(self, request, pk=None):
        """
        Describe what deleting this transaction would remove.

        GET /api/transactions/{id}/delete_plan/
        """
        try:
            ledger = self.get_coordinator()
            plan = ledger.plan_delete(ledger.get_transaction(pk))
        except LedgerServiceError as e:
            return ledger_error_response(e)

        return Response(DeletePlanSerializer(plan).data)

    @extend_schema(request=None, responses=TransactionSerializer)
    @action(detail=True, methods=['post'])
    def toggle_status(self, request, pk=None):
        """
        Flip paid <-> pending on one transaction.

        POST /api/transactions/{id}/toggle_status/
        """
        try:
            updated = self.get_coordinator().toggle_status(pk)
        except LedgerServiceError as e:
            return ledger_error_response(e)

        return Response(TransactionSerializer(updated).data)
