from collections import Counter

from rest_framework import viewsets, status
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from apps.ledger.coordinator import LedgerCoordinator
from apps.ledger.exceptions import LedgerServiceError
from apps.ledger.views import ledger_error_response
from .serializers import PropertySerializer, PropertyInputSerializer


class PropertyViewSet(viewsets.ViewSet):
    """
    ViewSet for properties.

    list: All properties (seeds the defaults on an empty store)
    create: Create a property
    retrieve: Get a specific property
    update: Rename a property
    partial_update: Rename a property

    There is no delete: transactions always point at a property.
    """

    serializer_class = PropertySerializer

    def get_coordinator(self):
        return LedgerCoordinator.loaded()

    def get_serializer_context(self, ledger):
        counts = Counter(t.property_id for t in ledger.transactions())
        return {'transaction_counts': counts}

    @extend_schema(responses=PropertySerializer(many=True))
    def list(self, request):
        try:
            ledger = self.get_coordinator()
        except LedgerServiceError as e:
            return ledger_error_response(e)

        serializer = PropertySerializer(
            ledger.properties(),
            many=True,
            context=self.get_serializer_context(ledger)
        )
        return Response(serializer.data)

    @extend_schema(request=PropertyInputSerializer, responses={201: PropertySerializer})
    def create(self, request):
        serializer = PropertyInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            ledger = self.get_coordinator()
            prop = ledger.add_property(serializer.validated_data['name'])
        except LedgerServiceError as e:
            return ledger_error_response(e)

        output_serializer = PropertySerializer(prop, context=self.get_serializer_context(ledger))
        return Response(output_serializer.data, status=status.HTTP_201_CREATED)

    @extend_schema(responses=PropertySerializer)
    def retrieve(self, request, pk=None):
        try:
            ledger = self.get_coordinator()
            prop = ledger.get_property(pk)
        except LedgerServiceError as e:
            return ledger_error_response(e)

        return Response(PropertySerializer(prop, context=self.get_serializer_context(ledger)).data)

    @extend_schema(request=PropertyInputSerializer, responses=PropertySerializer)
    def update(self, request, pk=None):
        """
        Rename a property in place.

        PUT /api/properties/{id}/
        Body: {"name": "Casa de Campo"}
        """
        serializer = PropertyInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            ledger = self.get_coordinator()
            prop = ledger.rename_property(pk, serializer.validated_data['name'])
        except LedgerServiceError as e:
            return ledger_error_response(e)

        return Response(PropertySerializer(prop, context=self.get_serializer_context(ledger)).data)

    @extend_schema(request=PropertyInputSerializer, responses=PropertySerializer)
    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)
