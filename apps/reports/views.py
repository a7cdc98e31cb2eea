from django.http import HttpResponse
from rest_framework.decorators import api_view
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema

from apps.analytics.serializers import PropertyQuerySerializer, ErrorSerializer
from apps.ledger.coordinator import LedgerCoordinator
from apps.ledger.exceptions import LedgerServiceError
from apps.ledger.views import ledger_error_response
from .pdf import build_property_report, report_filename


@extend_schema(
    parameters=[PropertyQuerySerializer],
    responses={
        (200, 'application/pdf'): OpenApiTypes.BINARY,
        404: ErrorSerializer,
    },
    description="Financial report of a property as a PDF attachment.",
    tags=['reports'],
)
@api_view(['GET'])
def property_pdf(request):
    """PDF report - thin HTTP handler."""
    query_serializer = PropertyQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)
    params = query_serializer.validated_data

    try:
        ledger = LedgerCoordinator.loaded()
        if params.get('property'):
            ledger.select_property(params['property'])
        prop = ledger.get_property(ledger.current_property_id)
    except LedgerServiceError as e:
        return ledger_error_response(e)

    pdf = build_property_report(prop, ledger.property_transactions(prop.id))

    response = HttpResponse(pdf, content_type='application/pdf')
    response['Content-Disposition'] = f'attachment; filename="{report_filename(prop)}"'
    return response
