from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'ledger'

# Router for ViewSets
router = DefaultRouter()
router.register(r'', views.TransactionViewSet, basename='transaction')

urlpatterns = [
    # Transaction ViewSet routes
    # GET    /api/transactions/              - List (?property=&view=&status=)
    # POST   /api/transactions/              - Create one or an installment group
    # GET    /api/transactions/{id}/         - Get transaction details
    # PUT    /api/transactions/{id}/         - Replace one transaction
    # PATCH  /api/transactions/{id}/         - Partial update
    # DELETE /api/transactions/{id}/         - Delete (whole group for installments)

    # Custom transaction actions
    # GET    /api/transactions/{id}/delete_plan/    - Preview what a delete removes
    # POST   /api/transactions/{id}/toggle_status/  - Flip paid/pending

    # Include router URLs
    path('', include(router.urls)),
]
