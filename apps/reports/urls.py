from django.urls import path
from . import views

app_name = 'reports'

urlpatterns = [
    # GET /api/reports/pdf/?property=<id> - Download the property's PDF report
    path('pdf/', views.property_pdf, name='property-pdf'),
]
