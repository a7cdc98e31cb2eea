from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'properties'

# Router for ViewSets
router = DefaultRouter()
router.register(r'', views.PropertyViewSet, basename='property')

urlpatterns = [
    # Property ViewSet routes
    # GET    /api/properties/              - List properties (seeds defaults when empty)
    # POST   /api/properties/              - Create property
    # GET    /api/properties/{id}/         - Get property details
    # PUT    /api/properties/{id}/         - Rename property
    # PATCH  /api/properties/{id}/         - Rename property

    # Include router URLs
    path('', include(router.urls)),
]
