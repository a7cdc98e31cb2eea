from django.contrib import admin
from django.db.models import Count
from .models import Property


@admin.register(Property)
class PropertyAdmin(admin.ModelAdmin):
    """Admin interface for properties. Deletion is disabled: transactions reference them."""

    list_display = ['name', 'get_transaction_count', 'created_at']
    search_fields = ['name']
    readonly_fields = ['id', 'created_at', 'updated_at']

    def get_queryset(self, request):
        return super().get_queryset(request).annotate(transaction_count=Count('transactions'))

    def get_transaction_count(self, obj):
        return obj.transaction_count
    get_transaction_count.short_description = 'Transactions'
    get_transaction_count.admin_order_field = 'transaction_count'

    def has_delete_permission(self, request, obj=None):
        return False
