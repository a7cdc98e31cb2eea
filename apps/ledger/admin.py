from django.contrib import admin
from django.utils.html import format_html
from .gateway import StorageGateway
from .models import (
    Transaction,
    TransactionCategory,
    TransactionStatus,
    TransactionType,
    CATEGORY_COLORS,
)


@admin.register(Transaction)
class TransactionAdmin(admin.ModelAdmin):
    """
    Admin interface for transactions.

    Installment siblings are edited one at a time here, exactly like the
    API. Deleting any member removes its whole group, so single and bulk
    deletes go through the gateway instead of the ORM collector.
    """

    list_display = [
        'description',
        'property',
        'date',
        'signed_amount',
        'category_badge',
        'payer',
        'status_badge',
        'installment_label',
    ]
    list_filter = ['property', 'type', 'category', 'status', 'payer', 'date']
    search_fields = ['description', 'installment_group_id']
    readonly_fields = [
        'id',
        'installment_group_id',
        'installment_current',
        'installment_total',
        'created_at',
        'updated_at',
    ]
    date_hierarchy = 'date'

    fieldsets = (
        ('Transaction', {
            'fields': ('id', 'property', 'description', 'amount', 'date')
        }),
        ('Classification', {
            'fields': ('type', 'category', 'payer', 'status')
        }),
        ('Installment', {
            'fields': ('installment_group_id', 'installment_current', 'installment_total'),
            'classes': ('collapse',)
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    def signed_amount(self, obj):
        sign = '+' if obj.type == TransactionType.REVENUE else '-'
        return f"{sign}{obj.amount}"
    signed_amount.short_description = 'Amount'
    signed_amount.admin_order_field = 'amount'

    def category_badge(self, obj):
        return format_html(
            '<span style="background: {}; color: white; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            CATEGORY_COLORS[TransactionCategory(obj.category)], obj.get_category_display()
        )
    category_badge.short_description = 'Category'

    def status_badge(self, obj):
        if obj.status == TransactionStatus.PAID:
            bg = '#10b981'
        else:
            bg = '#f59e0b'
        return format_html(
            '<span style="background: {}; color: white; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            bg, obj.get_status_display()
        )
    status_badge.short_description = 'Status'

    def installment_label(self, obj):
        return obj.get_membership().label() or '-'
    installment_label.short_description = 'Installment'

    def delete_model(self, request, obj):
        gateway = StorageGateway()
        if obj.installment_group_id is not None:
            gateway.delete_transactions_by_group_id(obj.installment_group_id)
        else:
            gateway.delete_transaction(obj.id)

    def delete_queryset(self, request, queryset):
        gateway = StorageGateway()
        group_ids = set()
        for tx in queryset:
            if tx.installment_group_id is None:
                gateway.delete_transaction(tx.id)
            elif tx.installment_group_id not in group_ids:
                group_ids.add(tx.installment_group_id)
                gateway.delete_transactions_by_group_id(tx.installment_group_id)
