from django.contrib import admin
from .models import InventoryItem, InventoryTransaction, PurchaseRequest


class InventoryTransactionInline(admin.TabularInline):
    model = InventoryTransaction
    extra = 0
    readonly_fields = ['transaction_type', 'quantity', 'previous_quantity', 'new_quantity', 'reason', 'created_by', 'created_at']
    can_delete = False


@admin.register(InventoryItem)
class InventoryItemAdmin(admin.ModelAdmin):
    list_display = ['name', 'farm', 'category', 'quantity', 'unit', 'minimum_level', 'updated_at']
    list_filter = ['category', 'farm']
    search_fields = ['name', 'farm__name']
    ordering = ['farm', 'name']
    inlines = [InventoryTransactionInline]


@admin.register(InventoryTransaction)
class InventoryTransactionAdmin(admin.ModelAdmin):
    list_display = ['item', 'transaction_type', 'quantity', 'previous_quantity', 'new_quantity', 'created_by', 'created_at']
    list_filter = ['transaction_type', 'created_at']
    search_fields = ['item__name', 'reason']
    ordering = ['-created_at']
    readonly_fields = ['item', 'transaction_type', 'quantity', 'previous_quantity', 'new_quantity', 'created_by', 'created_at']


@admin.register(PurchaseRequest)
class PurchaseRequestAdmin(admin.ModelAdmin):
    list_display = ['product', 'quantity', 'farm', 'responsible', 'urgent', 'status', 'needed_by', 'created_at']
    list_filter = ['status', 'urgent', 'farm']
    search_fields = ['product', 'responsible', 'farm__name']
    readonly_fields = ['completed_at', 'created_by', 'created_at']
