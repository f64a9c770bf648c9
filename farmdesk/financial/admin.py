from django.contrib import admin
from .models import Cost


@admin.register(Cost)
class CostAdmin(admin.ModelAdmin):
    list_display = ['date', 'farm', 'category', 'amount', 'description', 'supplier', 'created_by']
    list_filter = ['category', 'payment_method', 'farm', 'date']
    search_fields = ['description', 'supplier', 'document_number', 'farm__name']
    ordering = ['-date']
