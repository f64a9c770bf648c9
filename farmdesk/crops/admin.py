from django.contrib import admin
from .models import Crop


@admin.register(Crop)
class CropAdmin(admin.ModelAdmin):
    list_display = ['name', 'farm', 'sector', 'area', 'planting_date', 'expected_harvest_date', 'status']
    list_filter = ['status', 'farm']
    search_fields = ['name', 'sector', 'farm__name']
    ordering = ['farm', '-planting_date']
