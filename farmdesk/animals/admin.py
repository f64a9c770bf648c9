from django.contrib import admin
from .models import Animal, Vaccination


@admin.register(Animal)
class AnimalAdmin(admin.ModelAdmin):
    list_display = ['identification_code', 'farm', 'species', 'breed', 'gender', 'status', 'removed_at']
    list_filter = ['species', 'status', 'gender', 'removal_reason', 'farm']
    search_fields = ['identification_code', 'breed', 'farm__name']
    ordering = ['farm', 'identification_code']


@admin.register(Vaccination)
class VaccinationAdmin(admin.ModelAdmin):
    list_display = ['vaccine_name', 'animal', 'farm', 'application_date', 'next_application_date', 'status']
    list_filter = ['status', 'farm']
    search_fields = ['vaccine_name', 'batch_number', 'animal__identification_code']
    raw_id_fields = ['animal', 'applied_by']
