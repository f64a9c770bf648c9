from django.contrib import admin
from .models import CalendarEvent, Goal


@admin.register(CalendarEvent)
class CalendarEventAdmin(admin.ModelAdmin):
    list_display = ['title', 'farm', 'date', 'end_date', 'event_type', 'created_by']
    list_filter = ['event_type', 'farm']
    search_fields = ['title', 'description', 'farm__name']
    ordering = ['-date']


@admin.register(Goal)
class GoalAdmin(admin.ModelAdmin):
    list_display = ['name', 'farm', 'start_date', 'end_date', 'target_value', 'actual_value', 'unit', 'status']
    list_filter = ['status', 'unit', 'farm']
    search_fields = ['name', 'description', 'farm__name']
    ordering = ['end_date']
    readonly_fields = ['completion_date', 'created_at', 'updated_at']
