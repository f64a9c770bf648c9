from django.contrib import admin
from .models import Task


@admin.register(Task)
class TaskAdmin(admin.ModelAdmin):
    list_display = ['title', 'farm', 'due_date', 'status', 'priority', 'category', 'assigned_to']
    list_filter = ['status', 'priority', 'category', 'farm']
    search_fields = ['title', 'description', 'farm__name']
    ordering = ['-due_date']
    readonly_fields = ['completed_at', 'created_at', 'updated_at']
