from django.contrib import admin
from .models import Farm, UserFarm, UserPermission


class UserFarmInline(admin.TabularInline):
    model = UserFarm
    extra = 0
    autocomplete_fields = ['user']


@admin.register(Farm)
class FarmAdmin(admin.ModelAdmin):
    list_display = ['name', 'location', 'farm_type', 'size', 'admin', 'created_by', 'created_at']
    list_filter = ['farm_type', 'created_at']
    search_fields = ['name', 'location', 'admin__username']
    ordering = ['name']
    inlines = [UserFarmInline]


@admin.register(UserFarm)
class UserFarmAdmin(admin.ModelAdmin):
    list_display = ['user', 'farm', 'role', 'created_at']
    list_filter = ['role', 'farm']
    search_fields = ['user__username', 'farm__name']
    ordering = ['farm', 'user']


@admin.register(UserPermission)
class UserPermissionAdmin(admin.ModelAdmin):
    list_display = ['user', 'farm', 'module', 'access_level', 'updated_at']
    list_filter = ['module', 'access_level', 'farm']
    search_fields = ['user__username', 'farm__name']
    ordering = ['farm', 'user', 'module']
