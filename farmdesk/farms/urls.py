from django.urls import path
from .views import (
    farm_list_create, farm_detail, farm_dashboard,
    farm_member_list_create, farm_member_detail, farm_member_apply_defaults,
    farm_permission_list_create, my_permissions
)

urlpatterns = [
    # Farm endpoints
    path('farms/', farm_list_create, name='farm-list-create'),
    path('farms/<int:farm_id>/', farm_detail, name='farm-detail'),
    path('farms/<int:farm_id>/dashboard/', farm_dashboard, name='farm-dashboard'),

    # Membership endpoints
    path('farms/<int:farm_id>/users/', farm_member_list_create, name='farm-member-list-create'),
    path('farms/<int:farm_id>/users/<int:user_id>/', farm_member_detail, name='farm-member-detail'),
    path('farms/<int:farm_id>/users/<int:user_id>/apply-defaults/', farm_member_apply_defaults, name='farm-member-apply-defaults'),

    # Permission endpoints
    path('farms/<int:farm_id>/permissions/', farm_permission_list_create, name='farm-permission-list-create'),
    path('permissions/', my_permissions, name='my-permissions'),
]
