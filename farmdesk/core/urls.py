from django.urls import path
from .views import (
    CustomTokenRefreshView, register, login, logout, user_me, user_profile, user_password,
    user_list_create, user_detail,
    audit_log_list, audit_log_detail
)

urlpatterns = [
    # Auth endpoints
    path('register/', register, name='register'),
    path('login/', login, name='login'),
    path('logout/', logout, name='logout'),
    path('token/refresh/', CustomTokenRefreshView.as_view(), name='token-refresh'),

    # Current user endpoints
    path('user/', user_me, name='user-me'),
    path('user/profile/', user_profile, name='user-profile'),
    path('user/password/', user_password, name='user-password'),

    # User administration endpoints
    path('users/', user_list_create, name='user-list-create'),
    path('users/<int:pk>/', user_detail, name='user-detail'),

    # AuditLog endpoints
    path('logs/', audit_log_list, name='audit-log-list'),
    path('logs/<int:pk>/', audit_log_detail, name='audit-log-detail'),
]
