from django.urls import path
from .views import task_list_create, pending_task_list, task_detail, task_by_id, assigned_task_list

urlpatterns = [
    path('farms/<int:farm_id>/tasks/', task_list_create, name='task-list-create'),
    path('farms/<int:farm_id>/tasks/pending/', pending_task_list, name='task-pending-list'),
    path('farms/<int:farm_id>/tasks/<int:pk>/', task_detail, name='task-detail'),
    path('tasks/assigned/', assigned_task_list, name='task-assigned-list'),
    path('tasks/<int:pk>/', task_by_id, name='task-by-id'),
]
