from django.urls import path
from .views import cost_list_create, cost_detail, cost_summary

urlpatterns = [
    path('farms/<int:farm_id>/costs/', cost_list_create, name='cost-list-create'),
    path('farms/<int:farm_id>/costs/summary/', cost_summary, name='cost-summary'),
    path('farms/<int:farm_id>/costs/<int:pk>/', cost_detail, name='cost-detail'),
]
