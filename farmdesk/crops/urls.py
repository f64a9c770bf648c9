from django.urls import path
from .views import crop_list_create, crop_detail

urlpatterns = [
    path('farms/<int:farm_id>/crops/', crop_list_create, name='crop-list-create'),
    path('farms/<int:farm_id>/crops/<int:pk>/', crop_detail, name='crop-detail'),
]
