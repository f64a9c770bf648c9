from django.urls import path
from .views import (
    animal_list_create, animal_detail, animal_remove, removed_animal_list,
    animal_vaccination_list_create, vaccination_list, vaccination_detail,
)

urlpatterns = [
    path('farms/<int:farm_id>/animals/', animal_list_create, name='animal-list-create'),
    path('farms/<int:farm_id>/animals/removed/', removed_animal_list, name='animal-removed-list'),
    path('farms/<int:farm_id>/animals/<int:pk>/', animal_detail, name='animal-detail'),
    path('farms/<int:farm_id>/animals/<int:pk>/remove/', animal_remove, name='animal-remove'),
    path('farms/<int:farm_id>/animals/<int:animal_id>/vaccinations/', animal_vaccination_list_create,
         name='animal-vaccination-list-create'),
    path('farms/<int:farm_id>/vaccinations/', vaccination_list, name='vaccination-list'),
    path('farms/<int:farm_id>/vaccinations/<int:pk>/', vaccination_detail, name='vaccination-detail'),
]
