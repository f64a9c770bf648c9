from django.urls import path
from .views import (
    inventory_item_list_create, inventory_item_detail, critical_inventory_list,
    item_transaction_list_create, farm_transaction_list, purchase_request_list_create, purchase_request_detail,
)

urlpatterns = [
    path('farms/<int:farm_id>/inventory/', inventory_item_list_create, name='inventory-list-create'),
    path('farms/<int:farm_id>/inventory/critical/', critical_inventory_list, name='inventory-critical'),
    path('farms/<int:farm_id>/inventory/transactions/', farm_transaction_list, name='inventory-transaction-list'),
    path('farms/<int:farm_id>/inventory/<int:pk>/', inventory_item_detail, name='inventory-detail'),
    path('farms/<int:farm_id>/inventory/<int:pk>/transactions/', item_transaction_list_create, name='inventory-item-transactions'),
    path('farms/<int:farm_id>/purchase-requests/', purchase_request_list_create, name='purchase-request-list-create'),
    path('farms/<int:farm_id>/purchase-requests/<int:pk>/', purchase_request_detail, name='purchase-request-detail'),
]
