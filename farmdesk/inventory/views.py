from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from farmdesk.core.utils import create_audit_log, audit_instance, serializer_changes
from farmdesk.farms.models import Farm
from farmdesk.farms.permissions import InventoryAccess
from .filters import InventoryItemFilter, InventoryTransactionFilter, PurchaseRequestFilter
from .models import InventoryItem, InventoryTransaction, PurchaseRequest
from .serializers import (
    InventoryItemSerializer, InventoryTransactionSerializer, TransactionCreateSerializer, PurchaseRequestSerializer,
)
from .services import apply_transaction, critical_items, InsufficientStockError


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, InventoryAccess])
def inventory_item_list_create(request, farm_id):
    """List inventory items of a farm or create a new item"""
    farm = get_object_or_404(Farm, pk=farm_id)

    if request.method == 'GET':
        queryset = InventoryItemFilter(request.query_params, queryset=InventoryItem.objects.filter(farm=farm)).qs
        return Response(InventoryItemSerializer(queryset, many=True).data)

    serializer = InventoryItemSerializer(data=request.data)
    if serializer.is_valid():
        item = serializer.save(farm=farm)
        audit_instance(request, 'create', item, changes=serializer_changes(serializer))
        return Response(InventoryItemSerializer(item).data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, InventoryAccess])
def inventory_item_detail(request, farm_id, pk):
    """Retrieve, update or delete an inventory item"""
    item = get_object_or_404(InventoryItem, pk=pk, farm_id=farm_id)

    if request.method == 'GET':
        return Response(InventoryItemSerializer(item).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = InventoryItemSerializer(item, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            item = serializer.save()
            audit_instance(request, 'update', item, changes=serializer_changes(serializer))
            return Response(InventoryItemSerializer(item).data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        audit_instance(request, 'delete', item)
        item.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@permission_classes([IsAuthenticated, InventoryAccess])
def critical_inventory_list(request, farm_id):
    """Items at or below their minimum level"""
    farm = get_object_or_404(Farm, pk=farm_id)
    queryset = critical_items(InventoryItem.objects.filter(farm=farm)).order_by('category', 'name')
    return Response(InventoryItemSerializer(queryset, many=True).data)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, InventoryAccess])
def item_transaction_list_create(request, farm_id, pk):
    """List the movements of an item or record a new entry, withdrawal or adjustment"""
    item = get_object_or_404(InventoryItem, pk=pk, farm_id=farm_id)

    if request.method == 'GET':
        queryset = item.transactions.select_related('created_by', 'item')
        return Response(InventoryTransactionSerializer(queryset, many=True).data)

    serializer = TransactionCreateSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    data = serializer.validated_data
    try:
        item, movement = apply_transaction(
            item.pk, data['transaction_type'], data['quantity'],
            user=request.user, reason=data['reason'], notes=data['notes'],
        )
    except InsufficientStockError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    create_audit_log(
        request=request, action='inventory_transaction', model_name='InventoryItem', object_id=item.pk,
        object_name=item.name, farm_id=item.farm_id,
        changes={
            'transaction_type': movement.transaction_type,
            'quantity': str(movement.quantity),
            'previous_quantity': str(movement.previous_quantity),
            'new_quantity': str(movement.new_quantity),
        },
    )
    return Response({
        'item': InventoryItemSerializer(item).data,
        'transaction': InventoryTransactionSerializer(movement).data,
    }, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated, InventoryAccess])
def farm_transaction_list(request, farm_id):
    """All inventory movements of a farm, newest first"""
    farm = get_object_or_404(Farm, pk=farm_id)
    queryset = InventoryTransaction.objects.filter(item__farm=farm).select_related('item', 'created_by')
    queryset = InventoryTransactionFilter(request.query_params, queryset=queryset).qs
    return Response(InventoryTransactionSerializer(queryset, many=True).data)


# Purchase request views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, InventoryAccess])
def purchase_request_list_create(request, farm_id):
    """List purchase requests of a farm, urgent first, or open a new one"""
    farm = get_object_or_404(Farm, pk=farm_id)

    if request.method == 'GET':
        queryset = PurchaseRequestFilter(request.query_params, queryset=PurchaseRequest.objects.filter(farm=farm)).qs
        return Response(PurchaseRequestSerializer(queryset, many=True).data)

    serializer = PurchaseRequestSerializer(data=request.data)
    if serializer.is_valid():
        purchase_request = serializer.save(farm=farm, created_by=request.user)
        audit_instance(request, 'create', purchase_request, changes=serializer_changes(serializer))
        return Response(PurchaseRequestSerializer(purchase_request).data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, InventoryAccess])
def purchase_request_detail(request, farm_id, pk):
    """Retrieve, update (including status changes) or delete a purchase request"""
    purchase_request = get_object_or_404(PurchaseRequest, pk=pk, farm_id=farm_id)

    if request.method == 'GET':
        return Response(PurchaseRequestSerializer(purchase_request).data)
    elif request.method in ('PUT', 'PATCH'):
        previous_status = purchase_request.status
        serializer = PurchaseRequestSerializer(purchase_request, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            purchase_request = serializer.save()
            changes = serializer_changes(serializer)
            if purchase_request.status != previous_status:
                changes['previous_status'] = previous_status
            audit_instance(request, 'update', purchase_request, changes=changes)
            return Response(PurchaseRequestSerializer(purchase_request).data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        audit_instance(request, 'delete', purchase_request)
        purchase_request.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)
