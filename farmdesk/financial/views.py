from decimal import Decimal

from django.db.models import Sum, Count
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from farmdesk.core.utils import audit_instance, serializer_changes
from farmdesk.farms.models import Farm
from farmdesk.farms.permissions import FinancialAccess
from .filters import CostFilter
from .models import Cost
from .serializers import CostSerializer


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, FinancialAccess])
def cost_list_create(request, farm_id):
    """List costs of a farm or record a new cost"""
    farm = get_object_or_404(Farm, pk=farm_id)

    if request.method == 'GET':
        queryset = CostFilter(request.query_params, queryset=Cost.objects.filter(farm=farm)).qs
        return Response(CostSerializer(queryset, many=True).data)

    serializer = CostSerializer(data=request.data)
    if serializer.is_valid():
        cost = serializer.save(farm=farm, created_by=request.user)
        audit_instance(request, 'create', cost, changes=serializer_changes(serializer))
        return Response(CostSerializer(cost).data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, FinancialAccess])
def cost_detail(request, farm_id, pk):
    """Retrieve, update or delete a cost"""
    cost = get_object_or_404(Cost, pk=pk, farm_id=farm_id)

    if request.method == 'GET':
        return Response(CostSerializer(cost).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = CostSerializer(cost, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            cost = serializer.save()
            audit_instance(request, 'update', cost, changes=serializer_changes(serializer))
            return Response(CostSerializer(cost).data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        audit_instance(request, 'delete', cost)
        cost.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@permission_classes([IsAuthenticated, FinancialAccess])
def cost_summary(request, farm_id):
    """Total and per-category amounts for the filtered costs"""
    farm = get_object_or_404(Farm, pk=farm_id)
    queryset = CostFilter(request.query_params, queryset=Cost.objects.filter(farm=farm)).qs

    totals = queryset.aggregate(total=Sum('amount'), count=Count('id'))
    by_category = (
        queryset.order_by().values('category')
        .annotate(total=Sum('amount'), count=Count('id'))
        .order_by('-total')
    )
    return Response({
        'total': str(totals['total'] or Decimal('0.00')),
        'count': totals['count'],
        'by_category': [
            {'category': row['category'], 'total': str(row['total']), 'count': row['count']}
            for row in by_category
        ],
        'date_from': request.query_params.get('date_from'),
        'date_to': request.query_params.get('date_to'),
    })
