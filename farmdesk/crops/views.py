from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from farmdesk.core.utils import audit_instance, serializer_changes
from farmdesk.farms.models import Farm
from farmdesk.farms.permissions import CropsAccess
from .filters import CropFilter
from .models import Crop
from .serializers import CropSerializer


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, CropsAccess])
def crop_list_create(request, farm_id):
    """List crops of a farm or create a new crop"""
    farm = get_object_or_404(Farm, pk=farm_id)

    if request.method == 'GET':
        queryset = CropFilter(request.query_params, queryset=Crop.objects.filter(farm=farm)).qs
        return Response(CropSerializer(queryset, many=True).data)

    serializer = CropSerializer(data=request.data)
    if serializer.is_valid():
        crop = serializer.save(farm=farm)
        audit_instance(request, 'create', crop, changes=serializer_changes(serializer))
        return Response(CropSerializer(crop).data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, CropsAccess])
def crop_detail(request, farm_id, pk):
    """Retrieve, update or delete a crop"""
    crop = get_object_or_404(Crop, pk=pk, farm_id=farm_id)

    if request.method == 'GET':
        return Response(CropSerializer(crop).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = CropSerializer(crop, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            crop = serializer.save()
            audit_instance(request, 'update', crop, changes=serializer_changes(serializer))
            return Response(CropSerializer(crop).data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        audit_instance(request, 'delete', crop)
        crop.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)
