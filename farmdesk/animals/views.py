from django.db import transaction
from django.shortcuts import get_object_or_404
from django.utils import timezone
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from farmdesk.core.utils import create_audit_log, audit_instance, serializer_changes
from farmdesk.farms.models import Farm
from farmdesk.farms.permissions import AnimalsAccess
from .filters import AnimalFilter, RemovedAnimalFilter, VaccinationFilter
from .models import Animal, Vaccination
from .serializers import AnimalSerializer, AnimalRemovalSerializer, VaccinationSerializer


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, AnimalsAccess])
def animal_list_create(request, farm_id):
    """List the active animals of a farm or register a new one"""
    farm = get_object_or_404(Farm, pk=farm_id)

    if request.method == 'GET':
        queryset = Animal.objects.filter(farm=farm, removed_at__isnull=True)
        queryset = AnimalFilter(request.query_params, queryset=queryset).qs
        return Response(AnimalSerializer(queryset, many=True).data)

    serializer = AnimalSerializer(data=request.data, context={'request': request, 'farm': farm})
    if serializer.is_valid():
        animal = serializer.save(farm=farm)
        audit_instance(request, 'create', animal, changes=serializer_changes(serializer))
        return Response(AnimalSerializer(animal).data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, AnimalsAccess])
def animal_detail(request, farm_id, pk):
    """Retrieve, update or delete an animal"""
    animal = get_object_or_404(Animal, pk=pk, farm_id=farm_id)

    if request.method == 'GET':
        return Response(AnimalSerializer(animal).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = AnimalSerializer(
            animal, data=request.data, partial=request.method == 'PATCH',
            context={'request': request, 'farm': animal.farm},
        )
        if serializer.is_valid():
            animal = serializer.save()
            audit_instance(request, 'update', animal, changes=serializer_changes(serializer))
            return Response(AnimalSerializer(animal).data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        audit_instance(request, 'delete', animal)
        animal.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['POST'])
@permission_classes([IsAuthenticated, AnimalsAccess])
def animal_remove(request, farm_id, pk):
    """Take an animal out of the herd (sold, dead, ...) keeping its record"""
    serializer = AnimalRemovalSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    with transaction.atomic():
        animal = get_object_or_404(Animal.objects.select_for_update(), pk=pk, farm_id=farm_id)
        if animal.is_removed:
            return Response({'error': 'Animal has already been removed'}, status=status.HTTP_400_BAD_REQUEST)
        animal.removed_at = serializer.validated_data.get('date') or timezone.localdate()
        animal.removal_reason = serializer.validated_data['reason']
        animal.removal_notes = serializer.validated_data.get('notes', '')
        animal.save(update_fields=['removed_at', 'removal_reason', 'removal_notes', 'updated_at'])

    create_audit_log(
        request=request, action='animal_remove', model_name='Animal', object_id=animal.pk,
        object_name=str(animal), farm_id=animal.farm_id,
        changes={'reason': animal.removal_reason, 'date': animal.removed_at.isoformat()},
    )
    return Response(AnimalSerializer(animal).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated, AnimalsAccess])
def removed_animal_list(request, farm_id):
    """List removed animals, most recent removal first"""
    farm = get_object_or_404(Farm, pk=farm_id)
    queryset = Animal.objects.filter(farm=farm, removed_at__isnull=False).order_by('-removed_at', '-updated_at')
    queryset = RemovedAnimalFilter(request.query_params, queryset=queryset).qs
    return Response(AnimalSerializer(queryset, many=True).data)


# Vaccination views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, AnimalsAccess])
def animal_vaccination_list_create(request, farm_id, animal_id):
    """List the vaccination history of an animal or record a vaccination"""
    animal = get_object_or_404(Animal, pk=animal_id, farm_id=farm_id)

    if request.method == 'GET':
        queryset = animal.vaccinations.select_related('animal')
        return Response(VaccinationSerializer(queryset, many=True).data)

    if animal.is_removed:
        return Response({'error': 'Animal has been removed from the herd'}, status=status.HTTP_400_BAD_REQUEST)

    serializer = VaccinationSerializer(data=request.data)
    if serializer.is_valid():
        with transaction.atomic():
            vaccination = serializer.save(animal=animal, applied_by=request.user)
        audit_instance(request, 'create', vaccination, changes=serializer_changes(serializer))
        return Response(VaccinationSerializer(vaccination).data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET'])
@permission_classes([IsAuthenticated, AnimalsAccess])
def vaccination_list(request, farm_id):
    """List vaccinations across the herd of a farm"""
    farm = get_object_or_404(Farm, pk=farm_id)
    queryset = Vaccination.objects.filter(farm=farm).select_related('animal')
    queryset = VaccinationFilter(request.query_params, queryset=queryset).qs
    return Response(VaccinationSerializer(queryset, many=True).data)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, AnimalsAccess])
def vaccination_detail(request, farm_id, pk):
    """Retrieve, update or delete a vaccination record"""
    vaccination = get_object_or_404(Vaccination.objects.select_related('animal'), pk=pk, farm_id=farm_id)

    if request.method == 'GET':
        return Response(VaccinationSerializer(vaccination).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = VaccinationSerializer(vaccination, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            with transaction.atomic():
                vaccination = serializer.save()
            audit_instance(request, 'update', vaccination, changes=serializer_changes(serializer))
            return Response(VaccinationSerializer(vaccination).data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        audit_instance(request, 'delete', vaccination)
        with transaction.atomic():
            vaccination.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)
