from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from farmdesk.core.utils import audit_instance, serializer_changes
from farmdesk.farms.access import get_accessible_farms, check_access, required_level_for_method
from farmdesk.farms.models import Farm, SystemModule, AccessLevel
from farmdesk.farms.permissions import TasksAccess, require_access
from .filters import TaskFilter
from .models import Task
from .serializers import TaskSerializer


def _update_task(request, task):
    serializer = TaskSerializer(
        task, data=request.data, partial=request.method == 'PATCH',
        context={'request': request, 'farm': task.farm},
    )
    if serializer.is_valid():
        task = serializer.save()
        audit_instance(request, 'update', task, changes=serializer_changes(serializer))
        return Response(TaskSerializer(task).data)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, TasksAccess])
def task_list_create(request, farm_id):
    """List tasks of a farm (latest due date first) or create a task"""
    farm = get_object_or_404(Farm, pk=farm_id)

    if request.method == 'GET':
        queryset = Task.objects.filter(farm=farm).select_related('assigned_to')
        queryset = TaskFilter(request.query_params, queryset=queryset).qs.order_by('-due_date', '-id')
        return Response(TaskSerializer(queryset, many=True).data)

    serializer = TaskSerializer(data=request.data, context={'request': request, 'farm': farm})
    if serializer.is_valid():
        task = serializer.save(farm=farm, created_by=request.user)
        audit_instance(request, 'create', task, changes=serializer_changes(serializer))
        return Response(TaskSerializer(task).data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET'])
@permission_classes([IsAuthenticated, TasksAccess])
def pending_task_list(request, farm_id):
    """Pending tasks of a farm, nearest due date first"""
    farm = get_object_or_404(Farm, pk=farm_id)
    queryset = Task.objects.filter(farm=farm, status='pending').select_related('assigned_to').order_by('due_date', 'id')
    return Response(TaskSerializer(queryset, many=True).data)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, TasksAccess])
def task_detail(request, farm_id, pk):
    """Retrieve, update or delete a task of a farm"""
    task = get_object_or_404(Task, pk=pk, farm_id=farm_id)

    if request.method == 'GET':
        return Response(TaskSerializer(task).data)
    elif request.method in ('PUT', 'PATCH'):
        return _update_task(request, task)
    else:  # DELETE
        audit_instance(request, 'delete', task)
        task.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def task_by_id(request, pk):
    """Task endpoint addressed by id only, access is checked against the task's farm"""
    task = get_object_or_404(Task.objects.select_related('farm'), pk=pk)
    require_access(request.user, task.farm, SystemModule.TASKS, required_level_for_method(request.method))

    if request.method == 'GET':
        return Response(TaskSerializer(task).data)
    elif request.method in ('PUT', 'PATCH'):
        return _update_task(request, task)
    else:  # DELETE
        audit_instance(request, 'delete', task)
        task.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def assigned_task_list(request):
    """Tasks assigned to the current user in farms where they can read tasks"""
    farm_ids = [
        farm.pk for farm in get_accessible_farms(request.user)
        if check_access(request.user, farm, SystemModule.TASKS, AccessLevel.READ_ONLY)
    ]
    queryset = Task.objects.filter(assigned_to=request.user, farm_id__in=farm_ids).select_related('farm')
    queryset = TaskFilter(request.query_params, queryset=queryset).qs.order_by('due_date', 'id')
    return Response(TaskSerializer(queryset, many=True).data)
