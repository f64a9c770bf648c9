from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from farmdesk.core.utils import audit_instance, serializer_changes
from farmdesk.farms.models import Farm
from farmdesk.farms.permissions import TasksAccess, GoalsAccess
from .filters import CalendarEventFilter, GoalFilter
from .models import CalendarEvent, Goal
from .serializers import CalendarEventSerializer, GoalSerializer


# CalendarEvent views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, TasksAccess])
def calendar_event_list_create(request, farm_id):
    """List calendar events of a farm or create an event"""
    farm = get_object_or_404(Farm, pk=farm_id)

    if request.method == 'GET':
        queryset = CalendarEventFilter(request.query_params, queryset=CalendarEvent.objects.filter(farm=farm)).qs
        return Response(CalendarEventSerializer(queryset, many=True).data)

    serializer = CalendarEventSerializer(data=request.data)
    if serializer.is_valid():
        event = serializer.save(farm=farm, created_by=request.user)
        audit_instance(request, 'create', event, changes=serializer_changes(serializer))
        return Response(CalendarEventSerializer(event).data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, TasksAccess])
def calendar_event_detail(request, farm_id, pk):
    """Retrieve, update or delete a calendar event"""
    event = get_object_or_404(CalendarEvent, pk=pk, farm_id=farm_id)

    if request.method == 'GET':
        return Response(CalendarEventSerializer(event).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = CalendarEventSerializer(event, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            event = serializer.save()
            audit_instance(request, 'update', event, changes=serializer_changes(serializer))
            return Response(CalendarEventSerializer(event).data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        audit_instance(request, 'delete', event)
        event.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


# Goal views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, GoalsAccess])
def goal_list_create(request, farm_id):
    """List goals of a farm or create a goal"""
    farm = get_object_or_404(Farm, pk=farm_id)

    if request.method == 'GET':
        queryset = Goal.objects.filter(farm=farm).select_related('assigned_to', 'crop')
        queryset = GoalFilter(request.query_params, queryset=queryset).qs
        return Response(GoalSerializer(queryset, many=True).data)

    serializer = GoalSerializer(data=request.data, context={'request': request, 'farm': farm})
    if serializer.is_valid():
        goal = serializer.save(farm=farm, created_by=request.user)
        audit_instance(request, 'create', goal, changes=serializer_changes(serializer))
        return Response(GoalSerializer(goal).data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, GoalsAccess])
def goal_detail(request, farm_id, pk):
    """Retrieve, update or delete a goal"""
    goal = get_object_or_404(Goal, pk=pk, farm_id=farm_id)

    if request.method == 'GET':
        return Response(GoalSerializer(goal).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = GoalSerializer(
            goal, data=request.data, partial=request.method == 'PATCH',
            context={'request': request, 'farm': goal.farm},
        )
        if serializer.is_valid():
            goal = serializer.save()
            audit_instance(request, 'update', goal, changes=serializer_changes(serializer))
            return Response(GoalSerializer(goal).data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        audit_instance(request, 'delete', goal)
        goal.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@permission_classes([IsAuthenticated, GoalsAccess])
def goal_status_list(request, farm_id, goal_status):
    """Goals of a farm with the given status"""
    valid_statuses = [value for value, _ in Goal.STATUS_CHOICES]
    if goal_status not in valid_statuses:
        return Response(
            {'error': f"Invalid status '{goal_status}'. Valid values: {', '.join(valid_statuses)}"},
            status=status.HTTP_400_BAD_REQUEST,
        )
    farm = get_object_or_404(Farm, pk=farm_id)
    queryset = Goal.objects.filter(farm=farm, status=goal_status).select_related('assigned_to', 'crop')
    return Response(GoalSerializer(queryset, many=True).data)
