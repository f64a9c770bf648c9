import logging

from django.shortcuts import get_object_or_404
from django.db import transaction
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from farmdesk.core.models import User
from farmdesk.core.utils import create_audit_log, audit_instance, serializer_changes
from .access import (
    get_accessible_farms, get_module_access_map, can_view_farm, is_super_admin, is_farm_admin,
    assign_user_to_farm, remove_user_from_farm, set_user_permission, apply_role_defaults,
    MembershipRequiredError, NOT_AUTHORIZED_MESSAGE,
)
from .dashboard import build_dashboard
from .filters import FarmFilter, UserPermissionFilter
from .models import Farm, UserFarm, UserPermission, SystemModule, AccessLevel
from .permissions import AdministrationAccess, require_access
from .serializers import (
    FarmSerializer, UserFarmSerializer, MembershipCreateSerializer, MembershipUpdateSerializer,
    UserPermissionSerializer, PermissionGrantSerializer,
)

logger = logging.getLogger(__name__)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def farm_list_create(request):
    """List farms the user can access or create a new farm"""
    if request.method == 'GET':
        queryset = get_accessible_farms(request.user).select_related('admin')
        queryset = FarmFilter(request.query_params, queryset=queryset).qs
        serializer = FarmSerializer(queryset, many=True)
        return Response(serializer.data)

    user = request.user
    if not (is_super_admin(user) or user.role == User.FARM_ADMIN):
        return Response({'detail': 'Only administrators can create farms'}, status=status.HTTP_403_FORBIDDEN)

    serializer = FarmSerializer(data=request.data)
    if serializer.is_valid():
        with transaction.atomic():
            admin = serializer.validated_data.get('admin')
            if admin is None and user.role == User.FARM_ADMIN:
                admin = user
            farm = serializer.save(created_by=user, admin=admin)
            if admin is not None:
                assign_user_to_farm(admin, farm, role=UserFarm.ADMIN)
        audit_instance(request, 'create', farm, farm_id=farm.pk, changes=serializer_changes(serializer))
        logger.info(f"Farm {farm.pk} '{farm.name}' created by user {user.pk}")
        return Response(FarmSerializer(farm).data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def farm_detail(request, farm_id):
    """Retrieve, update or delete a farm"""
    farm = get_object_or_404(Farm, pk=farm_id)

    if request.method == 'GET':
        if not can_view_farm(request.user, farm):
            raise PermissionDenied(NOT_AUTHORIZED_MESSAGE)
        return Response(FarmSerializer(farm).data)

    if request.method == 'DELETE':
        if not is_super_admin(request.user):
            return Response({'detail': 'Only super admins can delete farms'}, status=status.HTTP_403_FORBIDDEN)
        audit_instance(request, 'delete', farm, farm_id=farm.pk)
        farm.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)

    require_access(request.user, farm, SystemModule.ADMINISTRATION, AccessLevel.EDIT)
    serializer = FarmSerializer(farm, data=request.data, partial=request.method == 'PATCH')
    if serializer.is_valid():
        with transaction.atomic():
            farm = serializer.save()
            if 'admin' in serializer.validated_data and farm.admin is not None:
                assign_user_to_farm(farm.admin, farm, role=UserFarm.ADMIN)
        audit_instance(request, 'update', farm, farm_id=farm.pk, changes=serializer_changes(serializer))
        return Response(FarmSerializer(farm).data)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def farm_dashboard(request, farm_id):
    """Summary counters for the modules the user can read"""
    farm = get_object_or_404(Farm, pk=farm_id)
    if not can_view_farm(request.user, farm):
        raise PermissionDenied(NOT_AUTHORIZED_MESSAGE)
    return Response(build_dashboard(request.user, farm))


# Membership views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, AdministrationAccess])
def farm_member_list_create(request, farm_id):
    """List farm members or add a user to the farm"""
    farm = get_object_or_404(Farm, pk=farm_id)

    if request.method == 'GET':
        memberships = UserFarm.objects.filter(farm=farm).select_related('user').order_by('user__username')
        return Response(UserFarmSerializer(memberships, many=True).data)

    serializer = MembershipCreateSerializer(data=request.data)
    if serializer.is_valid():
        member = serializer.validated_data['user']
        membership, created = assign_user_to_farm(
            member, farm,
            role=serializer.validated_data['role'],
            apply_defaults=serializer.validated_data['apply_defaults'],
        )
        create_audit_log(
            request=request, action='membership_change', model_name='UserFarm', object_id=membership.pk,
            object_name=str(membership), farm_id=farm.pk,
            changes={'user': member.pk, 'role': membership.role, 'created': created},
        )
        return Response(
            UserFarmSerializer(membership).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, AdministrationAccess])
def farm_member_detail(request, farm_id, user_id):
    """Change a member's role or remove the member from the farm"""
    farm = get_object_or_404(Farm, pk=farm_id)
    membership = get_object_or_404(UserFarm, farm=farm, user_id=user_id)
    member = membership.user

    if request.method == 'DELETE':
        if farm.admin_id == member.pk:
            return Response(
                {'error': 'The farm admin cannot be removed; assign another admin first'},
                status=status.HTTP_400_BAD_REQUEST,
            )
        remove_user_from_farm(member, farm)
        create_audit_log(
            request=request, action='membership_change', model_name='UserFarm', object_id=membership.pk,
            object_name=str(membership), farm_id=farm.pk, changes={'user': member.pk, 'removed': True},
        )
        return Response(status=status.HTTP_204_NO_CONTENT)

    serializer = MembershipUpdateSerializer(data=request.data)
    if serializer.is_valid():
        membership, _ = assign_user_to_farm(
            member, farm,
            role=serializer.validated_data['role'],
            apply_defaults=serializer.validated_data['apply_defaults'],
        )
        create_audit_log(
            request=request, action='membership_change', model_name='UserFarm', object_id=membership.pk,
            object_name=str(membership), farm_id=farm.pk, changes={'user': member.pk, 'role': membership.role},
        )
        return Response(UserFarmSerializer(membership).data)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


# Permission views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, AdministrationAccess])
def farm_permission_list_create(request, farm_id):
    """List module permissions of a farm or grant a single permission"""
    farm = get_object_or_404(Farm, pk=farm_id)

    if request.method == 'GET':
        queryset = UserPermission.objects.filter(farm=farm).select_related('user')
        queryset = UserPermissionFilter(request.query_params, queryset=queryset).qs
        return Response(UserPermissionSerializer(queryset, many=True).data)

    serializer = PermissionGrantSerializer(data=request.data)
    if serializer.is_valid():
        target = serializer.validated_data['user']
        try:
            permission, created = set_user_permission(
                target, farm,
                serializer.validated_data['module'],
                serializer.validated_data['access_level'],
            )
        except MembershipRequiredError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        create_audit_log(
            request=request, action='permission_change', model_name='UserPermission', object_id=permission.pk,
            object_name=str(permission), farm_id=farm.pk,
            changes={'user': target.pk, 'module': permission.module, 'access_level': permission.access_level},
        )
        return Response(
            UserPermissionSerializer(permission).data,
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['POST'])
@permission_classes([IsAuthenticated, AdministrationAccess])
def farm_member_apply_defaults(request, farm_id, user_id):
    """Grant the role defaults of a member, optionally replacing existing grants"""
    farm = get_object_or_404(Farm, pk=farm_id)
    membership = get_object_or_404(UserFarm, farm=farm, user_id=user_id)
    reset = str(request.data.get('reset', '')).lower() in ('1', 'true', 'yes')
    written = apply_role_defaults(membership.user, farm, reset=reset)
    create_audit_log(
        request=request, action='permission_change', model_name='UserFarm', object_id=membership.pk,
        object_name=str(membership), farm_id=farm.pk, changes={'defaults_applied': written, 'reset': reset},
    )
    permissions = UserPermission.objects.filter(farm=farm, user=membership.user)
    return Response({
        'written': written,
        'permissions': UserPermissionSerializer(permissions, many=True).data,
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def my_permissions(request):
    """Effective module access of the current user for every accessible farm"""
    result = []
    for farm in get_accessible_farms(request.user):
        result.append({
            'farm': farm.pk,
            'farm_name': farm.name,
            'is_farm_admin': is_farm_admin(request.user, farm),
            'modules': get_module_access_map(request.user, farm),
        })
    return Response(result)
