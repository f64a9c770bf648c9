import logging

from django.contrib.auth import authenticate, get_user_model
from django.contrib.auth.models import update_last_login
from django.core.exceptions import ObjectDoesNotExist
from django.db import connection, DatabaseError
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated, AllowAny
from rest_framework.response import Response
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer, TokenRefreshSerializer
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import TokenRefreshView

from farmdesk.farms.access import get_accessible_farms
from . import lockout
from .filters import AuditLogFilter
from .models import AuditLog
from .pagination import paginated_response
from .permissions import IsSuperAdmin
from .serializers import (
    UserSerializer, UserCreateSerializer, AdminUserCreateSerializer, UserProfileSerializer,
    PasswordChangeSerializer, LoginSerializer, AuditLogSerializer
)
from .utils import create_audit_log, serializer_changes

User = get_user_model()
logger = logging.getLogger(__name__)


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token['username'] = user.username
        token['role'] = user.role
        return token


class CustomTokenRefreshSerializer(TokenRefreshSerializer):
    """Token refresh serializer that handles deleted users gracefully"""
    def validate(self, attrs):
        try:
            return super().validate(attrs)
        except (InvalidToken, TokenError):
            raise InvalidToken('Token is invalid or expired.')
        except ObjectDoesNotExist:
            raise InvalidToken('Token is invalid. User no longer exists.')


class CustomTokenRefreshView(TokenRefreshView):
    serializer_class = CustomTokenRefreshSerializer


def token_response(user, status_code=status.HTTP_200_OK):
    token = CustomTokenObtainPairSerializer.get_token(user)
    return Response({
        'user': UserSerializer(user).data,
        'access': str(token.access_token),
        'refresh': str(token),
    }, status=status_code)


@api_view(['POST'])
@permission_classes([AllowAny])
def register(request):
    """Public sign-up, always with the employee role"""
    serializer = UserCreateSerializer(data=request.data)
    if serializer.is_valid():
        user = serializer.save()
        create_audit_log(request=request, action='create', model_name='User', object_id=user.pk,
                         object_name=user.username, user=user)
        return token_response(user, status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


def _locked_response(remaining):
    response = Response({
        'error': 'Too many failed login attempts. Try again later.',
        'retry_after': remaining,
    }, status=status.HTTP_429_TOO_MANY_REQUESTS)
    response['Retry-After'] = str(remaining)
    return response


@api_view(['POST'])
@permission_classes([AllowAny])
def login(request):
    """Authenticate with username and password, blocking the username after repeated failures"""
    serializer = LoginSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    username = serializer.validated_data['username']
    password = serializer.validated_data['password']

    remaining = lockout.get_lockout_remaining(username)
    if remaining:
        create_audit_log(request=request, action='login_locked', model_name='User', object_id=username,
                         changes={'retry_after': remaining})
        return _locked_response(remaining)

    user = authenticate(request, username=username, password=password)
    if user is None:
        attempts_remaining, locked_for = lockout.register_failure(username)
        create_audit_log(request=request, action='login_failed', model_name='User', object_id=username,
                         changes={'attempts_remaining': attempts_remaining})
        if locked_for:
            return _locked_response(locked_for)
        return Response({
            'error': 'Invalid username or password',
            'attempts_remaining': attempts_remaining,
        }, status=status.HTTP_401_UNAUTHORIZED)

    lockout.reset_attempts(username)
    update_last_login(None, user)
    create_audit_log(request=request, action='login', model_name='User', object_id=user.pk,
                     object_name=user.username, user=user)
    logger.info(f"User {user.pk} logged in")
    return token_response(user)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def logout(request):
    """Blacklist the given refresh token"""
    refresh = request.data.get('refresh')
    if not refresh:
        return Response({'refresh': ['This field is required.']}, status=status.HTTP_400_BAD_REQUEST)
    try:
        RefreshToken(refresh).blacklist()
    except TokenError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    create_audit_log(request=request, action='logout', model_name='User', object_id=request.user.pk,
                     object_name=request.user.username)
    return Response(status=status.HTTP_205_RESET_CONTENT)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def user_me(request):
    """Current user with the farms they can access"""
    user_data = UserSerializer(request.user).data
    user_data['farms'] = list(get_accessible_farms(request.user).values_list('id', flat=True))
    return Response(user_data)


@api_view(['PATCH', 'PUT'])
@permission_classes([IsAuthenticated])
def user_profile(request):
    """Update the current user's profile"""
    serializer = UserProfileSerializer(request.user, data=request.data, partial=True)
    if serializer.is_valid():
        user = serializer.save()
        create_audit_log(request=request, action='update', model_name='User', object_id=user.pk,
                         object_name=user.username, changes=serializer_changes(serializer))
        return Response(UserSerializer(user).data)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def user_password(request):
    """Change the current user's password"""
    serializer = PasswordChangeSerializer(data=request.data, context={'request': request})
    if serializer.is_valid():
        user = request.user
        user.set_password(serializer.validated_data['new_password'])
        user.save(update_fields=['password', 'updated_at'])
        create_audit_log(request=request, action='password_change', model_name='User', object_id=user.pk,
                         object_name=user.username)
        return Response({'message': 'Password updated'})
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


# User administration views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsSuperAdmin])
def user_list_create(request):
    """List all users or create a new user"""
    if request.method == 'GET':
        users = User.objects.all().order_by('username')
        role = request.query_params.get('role')
        if role:
            users = users.filter(role=role)
        return Response(UserSerializer(users, many=True).data)

    serializer = AdminUserCreateSerializer(data=request.data)
    if serializer.is_valid():
        user = serializer.save()
        create_audit_log(request=request, action='create', model_name='User', object_id=user.pk,
                         object_name=user.username, changes={'role': user.role})
        return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, IsSuperAdmin])
def user_detail(request, pk):
    """Retrieve, update or delete a user"""
    user = get_object_or_404(User, pk=pk)

    if request.method == 'GET':
        return Response(UserSerializer(user).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = UserSerializer(user, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            create_audit_log(request=request, action='update', model_name='User', object_id=user.pk,
                             object_name=user.username, changes=serializer_changes(serializer))
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        if user.pk == request.user.pk:
            return Response({'error': 'You cannot delete your own account'}, status=status.HTTP_400_BAD_REQUEST)
        create_audit_log(request=request, action='delete', model_name='User', object_id=user.pk,
                         object_name=user.username)
        user.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


# AuditLog views
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def audit_log_list(request):
    """List audit logs with filtering"""
    queryset = AuditLog.objects.select_related('user')

    # Non super admins only see their own entries
    if not request.user.is_super_admin:
        queryset = queryset.filter(user=request.user)

    queryset = AuditLogFilter(request.query_params, queryset=queryset).qs.order_by('-created_at', '-id')
    return paginated_response(request, queryset, AuditLogSerializer)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def audit_log_detail(request, pk):
    """Retrieve an audit log"""
    audit_log = get_object_or_404(AuditLog, pk=pk)

    if not request.user.is_super_admin and audit_log.user_id != request.user.pk:
        return Response({'error': 'Permission denied'}, status=status.HTTP_403_FORBIDDEN)

    return Response(AuditLogSerializer(audit_log).data)


@api_view(['GET'])
@permission_classes([AllowAny])
def health(request):
    """Liveness check including database connectivity"""
    try:
        with connection.cursor() as cursor:
            cursor.execute('SELECT 1')
        database = 'ok'
    except DatabaseError as e:
        logger.error(f"Health check database error: {str(e)}")
        database = 'unavailable'
    healthy = database == 'ok'
    return Response(
        {'status': 'ok' if healthy else 'degraded', 'database': database},
        status=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
    )
