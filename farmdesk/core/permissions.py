from rest_framework.permissions import BasePermission


class IsSuperAdmin(BasePermission):
    """Allows access only to super admins"""
    message = 'Not authorized - super admin role required'

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.is_super_admin)
