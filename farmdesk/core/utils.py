"""Utility functions for audit logging"""
import logging

from .models import AuditLog

logger = logging.getLogger(__name__)


def get_client_ip(request):
    """Extract client IP address from request"""
    if not request or not hasattr(request, 'META'):
        return None
    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        ip = x_forwarded_for.split(',')[0].strip()
    else:
        ip = request.META.get('REMOTE_ADDR')
    return ip or None


def create_audit_log(request=None, action=None, model_name=None, object_id=None,
                     changes=None, user=None, object_name=None, farm_id=None):
    """
    Create an audit log entry

    Args:
        request: Django request object (for user and IP) - optional if user is provided
        action: Action type (create, update, delete, login, ...)
        model_name: Name of the model being acted upon
        object_id: ID of the object (as string)
        changes: Dictionary of changes made
        user: Optional user override (defaults to request.user if request provided)
        object_name: Human-readable name of the object (e.g., animal code, farm name)
        farm_id: Farm the object belongs to
    """
    try:
        audit_user = None
        if user:
            audit_user = user
        elif request and hasattr(request, 'user'):
            audit_user = request.user

        ip_address = get_client_ip(request) if request else None

        if not action or not model_name or object_id in (None, ''):
            logger.warning(f"Audit log creation skipped: missing required fields (action={action}, model_name={model_name}, object_id={object_id})")
            return None

        return AuditLog.objects.create(
            user=audit_user if audit_user and audit_user.is_authenticated else None,
            action=action,
            model_name=model_name,
            object_id=str(object_id),
            object_name=(str(object_name)[:255] if object_name else None),
            farm_id=farm_id,
            changes=changes or {},
            ip_address=ip_address
        )
    except Exception as e:
        # Don't fail the main operation if audit logging fails
        logger.error(f"Failed to create audit log: {str(e)}")
        return None


def audit_instance(request, action, instance, farm_id=None, changes=None):
    """Shortcut for logging a create/update/delete of a model instance"""
    return create_audit_log(
        request=request,
        action=action,
        model_name=instance.__class__.__name__,
        object_id=instance.pk,
        object_name=str(instance),
        farm_id=farm_id if farm_id is not None else getattr(instance, 'farm_id', None),
        changes=changes,
    )


def serializer_changes(serializer):
    """Return the validated fields of a serializer in a JSON-safe form"""
    changes = {}
    for key, value in serializer.validated_data.items():
        if hasattr(value, 'pk'):
            changes[key] = value.pk
        elif value is None or isinstance(value, (bool, int, str)):
            changes[key] = value
        else:
            changes[key] = str(value)
    return changes
