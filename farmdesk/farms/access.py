"""
Farm access control.

Effective access of a user to a module of a farm:

* super admins have full access everywhere
* the farm admin (role ``farm_admin`` and designated as ``Farm.admin``)
  has full access to that farm
* everybody else gets the level stored in ``UserPermission``, or ``none``

Computed module maps are cached per (user, farm). Cache keys embed a
version token for the user and for the farm; the signals in
``farmdesk.farms.signals`` replace those tokens whenever a row that feeds
the computation changes. The tokens are replaced once the surrounding
transaction commits, and maps are neither read from nor written to the
cache while a transaction is open, so a map built from uncommitted rows
is never shared.
"""
import logging
import uuid

from django.conf import settings
from django.core.cache import cache
from django.db import transaction
from django.db.models import Q

from farmdesk.core.models import User
from .models import Farm, UserFarm, UserPermission, SystemModule, AccessLevel

logger = logging.getLogger(__name__)

ACCESS_MAP_KEY_PREFIX = 'farm_access:'
USER_VERSION_KEY_PREFIX = 'farm_access_user_v:'
FARM_VERSION_KEY_PREFIX = 'farm_access_farm_v:'

NOT_AUTHORIZED_MESSAGE = 'Not authorized - insufficient module permissions'


class MembershipRequiredError(Exception):
    """Raised when granting a permission to a user who is not a farm member"""


# Default module grants applied when a user joins a farm
ROLE_DEFAULT_PERMISSIONS = {
    User.SUPER_ADMIN: {module: AccessLevel.FULL for module in SystemModule.ALL},
    User.FARM_ADMIN: {module: AccessLevel.FULL for module in SystemModule.ALL},
    User.MANAGER: {
        SystemModule.ANIMALS: AccessLevel.READ_ONLY,
        SystemModule.CROPS: AccessLevel.READ_ONLY,
        SystemModule.INVENTORY: AccessLevel.READ_ONLY,
        SystemModule.TASKS: AccessLevel.FULL,
        SystemModule.FINANCIAL: AccessLevel.FULL,
        SystemModule.GOALS: AccessLevel.READ_ONLY,
        SystemModule.ADMINISTRATION: AccessLevel.READ_ONLY,
    },
    User.VETERINARIAN: {
        SystemModule.ANIMALS: AccessLevel.FULL,
        SystemModule.TASKS: AccessLevel.READ_ONLY,
    },
    User.AGRONOMIST: {
        SystemModule.CROPS: AccessLevel.FULL,
        SystemModule.TASKS: AccessLevel.READ_ONLY,
    },
    User.EMPLOYEE: {
        SystemModule.TASKS: AccessLevel.FULL,
        SystemModule.ANIMALS: AccessLevel.READ_ONLY,
        SystemModule.CROPS: AccessLevel.READ_ONLY,
        SystemModule.INVENTORY: AccessLevel.READ_ONLY,
    },
}
ROLE_DEFAULT_PERMISSIONS[User.CONSULTANT] = ROLE_DEFAULT_PERMISSIONS[User.EMPLOYEE]


def default_permissions_for_role(role):
    """Return a fresh {module: level} dict of default grants for a global role"""
    return dict(ROLE_DEFAULT_PERMISSIONS.get(role, ROLE_DEFAULT_PERMISSIONS[User.EMPLOYEE]))


def required_level_for_method(method):
    if method in ('GET', 'HEAD', 'OPTIONS'):
        return AccessLevel.READ_ONLY
    if method == 'DELETE':
        return AccessLevel.MANAGE
    return AccessLevel.EDIT


# ==================== CACHE VERSIONS ====================

def _get_version(key):
    version = cache.get(key)
    if version is None:
        cache.add(key, uuid.uuid4().hex, None)
        version = cache.get(key)
    return version


def invalidate_user_access(user_id):
    cache.set(f"{USER_VERSION_KEY_PREFIX}{user_id}", uuid.uuid4().hex, None)
    logger.debug(f"Invalidated access cache for user {user_id}")


def invalidate_farm_access(farm_id):
    cache.set(f"{FARM_VERSION_KEY_PREFIX}{farm_id}", uuid.uuid4().hex, None)
    logger.debug(f"Invalidated access cache for farm {farm_id}")


def get_access_cache_key(user_id, farm_id):
    user_version = _get_version(f"{USER_VERSION_KEY_PREFIX}{user_id}")
    farm_version = _get_version(f"{FARM_VERSION_KEY_PREFIX}{farm_id}")
    return f"{ACCESS_MAP_KEY_PREFIX}{user_id}:{farm_id}:{user_version}:{farm_version}"


# ==================== ACCESS CHECKS ====================

def is_super_admin(user):
    return bool(user and user.is_authenticated and user.is_super_admin)


def is_farm_admin(user, farm):
    if not (user and user.is_authenticated):
        return False
    return user.role == User.FARM_ADMIN and farm.admin_id == user.pk


def _compute_access_map(user, farm):
    if is_super_admin(user) or is_farm_admin(user, farm):
        return {module: AccessLevel.FULL for module in SystemModule.ALL}
    access = {module: AccessLevel.NONE for module in SystemModule.ALL}
    rows = UserPermission.objects.filter(user=user, farm=farm).values_list('module', 'access_level')
    for module, level in rows:
        access[module] = level
    return access


def get_module_access_map(user, farm):
    """Effective access level of the user for every module of the farm"""
    if not (user and user.is_authenticated):
        return {module: AccessLevel.NONE for module in SystemModule.ALL}

    if transaction.get_connection().in_atomic_block:
        return _compute_access_map(user, farm)

    cache_key = get_access_cache_key(user.pk, farm.pk)
    access = cache.get(cache_key)
    if access is not None:
        return access

    logger.debug(f"Access cache miss for user {user.pk} farm {farm.pk}")
    access = _compute_access_map(user, farm)
    cache.set(cache_key, access, getattr(settings, 'ACCESS_CACHE_TTL', 300))
    return access


def get_access_level(user, farm, module):
    return get_module_access_map(user, farm).get(module, AccessLevel.NONE)


def check_access(user, farm, module, required=AccessLevel.READ_ONLY):
    """True when the user's effective level on the module is at least `required`"""
    if required == AccessLevel.NONE:
        return True
    return AccessLevel.satisfies(get_access_level(user, farm, module), required)


def get_accessible_farms(user):
    """Farms the user can see: all for super admins, else administered, created or joined farms"""
    if not (user and user.is_authenticated):
        return Farm.objects.none()
    if is_super_admin(user):
        return Farm.objects.all()
    return Farm.objects.filter(
        Q(admin=user) | Q(created_by=user) | Q(memberships__user=user)
    ).distinct()


def can_view_farm(user, farm):
    if is_super_admin(user):
        return True
    return get_accessible_farms(user).filter(pk=farm.pk).exists()


def is_farm_member(user, farm):
    return farm.admin_id == user.pk or UserFarm.objects.filter(user=user, farm=farm).exists()


# ==================== MEMBERSHIP AND GRANTS ====================

def set_user_permission(user, farm, module, access_level):
    """
    Create or update the permission of a user for a module of a farm.

    Returns (permission, created).
    """
    if module not in SystemModule.ALL:
        raise ValueError(f"Unknown module: {module}")
    if access_level not in AccessLevel.RANK:
        raise ValueError(f"Unknown access level: {access_level}")
    if not is_farm_member(user, farm):
        raise MembershipRequiredError(f"User {user.username} is not a member of farm {farm.name}")

    permission, created = UserPermission.objects.update_or_create(
        user=user, farm=farm, module=module,
        defaults={'access_level': access_level},
    )
    logger.info(f"Permission set: user={user.pk} farm={farm.pk} {module}={access_level}")
    return permission, created


def assign_user_to_farm(user, farm, role=UserFarm.MEMBER, apply_defaults=True):
    """
    Add a user to a farm, or change the role of an existing membership.

    With `apply_defaults`, modules the user has no permission for yet get the
    defaults of the user's global role. Returns (membership, created).
    """
    with transaction.atomic():
        membership, created = UserFarm.objects.get_or_create(user=user, farm=farm, defaults={'role': role})
        if not created and membership.role != role:
            membership.role = role
            membership.save(update_fields=['role'])

        if apply_defaults:
            apply_role_defaults(user, farm)

    logger.info(f"Membership {'created' if created else 'updated'}: user={user.pk} farm={farm.pk} role={role}")
    return membership, created


def apply_role_defaults(user, farm, reset=False):
    """Grant the role defaults for modules without a permission row. Returns the number of rows written."""
    defaults = default_permissions_for_role(user.role)
    written = 0
    with transaction.atomic():
        if reset:
            UserPermission.objects.filter(user=user, farm=farm).delete()
        existing = set(UserPermission.objects.filter(user=user, farm=farm).values_list('module', flat=True))
        for module, level in defaults.items():
            if module in existing:
                continue
            UserPermission.objects.create(user=user, farm=farm, module=module, access_level=level)
            written += 1
    return written


def remove_user_from_farm(user, farm):
    """Remove the membership and every permission of the user in the farm. Returns True if a membership existed."""
    with transaction.atomic():
        permissions_deleted, _ = UserPermission.objects.filter(user=user, farm=farm).delete()
        memberships_deleted, _ = UserFarm.objects.filter(user=user, farm=farm).delete()
    logger.info(f"Removed user {user.pk} from farm {farm.pk} ({permissions_deleted} permissions deleted)")
    return memberships_deleted > 0
