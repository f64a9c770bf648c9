"""
Access cache invalidation signals.
Any change to a row that feeds the access computation drops the cached maps
once the change is committed.
"""
from functools import partial

from farmdesk.core.models import User
from django.db import transaction
from django.db.models.signals import post_save, post_delete
from django.dispatch import receiver

from .access import invalidate_user_access, invalidate_farm_access
from .models import Farm, UserFarm, UserPermission


@receiver([post_save, post_delete], sender=UserPermission)
@receiver([post_save, post_delete], sender=UserFarm)
def invalidate_membership_access(sender, instance, **kwargs):
    transaction.on_commit(partial(invalidate_farm_access, instance.farm_id))


@receiver([post_save, post_delete], sender=Farm)
def invalidate_farm(sender, instance, **kwargs):
    transaction.on_commit(partial(invalidate_farm_access, instance.pk))


@receiver([post_save, post_delete], sender=User)
def invalidate_user(sender, instance, **kwargs):
    transaction.on_commit(partial(invalidate_user_access, instance.pk))
