from django.shortcuts import get_object_or_404
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import BasePermission

from .access import check_access, required_level_for_method, NOT_AUTHORIZED_MESSAGE
from .models import Farm, SystemModule


class ModulePermission(BasePermission):
    """
    Checks the request user's access to one module of the farm named by
    the ``farm_id`` URL kwarg. The required level follows the HTTP method.
    """
    module = None
    message = NOT_AUTHORIZED_MESSAGE

    @classmethod
    def for_module(cls, module):
        return type(f"{module.title()}ModulePermission", (cls,), {'module': module})

    def has_permission(self, request, view):
        if not (request.user and request.user.is_authenticated):
            return False
        farm_id = view.kwargs.get('farm_id')
        if farm_id is None:
            return True
        farm = get_object_or_404(Farm, pk=farm_id)
        return check_access(request.user, farm, self.module, required_level_for_method(request.method))


AnimalsAccess = ModulePermission.for_module(SystemModule.ANIMALS)
CropsAccess = ModulePermission.for_module(SystemModule.CROPS)
InventoryAccess = ModulePermission.for_module(SystemModule.INVENTORY)
TasksAccess = ModulePermission.for_module(SystemModule.TASKS)
FinancialAccess = ModulePermission.for_module(SystemModule.FINANCIAL)
GoalsAccess = ModulePermission.for_module(SystemModule.GOALS)
AdministrationAccess = ModulePermission.for_module(SystemModule.ADMINISTRATION)


def require_access(user, farm, module, required):
    """Raise PermissionDenied unless the user has the required level"""
    if not check_access(user, farm, module, required):
        raise PermissionDenied(NOT_AUTHORIZED_MESSAGE)
