from rest_framework.permissions import BasePermission

from .services import can_manage_tenant


class CanManageTenant(BasePermission):
    """The landlord who created the tenant record."""

    message = 'You do not manage this tenant.'

    def has_object_permission(self, request, view, obj):
        return can_manage_tenant(request.user, obj)
