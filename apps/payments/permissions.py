from rest_framework.permissions import BasePermission

from .services import can_access_payments


class CanAccessPayment(BasePermission):
    """
    Admins, the tenant's landlord, the owner of the tenant's property and
    the tenant themselves.
    """

    message = 'You do not have access to this payment.'

    def has_object_permission(self, request, view, obj):
        return can_access_payments(request.user, obj.tenant)
