"""
Object permissions for properties and rooms.

The rules themselves live in the services so views and services agree.
"""
from rest_framework.permissions import BasePermission

from .services import can_manage_property, can_manage_room


class CanManageProperty(BasePermission):
    """Owner of the property, or an admin."""

    message = 'You do not own this property.'

    def has_object_permission(self, request, view, obj):
        return can_manage_property(request.user, obj)


class CanManageRoom(BasePermission):
    """Owner of the room's property."""

    message = 'You do not own the property of this room.'

    def has_object_permission(self, request, view, obj):
        return can_manage_room(request.user, obj)
