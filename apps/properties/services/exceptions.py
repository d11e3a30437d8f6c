"""Domain exceptions for property and room services."""

from apps.common.exceptions import (
    BusinessRuleError,
    ForbiddenError,
    ResourceNotFoundError,
)


class PropertyNotFoundError(ResourceNotFoundError):
    default_detail = 'Property not found.'
    default_code = 'property_not_found'


class RoomNotFoundError(ResourceNotFoundError):
    default_detail = 'Room not found.'
    default_code = 'room_not_found'


class PropertyAccessDeniedError(ForbiddenError):
    default_detail = 'You do not own this property.'
    default_code = 'property_forbidden'


class RoomAccessDeniedError(ForbiddenError):
    default_detail = 'You do not own the property of this room.'
    default_code = 'room_forbidden'


class RoomOccupiedError(BusinessRuleError):
    """Room still has a tenant."""
    default_detail = 'Room has a tenant. Release the tenant first.'
    default_code = 'room_occupied'


class PropertyOccupiedError(BusinessRuleError):
    """Property still has tenants in some of its rooms."""
    default_detail = 'Property still has tenants. Release them first.'
    default_code = 'property_occupied'
