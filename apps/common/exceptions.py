"""
Shared exception taxonomy.

Every domain error raised by a service is an ``APIException`` subclass, so
DRF maps it to its HTTP status on the way out. Apps subclass these to give
their errors a specific message and code; callers that only care about the
category catch the base class.
"""
from rest_framework.exceptions import APIException


class ForbiddenError(APIException):
    """Resource exists but the caller may not touch it."""
    status_code = 403
    default_detail = 'You do not have permission to perform this action.'
    default_code = 'forbidden'


class ResourceNotFoundError(APIException):
    """Resource does not exist."""
    status_code = 404
    default_detail = 'Resource not found.'
    default_code = 'not_found'


class BusinessRuleError(APIException):
    """A well-formed request that the current data refuses."""
    status_code = 400
    default_detail = 'Request violates a business rule.'
    default_code = 'business_rule'


class RoomUnavailableError(BusinessRuleError):
    """Room is already occupied or marked unavailable."""
    default_detail = 'Room is not available.'
    default_code = 'room_unavailable'


class InvalidTransitionError(BusinessRuleError):
    """Payment status change is not an allowed edge."""
    default_detail = 'Invalid payment status transition.'
    default_code = 'invalid_transition'
